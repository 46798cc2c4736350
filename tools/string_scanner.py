# -*- coding: utf-8 -*-
import re
from pathlib import Path

from rich.markup import escape

from moodle_paths import infer_component_from_path, normalize_component
from string_model import StringKey
from string_reconciler import ReconciliationContext

# Language String Usage Scanner
# Line-by-line regex scan of PHP, Mustache and JS sources for string lookups.
# Lexical only: calls split over several lines, concatenated identifiers and
# variables in place of literals are not seen.

SOURCE_EXTENSIONS = {".php", ".mustache", ".js"}
EXCLUDED_DIRS = {"vendor", "node_modules"}
LANG_FILE_RE = re.compile(r"(?:^|/)lang/[^/]+/.*\.php$")

_ID = r"([-_a-zA-Z0-9:]+)"
_Q = r"['\"]"
_TWO_ARGS = rf"\s*\(\s*{_Q}{_ID}{_Q}\s*,\s*{_Q}{_ID}{_Q}"

# (pattern, implicit component) in match priority order
PATTERNS = {
    ".php": [
        (re.compile(rf"get_string{_TWO_ARGS}"), False),
        (re.compile(rf"get_string\s*\(\s*{_Q}{_ID}{_Q}"), True),
        (re.compile(rf"new\s+lang_string{_TWO_ARGS}"), False),
    ],
    ".mustache": [
        (re.compile(r"\{\{#str\}\}\s*([-_a-zA-Z0-9]+)\s*,\s*([-_a-zA-Z0-9]+)\s*(?:,.*?)?\{\{/str\}\}"), False),
    ],
    ".js": [
        (re.compile(rf"M\.util\.get_string{_TWO_ARGS}"), False),
        (re.compile(rf"\bgetString{_TWO_ARGS}"), False),
    ],
}


def _log(console, message):
    if console is not None:
        console.print(f"[dim]{escape(message)}[/dim]", highlight=False)


def is_excluded(rel_path):
    rel = rel_path.as_posix()
    if any(part in EXCLUDED_DIRS for part in rel_path.parts[:-1]):
        return True
    if rel_path.suffix == ".js" and f"/{rel}".find("/lib/yui/") != -1:
        return True
    if rel_path.suffix == ".php" and LANG_FILE_RE.search(rel):
        return True
    return False


def iter_source_files(root_path):
    root = Path(root_path)
    for path in sorted(root.rglob("*")):
        if path.suffix not in SOURCE_EXTENSIONS or not path.is_file():
            continue
        if is_excluded(path.relative_to(root)):
            continue
        yield path


def scan_lines(lines, suffix):
    """Yields (line_no, identifier, component_or_None) for each recognised call."""
    patterns = PATTERNS.get(suffix, [])
    for line_no, line in enumerate(lines, start=1):
        for pattern, implicit in patterns:
            matches = list(pattern.finditer(line))
            if not matches:
                continue
            for m in matches:
                yield line_no, m.group(1), (None if implicit else m.group(2))
            break


def scan_file(path, context, moodle_root=None, console=None):
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        _log(console, f"    Skipped unreadable file {path}: {e}")
        return 0

    found = 0
    inferred = None
    for line_no, identifier, component in scan_lines(content.splitlines(), path.suffix):
        if inferred is None:
            inferred = infer_component_from_path(path, moodle_root) or ""
        note = ""
        if component is None:
            if not inferred:
                continue
            component = inferred
            note = " (implicit component)"
        else:
            component = normalize_component(component, moodle_root, owner=inferred or None)
        key = StringKey(component, identifier)
        if context.add_usage(key, path, line_no):
            found += 1
        _log(console, f"    Found: {key}{note}")
    return found


def scan_source(root_path, moodle_root=None, context=None, console=None):
    """Collects the first usage site of every string referenced under root_path."""
    if context is None:
        context = ReconciliationContext()
    _log(console, f"Scanning for language strings in: {root_path}")
    for path in iter_source_files(root_path):
        _log(console, f"  Checking: {path}")
        scan_file(path, context, moodle_root=moodle_root, console=console)
    return context.usages
