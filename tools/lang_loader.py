# -*- coding: utf-8 -*-
import re
from pathlib import Path

from rich.markup import escape

from moodle_paths import language_dir, language_file_name
from string_model import StringKey
from string_reconciler import ReconciliationContext

# Language Pack Loader
# Reads $string['key'] definitions from every language directory of a plugin.

STRING_DEF_RE = re.compile(r"^\s*\$string\[['\"]([-_a-zA-Z0-9:]+)['\"]", re.MULTILINE)
# Fallback for files that do not start definitions at the beginning of a line
STRING_DEF_LOOSE_RE = re.compile(r"\$string\[['\"]([-_a-zA-Z0-9:]+)['\"]")


def _log(console, message):
    if console is not None:
        console.print(f"[dim]{escape(message)}[/dim]", highlight=False)


def extract_string_ids(content):
    ids = STRING_DEF_RE.findall(content)
    if not ids:
        ids = STRING_DEF_LOOSE_RE.findall(content)
    return ids


def find_available_languages(moodle_root, component):
    lang_root = language_dir(moodle_root, component)
    if not lang_root.is_dir():
        return []
    return sorted(d.name for d in lang_root.iterdir() if d.is_dir())


def definition_files(lang_path, component, permissive=False):
    if permissive:
        return sorted(p for p in lang_path.glob("*.php") if p.is_file())
    return [lang_path / language_file_name(component)]


def load_language_file(lang_file, component, language, context, console=None):
    lang_file = Path(lang_file)
    if not lang_file.is_file():
        _log(console, f"  Language file does not exist: {lang_file}")
        return 0
    try:
        content = lang_file.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        _log(console, f"  Could not read {lang_file}: {e}")
        return 0

    _log(console, f"  Loading {language} strings from: {lang_file}")
    count = 0
    for identifier in extract_string_ids(content):
        key = StringKey(component, identifier)
        context.add_definition(key, language)
        count += 1
        _log(console, f"    Found string: {key}")
    _log(console, f"  Loaded {count} strings from {lang_file}")
    return count


def load_definitions(moodle_root, component, context=None, permissive=False, console=None):
    """Returns (union, per_language) for every language directory of component.

    Raises UnknownComponentType if the component does not map to a plugin path.
    """
    if context is None:
        context = ReconciliationContext()
    lang_root = language_dir(moodle_root, component)
    _log(console, f"Looking for language files in: {lang_root}")

    for language in find_available_languages(moodle_root, component):
        context.add_language(language)
        for lang_file in definition_files(lang_root / language, component, permissive):
            load_language_file(lang_file, component, language, context, console)

    return context.union, context.per_language
