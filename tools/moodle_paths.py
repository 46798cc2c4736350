# -*- coding: utf-8 -*-
import os
import re
from pathlib import Path

from string_model import ComponentDescriptor, LangCheckError

# Moodle Path Resolver
# Maps frankenstyle components to plugin directories and back.

PLUGIN_TYPES = {
    d.prefix: d for d in (
        ComponentDescriptor("mod", "mod", strip_prefix=True),
        ComponentDescriptor("block", "blocks"),
        ComponentDescriptor("local", "local"),
        ComponentDescriptor("tool", "admin/tool"),
        ComponentDescriptor("theme", "theme"),
        ComponentDescriptor("auth", "auth"),
        ComponentDescriptor("enrol", "enrol"),
        ComponentDescriptor("repository", "repository"),
        ComponentDescriptor("qtype", "question/type"),
        ComponentDescriptor("qbehaviour", "question/behaviour"),
        ComponentDescriptor("qformat", "question/format"),
        ComponentDescriptor("assignsubmission", "mod/assign/submission"),
        ComponentDescriptor("assignfeedback", "mod/assign/feedback"),
        ComponentDescriptor("availability", "availability/condition"),
        ComponentDescriptor("filter", "filter"),
        ComponentDescriptor("editor", "lib/editor"),
        ComponentDescriptor("atto", "lib/editor/atto/plugins"),
        ComponentDescriptor("tinymce", "lib/editor/tinymce/plugins"),
        ComponentDescriptor("report", "report"),
        ComponentDescriptor("coursereport", "course/report"),
        ComponentDescriptor("gradeexport", "grade/export"),
        ComponentDescriptor("gradeimport", "grade/import"),
        ComponentDescriptor("gradereport", "grade/report"),
        ComponentDescriptor("gradingform", "grade/grading/form"),
        ComponentDescriptor("profilefield", "user/profile/field"),
        ComponentDescriptor("format", "course/format"),
        ComponentDescriptor("dataformat", "dataformat"),
        ComponentDescriptor("message", "message/output"),
        ComponentDescriptor("antivirus", "lib/antivirus"),
        ComponentDescriptor("media", "media/player"),
        ComponentDescriptor("search", "search/engine"),
    )
}

# Longest fragment first so mod/assign/submission/* never lands in mod_assign
_INFERENCE_ORDER = [
    (d, re.compile(rf"^{re.escape(d.path)}/([^/]+)/"))
    for d in sorted(PLUGIN_TYPES.values(), key=lambda d: (-len(d.path), d.prefix))
]

MANIFEST_RE = re.compile(r"^\s*\$plugin->component\s*=\s*['\"]([^'\"]+)['\"]", re.MULTILINE)


class UnknownComponentType(LangCheckError):
    pass


class InvalidInstallation(LangCheckError):
    pass


def normalize_component(component, moodle_root=None, owner=None):
    """Maps legacy names to frankenstyle: moodle -> core, quiz -> mod_quiz, error -> core_error.

    A bare name is an activity module when it names the owning module or a
    mod/<name> directory under moodle_root.
    """
    if component in ("", "moodle", "core"):
        return "core"
    if "_" not in component:
        module = f"mod_{component}"
        if owner == module:
            return module
        if moodle_root is not None and (Path(moodle_root) / "mod" / component).is_dir():
            return module
        return f"core_{component}"
    return component


def split_component(component):
    if "_" not in component:
        raise UnknownComponentType(f"Could not determine plugin path for: {component}")
    plugin_type, name = component.split("_", 1)
    return plugin_type, name


def get_descriptor(component):
    plugin_type, name = split_component(component)
    descriptor = PLUGIN_TYPES.get(plugin_type)
    if descriptor is None or not name:
        raise UnknownComponentType(f"Could not determine plugin path for: {component}")
    return descriptor, name


def resolve_component_path(component):
    """Relative plugin directory for a component, e.g. tool_foo -> admin/tool/foo."""
    descriptor, name = get_descriptor(component)
    return f"{descriptor.path}/{name}"


def infer_component_from_path(file_path, moodle_root=None):
    """Component owning a source file, or None for core/unknown locations."""
    rel = Path(file_path)
    if moodle_root is not None:
        try:
            # abspath keeps symlinked plugin checkouts inside the Moodle tree
            rel = Path(os.path.abspath(file_path)).relative_to(os.path.abspath(moodle_root))
        except ValueError:
            pass
    rel_str = rel.as_posix()
    for descriptor, pattern in _INFERENCE_ORDER:
        m = pattern.match(rel_str)
        if m:
            return f"{descriptor.prefix}_{m.group(1)}"
    return None


def language_file_name(component):
    descriptor, name = get_descriptor(component)
    return descriptor.file_name(name)


def language_dir(moodle_root, component):
    return Path(moodle_root) / resolve_component_path(component) / "lang"


def language_file_path(moodle_root, component, language):
    return language_dir(moodle_root, component) / language / language_file_name(component)


def validate_moodle_installation(moodle_root):
    root = Path(moodle_root)
    if not root.is_dir():
        raise InvalidInstallation(f"Moodle directory not found: {moodle_root}")
    if not (root / "version.php").is_file():
        raise InvalidInstallation(f"Not a valid Moodle installation: {moodle_root}")
    return root


def detect_component_from_manifest(project_dir):
    """Reads $plugin->component from a plugin's version.php."""
    manifest = Path(project_dir) / "version.php"
    if not manifest.is_file():
        return None
    try:
        content = manifest.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None
    m = MANIFEST_RE.search(content)
    return m.group(1) if m else None
