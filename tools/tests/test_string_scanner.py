import unittest
from unittest.mock import MagicMock
import os
import sys
import tempfile
import io
from pathlib import Path

from rich.console import Console

# Add parent dir to path so we can import string_scanner
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import string_scanner
from string_model import StringKey
from string_reconciler import ReconciliationContext


def write(root, rel, content):
    path = Path(root) / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestScanLines(unittest.TestCase):

    def scan(self, text, suffix):
        return list(string_scanner.scan_lines(text.splitlines(), suffix))

    def test_php_explicit_component(self):
        hits = self.scan("<?php\n\necho get_string('welcome', 'mod_quiz');\n", ".php")
        self.assertEqual(hits, [(3, "welcome", "mod_quiz")])

    def test_php_double_quotes_and_spacing(self):
        hits = self.scan('$a = get_string ( "pluginname" ,  "local_plugin" );', ".php")
        self.assertEqual(hits, [(1, "pluginname", "local_plugin")])

    def test_php_single_argument_is_implicit(self):
        hits = self.scan("echo get_string('welcome');", ".php")
        self.assertEqual(hits, [(1, "welcome", None)])

    def test_php_variable_component_is_implicit(self):
        hits = self.scan("echo get_string('welcome', $component);", ".php")
        self.assertEqual(hits, [(1, "welcome", None)])

    def test_php_lang_string(self):
        hits = self.scan("$s = new lang_string('taskname', 'tool_foo');", ".php")
        self.assertEqual(hits, [(1, "taskname", "tool_foo")])

    def test_first_matching_pattern_wins_per_line(self):
        line = "get_string('a', 'mod_x') . get_string('b', 'mod_x') . new lang_string('c', 'mod_x');"
        hits = self.scan(line, ".php")
        self.assertEqual(hits, [(1, "a", "mod_x"), (1, "b", "mod_x")])

    def test_mustache(self):
        text = "<div>\n  {{#str}} save, core {{/str}}\n  {{#str}}greet, mod_quiz, {{name}}{{/str}}\n</div>"
        hits = self.scan(text, ".mustache")
        self.assertEqual(hits, [(2, "save", "core"), (3, "greet", "mod_quiz")])

    def test_javascript_spellings(self):
        text = "M.util.get_string('confirm', 'mod_quiz');\nStr.getString(\"loading\", \"core\").then(f);"
        hits = self.scan(text, ".js")
        self.assertEqual(hits, [(1, "confirm", "mod_quiz"), (2, "loading", "core")])

    def test_javascript_ignores_php_shapes(self):
        self.assertEqual(self.scan("get_string('x');", ".js"), [])

    def test_multiline_call_is_not_seen(self):
        self.assertEqual(self.scan("get_string(\n  'welcome', 'mod_quiz');", ".php"), [])


class TestScanSource(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        self.plugin = self.root / "mod" / "quiz"

    def tearDown(self):
        self.tmp.cleanup()

    def test_explicit_usage_records_location(self):
        view = write(self.plugin, "view.php", "<?php\nrequire('config.php');\necho get_string('welcome', 'mod_quiz');\n")
        usages = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        record = usages[StringKey("mod_quiz", "welcome")]
        self.assertEqual(record.path, str(view))
        self.assertEqual(record.line, 3)

    def test_legacy_core_component_is_normalized(self):
        write(self.plugin, "view.php", "<?php\necho get_string('yes', 'moodle');\n")
        usages = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        self.assertEqual(set(usages), {StringKey("core", "yes")})

    def test_bare_module_name_maps_to_activity_module(self):
        write(self.plugin, "view.php", "<?php\necho get_string('modulename', 'quiz');\n")
        (self.root / "mod" / "forum").mkdir(parents=True)
        write(self.plugin, "index.php", "<?php\necho get_string('modulename', 'forum');\necho get_string('nopermissions', 'error');\n")
        usages = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        self.assertEqual(set(usages), {
            StringKey("mod_quiz", "modulename"),
            StringKey("mod_forum", "modulename"),
            StringKey("core_error", "nopermissions"),
        })

    def test_implicit_usage_in_symlinked_plugin(self):
        checkout = self.root / "builds" / "plugin"
        write(checkout, "index.php", "<?php\necho get_string('pluginname');\n")
        (self.root / "local").mkdir()
        try:
            os.symlink(checkout, self.root / "local" / "plugin", target_is_directory=True)
        except (OSError, NotImplementedError):
            self.skipTest("symlinks not supported")
        usages = string_scanner.scan_source(self.root / "local" / "plugin", moodle_root=self.root)
        self.assertEqual(set(usages), {StringKey("local_plugin", "pluginname")})

    def test_implicit_usage_inferred_from_path(self):
        write(self.plugin, "lib.php", "<?php\nreturn get_string('welcome');\n")
        usages = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        self.assertIn(StringKey("mod_quiz", "welcome"), usages)

    def test_implicit_usage_discarded_outside_plugins(self):
        write(self.root, "lib/weblib.php", "<?php\nreturn get_string('welcome');\n")
        usages = string_scanner.scan_source(self.root / "lib", moodle_root=self.root)
        self.assertEqual(usages, {})

    def test_first_occurrence_wins(self):
        write(self.plugin, "a.php", "<?php\nget_string('x', 'mod_quiz');\n")
        write(self.plugin, "b.php", "<?php\n\n\nget_string('x', 'mod_quiz');\n")
        usages = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        self.assertEqual(len(usages), 1)
        self.assertTrue(usages[StringKey("mod_quiz", "x")].path.endswith("a.php"))
        self.assertEqual(usages[StringKey("mod_quiz", "x")].line, 2)

    def test_excluded_locations(self):
        write(self.plugin, "lang/en/quiz.php", "<?php\n$string['a'] = get_string('fromlang', 'mod_quiz');\n")
        write(self.plugin, "vendor/lib/x.php", "<?php\nget_string('fromvendor', 'mod_quiz');\n")
        write(self.plugin, "node_modules/pkg/x.js", "M.util.get_string('fromnode', 'mod_quiz');\n")
        write(self.plugin, "lib/yui/src/x.js", "M.util.get_string('fromyui', 'mod_quiz');\n")
        write(self.plugin, "lib/yui/legacy.php", "<?php\nget_string('fromyuiphp', 'mod_quiz');\n")
        write(self.plugin, "amd/src/main.js", "M.util.get_string('fromamd', 'mod_quiz');\n")
        write(self.plugin, "styles.css", "/* get_string('fromcss', 'mod_quiz') */\n")
        usages = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        self.assertEqual(set(usages), {StringKey("mod_quiz", "fromamd"), StringKey("mod_quiz", "fromyuiphp")})

    def test_scan_is_idempotent(self):
        write(self.plugin, "view.php", "<?php\nget_string('a', 'mod_quiz');\nget_string('b');\n")
        write(self.plugin, "templates/main.mustache", "{{#str}} c, mod_quiz {{/str}}\n")
        first = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        second = string_scanner.scan_source(self.plugin, moodle_root=self.root)
        self.assertEqual(first, second)
        self.assertEqual(len(first), 3)

    def test_scan_into_shared_context(self):
        context = ReconciliationContext()
        write(self.plugin, "view.php", "<?php\nget_string('a', 'mod_quiz');\n")
        returned = string_scanner.scan_source(self.plugin, moodle_root=self.root, context=context)
        self.assertIs(returned, context.usages)

    def test_verbose_console_receives_diagnostics(self):
        console = MagicMock()
        write(self.plugin, "view.php", "<?php\nget_string('a');\n")
        string_scanner.scan_source(self.plugin, moodle_root=self.root, console=console)
        printed = " ".join(str(c.args[0]) for c in console.print.call_args_list)
        self.assertIn("Checking:", printed)
        self.assertIn("mod_quiz:a (implicit component)", printed)


class TestVerboseLog(unittest.TestCase):

    def test_markup_in_paths_is_printed_literally(self):
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, force_terminal=False, color_system=None)
        string_scanner._log(console, "  Checking: /srv/[/odd]/view.php")
        self.assertIn("/srv/[/odd]/view.php", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
