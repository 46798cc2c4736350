#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import argparse
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from lang_loader import load_definitions
from lang_report import print_banner, print_report
from moodle_paths import detect_component_from_manifest, resolve_component_path, validate_moodle_installation
from string_model import LangCheckError, is_valid_component
from string_reconciler import ReconciliationContext
from string_scanner import scan_source

# Moodle Language String Checker
# Finds strings used in a plugin's code that are missing from its language
# packs, translation gaps between languages and (optionally) unused strings.
#
# Exit codes: 0 all strings found, 1 missing strings or translations,
# 2 invalid parameters or installation.

# --- CONFIGURATION ---
DEFAULT_MOODLE_PATH = "/var/www/html"
ENV_FILE = ".env"


def load_env(env_path=None):
    """Loads KEY=VALUE pairs from a .env file without overriding the environment."""
    env_path = env_path or os.path.join(os.getcwd(), ENV_FILE)
    if not os.path.exists(env_path):
        return
    with open(env_path, "r") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                os.environ.setdefault(k.strip(), v.strip().strip("'\""))


def build_parser():
    parser = argparse.ArgumentParser(
        prog="check-lang-strings",
        description="Check a Moodle plugin for missing, untranslated and unused language strings.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed output")
    parser.add_argument("-u", "--unused", action="store_true", help="Also check for potentially unused language strings")
    parser.add_argument("--strict", action="store_true", help="Measure translations against strings used in code instead of all defined strings")
    parser.add_argument("--permissive", action="store_true", help="Load every PHP file in each language directory")
    parser.add_argument("moodle_path", nargs="?", help=f"Path to Moodle installation (default: $MOODLE_PATH or {DEFAULT_MOODLE_PATH})")
    parser.add_argument("component", nargs="?", help="Component to check, e.g. mod_forum (default: auto-detect from version.php)")
    return parser


def resolve_component(component, console):
    """Explicit component wins; otherwise read it from the project's version.php."""
    if component:
        return component
    project_dir = os.getenv("CI_PROJECT_DIR") or os.getcwd()
    detected = detect_component_from_manifest(project_dir)
    if not detected:
        raise LangCheckError("Could not detect component. Please specify a component or run from a plugin directory.")
    console.print(f"Auto-detected component: [magenta]{escape(detected)}[/]")
    return detected


def run_check(moodle_root, component, check_unused=False, strict=False, permissive=False, console=None, verbose=False):
    console = console or Console()
    log = console if verbose else None
    context = ReconciliationContext()

    plugin_path = Path(moodle_root) / resolve_component_path(component)
    console.print("Scanning for language string usage...")
    if plugin_path.is_dir():
        scan_source(plugin_path, moodle_root=moodle_root, context=context, console=log)
    else:
        console.print(f"[yellow]Warning: Path not found: {escape(str(plugin_path))}[/yellow]")

    console.print("Building union of language strings from all languages...")
    load_definitions(moodle_root, component, context=context, permissive=permissive, console=log)
    if verbose:
        console.print(f"[dim]Found {len(context.union)} strings in total[/dim]")

    return context.reconcile(strict=strict, check_unused=check_unused)


def main(argv=None):
    load_env()
    args = build_parser().parse_args(argv)
    console = Console()
    moodle_root = args.moodle_path or os.getenv("MOODLE_PATH") or DEFAULT_MOODLE_PATH

    try:
        validate_moodle_installation(moodle_root)
        component = resolve_component(args.component, console)
        if not is_valid_component(component):
            raise LangCheckError(f"Invalid component name: {component}")
        resolve_component_path(component)
        print_banner(console, moodle_root, component)
        report = run_check(
            moodle_root, component,
            check_unused=args.unused, strict=args.strict, permissive=args.permissive,
            console=console, verbose=args.verbose,
        )
    except LangCheckError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        return 2

    print_report(report, console)
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
