# -*- coding: utf-8 -*-
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Language String Report
# Renders a reconciliation Report to the terminal.


def print_banner(console, moodle_root, component):
    header = "[bold blue]Moodle Language String Checker[/bold blue]\n"
    header += f"[white]Moodle path:[/] [cyan]{escape(str(moodle_root))}[/]\n"
    header += f"[white]Component:[/]   [magenta]{escape(component)}[/]"
    console.print(Panel(header, border_style="blue", padding=(1, 2)))


def print_hard_missing(console, report):
    console.print("\nChecking for missing language strings in code...\n")
    for usage in report.hard_missing:
        console.print(f"[red]MISSING:[/] {usage.key} (not defined in any language)", highlight=False)
        console.print(f"  Location: {escape(usage.location)}", highlight=False)


def print_language(console, result, check_unused):
    console.print(f"\n[bold]Language: {result.language}[/bold]")
    console.print("=" * 40)

    for gap in result.missing:
        console.print(f"[red]MISSING:[/] {gap.key}", highlight=False)
        if gap.available_in:
            console.print(f"  Available in: {' '.join(gap.available_in)}", highlight=False)
        else:
            console.print("  [red]Not defined in any language[/red]")

    if check_unused:
        console.print(f"\nUnused strings in {result.language}:")
        for key in result.unused:
            console.print(f"[yellow]UNUSED:[/] {key}", highlight=False)

    console.print(f"\nSummary for {result.language}:")
    console.print(f"  Defined: {result.defined}")
    console.print(f"  Missing: [red]{len(result.missing)}[/red]")
    if check_unused:
        console.print(f"  Unused: [yellow]{len(result.unused)}[/yellow]")
    if result.coverage is None:
        console.print("  Coverage: N/A")
    else:
        console.print(f"  Coverage: {result.coverage}%")
    if result.complete:
        console.print("[green]✓ Complete translation![/green]")


def print_translation_completeness(console, report):
    console.print("\nChecking translation completeness across all languages...\n")
    if not report.languages:
        console.print("No language files found in plugin.")
        return

    console.print(f"Languages found: {','.join(r.language for r in report.languages)}")
    reference = "Strings used in code" if report.strict else "Strings defined in any language"
    console.print(f"{reference}: {report.used_count if report.strict else report.defined_count}")

    for result in report.languages:
        print_language(console, result, report.check_unused)

    table = Table(box=box.ROUNDED, header_style="bold magenta", border_style="blue")
    table.add_column("Language", style="cyan")
    table.add_column("Defined", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("Coverage", justify="center")
    for r in report.languages:
        if r.coverage is None:
            cov = "[dim]N/A[/dim]"
        else:
            color = "green" if r.coverage == 100 else ("yellow" if r.coverage >= 70 else "red")
            cov = f"[{color}]{r.coverage}%[/]"
        table.add_row(r.language, str(r.defined), str(len(r.missing)), cov)
    console.print()
    console.print(table)


def print_possibly_unused(console, report):
    if not report.check_unused:
        return
    console.print("\nChecking for potentially unused language strings...\n")
    for key in report.possibly_unused:
        console.print(f"[yellow]POSSIBLY UNUSED:[/] {key}", highlight=False)


def print_summary(console, report):
    console.print("\n[bold]Summary[/bold]")
    console.print("=======")
    console.print(f"Strings used in code: {report.used_count}")
    console.print(f"Total unique strings across all languages: {report.defined_count}")
    console.print(f"Missing strings (not defined in any language): [red]{len(report.hard_missing)}[/red]")
    console.print(f"Total missing translations: [red]{report.missing_translations}[/red]")
    if report.check_unused:
        console.print(f"Possibly unused strings: [yellow]{len(report.possibly_unused)}[/yellow]")

    console.print()
    if report.hard_missing:
        console.print("[bold red]ERROR: Missing language strings detected![/bold red]")
    if report.missing_translations:
        console.print("[bold red]ERROR: Missing translations detected![/bold red]")
    if report.exit_code == 0:
        console.print("[bold green]SUCCESS: All language strings found![/bold green]")


def print_report(report, console=None):
    console = console or Console()
    print_hard_missing(console, report)
    print_translation_completeness(console, report)
    print_possibly_unused(console, report)
    print_summary(console, report)
