# -*- coding: utf-8 -*-
from dataclasses import dataclass, field

from string_model import DefinitionRecord, UsageRecord

# Language String Reconciler
# Diffs the strings used in code against the strings defined per language.


class ReconciliationContext:
    """Accumulators for one run, handed to the scanner and the loader."""

    def __init__(self):
        self.usages = {}
        self.union = set()
        self.per_language = {}
        self.definitions = []

    def add_usage(self, key, path, line):
        # First occurrence wins
        if key in self.usages:
            return False
        self.usages[key] = UsageRecord(key, str(path), line)
        return True

    def add_language(self, language):
        return self.per_language.setdefault(language, set())

    def add_definition(self, key, language):
        defined = self.add_language(language)
        self.union.add(key)
        if key not in defined:
            defined.add(key)
            self.definitions.append(DefinitionRecord(key, language))

    def reconcile(self, strict=False, check_unused=False):
        return reconcile(self.usages, self.union, self.per_language, strict=strict, check_unused=check_unused)


@dataclass(frozen=True)
class TranslationGap:
    key: object
    available_in: tuple = ()


@dataclass
class LanguageResult:
    language: str
    defined: int
    missing: list = field(default_factory=list)
    unused: list = field(default_factory=list)
    coverage: object = None

    @property
    def complete(self):
        return not self.missing


@dataclass
class Report:
    used_count: int
    defined_count: int
    strict: bool = False
    check_unused: bool = False
    hard_missing: list = field(default_factory=list)
    languages: list = field(default_factory=list)
    possibly_unused: list = field(default_factory=list)

    @property
    def missing_translations(self):
        return sum(len(r.missing) for r in self.languages)

    @property
    def exit_code(self):
        if self.hard_missing or self.missing_translations:
            return 1
        return 0


def coverage_percent(defined, reference):
    """Integer percentage of reference present in defined, None for an empty reference."""
    reference = set(reference)
    if not reference:
        return None
    return len(set(defined) & reference) * 100 // len(reference)


def reconcile(usages, union, per_language, strict=False, check_unused=False):
    """Builds a Report from the usage map and the union/per-language definition sets.

    The reference set for translation gaps and coverage is the union of all
    defined strings, or the strings used in code when strict is set.
    """
    used_keys = set(usages)
    reference = used_keys if strict else set(union)

    report = Report(
        used_count=len(used_keys),
        defined_count=len(union),
        strict=strict,
        check_unused=check_unused,
    )

    report.hard_missing = [usages[k] for k in sorted(used_keys - set(union))]

    for lang in sorted(per_language):
        defined = per_language[lang]
        missing = []
        for key in sorted(reference - defined):
            holders = tuple(l for l in sorted(per_language) if key in per_language[l])
            missing.append(TranslationGap(key, holders))
        result = LanguageResult(
            language=lang,
            defined=len(defined & reference),
            missing=missing,
            coverage=coverage_percent(defined, reference),
        )
        if check_unused:
            result.unused = sorted(defined - used_keys)
        report.languages.append(result)

    if check_unused:
        report.possibly_unused = sorted(set(union) - used_keys)

    return report
