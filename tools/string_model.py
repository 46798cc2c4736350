# -*- coding: utf-8 -*-
import re
from dataclasses import dataclass

# Language String Records
# Keys, usage sites and definitions shared by the scanner, loader and reconciler.

COMPONENT_RE = re.compile(r"^(?:core|[a-z][a-z0-9]*_[a-z0-9_]+)$")


class LangCheckError(Exception):
    """Base class for fatal checker errors (exit code 2)."""


def is_valid_component(name):
    """True for 'core' or a frankenstyle '{type}_{name}' component."""
    return bool(name) and COMPONENT_RE.match(name) is not None


@dataclass(frozen=True, order=True)
class StringKey:
    component: str
    identifier: str

    def __str__(self):
        return f"{self.component}:{self.identifier}"


@dataclass(frozen=True)
class UsageRecord:
    key: StringKey
    path: str
    line: int

    @property
    def location(self):
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class DefinitionRecord:
    key: StringKey
    language: str


@dataclass(frozen=True)
class ComponentDescriptor:
    prefix: str
    path: str
    # Activity modules drop the type prefix from their language file name
    strip_prefix: bool = False

    def file_name(self, name):
        if self.strip_prefix:
            return f"{name}.php"
        return f"{self.prefix}_{name}.php"
