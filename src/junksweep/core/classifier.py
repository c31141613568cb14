"""Junk file classification rules."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class JunkRule:
    """A single name-matching rule.

    ``kind`` is one of:
        - ``exact``: case-sensitive equality with any pattern
        - ``prefix``: case-sensitive prefix, name must be longer than the prefix
        - ``exact_nocase``: case-insensitive equality with any pattern
    """

    id: str
    description: str
    kind: str
    patterns: tuple[str, ...]
    folder_allowed: bool = False

    def matches(self, name: str) -> bool:
        match self.kind:
            case "exact":
                return name in self.patterns
            case "prefix":
                return any(name.startswith(p) and len(name) > len(p) for p in self.patterns)
            case "exact_nocase":
                folded = name.casefold()
                return any(folded == p.casefold() for p in self.patterns)
            case _:
                raise ValueError(f"Unknown rule kind: {self.kind}")


JUNK_RULES: tuple[JunkRule, ...] = (
    JunkRule(
        id="ds_store",
        description="macOS Finder desktop settings",
        kind="exact",
        patterns=(".DS_Store",),
    ),
    JunkRule(
        id="resource_fork",
        description="macOS resource fork (AppleDouble) shadow files",
        kind="prefix",
        patterns=("._",),
    ),
    JunkRule(
        id="windows_system",
        description="Windows thumbnail cache, folder settings and recycle bin",
        kind="exact_nocase",
        patterns=("Thumbs.db", "Desktop.ini", "$RECYCLE.BIN", "System Volume Information"),
        folder_allowed=True,
    ),
)


def classify(name: str, rules: tuple[JunkRule, ...] = JUNK_RULES) -> JunkRule | None:
    """Return the first rule matching ``name``, or None if it is not junk.

    Only the final path component is inspected, split on the host
    separator: on POSIX a backslash is an ordinary name character. Every
    rule is evaluated, so overlapping rules are harmless; the earliest one
    in ``rules`` wins.
    """
    name = os.path.basename(name)
    matched = [rule for rule in rules if rule.matches(name)]
    return matched[0] if matched else None


def is_junk(name: str) -> bool:
    """Check whether a file name is OS-generated junk."""
    return classify(name) is not None


def get_rule(rule_id: str) -> JunkRule | None:
    """Look up a built-in rule by its ID."""
    return next((r for r in JUNK_RULES if r.id == rule_id), None)
