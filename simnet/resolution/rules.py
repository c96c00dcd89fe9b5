"""Ordered matching rules used by the entity resolution cascade.

Each rule turns a normalised title into a lookup candidate. Rules are plain
frozen dataclasses so the cascade stays an inspectable list: appending a new
correction means appending a rule, not editing control flow.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from typing_extensions import Protocol

from simnet.config import ResolutionConfig

_WHITESPACE = re.compile(r"\s+")


class KeyLookup(Protocol):
    """Lookup surface a rule needs from an auxiliary table."""

    def key_for(self, candidate: str) -> Optional[str]:
        ...

    def fuzzy_lookup(self, target: str) -> Optional[str]:
        ...


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def fuzzy_key(text: str) -> str:
    """Drop every character that is not a letter or digit and casefold the rest.

    The text is NFKC-normalised first, so full-width forms match their ASCII
    counterparts and matching ignores case: ``"Tower"`` and ``"tower!"`` share
    the key ``"tower"``.

    ``"퇴마록 : 세계편"`` and ``"퇴마록세계편"`` share the key ``"퇴마록세계편"``.
    """

    normalized = unicodedata.normalize("NFKC", text)
    kept = [char for char in normalized if unicodedata.category(char)[0] in {"L", "N"}]
    return "".join(kept).casefold()


class _TransformRule:
    """Rule whose candidate is looked up verbatim (plus the table's key suffix)."""

    name: str

    def transform(self, title: str) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    def match(self, title: str, table: KeyLookup) -> Optional[str]:
        candidate = self.transform(title)
        if candidate is None or not candidate:
            return None
        return table.key_for(candidate)


@dataclass(frozen=True)
class Exact(_TransformRule):
    """Use the title unchanged."""

    name: str = "exact"

    def transform(self, title: str) -> Optional[str]:
        return title


@dataclass(frozen=True)
class StripChars(_TransformRule):
    """Remove every character in ``chars`` and collapse the leftover whitespace."""

    chars: str
    name: str = "strip_chars"

    def transform(self, title: str) -> Optional[str]:
        stripped = title.translate({ord(char): None for char in self.chars})
        return collapse_whitespace(stripped)


@dataclass(frozen=True)
class InsertComma(_TransformRule):
    """Apply known literal punctuation-insertion fixes.

    Yields no candidate when none of the fixes occurs in the title.
    """

    fixes: Tuple[Tuple[str, str], ...] = ()
    name: str = "insert_comma"

    def transform(self, title: str) -> Optional[str]:
        corrected = title
        for find, replace in self.fixes:
            if find in corrected:
                corrected = corrected.replace(find, replace)
        if corrected == title:
            return None
        return corrected


@dataclass(frozen=True)
class AppendChar(_TransformRule):
    """Append ``char`` to the title."""

    char: str = "!"
    name: str = "append_char"

    def transform(self, title: str) -> Optional[str]:
        return f"{title}{self.char}"


@dataclass(frozen=True)
class Chain(_TransformRule):
    """Apply several transform rules in sequence."""

    rules: Tuple[_TransformRule, ...] = ()
    name: str = "chain"

    def transform(self, title: str) -> Optional[str]:
        candidate: Optional[str] = title
        for rule in self.rules:
            if candidate is None:
                return None
            candidate = rule.transform(candidate)
        return candidate


@dataclass(frozen=True)
class FuzzyStrip:
    """Match any key whose letters and digits equal those of the title."""

    name: str = "fuzzy_strip"

    def match(self, title: str, table: KeyLookup) -> Optional[str]:
        key = fuzzy_key(title)
        if not key:
            return None
        return table.fuzzy_lookup(key)


Rule = Union[Exact, StripChars, InsertComma, AppendChar, Chain, FuzzyStrip]


def default_rules(settings: ResolutionConfig) -> List[Rule]:
    """Build the standard eight-step cascade from configuration."""

    comma = InsertComma(fixes=tuple((fix.find, fix.replace) for fix in settings.comma_fixes))
    append = AppendChar(char=settings.appended_char, name="append_exclamation")
    return [
        Exact(),
        StripChars(chars=settings.colon_chars, name="strip_colons"),
        StripChars(chars=settings.bracket_chars, name="strip_brackets"),
        StripChars(chars=settings.period_chars, name="strip_periods"),
        comma,
        append,
        Chain(rules=(comma, append), name="insert_comma_append_exclamation"),
        FuzzyStrip(),
    ]


def describe(rules: Sequence[Rule]) -> List[str]:
    """Return ``"<step>:<name>"`` labels for logging and inspection."""

    return [f"{step}:{rule.name}" for step, rule in enumerate(rules, start=1)]
