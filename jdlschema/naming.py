# File: jdlschema/naming.py
"""
jdlschema - Naming & Pluralization Engine
=========================================
Case-preserving English pluralization used to derive default relationship
field names (``Order`` → ``orders``) and API resource paths.

Resolution order for ``pluralize``:

1. caller-supplied overrides (case-insensitive exact match),
2. the irregular noun table,
3. suffix heuristics.

``singularize`` mirrors these rules. It is an approximation and is *not* a
true inverse of ``pluralize`` (``Chief`` → ``Chieves`` → ``Chief`` works,
``Knife`` → ``Knives`` → ``Knif`` does not).

The lookup tables are read-only mappings. Only the override-free heuristic
path is memoized, so results never depend on a previous caller's overrides.
"""

from __future__ import annotations

import functools
import logging
import re
from types import MappingProxyType
from typing import List, Mapping, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.naming")

# ---------------------------------------------------------------------------
# Lookup tables (immutable)
# ---------------------------------------------------------------------------

IRREGULAR_PLURALS: Mapping[str, str] = MappingProxyType({
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "ox": "oxen",
})

IRREGULAR_SINGULARS: Mapping[str, str] = MappingProxyType(
    {plural: singular for singular, plural in IRREGULAR_PLURALS.items()}
)

# ---------------------------------------------------------------------------
# Pre-compiled suffix patterns (matched against the lower-cased word)
# ---------------------------------------------------------------------------

_CONSONANT_Y_RE: re.Pattern[str] = re.compile(r"[bcdfghjklmnpqrstvwxyz]y$")
_SIBILANT_RE: re.Pattern[str] = re.compile(r"(?:s|x|z|ch|sh)$")
_FE_RE: re.Pattern[str] = re.compile(r"(?:^|[^f])fe$")
_LONE_F_RE: re.Pattern[str] = re.compile(r"(?:^|[^f])f$")
_VOWEL_O_RE: re.Pattern[str] = re.compile(r"[aeiou]o$")

_SIBILANT_ES_RE: re.Pattern[str] = re.compile(r"(?:s|x|z|ch|sh)es$")


# ---------------------------------------------------------------------------
# Basic string helpers
# ---------------------------------------------------------------------------


def lc_first(s: str) -> str:
    """Lower-case the first character: ``OrderItem`` → ``orderItem``."""
    return s[0].lower() + s[1:] if s else s


def uc_first(s: str) -> str:
    """Upper-case the first character: ``orderItem`` → ``OrderItem``."""
    return s[0].upper() + s[1:] if s else s


def match_case(source: str, target: str) -> str:
    """
    Adapt *target* to the case style of *source*.

    ``ALLCAPS`` and ``lowercase`` sources convert the whole target; any other
    source starting with a capital gets a capitalized target.
    """
    if not source:
        return target
    if source.upper() == source:
        return target.upper()
    if source.lower() == source:
        return target.lower()
    if source[0].isupper():
        return uc_first(target)
    return target


def match_case_suffix(source: str, suffix: str) -> str:
    """Case *suffix* after the last character of *source* (mixed case → per char)."""
    last: str = source[-1:]
    if last and last == last.upper() and last != last.lower():
        return suffix.upper()
    return suffix.lower()


def _lookup_override(key_lower: str, overrides: Optional[Mapping[str, str]]) -> Optional[str]:
    if not overrides:
        return None
    for key, value in overrides.items():
        if str(key).lower() == key_lower and value:
            return str(value)
    return None


def _invert(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if not mapping:
        return {}
    return {
        str(v).lower(): str(k).lower()
        for k, v in mapping.items()
        if v is not None and str(v)
    }


# ---------------------------------------------------------------------------
# Pluralization
# ---------------------------------------------------------------------------


def pluralize(word: str, overrides: Optional[Mapping[str, str]] = None) -> str:
    """
    Return the plural of *word*, preserving its case style.

    Examples:
        >>> pluralize("Category")
        'Categories'
        >>> pluralize("Person", {"person": "people"})
        'People'
        >>> pluralize("BOX")
        'BOXES'
        >>> pluralize("Chief")
        'Chieves'
    """
    if not word:
        return word
    lower: str = word.lower()

    hit: Optional[str] = _lookup_override(lower, overrides)
    if hit is not None:
        return match_case(word, hit)

    if lower in IRREGULAR_PLURALS:
        return match_case(word, IRREGULAR_PLURALS[lower])

    return _pluralize_regular(word)


@functools.lru_cache(maxsize=None)
def _pluralize_regular(word: str) -> str:
    lower: str = word.lower()

    if lower.endswith("s"):
        return word
    if _CONSONANT_Y_RE.search(lower):
        return word[:-1] + match_case_suffix(word, "ies")
    if _SIBILANT_RE.search(lower):
        return word + match_case_suffix(word, "es")
    # Heuristic: also hits words like "chief" or "roof".
    if _FE_RE.search(lower):
        return word[:-2] + match_case_suffix(word, "ves")
    if _LONE_F_RE.search(lower):
        return word[:-1] + match_case_suffix(word, "ves")
    if lower.endswith("o") and not _VOWEL_O_RE.search(lower):
        return word + match_case_suffix(word, "es")
    return word + match_case_suffix(word, "s")


def singularize(word: str, overrides: Optional[Mapping[str, str]] = None) -> str:
    """
    Return the singular of *word*.

    *overrides* uses the same ``singular → plural`` orientation as
    ``pluralize`` and is inverted here.
    """
    if not word:
        return word
    lower: str = word.lower()

    hit: Optional[str] = _lookup_override(lower, _invert(overrides))
    if hit is not None:
        return match_case(word, hit)

    if lower in IRREGULAR_SINGULARS:
        return match_case(word, IRREGULAR_SINGULARS[lower])

    return _singularize_regular(word)


@functools.lru_cache(maxsize=None)
def _singularize_regular(word: str) -> str:
    lower: str = word.lower()

    if _SIBILANT_ES_RE.search(lower):
        return word[:-2]
    if lower.endswith("ies"):
        return word[:-3] + match_case_suffix(word, "y")
    if lower.endswith("ves"):
        return word[:-3] + match_case_suffix(word, "f")
    if lower.endswith("s") and not lower.endswith("ss"):
        return word[:-1]
    return word


# ---------------------------------------------------------------------------
# Resource paths
# ---------------------------------------------------------------------------


def resource_plural(entity_name: str, overrides: Optional[Mapping[str, str]] = None) -> str:
    """
    Lower-case plural used as an API path segment.

    An override keyed by the exact entity name wins over one keyed by its
    lower-case form; both win over the heuristics.
    """
    name: str = str(entity_name or "")
    lower: str = name.lower()
    if overrides:
        if overrides.get(name):
            return str(overrides[name]).lower()
        hit: Optional[str] = _lookup_override(lower, overrides)
        if hit is not None:
            return hit.lower()
    return pluralize(lower)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "IRREGULAR_PLURALS",
    "IRREGULAR_SINGULARS",
    "lc_first",
    "uc_first",
    "match_case",
    "match_case_suffix",
    "pluralize",
    "singularize",
    "resource_plural",
]

logger.debug("jdlschema.naming loaded — %d public symbols.", len(__all__))
