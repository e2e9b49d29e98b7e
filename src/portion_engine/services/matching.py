"""Fuzzy name matching shared by every reference table lookup."""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from portion_engine.domain.reference import KeywordFallback

T = TypeVar("T")

_WHITESPACE = re.compile(r"\s+")


class MatchStrategy(StrEnum):
    """Step of the matching policy that found the entry."""

    EXACT = "exact"
    SUBSTRING = "substring"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class FuzzyMatch(Generic[T]):
    """Table entry found for a lookup key."""

    key: str
    value: T
    strategy: MatchStrategy


def normalize_key(text: str) -> str:
    """Lower-case, trim and collapse whitespace."""
    return _WHITESPACE.sub(" ", text.strip().lower())


def fuzzy_find(
    key: str,
    table: Mapping[str, T],
    fallbacks: Sequence[KeywordFallback] = (),
    *,
    whole_words: bool = False,
) -> FuzzyMatch[T] | None:
    """Find a table entry for ``key``.

    Policy, first hit wins:

    1. exact match on the normalized key;
    2. the first table key (in table order) that contains the lookup key or
       is contained in it;
    3. the first keyword fallback whose keywords appear in the lookup key and
       whose exclusions do not.

    With ``whole_words`` the containment checks of step 2 only accept
    matches on word boundaries, so ``"oz"`` does not match ``"dozen"``. A
    plural ``s`` or ``es`` ending still counts, so ``"cup"`` matches
    ``"cups sifted"``.
    """
    needle = normalize_key(key)
    if not needle:
        return None

    value = table.get(needle)
    if value is not None:
        return FuzzyMatch(key=needle, value=value, strategy=MatchStrategy.EXACT)

    for table_key, candidate in table.items():
        if _contains(table_key, needle, whole_words) or _contains(
            needle, table_key, whole_words
        ):
            return FuzzyMatch(
                key=table_key, value=candidate, strategy=MatchStrategy.SUBSTRING
            )

    for fallback in fallbacks:
        if not any(keyword in needle for keyword in fallback.keywords):
            continue
        if any(excluded in needle for excluded in fallback.exclude):
            continue
        target = table.get(fallback.target)
        if target is not None:
            return FuzzyMatch(
                key=fallback.target, value=target, strategy=MatchStrategy.KEYWORD
            )
    return None


def _contains(haystack: str, needle: str, whole_words: bool) -> bool:
    if not needle:
        return False
    if not whole_words:
        return needle in haystack
    pattern = rf"(?<!\w){re.escape(needle)}(?:e?s)?(?!\w)"
    return re.search(pattern, haystack) is not None
