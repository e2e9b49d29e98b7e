"""Household portion lookup backed by the portion-weight table."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from portion_engine.domain.measurements import (
    ResolutionPath,
    ResolvedWeight,
    Unresolved,
    UnresolvedReason,
)
from portion_engine.domain.reference import PortionEntry
from portion_engine.services.matching import fuzzy_find, normalize_key

_GRAM_DESCRIPTORS = frozenset({"g", "gram", "grams"})
_SIZE_WORDS = ("medium", "large", "small")
_SHAPE_WORDS = ("cup", "piece", "slice")
_ITEM_WORDS = ("hot dog", "standard", "item")
_PART_WORDS = ("half", "quarter", "whole", "wedge")

_logger = logging.getLogger(__name__)


@dataclass
class PortionResolver:
    """Resolve ``(food, descriptor)`` pairs to gram weights."""

    portions: Mapping[str, tuple[PortionEntry, ...]]
    debug: bool = False

    def find_food(self, food_name: str) -> tuple[str, tuple[PortionEntry, ...]] | None:
        """Return the table key and portion list for a food name."""
        match = fuzzy_find(food_name, self.portions)
        if match is None:
            return None
        return match.key, match.value

    def resolve(self, food_name: str, descriptor: str) -> ResolvedWeight | Unresolved:
        """Resolve one portion of a food.

        When the descriptor matches no entry the food's ``medium`` entry, or
        its first entry, is used and the weight is marked non-authoritative.
        """
        found = self.find_food(food_name)
        if found is None:
            if self.debug:
                _logger.warning("No portion data for food %r", food_name)
            return Unresolved(
                raw_text=descriptor,
                reason=UnresolvedReason.UNKNOWN_FOOD,
                detail=f"no portion data for {food_name!r}",
            )
        food_key, entries = found
        if not entries:
            return Unresolved(
                raw_text=descriptor,
                reason=UnresolvedReason.NO_PORTIONS,
                detail=f"{food_key!r} has no portions",
            )

        entry = _match_descriptor(normalize_key(descriptor), entries)
        if entry is not None:
            if self.debug:
                _logger.info(
                    "Portion match: food=%s descriptor=%r entry=%s grams=%s",
                    food_key,
                    descriptor,
                    entry.description,
                    entry.canonical_grams,
                )
            return ResolvedWeight(
                grams=entry.canonical_grams,
                resolution_path=ResolutionPath.PORTION_LOOKUP,
                detail=f"{food_key}: {entry.description}",
            )

        default = next((e for e in entries if "medium" in e.description), entries[0])
        if self.debug:
            _logger.warning(
                "No portion matches %r for %s, defaulting to %s",
                descriptor,
                food_key,
                default.description,
            )
        return ResolvedWeight(
            grams=default.canonical_grams,
            resolution_path=ResolutionPath.DEFAULT_FALLBACK,
            authoritative=False,
            detail=f"{food_key}: {default.description} (default)",
        )

    def resolve_quantity(
        self, food_name: str, quantity: float, descriptor: str
    ) -> ResolvedWeight | Unresolved:
        """Resolve ``quantity`` portions of a food."""
        if quantity < 0:
            return Unresolved(
                raw_text=descriptor, reason=UnresolvedReason.NEGATIVE_QUANTITY
            )
        result = self.resolve(food_name, descriptor)
        if isinstance(result, Unresolved):
            return result
        return ResolvedWeight(
            grams=result.grams * quantity,
            resolution_path=result.resolution_path,
            authoritative=result.authoritative,
            detail=result.detail,
        )

    def resolve_exact(
        self, food_name: str, quantity: float, descriptor: str
    ) -> ResolvedWeight | None:
        """Resolve only when an entry is named exactly by the descriptor.

        Used to refine volume readings for foods whose household measures
        are listed, such as a cup of milk.
        """
        found = self.find_food(food_name)
        if found is None or quantity < 0:
            return None
        food_key, entries = found
        entry = _match_exact(normalize_key(descriptor), entries)
        if entry is None:
            return None
        if self.debug:
            _logger.info(
                "Exact portion for %s %r: %s g",
                food_key,
                descriptor,
                entry.canonical_grams,
            )
        return ResolvedWeight(
            grams=entry.canonical_grams * quantity,
            resolution_path=ResolutionPath.PORTION_LOOKUP,
            detail=f"{food_key}: {entry.description}",
        )

    def descriptors(self, food_name: str) -> list[str]:
        """List the portion descriptions known for a food."""
        found = self.find_food(food_name)
        if found is None:
            return []
        return [entry.description for entry in found[1]]


def _match_descriptor(
    descriptor: str, entries: tuple[PortionEntry, ...]
) -> PortionEntry | None:
    """Pick the portion entry for a descriptor, first match wins.

    Exact and singular matches are tried before the loose word rules so
    ``"pieces"`` prefers ``"piece"`` over ``"small piece"``.
    """
    exact = _match_exact(descriptor, entries)
    if exact is not None or not descriptor:
        return exact
    for entry in entries:
        if _is_gram_entry(entry):
            continue
        if _loosely_matches(descriptor, entry.description):
            return entry
    return None


def _match_exact(
    descriptor: str, entries: tuple[PortionEntry, ...]
) -> PortionEntry | None:
    if not descriptor:
        return None
    candidates = {descriptor}
    if descriptor.endswith("es"):
        candidates.add(descriptor[:-2])
    if descriptor.endswith("s"):
        candidates.add(descriptor[:-1])

    for entry in entries:
        if _is_gram_entry(entry):
            if descriptor in _GRAM_DESCRIPTORS:
                return entry
            continue
        if entry.description in candidates:
            return entry
    return None


def _loosely_matches(descriptor: str, description: str) -> bool:
    if description in descriptor or descriptor in description:
        return True
    if any(word in descriptor and description == word for word in _SIZE_WORDS):
        return True
    if any(word in descriptor and word in description for word in _SHAPE_WORDS):
        return True
    if description == "item" and any(word in descriptor for word in _ITEM_WORDS):
        return True
    return any(word in descriptor and description == word for word in _PART_WORDS)


def _is_gram_entry(entry: PortionEntry) -> bool:
    return entry.description == "g"
