"""Unit registry: lookup of canonical units by id, name or alias."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from portion_engine.domain.units import (
    PortionUnit,
    Unit,
    UnitCategory,
    UnitRef,
    UnresolvedUnit,
    VolumeUnit,
    WeightUnit,
)
from portion_engine.services.matching import fuzzy_find, normalize_key

_ABBREVIATION_PERIOD = re.compile(r"(?<=[a-z])\.")

_logger = logging.getLogger(__name__)


@dataclass
class UnitRegistry:
    """Read-only registry of canonical units."""

    units: tuple[Unit, ...]
    ambiguous_abbreviations: Mapping[str, str] = field(default_factory=dict)
    debug: bool = False
    _by_id: Mapping[str, Unit] = field(init=False, repr=False)
    _by_name: Mapping[str, Unit] = field(init=False, repr=False)
    _by_alias: Mapping[str, Unit] = field(init=False, repr=False)
    _by_term: Mapping[str, Unit] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        by_name: dict[str, Unit] = {}
        by_alias: dict[str, Unit] = {}
        by_term: dict[str, Unit] = {}
        for unit in self.units:
            by_name.setdefault(normalize_key(unit.name), unit)
            by_term.setdefault(normalize_key(unit.name), unit)
            for alias in unit.aliases:
                by_alias.setdefault(normalize_key(alias), unit)
                by_term.setdefault(normalize_key(alias), unit)
        self._by_id = MappingProxyType({unit.id: unit for unit in self.units})
        self._by_name = MappingProxyType(by_name)
        self._by_alias = MappingProxyType(by_alias)
        self._by_term = MappingProxyType(by_term)

    def get(self, unit_id: str) -> Unit | None:
        """Return a unit by its numeric id."""
        return self._by_id.get(unit_id)

    def find(self, unit_name: str) -> Unit | None:
        """Find a unit by name with fuzzy matching.

        Order: ambiguous abbreviations, exact name, exact alias, then the
        first unit whose name or alias contains or is contained in the text
        on word boundaries. Periods closing an abbreviation are ignored, so
        ``"fl. oz"`` reads as ``"fl oz"``.
        """
        normalized = _clean(unit_name)
        if not normalized:
            return None
        abbreviation_target = self.ambiguous_abbreviations.get(normalized)
        if abbreviation_target is not None:
            return self._by_name.get(abbreviation_target)
        exact = self._by_name.get(normalized) or self._by_alias.get(normalized)
        if exact is not None:
            return exact
        match = fuzzy_find(normalized, self._by_term, whole_words=True)
        return match.value if match else None

    def resolve(self, unit_text: str) -> UnitRef:
        """Resolve free unit text into a tagged unit reference."""
        normalized = _clean(unit_text)
        unit = self.find(normalized)
        if unit is None:
            if self.debug:
                _logger.info("Unit not in registry: %r", normalized)
            return UnresolvedUnit(raw_text=normalized)
        ambiguous = normalized in self.ambiguous_abbreviations
        if ambiguous and self.debug:
            _logger.info(
                "Ambiguous abbreviation %r read as %s", normalized, unit.name
            )
        if unit.category is UnitCategory.VOLUME and unit.has_factor:
            return VolumeUnit(unit=unit, matched_text=normalized, ambiguous=ambiguous)
        if unit.category is UnitCategory.WEIGHT and unit.has_factor:
            return WeightUnit(unit=unit, matched_text=normalized, ambiguous=ambiguous)
        return PortionUnit(descriptor=normalized, unit=unit)

    def by_category(self, category: UnitCategory) -> list[Unit]:
        """Return units of a category in table order."""
        return [unit for unit in self.units if unit.category is category]

    def convert_volume(
        self, amount: float, from_unit: str, to_unit: str
    ) -> float | None:
        """Convert between two volume units through milliliters."""
        source = self.resolve(from_unit)
        target = self.resolve(to_unit)
        if not isinstance(source, VolumeUnit) or not isinstance(target, VolumeUnit):
            return None
        return amount * source.milliliters / target.milliliters

    def convert_weight(
        self, amount: float, from_unit: str, to_unit: str
    ) -> float | None:
        """Convert between two weight units through grams."""
        source = self.resolve(from_unit)
        target = self.resolve(to_unit)
        if not isinstance(source, WeightUnit) or not isinstance(target, WeightUnit):
            return None
        return amount * source.grams / target.grams

    def suggest_units(self, food_name: str) -> list[Unit]:
        """Suggest sensible units for a food, most specific first."""
        name = normalize_key(food_name)
        suggestions: list[str] = []
        if any(word in name for word in ("milk", "juice", "oil", "water", "sauce")):
            suggestions += ["cup", "tablespoon", "fl oz"]
        if any(word in name for word in ("apple", "banana", "orange")):
            suggestions += ["fruit", "large", "medium"]
        if any(word in name for word in ("bread", "toast")):
            suggestions += ["slice", "piece"]
        if any(word in name for word in ("chicken", "beef", "fish")):
            suggestions += ["oz", "piece", "fillet"]
        suggestions += ["cup", "oz", "piece"]

        units: list[Unit] = []
        for unit_name in suggestions:
            unit = self._by_name.get(unit_name)
            if unit is not None and unit not in units:
                units.append(unit)
        return units

    def is_valid_unit_for_food(self, unit_name: str, food_name: str) -> bool:
        """Return True when the unit is among the suggestions for the food."""
        unit = self.find(unit_name)
        if unit is None:
            return False
        suggestions = self.suggest_units(food_name)
        return any(candidate.id == unit.id for candidate in suggestions)


def _clean(text: str) -> str:
    return normalize_key(_ABBREVIATION_PERIOD.sub("", normalize_key(text)))
