"""Conversion of quantities and units to grams, plus kitchen conversions."""

import logging
import math
import re
from dataclasses import dataclass

from portion_engine.domain.measurements import (
    OilSubstitution,
    ResolutionPath,
    ResolvedWeight,
    Unresolved,
    UnresolvedReason,
)
from portion_engine.domain.reference import KitchenTables, OvenTemperature
from portion_engine.domain.units import (
    PortionUnit,
    Unit,
    UnitRef,
    VolumeUnit,
    WeightUnit,
)
from portion_engine.services.matching import normalize_key
from portion_engine.services.portions import PortionResolver
from portion_engine.services.units import UnitRegistry

TABLESPOONS_PER_CUP = 16
TEASPOONS_PER_TABLESPOON = 3
OUNCES_PER_POUND = 16
DEFAULT_CAN_SIZE = "#10_can"

_FRACTIONAL_CUP = re.compile(r"^(\d+/\d+)[_\s]cups?$")
_FRACTION_TOLERANCE = 0.01

_logger = logging.getLogger(__name__)


@dataclass
class UnitConverter:
    """Turn ``quantity`` of ``unit_text`` into grams."""

    registry: UnitRegistry
    kitchen: KitchenTables
    portions: PortionResolver
    debug: bool = False

    def to_grams(
        self, quantity: float, unit_text: str, ingredient_key: str | None = None
    ) -> ResolvedWeight | Unresolved:
        """Convert a quantity to grams.

        Weight units convert directly. Volume units use the ingredient's
        density when one is known and otherwise report milliliters as grams,
        marked non-authoritative. Portion and unknown units are looked up in
        the portion table for the ingredient. Household units such as a pinch
        fall back to their estimated weight when the table has no entry.
        """
        text = normalize_key(unit_text)
        if quantity < 0:
            return Unresolved(
                raw_text=text,
                reason=UnresolvedReason.NEGATIVE_QUANTITY,
                detail=f"quantity {quantity} is negative",
            )

        cups = self._fractional_cups(text)
        if cups is not None:
            return self._volume_to_grams(
                quantity * cups * self.kitchen.cup_ml, ingredient_key, text
            )

        unit_ref = self.registry.resolve(text)
        if isinstance(unit_ref, WeightUnit):
            return ResolvedWeight(
                grams=quantity * unit_ref.grams,
                resolution_path=ResolutionPath.DIRECT_UNIT,
                detail=_unit_detail(unit_ref),
            )
        if isinstance(unit_ref, VolumeUnit):
            return self._volume_to_grams(
                quantity * unit_ref.milliliters,
                ingredient_key,
                _unit_detail(unit_ref),
            )

        household = _household_unit(unit_ref)
        if not ingredient_key:
            if household is not None:
                return self._household_weight(quantity, household)
            if self.debug:
                _logger.warning("Cannot convert %r without an ingredient", text)
            return Unresolved(
                raw_text=text,
                reason=UnresolvedReason.NO_INGREDIENT,
                detail=f"{text!r} needs a food to resolve",
            )
        result = self.portions.resolve_quantity(ingredient_key, quantity, text)
        if household is not None and (
            isinstance(result, Unresolved)
            or result.resolution_path is ResolutionPath.DEFAULT_FALLBACK
        ):
            return self._household_weight(quantity, household)
        return result

    def density(self, ingredient: str | None) -> tuple[str, float] | None:
        """Return ``(key, grams per cup)`` for an ingredient, if known."""
        if not ingredient:
            return None
        key = _table_key(ingredient)
        key = self.kitchen.density_aliases.get(key, key)
        grams_per_cup = self.kitchen.dry_densities.get(key)
        if grams_per_cup is None:
            return None
        return key, grams_per_cup

    def convert_volume(
        self, amount: float, from_unit: str, to_unit: str
    ) -> float | None:
        """Convert between volume units using registry factors."""
        return self.registry.convert_volume(amount, from_unit, to_unit)

    def convert_liquid(
        self, amount: float, from_unit: str, to_unit: str
    ) -> float | None:
        """Convert liquid measures through fluid ounces."""
        from_fl_oz = self.kitchen.liquid_fl_oz.get(_table_key(from_unit))
        to_fl_oz = self.kitchen.liquid_fl_oz.get(_table_key(to_unit))
        if not from_fl_oz or not to_fl_oz:
            return None
        return amount * from_fl_oz / to_fl_oz

    def convert_dry_ingredient(
        self, amount: float, from_unit: str, to_unit: str, ingredient: str
    ) -> float | None:
        """Convert a dry ingredient between oz, lb, g and (fractional) cups."""
        found = self.density(ingredient)
        if found is None:
            return None
        _, grams_per_cup = found
        grams_per_ounce = self.kitchen.grams_per_ounce

        source = _table_key(from_unit)
        if source == "oz":
            ounces = amount
        elif source == "cup":
            ounces = amount * grams_per_cup / grams_per_ounce
        elif source == "lb":
            ounces = amount * OUNCES_PER_POUND
        elif source == "g":
            ounces = amount / grams_per_ounce
        else:
            fraction = self.kitchen.fractional_cups.get(source)
            if fraction is None:
                return None
            ounces = amount * fraction * grams_per_cup / grams_per_ounce

        target = _table_key(to_unit)
        if target == "oz":
            return ounces
        if target == "cup":
            return ounces * grams_per_ounce / grams_per_cup
        if target == "lb":
            return ounces / OUNCES_PER_POUND
        if target == "g":
            return ounces * grams_per_ounce
        fraction = self.kitchen.fractional_cups.get(target)
        if fraction is None:
            return None
        return ounces * grams_per_ounce / grams_per_cup / fraction

    def convert_butter_to_oil(
        self, amount: float, unit: str
    ) -> OilSubstitution | None:
        """Look up how much oil replaces an amount of butter.

        Only amounts listed in the table convert; nothing is extrapolated.
        """
        oil_tbsp = self.kitchen.butter_to_oil_tbsp.get(self._butter_key(amount, unit))
        if oil_tbsp is None:
            return None
        if oil_tbsp >= TABLESPOONS_PER_CUP:
            return OilSubstitution(amount=oil_tbsp / TABLESPOONS_PER_CUP, unit="cup")
        if oil_tbsp >= 3:
            rounded = float(math.floor(oil_tbsp + 0.5))
            return OilSubstitution(amount=rounded, unit="tbsp")
        return OilSubstitution(
            amount=oil_tbsp * TEASPOONS_PER_TABLESPOON, unit="tsp"
        )

    def canned_drain_weight(
        self, food: str, can_size: str = DEFAULT_CAN_SIZE
    ) -> float | None:
        """Drained weight in ounces of a canned food for a can size."""
        drain_weight = self.kitchen.canned_drain_weights_oz.get(_table_key(food))
        can_grams = self.kitchen.can_sizes_g.get(_table_key(can_size))
        if drain_weight is None or can_grams is None:
            return None
        return drain_weight * can_grams / self.kitchen.number10_can_grams

    def oven_temperature(self, name: str) -> OvenTemperature | None:
        """Look up a named oven setting such as ``"moderate"``."""
        return self.kitchen.oven_temperatures.get(_table_key(name))

    def _fractional_cups(self, text: str) -> float | None:
        match = _FRACTIONAL_CUP.match(text)
        if not match:
            return None
        return self.kitchen.fractional_cups.get(f"{match.group(1)}_cup")

    def _butter_key(self, amount: float, unit: str) -> str:
        unit_key = _table_key(unit)
        if unit_key == "cup":
            for key, cups in self.kitchen.fractional_cups.items():
                if abs(cups - amount) < _FRACTION_TOLERANCE:
                    return key
        return f"{_format_amount(amount)}_{unit_key}"

    def _household_weight(self, quantity: float, unit: Unit) -> ResolvedWeight:
        grams_each = unit.default_grams or 0.0
        if self.debug:
            _logger.info("Estimating %s as %s g each", unit.name, grams_each)
        return ResolvedWeight(
            grams=quantity * grams_each,
            resolution_path=ResolutionPath.DEFAULT_FALLBACK,
            authoritative=False,
            detail=f"{unit.name}: about {grams_each:g} g (household estimate)",
        )

    def _volume_to_grams(
        self, milliliters: float, ingredient_key: str | None, detail: str
    ) -> ResolvedWeight:
        found = self.density(ingredient_key)
        if found is None:
            if self.debug:
                _logger.info(
                    "No density for %r, using %s ml as grams",
                    ingredient_key,
                    milliliters,
                )
            return ResolvedWeight(
                grams=milliliters,
                resolution_path=ResolutionPath.DIRECT_UNIT,
                authoritative=False,
                detail=f"{detail}; no density, 1 ml = 1 g",
            )
        key, grams_per_cup = found
        return ResolvedWeight(
            grams=milliliters * grams_per_cup / self.kitchen.cup_ml,
            resolution_path=ResolutionPath.DENSITY,
            detail=f"{detail}; {key} at {grams_per_cup:g} g/cup",
        )


def convert_temperature(value: float, from_scale: str, to_scale: str) -> float:
    """Convert a temperature between Fahrenheit and Celsius."""
    source = _temperature_scale(from_scale)
    target = _temperature_scale(to_scale)
    if source == target:
        return value
    if source == "C":
        return value * 9 / 5 + 32
    return (value - 32) * 5 / 9


def _temperature_scale(scale: str) -> str:
    normalized = scale.strip().upper()
    if normalized not in ("F", "C"):
        raise ValueError(f"Unknown temperature scale: {scale!r}")
    return normalized


def _household_unit(unit_ref: UnitRef) -> Unit | None:
    if not isinstance(unit_ref, PortionUnit) or unit_ref.unit is None:
        return None
    if unit_ref.unit.default_grams is None:
        return None
    return unit_ref.unit


def _table_key(text: str) -> str:
    return normalize_key(text).replace(" ", "_")


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:g}"


def _unit_detail(unit_ref: VolumeUnit | WeightUnit) -> str:
    if unit_ref.ambiguous:
        return f"{unit_ref.matched_text!r} read as {unit_ref.unit.name}"
    return unit_ref.unit.name
