"""Scaling of nutrient profiles to a portion weight."""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from portion_engine.domain.nutrition import NutrientSet
from portion_engine.domain.reference import CalorieFactors
from portion_engine.services.matching import fuzzy_find

BASIS_PER_100G = "per100g"
BASIS_PER_SERVING = "perServing"

PROTEIN_KCAL_PER_G = 4.27
FAT_KCAL_PER_G = 9.02
CARBS_KCAL_PER_G = 3.87

GENERAL_CALORIE_FACTORS = CalorieFactors(protein=4.0, fat=9.0, carbohydrate=4.0)

_TRACE_MINERALS = frozenset({"iron_mg", "zinc_mg", "copper_mg", "manganese_mg"})
_TRACE_COMPOUNDS = frozenset({"caffeine_mg", "theobromine_mg"})

_logger = logging.getLogger(__name__)


@dataclass
class NutrientScaler:
    """Scale nutrient sets and round them for display."""

    calorie_factors: Mapping[str, CalorieFactors] = field(default_factory=dict)
    default_calorie_factors: CalorieFactors = GENERAL_CALORIE_FACTORS
    debug: bool = False

    def scale(
        self,
        nutrients: NutrientSet,
        grams: float,
        basis: str = BASIS_PER_100G,
        serving_size_g: float | None = None,
    ) -> NutrientSet:
        """Scale nutrients given per 100 g (or per serving) to ``grams``.

        Calories round to whole numbers, trace minerals to two decimals and
        everything else to one. Caffeine and theobromine are only reported
        when the source has a non-zero value. Missing values stay missing.
        """
        if grams <= 0:
            return _zeroed(nutrients)
        if basis == BASIS_PER_SERVING and serving_size_g and serving_size_g > 0:
            factor = grams / serving_size_g
        else:
            factor = grams / 100.0

        scaled: dict[str, float | None] = {}
        for name, value in nutrients.as_dict(include_missing=True).items():
            if value is None or (name in _TRACE_COMPOUNDS and value == 0):
                scaled[name] = None
                continue
            scaled[name] = _round_nutrient(name, value * factor)
        if self.debug:
            _logger.info(
                "Scaled nutrients: grams=%s basis=%s factor=%.4f",
                grams,
                basis,
                factor,
            )
        return NutrientSet(**scaled)

    def calorie_factors_for(self, food_name: str) -> CalorieFactors:
        """Return the food group's energy factors, or the general 4/9/4."""
        match = fuzzy_find(food_name, self.calorie_factors)
        if match is None:
            return self.default_calorie_factors
        if self.debug:
            _logger.info("Calorie factors for %r: %s", food_name, match.key)
        return match.value

    def energy_from_macros_for(
        self, food_name: str, protein_g: float, fat_g: float, carbs_g: float
    ) -> float:
        """Estimate whole kcal from macros with the food's own factors."""
        factors = self.calorie_factors_for(food_name)
        kcal = (
            protein_g * factors.protein
            + fat_g * factors.fat
            + carbs_g * factors.carbohydrate
        )
        return float(_round_half_up(kcal, 0))


def energy_from_macros(protein_g: float, fat_g: float, carbs_g: float) -> float:
    """Estimate kcal from macronutrients with USDA Atwater factors."""
    return (
        protein_g * PROTEIN_KCAL_PER_G
        + fat_g * FAT_KCAL_PER_G
        + carbs_g * CARBS_KCAL_PER_G
    )


def with_derived_energy(nutrients: NutrientSet) -> NutrientSet:
    """Fill in calories from macros when the source has none."""
    if nutrients.calories is not None:
        return nutrients
    macros = (nutrients.protein_g, nutrients.fat_g, nutrients.carbs_g)
    if all(value is None for value in macros):
        return nutrients
    protein_g, fat_g, carbs_g = (value or 0.0 for value in macros)
    return replace(nutrients, calories=energy_from_macros(protein_g, fat_g, carbs_g))


def _zeroed(nutrients: NutrientSet) -> NutrientSet:
    zeroed: dict[str, float | None] = {}
    for name, value in nutrients.as_dict(include_missing=True).items():
        if value is None or (name in _TRACE_COMPOUNDS and value == 0):
            zeroed[name] = None
        else:
            zeroed[name] = 0.0
    return NutrientSet(**zeroed)


def _round_nutrient(name: str, value: float) -> float:
    if name == "calories":
        return float(_round_half_up(value, 0))
    if name in _TRACE_MINERALS:
        return _round_half_up(value, 2)
    return _round_half_up(value, 1)


def _round_half_up(value: float, digits: int) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale
