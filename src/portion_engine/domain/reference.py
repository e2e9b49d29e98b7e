"""Models for the static reference tables bundled with the engine."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from portion_engine.domain.nutrition import NutrientSet
from portion_engine.domain.units import Unit


def _freeze(value: dict) -> Mapping:
    return MappingProxyType(value)


FrozenFloatMap = Annotated[dict[str, float], AfterValidator(_freeze)]
FrozenStrMap = Annotated[dict[str, str], AfterValidator(_freeze)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class KeywordFallback(_Frozen):
    """Keyword rule mapping a free-text name onto a table key."""

    keywords: tuple[str, ...]
    exclude: tuple[str, ...] = ()
    target: str


class PortionEntry(_Frozen):
    """Gram weight of one household portion of a food."""

    fdc_id: str
    description: str
    gram_weight: float = Field(gt=0)
    amount: float = Field(default=1.0, gt=0)
    food_key: str = ""

    @property
    def canonical_grams(self) -> float:
        """Weight of the portion in grams."""
        return self.gram_weight * self.amount


class ReferencePortion(_Frozen):
    """FDA reference amount customarily consumed (RACC) for a food."""

    category: str
    reference_grams: float = Field(gt=0)
    common_description: str
    alternative_units: tuple[str, ...] = ()
    visual_reference: str | None = None
    warning_threshold: float | None = Field(default=None, gt=0)
    food_key: str = ""

    @property
    def effective_threshold(self) -> float:
        """Gram weight above which a portion is flagged."""
        if self.warning_threshold is not None:
            return self.warning_threshold
        return self.reference_grams * 3


class OvenTemperature(_Frozen):
    """Named oven setting."""

    fahrenheit: float
    celsius: float
    gas_mark: float


class KitchenTables(_Frozen):
    """Density and kitchen conversion tables."""

    grams_per_ounce: float = Field(gt=0)
    cup_ml: float = Field(gt=0)
    number10_can_grams: float = Field(gt=0)
    liquid_fl_oz: FrozenFloatMap
    fractional_cups: FrozenFloatMap
    dry_densities: FrozenFloatMap
    density_aliases: FrozenStrMap
    butter_to_oil_tbsp: FrozenFloatMap
    oven_temperatures: Annotated[
        dict[str, OvenTemperature], AfterValidator(_freeze)
    ]
    can_sizes_g: FrozenFloatMap
    canned_drain_weights_oz: FrozenFloatMap


class ServingSize(_Frozen):
    """Named serving of a catalogued food."""

    name: str
    grams: float = Field(gt=0)


class NutrientRecord(_Frozen):
    """Per-100 g nutrient profile of a catalogued food."""

    name: str
    category: str
    source: str
    per_100g: NutrientSet
    serving_sizes: tuple[ServingSize, ...] = ()


class CalorieFactors(_Frozen):
    """Energy per gram of protein, fat and carbohydrate for a food group."""

    protein: float = Field(ge=0)
    fat: float = Field(ge=0)
    carbohydrate: float = Field(ge=0)


class UnitsFile(_Frozen):
    """Layout of ``units.json``."""

    units: tuple[Unit, ...]
    ambiguous_abbreviations: FrozenStrMap


class PortionsFile(_Frozen):
    """Layout of ``portions.json``."""

    foods: dict[str, tuple[PortionEntry, ...]]
    supplementary: dict[str, tuple[PortionEntry, ...]] = Field(default_factory=dict)


class ReferencePortionsFile(_Frozen):
    """Layout of ``fda_racc.json``."""

    references: dict[str, ReferencePortion]
    keyword_fallbacks: tuple[KeywordFallback, ...] = ()


class CalorieFactorsFile(_Frozen):
    """Layout of ``calorie_factors.json``."""

    default: CalorieFactors
    foods: dict[str, CalorieFactors]


class NutrientsFile(_Frozen):
    """Layout of ``nutrients.json``."""

    records: tuple[NutrientRecord, ...]
    keyword_fallbacks: tuple[KeywordFallback, ...] = ()
