"""Domain models for measurement units."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class UnitCategory(StrEnum):
    """Kind of quantity a unit measures."""

    VOLUME = "volume"
    WEIGHT = "weight"
    PORTION = "portion"
    SIZE = "size"


class Unit(BaseModel):
    """Canonical unit loaded from the unit registry table.

    ``base_conversion`` converts one unit to milliliters (volume) or grams
    (weight). Portion and size units carry no factor; informal household
    units such as a pinch carry an estimated ``default_grams`` instead.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: UnitCategory
    base_conversion: float | None = Field(default=None, gt=0)
    default_grams: float | None = Field(default=None, gt=0)
    aliases: tuple[str, ...] = ()

    @property
    def has_factor(self) -> bool:
        """Return True when the unit converts numerically to a base unit."""
        return self.base_conversion is not None


@dataclass(frozen=True)
class VolumeUnit:
    """Unit text resolved to a volume unit."""

    unit: Unit
    matched_text: str
    ambiguous: bool = False

    @property
    def milliliters(self) -> float:
        """Milliliters in one unit."""
        return float(self.unit.base_conversion or 0.0)


@dataclass(frozen=True)
class WeightUnit:
    """Unit text resolved to a weight unit."""

    unit: Unit
    matched_text: str
    ambiguous: bool = False

    @property
    def grams(self) -> float:
        """Grams in one unit."""
        return float(self.unit.base_conversion or 0.0)


@dataclass(frozen=True)
class PortionUnit:
    """Count or size descriptor that only a portion table can turn into grams."""

    descriptor: str
    unit: Unit | None = None


@dataclass(frozen=True)
class UnresolvedUnit:
    """Unit text the registry does not recognise."""

    raw_text: str


UnitRef = VolumeUnit | WeightUnit | PortionUnit | UnresolvedUnit
