"""Nutrition domain models."""

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class NutrientSet:
    """Nutrient values for a food, either per 100 g, per serving, or per portion.

    Every field is optional: ``None`` means the source had no value for it,
    which is different from a measured zero.
    """

    calories: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    carbs_g: float | None = None
    sugar_g: float | None = None
    fiber_g: float | None = None
    water_g: float | None = None

    calcium_mg: float | None = None
    iron_mg: float | None = None
    magnesium_mg: float | None = None
    phosphorus_mg: float | None = None
    potassium_mg: float | None = None
    sodium_mg: float | None = None
    zinc_mg: float | None = None
    copper_mg: float | None = None
    manganese_mg: float | None = None
    selenium_ug: float | None = None

    vitamin_a_ug: float | None = None
    vitamin_c_mg: float | None = None
    vitamin_d_ug: float | None = None
    vitamin_e_mg: float | None = None
    thiamin_mg: float | None = None
    riboflavin_mg: float | None = None
    niacin_mg: float | None = None
    pantothenic_acid_mg: float | None = None
    vitamin_b6_mg: float | None = None
    vitamin_b12_ug: float | None = None
    folate_ug: float | None = None
    vitamin_k_ug: float | None = None
    choline_mg: float | None = None

    caffeine_mg: float | None = None
    theobromine_mg: float | None = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Return nutrient field names in declaration order."""
        return tuple(field.name for field in fields(cls))

    def as_dict(self, *, include_missing: bool = False) -> dict[str, float | None]:
        """Return nutrients as a plain dict, skipping missing values by default."""
        values = {name: getattr(self, name) for name in self.field_names()}
        if include_missing:
            return values
        return {name: value for name, value in values.items() if value is not None}
