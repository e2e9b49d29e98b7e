"""Tests for the normalization facade."""

import pytest

from portion_engine.domain.measurements import Issue, ResolutionPath
from portion_engine.domain.nutrition import NutrientSet


def test_hard_candy_pieces(service) -> None:
    result = service.normalize("hard candy", "3 pieces")

    assert result.grams == 18
    assert result.resolution_path is ResolutionPath.PORTION_LOOKUP
    assert result.authoritative
    assert result.plausibility.is_reasonable
    assert result.issues == frozenset()


def test_hard_candy_calories(service) -> None:
    nutrients = service.catalog_nutrients("hard candy", "3 pieces")

    assert nutrients is not None
    assert nutrients.calories == 71


def test_half_cup_of_flour(service) -> None:
    result = service.normalize("all_purpose_flour", "1/2 cup")

    assert result.grams == pytest.approx(60)
    assert result.resolution_path is ResolutionPath.DENSITY
    assert result.authoritative


def test_bare_t_reads_as_tablespoon(service) -> None:
    result = service.normalize("honey", "3 t")

    assert result.grams == pytest.approx(45)
    assert result.resolution_path is ResolutionPath.DIRECT_UNIT
    assert not result.authoritative


def test_cup_of_milk_uses_listed_portion(service) -> None:
    result = service.normalize("milk", "1 cup")

    assert result.grams == 244
    assert result.resolution_path is ResolutionPath.PORTION_LOOKUP
    assert result.authoritative


def test_cup_sliced_apple_uses_listed_portion(service) -> None:
    assert service.normalize("apple", "1 cup sliced").grams == 109


def test_fraction_phrases_agree(service) -> None:
    half_of = service.normalize("cantaloupe", "half of cantaloupe")
    fraction = service.normalize("cantaloupe", "1/2 cantaloupe")

    assert half_of.grams == fraction.grams == 276
    assert half_of.resolution_path is ResolutionPath.DEFAULT_FALLBACK
    assert not half_of.authoritative


@pytest.mark.parametrize("food", ["all_purpose_flour", "hard candy", "zzzz"])
@pytest.mark.parametrize("grams", [1, 18, 250.5])
def test_gram_measurements_are_identity(service, food, grams) -> None:
    result = service.normalize(food, f"{grams} g")

    assert result.grams == pytest.approx(grams)
    assert result.authoritative


def test_half_is_half_of_one(service) -> None:
    one = service.normalize("all_purpose_flour", "1 cup")
    half = service.normalize("all_purpose_flour", "half cup")

    assert half.grams == pytest.approx(one.grams / 2)


@pytest.mark.parametrize(
    ("food", "smaller", "larger"),
    [
        ("all_purpose_flour", "1 cup", "2 cups"),
        ("hard candy", "1 piece", "3 pieces"),
        ("milk", "1 tbsp", "1 cup"),
    ],
)
def test_more_is_heavier(service, food, smaller, larger) -> None:
    assert (
        service.normalize(food, smaller).grams < service.normalize(food, larger).grams
    )


@pytest.mark.parametrize(
    ("unit", "other"), [("cup", "tablespoon"), ("liter", "teaspoon"), ("pint", "ml")]
)
def test_volume_round_trip(registry, unit, other) -> None:
    there = registry.convert_volume(2.5, unit, other)

    assert registry.convert_volume(there, other, unit) == pytest.approx(2.5)


def test_unresolved_unit_without_food(service) -> None:
    result = service.normalize("", "3 pieces")

    assert result.grams is None
    assert result.resolution_path is None
    assert not result.is_resolved
    assert result.issues == frozenset({Issue.UNIT_UNRESOLVED})
    assert result.fallback_grams == 100
    assert result.plausibility.is_reasonable


def test_unknown_food_reports_missing_reference(service) -> None:
    result = service.normalize("zzzz", "2 slices")

    assert result.grams is None
    assert result.issues == frozenset(
        {Issue.UNIT_UNRESOLVED, Issue.REFERENCE_DATA_MISSING}
    )


def test_ambiguous_parse_is_reported(service) -> None:
    result = service.normalize("apple", "a handful")

    assert result.grams == 40
    assert result.resolution_path is ResolutionPath.DEFAULT_FALLBACK
    assert not result.authoritative
    assert Issue.PARSE_AMBIGUOUS in result.issues


def test_implausible_portion_keeps_weight(service) -> None:
    result = service.normalize("ice cream", "10 cups")

    assert result.grams == 1320
    assert not result.plausibility.is_reasonable
    assert result.plausibility.warning.endswith("20x larger")
    assert Issue.PORTION_IMPLAUSIBLE in result.issues


def test_food_without_reference_reports_missing_data(service) -> None:
    result = service.normalize("all_purpose_flour", "1 cup")

    assert result.plausibility.is_reasonable
    assert Issue.REFERENCE_DATA_MISSING in result.issues


def test_scale_nutrients(service) -> None:
    scaled = service.scale_nutrients(NutrientSet(calories=394, carbs_g=98), 18)

    assert scaled.calories == 71
    assert scaled.carbs_g == 17.6


def test_catalog_nutrients_for_unknown_food(service) -> None:
    assert service.catalog_nutrients("broccoli", "1 cup") is None


@pytest.mark.parametrize(
    ("measurement", "grams"),
    [
        ("two cups", 240),
        ("½ cup", 60),
        ("three quarters cup", 90),
        ("1½ cups", 180),
        ("a half cup", 60),
    ],
)
def test_spelled_out_quantities(service, measurement, grams) -> None:
    result = service.normalize("all_purpose_flour", measurement)

    assert result.grams == pytest.approx(grams)
    assert result.resolution_path is ResolutionPath.DENSITY
    assert Issue.PARSE_AMBIGUOUS not in result.issues


def test_unit_with_trailing_modifier(service) -> None:
    result = service.normalize("all_purpose_flour", "2 cups sifted")

    assert result.grams == pytest.approx(240)
    assert result.resolution_path is ResolutionPath.DENSITY
    assert Issue.UNIT_UNRESOLVED not in result.issues


def test_plural_unit_with_trailing_modifier(service) -> None:
    heaping = service.normalize("granulated_sugar", "3 tablespoons heaping")
    plain = service.normalize("granulated_sugar", "3 tablespoons")

    assert heaping.grams == pytest.approx(plain.grams)
    assert heaping.grams == pytest.approx(45 * 198 / 240)


def test_fluid_ounces_with_period(service) -> None:
    result = service.normalize("milk", "8 fl. oz")

    assert result.grams == pytest.approx(240)
    assert result.resolution_path is ResolutionPath.DIRECT_UNIT
    assert not result.authoritative


def test_household_unit_for_unknown_food(service) -> None:
    result = service.normalize("zzzz", "a pinch")

    assert result.grams == pytest.approx(0.5)
    assert result.resolution_path is ResolutionPath.DEFAULT_FALLBACK
    assert not result.authoritative
    assert Issue.UNIT_UNRESOLVED not in result.issues


def test_unit_abbreviation_uses_listed_portion(service) -> None:
    result = service.normalize("milk", "1 c")

    assert result.grams == 244
    assert result.resolution_path is ResolutionPath.PORTION_LOOKUP
    assert result.authoritative
