"""Tests for portion plausibility checks."""

import pytest

from portion_engine.domain.measurements import Issue
from portion_engine.domain.reference import ReferencePortion
from portion_engine.services.validator import PortionValidator


@pytest.mark.parametrize("grams", [30, 50, 100, 200])
def test_portions_near_reference_are_reasonable(reference_validator, grams) -> None:
    verdict = reference_validator.validate("test food", grams)

    assert verdict.is_reasonable
    assert verdict.warning is None
    assert verdict.fda_serving == "1 portion"
    assert verdict.issue is None


def test_portion_above_threshold(reference_validator) -> None:
    verdict = reference_validator.validate("test food", 301)

    assert not verdict.is_reasonable
    assert verdict.warning == "Your portion (301g) vs FDA standard (100g) - 3x larger"
    assert verdict.recommendation == "Try: 1 portion • Or: 1 cup • 2 scoops"
    assert verdict.fda_serving == "1 portion"
    assert verdict.issue is Issue.PORTION_IMPLAUSIBLE


def test_ratio_above_two_rounds_half_up(reference_validator) -> None:
    verdict = reference_validator.validate("test food", 250)

    assert not verdict.is_reasonable
    assert verdict.warning.endswith("3x larger")
    assert verdict.ratio == pytest.approx(2.5)


def test_portion_too_small(reference_validator) -> None:
    verdict = reference_validator.validate("test food", 29)

    assert not verdict.is_reasonable
    assert verdict.warning == (
        "Your portion (29g) vs FDA standard (100g) - seems too small"
    )
    assert verdict.issue is Issue.PORTION_IMPLAUSIBLE


def test_threshold_below_double_reference() -> None:
    reference = ReferencePortion(
        category="test",
        reference_grams=100,
        common_description="1 bar",
        warning_threshold=150,
    )
    validator = PortionValidator(references={"bar": reference})

    verdict = validator.validate("bar", 160)

    assert not verdict.is_reasonable
    assert verdict.warning.endswith("2x larger")
    assert verdict.recommendation == "Try: 1 bar • Or: standard serving"


def test_missing_reference_is_reasonable(validator) -> None:
    verdict = validator.validate("zzzz", 1000)

    assert verdict.is_reasonable
    assert verdict.fda_serving is None
    assert verdict.issue is Issue.REFERENCE_DATA_MISSING


@pytest.mark.parametrize(
    ("food", "reference"),
    [
        ("hard candy", "hard candy"),
        ("ice pop", "popsicle"),
        ("cashew nut", "nuts"),
        ("sour candy", "soft candy"),
        ("teriyaki jerky", "beef jerky"),
    ],
)
def test_reference_lookup_with_keyword_fallbacks(validator, food, reference) -> None:
    assert validator.reference(food).food_key == reference


def test_hard_candy_pieces_are_reasonable(validator) -> None:
    verdict = validator.validate("hard candy", 18)

    assert verdict.is_reasonable
    assert verdict.fda_serving == "0.5 oz (3-4 pieces)"


def test_visual_reference(validator) -> None:
    assert validator.visual_reference("hard candy") == "3-4 pieces"
    assert validator.visual_reference("zzzz") is None
