"""Tests for measurement parsing."""

import pytest

from portion_engine.domain.measurements import ParseConfidence, ParseRule


@pytest.mark.parametrize(
    ("raw", "quantity", "unit", "rule"),
    [
        ("1 cup", 1.0, "cup", ParseRule.LEADING_NUMBER),
        ("1.4 oz", 1.4, "oz", ParseRule.LEADING_NUMBER),
        ("12.5g", 12.5, "g", ParseRule.LEADING_NUMBER),
        ("  3 Pieces ", 3.0, "pieces", ParseRule.LEADING_NUMBER),
        ("3 T", 3.0, "t", ParseRule.LEADING_NUMBER),
        ("3", 3.0, "serving", ParseRule.LEADING_NUMBER),
        ("1 1/2 cups", 1.5, "cups", ParseRule.LEADING_NUMBER),
        ("half of cantaloupe", 0.5, "cantaloupe", ParseRule.FRACTION_PHRASE),
        ("1/2 cantaloupe", 0.5, "cantaloupe", ParseRule.FRACTION_PHRASE),
        ("quarter watermelon", 0.25, "watermelon", ParseRule.FRACTION_PHRASE),
        ("third of a pie", 0.33, "a pie", ParseRule.FRACTION_PHRASE),
        ("2/3 cup", 0.67, "cup", ParseRule.FRACTION_PHRASE),
        ("3/4 cup", 0.75, "cup", ParseRule.FRACTION_PHRASE),
        ("1 cup (140g)", 1.0, "cup", ParseRule.PARENTHETICAL),
        ("2 (1/2 cup)", 2.0, "serving", ParseRule.PARENTHETICAL),
        ("slice (28g)", 1.0, "slice", ParseRule.PARENTHETICAL),
        ("1/2", 0.5, "serving", ParseRule.BARE_FRACTION),
    ],
)
def test_parse(parser, raw, quantity, unit, rule) -> None:
    parsed = parser.parse(raw)

    assert parsed.quantity == pytest.approx(quantity)
    assert parsed.unit_text == unit
    assert parsed.rule is rule
    assert parsed.confidence is ParseConfidence.EXACT


@pytest.mark.parametrize("raw", ["", "   "])
def test_empty_input_defaults_to_one_serving(parser, raw) -> None:
    parsed = parser.parse(raw)

    assert parsed.quantity == 1
    assert parsed.unit_text == "serving"
    assert parsed.rule is ParseRule.EMPTY
    assert parsed.is_ambiguous


def test_unparseable_text_is_ambiguous(parser) -> None:
    parsed = parser.parse("A Handful")

    assert parsed.quantity == 1
    assert parsed.unit_text == "a handful"
    assert parsed.rule is ParseRule.FALLBACK
    assert parsed.is_ambiguous


def test_parenthetical_gram_hint_is_ignored(parser) -> None:
    annotated = parser.parse("1 slice (45g)")
    plain = parser.parse("1 slice")

    assert annotated.quantity == plain.quantity
    assert annotated.unit_text == plain.unit_text


@pytest.mark.parametrize(
    ("raw", "quantity", "unit", "rule"),
    [
        ("two thirds of a pie", 0.67, "a pie", ParseRule.FRACTION_PHRASE),
        ("three quarters cup", 0.75, "cup", ParseRule.FRACTION_PHRASE),
        ("Three-Quarters cup", 0.75, "cup", ParseRule.FRACTION_PHRASE),
        ("a half cup", 0.5, "cup", ParseRule.FRACTION_PHRASE),
        ("one third of a cake", 0.33, "a cake", ParseRule.FRACTION_PHRASE),
        ("two cups", 2.0, "cups", ParseRule.LEADING_NUMBER),
        ("Ten pieces", 10.0, "pieces", ParseRule.LEADING_NUMBER),
        ("½ cup", 0.5, "cup", ParseRule.FRACTION_PHRASE),
        ("1½ cups", 1.5, "cups", ParseRule.LEADING_NUMBER),
        ("⅔ cup", 0.67, "cup", ParseRule.FRACTION_PHRASE),
        ("¾", 0.75, "serving", ParseRule.BARE_FRACTION),
    ],
)
def test_parse_spelled_out_quantities(parser, raw, quantity, unit, rule) -> None:
    parsed = parser.parse(raw)

    assert parsed.quantity == pytest.approx(quantity)
    assert parsed.unit_text == unit
    assert parsed.rule is rule
    assert not parsed.is_ambiguous


def test_number_words_after_the_quantity_are_kept(parser) -> None:
    parsed = parser.parse("1 quarter")

    assert parsed.quantity == 1
    assert parsed.unit_text == "quarter"


def test_number_words_inside_other_words_are_kept(parser) -> None:
    parsed = parser.parse("onion")

    assert parsed.unit_text == "onion"
    assert parsed.is_ambiguous
