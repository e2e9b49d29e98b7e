"""Free-text measurement parsing."""

import logging
import re
from dataclasses import dataclass

from portion_engine.domain.measurements import (
    ParseConfidence,
    ParsedMeasurement,
    ParseRule,
)

DEFAULT_UNIT = "serving"

_FRACTION_VALUES = {
    "1/2": 0.5,
    "1/4": 0.25,
    "1/3": 0.33,
    "2/3": 0.67,
    "3/4": 0.75,
}

_UNICODE_FRACTIONS = {"½": "1/2", "¼": "1/4", "¾": "3/4", "⅓": "1/3", "⅔": "2/3"}

_QUANTITY_WORDS = {
    "three quarters": "3/4",
    "three-quarters": "3/4",
    "two thirds": "2/3",
    "two-thirds": "2/3",
    "one quarter": "1/4",
    "one third": "1/3",
    "one half": "1/2",
    "a quarter": "1/4",
    "a third": "1/3",
    "a half": "1/2",
    "quarter": "1/4",
    "third": "1/3",
    "half": "1/2",
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
    "ten": "10",
}

# Longest phrase first so "three quarters" wins over "three".
_LEADING_QUANTITY_WORD = re.compile(
    r"^("
    + "|".join(
        re.escape(word) for word in sorted(_QUANTITY_WORDS, key=len, reverse=True)
    )
    + r")\b"
)

_FRACTION_PHRASE = re.compile(r"^(1/2|1/4|1/3|2/3|3/4)(?!\d)\s*(of\s*)?(.+)$")
_PARENTHETICAL = re.compile(r"^(.+?)\s*\((.+?)\)(.*)$")
_MIXED_NUMBER = re.compile(r"^(\d+)\s+(\d+)/(\d+)(?!\d)\s*(.*)$")
_LEADING_NUMBER = re.compile(r"^(\d+(?:\.\d+)?)(?![\d./])\s*(.*)$")
_WORD_NUMBER = re.compile(r"^(\d+)\s+(.+)$")
_BARE_FRACTION = re.compile(r"^(1/2|1/4|3/4|1/3|2/3)(?!\d)\s*(.*)$")

_logger = logging.getLogger(__name__)


@dataclass
class MeasurementParser:
    """Turns strings like ``"1 cup"`` or ``"half of cantaloupe"`` into numbers."""

    debug: bool = False

    def parse(self, raw: str) -> ParsedMeasurement:
        """Parse a measurement; never raises.

        A leading number word ("two", "three quarters", "a half") and Unicode
        fractions are first rewritten as digits. Rules are then tried in
        order and the first match wins: fraction phrase, parenthetical
        annotation, leading number, word number, bare fraction. Anything else
        is kept whole as the unit with quantity 1 and flagged as ambiguous.
        """
        normalized = _words_to_digits(raw.lower().strip())
        if not normalized:
            return ParsedMeasurement(
                quantity=1.0,
                unit_text=DEFAULT_UNIT,
                rule=ParseRule.EMPTY,
                confidence=ParseConfidence.AMBIGUOUS,
            )

        parsed = (
            _parse_fraction_phrase(normalized)
            or _parse_parenthetical(normalized)
            or _parse_leading_number(normalized)
            or _parse_word_number(normalized)
            or _parse_bare_fraction(normalized)
        )
        if parsed is None:
            parsed = ParsedMeasurement(
                quantity=1.0,
                unit_text=normalized,
                rule=ParseRule.FALLBACK,
                confidence=ParseConfidence.AMBIGUOUS,
            )
        if self.debug:
            _logger.info(
                "Parsed measurement %r: quantity=%s unit=%r rule=%s",
                raw,
                parsed.quantity,
                parsed.unit_text,
                parsed.rule,
            )
        return parsed


def _words_to_digits(text: str) -> str:
    for symbol, fraction in _UNICODE_FRACTIONS.items():
        text = text.replace(symbol, f" {fraction} ")
    text = _LEADING_QUANTITY_WORD.sub(
        lambda match: _QUANTITY_WORDS[match.group(1)], text.strip()
    )
    return " ".join(text.split())


def _parse_fraction_phrase(text: str) -> ParsedMeasurement | None:
    match = _FRACTION_PHRASE.match(text)
    if not match:
        return None
    return ParsedMeasurement(
        quantity=_FRACTION_VALUES[match.group(1)],
        unit_text=match.group(3).strip(),
        rule=ParseRule.FRACTION_PHRASE,
    )


def _parse_parenthetical(text: str) -> ParsedMeasurement | None:
    """Use the measurement before the parenthesis and drop the annotation."""
    match = _PARENTHETICAL.match(text)
    if not match:
        return None
    before = match.group(1).strip()
    leading = _parse_leading_number(before)
    if leading is not None:
        return ParsedMeasurement(
            quantity=leading.quantity,
            unit_text=leading.unit_text,
            rule=ParseRule.PARENTHETICAL,
        )
    return ParsedMeasurement(
        quantity=1.0, unit_text=before, rule=ParseRule.PARENTHETICAL
    )


def _parse_leading_number(text: str) -> ParsedMeasurement | None:
    mixed = _MIXED_NUMBER.match(text)
    if mixed and int(mixed.group(3)) > 0:
        whole, numerator, denominator = (int(mixed.group(i)) for i in (1, 2, 3))
        return ParsedMeasurement(
            quantity=whole + numerator / denominator,
            unit_text=mixed.group(4).strip() or DEFAULT_UNIT,
            rule=ParseRule.LEADING_NUMBER,
        )
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    return ParsedMeasurement(
        quantity=float(match.group(1)),
        unit_text=match.group(2).strip() or DEFAULT_UNIT,
        rule=ParseRule.LEADING_NUMBER,
    )


def _parse_word_number(text: str) -> ParsedMeasurement | None:
    # Subsumed by the leading-number rule.
    match = _WORD_NUMBER.match(text)
    if not match:
        return None
    return ParsedMeasurement(
        quantity=float(match.group(1)),
        unit_text=match.group(2).strip(),
        rule=ParseRule.WORD_NUMBER,
    )


def _parse_bare_fraction(text: str) -> ParsedMeasurement | None:
    match = _BARE_FRACTION.match(text)
    if not match:
        return None
    return ParsedMeasurement(
        quantity=_FRACTION_VALUES[match.group(1)],
        unit_text=match.group(2).strip() or DEFAULT_UNIT,
        rule=ParseRule.BARE_FRACTION,
    )
