"""Plausibility checks of gram weights against FDA reference portions."""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from portion_engine.domain.measurements import Issue, PortionVerdict
from portion_engine.domain.reference import KeywordFallback, ReferencePortion
from portion_engine.services.matching import fuzzy_find

LARGE_RATIO = 2.0
SMALL_RATIO = 0.3

_logger = logging.getLogger(__name__)


@dataclass
class PortionValidator:
    """Advisory check of a portion against the FDA RACC table."""

    references: Mapping[str, ReferencePortion]
    fallbacks: Sequence[KeywordFallback] = ()
    debug: bool = False

    def reference(self, food_name: str) -> ReferencePortion | None:
        """Find the reference portion for a food name."""
        match = fuzzy_find(food_name, self.references, self.fallbacks)
        return match.value if match else None

    def validate(self, food_name: str, grams: float) -> PortionVerdict:
        """Compare ``grams`` with the reference serving of the food.

        Foods without reference data are always reasonable.
        """
        reference = self.reference(food_name)
        if reference is None:
            if self.debug:
                _logger.info("No reference portion for %r", food_name)
            return PortionVerdict(
                is_reasonable=True, issue=Issue.REFERENCE_DATA_MISSING
            )

        ratio = grams / reference.reference_grams
        if grams > reference.effective_threshold or ratio > LARGE_RATIO:
            verdict = _implausible(
                reference, grams, ratio, f"{_round_half_up(ratio)}x larger"
            )
        elif ratio < SMALL_RATIO:
            verdict = _implausible(reference, grams, ratio, "seems too small")
        else:
            verdict = PortionVerdict(
                is_reasonable=True,
                fda_serving=reference.common_description,
                ratio=ratio,
            )
        if self.debug:
            _logger.info(
                "Portion check: food=%s grams=%s reference=%s ratio=%.2f reasonable=%s",
                food_name,
                grams,
                reference.food_key,
                ratio,
                verdict.is_reasonable,
            )
        return verdict

    def visual_reference(self, food_name: str) -> str | None:
        """Return a household comparison for the food's reference serving."""
        reference = self.reference(food_name)
        return reference.visual_reference if reference else None


def _implausible(
    reference: ReferencePortion, grams: float, ratio: float, verdict: str
) -> PortionVerdict:
    alternatives = " • ".join(reference.alternative_units) or "standard serving"
    return PortionVerdict(
        is_reasonable=False,
        warning=(
            f"Your portion ({_format_grams(grams)}g) vs FDA standard "
            f"({_format_grams(reference.reference_grams)}g) - {verdict}"
        ),
        recommendation=f"Try: {reference.common_description} • Or: {alternatives}",
        fda_serving=reference.common_description,
        ratio=ratio,
        issue=Issue.PORTION_IMPLAUSIBLE,
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _format_grams(grams: float) -> str:
    if float(grams).is_integer():
        return str(int(grams))
    return str(round(grams, 2))
