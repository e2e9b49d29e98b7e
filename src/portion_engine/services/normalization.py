"""Host-facing facade: measurement text to grams, nutrients and a verdict."""

import logging
from dataclasses import dataclass

from portion_engine.domain.measurements import (
    Issue,
    NormalizationResult,
    ParsedMeasurement,
    PortionVerdict,
    ResolutionPath,
    ResolvedWeight,
    Unresolved,
    UnresolvedReason,
)
from portion_engine.domain.nutrition import NutrientSet
from portion_engine.domain.units import VolumeUnit
from portion_engine.services.converter import UnitConverter
from portion_engine.services.nutrients import NutrientCatalog
from portion_engine.services.parser import MeasurementParser
from portion_engine.services.portions import PortionResolver
from portion_engine.services.scaler import NutrientScaler
from portion_engine.services.validator import PortionValidator

_logger = logging.getLogger(__name__)


@dataclass
class NormalizationService:
    """Normalize food measurements to grams and scale nutrients."""

    parser: MeasurementParser
    converter: UnitConverter
    portions: PortionResolver
    validator: PortionValidator
    scaler: NutrientScaler
    catalog: NutrientCatalog
    default_serving_grams: float = 100.0
    debug: bool = False

    def normalize(self, food_name: str, raw_measurement: str) -> NormalizationResult:
        """Resolve a free-text measurement of a food to grams.

        Only an unresolved unit leaves ``grams`` empty. Plausibility is
        advisory and never changes the weight.
        """
        parsed = self.parser.parse(raw_measurement)
        issues: set[Issue] = set()
        if parsed.is_ambiguous:
            issues.add(Issue.PARSE_AMBIGUOUS)

        weight = self.converter.to_grams(parsed.quantity, parsed.unit_text, food_name)
        if (
            isinstance(weight, ResolvedWeight)
            and weight.resolution_path is ResolutionPath.DIRECT_UNIT
            and not weight.authoritative
        ):
            refined = self._listed_portion(food_name, parsed)
            if refined is not None:
                weight = refined

        if isinstance(weight, Unresolved):
            issues.add(Issue.UNIT_UNRESOLVED)
            if weight.reason is UnresolvedReason.UNKNOWN_FOOD:
                issues.add(Issue.REFERENCE_DATA_MISSING)
            if self.debug:
                _logger.warning(
                    "Unresolved measurement: food=%r raw=%r reason=%s",
                    food_name,
                    raw_measurement,
                    weight.reason,
                )
            return NormalizationResult(
                food_name=food_name,
                raw_measurement=raw_measurement,
                parsed=parsed,
                grams=None,
                resolution_path=None,
                authoritative=False,
                plausibility=PortionVerdict(is_reasonable=True),
                issues=frozenset(issues),
                detail=weight.detail or str(weight.reason),
                fallback_grams=self.default_serving_grams,
            )

        verdict = self.validator.validate(food_name, weight.grams)
        if verdict.issue is not None:
            issues.add(verdict.issue)
        if self.debug:
            _logger.info(
                "Normalized %r of %r: grams=%s path=%s authoritative=%s",
                raw_measurement,
                food_name,
                weight.grams,
                weight.resolution_path,
                weight.authoritative,
            )
        return NormalizationResult(
            food_name=food_name,
            raw_measurement=raw_measurement,
            parsed=parsed,
            grams=weight.grams,
            resolution_path=weight.resolution_path,
            authoritative=weight.authoritative,
            plausibility=verdict,
            issues=frozenset(issues),
            detail=weight.detail,
        )

    def _listed_portion(
        self, food_name: str, parsed: ParsedMeasurement
    ) -> ResolvedWeight | None:
        """Find a listed portion named by the unit text or its canonical unit."""
        descriptors = [parsed.unit_text]
        unit_ref = self.converter.registry.resolve(parsed.unit_text)
        if isinstance(unit_ref, VolumeUnit) and not unit_ref.ambiguous:
            descriptors.append(unit_ref.unit.name)
        for descriptor in descriptors:
            refined = self.portions.resolve_exact(
                food_name, parsed.quantity, descriptor
            )
            if refined is not None:
                return refined
        return None

    def scale_nutrients(
        self, nutrients_per_100g: NutrientSet, grams: float
    ) -> NutrientSet:
        """Scale a per-100 g nutrient set to ``grams``."""
        return self.scaler.scale(nutrients_per_100g, grams)

    def catalog_nutrients(
        self, food_name: str, raw_measurement: str
    ) -> NutrientSet | None:
        """Normalize a measurement and scale the catalogued nutrients for it."""
        record = self.catalog.find(food_name)
        if record is None:
            return None
        result = self.normalize(food_name, raw_measurement)
        if result.grams is None:
            return None
        return self.scale_nutrients(record.per_100g, result.grams)
