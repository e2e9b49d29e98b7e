"""Lookup of bundled per-100 g nutrient profiles."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from portion_engine.domain.reference import KeywordFallback, NutrientRecord, ServingSize
from portion_engine.services.matching import fuzzy_find

_logger = logging.getLogger(__name__)


@dataclass
class NutrientCatalog:
    """Confectionery nutrient catalogue keyed by lower-case food name."""

    records: Mapping[str, NutrientRecord]
    fallbacks: Sequence[KeywordFallback] = ()
    debug: bool = False

    def find(self, food_name: str) -> NutrientRecord | None:
        """Find a record by exact name, substring, then category keywords."""
        match = fuzzy_find(food_name, self.records, self.fallbacks)
        if match is None:
            if self.debug:
                _logger.info("No catalogue record for %r", food_name)
            return None
        if self.debug:
            _logger.info(
                "Catalogue match: %r -> %s (%s)", food_name, match.key, match.strategy
            )
        return match.value

    def serving_sizes(self, food_name: str) -> tuple[ServingSize, ...]:
        """Return the named servings of a catalogued food."""
        record = self.find(food_name)
        return record.serving_sizes if record else ()
