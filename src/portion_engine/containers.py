"""Dependency container wiring for the engine."""

from dataclasses import dataclass

from portion_engine.config import Settings
from portion_engine.services.converter import UnitConverter
from portion_engine.services.normalization import NormalizationService
from portion_engine.services.nutrients import NutrientCatalog
from portion_engine.services.parser import MeasurementParser
from portion_engine.services.portions import PortionResolver
from portion_engine.services.reference_data import (
    ReferenceTables,
    load_reference_tables,
)
from portion_engine.services.scaler import NutrientScaler
from portion_engine.services.units import UnitRegistry
from portion_engine.services.validator import PortionValidator


@dataclass
class EngineContainer:
    """Holds the engine's shared services."""

    settings: Settings
    tables: ReferenceTables
    unit_registry: UnitRegistry
    parser: MeasurementParser
    portion_resolver: PortionResolver
    converter: UnitConverter
    validator: PortionValidator
    scaler: NutrientScaler
    catalog: NutrientCatalog
    normalization_service: NormalizationService


def build_container(settings: Settings | None = None) -> EngineContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    debug = resolved_settings.debug
    tables = load_reference_tables(resolved_settings.reference_data_dir)

    unit_registry = UnitRegistry(
        units=tables.units,
        ambiguous_abbreviations=tables.ambiguous_abbreviations,
        debug=debug,
    )
    parser = MeasurementParser(debug=debug)
    portion_resolver = PortionResolver(portions=tables.portions, debug=debug)
    converter = UnitConverter(
        registry=unit_registry,
        kitchen=tables.kitchen,
        portions=portion_resolver,
        debug=debug,
    )
    validator = PortionValidator(
        references=tables.references,
        fallbacks=tables.reference_fallbacks,
        debug=debug,
    )
    scaler = NutrientScaler(
        calorie_factors=tables.calorie_factors,
        default_calorie_factors=tables.default_calorie_factors,
        debug=debug,
    )
    catalog = NutrientCatalog(
        records=tables.nutrients,
        fallbacks=tables.nutrient_fallbacks,
        debug=debug,
    )
    normalization_service = NormalizationService(
        parser=parser,
        converter=converter,
        portions=portion_resolver,
        validator=validator,
        scaler=scaler,
        catalog=catalog,
        default_serving_grams=resolved_settings.default_serving_grams,
        debug=debug,
    )
    return EngineContainer(
        settings=resolved_settings,
        tables=tables,
        unit_registry=unit_registry,
        parser=parser,
        portion_resolver=portion_resolver,
        converter=converter,
        validator=validator,
        scaler=scaler,
        catalog=catalog,
        normalization_service=normalization_service,
    )
