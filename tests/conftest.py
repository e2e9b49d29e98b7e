"""Shared test fixtures."""

import pytest

from portion_engine.config import Settings
from portion_engine.domain.reference import PortionEntry, ReferencePortion
from portion_engine.services.converter import UnitConverter
from portion_engine.services.normalization import NormalizationService
from portion_engine.services.nutrients import NutrientCatalog
from portion_engine.services.parser import MeasurementParser
from portion_engine.services.portions import PortionResolver
from portion_engine.services.reference_data import (
    ReferenceTables,
    build_portion_table,
    load_reference_tables,
)
from portion_engine.services.scaler import NutrientScaler
from portion_engine.services.units import UnitRegistry
from portion_engine.services.validator import PortionValidator


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def tables() -> ReferenceTables:
    return load_reference_tables()


@pytest.fixture
def registry(tables: ReferenceTables) -> UnitRegistry:
    return UnitRegistry(
        units=tables.units, ambiguous_abbreviations=tables.ambiguous_abbreviations
    )


@pytest.fixture
def parser() -> MeasurementParser:
    return MeasurementParser()


@pytest.fixture
def resolver(tables: ReferenceTables) -> PortionResolver:
    return PortionResolver(portions=tables.portions)


@pytest.fixture
def converter(
    tables: ReferenceTables, registry: UnitRegistry, resolver: PortionResolver
) -> UnitConverter:
    return UnitConverter(registry=registry, kitchen=tables.kitchen, portions=resolver)


@pytest.fixture
def validator(tables: ReferenceTables) -> PortionValidator:
    return PortionValidator(
        references=tables.references, fallbacks=tables.reference_fallbacks
    )


@pytest.fixture
def scaler(tables: ReferenceTables) -> NutrientScaler:
    return NutrientScaler(
        calorie_factors=tables.calorie_factors,
        default_calorie_factors=tables.default_calorie_factors,
    )


@pytest.fixture
def catalog(tables: ReferenceTables) -> NutrientCatalog:
    return NutrientCatalog(
        records=tables.nutrients, fallbacks=tables.nutrient_fallbacks
    )


@pytest.fixture
def service(
    parser: MeasurementParser,
    converter: UnitConverter,
    resolver: PortionResolver,
    validator: PortionValidator,
    scaler: NutrientScaler,
    catalog: NutrientCatalog,
) -> NormalizationService:
    return NormalizationService(
        parser=parser,
        converter=converter,
        portions=resolver,
        validator=validator,
        scaler=scaler,
        catalog=catalog,
    )


@pytest.fixture
def reference_validator() -> PortionValidator:
    """Validator with a single 100 g reference and a 300 g threshold."""
    reference = ReferencePortion(
        category="test",
        reference_grams=100,
        common_description="1 portion",
        alternative_units=("1 cup", "2 scoops"),
        warning_threshold=300,
        food_key="test food",
    )
    return PortionValidator(references={"test food": reference})


@pytest.fixture
def small_portion_table():
    """Two foods whose descriptors exercise ordering rules."""
    return build_portion_table(
        {
            "widget": (
                PortionEntry(fdc_id="1", description="small piece", gram_weight=3),
                PortionEntry(fdc_id="1", description="piece", gram_weight=6),
                PortionEntry(fdc_id="1", description="medium", gram_weight=50),
            ),
            "gadget": (
                PortionEntry(fdc_id="2", description="slice", gram_weight=20),
                PortionEntry(fdc_id="2", description="cup", gram_weight=120),
            ),
        }
    )
