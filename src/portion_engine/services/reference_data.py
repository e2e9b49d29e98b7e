"""Loading of the immutable reference tables."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from portion_engine.domain.reference import (
    CalorieFactors,
    CalorieFactorsFile,
    KeywordFallback,
    KitchenTables,
    NutrientRecord,
    NutrientsFile,
    PortionEntry,
    PortionsFile,
    ReferencePortion,
    ReferencePortionsFile,
    UnitsFile,
)
from portion_engine.domain.units import Unit
from portion_engine.services.matching import normalize_key

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"

_GRAM_ENTRY_DESCRIPTION = "g"

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ReferenceDataError(RuntimeError):
    """Raised when a reference table is missing or malformed."""


@dataclass(frozen=True)
class ReferenceTables:
    """All reference data the engine reads, built once and never mutated."""

    units: tuple[Unit, ...]
    ambiguous_abbreviations: Mapping[str, str]
    kitchen: KitchenTables
    portions: Mapping[str, tuple[PortionEntry, ...]]
    references: Mapping[str, ReferencePortion]
    reference_fallbacks: tuple[KeywordFallback, ...]
    nutrients: Mapping[str, NutrientRecord]
    nutrient_fallbacks: tuple[KeywordFallback, ...]
    calorie_factors: Mapping[str, CalorieFactors]
    default_calorie_factors: CalorieFactors


def load_reference_tables(data_dir: Path | None = None) -> ReferenceTables:
    """Load and freeze the reference tables from ``data_dir``.

    Results are cached per directory, so every caller shares the same
    read-only instance.
    """
    return _load_tables(Path(data_dir or DEFAULT_DATA_DIR).resolve())


@lru_cache(maxsize=4)
def _load_tables(directory: Path) -> ReferenceTables:
    units_file = _read(directory / "units.json", UnitsFile)
    kitchen = _read(directory / "kitchen.json", KitchenTables)
    portions_file = _read(directory / "portions.json", PortionsFile)
    references_file = _read(directory / "fda_racc.json", ReferencePortionsFile)
    nutrients_file = _read(directory / "nutrients.json", NutrientsFile)
    factors_file = _read(directory / "calorie_factors.json", CalorieFactorsFile)

    tables = ReferenceTables(
        units=units_file.units,
        ambiguous_abbreviations=MappingProxyType(
            {
                normalize_key(abbreviation): normalize_key(name)
                for abbreviation, name in units_file.ambiguous_abbreviations.items()
            }
        ),
        kitchen=kitchen,
        portions=build_portion_table(
            portions_file.foods, portions_file.supplementary
        ),
        references=MappingProxyType(
            {
                normalize_key(key): reference.model_copy(
                    update={"food_key": normalize_key(key)}
                )
                for key, reference in references_file.references.items()
            }
        ),
        reference_fallbacks=references_file.keyword_fallbacks,
        nutrients=MappingProxyType(
            {normalize_key(record.name): record for record in nutrients_file.records}
        ),
        nutrient_fallbacks=nutrients_file.keyword_fallbacks,
        calorie_factors=MappingProxyType(
            {
                normalize_key(food): factors
                for food, factors in factors_file.foods.items()
            }
        ),
        default_calorie_factors=factors_file.default,
    )
    _logger.info(
        "Loaded reference tables from %s: units=%s foods=%s references=%s",
        directory,
        len(tables.units),
        len(tables.portions),
        len(tables.references),
    )
    return tables


def build_portion_table(
    foods: Mapping[str, tuple[PortionEntry, ...]],
    supplementary: Mapping[str, tuple[PortionEntry, ...]] | None = None,
) -> Mapping[str, tuple[PortionEntry, ...]]:
    """Merge portion lists and guarantee a 1 g pass-through entry per food.

    Supplementary entries for a food follow its primary list; keys keep
    their first-seen order.
    """
    merged: dict[str, list[PortionEntry]] = {}
    for key, entries in foods.items():
        merged.setdefault(normalize_key(key), []).extend(entries)
    for key, entries in (supplementary or {}).items():
        food_key = normalize_key(key)
        existing = merged.get(food_key, [])
        merged[food_key] = [*existing, *entries]

    frozen: dict[str, tuple[PortionEntry, ...]] = {}
    for food_key, entries in merged.items():
        deduplicated = _drop_duplicate_gram_entries(entries)
        if not any(
            entry.description == _GRAM_ENTRY_DESCRIPTION for entry in deduplicated
        ):
            fdc_id = deduplicated[0].fdc_id if deduplicated else ""
            deduplicated.append(
                PortionEntry(
                    fdc_id=fdc_id,
                    description=_GRAM_ENTRY_DESCRIPTION,
                    gram_weight=1,
                    amount=1,
                )
            )
        frozen[food_key] = tuple(
            entry.model_copy(update={"food_key": food_key}) for entry in deduplicated
        )
    return MappingProxyType(frozen)


def _drop_duplicate_gram_entries(entries: list[PortionEntry]) -> list[PortionEntry]:
    result: list[PortionEntry] = []
    seen_gram_entry = False
    for entry in entries:
        if entry.description == _GRAM_ENTRY_DESCRIPTION:
            if seen_gram_entry:
                continue
            seen_gram_entry = True
        result.append(entry)
    return result


def _read(path: Path, model: type[ModelT]) -> ModelT:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ReferenceDataError(f"Cannot read reference table {path}: {exc}") from exc
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise ReferenceDataError(f"Invalid reference table {path}: {exc}") from exc
