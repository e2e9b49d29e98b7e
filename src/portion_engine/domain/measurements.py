"""Domain models for parsed measurements and resolved weights."""

from dataclasses import dataclass, field
from enum import StrEnum


class ParseRule(StrEnum):
    """Parser rule that produced a measurement."""

    EMPTY = "empty"
    FRACTION_PHRASE = "fraction-phrase"
    PARENTHETICAL = "parenthetical"
    LEADING_NUMBER = "leading-number"
    WORD_NUMBER = "word-number"
    BARE_FRACTION = "bare-fraction"
    FALLBACK = "fallback"


class ParseConfidence(StrEnum):
    """How much the parser trusts its own output."""

    EXACT = "exact"
    AMBIGUOUS = "ambiguous"


class ResolutionPath(StrEnum):
    """Strategy that produced a gram weight."""

    DIRECT_UNIT = "direct-unit"
    DENSITY = "density"
    PORTION_LOOKUP = "portion-lookup"
    DEFAULT_FALLBACK = "default-fallback"


class UnresolvedReason(StrEnum):
    """Why no gram weight could be produced."""

    NEGATIVE_QUANTITY = "negative-quantity"
    NO_INGREDIENT = "no-ingredient"
    UNKNOWN_FOOD = "unknown-food"
    NO_PORTIONS = "no-portions"
    NOT_IN_TABLE = "not-in-table"


class Issue(StrEnum):
    """Conditions reported alongside a normalization result."""

    PARSE_AMBIGUOUS = "parse-ambiguous"
    UNIT_UNRESOLVED = "unit-unresolved"
    PORTION_IMPLAUSIBLE = "portion-implausible"
    REFERENCE_DATA_MISSING = "reference-data-missing"


@dataclass(frozen=True)
class ParsedMeasurement:
    """Quantity and unit text extracted from a free-text measurement."""

    quantity: float
    unit_text: str
    rule: ParseRule
    confidence: ParseConfidence = ParseConfidence.EXACT

    @property
    def is_ambiguous(self) -> bool:
        """Return True when only the fallback rule matched."""
        return self.confidence is ParseConfidence.AMBIGUOUS


@dataclass(frozen=True)
class ResolvedWeight:
    """Gram weight together with how it was derived."""

    grams: float
    resolution_path: ResolutionPath
    authoritative: bool = True
    detail: str = ""


@dataclass(frozen=True)
class Unresolved:
    """No conversion path produced a gram weight."""

    raw_text: str
    reason: UnresolvedReason
    detail: str = ""


@dataclass(frozen=True)
class PortionVerdict:
    """Plausibility of a gram weight against a reference serving."""

    is_reasonable: bool
    warning: str | None = None
    recommendation: str | None = None
    fda_serving: str | None = None
    ratio: float | None = None
    issue: Issue | None = None


@dataclass(frozen=True)
class OilSubstitution:
    """Amount of oil that replaces a measured amount of butter."""

    amount: float
    unit: str


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of normalizing one food measurement to grams."""

    food_name: str
    raw_measurement: str
    parsed: ParsedMeasurement
    grams: float | None
    resolution_path: ResolutionPath | None
    authoritative: bool
    plausibility: PortionVerdict
    issues: frozenset[Issue] = field(default_factory=frozenset)
    detail: str = ""
    fallback_grams: float | None = None

    @property
    def is_resolved(self) -> bool:
        """Return True when a gram weight is available."""
        return self.grams is not None
