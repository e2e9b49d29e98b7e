"""Command line entry point for inspecting normalization results."""

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from portion_engine.app_logging import configure_logging
from portion_engine.config import Settings
from portion_engine.containers import build_container

if TYPE_CHECKING:
    from collections.abc import Sequence

    from portion_engine.domain.measurements import NormalizationResult
    from portion_engine.domain.nutrition import NutrientSet


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portion-engine",
        description="Normalize a food measurement to grams.",
    )
    parser.add_argument("food", help="Food name, e.g. 'hard candy'")
    parser.add_argument("measurement", help="Measurement text, e.g. '3 pieces'")
    parser.add_argument(
        "--data-dir", type=Path, default=None, help="Override reference tables"
    )
    parser.add_argument(
        "--nutrients",
        action="store_true",
        help="Also print catalogued nutrients scaled to the portion",
    )
    parser.add_argument("--debug", action="store_true", help="Log resolution steps")
    return parser


def main(argv: "Sequence[str] | None" = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    overrides: dict[str, object] = {}
    if args.data_dir is not None:
        overrides["reference_data_dir"] = args.data_dir
    if args.debug:
        overrides["debug"] = True
    settings = Settings(**overrides)
    configure_logging(settings.log_level)

    container = build_container(settings)
    service = container.normalization_service
    result = service.normalize(args.food, args.measurement)
    print(format_result(result))

    if args.nutrients:
        nutrients = service.catalog_nutrients(args.food, args.measurement)
        if nutrients is None:
            print("Nutrients: not in catalogue")
        else:
            print(format_nutrients(nutrients))
    return 0 if result.is_resolved else 1


def format_result(result: "NormalizationResult") -> str:
    """Render a normalization result as plain text lines."""
    parsed = result.parsed
    lines = [
        f"Food: {result.food_name}",
        f"Parsed: {parsed.quantity:g} x {parsed.unit_text!r} ({parsed.rule})",
    ]
    if result.grams is None:
        lines.append(f"Grams: unresolved ({result.detail})")
        if result.fallback_grams is not None:
            lines.append(f"Suggested fallback: {result.fallback_grams:g} g")
    else:
        trust = "authoritative" if result.authoritative else "estimate"
        lines.append(
            f"Grams: {result.grams:g} via {result.resolution_path} "
            f"({trust}; {result.detail})"
        )
    verdict = result.plausibility
    if verdict.warning:
        lines.append(f"Warning: {verdict.warning}")
        lines.append(f"Recommendation: {verdict.recommendation}")
    elif verdict.fda_serving:
        lines.append(f"FDA serving: {verdict.fda_serving}")
    if result.issues:
        lines.append("Issues: " + ", ".join(sorted(result.issues)))
    return "\n".join(lines)


def format_nutrients(nutrients: "NutrientSet") -> str:
    values = nutrients.as_dict()
    return "Nutrients: " + ", ".join(
        f"{name}={value:g}" for name, value in values.items()
    )


if __name__ == "__main__":
    raise SystemExit(main())
