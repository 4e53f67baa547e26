"""Command-line entry point for checking auto-fit results by hand.

Example:
    autofit "Hello World" --width 200 --height 60 --max-size 72 --max-lines 1
"""

import argparse
import json
import logging
import sys

from autofit.config import get_settings
from autofit.dsl.schema import FitOutcome, FitRequest, FontStyle, StyleConfig, WrapMode
from autofit.engine.resolver import FontSizeResolver
from autofit.engine.text_measure import PillowMeasurementOracle

EXIT_UNSATISFIABLE = 2


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="autofit",
        description="Resolve the largest font size that fits text in a box",
    )
    parser.add_argument("text", help="Text to fit (use \\n for explicit line breaks)")
    parser.add_argument("--width", type=float, required=True, help="Box width in px")
    parser.add_argument("--height", type=float, required=True, help="Box height in px")
    parser.add_argument("--min-size", type=int, default=settings.default_min_font_size)
    parser.add_argument("--max-size", type=int, default=settings.default_max_font_size)
    parser.add_argument("--max-lines", type=int, default=None, help="Hard ceiling on line count")
    parser.add_argument("--font-family", default=settings.default_font_family)
    parser.add_argument("--font-weight", default="normal")
    parser.add_argument("--italic", action="store_true", help="Use the italic variant")
    parser.add_argument("--line-height", type=float, default=settings.default_line_height)
    parser.add_argument("--letter-spacing", type=float, default=0.0, help="In 1/1000 em")
    parser.add_argument("--stroke-width", type=float, default=0.0)
    parser.add_argument("--wrap", choices=[m.value for m in WrapMode], default=WrapMode.WORD.value)
    parser.add_argument(
        "--font-dir",
        action="append",
        default=None,
        help="Extra font directory (repeatable)",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    settings = get_settings()
    try:
        request = FitRequest(
            text=args.text.replace("\\n", "\n"),
            box_width=args.width,
            box_height=args.height,
            style=StyleConfig(
                font_family=args.font_family,
                font_weight=args.font_weight,
                font_style=FontStyle.ITALIC if args.italic else FontStyle.NORMAL,
                line_height=args.line_height,
                letter_spacing=args.letter_spacing,
                wrap_mode=WrapMode(args.wrap),
                stroke_width=args.stroke_width,
            ),
            min_size=args.min_size,
            max_size=args.max_size,
            max_lines=args.max_lines,
        )
    except ValueError as e:
        parser.error(str(e))

    oracle = PillowMeasurementOracle(font_dirs=(args.font_dir or []) + settings.font_dirs)
    resolver = FontSizeResolver(
        oracle,
        max_iterations=settings.max_search_iterations,
        height_tolerance=settings.height_tolerance,
    )
    result = resolver.resolve(request)

    output = result.model_dump(mode="json")
    if not request.is_degenerate and resolver.oracle_available:
        measurement = oracle.measure(request.text, request.box_width, result.font_size, request.style)
        output["rendered_height"] = round(measurement.rendered_height, 2)
        output["line_count"] = measurement.line_count
        output["lines"] = list(measurement.lines)

    print(json.dumps(output, indent=2))
    return EXIT_UNSATISFIABLE if result.outcome == FitOutcome.UNSATISFIABLE else 0


if __name__ == "__main__":
    sys.exit(main())
