"""
Command-line interface for contour tracing.

Usage:
    python -m contour_trace trace <image_path> [--color black] [--binarize] [--output json|visual]
    python -m contour_trace binarize <image_path> [--threshold 0.5] [--output-path out.png]
    python -m contour_trace --help
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import cv2


def setup_argparse() -> argparse.ArgumentParser:
    """Set up argument parser."""
    parser = argparse.ArgumentParser(
        prog="contour-trace",
        description="Trace the boundaries of same-colored regions in images",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # trace command
    trace_parser = subparsers.add_parser(
        "trace",
        help="Trace contours of one color and write JSON or an image",
    )
    trace_parser.add_argument(
        "image_path",
        type=str,
        help="Path to the input image",
    )
    trace_parser.add_argument(
        "--color",
        "-c",
        type=str,
        default="black",
        help="Color to trace: name, #rrggbb[aa] or r,g,b[,a] (default: black)",
    )
    trace_parser.add_argument(
        "--contour-color",
        type=str,
        default=None,
        help="Color for contour pixels in visual output (default: from config, black)",
    )
    trace_parser.add_argument(
        "--binarize",
        "-b",
        action="store_true",
        default=None,
        help="Binarize the image before tracing",
    )
    trace_parser.add_argument(
        "--threshold",
        "-t",
        type=float,
        default=None,
        help="Binarization threshold 0-1 (default: 0.5)",
    )
    trace_parser.add_argument(
        "--match",
        choices=["exact", "tolerance"],
        default=None,
        help="Color match policy (default: tolerance)",
    )
    trace_parser.add_argument(
        "--epsilon",
        type=float,
        default=None,
        help="Squared RGB distance tolerance (default: 1e-10)",
    )
    trace_parser.add_argument(
        "--max-revisits",
        type=int,
        default=None,
        help="Pixel visits that end a boundary walk (default: 3)",
    )
    trace_parser.add_argument(
        "--failure-policy",
        choices=["continue", "abort"],
        default=None,
        help="What to do when a walk misses its start row (default: continue)",
    )
    trace_parser.add_argument(
        "--scan-order",
        choices=["left_to_right", "right_to_left"],
        default=None,
        help="Row scan direction (default: left_to_right)",
    )
    trace_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML configuration file",
    )
    trace_parser.add_argument(
        "--output",
        "-o",
        choices=["json", "visual"],
        default="json",
        help="Output format (default: json)",
    )
    trace_parser.add_argument(
        "--output-path",
        type=str,
        help="Output file path (for visual mode)",
    )
    trace_parser.add_argument(
        "--composite",
        action="store_true",
        help="Draw contours over the (binarized) source instead of a white canvas",
    )
    trace_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    # binarize command
    bin_parser = subparsers.add_parser(
        "binarize",
        help="Write a black and white version of an image",
    )
    bin_parser.add_argument(
        "image_path",
        type=str,
        help="Path to the input image",
    )
    bin_parser.add_argument(
        "--threshold",
        "-t",
        type=float,
        default=0.5,
        help="Luminance threshold 0-1 (default: 0.5)",
    )
    bin_parser.add_argument(
        "--output-path",
        type=str,
        help="Output file path (default: <stem>_binarized.png)",
    )
    bin_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser


def _configure_logging(verbose: bool):
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _load_grid(image_path: Path):
    """Load an image as a PixelGrid, or None after reporting the error."""
    from contour_trace.tracing.pixel_grid import PixelGrid

    if not image_path.exists():
        print(f"Error: Image not found: {image_path}", file=sys.stderr)
        return None

    image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        print(f"Error: Could not load image: {image_path}", file=sys.stderr)
        return None

    return PixelGrid.from_image(image)


def _build_config(args):
    """Load the YAML config if given and apply command-line overrides."""
    from contour_trace.config.trace_config import TraceConfig
    from contour_trace.tracing.colors import parse_color

    config = TraceConfig.from_yaml(args.config) if args.config else TraceConfig.default()

    overrides = {
        "match_policy": args.match,
        "epsilon": args.epsilon,
        "max_revisits": args.max_revisits,
        "failure_policy": args.failure_policy,
        "scan_order": args.scan_order,
        "binarize": args.binarize,
        "threshold": args.threshold,
    }
    if args.contour_color is not None:
        overrides["contour_color"] = parse_color(args.contour_color)

    overrides = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(config, **overrides)


def cmd_trace(args) -> int:
    """Handle trace command."""
    from contour_trace.tracing.binarize import binarize
    from contour_trace.tracing.colors import parse_color
    from contour_trace.tracing.render import composite_contours, render_contours
    from contour_trace.tracing.tracer import ContourTracer

    try:
        config = _build_config(args)
        target = parse_color(args.color)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    image_path = Path(args.image_path)
    grid = _load_grid(image_path)
    if grid is None:
        return 1

    if config.binarize:
        binarize(grid, config.threshold)

    result = ContourTracer(grid, config).search(target)

    if args.output == "json":
        output = {
            "image_dimensions": {"width": grid.width, "height": grid.height},
            "config": config.to_dict(),
            "result": result.to_dict(),
        }
        print(json.dumps(output, indent=2))

    elif args.output == "visual":
        if not result.success:
            print(f"Error: Search did not complete: {result.message}", file=sys.stderr)
            return 1

        if args.composite:
            rendered = composite_contours(grid, result, config.contour_color)
        else:
            rendered = render_contours(result, grid.width, grid.height, config.contour_color)

        output_path = args.output_path
        if output_path is None:
            output_path = str(image_path.stem) + "_contour.png"

        if not cv2.imwrite(output_path, rendered.to_image()):
            print(f"Error: Could not write image: {output_path}", file=sys.stderr)
            return 1
        print(f"Contour image saved to: {output_path}")

    return 0 if result.success else 1


def cmd_binarize(args) -> int:
    """Handle binarize command."""
    from contour_trace.tracing.binarize import binarize

    image_path = Path(args.image_path)
    grid = _load_grid(image_path)
    if grid is None:
        return 1

    binarize(grid, args.threshold)

    output_path = args.output_path
    if output_path is None:
        output_path = str(image_path.stem) + "_binarized.png"

    if not cv2.imwrite(output_path, grid.to_image()):
        print(f"Error: Could not write image: {output_path}", file=sys.stderr)
        return 1
    print(f"Binarized image saved to: {output_path}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = setup_argparse()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)

    if args.command == "trace":
        return cmd_trace(args)

    if args.command == "binarize":
        return cmd_binarize(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
