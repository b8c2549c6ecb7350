"""
Command-line interface for State Sketch.

Developer tooling around the judge: score a drawing file, list regions,
write a default configuration.
"""

import argparse
import json
import sys

from statesketch.config import load_config, save_default_config
from statesketch.errors import StateSketchError
from statesketch.regions import US_STATES, get_override, slugify_region
from statesketch.tracer import configure_tracer, get_tracer


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="State Sketch: score a free-hand sketch against a US state outline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Judge command
    judge_parser = subparsers.add_parser("judge", help="Score a drawing")
    judge_parser.add_argument(
        "--image", "-i",
        required=True,
        help="Drawing image file (dark strokes on white)",
    )
    judge_parser.add_argument(
        "--region", "-r",
        required=True,
        help="Region name, e.g. \"New York\"",
    )
    judge_parser.add_argument(
        "--outlines",
        default=None,
        help="Directory of <slug>.png outline assets (overrides config)",
    )
    judge_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    judge_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON",
    )
    judge_parser.add_argument(
        "--debug",
        default=None,
        metavar="OUT_DIR",
        help="Write debug masks and metrics under OUT_DIR",
    )
    judge_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    judge_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    judge_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    judge_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    # Regions command
    regions_parser = subparsers.add_parser("regions", help="List known regions")
    regions_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="statesketch_config.yaml",
        help="Output path for config file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "judge":
        return handle_judge(args)
    elif args.command == "regions":
        return handle_regions(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_judge(args):
    """Handle the judge command."""
    config = load_config(args.config)

    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )

    tracer = get_tracer()

    if args.outlines:
        config.assets.outline_dir = args.outlines

    try:
        from statesketch.io.save_artifacts import DebugArtifactWriter
        from statesketch.judge import judge_drawing, run_id_for

        with open(args.image, "rb") as f:
            data = f.read()

        debug_writer = None
        debug_dir = args.debug or (config.debug.out_dir if config.debug.enabled else None)
        if debug_dir:
            debug_writer = DebugArtifactWriter(
                debug_dir, run_id_for(data, args.region),
                enabled=True,
                max_edge=config.debug.max_edge_scale,
            )

        with tracer.span("cli_judge", module="cli"):
            result = judge_drawing(data, args.region, config=config, debug_writer=debug_writer)

    except (StateSketchError, OSError) as e:
        tracer.event(f"Judging failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1
    finally:
        tracer.config.close()

    if args.json:
        print(json.dumps(result.model_dump(), indent=2))
    else:
        print(f"\n{args.region}: {result.score}%")
        print(f"  {result.critique}")
        print(f"  precision={result.precision:.3f} recall={result.recall:.3f} ratio={result.ratio:.3f}")

    return 0


def handle_regions(args):
    """Handle the regions command."""
    config = load_config(args.config)

    for name in US_STATES:
        marker = "  (override)" if get_override(name, config) else ""
        print(f"{name:<16} {slugify_region(name)}{marker}")

    return 0


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
