"""
Command-line interface for the cube sketch analyzer.

Provides commands for analyzing a saved stroke file and writing a default
configuration.
"""

import argparse
import os
import sys

from cubesketch.config import load_config, save_default_config
from cubesketch.tracer import configure_tracer, get_tracer


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Cube Sketch: score hand-drawn two-point perspective cubes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a stroke file")
    analyze_parser.add_argument(
        "--input", "-i",
        required=True,
        help="JSON file with strokes, width and height",
    )
    analyze_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    analyze_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    analyze_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    analyze_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    analyze_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    analyze_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="cubesketch_config.yaml",
        help="Output path for config file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "analyze":
        return handle_analyze(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_analyze(args):
    """Handle the analyze command."""
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )

    tracer = get_tracer()

    try:
        from cubesketch.io.load_strokes import load_request
        from cubesketch.io.save_artifacts import save_data_uri_png, save_json
        from cubesketch.pipeline import analyze_request

        with tracer.span("cli_analyze", module="cli"):
            request = load_request(args.input)
            result = analyze_request(request, config)

            save_json(result, os.path.join(args.out, "result.json"))
            save_data_uri_png(result.image_data, os.path.join(args.out, "overlay.png"))
    except Exception as e:
        tracer.event(f"Analysis failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1
    finally:
        tracer.config.close()

    print("\nAnalysis completed.")
    for idx, score in enumerate(result.line_scores):
        print(f"  Line {idx + 1}: {score:5.1f}")
    print(f"  Average line score: {result.average_line_score:.1f}")
    print(f"  Left VP:  {_format_vp(result.left_vp, result.convergence_error_l)}")
    print(f"  Right VP: {_format_vp(result.right_vp, result.convergence_error_r)}")
    print(f"  Perspective score: {result.perspective_score:.1f}")

    failed = [c for c in result.checks if not c.passed]
    if failed:
        print(f"\nNotes ({result.warning_count} warning(s)):")
        for check in failed:
            print(f"  [{check.severity.value.upper()}] {check.rule_id}: {check.message}")

    print(f"\nOutputs saved to: {args.out}/")
    print("  - result.json")
    print("  - overlay.png")

    return 0


def _format_vp(point, error):
    if point is None:
        return "unavailable"
    return f"({point.x:.1f}, {point.y:.1f}) convergence error {error:.2f}"


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
