"""CLI entry point: pcb-review / python -m pcb_review"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pcb_review import __version__
from pcb_review.config import LogLevel, PCBReviewConfig, TransportType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcb-review",
        description="PCB Review - KiCad analysis tool for LLM-assisted PCB review",
        epilog=(
            "Writes summary.json, power.json, signals.json, components.json and "
            "dfm.json into the output directory."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"pcb-review {__version__}",
    )
    parser.add_argument(
        "project_dir",
        nargs="?",
        help="KiCad project directory (holding the .kicad_pcb file)",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output directory for analysis files (default: ./analysis)",
    )
    parser.add_argument(
        "-r", "--raw",
        action="store_true",
        help="Include raw parsed data in output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress console output",
    )
    parser.add_argument(
        "-s", "--summary",
        action="store_true",
        help="Print analysis summary to console",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the MCP tool server instead of a one-off analysis",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=None,
        help="MCP transport when serving (default: stdio)",
    )
    parser.add_argument(
        "--sse-host",
        default=None,
        help="SSE server host (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--sse-port",
        type=int,
        default=None,
        help="SSE server port (default: 8765)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Build config from CLI args + env vars
    overrides = {}
    if args.log_level:
        overrides["log_level"] = LogLevel(args.log_level)
    if args.output:
        overrides["output_dir"] = Path(args.output)
    if args.raw:
        overrides["include_raw_data"] = True
    if args.transport:
        overrides["transport"] = TransportType(args.transport)
    if args.sse_host:
        overrides["sse_host"] = args.sse_host
    if args.sse_port:
        overrides["sse_port"] = args.sse_port

    config = PCBReviewConfig(**overrides)

    if args.serve:
        from pcb_review.server import create_server
        mcp = create_server(config)
        if config.transport == TransportType.SSE:
            mcp.run(transport="sse", host=config.sse_host, port=config.sse_port)
        else:
            mcp.run(transport="stdio")
        return 0

    if not args.project_dir:
        parser.error("project_dir is required unless --serve is given")

    return _run_analysis(args, config)


def _run_analysis(args: argparse.Namespace, config: PCBReviewConfig) -> int:
    from pcb_review.analyzers.unified import UnifiedAnalyzer
    from pcb_review.logging_config import setup_logging
    from pcb_review.models.errors import PCBReviewError
    from pcb_review.reporting import format_summary, write_analysis_files

    logger = setup_logging(level=config.log_level.value, log_file=config.log_file)

    project_dir = Path(args.project_dir).resolve()
    if not args.quiet:
        print(f"Analyzing KiCad project: {project_dir}")

    analyzer = UnifiedAnalyzer(
        thermal_search_radius=config.thermal_search_radius,
        via_search_radius=config.via_search_radius,
    )
    try:
        result = analyzer.analyze(str(project_dir), include_raw_data=config.include_raw_data)
    except PCBReviewError as e:
        logger.error("Error analyzing project: %s", e)
        print(f"Error analyzing project: {e}", file=sys.stderr)
        return 1

    if args.summary and not args.quiet:
        print(format_summary(result))

    output_dir = config.output_dir.resolve()
    written = write_analysis_files(output_dir, result)
    if not args.quiet:
        print(f"Analysis written to: {output_dir}/")
        for path in written:
            print(f"  - {path.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
