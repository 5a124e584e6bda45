"""FastMCP server creation and tool registration."""

from __future__ import annotations

from fastmcp import FastMCP

from pcb_review import __version__
from pcb_review.analyzers.unified import UnifiedAnalyzer
from pcb_review.config import PCBReviewConfig
from pcb_review.logging_config import get_logger, setup_logging
from pcb_review.tools import analysis

logger = get_logger("server")


def create_server(config: PCBReviewConfig | None = None) -> FastMCP:
    """Create and configure the PCB Review server.

    Args:
        config: Server configuration. Uses defaults/env vars if not provided.

    Returns:
        Configured FastMCP server instance ready to run.
    """
    if config is None:
        config = PCBReviewConfig()

    setup_logging(level=config.log_level.value, log_file=config.log_file)
    logger.info("PCB Review Server v%s starting", __version__)

    # One analyzer per server; point queries reuse the last analyzed project
    analyzer = UnifiedAnalyzer(
        thermal_search_radius=config.thermal_search_radius,
        via_search_radius=config.via_search_radius,
    )

    mcp = FastMCP(
        "PCB Review Server",
        version=__version__,
    )

    analysis.register_tools(mcp, analyzer, config)

    logger.info("Server ready")
    return mcp
