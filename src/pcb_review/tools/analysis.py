"""Board analysis tools - 5 tools."""

from __future__ import annotations

import json
import weakref
from pathlib import Path
from typing import Optional

from fastmcp import FastMCP

from pcb_review.analyzers.unified import UnifiedAnalyzer
from pcb_review.analyzers.via_in_pad import detect_via_in_pad
from pcb_review.config import PCBReviewConfig
from pcb_review.logging_config import get_logger
from pcb_review.models.errors import ComponentNotFoundError
from pcb_review.utils.validation import (
    validate_net_name,
    validate_positive,
    validate_project_dir,
    validate_reference,
)

logger = get_logger("tools.analysis")


# Modification stamps of the project files each analyzer last loaded.
_loaded_stamps: "weakref.WeakKeyDictionary[UnifiedAnalyzer, tuple]" = weakref.WeakKeyDictionary()


def _project_stamp(project_dir: Path) -> tuple:
    return tuple(sorted(
        (f.name, f.stat().st_mtime_ns, f.stat().st_size)
        for f in project_dir.iterdir()
        if f.suffix.lower() in (".kicad_pcb", ".kicad_sch")
    ))


def _ensure_analyzed(analyzer: UnifiedAnalyzer, project_dir: str) -> None:
    """Run the analysis unless the analyzer already holds this project.

    A cached analysis is reused only while the project's board and schematic
    files are unchanged on disk; any edit triggers a fresh parse.
    """
    p = validate_project_dir(project_dir)
    stamp = _project_stamp(p)
    if (
        analyzer.pcb is None
        or analyzer.project_path != str(p)
        or _loaded_stamps.get(analyzer) != stamp
    ):
        analyzer.analyze(str(p), include_raw_data=False)
        _loaded_stamps[analyzer] = stamp
        logger.debug("Loaded project %s for point queries", p)


def _impl_analyze_project(
    project_dir: str,
    include_raw_data: bool,
    analyzer: UnifiedAnalyzer,
) -> str:
    p = validate_project_dir(project_dir)
    stamp = _project_stamp(p)
    result = analyzer.analyze(str(p), include_raw_data=include_raw_data)
    _loaded_stamps[analyzer] = stamp
    return json.dumps({"status": "success", "analysis": result.to_dict()}, indent=2)


def _impl_get_components_on_net(
    project_dir: str,
    net_name: str,
    analyzer: UnifiedAnalyzer,
) -> str:
    validate_net_name(net_name)
    _ensure_analyzed(analyzer, project_dir)
    components = analyzer.get_components_on_net(net_name)
    return json.dumps({
        "status": "success",
        "net": net_name,
        "components": components,
        "count": len(components),
    }, indent=2)


def _impl_trace_signal_path(
    project_dir: str,
    start: str,
    end: str,
    analyzer: UnifiedAnalyzer,
) -> str:
    validate_reference(start)
    validate_reference(end)
    _ensure_analyzed(analyzer, project_dir)
    path = analyzer.trace_signal_path(start, end)
    if path is None:
        return json.dumps({
            "status": "success",
            "found": False,
            "path": None,
            "message": f"No connection found between {start} and {end}",
        }, indent=2)
    return json.dumps({
        "status": "success",
        "found": True,
        "path": path,
        "hops": sum(1 for step in path if not step.startswith("[")) - 1,
    }, indent=2)


def _impl_find_vias_near_component(
    project_dir: str,
    reference: str,
    radius: Optional[float],
    analyzer: UnifiedAnalyzer,
    config: PCBReviewConfig,
) -> str:
    validate_reference(reference)
    if radius is not None:
        validate_positive(radius, "radius")
    _ensure_analyzed(analyzer, project_dir)

    report = analyzer.analyze_thermal_vias(reference, radius or config.via_search_radius)
    if report is None:
        raise ComponentNotFoundError(
            f"Component not found on board: {reference}",
            {"reference": reference},
        )
    return json.dumps({"status": "success", **report.to_dict()}, indent=2)


def _impl_find_via_in_pad(project_dir: str, analyzer: UnifiedAnalyzer) -> str:
    _ensure_analyzed(analyzer, project_dir)
    findings = [f.to_dict() for f in detect_via_in_pad(analyzer.pcb)]
    return json.dumps({"status": "success", "count": len(findings), "viaInPad": findings}, indent=2)


def register_tools(mcp: FastMCP, analyzer: UnifiedAnalyzer, config: PCBReviewConfig) -> None:
    """Register board analysis tools on the MCP server.

    The point query tools share the analyzer's last analysis of a project and
    re-parse it only when its board or schematic files change on disk.
    """

    @mcp.tool()
    def analyze_project(project_dir: str, include_raw_data: bool = False) -> str:
        """Analyze a KiCad project (PCB plus optional schematics).

        Args:
            project_dir: Directory holding the .kicad_pcb and .kicad_sch files.
            include_raw_data: Also return the extracted PCB/schematic records.

        Returns:
            JSON with the full structured analysis.
        """
        return _impl_analyze_project(project_dir, include_raw_data or config.include_raw_data, analyzer)

    @mcp.tool()
    def get_components_on_net(project_dir: str, net_name: str) -> str:
        """List the components connected to a net.

        Args:
            project_dir: KiCad project directory.
            net_name: Net name, e.g. GND, /sheet1/SDA or Net-(R1-Pad1).

        Returns:
            JSON with the sorted component references.
        """
        return _impl_get_components_on_net(project_dir, net_name, analyzer)

    @mcp.tool()
    def trace_signal_path(project_dir: str, start: str, end: str) -> str:
        """Find the shortest chain of components connecting two parts.

        Args:
            project_dir: KiCad project directory.
            start: Starting reference designator.
            end: Target reference designator.

        Returns:
            JSON with the path, alternating references and [NET] hops.
        """
        return _impl_trace_signal_path(project_dir, start, end, analyzer)

    @mcp.tool()
    def find_vias_near_component(project_dir: str, reference: str, radius: Optional[float] = None) -> str:
        """Find vias within a radius of a component's origin.

        Args:
            project_dir: KiCad project directory.
            reference: Component reference designator.
            radius: Search radius in mm (default from configuration).

        Returns:
            JSON with the vias sorted by distance.
        """
        return _impl_find_vias_near_component(project_dir, reference, radius, analyzer, config)

    @mcp.tool()
    def find_via_in_pad(project_dir: str) -> str:
        """Find same-net vias placed inside SMD pads.

        Args:
            project_dir: KiCad project directory.

        Returns:
            JSON with one entry per via-in-pad occurrence.
        """
        return _impl_find_via_in_pad(project_dir, analyzer)
