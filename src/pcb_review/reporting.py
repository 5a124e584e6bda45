"""Split an analysis into focused JSON documents and format a console summary."""

from __future__ import annotations

import json
from pathlib import Path

from pcb_review.logging_config import get_logger
from pcb_review.models.analysis import AnalysisResult

logger = get_logger("reporting")

ANALYSIS_FILES = ("summary", "power", "signals", "components", "dfm")
SUMMARY_LIST_LIMIT = 10


def split_analysis(result: AnalysisResult) -> dict[str, dict]:
    """Break one result into the documents written by :func:`write_analysis_files`.

    Returns:
        Mapping of document name (``summary``, ``power``, ``signals``,
        ``components``, ``dfm``) to a JSON-compatible dict.
    """
    data = result.to_dict()
    stackup = data["layerStackup"]
    by_type = data["components"]["byType"]

    return {
        "summary": {
            "projectPath": data["projectPath"],
            "timestamp": data["timestamp"],
            "overview": data["summary"],
            "layerStackup": stackup,
            "warnings": data["warnings"],
        },
        "power": {
            "projectPath": data["projectPath"],
            "powerNets": data["powerNets"],
            "layerStackup": {
                "zones": stackup["zones"],
                "zoneLayers": stackup["zoneLayers"],
            },
            "decouplingCaps": by_type.get("CAPACITOR", []),
            "regulators": by_type.get("IC_POWER", []),
            "thermalAnalysis": data["thermalAnalysis"],
        },
        "signals": {
            "projectPath": data["projectPath"],
            "differentialPairs": data["differentialPairs"],
            "traceStats": data["traceStats"],
            "viaStats": data["viaStats"],
            "layerStackup": {
                "copperLayers": stackup["copperLayers"],
                "routedLayers": stackup["routedLayers"],
                "layerUsage": stackup["layerUsage"],
                "zones": stackup["zones"],
            },
            "signalNets": data["signalNets"],
        },
        "components": {
            "projectPath": data["projectPath"],
            "summary": {
                "total": data["summary"]["totalComponents"],
                "byType": {kind: len(items) for kind, items in by_type.items()},
            },
            "components": data["components"],
            "crossReference": data["crossReference"],
        },
        "dfm": {
            "projectPath": data["projectPath"],
            "traceStats": data["traceStats"],
            "viaStats": data["viaStats"],
            "viaInPad": data["viaInPad"],
            "layerStackup": stackup,
            "summary": {
                "totalTraces": data["summary"]["totalTraces"],
                "totalVias": data["summary"]["totalVias"],
                "viaInPadCount": data["summary"]["viaInPadCount"],
                "copperLayers": data["summary"]["copperLayers"],
            },
        },
    }


def write_analysis_files(output_dir: Path | str, result: AnalysisResult) -> list[Path]:
    """Write one pretty-printed JSON file per document into *output_dir*.

    Returns:
        Paths of the written files, in document order.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    written = []
    for name, document in split_analysis(result).items():
        path = out / f"{name}.json"
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        written.append(path)

    logger.info("Wrote %d analysis files to %s", len(written), out)
    return written


def format_summary(result: AnalysisResult) -> str:
    """Human-readable overview of an analysis for the console."""
    sep = "=" * 70
    sep2 = "-" * 70
    s = result.summary
    lines = [
        "",
        sep,
        "PCB ANALYSIS SUMMARY",
        sep,
        "",
        f"Project: {result.project_path}",
        f"Analyzed: {result.timestamp}",
    ]

    def section(title: str) -> None:
        lines.extend(["", sep2, title, sep2])

    section("OVERVIEW")
    lines.extend([
        f"  Components:      {s.total_components}",
        f"  Nets:            {s.total_nets}",
        f"  Traces:          {s.total_traces}",
        f"  Vias:            {s.total_vias}",
        f"  Via-in-pad:      {s.via_in_pad_count}",
        f"  Copper Layers:   {s.copper_layers}",
        f"  Schematic Sheets: {s.schematic_sheets}",
    ])

    section("COMPONENTS BY TYPE")
    for kind, components in result.components.by_type.items():
        lines.append(f"  {kind:<20} {len(components)}")

    section("POWER NETS")
    for net in result.power_nets[:SUMMARY_LIST_LIMIT]:
        lines.append(f"  {net.name:<15} {net.component_count} components, {net.via_count} vias")
    if len(result.power_nets) > SUMMARY_LIST_LIMIT:
        lines.append(f"  ... and {len(result.power_nets) - SUMMARY_LIST_LIMIT} more")

    stackup = result.layer_stackup
    section("LAYER STACKUP")
    lines.append(f"  Copper layers: {', '.join(stackup.copper_layers)}")
    lines.append(f"  Routed layers: {', '.join(stackup.routed_layers)}")
    if stackup.zone_layers:
        lines.append(f"  Zone layers:   {', '.join(stackup.zone_layers)}")
        zones_by_layer: dict[str, list[str]] = {}
        for zone in stackup.zones:
            nets = zones_by_layer.setdefault(zone.layer, [])
            if zone.net not in nets:
                nets.append(zone.net)
        lines.append("  Zones:")
        for layer, nets in zones_by_layer.items():
            lines.append(f"    {layer}: {', '.join(nets)}")

    section("TRACE STATISTICS")
    lines.extend([
        f"  Total segments:  {result.trace_stats.total_segments}",
        f"  Total length:    {result.trace_stats.total_length:.2f} mm",
        f"  Width range:     {result.trace_stats.min_width:.3f} - {result.trace_stats.max_width:.3f} mm",
    ])

    section("VIA STATISTICS")
    lines.extend([
        f"  Total vias:      {result.via_stats.total_count}",
        f"  Drill range:     {result.via_stats.min_drill:.3f} - {result.via_stats.max_drill:.3f} mm",
    ])

    if result.differential_pairs:
        section("DIFFERENTIAL PAIRS")
        for pair in result.differential_pairs[:SUMMARY_LIST_LIMIT]:
            lines.append(f"  {pair.base_name:<20} mismatch: {pair.length_mismatch:.3f} mm")
        if len(result.differential_pairs) > SUMMARY_LIST_LIMIT:
            lines.append(f"  ... and {len(result.differential_pairs) - SUMMARY_LIST_LIMIT} more")

    xref = result.cross_reference
    section("CROSS-REFERENCE")
    lines.extend([
        f"  Matched:           {xref.matched_count}",
        f"  Schematic only:    {len(xref.schematic_only)}",
        f"  PCB only:          {len(xref.pcb_only)}",
        f"  Value mismatches:  {len(xref.value_mismatches)}",
        f"  Footprint mismatch: {len(xref.footprint_mismatches)}",
    ])

    if result.warnings:
        section("WARNINGS")
        lines.extend(f"  {w}" for w in result.warnings)

    lines.extend(["", sep, ""])
    return "\n".join(lines)
