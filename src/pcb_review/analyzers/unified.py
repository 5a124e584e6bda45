"""Unified PCB + schematic analysis.

:class:`UnifiedAnalyzer` parses a project, cross-references the layout
against the schematic and assembles the :class:`AnalysisResult` consumed by
reports and prompt builders. The PCB is mandatory; schematics are optional
context and a failure to read them only adds a warning to the result.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from pcb_review.analyzers.classification import detect_component_type, is_power_net
from pcb_review.analyzers.diff_pairs import detect_differential_pairs
from pcb_review.analyzers.signal_path import get_components_on_net, trace_signal_path
from pcb_review.analyzers.thermal import (
    DEFAULT_THERMAL_SEARCH_RADIUS,
    build_thermal_analysis,
    find_nearby_vias,
)
from pcb_review.analyzers.via_in_pad import detect_via_in_pad
from pcb_review.logging_config import get_logger
from pcb_review.models.analysis import (
    AnalysisResult,
    AnalysisSummary,
    ComponentsSection,
    ComponentSummary,
    CrossReference,
    FootprintMismatch,
    LayerStackup,
    NearbyViaReport,
    NetSummary,
    RawData,
    TraceStatistics,
    ValueMismatch,
    ViaStatistics,
    ZoneLayer,
)
from pcb_review.models.errors import PCBNotFoundError, PCBReviewError
from pcb_review.models.pcb import PCBData
from pcb_review.models.schematic import SchematicData
from pcb_review.models.types import Point
from pcb_review.parsers import schematic as schematic_parser
from pcb_review.parsers.pcb import parse_pcb_content
from pcb_review.utils.sources import ContentSource, LocalFileSource

logger = get_logger("analyzers.unified")

PCB_EXT = ".kicad_pcb"
DEFAULT_VIA_SEARCH_RADIUS = 3.0

RAW_PCB_FIELDS = {"filename", "layers", "nets", "footprints", "traces", "vias", "zones"}
RAW_SCHEMATIC_FIELDS = {
    "project_path", "sheets", "components", "labels", "power_symbols", "global_nets", "sheet_instances",
}


class UnifiedAnalyzer:
    """Runs the full analysis and answers point queries about the last board.

    All state is replaced at the start of every ``analyze*`` call, so one
    instance can be reused across runs.
    """

    def __init__(
        self,
        thermal_search_radius: float = DEFAULT_THERMAL_SEARCH_RADIUS,
        via_search_radius: float = DEFAULT_VIA_SEARCH_RADIUS,
    ) -> None:
        self.thermal_search_radius = thermal_search_radius
        self.via_search_radius = via_search_radius
        self._reset()

    def _reset(self) -> None:
        self.pcb: Optional[PCBData] = None
        self.schematic: Optional[SchematicData] = None
        self.project_path = ""
        self.warnings: list[str] = []

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def analyze(
        self,
        project_path: str,
        source: Optional[ContentSource] = None,
        include_raw_data: bool = False,
    ) -> AnalysisResult:
        """Analyze a project directory.

        Raises:
            PCBNotFoundError: The directory holds no .kicad_pcb file.
            SExprParseError, InvalidFileFormatError: The PCB cannot be parsed.
        """
        self._reset()
        source = source or LocalFileSource()
        self.project_path = project_path

        files = source.list_files(project_path)
        pcb_file = next((f for f in files if f.endswith(PCB_EXT)), None)
        if pcb_file is None:
            raise PCBNotFoundError(
                "No .kicad_pcb file found in project directory",
                {"project_path": project_path},
            )

        pcb_path = source.join_path(project_path, pcb_file)
        logger.info("Analyzing %s", pcb_path)
        self.pcb = parse_pcb_content(source.read_file(pcb_path), pcb_path)

        try:
            self.schematic = schematic_parser.parse_project(project_path, source)
        except PCBReviewError as e:
            self._schematic_unavailable(e)

        return self._build_result(include_raw_data)

    def analyze_from_content(
        self,
        pcb_content: str,
        pcb_filename: str,
        schematic_files: Iterable[tuple[str, str]] = (),
        include_raw_data: bool = False,
    ) -> AnalysisResult:
        """Analyze file contents already held in memory.

        Args:
            pcb_content: Text of the .kicad_pcb file.
            pcb_filename: Its name; the directory part becomes the project path.
            schematic_files: ``(filename, content)`` pairs, possibly empty.
            include_raw_data: Attach the extracted records under ``rawData``.
        """
        self._reset()
        self.project_path = re.sub(r"[^/\\]*$", "", pcb_filename) or "browser"

        self.pcb = parse_pcb_content(pcb_content, pcb_filename)

        schematic_files = list(schematic_files)
        if schematic_files:
            try:
                self.schematic = schematic_parser.parse_multiple_files(schematic_files)
            except PCBReviewError as e:
                self._schematic_unavailable(e)

        return self._build_result(include_raw_data)

    def _schematic_unavailable(self, error: PCBReviewError) -> None:
        message = f"Could not parse schematics: {error}"
        logger.warning(message)
        self.warnings.append(message)
        self.schematic = None

    # ------------------------------------------------------------------
    # Point queries (valid after an analyze call)
    # ------------------------------------------------------------------

    def get_components_on_net(self, net_name: str) -> list[str]:
        if self.pcb is None:
            return []
        return get_components_on_net(self.pcb, net_name)

    def trace_signal_path(self, start: str, end: str) -> Optional[list[str]]:
        if self.pcb is None:
            return None
        return trace_signal_path(self.pcb, start, end)

    def analyze_thermal_vias(
        self,
        reference: str,
        search_radius: Optional[float] = None,
    ) -> Optional[NearbyViaReport]:
        """Vias near a component's origin, or None when the component is unknown."""
        if self.pcb is None:
            return None
        fp = self.pcb.get_footprint(reference)
        if fp is None:
            return None

        radius = self.via_search_radius if search_radius is None else search_radius
        vias = find_nearby_vias(self.pcb, fp, radius)
        return NearbyViaReport(
            component=reference,
            position=Point(x=fp.x, y=fp.y),
            via_count=len(vias),
            vias=vias,
        )

    # ------------------------------------------------------------------
    # Result assembly
    # ------------------------------------------------------------------

    def _build_result(self, include_raw_data: bool) -> AnalysisResult:
        pcb = self.pcb
        sch = self.schematic

        components = self._build_component_summaries()
        by_type: dict[str, list[ComponentSummary]] = {}
        for comp in components:
            by_type.setdefault(comp.type, []).append(comp)

        power_nets, signal_nets = self._build_net_summaries()
        via_in_pad = detect_via_in_pad(pcb)

        warnings = list(self.warnings)
        if sch is not None:
            warnings.extend(sch.warnings)

        result = AnalysisResult(
            project_path=self.project_path,
            timestamp=datetime.now(timezone.utc).isoformat(),
            summary=AnalysisSummary(
                total_components=len(pcb.footprints),
                total_nets=len(pcb.nets),
                total_traces=len(pcb.traces),
                total_vias=len(pcb.vias),
                via_in_pad_count=len(via_in_pad),
                copper_layers=len(pcb.copper_layers),
                schematic_sheets=len(sch.sheets) if sch else 0,
            ),
            components=ComponentsSection(by_type=by_type, all=components),
            power_nets=power_nets,
            signal_nets=signal_nets,
            trace_stats=self._build_trace_statistics(),
            via_stats=self._build_via_statistics(),
            via_in_pad=via_in_pad,
            layer_stackup=self._build_layer_stackup(),
            differential_pairs=detect_differential_pairs(pcb),
            cross_reference=self._build_cross_reference(),
            thermal_analysis=build_thermal_analysis(pcb, self.thermal_search_radius),
            warnings=warnings,
        )

        if include_raw_data:
            result.raw_data = RawData(
                pcb=pcb.model_dump(by_alias=True, mode="json", include=RAW_PCB_FIELDS),
                schematic=(
                    sch.model_dump(by_alias=True, mode="json", include=RAW_SCHEMATIC_FIELDS)
                    if sch else None
                ),
            )

        logger.info(
            "Analysis complete: %d components, %d nets, %d thermal candidates",
            result.summary.total_components, result.summary.total_nets, len(result.thermal_analysis),
        )
        return result

    def _build_component_summaries(self) -> list[ComponentSummary]:
        pcb = self.pcb
        summaries = []
        for fp in pcb.footprints:
            nets = sorted(pcb.component_nets.get(fp.reference, ()))
            summaries.append(ComponentSummary(
                reference=fp.reference,
                value=fp.value,
                type=detect_component_type(fp.reference, fp.value, fp.footprint_type).value,
                footprint=fp.footprint_type,
                layer=fp.layer,
                position=Point(x=fp.x, y=fp.y),
                net_count=len(nets),
                connected_nets=[pcb.net_label(n) for n in nets],
            ))
        return sorted(summaries, key=lambda s: s.reference)

    def _build_net_summaries(self) -> tuple[list[NetSummary], list[NetSummary]]:
        pcb = self.pcb
        power_nets: list[NetSummary] = []
        signal_nets: list[NetSummary] = []

        for net_num, net_name in pcb.nets.items():
            if net_num == 0 or not net_name:
                continue
            conn = pcb.connectivity.get(net_num)
            if conn is None:
                continue

            is_power = is_power_net(net_name)
            summary = NetSummary(
                name=net_name,
                net_number=net_num,
                component_count=len(conn.components),
                components=sorted(conn.components),
                via_count=len(conn.vias),
                trace_count=len(conn.traces),
                total_trace_length=round(conn.total_trace_length, 2),
                is_power=is_power,
            )
            (power_nets if is_power else signal_nets).append(summary)

        power_nets.sort(key=lambda n: n.component_count, reverse=True)
        signal_nets.sort(key=lambda n: n.component_count, reverse=True)
        return power_nets, signal_nets

    def _build_trace_statistics(self) -> TraceStatistics:
        traces = self.pcb.traces
        if not traces:
            return TraceStatistics()

        width_dist: dict[str, int] = {}
        layer_dist: dict[str, int] = {}
        for trace in traces:
            key = f"{trace.width:.3f}"
            width_dist[key] = width_dist.get(key, 0) + 1
            layer_dist[trace.layer] = layer_dist.get(trace.layer, 0) + 1

        widths = [t.width for t in traces]
        return TraceStatistics(
            total_segments=len(traces),
            total_length=round(sum(t.length for t in traces), 2),
            width_distribution=width_dist,
            layer_distribution=layer_dist,
            min_width=min(widths),
            max_width=max(widths),
        )

    def _build_via_statistics(self) -> ViaStatistics:
        vias = self.pcb.vias
        if not vias:
            return ViaStatistics()

        drill_dist: dict[str, int] = {}
        for via in vias:
            key = f"{via.drill:.3f}"
            drill_dist[key] = drill_dist.get(key, 0) + 1

        drills = [v.drill for v in vias]
        return ViaStatistics(
            total_count=len(vias),
            drill_distribution=drill_dist,
            min_drill=min(drills),
            max_drill=max(drills),
        )

    def _build_layer_stackup(self) -> LayerStackup:
        pcb = self.pcb
        layer_usage: dict[str, int] = {}
        for trace in pcb.traces:
            layer_usage[trace.layer] = layer_usage.get(trace.layer, 0) + 1

        zones = [ZoneLayer(layer=z.layer, net=z.net_name) for z in pcb.zones if z.layer and z.net_name]
        return LayerStackup(
            total_layers=len(pcb.layers),
            copper_layers=list(pcb.copper_layers),
            routed_layers=sorted(layer_usage),
            layer_usage=layer_usage,
            zones=zones,
            zone_layers=sorted({z.layer for z in zones}),
        )

    def _build_cross_reference(self) -> CrossReference:
        pcb = self.pcb
        sch = self.schematic
        pcb_refs = [fp.reference for fp in pcb.footprints]

        if sch is None:
            return CrossReference(pcb_only=sorted(pcb_refs))

        footprints = {fp.reference: fp for fp in pcb.footprints}
        matched = sorted(set(footprints) & set(sch.components))
        result = CrossReference(
            matched=matched,
            matched_count=len(matched),
            schematic_only=sorted(set(sch.components) - set(footprints)),
            pcb_only=sorted(set(footprints) - set(sch.components)),
        )

        for ref in matched:
            fp = footprints[ref]
            comp = sch.components[ref]
            if fp.value != comp.value:
                result.value_mismatches.append(
                    ValueMismatch(reference=ref, schematic_value=comp.value, pcb_value=fp.value)
                )
            # Compare without the library prefix
            pcb_fp = fp.footprint_type.split(":")[-1]
            sch_fp = comp.footprint.split(":")[-1]
            if pcb_fp and sch_fp and pcb_fp != sch_fp:
                result.footprint_mismatches.append(FootprintMismatch(
                    reference=ref,
                    schematic_footprint=comp.footprint,
                    pcb_footprint=fp.footprint_type,
                ))

        return result
