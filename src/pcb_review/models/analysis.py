"""Analysis result schema.

Every model serializes with camelCase keys. ``AnalysisResult.to_dict()`` is
the JSON document handed to reports and prompt builders.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from pcb_review.models.types import CamelModel, Point


class ComponentSummary(CamelModel):
    reference: str
    value: str = ""
    type: str = "UNKNOWN"
    footprint: str = ""
    layer: Optional[str] = None
    position: Optional[Point] = None
    sheet: Optional[str] = None
    net_count: int = 0
    connected_nets: list[str] = Field(default_factory=list)


class ComponentsSection(CamelModel):
    by_type: dict[str, list[ComponentSummary]] = Field(default_factory=dict)
    all: list[ComponentSummary] = Field(default_factory=list)


class NetSummary(CamelModel):
    name: str
    net_number: int
    component_count: int = 0
    components: list[str] = Field(default_factory=list)
    via_count: int = 0
    trace_count: int = 0
    total_trace_length: float = 0.0
    is_power: bool = False


class TraceStatistics(CamelModel):
    total_segments: int = 0
    total_length: float = 0.0
    width_distribution: dict[str, int] = Field(default_factory=dict)
    layer_distribution: dict[str, int] = Field(default_factory=dict)
    min_width: float = 0.0
    max_width: float = 0.0


class ViaStatistics(CamelModel):
    total_count: int = 0
    drill_distribution: dict[str, int] = Field(default_factory=dict)
    min_drill: float = 0.0
    max_drill: float = 0.0


class ViaInPadFinding(CamelModel):
    component: str
    pad: str
    pad_type: str
    pad_net: str
    via_position: Point
    via_drill: float
    via_net: str
    concern: str


class ZoneLayer(CamelModel):
    layer: str
    net: str


class LayerStackup(CamelModel):
    total_layers: int = 0
    copper_layers: list[str] = Field(default_factory=list)
    routed_layers: list[str] = Field(default_factory=list)
    layer_usage: dict[str, int] = Field(default_factory=dict)
    zones: list[ZoneLayer] = Field(default_factory=list)
    zone_layers: list[str] = Field(default_factory=list)


class ValueMismatch(CamelModel):
    reference: str
    schematic_value: str
    pcb_value: str


class FootprintMismatch(CamelModel):
    reference: str
    schematic_footprint: str
    pcb_footprint: str


class CrossReference(CamelModel):
    matched: list[str] = Field(default_factory=list, description="References on both sides, sorted")
    matched_count: int = 0
    schematic_only: list[str] = Field(default_factory=list)
    pcb_only: list[str] = Field(default_factory=list)
    value_mismatches: list[ValueMismatch] = Field(default_factory=list)
    footprint_mismatches: list[FootprintMismatch] = Field(default_factory=list)


class DifferentialPair(CamelModel):
    base_name: str
    positive_net: str
    negative_net: str
    pos_length: float = 0.0
    neg_length: float = 0.0
    length_mismatch: float = 0.0
    components: list[str] = Field(default_factory=list)


class NearbyVia(CamelModel):
    distance: float
    drill: float
    net: str


class ThermalViaAnalysis(CamelModel):
    count: int = 0
    search_radius: float = 0.0
    by_net: dict[str, int] = Field(default_factory=dict)
    vias: list[NearbyVia] = Field(default_factory=list)


class ZoneCoverage(CamelModel):
    net: str
    layer: str
    area: float


class NearbyZone(CamelModel):
    net: str
    layer: str
    distance: float
    area: float


class CopperPourAnalysis(CamelModel):
    zones_containing_component: list[ZoneCoverage] = Field(default_factory=list)
    zones_within_radius: list[NearbyZone] = Field(default_factory=list)
    total_connected_area: float = 0.0


class ComponentThermalAnalysis(CamelModel):
    reference: str
    value: str = ""
    position: Point
    footprint: str = ""
    is_power_regulator: bool = False
    has_thermal_pad: bool = False
    connected_power_nets: list[str] = Field(default_factory=list)
    thermal_vias: ThermalViaAnalysis
    copper_pour: CopperPourAnalysis


class NearbyViaReport(CamelModel):
    """Result of the nearby-via point query for one component."""

    component: str
    position: Point
    via_count: int = 0
    vias: list[NearbyVia] = Field(default_factory=list)


class AnalysisSummary(CamelModel):
    total_components: int = 0
    total_nets: int = 0
    total_traces: int = 0
    total_vias: int = 0
    via_in_pad_count: int = 0
    copper_layers: int = 0
    schematic_sheets: int = 0


class RawData(CamelModel):
    pcb: dict[str, Any]
    schematic: Optional[dict[str, Any]] = None


class AnalysisResult(CamelModel):
    project_path: str
    timestamp: str
    summary: AnalysisSummary
    components: ComponentsSection
    power_nets: list[NetSummary] = Field(default_factory=list)
    signal_nets: list[NetSummary] = Field(default_factory=list)
    trace_stats: TraceStatistics
    via_stats: ViaStatistics
    via_in_pad: list[ViaInPadFinding] = Field(default_factory=list)
    layer_stackup: LayerStackup
    differential_pairs: list[DifferentialPair] = Field(default_factory=list)
    cross_reference: CrossReference
    thermal_analysis: list[ComponentThermalAnalysis] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    raw_data: Optional[RawData] = None
