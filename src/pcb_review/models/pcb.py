"""Typed records extracted from a .kicad_pcb document."""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, Field

from pcb_review.models.types import BoundingBox, CamelModel, Point


class Layer(CamelModel):
    id: int
    name: str
    type: str = Field(description="signal, power, mixed, jumper, user, ...")


class PadSize(CamelModel):
    width: float = 0.0
    height: float = 0.0


class Pad(CamelModel):
    number: str = Field(description="Pad name, unique within its footprint only")
    type: str = Field(description="smd, thru_hole or np_thru_hole")
    shape: str = ""
    x: float = Field(default=0.0, description="X offset from the footprint origin")
    y: float = Field(default=0.0, description="Y offset from the footprint origin")
    net: Optional[int] = Field(default=None, description="Net number, None when unconnected")
    net_name: str = ""
    size: Optional[PadSize] = None
    drill: Optional[float] = None
    layers: Optional[list[str]] = None


class Footprint(CamelModel):
    reference: str
    value: str = ""
    footprint_type: str = Field(default="", description="library:footprint")
    x: float = 0.0
    y: float = 0.0
    rotation: float = Field(default=0.0, description="Rotation in degrees")
    layer: str = "F.Cu"
    pads: list[Pad] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)


class Trace(CamelModel):
    model_config = ConfigDict(frozen=True)

    start_x: float = 0.0
    start_y: float = 0.0
    end_x: float = 0.0
    end_y: float = 0.0
    width: float = 0.0
    layer: str = ""
    net: int = 0
    length: float = Field(default=0.0, description="Euclidean length start to end in mm")


class Via(CamelModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    size: float = 0.0
    drill: float = 0.0
    layers: list[str] = Field(default_factory=list)
    net: int = 0


class Zone(CamelModel):
    net: int = 0
    net_name: str = ""
    layer: str = ""
    priority: int = 0
    polygon: Optional[list[Point]] = None
    bounding_box: Optional[BoundingBox] = None
    area: Optional[float] = Field(default=None, description="Polygon area in mm^2")


class PadConnection(CamelModel):
    component: str
    pad: str
    net_name: str = ""


class NetConnectivity(CamelModel):
    components: set[str] = Field(default_factory=set)
    pads: list[PadConnection] = Field(default_factory=list)
    traces: list[Trace] = Field(default_factory=list)
    vias: list[Via] = Field(default_factory=list)

    @property
    def total_trace_length(self) -> float:
        return sum(t.length for t in self.traces)


class PCBData(CamelModel):
    filename: str = ""
    layers: list[Layer] = Field(default_factory=list)
    copper_layers: list[str] = Field(default_factory=list)
    nets: dict[int, str] = Field(default_factory=dict)
    footprints: list[Footprint] = Field(default_factory=list)
    traces: list[Trace] = Field(default_factory=list)
    vias: list[Via] = Field(default_factory=list)
    zones: list[Zone] = Field(default_factory=list)
    connectivity: dict[int, NetConnectivity] = Field(default_factory=dict)
    component_nets: dict[str, set[int]] = Field(default_factory=dict)

    def get_footprint(self, reference: str) -> Optional[Footprint]:
        for fp in self.footprints:
            if fp.reference == reference:
                return fp
        return None

    def find_net_number(self, name: str) -> Optional[int]:
        for number, net_name in self.nets.items():
            if net_name == name:
                return number
        return None

    def net_label(self, number: int) -> str:
        """Net name for display, ``net_<n>`` when the net is unnamed or unknown."""
        return self.nets.get(number) or f"net_{number}"
