"""Typed records extracted from one or more .kicad_sch documents."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from pcb_review.models.types import CamelModel

LabelKind = Literal["local", "global", "hierarchical"]


class SchematicComponent(CamelModel):
    reference: str
    value: str = ""
    footprint: str = ""
    lib_id: str = ""
    x: float = 0.0
    y: float = 0.0
    unit: int = Field(default=1, description="Unit index for multi-unit parts")
    sheet: str = ""
    properties: dict[str, str] = Field(default_factory=dict)
    uuid: str = ""


class SchematicLabel(CamelModel):
    text: str
    x: float = 0.0
    y: float = 0.0
    type: LabelKind = "local"
    sheet: str = ""


class SchematicWire(CamelModel):
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    sheet: str = ""


class PowerSymbol(CamelModel):
    net_name: str
    x: float = 0.0
    y: float = 0.0
    sheet: str = ""


class SheetInstance(CamelModel):
    file: str
    name: str


class NetConnectionPoint(CamelModel):
    sheet: str
    x: float = 0.0
    y: float = 0.0


class SchematicNet(CamelModel):
    name: str
    is_global: bool = True
    is_power: bool = False
    connections: list[NetConnectionPoint] = Field(default_factory=list)


class SchematicData(CamelModel):
    project_path: str = ""
    sheets: list[str] = Field(default_factory=list)
    components: dict[str, SchematicComponent] = Field(default_factory=dict)
    labels: list[SchematicLabel] = Field(default_factory=list)
    wires: list[SchematicWire] = Field(default_factory=list)
    power_symbols: list[PowerSymbol] = Field(default_factory=list)
    global_nets: dict[str, SchematicNet] = Field(default_factory=dict)
    sheet_instances: list[SheetInstance] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
