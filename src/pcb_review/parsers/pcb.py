"""KiCad PCB extractor.

Walks the tree of a ``.kicad_pcb`` document and produces a connectivity-resolved
:class:`PCBData`. Unknown tags are skipped so newer KiCad constructs never
abort extraction.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional

from pcb_review.analyzers.geometry import bounding_box, polygon_area
from pcb_review.logging_config import get_logger
from pcb_review.models.errors import InvalidFileFormatError
from pcb_review.models.pcb import Footprint, Layer, Pad, PadSize, PCBData, Trace, Via, Zone
from pcb_review.models.types import Point
from pcb_review.parsers.connectivity import build_connectivity
from pcb_review.parsers.sexpr import SExpr, atom_str, parse_sexp, tag_of, to_float, to_int
from pcb_review.utils.sources import ContentSource, LocalFileSource

logger = get_logger("parsers.pcb")

PCB_ROOT_TAG = "kicad_pcb"
COPPER_LAYER_TYPES = {"signal", "power", "mixed"}


def parse_pcb_content(content: str, filename: str = "unknown.kicad_pcb") -> PCBData:
    """Parse the text of a .kicad_pcb file.

    Args:
        content: Full file text.
        filename: Name recorded on the result.

    Returns:
        PCBData with connectivity already built.

    Raises:
        SExprParseError: The text is structurally malformed.
        InvalidFileFormatError: The root tag is not ``kicad_pcb``.
    """
    tree = parse_sexp(content)
    if tag_of(tree) != PCB_ROOT_TAG:
        raise InvalidFileFormatError(
            f"{filename} is not a valid PCB document",
            {"filename": filename},
        )

    pcb = PCBData(filename=filename)
    for node in tree[1:]:
        tag = tag_of(node)
        if tag == "layers":
            for layer in _parse_layers(node):
                pcb.layers.append(layer)
                if _is_copper_layer(layer):
                    pcb.copper_layers.append(layer.name)
        elif tag == "net":
            if len(node) >= 3:
                pcb.nets[to_int(node[1])] = atom_str(node[2])
        elif tag == "footprint":
            fp = _parse_footprint(node)
            if fp:
                pcb.footprints.append(fp)
        elif tag == "segment":
            pcb.traces.append(_parse_segment(node))
        elif tag == "via":
            pcb.vias.append(_parse_via(node))
        elif tag == "zone":
            pcb.zones.append(_parse_zone(node))

    build_connectivity(pcb)
    logger.debug(
        "Parsed %s: %d footprints, %d nets, %d traces, %d vias, %d zones",
        filename, len(pcb.footprints), len(pcb.nets), len(pcb.traces),
        len(pcb.vias), len(pcb.zones),
    )
    return pcb


def parse_pcb_file(path: Path | str, source: Optional[ContentSource] = None) -> PCBData:
    """Read and parse a .kicad_pcb file through a content source."""
    source = source or LocalFileSource()
    content = source.read_file(str(path))
    return parse_pcb_content(content, str(path))


def _is_copper_layer(layer: Layer) -> bool:
    return layer.type in COPPER_LAYER_TYPES or layer.name.endswith(".Cu")


def _parse_layers(node: list) -> list[Layer]:
    layers = []
    for child in node[1:]:
        if isinstance(child, list) and len(child) >= 3:
            layers.append(Layer(id=to_int(child[0]), name=atom_str(child[1]), type=atom_str(child[2])))
    return layers


def _parse_footprint(node: list) -> Footprint | None:
    """Parse a footprint block; graphical footprints without a Reference yield None."""
    footprint_type = node[1] if len(node) > 1 and isinstance(node[1], str) else ""
    x = y = rotation = 0.0
    layer = "F.Cu"
    reference = value = ""
    properties: dict[str, str] = {}
    pads: list[Pad] = []

    for child in node[2:]:
        tag = tag_of(child)
        if tag == "at":
            x = to_float(child[1] if len(child) > 1 else None)
            y = to_float(child[2] if len(child) > 2 else None)
            rotation = to_float(child[3] if len(child) > 3 else None)
        elif tag == "layer" and len(child) >= 2:
            layer = atom_str(child[1])
        elif tag == "property" and len(child) >= 3:
            name = atom_str(child[1])
            prop_value = atom_str(child[2])
            properties[name] = prop_value
            if name == "Reference":
                reference = prop_value
            elif name == "Value":
                value = prop_value
        elif tag == "pad":
            pad = _parse_pad(child)
            if pad:
                pads.append(pad)

    if not reference:
        return None

    return Footprint(
        reference=reference,
        value=value,
        footprint_type=footprint_type,
        x=x,
        y=y,
        rotation=rotation,
        layer=layer,
        pads=pads,
        properties=properties,
    )


def _parse_pad(node: list) -> Pad | None:
    # (pad "1" smd roundrect (at ...) ...)
    if len(node) < 4:
        return None

    pad = Pad(number=atom_str(node[1]), type=atom_str(node[2]), shape=atom_str(node[3]))
    for child in node[4:]:
        tag = tag_of(child)
        if tag == "at":
            pad.x = to_float(child[1] if len(child) > 1 else None)
            pad.y = to_float(child[2] if len(child) > 2 else None)
        elif tag == "size":
            pad.size = PadSize(
                width=to_float(child[1] if len(child) > 1 else None),
                height=to_float(child[2] if len(child) > 2 else None),
            )
        elif tag == "drill":
            pad.drill = _drill_diameter(child)
        elif tag == "layers":
            pad.layers = [atom_str(layer) for layer in child[1:]]
        elif tag == "net":
            net = to_int(child[1] if len(child) > 1 else None)
            pad.net = net or None
            pad.net_name = atom_str(child[2]) if len(child) > 2 else ""
    return pad


def _drill_diameter(node: list) -> float:
    # (drill 0.8) or (drill oval 1.0 1.5); the first number is the diameter
    for item in node[1:]:
        if isinstance(item, (int, float)):
            return float(item)
    return 0.0


def _parse_segment(node: list) -> Trace:
    fields: dict[str, float | int | str] = {}
    for child in node[1:]:
        tag = tag_of(child)
        if tag == "start":
            fields["start_x"] = to_float(child[1] if len(child) > 1 else None)
            fields["start_y"] = to_float(child[2] if len(child) > 2 else None)
        elif tag == "end":
            fields["end_x"] = to_float(child[1] if len(child) > 1 else None)
            fields["end_y"] = to_float(child[2] if len(child) > 2 else None)
        elif tag == "width" and len(child) >= 2:
            fields["width"] = to_float(child[1])
        elif tag == "layer" and len(child) >= 2:
            fields["layer"] = atom_str(child[1])
        elif tag == "net" and len(child) >= 2:
            fields["net"] = to_int(child[1])

    dx = fields.get("end_x", 0.0) - fields.get("start_x", 0.0)
    dy = fields.get("end_y", 0.0) - fields.get("start_y", 0.0)
    return Trace(length=math.hypot(dx, dy), **fields)


def _parse_via(node: list) -> Via:
    fields: dict[str, SExpr] = {}
    for child in node[1:]:
        tag = tag_of(child)
        if tag == "at":
            fields["x"] = to_float(child[1] if len(child) > 1 else None)
            fields["y"] = to_float(child[2] if len(child) > 2 else None)
        elif tag == "size" and len(child) >= 2:
            fields["size"] = to_float(child[1])
        elif tag == "drill" and len(child) >= 2:
            fields["drill"] = _drill_diameter(child)
        elif tag == "layers":
            fields["layers"] = [atom_str(layer) for layer in child[1:]]
        elif tag == "net" and len(child) >= 2:
            fields["net"] = to_int(child[1])
    return Via(**fields)


def _parse_zone(node: list) -> Zone:
    zone = Zone()
    for child in node[1:]:
        tag = tag_of(child)
        if tag == "net" and len(child) >= 2:
            zone.net = to_int(child[1])
        elif tag == "net_name" and len(child) >= 2:
            zone.net_name = atom_str(child[1])
        elif tag == "layer" and len(child) >= 2:
            zone.layer = atom_str(child[1])
        elif tag == "layers" and len(child) >= 2 and not zone.layer:
            # Multi-layer zones; the first layer stands for the zone
            zone.layer = atom_str(child[1])
        elif tag == "priority" and len(child) >= 2:
            zone.priority = to_int(child[1])
        elif tag == "polygon":
            zone.polygon = _parse_polygon_points(child)
            if zone.polygon:
                zone.bounding_box = bounding_box(zone.polygon)
                zone.area = polygon_area(zone.polygon)
    return zone


def _parse_polygon_points(node: list) -> list[Point]:
    # (polygon (pts (xy x y) (xy x y) ...))
    points = []
    for child in node[1:]:
        if tag_of(child) != "pts":
            continue
        for pt in child[1:]:
            if tag_of(pt) == "xy" and len(pt) >= 3:
                points.append(Point(x=to_float(pt[1]), y=to_float(pt[2])))
    return points
