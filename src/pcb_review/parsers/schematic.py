"""KiCad schematic extractor.

Parses one or more ``.kicad_sch`` sheets into a single :class:`SchematicData`.
A sheet whose root tag is not ``kicad_sch`` is skipped with a warning so that
one bad sheet does not hide the rest of a hierarchical project.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from pcb_review.logging_config import get_logger
from pcb_review.models.errors import SchematicNotFoundError
from pcb_review.models.schematic import (
    LabelKind,
    NetConnectionPoint,
    PowerSymbol,
    SchematicComponent,
    SchematicData,
    SchematicLabel,
    SchematicNet,
    SchematicWire,
    SheetInstance,
)
from pcb_review.parsers.sexpr import atom_str, get_xy, parse_sexp, tag_of, to_float, to_int
from pcb_review.utils.sources import ContentSource, LocalFileSource

logger = get_logger("parsers.schematic")

SCHEMATIC_ROOT_TAG = "kicad_sch"
SCHEMATIC_EXT = ".kicad_sch"

POWER_LIB_ID_PATTERNS = [
    re.compile(r"^power:", re.IGNORECASE),
    re.compile(r"^device:.*power", re.IGNORECASE),
    re.compile(r":gnd$", re.IGNORECASE),
    re.compile(r":\+\d+v", re.IGNORECASE),
    re.compile(r":vcc$", re.IGNORECASE),
    re.compile(r":vdd$", re.IGNORECASE),
    re.compile(r":vss$", re.IGNORECASE),
    re.compile(r":vbus$", re.IGNORECASE),
]
POWER_VALUE_PATTERN = re.compile(r"^(gnd|\+\d+v\d*|vcc|vdd|vss|vbus|v\d+v?\d*)$", re.IGNORECASE)

LABEL_TAGS: dict[str, LabelKind] = {
    "global_label": "global",
    "hierarchical_label": "hierarchical",
    "label": "local",
}


def is_power_symbol(lib_id: str, value: str) -> bool:
    """Whether a placed symbol is a power port rather than a component."""
    if any(pattern.search(lib_id) for pattern in POWER_LIB_ID_PATTERNS):
        return True
    return bool(POWER_VALUE_PATTERN.match(value))


class SchematicParser:
    """Accumulates sheets into one SchematicData.

    A parser instance belongs to a single project parse; create a new one for
    every run.
    """

    def __init__(self, project_path: str = "") -> None:
        self.data = SchematicData(project_path=project_path)

    def parse_schematic_content(self, content: str, sheet_name: str) -> bool:
        """Parse one sheet's text into the accumulated data.

        Returns:
            False when the sheet was skipped because it is not a schematic.

        Raises:
            SExprParseError: The sheet text is structurally malformed.
        """
        self.data.sheets.append(sheet_name)

        tree = parse_sexp(content)
        if tag_of(tree) != SCHEMATIC_ROOT_TAG:
            message = f"Invalid schematic format in {sheet_name}, sheet skipped"
            logger.warning(message)
            self.data.warnings.append(message)
            return False

        for node in tree[1:]:
            tag = tag_of(node)
            if tag == "symbol":
                self._process_symbol(node, sheet_name)
            elif tag in LABEL_TAGS:
                self._process_label(node, sheet_name, LABEL_TAGS[tag])
            elif tag == "wire":
                self._process_wire(node, sheet_name)
            elif tag == "sheet":
                self._process_sheet(node)
        return True

    def _process_symbol(self, node: list, sheet_name: str) -> None:
        lib_id = uuid = ""
        x = y = 0.0
        unit = 1
        properties: dict[str, str] = {}

        for child in node[1:]:
            tag = tag_of(child)
            if tag == "lib_id" and len(child) >= 2:
                lib_id = atom_str(child[1])
            elif tag == "uuid" and len(child) >= 2:
                uuid = atom_str(child[1])
            elif tag == "at":
                x = to_float(child[1] if len(child) > 1 else None)
                y = to_float(child[2] if len(child) > 2 else None)
            elif tag == "unit" and len(child) >= 2:
                unit = to_int(child[1]) or 1
            elif tag == "property" and len(child) >= 3:
                properties[atom_str(child[1])] = atom_str(child[2])

        reference = properties.get("Reference", "")
        value = properties.get("Value", "")

        if is_power_symbol(lib_id, value):
            self.data.power_symbols.append(PowerSymbol(net_name=value, x=x, y=y, sheet=sheet_name))
            return

        # Graphical symbols and unannotated power flags
        if not reference or reference.startswith("#"):
            return

        self.data.components[reference] = SchematicComponent(
            reference=reference,
            value=value,
            footprint=properties.get("Footprint", ""),
            lib_id=lib_id,
            x=x,
            y=y,
            unit=unit,
            sheet=sheet_name,
            properties=properties,
            uuid=uuid,
        )

    def _process_label(self, node: list, sheet_name: str, kind: LabelKind) -> None:
        if len(node) < 2:
            return
        x, y, _ = get_xy(node[2:])
        self.data.labels.append(
            SchematicLabel(text=atom_str(node[1]), x=x, y=y, type=kind, sheet=sheet_name)
        )

    def _process_wire(self, node: list, sheet_name: str) -> None:
        # Multi-point wires keep only their first two points
        points: list[tuple[float, float]] = []
        for child in node[1:]:
            if tag_of(child) != "pts":
                continue
            for pt in child[1:]:
                if tag_of(pt) == "xy" and len(points) < 2:
                    points.append((
                        to_float(pt[1] if len(pt) > 1 else None),
                        to_float(pt[2] if len(pt) > 2 else None),
                    ))

        (x1, y1), (x2, y2) = (points + [(0.0, 0.0), (0.0, 0.0)])[:2]
        if x1 or y1 or x2 or y2:
            self.data.wires.append(SchematicWire(x1=x1, y1=y1, x2=x2, y2=y2, sheet=sheet_name))

    def _process_sheet(self, node: list) -> None:
        sheet_file = sheet_name = ""
        for child in node[1:]:
            if tag_of(child) == "property" and len(child) >= 3:
                name = atom_str(child[1])
                if name == "Sheetfile":
                    sheet_file = atom_str(child[2])
                elif name == "Sheetname":
                    sheet_name = atom_str(child[2])

        if sheet_file:
            self.data.sheet_instances.append(SheetInstance(file=sheet_file, name=sheet_name or sheet_file))

    def build_global_nets(self) -> dict[str, SchematicNet]:
        """Merge global labels and power symbols into nets keyed by name."""
        nets = self.data.global_nets

        for label in self.data.labels:
            if label.type != "global":
                continue
            net = nets.setdefault(label.text, SchematicNet(name=label.text, is_global=True, is_power=False))
            net.connections.append(NetConnectionPoint(sheet=label.sheet, x=label.x, y=label.y))

        for power in self.data.power_symbols:
            net = nets.setdefault(power.net_name, SchematicNet(name=power.net_name, is_global=True, is_power=True))
            net.connections.append(NetConnectionPoint(sheet=power.sheet, x=power.x, y=power.y))

        return nets


def parse_schematic_content(content: str, sheet_name: str) -> SchematicData:
    """Parse a single sheet into a fresh SchematicData with global nets built."""
    parser = SchematicParser()
    parser.parse_schematic_content(content, sheet_name)
    parser.build_global_nets()
    return parser.data


def parse_multiple_files(files: Iterable[tuple[str, str]], project_path: str = "") -> SchematicData:
    """Parse already-loaded sheets given as ``(filename, content)`` pairs.

    Sheets are processed in filename order so results are deterministic.

    Raises:
        SchematicNotFoundError: No files were given.
    """
    ordered = sorted(files, key=lambda item: item[0])
    if not ordered:
        raise SchematicNotFoundError("No schematic files provided")

    parser = SchematicParser(project_path)
    for filename, content in ordered:
        # Sheets are named by file basename; any directory part is dropped.
        sheet_name = re.sub(r"\.kicad_sch$", "", filename.replace("\\", "/").split("/")[-1], flags=re.IGNORECASE)
        parser.parse_schematic_content(content, sheet_name)
    parser.build_global_nets()
    logger.info(
        "Parsed %d schematic sheet(s): %d components, %d global nets",
        len(parser.data.sheets), len(parser.data.components), len(parser.data.global_nets),
    )
    return parser.data


def parse_project(project_path: str, source: Optional[ContentSource] = None) -> SchematicData:
    """Parse every .kicad_sch file in a project directory.

    Raises:
        SchematicNotFoundError: The directory holds no schematic files.
    """
    source = source or LocalFileSource()
    sch_files = sorted(f for f in source.list_files(project_path) if f.endswith(SCHEMATIC_EXT))
    if not sch_files:
        raise SchematicNotFoundError(
            "No .kicad_sch files found in project directory",
            {"project_path": project_path},
        )

    parser = SchematicParser(project_path)
    for sch_file in sch_files:
        filepath = source.join_path(project_path, sch_file)
        parser.parse_schematic_content(source.read_file(filepath), source.get_basename(filepath, SCHEMATIC_EXT))
    parser.build_global_nets()
    logger.info(
        "Parsed %d schematic sheet(s) from %s: %d components",
        len(sch_files), project_path, len(parser.data.components),
    )
    return parser.data
