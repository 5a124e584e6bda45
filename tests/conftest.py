"""Shared test fixtures."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from pcb_review.models.pcb import PCBData
from pcb_review.parsers.pcb import parse_pcb_content

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# A minimal board: A-(NET1)-B-(NET2)-C chain plus an unconnected D
CHAIN_BOARD = """\
(kicad_pcb (version 20221018) (generator pcbnew)
  (layers (0 "F.Cu" signal) (31 "B.Cu" signal))
  (net 0 "")
  (net 1 "NET1")
  (net 2 "NET2")
  (footprint "Resistor_SMD:R_0603_1608Metric" (layer "F.Cu") (at 0 0)
    (property "Reference" "R1")
    (property "Value" "1k")
    (pad "1" smd rect (at -0.8 0) (size 0.8 0.9) (layers "F.Cu") (net 1 "NET1"))
  )
  (footprint "Resistor_SMD:R_0603_1608Metric" (layer "F.Cu") (at 10 0)
    (property "Reference" "R2")
    (property "Value" "1k")
    (pad "1" smd rect (at -0.8 0) (size 0.8 0.9) (layers "F.Cu") (net 1 "NET1"))
    (pad "2" smd rect (at 0.8 0) (size 0.8 0.9) (layers "F.Cu") (net 2 "NET2"))
  )
  (footprint "Resistor_SMD:R_0603_1608Metric" (layer "F.Cu") (at 20 0)
    (property "Reference" "R3")
    (property "Value" "1k")
    (pad "1" smd rect (at -0.8 0) (size 0.8 0.9) (layers "F.Cu") (net 2 "NET2"))
  )
  (footprint "Resistor_SMD:R_0603_1608Metric" (layer "F.Cu") (at 30 0)
    (property "Reference" "R4")
    (property "Value" "1k")
    (pad "1" smd rect (at -0.8 0) (size 0.8 0.9) (layers "F.Cu"))
  )
)
"""


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_board_path() -> Path:
    return FIXTURES_DIR / "sample_board.kicad_pcb"


@pytest.fixture
def sample_schematic_path() -> Path:
    return FIXTURES_DIR / "sample_schematic.kicad_sch"


@pytest.fixture
def sample_board_content(sample_board_path: Path) -> str:
    return sample_board_path.read_text(encoding="utf-8")


@pytest.fixture
def sample_schematic_content(sample_schematic_path: Path) -> str:
    return sample_schematic_path.read_text(encoding="utf-8")


@pytest.fixture
def sample_pcb(sample_board_content: str) -> PCBData:
    return parse_pcb_content(sample_board_content, "sample_board.kicad_pcb")


@pytest.fixture
def chain_pcb() -> PCBData:
    return parse_pcb_content(CHAIN_BOARD, "chain.kicad_pcb")


@pytest.fixture
def sample_project_dir(tmp_path: Path, sample_board_path: Path, sample_schematic_path: Path) -> Path:
    """A project directory holding the sample board and schematic."""
    project = tmp_path / "sample_project"
    project.mkdir()
    shutil.copy(sample_board_path, project / "sample_project.kicad_pcb")
    shutil.copy(sample_schematic_path, project / "sample_project.kicad_sch")
    return project


@pytest.fixture
def board_only_project_dir(tmp_path: Path, sample_board_path: Path) -> Path:
    """A project directory with a board and no schematics."""
    project = tmp_path / "board_only"
    project.mkdir()
    shutil.copy(sample_board_path, project / "board_only.kicad_pcb")
    return project
