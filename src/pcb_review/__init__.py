"""PCB Review - KiCad PCB and schematic analysis for design review."""

__version__ = "0.3.0"
