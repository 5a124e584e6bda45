"""Tests for input validation utilities."""

from __future__ import annotations

from pathlib import Path

import pytest

from pcb_review.models.errors import (
    InvalidNetNameError,
    InvalidPathError,
    InvalidReferenceError,
    ValidationError,
)
from pcb_review.utils.validation import (
    validate_net_name,
    validate_positive,
    validate_project_dir,
    validate_reference,
)


class TestValidateReference:
    def test_valid_references(self):
        assert validate_reference("R1") == "R1"
        assert validate_reference("U3") == "U3"
        assert validate_reference("C10") == "C10"
        assert validate_reference("Q2A") == "Q2A"
        assert validate_reference("SW1") == "SW1"

    def test_invalid_references(self):
        with pytest.raises(InvalidReferenceError):
            validate_reference("")
        with pytest.raises(InvalidReferenceError):
            validate_reference("1R")
        with pytest.raises(InvalidReferenceError):
            validate_reference("R")
        with pytest.raises(InvalidReferenceError):
            validate_reference("123")


class TestValidateNetName:
    def test_valid_nets(self):
        assert validate_net_name("VCC") == "VCC"
        assert validate_net_name("GND") == "GND"
        assert validate_net_name("/sheet1/SDA") == "/sheet1/SDA"
        assert validate_net_name("USB_D+") == "USB_D+"
        assert validate_net_name("Net-R1-Pad1") == "Net-R1-Pad1"

    @pytest.mark.parametrize("name", [
        "Net-(R1-Pad1)",
        "unconnected-(U1-NC-Pad4)",
        "/sheet1/{slash}DATA",
        "LED ANODE",
        "net@alt",
    ])
    def test_kicad_generated_and_free_form_nets(self, name):
        assert validate_net_name(name) == name

    @pytest.mark.parametrize("name", ["", "bad\nnet", "tab\there", "nul\x00"])
    def test_invalid_nets(self, name):
        with pytest.raises(InvalidNetNameError):
            validate_net_name(name)


class TestValidateProjectDir:
    def test_valid_directory(self, sample_project_dir: Path):
        assert validate_project_dir(str(sample_project_dir)) == sample_project_dir.resolve()

    def test_file_rejected(self, sample_board_path: Path):
        with pytest.raises(InvalidPathError):
            validate_project_dir(str(sample_board_path))

    def test_nonexistent_path(self):
        with pytest.raises(InvalidPathError):
            validate_project_dir("/nonexistent/project")

    def test_empty_path(self):
        with pytest.raises(InvalidPathError):
            validate_project_dir("")


class TestValidatePositive:
    def test_valid(self):
        assert validate_positive(1.0) == 1.0
        assert validate_positive(0.001) == 0.001

    def test_invalid(self):
        with pytest.raises(ValidationError):
            validate_positive(0.0)
        with pytest.raises(ValidationError, match="radius must be positive"):
            validate_positive(-1.0, "radius")
