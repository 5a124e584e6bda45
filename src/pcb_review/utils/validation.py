"""Input validation utilities for tool and CLI arguments."""

from __future__ import annotations

import re
from pathlib import Path

from pcb_review.models.errors import (
    InvalidNetNameError,
    InvalidPathError,
    InvalidReferenceError,
    ValidationError,
)

# Reference designator pattern: one or more letters followed by one or more digits
# Supports multi-unit like U3A, U3B
REFERENCE_PATTERN = re.compile(r"^[A-Za-z]+\d+[A-Za-z]?$")

# Net names are free-form in KiCad: auto-generated ones look like Net-(R1-Pad1)
# and user names may hold spaces or braces. Only control characters are rejected.
NET_NAME_FORBIDDEN = re.compile(r"[\x00-\x1f\x7f]")


def validate_reference(ref: str) -> str:
    """Validate a component reference designator.

    Args:
        ref: Reference like 'R1', 'U3', 'C10', 'Q2A'.

    Returns:
        The validated reference string.

    Raises:
        InvalidReferenceError: If the reference format is invalid.
    """
    if not ref or not REFERENCE_PATTERN.match(ref):
        raise InvalidReferenceError(
            f"Invalid reference designator: '{ref}'. "
            "Expected format: letter(s) + number(s), e.g. R1, U3, C10"
        )
    return ref


def validate_net_name(name: str) -> str:
    """Validate a net name.

    Raises:
        InvalidNetNameError: If the net name format is invalid.
    """
    if not name:
        raise InvalidNetNameError("Net name cannot be empty")
    if NET_NAME_FORBIDDEN.search(name):
        raise InvalidNetNameError(
            f"Invalid net name: {name!r}. Control characters are not allowed"
        )
    return name


def validate_project_dir(path: str) -> Path:
    """Validate a KiCad project directory.

    Returns:
        Resolved Path object.

    Raises:
        InvalidPathError: If the path is empty, missing or not a directory.
    """
    if not path:
        raise InvalidPathError("Project directory cannot be empty")

    p = Path(path).resolve()

    if not p.exists():
        raise InvalidPathError(f"Directory not found: {p}")

    if not p.is_dir():
        raise InvalidPathError(f"Expected a project directory, got a file: {p}")

    return p


def validate_positive(value: float, name: str = "value") -> float:
    """Validate that a numeric value is positive."""
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value
