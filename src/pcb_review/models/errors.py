"""Custom exception hierarchy for PCB Review."""

from __future__ import annotations


class PCBReviewError(Exception):
    """Base exception for all PCB Review errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class SExprParseError(PCBReviewError):
    """Structural failure while parsing S-expression text."""


class UnclosedListError(SExprParseError):
    """End of input reached before a list's closing parenthesis."""


class UnclosedStringError(SExprParseError):
    """End of input reached before a quoted string's closing quote."""


class ProjectError(PCBReviewError):
    """Error related to locating or reading project files."""


class InvalidFileFormatError(ProjectError):
    """File is not the expected KiCad document kind."""


class PCBNotFoundError(ProjectError):
    """No .kicad_pcb file in the project directory."""


class SchematicNotFoundError(ProjectError):
    """No .kicad_sch files in the project directory."""


class ValidationError(PCBReviewError):
    """Input validation failed."""


class InvalidReferenceError(ValidationError):
    """Component reference designator is invalid."""


class InvalidNetNameError(ValidationError):
    """Net name is invalid."""


class InvalidPathError(ValidationError):
    """File path is invalid or inaccessible."""


class ComponentNotFoundError(ValidationError):
    """Component reference is not present on the board."""
