"""
Extraction errors - Machine-readable failure kinds for the gateway.

Every failure is terminal for the request. None are retried.
"""

from __future__ import annotations
from enum import Enum


class ErrorKind(Enum):
    """Failure kinds, each paired with its HTTP status."""
    MISSING_INPUT = ("MISSING_INPUT", 400)
    INVALID_FORMAT = ("INVALID_FORMAT", 400)
    MISCONFIGURED = ("MISCONFIGURED", 500)
    UNEXPECTED_MODEL_OUTPUT = ("UNEXPECTED_MODEL_OUTPUT", 500)
    EXTRACTION_FAILED = ("EXTRACTION_FAILED", 500)
    INVALID_MODEL_RESPONSE = ("INVALID_MODEL_RESPONSE", 500)
    INTERNAL_FAILURE = ("INTERNAL_FAILURE", 500)

    def __init__(self, code: str, status_code: int):
        self.code = code
        self.status_code = status_code


class ExtractionError(Exception):
    """Raised by the gateway with a kind and a human-readable message."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"ExtractionError({self.kind.code}, {self.message!r})"
