"""Coverage Bounded Context - Error Hierarchy."""

from __future__ import annotations


class CoverageError(Exception):
    """Base error for coverage operations."""


class InvalidInputError(CoverageError):
    """Fresnel analysis invoked with a missing endpoint or unusable frequency."""
