"""Persistence error hierarchy."""

from __future__ import annotations


class PersistenceError(Exception):
    """Base error for project export/import."""


class ProjectFormatError(PersistenceError):
    """Blob is not a project: not JSON, not a mapping, or wrong top-level types."""
