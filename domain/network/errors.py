"""Network Bounded Context - Error Hierarchy.

Custom exceptions for tower/link operations.

Lookups of unknown ids are routine existence checks and surface as None/False returns
from the registries; NotFoundError is provided for callers that prefer to
raise on a miss (TowerRegistry.require, LinkRegistry.require).
"""

from __future__ import annotations


class NetworkError(Exception):
    """Base error for network operations."""


class ValidationError(NetworkError):
    """A link creation/connection rule was violated.

    Attributes:
        reason: Operator-facing explanation, surfaced verbatim
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class NoPendingLinkError(NetworkError):
    """Completing a link while no pending link is active."""

    def __init__(self, message: str = "No pending link active") -> None:
        super().__init__(message)


class NotFoundError(NetworkError):
    """Unknown tower or link id.

    Attributes:
        kind: "tower" or "link"
        entity_id: The id that failed to resolve
    """

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind} id: {entity_id}")
