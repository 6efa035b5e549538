"""Network Bounded Context - Entities and Value Objects.

Towers and links are entities: they have identity and mutable attributes,
validated on every assignment. Links refer to towers by id only; every read
of an endpoint resolves through TowerRegistry.
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.geodesy.value_objects import GeoPoint

DEFAULT_HEIGHT_M = 30


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_tower_id() -> str:
    return f"tower_{uuid.uuid4().hex}"


def new_link_id() -> str:
    return f"link_{uuid.uuid4().hex}"


def is_usable_frequency(value: float | None) -> bool:
    """True for a finite frequency > 0."""
    return value is not None and math.isfinite(value) and value > 0


# ---------------------------------------------------------------------------
# Tower (Entity)
# ---------------------------------------------------------------------------
class Tower(BaseModel):
    """Radio tower placed on the map (Entity).

    Invariants:
        TW-1: id never changes
        TW-2: latitude in [-90, 90], longitude in [-180, 180]
        TW-3: height_m > 0
        TW-4: frequency_ghz is None when unset, never NaN
    """

    id: str = Field(default_factory=new_tower_id, frozen=True)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    name: str
    frequency_ghz: float | None = None
    height_m: int = Field(default=DEFAULT_HEIGHT_M, gt=0)
    created_at: datetime = Field(default_factory=_utcnow, frozen=True)

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("frequency_ghz")
    @classmethod
    def reject_non_finite(cls, value: float | None) -> float | None:
        # Unset is None, never NaN
        if value is not None and not math.isfinite(value):
            raise ValueError(f"frequency_ghz must be finite or None, got {value}")
        return value

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    @property
    def has_usable_frequency(self) -> bool:
        return is_usable_frequency(self.frequency_ghz)


# ---------------------------------------------------------------------------
# Link (Entity)
# ---------------------------------------------------------------------------
class Link(BaseModel):
    """Point-to-point RF link between two towers (Entity).

    The pair is unordered for connectivity; from/to order is kept for display.

    Invariants:
        LK-1: from_tower_id != to_tower_id
        LK-2: distance_km >= 0
    """

    id: str = Field(default_factory=new_link_id, frozen=True)
    from_tower_id: str = Field(frozen=True)
    to_tower_id: str = Field(frozen=True)
    frequency_ghz: float | None = None
    distance_km: float = Field(ge=0)
    created_at: datetime = Field(default_factory=_utcnow, frozen=True)

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("frequency_ghz")
    @classmethod
    def reject_non_finite(cls, value: float | None) -> float | None:
        if value is not None and not math.isfinite(value):
            raise ValueError(f"frequency_ghz must be finite or None, got {value}")
        return value

    @model_validator(mode="after")
    def validate_endpoints(self) -> "Link":
        if self.from_tower_id == self.to_tower_id:
            raise ValueError("Link endpoints must be distinct towers")
        return self

    def touches(self, tower_id: str) -> bool:
        return tower_id in (self.from_tower_id, self.to_tower_id)

    def connects(self, tower_a_id: str, tower_b_id: str) -> bool:
        """True if this link joins the unordered pair (a, b)."""
        return {self.from_tower_id, self.to_tower_id} == {tower_a_id, tower_b_id}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
class PendingLink(BaseModel):
    """First endpoint picked during two-click link creation (Value Object)."""

    from_tower_id: str

    model_config = ConfigDict(frozen=True)


class ConnectionCheck(BaseModel):
    """Outcome of TowerRegistry.validate_connection (Value Object)."""

    valid: bool
    reason: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(cls) -> "ConnectionCheck":
        return cls(valid=True)

    @classmethod
    def rejected(cls, reason: str) -> "ConnectionCheck":
        return cls(valid=False, reason=reason)


class LinkSummary(BaseModel):
    """Display-ready description of a link (Value Object)."""

    link_id: str
    from_name: str
    to_name: str
    distance_km: float
    frequency_ghz: float | None
    status: str  # "Connected" or "Frequency Mismatch"
    azimuth_deg: float  # Bearing from the `from` tower towards the `to` tower

    model_config = ConfigDict(frozen=True)

    @property
    def title(self) -> str:
        return f"{self.from_name} ↔ {self.to_name}"
