"""Coverage Bounded Context - Value Objects.

Immutable results of Fresnel-zone analysis. Validation occurs at
construction time via Pydantic.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.geodesy.value_objects import GeoPoint


class FresnelSample(BaseModel):
    """First Fresnel zone radius at one point along a link (Value Object).

    Invariants:
        FS-1: 0 <= fraction <= 1
        FS-2: radius_m >= 0
        FS-3: distance_from_start_m >= 0
    """

    fraction: float = Field(ge=0, le=1)  # Position along the path (0 = from tower)
    point: GeoPoint  # Linearly interpolated location
    radius_m: float = Field(ge=0)
    distance_from_start_m: float = Field(ge=0)

    model_config = ConfigDict(frozen=True)


class FresnelAnalysis(BaseModel):
    """First Fresnel zone analysis of a link (Value Object).

    Invariants:
        FA-1: wavelength_m > 0
        FA-2: max_radius_m == 0 when distance_m == 0
        FA-3: profile ordered by fraction, first at 0 and last at 1

    Note: midpoint is the arithmetic mean of the endpoint coordinates, not the
    geodesic midpoint. The error is negligible for planning-scale links.
    """

    frequency_ghz: float = Field(gt=0)
    wavelength_m: float = Field(gt=0)
    distance_m: float = Field(ge=0)
    max_radius_m: float = Field(ge=0)
    midpoint: GeoPoint
    profile: tuple[FresnelSample, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_analysis(self) -> "FresnelAnalysis":
        if self.distance_m == 0 and self.max_radius_m != 0:
            raise ValueError("max_radius_m must be 0 for a zero-length link")
        if self.profile:
            if self.profile[0].fraction != 0 or self.profile[-1].fraction != 1:
                raise ValueError("Profile must span fraction 0 to 1")
            for prev, cur in zip(self.profile, self.profile[1:]):
                if cur.fraction <= prev.fraction:
                    raise ValueError("Profile samples must be ordered by fraction")
        return self

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000

    def radii(self) -> tuple[float, ...]:
        """Return sampled radii in path order."""
        return tuple(s.radius_m for s in self.profile)

    def peak_index(self) -> int:
        """Index of the sample with the largest radius (first one on ties)."""
        radii = self.radii()
        return radii.index(max(radii))
