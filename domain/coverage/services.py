"""Coverage Bounded Context - Domain Services.

First Fresnel zone geometry for a point-to-point link. Pure domain logic,
NO I/O.

The first Fresnel zone radius at a point splitting the path into d1 and d2 is

    r = sqrt(wavelength * d1 * d2 / (d1 + d2))

which peaks at the midpoint (d1 = d2 = D/2) at 0.5 * sqrt(wavelength * D).
"""

from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from domain.coverage.errors import InvalidInputError
from domain.coverage.value_objects import FresnelAnalysis, FresnelSample
from domain.geodesy.services import distance_km, interpolate, midpoint
from domain.geodesy.value_objects import GeoPoint

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SPEED_OF_LIGHT_M_S = 3e8
PROFILE_SAMPLES = 25  # f = i / 24 for i in 0..24


# ---------------------------------------------------------------------------
# Scalar Formulas
# ---------------------------------------------------------------------------
def wavelength_m(frequency_ghz: float) -> float:
    """Wavelength in meters for a frequency in GHz."""
    return SPEED_OF_LIGHT_M_S / (frequency_ghz * 1e9)


def fresnel_radius(wavelength: float, d1: float, d2: float) -> float:
    """First Fresnel zone radius at distances d1/d2 (meters) from each end.

    Returns 0.0 when d1 + d2 == 0.
    """
    total = d1 + d2
    if total == 0:
        return 0.0
    return math.sqrt(wavelength * d1 * d2 / total)


def max_fresnel_radius(wavelength: float, distance_m: float) -> float:
    """Radius at the link midpoint, the point of maximum clearance requirement."""
    if distance_m <= 0:
        return 0.0
    return 0.5 * math.sqrt(wavelength * distance_m)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------
def fresnel_profile(
    start: GeoPoint,
    end: GeoPoint,
    wavelength: float,
    distance_m: float,
    samples: int = PROFILE_SAMPLES,
) -> tuple[FresnelSample, ...]:
    """Sample the first Fresnel zone radius at evenly spaced fractions.

    Fractions are i / (samples - 1), so the first and last samples sit on the
    towers and have radius 0 by construction.

    Raises:
        ValueError: If samples < 2
    """
    if samples < 2:
        raise ValueError(f"samples must be >= 2, got {samples}")

    fractions = np.arange(samples, dtype=np.float64) / (samples - 1)
    d1 = distance_m * fractions
    d2 = distance_m * (1 - fractions)
    total = d1 + d2

    # Zero-length links leave every radius at 0 (avoid 0/0)
    radii = np.zeros(samples, dtype=np.float64)
    mask = total > 0
    radii[mask] = np.sqrt(wavelength * d1[mask] * d2[mask] / total[mask])

    return tuple(
        FresnelSample(
            fraction=float(f),
            point=interpolate(start, end, float(f)),
            radius_m=float(r),
            distance_from_start_m=float(d),
        )
        for f, r, d in zip(fractions, radii, d1)
    )


# ---------------------------------------------------------------------------
# Input Coercion
# ---------------------------------------------------------------------------
def coerce_frequency_ghz(value: Any) -> float:
    """Parse a frequency into a finite positive float.

    Numeric strings are accepted (form input arrives as text); booleans are
    not numbers here.

    Raises:
        InvalidInputError: If the value is missing, non-numeric, NaN, inf or <= 0
    """
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"Invalid frequency for Fresnel analysis: {value!r}")
    try:
        frequency = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidInputError(
            f"Invalid frequency for Fresnel analysis: {value!r}"
        ) from e
    if not math.isfinite(frequency) or frequency <= 0:
        raise InvalidInputError(f"Invalid frequency for Fresnel analysis: {value!r}")
    return frequency


# ---------------------------------------------------------------------------
# Main Service: analyze
# ---------------------------------------------------------------------------
def analyze(
    start: GeoPoint | None,
    end: GeoPoint | None,
    frequency_ghz: Any,
    samples: int = PROFILE_SAMPLES,
) -> FresnelAnalysis:
    """Analyze the first Fresnel zone of the straight path start -> end.

    Args:
        start: Position of the link's `from` tower
        end: Position of the link's `to` tower
        frequency_ghz: Operating frequency in GHz
        samples: Number of profile samples (including both endpoints)

    Returns:
        FresnelAnalysis with wavelength, distance, max radius, midpoint and profile

    Raises:
        InvalidInputError: If an endpoint is missing or the frequency is unusable

    Example:
        >>> a = GeoPoint(latitude=12.97, longitude=77.59)
        >>> b = GeoPoint(latitude=12.98, longitude=77.60)
        >>> result = analyze(a, b, 5.0)
        >>> print(f"{result.max_radius_m:.2f} m over {result.distance_km:.3f} km")
    """
    if start is None or end is None:
        raise InvalidInputError("Invalid link for Fresnel analysis: missing endpoint")

    frequency = coerce_frequency_ghz(frequency_ghz)
    wavelength = wavelength_m(frequency)
    total_distance_m = distance_km(start, end) * 1000

    analysis = FresnelAnalysis(
        frequency_ghz=frequency,
        wavelength_m=wavelength,
        distance_m=total_distance_m,
        max_radius_m=max_fresnel_radius(wavelength, total_distance_m),
        midpoint=midpoint(start, end),
        profile=fresnel_profile(start, end, wavelength, total_distance_m, samples),
    )
    logger.debug(
        "Fresnel analysis: %.3f GHz over %.1f m, max radius %.2f m",
        frequency,
        total_distance_m,
        analysis.max_radius_m,
    )
    return analysis
