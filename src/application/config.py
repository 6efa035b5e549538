"""Planner configuration.

Settings are an immutable Pydantic model. Hosts either construct one
directly or read it from RFPLANNER_* environment variables.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.coverage.services import PROFILE_SAMPLES
from domain.network.entities import DEFAULT_HEIGHT_M

logger = logging.getLogger(__name__)

ENV_PREFIX = "RFPLANNER_"


class PlannerSettings(BaseModel):
    """Defaults applied by PlanningSession.

    Attributes:
        default_frequency_ghz: Frequency given to towers placed on the map.
            None places towers with the frequency unset.
        default_height_m: Height given to towers created without one
        fresnel_samples: Profile samples per Fresnel analysis (both ends included)
    """

    default_frequency_ghz: float | None = 5.0
    default_height_m: int = Field(default=DEFAULT_HEIGHT_M, gt=0)
    fresnel_samples: int = Field(default=PROFILE_SAMPLES, ge=2)

    model_config = ConfigDict(frozen=True)

    @field_validator("default_frequency_ghz")
    @classmethod
    def validate_frequency(cls, value: float | None) -> float | None:
        if value is not None and not value > 0:
            raise ValueError(f"default_frequency_ghz must be positive, got {value}")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PlannerSettings":
        """Build settings from RFPLANNER_* variables; unset ones keep defaults.

        RFPLANNER_DEFAULT_FREQUENCY_GHZ="" or "none" means towers start unset.

        Raises:
            pydantic.ValidationError: If a variable does not parse
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for field in cls.model_fields:
            raw = env.get(ENV_PREFIX + field.upper())
            if raw is None:
                continue
            if field == "default_frequency_ghz" and raw.strip().lower() in ("", "none"):
                values[field] = None
            else:
                values[field] = raw.strip()
        settings = cls.model_validate(values)
        logger.debug("Loaded settings: %s", settings)
        return settings
