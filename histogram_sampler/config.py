from __future__ import annotations

import logging
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_ENV_PREFIX = "HISTOGRAM_SAMPLER_"


class SamplerSettings(BaseModel):
    max_samples: int = Field(
        100_000, ge=1, description="Largest number of samples one request may draw"
    )
    log_level: LogLevel = Field("WARNING", description="Root logging level")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> SamplerSettings:
        """Build settings from ``HISTOGRAM_SAMPLER_*`` variables; unset ones keep defaults."""
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for name in cls.model_fields:
            raw = environ.get(_ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw.upper() if name == "log_level" else raw
        return cls(**values)


def configure_logging(settings: SamplerSettings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
