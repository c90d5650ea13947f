"""
Configuration for the BM25 engine and the pulse scheduler.

Both configs are immutable pydantic models owned by the caller; every engine or
scheduler instance gets its own, so several can coexist in one process.

Config (env vars, all optional):
    PLEX_FIELDS: comma-separated record fields to index (default: city,state,zip,_id)
    PLEX_BM25_K1: term frequency saturation (default: 1.2)
    PLEX_BM25_B: length normalization strength (default: 0.75)
    PLEX_STEMMING: "true" to enable Snowball stemming (default: false)
    PLEX_PULSE_SIZE: units per pulse (default: 32)
    PLEX_MAX_CONCURRENCY: max in-flight units (default: 8)
"""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConfigError

logger = logging.getLogger(__name__)

DEFAULT_FIELDS = ("city", "state", "zip", "_id")


def load_environment(base_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Load environment variables from .env.local (local dev) or .env.

    Args:
        base_dir: Directory holding the env files (default: current directory)

    Returns:
        Path of the loaded file, or None if neither exists
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    env_local = base / ".env.local"
    env_file = base / ".env"

    # .env.local has the highest priority
    for candidate in (env_local, env_file):
        if candidate.exists():
            logger.info(f"Loading environment from: {candidate}")
            load_dotenv(candidate, override=True)
            return candidate

    logger.debug("No .env.local or .env file found - using system environment variables only")
    return None


def _env_number(name: str, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError:
        raise InvalidConfigError(f"{name} must be a number, got {raw!r}") from None


class _Config(BaseModel):
    """Frozen model that reports validation problems as InvalidConfigError"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InvalidConfigError(f"Invalid {type(self).__name__}: {problems}") from e


class EngineConfig(_Config):
    """
    BM25 engine settings.

    Args:
        fields: Record fields concatenated into the document text
        k1: Term frequency saturation parameter
            Higher = more weight to repeated terms
            Default: 1.2 (standard)
        b: Length normalization parameter
            0 = no length penalty, 1 = full normalization
            Default: 0.75 (standard)
        stemming: Reduce tokens to Snowball stems (documents and queries alike)
    """

    fields: Tuple[str, ...] = Field(default=DEFAULT_FIELDS, min_length=1)
    k1: float = Field(default=1.2, ge=0.0)
    b: float = Field(default=0.75, ge=0.0, le=1.0)
    stemming: bool = False

    @classmethod
    def from_env(cls) -> "EngineConfig":
        values = {}

        fields = os.getenv("PLEX_FIELDS")
        if fields:
            values["fields"] = tuple(f.strip() for f in fields.split(",") if f.strip())

        k1 = _env_number("PLEX_BM25_K1", float)
        if k1 is not None:
            values["k1"] = k1

        b = _env_number("PLEX_BM25_B", float)
        if b is not None:
            values["b"] = b

        stemming = os.getenv("PLEX_STEMMING")
        if stemming:
            values["stemming"] = stemming.lower() == "true"

        return cls(**values)


class PulseConfig(_Config):
    """
    Pulse scheduler settings.

    Args:
        pulse_size: Max units per pulse; also the barrier interval
        max_concurrency: Admission ceiling for simultaneously active units
    """

    pulse_size: int = Field(default=32, gt=0, strict=True)
    max_concurrency: int = Field(default=8, gt=0, strict=True)

    @classmethod
    def from_env(cls) -> "PulseConfig":
        values = {}

        pulse_size = _env_number("PLEX_PULSE_SIZE", int)
        if pulse_size is not None:
            values["pulse_size"] = pulse_size

        max_concurrency = _env_number("PLEX_MAX_CONCURRENCY", int)
        if max_concurrency is not None:
            values["max_concurrency"] = max_concurrency

        return cls(**values)
