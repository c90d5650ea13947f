"""
PLEX runtime - exact sparse search and pulse-based batch execution.

- plex.bm25: BM25 ranking over small multi-field records
- plex.pulse: bounded-concurrency executor that maps a function over a dataset
  in sequential pulses
"""

from .config import EngineConfig, PulseConfig, load_environment
from .errors import (
    EmptyCorpusError,
    InvalidConfigError,
    MalformedInputError,
    PlexError,
    UnitFailureError,
)
from .bm25 import BM25Engine, ScoredMatch
from .pulse import PulseScheduler, UnitResult, UnitStatus

__version__ = "0.1.1"

__all__ = [
    "EngineConfig",
    "PulseConfig",
    "load_environment",
    "PlexError",
    "EmptyCorpusError",
    "InvalidConfigError",
    "MalformedInputError",
    "UnitFailureError",
    "BM25Engine",
    "ScoredMatch",
    "PulseScheduler",
    "UnitResult",
    "UnitStatus",
]
