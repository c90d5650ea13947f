"""
Error types for the PLEX runtime.

Precondition violations (empty corpus, bad configuration, malformed input) are
raised immediately, before any work starts. Per-unit failures inside the pulse
scheduler are captured on the unit's result instead; UnitFailureError is only
raised when a caller explicitly asks for plain values.
"""

from typing import List


class PlexError(Exception):
    """Base class for all PLEX runtime errors"""


class EmptyCorpusError(PlexError, ValueError):
    """Corpus statistics requested over zero documents (or zero tokens)"""


class InvalidConfigError(PlexError, ValueError):
    """Engine or scheduler configuration holds an out-of-range value"""


class MalformedInputError(PlexError, TypeError):
    """A document or query cannot be read as the expected field/string shape"""


class UnitFailureError(PlexError):
    """
    One or more scheduled units did not produce a value.

    Attributes:
        failures: UnitResult entries for every failed or cancelled unit,
            in dataset order
    """

    def __init__(self, failures: List["UnitResult"]):  # noqa: F821
        self.failures = list(failures)
        ids = ", ".join(str(f.id) for f in self.failures[:10])
        if len(self.failures) > 10:
            ids += ", ..."
        first = self.failures[0].error if self.failures else None
        message = f"{len(self.failures)} unit(s) failed: [{ids}]"
        if first is not None:
            message += f" (first error: {first!r})"
        super().__init__(message)
