"""
Error taxonomy for permission resolution.

Fallback outcomes (no governance file, unknown SIG, empty diff) are not
errors and never raise.
"""

from __future__ import annotations


class SigGuardError(Exception):
    """Base class for all sigguard errors."""


class ConflictError(SigGuardError):
    """More than one governance file is touched by a single pull request."""

    def __init__(self, filenames: list[str]):
        self.filenames = filenames
        super().__init__(
            f"Ambiguous governance file: {len(filenames)} candidates "
            f"({', '.join(filenames)})"
        )


class FetchFailure(SigGuardError):
    """The governance file could not be fetched or parsed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load governance file {url}: {reason}")
