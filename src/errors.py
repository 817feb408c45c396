"""
Exception types shared by the scoring, domain, artifact and reporting layers.

Only ConfigurationError is allowed to escape the orchestrator; the others
are caught per processing unit and recorded in the batch report.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Static configuration is unusable (lookup, battery rules, registry)."""


class SourceReadError(OSError):
    """A raw data source could not be read or lacks the required columns."""

    def __init__(self, path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class ArtifactWriteError(OSError):
    """An output artifact could not be written to its destination."""

    def __init__(self, path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class InvalidTransitionError(RuntimeError):
    """A processing unit was asked to make a state transition it cannot make."""
