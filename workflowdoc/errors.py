"""
Exception hierarchy for workflowdoc.

Directory-level and write-level errors abort a run. Per-file extraction
errors are caught at the batch level and reported as warnings.
"""

from pathlib import Path


class WorkflowDocError(Exception):
    """Base class for all workflowdoc errors."""


class WorkflowsDirNotFoundError(WorkflowDocError):
    """The workflows directory does not exist."""

    def __init__(self, path: str | Path):
        self.path = path
        super().__init__(f"Workflows directory does not exist: {path}")


class ExtractionError(WorkflowDocError):
    """A single workflow file could not be opened or read."""

    def __init__(self, path: str | Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read workflow file {path}: {reason}")


class ReportWriteError(WorkflowDocError):
    """The rendered report could not be written to its target."""

    def __init__(self, path: str | Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write report to {path}: {reason}")


class ConfigError(WorkflowDocError):
    """The configuration file is unreadable or contains invalid settings."""
