"""
Base Extractor Interface

This module defines the abstract base class for workflow extractors. It
establishes a consistent contract for how an extractor receives one file
path and produces one WorkflowRecord.

Design Principles:
    1. One file in, one record out: extractors share no state between files
    2. No ambient logging: read failures are raised as ExtractionError and
       the caller decides how to report them
    3. Source attribution: every record remembers the path it came from
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from workflowdoc.errors import ExtractionError
from workflowdoc.schema import WorkflowRecord

WORKFLOW_EXTENSIONS: frozenset[str] = frozenset({".yml", ".yaml"})


def is_workflow_file(path: str | Path) -> bool:
    """
    Check whether a path has a workflow file extension.

    Args:
        path: The file path to check

    Returns:
        True for .yml and .yaml files (case-insensitive)
    """
    return os.path.splitext(os.fspath(path))[1].lower() in WORKFLOW_EXTENSIONS


class BaseExtractor(ABC):
    """
    Abstract base class for workflow extractors.

    Subclasses must implement:
        - name: Human-readable name for the extractor
        - extract(): Read one file and build its WorkflowRecord

    Attributes:
        name: Human-readable identifier for this extractor
        encoding: Text encoding used to read workflow files
    """

    name: str = "Base"

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def can_handle(self, path: str | Path) -> bool:
        """Return True if this extractor understands the given file."""
        return is_workflow_file(path)

    def read_lines(self, path: str | Path) -> Iterator[str]:
        """
        Yield the lines of a file, without trailing newlines.

        Errors while opening or reading (including mid-scan decode errors)
        are raised as ExtractionError.

        Args:
            path: Path to the file to read

        Raises:
            ExtractionError: If the file cannot be opened or read
        """
        try:
            with open(path, "r", encoding=self.encoding) as f:
                for line in f:
                    yield line.rstrip("\r\n")
        except FileNotFoundError:
            raise ExtractionError(path, "file not found")
        except PermissionError:
            raise ExtractionError(path, "permission denied")
        except IsADirectoryError:
            raise ExtractionError(path, "is a directory")
        except UnicodeDecodeError as e:
            raise ExtractionError(path, f"not valid {self.encoding}: {e.reason}")
        except OSError as e:
            raise ExtractionError(path, str(e))

    @abstractmethod
    def extract(self, path: str | Path) -> WorkflowRecord:
        """
        Extract a WorkflowRecord from a single file.

        Args:
            path: Path to the workflow file

        Returns:
            The extracted record. Files without annotations produce a
            record whose optional fields are all None.

        Raises:
            ExtractionError: If the file cannot be read
        """
        pass
