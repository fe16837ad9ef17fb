"""
workflowdoc Workflow Discovery Module

This module enumerates candidate workflow files in a directory and runs the
annotation extractor over them as a batch.

Key Responsibilities:
    1. List *.yml and *.yaml files in the workflows directory
    2. Skip symbolic links, detected without following them
    3. Run extraction per file, keeping discovery order
    4. Turn per-file read errors into warnings so one bad file never
       aborts the batch

Design Notes:
    - Discovery is not recursive; GitHub only reads the top level of
      .github/workflows
    - A missing directory yields an empty result. Whether that is fatal is
      decided by the caller.
    - Loggers are passed in explicitly. Nothing here configures logging.
"""

import fnmatch
import logging
import os
import stat
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from workflowdoc.errors import ExtractionError
from workflowdoc.extractors import AnnotationExtractor, BaseExtractor
from workflowdoc.schema import WorkflowRecord

# Matched in this order; each pattern's matches are sorted. Dotfiles match too.
WORKFLOW_PATTERNS: tuple[str, ...] = ("*.yml", "*.yaml")


@dataclass
class DiscoveryResult:
    """
    Result of enumerating a workflows directory.

    Attributes:
        directory: The directory that was scanned
        files: Workflow file paths, in discovery order
        skipped: (path, reason) for every candidate that was skipped
        warnings: Human-readable warnings generated during discovery
    """
    directory: Path
    files: list[Path] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)


@dataclass
class BatchResult:
    """
    Result of extracting a batch of workflow files.

    Attributes:
        records: Extracted records, in the order the files were given
        failures: (path, reason) for files that could not be read
    """
    records: list[WorkflowRecord] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [f"Failed to parse workflow file {path}: {reason}" for path, reason in self.failures]


class WorkflowDiscovery:
    """
    Finds workflow files in a single directory.

    Usage:
        discovery = WorkflowDiscovery(".github/workflows")
        result = discovery.discover()
        for path in result.files:
            print(path)

    Attributes:
        directory: The directory to scan
        logger: Logger that receives skip warnings
    """

    def __init__(
        self,
        directory: str | Path,
        logger: Optional[logging.Logger] = None,
    ):
        self.directory = Path(directory)
        self.logger = logger or logging.getLogger(__name__)

    def _candidates(self) -> list[Path]:
        names = sorted(os.listdir(self.directory))
        candidates: list[Path] = []
        for pattern in WORKFLOW_PATTERNS:
            candidates.extend(
                self.directory / name for name in names if fnmatch.fnmatchcase(name, pattern)
            )
        return candidates

    def _skip(self, result: DiscoveryResult, path: Path, reason: str) -> None:
        result.skipped.append((str(path), reason))
        result.warnings.append(f"{reason}: {path}")
        self.logger.warning("%s: %s", reason, path)

    def discover(self) -> DiscoveryResult:
        """
        Enumerate workflow files.

        Returns:
            DiscoveryResult with files in discovery order
        """
        result = DiscoveryResult(directory=self.directory)

        if not self.directory.is_dir():
            self.logger.info("Workflows directory not found: %s", self.directory)
            return result

        for path in self._candidates():
            try:
                mode = os.lstat(path).st_mode
            except OSError as e:
                self._skip(result, path, f"Failed to stat file ({e.strerror})")
                continue

            if stat.S_ISLNK(mode):
                self._skip(result, path, "Skipping symlink")
                continue

            if not stat.S_ISREG(mode):
                self._skip(result, path, "Skipping non-regular file")
                continue

            result.files.append(path)

        self.logger.info("Discovered %d workflow file(s) in %s", result.file_count, self.directory)
        return result


def discover_workflows(
    directory: str | Path,
    logger: Optional[logging.Logger] = None,
) -> DiscoveryResult:
    """
    Convenience function to discover workflow files.

    Args:
        directory: Path to the workflows directory
        logger: Logger for skip warnings (defaults to this module's logger)

    Returns:
        DiscoveryResult containing the workflow file paths

    Example:
        result = discover_workflows(".github/workflows")
        for warning in result.warnings:
            print(f"Warning: {warning}")
    """
    return WorkflowDiscovery(directory, logger=logger).discover()


def extract_workflows(
    paths: Iterable[str | Path],
    extractor: Optional[BaseExtractor] = None,
    logger: Optional[logging.Logger] = None,
    max_workers: int = 1,
) -> BatchResult:
    """
    Extract records from a batch of workflow files.

    Files that cannot be read are logged, recorded as failures and left out
    of the records. With max_workers > 1 files are read in a thread pool;
    records still come back in the order of paths.

    Args:
        paths: Workflow files, in the order the report should list them
        extractor: Extractor to use (defaults to AnnotationExtractor)
        logger: Logger for per-file failures
        max_workers: Number of extraction threads

    Returns:
        BatchResult with records in input order
    """
    extractor = extractor or AnnotationExtractor()
    log = logger or logging.getLogger(__name__)
    ordered: Sequence[str | Path] = list(paths)

    def attempt(path: str | Path) -> WorkflowRecord | ExtractionError:
        try:
            return extractor.extract(path)
        except ExtractionError as e:
            return e

    if max_workers > 1 and len(ordered) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(attempt, ordered))
    else:
        outcomes = [attempt(path) for path in ordered]

    batch = BatchResult()
    for path, outcome in zip(ordered, outcomes):
        if isinstance(outcome, ExtractionError):
            log.warning("Failed to parse workflow file %s: %s", path, outcome.reason)
            batch.failures.append((str(path), outcome.reason))
            continue
        log.debug("Extracted %s", path)
        batch.records.append(outcome)

    return batch
