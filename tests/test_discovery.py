"""
Tests for workflowdoc.discovery module.

Tests workflow file enumeration and batch extraction.
"""

import logging
import os
import tempfile
from pathlib import Path

import pytest

from workflowdoc.discovery import (
    BatchResult,
    DiscoveryResult,
    WorkflowDiscovery,
    discover_workflows,
    extract_workflows,
)
from workflowdoc.errors import ExtractionError
from workflowdoc.extractors import BaseExtractor
from workflowdoc.schema import WorkflowRecord

symlinks_supported = pytest.mark.skipif(
    not hasattr(os, "symlink") or os.name == "nt",
    reason="symlinks not available",
)


class TestWorkflowDiscovery:
    """Tests for the WorkflowDiscovery class."""

    def test_multiple_workflow_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            (tmppath / "ci.yml").write_text("# @workflow.name: CI\nname: CI")
            (tmppath / "test.yaml").write_text("# @workflow.name: Test\nname: Test")
            (tmppath / "deploy.yml").write_text("# @workflow.name: Deploy\nname: Deploy")

            result = WorkflowDiscovery(tmppath).discover()

            assert isinstance(result, DiscoveryResult)
            assert result.file_count == 3

    def test_discovery_order(self):
        """.yml files come first, each group sorted by name."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            for name in ["b.yaml", "z.yml", "a.yaml", "m.yml"]:
                (tmppath / name).write_text("")

            result = discover_workflows(tmppath)

            assert [p.name for p in result.files] == ["m.yml", "z.yml", "a.yaml", "b.yaml"]

    def test_empty_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            result = discover_workflows(tmpdir)

            assert result.files == []
            assert result.warnings == []

    def test_non_workflow_files_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            (tmppath / "workflow.yml").write_text("# @workflow.name: Valid\nname: Valid")
            (tmppath / "readme.md").write_text("# README")
            (tmppath / "script.sh").write_text("#!/bin/bash")
            (tmppath / "data.json").write_text("{}")

            result = discover_workflows(tmppath)

            assert [p.name for p in result.files] == ["workflow.yml"]

    def test_not_recursive(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            (tmppath / "nested").mkdir()
            (tmppath / "nested" / "inner.yml").write_text("")
            (tmppath / "top.yml").write_text("")

            result = discover_workflows(tmppath)

            assert [p.name for p in result.files] == ["top.yml"]

    def test_non_existent_directory(self):
        """A missing directory is an empty result, not an error."""
        result = discover_workflows("/nonexistent/directory")

        assert result.files == []

    def test_directory_named_like_workflow_is_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            (tmppath / "odd.yml").mkdir()

            result = discover_workflows(tmppath)

            assert result.files == []
            assert len(result.skipped) == 1

    def test_glob_characters_in_directory_name(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            weird = Path(tmpdir) / "work[flows]"
            weird.mkdir()
            (weird / "ci.yml").write_text("")

            result = discover_workflows(weird)

            assert [p.name for p in result.files] == ["ci.yml"]

    def test_hidden_workflow_files_discovered(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / ".release.yml").write_text("")
            (Path(tmpdir) / "ci.yml").write_text("")
            (Path(tmpdir) / ".hidden.yaml").write_text("")

            result = discover_workflows(tmpdir)

            assert [p.name for p in result.files] == [".release.yml", "ci.yml", ".hidden.yaml"]

    @symlinks_supported
    def test_symlinks_skipped_with_warning(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            real = tmppath / "real.yml"
            real.write_text("# @workflow.name: Real")
            (tmppath / "link.yml").symlink_to(real)

            logger = logging.getLogger("test.discovery.symlink")
            with caplog.at_level(logging.WARNING, logger="test.discovery.symlink"):
                result = discover_workflows(tmppath, logger=logger)

            assert [p.name for p in result.files] == ["real.yml"]
            assert result.skipped[0][1] == "Skipping symlink"
            assert any("Skipping symlink" in w for w in result.warnings)
            assert "Skipping symlink" in caplog.text

    @symlinks_supported
    def test_dangling_symlink_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            (tmppath / "dangling.yml").symlink_to(tmppath / "missing.yml")

            result = discover_workflows(tmppath)

            assert result.files == []
            assert len(result.skipped) == 1


class FlakyExtractor(BaseExtractor):
    """Extractor that fails for files whose name starts with 'bad'."""

    name = "Flaky"

    def extract(self, path):
        if Path(path).name.startswith("bad"):
            raise ExtractionError(path, "simulated read failure")
        return WorkflowRecord.for_path(path, display_name=Path(path).stem)


class TestExtractWorkflows:
    """Tests for batch extraction."""

    def test_records_in_input_order(self, tmp_path):
        paths = []
        for name in ["c.yml", "a.yml", "b.yml"]:
            path = tmp_path / name
            path.write_text(f"# @workflow.name: {name}\n")
            paths.append(path)

        batch = extract_workflows(paths)

        assert isinstance(batch, BatchResult)
        assert [r.display_name for r in batch.records] == ["c.yml", "a.yml", "b.yml"]

    def test_failure_is_skipped_and_batch_continues(self, caplog):
        logger = logging.getLogger("test.discovery.batch")
        with caplog.at_level(logging.WARNING, logger="test.discovery.batch"):
            batch = extract_workflows(
                ["one.yml", "bad.yml", "two.yml"],
                extractor=FlakyExtractor(),
                logger=logger,
            )

        assert [r.display_name for r in batch.records] == ["one", "two"]
        assert batch.failures == [("bad.yml", "simulated read failure")]
        assert "bad.yml" in batch.warnings[0]
        assert "Failed to parse workflow file" in caplog.text

    def test_missing_file_is_a_failure(self, tmp_path):
        batch = extract_workflows([tmp_path / "gone.yml"])

        assert batch.records == []
        assert len(batch.failures) == 1

    def test_thread_pool_preserves_order(self):
        names = [f"wf{i:02d}.yml" for i in range(20)] + ["bad.yml"]

        sequential = extract_workflows(names, extractor=FlakyExtractor())
        parallel = extract_workflows(names, extractor=FlakyExtractor(), max_workers=4)

        assert parallel.records == sequential.records
        assert parallel.failures == sequential.failures

    def test_empty_batch(self):
        batch = extract_workflows([])

        assert batch.records == []
        assert batch.failures == []
