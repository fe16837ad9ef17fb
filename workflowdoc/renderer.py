"""
workflowdoc Markdown Renderer

This module generates the workflow documentation report from a sequence
of WorkflowRecord objects and writes it to disk.

Output Structure:
    1. Title and introduction
    2. Summary table: one row per workflow, in input order
    3. Detailed Workflow Information: one subsection per workflow that
       declares parameters, results, permissions or requirements, or a
       placeholder line when none do

Rendering is deterministic: the same records in the same order always
produce byte-identical output.
"""

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from workflowdoc.errors import ReportWriteError
from workflowdoc.schema import WorkflowRecord

REPORT_TITLE = "# Workflow Documentation"
REPORT_INTRO = "This document provides an overview of all GitHub workflows in this repository."
DETAILS_HEADING = "## Detailed Workflow Information"
NO_DETAILS_PLACEHOLDER = "*No detailed workflow information available.*"
MISSING_CELL = "-"

TABLE_HEADER = "| Workflow | Description | Owners | Tags | File |"
TABLE_SEPARATOR = "|----------|-------------|--------|------|------|"

# Backslash must be escaped first so inserted escapes are not doubled.
_MARKDOWN_ESCAPES: list[tuple[str, str]] = [
    ("\\", "\\\\"),
    ("|", "\\|"),
    ("`", "\\`"),
    ("*", "\\*"),
    ("_", "\\_"),
    ("[", "\\["),
    ("]", "\\]"),
]


def escape_markdown_cell(text: str) -> str:
    """
    Escape characters that break pipe tables or add inline formatting.

    Args:
        text: Raw cell text

    Returns:
        Text safe to embed in a Markdown table cell

    Example:
        >>> escape_markdown_cell("A | B")
        'A \\\\| B'
    """
    for char, replacement in _MARKDOWN_ESCAPES:
        text = text.replace(char, replacement)
    return text


class ReportRenderer:
    """
    Renders WorkflowRecords into a Markdown report.

    Usage:
        renderer = ReportRenderer(records)
        content = renderer.render()
    """

    def __init__(self, records: Optional[Iterable[WorkflowRecord]] = None):
        """
        Initialize the renderer.

        Args:
            records: Extracted records in the order they should appear.
                None is treated as an empty sequence.
        """
        self.records: list[WorkflowRecord] = list(records or [])
        self._lines: list[str] = []

    def render(self) -> str:
        """
        Generate the complete report.

        Returns:
            The rendered report as a Markdown string
        """
        self._lines = []

        self._add_header()
        self._add_summary_table()
        self._add_details_section()

        return "\n".join(self._lines) + "\n"

    def _add_header(self) -> None:
        self._lines.extend([REPORT_TITLE, "", REPORT_INTRO, ""])

    @staticmethod
    def _cell(value: Optional[str]) -> str:
        return escape_markdown_cell(value) if value else MISSING_CELL

    def _format_row(self, record: WorkflowRecord) -> str:
        cells = [
            self._cell(record.display_name),
            self._cell(record.description),
            self._cell(record.owners),
            self._cell(record.tags),
            escape_markdown_cell(record.file_label),
        ]
        return "| " + " | ".join(cells) + " |"

    def _add_summary_table(self) -> None:
        self._lines.append(TABLE_HEADER)
        self._lines.append(TABLE_SEPARATOR)
        for record in self.records:
            self._lines.append(self._format_row(record))

    def _add_details_section(self) -> None:
        """Add per-workflow details, or a placeholder when no record has any."""
        self._lines.extend(["", DETAILS_HEADING, ""])

        detailed = [record for record in self.records if record.has_details]
        if not detailed:
            self._lines.append(NO_DETAILS_PLACEHOLDER)
            return

        # Every paragraph is followed by a blank line, the last one included.
        for record in detailed:
            self._lines.extend([f"### {record.title}", ""])
            for label, value in record.detail_items():
                self._lines.extend([f"**{label}:** {value}", ""])


def render_report(records: Optional[Iterable[WorkflowRecord]]) -> str:
    """
    Convenience function to render a report from records.

    Args:
        records: Extracted records, in output order

    Returns:
        Rendered report as a Markdown string

    Example:
        from workflowdoc.discovery import discover_workflows, extract_workflows
        from workflowdoc.renderer import render_report

        discovery = discover_workflows(".github/workflows")
        batch = extract_workflows(discovery.files)
        print(render_report(batch.records))
    """
    return ReportRenderer(records).render()


def write_report(content: str, output_path: str | Path) -> Path:
    """
    Write the report atomically.

    The content goes to a temporary file in the target directory, which is
    then renamed over the target. Parent directories are not created.

    Args:
        content: Rendered Markdown
        output_path: Destination file

    Returns:
        The path that was written

    Raises:
        ReportWriteError: If the target directory is missing or not writable
    """
    output_path = Path(output_path)
    directory = output_path.parent

    if not directory.is_dir():
        raise ReportWriteError(output_path, f"directory does not exist: {directory}")

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=directory, prefix=f".{output_path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise ReportWriteError(output_path, str(e))

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise ReportWriteError(output_path, str(e))

    return output_path


def generate_report(
    records: Optional[Iterable[WorkflowRecord]],
    output_path: str | Path,
) -> str:
    """
    Render records and write the report to output_path.

    Args:
        records: Extracted records, in output order
        output_path: Destination file

    Returns:
        The rendered Markdown

    Raises:
        ReportWriteError: If the report cannot be written
    """
    content = render_report(records)
    write_report(content, output_path)
    return content
