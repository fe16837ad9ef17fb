"""
Annotation Extractor

Builds a WorkflowRecord from the `# @workflow.<field>: <value>` comments
of a single workflow file.

Lines are scanned top to bottom. When a field appears more than once the
last occurrence wins. Job- and step-level annotations are parsed and then
dropped.
"""

from pathlib import Path
from typing import Optional

from workflowdoc.extractors.base import BaseExtractor
from workflowdoc.extractors.grammar import parse_annotation
from workflowdoc.schema import WorkflowRecord


class AnnotationExtractor(BaseExtractor):
    """
    Extracts workflow documentation from annotation comments.

    Usage:
        extractor = AnnotationExtractor()
        record = extractor.extract(".github/workflows/ci.yml")
        print(record.display_name, record.owners)
    """

    name = "Annotations"

    def extract(self, path: str | Path) -> WorkflowRecord:
        fields: dict[str, Optional[str]] = {}

        for line in self.read_lines(path):
            annotation = parse_annotation(line)
            if annotation is None or not annotation.is_stored:
                continue
            fields[annotation.field.attribute] = annotation.value

        return WorkflowRecord.for_path(path, **fields)


def extract_workflow(path: str | Path) -> WorkflowRecord:
    """
    Convenience function to extract one workflow file.

    Args:
        path: Path to the workflow file

    Returns:
        The extracted WorkflowRecord

    Raises:
        ExtractionError: If the file cannot be read
    """
    return AnnotationExtractor().extract(path)
