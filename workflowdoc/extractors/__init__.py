"""
Workflow annotation extractors.

This package turns workflow files into WorkflowRecord objects by reading
their documentation comments.

Available Extractors:
    - AnnotationExtractor: Reads `# @workflow.<field>: <value>` comments

Usage:
    from workflowdoc.extractors import AnnotationExtractor

    extractor = AnnotationExtractor()
    record = extractor.extract(".github/workflows/ci.yml")
"""

from workflowdoc.extractors.annotations import AnnotationExtractor, extract_workflow
from workflowdoc.extractors.base import BaseExtractor, is_workflow_file
from workflowdoc.extractors.grammar import Annotation, parse_annotation

__all__ = [
    "Annotation",
    "AnnotationExtractor",
    "BaseExtractor",
    "extract_workflow",
    "is_workflow_file",
    "parse_annotation",
]
