"""
workflowdoc Record Schema

This module defines the data structures produced by the annotation
extractor and consumed by the report renderer.

Design Principles:
    1. The field vocabulary is closed: every recognized annotation key maps
       to exactly one record attribute, and every other key maps to IGNORED
    2. Absence is explicit: None means "never annotated", an empty string
       means "annotated with an empty value"
    3. Records are immutable once extracted

Field Vocabulary:
    name          -> display_name
    description   -> description
    owners        -> owners
    tags          -> tags
    params        -> parameters
    results       -> results
    permissions   -> permissions
    requirements  -> requirements
"""

import os
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional


class AnnotationScope(Enum):
    """
    The namespace an annotation belongs to.

    Only WORKFLOW annotations are stored on a record. JOB and STEP
    annotations are accepted by the grammar and then discarded.
    """
    WORKFLOW = "workflow"
    JOB = "job"
    STEP = "step"

    @classmethod
    def from_key(cls, key: str) -> Optional["AnnotationScope"]:
        """Return the scope named by key, or None if it is not a known scope."""
        for scope in cls:
            if scope.value == key:
                return scope
        return None


class WorkflowField(Enum):
    """
    Recognized `@workflow.<field>` names, mapped to record attributes.

    The value of each member is the record attribute it populates.
    IGNORED is the explicit result for well-formed keys outside the
    vocabulary.
    """
    NAME = "display_name"
    DESCRIPTION = "description"
    OWNERS = "owners"
    TAGS = "tags"
    PARAMS = "parameters"
    RESULTS = "results"
    PERMISSIONS = "permissions"
    REQUIREMENTS = "requirements"
    IGNORED = None

    @property
    def attribute(self) -> Optional[str]:
        return self.value

    @classmethod
    def lookup(cls, key: str) -> "WorkflowField":
        """
        Map an annotation key to its field.

        The mapping is total: unknown keys return IGNORED.

        Args:
            key: The lowercase field name from the annotation

        Returns:
            The matching WorkflowField, or WorkflowField.IGNORED
        """
        return ANNOTATION_KEYS.get(key, cls.IGNORED)


# Annotation key as written in the workflow file -> field.
ANNOTATION_KEYS: dict[str, WorkflowField] = {
    "name": WorkflowField.NAME,
    "description": WorkflowField.DESCRIPTION,
    "owners": WorkflowField.OWNERS,
    "tags": WorkflowField.TAGS,
    "params": WorkflowField.PARAMS,
    "results": WorkflowField.RESULTS,
    "permissions": WorkflowField.PERMISSIONS,
    "requirements": WorkflowField.REQUIREMENTS,
}

# Detail section fields in render order: (attribute, label).
DETAIL_FIELDS: list[tuple[str, str]] = [
    ("parameters", "Parameters"),
    ("results", "Results"),
    ("permissions", "Permissions"),
    ("requirements", "Requirements"),
]


@dataclass(frozen=True)
class WorkflowRecord:
    """
    Documentation extracted from one workflow file.

    Attributes:
        source_path: The path string given to the extractor, not canonicalized
        file_label: Base name of the file, used when no display name exists
        display_name: Human title from `@workflow.name`
        description: From `@workflow.description`
        owners: From `@workflow.owners`
        tags: From `@workflow.tags`
        parameters: From `@workflow.params`
        results: From `@workflow.results`
        permissions: From `@workflow.permissions`
        requirements: From `@workflow.requirements`

    Example:
        >>> record = WorkflowRecord.for_path(".github/workflows/ci.yml")
        >>> record.file_label
        'ci.yml'
        >>> record.title
        'ci.yml'
    """
    source_path: str
    file_label: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    owners: Optional[str] = None
    tags: Optional[str] = None
    parameters: Optional[str] = None
    results: Optional[str] = None
    permissions: Optional[str] = None
    requirements: Optional[str] = None

    @classmethod
    def for_path(cls, path: "str | os.PathLike[str]", **fields: Optional[str]) -> "WorkflowRecord":
        """Build a record for path, deriving file_label from its base name."""
        source_path = os.fspath(path)
        return cls(
            source_path=source_path,
            file_label=os.path.basename(source_path),
            **fields,
        )

    @property
    def title(self) -> str:
        """Display name, falling back to the file label."""
        return self.display_name or self.file_label

    @property
    def has_details(self) -> bool:
        """True if any detail section field has a non-empty value."""
        return any(getattr(self, attribute) for attribute, _ in DETAIL_FIELDS)

    @property
    def is_annotated(self) -> bool:
        """True if any annotated field has a non-empty value."""
        return any(getattr(self, field.attribute) for field in ANNOTATION_KEYS.values())

    def detail_items(self) -> list[tuple[str, str]]:
        """Return (label, value) pairs for non-empty detail fields, in render order."""
        items = []
        for attribute, label in DETAIL_FIELDS:
            value = getattr(self, attribute)
            if value:
                items.append((label, value))
        return items

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return asdict(self)
