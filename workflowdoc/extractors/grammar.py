"""
Annotation Line Grammar

Recognizes documentation comments of the form:

    # @workflow.<field>: <value>
    # @job.<field>: <value>
    # @step.<field>: <value>

A line goes through two independent validation stages:

    1. Prefix check: after trimming surrounding whitespace, the line must
       start with exactly "# @" (hash, one space, at-sign). "#  @..." with
       two or more spaces never qualifies.
    2. Key check: the line itself, with only trailing whitespace removed,
       must also start with "# @", so indented annotations are ignored. The
       text after the prefix is split on the first colon.
       The key must be "<scope>.<field>" where scope is a known
       AnnotationScope and field is one or more lowercase ASCII letters.
       The value is whatever follows the colon, trimmed.

Lines failing either stage are not annotations. This is never an error.
"""

from dataclasses import dataclass
from typing import Optional

from workflowdoc.schema import AnnotationScope, WorkflowField

ANNOTATION_PREFIX = "# @"

_LOWERCASE_ASCII = frozenset("abcdefghijklmnopqrstuvwxyz")


@dataclass(frozen=True)
class Annotation:
    """
    A single parsed annotation line.

    Attributes:
        scope: Which namespace the annotation belongs to
        key: The field name as written (e.g., "params")
        value: The trimmed value, possibly empty
        field: The mapped workflow field; IGNORED for non-workflow scopes
               and for keys outside the vocabulary
    """
    scope: AnnotationScope
    key: str
    value: str
    field: WorkflowField = WorkflowField.IGNORED

    @property
    def is_stored(self) -> bool:
        """True if this annotation populates a record attribute."""
        return self.field is not WorkflowField.IGNORED


def has_annotation_prefix(line: str) -> bool:
    """Stage 1: the loose prefix check on a raw line."""
    return line.strip().startswith(ANNOTATION_PREFIX)


def _is_field_name(text: str) -> bool:
    return bool(text) and all(char in _LOWERCASE_ASCII for char in text)


def tokenize(line: str) -> Optional[tuple[str, str, str]]:
    """
    Stage 2: split a qualifying line into (scope, field, value).

    Args:
        line: A raw line from a workflow file; leading whitespace is not
            stripped

    Returns:
        Tuple of (scope key, field key, trimmed value), or None if the
        line is not well-formed
    """
    text = line.rstrip()
    if not text.startswith(ANNOTATION_PREFIX):
        return None

    body = text[len(ANNOTATION_PREFIX):]
    key, separator, value = body.partition(":")
    if not separator:
        return None

    scope, dot, field = key.partition(".")
    if not dot or not _is_field_name(scope) or not _is_field_name(field):
        return None

    return scope, field, value.strip()


def parse_annotation(line: str) -> Optional[Annotation]:
    """
    Parse one line into an Annotation.

    Args:
        line: A raw line from a workflow file

    Returns:
        The Annotation, or None if the line is not an annotation

    Example:
        >>> parse_annotation("# @workflow.params: env, version").field
        <WorkflowField.PARAMS: 'parameters'>
        >>> parse_annotation("#  @workflow.name: Too many spaces") is None
        True
    """
    if not has_annotation_prefix(line):
        return None

    tokens = tokenize(line)
    if tokens is None:
        return None

    scope_key, field_key, value = tokens
    scope = AnnotationScope.from_key(scope_key)
    if scope is None:
        return None

    if scope is AnnotationScope.WORKFLOW:
        field = WorkflowField.lookup(field_key)
    else:
        field = WorkflowField.IGNORED

    return Annotation(scope=scope, key=field_key, value=value, field=field)
