"""
workflowdoc - Workflow documentation from annotation comments.

Reads `# @workflow.<field>: <value>` comments embedded in CI workflow
files and renders them as a single Markdown index of the repository's
automation workflows.
"""

__version__ = "0.1.0"
