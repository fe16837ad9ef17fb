"""
Flask-based Web API for workflowdoc.

Renders workflow documentation for uploaded workflow files, so the report
can be produced without a checkout of the repository.

Endpoints:
    POST /api/render - Render a report from uploaded workflow files or a zip
    GET /api/health - Health check endpoint
"""

import logging
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Any

from flask import Flask, Response, jsonify, request
from werkzeug.utils import secure_filename

from workflowdoc import __version__
from workflowdoc.discovery import discover_workflows, extract_workflows
from workflowdoc.extractors import is_workflow_file
from workflowdoc.renderer import render_report

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("markdown", "json", "both")

# Limit on the uncompressed size of an uploaded archive.
MAX_EXTRACTED_SIZE = 20 * 1024 * 1024

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 5 * 1024 * 1024  # 5MB max upload


def _check_member(info: zipfile.ZipInfo) -> None:
    name = PurePosixPath(info.filename)
    if name.is_absolute() or ".." in name.parts or "\\" in info.filename:
        raise ValueError(f"Invalid path in zip: {info.filename}")


def extract_zip(archive, target_dir: Path, max_size: int = MAX_EXTRACTED_SIZE) -> None:
    """
    Unpack an uploaded archive into target_dir.

    Every member is checked before anything is written, so a rejected
    archive leaves target_dir untouched.

    Args:
        archive: The uploaded zip (file object or path)
        target_dir: Directory to unpack into
        max_size: Limit on the total uncompressed size, in bytes

    Raises:
        ValueError: If the archive is corrupt, holds a path escaping
            target_dir, or unpacks to more than max_size bytes
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            members = zf.infolist()
            total = 0
            for info in members:
                _check_member(info)
                total += info.file_size
            if total > max_size:
                raise ValueError(
                    f"Archive expands to {total} bytes, more than the {max_size} byte limit"
                )
            zf.extractall(target_dir, members=members)
    except zipfile.BadZipFile:
        raise ValueError("Invalid or corrupted zip file")


def find_workflows_dir(extracted_dir: Path) -> Path:
    """
    Find the directory holding workflow files inside an extracted archive.

    Checks, in order: a .github/workflows directory anywhere in the tree,
    a single top-level directory (e.g., repo-main/), then the root itself.

    Args:
        extracted_dir: The directory where files were extracted.

    Returns:
        The path to scan for workflow files.
    """
    nested = sorted(extracted_dir.glob("**/.github/workflows"))
    for candidate in nested:
        if candidate.is_dir():
            return candidate

    contents = list(extracted_dir.iterdir())

    # If there's exactly one directory and no files, descend into it
    if len(contents) == 1 and contents[0].is_dir():
        return contents[0]

    return extracted_dir


def save_uploads(uploads, target_dir: Path) -> list[str]:
    """
    Save uploaded workflow files into target_dir.

    Files without a .yml/.yaml extension are skipped.

    Returns:
        Warnings for skipped uploads.
    """
    warnings: list[str] = []
    for upload in uploads:
        filename = secure_filename(upload.filename or "")
        if not filename:
            warnings.append("Skipping upload without a file name")
            continue
        if not is_workflow_file(filename):
            warnings.append(f"Skipping non-workflow file: {filename}")
            continue
        upload.save(target_dir / filename)
    return warnings


def process_workflows(workflows_dir: Path) -> tuple[str, list[dict[str, Any]], list[str]]:
    """
    Discover, extract and render the workflows in a directory.

    Args:
        workflows_dir: Directory holding workflow files.

    Returns:
        Tuple of (markdown, workflow dicts, warnings).
    """
    discovery = discover_workflows(workflows_dir, logger=logger)
    batch = extract_workflows(discovery.files, logger=logger)
    markdown = render_report(batch.records)

    # Report paths relative to the upload so temporary directories do not leak.
    workflows = []
    for record in batch.records:
        data = record.to_dict()
        data["source_path"] = record.file_label
        workflows.append(data)

    warnings = discovery.warnings + batch.warnings
    if not batch.records:
        warnings.append("No workflow files found")
    elif not any(record.is_annotated for record in batch.records):
        warnings.append("No workflow annotations found")

    return markdown, workflows, warnings


@app.route("/api/health", methods=["GET"])
def health_check() -> Response:
    """Health check endpoint."""
    return jsonify({"status": "healthy", "version": __version__})


@app.route("/api/render", methods=["POST"])
def render_workflows() -> tuple[Response, int]:
    """
    Render a workflow report from uploaded files.

    Request is multipart/form-data with either:
        - one or more 'files' fields, each a workflow file
        - an 'archive' field containing a zip

    Optional query parameter:
        - format: 'markdown' | 'json' | 'both' (default: 'both')

    Returns:
        JSON response with:
            - markdown: The rendered report (if format includes markdown)
            - workflows: The extracted records (if format includes json)
            - warnings: Any warnings from processing
    """
    output_format = request.args.get("format", "both")
    if output_format not in OUTPUT_FORMATS:
        return jsonify({"error": f"Unknown format: {output_format}"}), 400

    uploads = [f for f in request.files.getlist("files") if f.filename]
    archive = request.files.get("archive")

    if not uploads and (archive is None or not archive.filename):
        return jsonify({"error": "Either 'files' or 'archive' upload required"}), 400

    with tempfile.TemporaryDirectory() as tmpdir:
        workflows_dir = Path(tmpdir) / "workflows"
        workflows_dir.mkdir()
        warnings: list[str] = []

        try:
            if uploads:
                warnings.extend(save_uploads(uploads, workflows_dir))
            else:
                if not archive.filename.endswith(".zip"):
                    return jsonify({"error": "Only .zip archives are supported"}), 400
                extract_zip(archive, workflows_dir)
                workflows_dir = find_workflows_dir(workflows_dir)

            markdown, workflows, process_warnings = process_workflows(workflows_dir)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

    response_data: dict[str, Any] = {"success": True}

    if output_format in ("markdown", "both"):
        response_data["markdown"] = markdown

    if output_format in ("json", "both"):
        response_data["workflows"] = workflows

    response_data["warnings"] = warnings + process_warnings

    return jsonify(response_data), 200


@app.errorhandler(413)
def request_entity_too_large(error):
    """Handle file too large errors."""
    return jsonify({"error": "Upload too large. Maximum size is 5MB."}), 413


def create_app() -> Flask:
    """
    Application factory for creating the Flask app.

    Returns:
        Configured Flask application instance.
    """
    return app


def main() -> None:
    """Run the development server."""
    print("Starting workflowdoc API server...")
    print()
    print("API Endpoints:")
    print("  POST /api/render - Render a report from workflow files or a zip")
    print("  GET  /api/health - Health check")
    print()
    app.run(host="127.0.0.1", port=5001)


if __name__ == "__main__":
    main()
