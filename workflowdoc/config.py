"""
workflowdoc Configuration

Settings come from three layers, later layers winning:

    1. Built-in defaults
    2. The [tool.workflowdoc] table of a pyproject.toml
    3. Command-line flags

Example pyproject.toml:

    [tool.workflowdoc]
    workflows-dir = ".github/workflows"
    output = "docs/WORKFLOWS.md"
    verbose = false
    max-workers = 4
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from workflowdoc.errors import ConfigError

# Try to import tomllib (Python 3.11+) or fall back to tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

DEFAULT_WORKFLOWS_DIR = ".github/workflows"
DEFAULT_OUTPUT = "WORKFLOWS.md"
PYPROJECT_FILE = "pyproject.toml"
TOOL_TABLE = "workflowdoc"


@dataclass(frozen=True)
class Settings:
    """
    Resolved settings for one run.

    Attributes:
        workflows_dir: Directory holding the workflow files
        output: Report file to write
        verbose: Log progress at INFO level
        quiet: Only log errors
        max_workers: Threads used for extraction (1 = sequential)
    """
    workflows_dir: str = DEFAULT_WORKFLOWS_DIR
    output: str = DEFAULT_OUTPUT
    verbose: bool = False
    quiet: bool = False
    max_workers: int = 1

    def merged(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_FIELD_TYPES: dict[str, type] = {
    "workflows_dir": str,
    "output": str,
    "verbose": bool,
    "quiet": bool,
    "max_workers": int,
}


def _coerce(key: str, value: Any) -> Any:
    expected = _FIELD_TYPES[key]
    # bool is a subclass of int; do not accept it for integer settings.
    if expected is int and isinstance(value, bool):
        raise ConfigError(f"Setting '{key}' must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigError(
            f"Setting '{key}' must be of type {expected.__name__}, got {type(value).__name__}"
        )
    if key == "max_workers" and value < 1:
        raise ConfigError(f"Setting '{key}' must be at least 1, got {value}")
    return value


def settings_from_table(table: dict[str, Any], base: Optional[Settings] = None) -> Settings:
    """
    Build Settings from a [tool.workflowdoc] table.

    Keys may use dashes or underscores.

    Raises:
        ConfigError: On unknown keys or values of the wrong type
    """
    base = base or Settings()
    values: dict[str, Any] = {}
    for raw_key, value in table.items():
        key = raw_key.replace("-", "_")
        if key not in _FIELD_TYPES:
            raise ConfigError(f"Unknown setting in [tool.{TOOL_TABLE}]: '{raw_key}'")
        values[key] = _coerce(key, value)
    return replace(base, **values)


def _read_pyproject(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e.strerror or e}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse {path}: {e}")


def _settings_from_document(data: dict[str, Any], path: Path) -> Settings:
    table = data.get("tool", {}).get(TOOL_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.{TOOL_TABLE}] in {path} must be a table")
    return settings_from_table(table)


def load_pyproject_settings(path: str | Path) -> Settings:
    """
    Load settings from a pyproject.toml file.

    A file without a [tool.workflowdoc] table yields the defaults.

    Args:
        path: Path to the pyproject.toml

    Returns:
        Settings with the file's values applied over the defaults

    Raises:
        ConfigError: If the file cannot be read or parsed, or holds
            invalid settings
    """
    path = Path(path)
    return _settings_from_document(_read_pyproject(path), path)


def load_settings(
    config_path: Optional[str | Path] = None,
    cwd: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> Settings:
    """
    Resolve file-based settings.

    An explicit config_path must be readable. A pyproject.toml picked up
    from cwd that cannot be read or parsed is only warned about, since it
    may belong to an unrelated project; an invalid [tool.workflowdoc]
    table in it is still an error.

    Args:
        config_path: Explicit pyproject.toml; must exist if given
        cwd: Directory searched for pyproject.toml when no explicit path
            is given (defaults to the current directory)
        logger: Receives the warning for an unusable implicit pyproject.toml

    Returns:
        Settings from the config file, or defaults if none applies

    Raises:
        ConfigError: If the explicit file is unusable, or either file holds
            invalid settings
    """
    if config_path is not None:
        return load_pyproject_settings(config_path)

    candidate = (cwd or Path.cwd()) / PYPROJECT_FILE
    if not candidate.is_file():
        return Settings()

    try:
        data = _read_pyproject(candidate)
    except ConfigError as e:
        log = logger or logging.getLogger(__name__)
        log.warning("Ignoring %s, using default settings: %s", PYPROJECT_FILE, e)
        return Settings()
    return _settings_from_document(data, candidate)
