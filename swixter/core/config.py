"""Configuration paths, document versions and JSON persistence helpers.

The config file path is resolved once per call from the process context and
handed to the stores as a plain callable, so tests and alternate front ends
can point every store at a temporary directory.
"""

from __future__ import annotations

import json
import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable


CONFIG_VERSION = "1.0.0"
PROVIDERS_VERSION = "1.0.0"
EXPORT_VERSION = "1.0.0"

CONFIG_FILE_NAME = "config.json"
USER_PROVIDERS_FILE_NAME = "providers.json"

JSON_INDENT = 2

ConfigPathResolver = Callable[[], Path]


def get_config_dir() -> Path:
    """Return the directory holding swixter's documents.

    ``SWIXTER_CONFIG_DIR`` wins when set. Otherwise Windows uses ``~/swixter``
    and every other platform follows XDG with ``~/.config/swixter``.
    """
    raw = os.getenv("SWIXTER_CONFIG_DIR")
    if raw and raw.strip():
        return Path(raw).expanduser()
    if sys.platform == "win32":
        return Path.home() / "swixter"
    return Path.home() / ".config" / "swixter"


def get_config_path() -> Path:
    """Return the absolute path of the main config file."""
    raw = os.getenv("SWIXTER_CONFIG_PATH")
    if raw and raw.strip():
        return Path(raw).expanduser()
    return get_config_dir() / CONFIG_FILE_NAME


def user_providers_path(config_path: Path) -> Path:
    """The user providers document lives next to the main config file."""
    return config_path.parent / USER_PROVIDERS_FILE_NAME


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def write_json_atomic(path: Path, payload: Any) -> None:
    """Atomically write indented JSON content to disk."""

    path.parent.mkdir(parents=True, exist_ok=True)
    serialized = json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)
    fd, temp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(serialized)
            handle.write("\n")
        os.replace(temp_path, path)
    finally:
        try:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
        except OSError:
            pass
