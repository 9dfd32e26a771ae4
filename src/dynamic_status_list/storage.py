"""JSON file persistence helpers.

Writes are atomic: data goes to a temporary file in the target directory
which then replaces the destination, so readers never observe a partially
written registry or publication.
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from dynamic_status_list.errors import InputError, StorageError


def save_json(data: Any, path: Path) -> None:
    """Serialize *data* as indented JSON and atomically write it to *path*.

    The file is created with mode ``0600``.

    Raises
    ------
    StorageError
        If the data cannot be serialized or the file cannot be written.
    """
    try:
        payload = json.dumps(data, indent=2)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"failed to marshal JSON for {path}: {exc}") from exc

    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StorageError(f"failed to write {path}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def load_json(path: Path) -> Any:
    """Read and parse a JSON file.

    Raises
    ------
    InputError
        If the file is missing, unreadable or not valid JSON.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InputError(f"file not found: {path}") from exc
    except OSError as exc:
        raise InputError(f"failed to read file {path}: {exc}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"invalid JSON format in {path}: {exc}") from exc


__all__ = ["load_json", "save_json"]
