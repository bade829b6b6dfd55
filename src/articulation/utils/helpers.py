"""General-purpose helpers for deterministic file output."""

from __future__ import annotations

import json
from pathlib import Path

from .logging import get_logger

_LOGGER = get_logger(module=__name__)


def ensure_directory(path: Path | str) -> Path:
    """Ensure that a directory exists and return the resolved Path."""

    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target.resolve()


def serialize_json(data: object, destination: Path | str, *, indent: int = 2) -> Path:
    """Serialize data to JSON with deterministic ordering."""

    dest_path = Path(destination)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    dest_path.write_text(
        json.dumps(data, indent=indent, sort_keys=True, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    _LOGGER.debug("Serialized JSON", path=str(dest_path), size=dest_path.stat().st_size)
    return dest_path


def write_text(content: str, destination: Path | str) -> Path:
    """Write UTF-8 text, creating parent directories on demand."""

    dest_path = Path(destination)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    if not content.endswith("\n"):
        content += "\n"
    dest_path.write_text(content, encoding="utf-8")
    _LOGGER.debug("Wrote text file", path=str(dest_path), size=dest_path.stat().st_size)
    return dest_path
