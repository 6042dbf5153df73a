"""Helpers for report IO, in-place file rewrites and console output."""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

PathLike = Union[str, Path]


def stable_json_dumps(obj: object) -> str:
    """Serialize JSON in a stable, human-readable way with a trailing newline."""
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_json_stable(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(stable_json_dumps(data), encoding="utf-8")
    return path


def ensure_dir(path: PathLike) -> Path:
    """Ensure that a directory exists and return the Path object."""

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_text_if_changed(path: PathLike, content: str) -> bool:
    """Write ``content`` unless the file already holds exactly that text.

    Returns True when the file was written.
    """

    file_path = Path(path)
    if file_path.is_file() and file_path.read_text(encoding="utf-8") == content:
        return False
    ensure_dir(file_path.parent)
    file_path.write_text(content, encoding="utf-8")
    return True


def report_stamp(now: Optional[datetime] = None) -> str:
    """ISO timestamp usable in filenames (``:`` and ``.`` become ``-``)."""

    moment = now or datetime.now(timezone.utc)
    return moment.isoformat().replace(":", "-").replace(".", "-")


def warn(msg: str) -> None:
    print(msg, file=sys.stderr)


__all__ = [
    "PathLike",
    "ensure_dir",
    "report_stamp",
    "stable_json_dumps",
    "warn",
    "write_json_stable",
    "write_text_if_changed",
]
