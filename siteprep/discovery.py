"""Enumerate the files a pass should touch."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .models import DEFAULT_EXCLUDE_PATTERNS


class DirectoryNotFound(FileNotFoundError):
    """The root directory of a run does not exist."""


def is_excluded(filename: str, patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS) -> bool:
    """True when the bare filename matches one of the exclusion patterns."""

    return any(re.search(pattern, filename) for pattern in patterns)


def relative_name(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def list_files(
    root: Path,
    extensions: Optional[Iterable[str]] = (".html",),
    *,
    exclude_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
    excluded_dirs: Iterable[str] = (),
    recursive: bool = False,
) -> List[Path]:
    """Return absolute paths under ``root`` sorted by their relative name.

    ``extensions=None`` keeps every file. Directories listed in
    ``excluded_dirs`` are skipped when walking recursively.
    """

    root = Path(root)
    if not root.is_dir():
        raise DirectoryNotFound(f"Directory not found: {root}")
    root = root.resolve()

    allowed = {ext.lower() for ext in extensions} if extensions is not None else None
    skip_dirs = set(excluded_dirs)

    candidates: List[Path] = []
    if recursive:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [name for name in dirnames if name not in skip_dirs]
            candidates.extend(Path(dirpath) / name for name in filenames)
    else:
        candidates = [entry for entry in root.iterdir() if entry.is_file()]

    selected = [
        path
        for path in candidates
        if (allowed is None or path.suffix.lower() in allowed)
        and not is_excluded(path.name, exclude_patterns)
    ]
    return sorted(selected, key=lambda path: relative_name(path, root))


__all__ = ["DirectoryNotFound", "is_excluded", "list_files", "relative_name"]
