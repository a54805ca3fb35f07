"""Host helpers for invoking the source analyser.

These helpers find the C++ standard library include directories on the
host, so that analysis still works when the compile database is minimal.
They also check whether an ``-isystem`` entry is already present in an
argument list.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

__all__ = [
    "parse_version_components",
    "detect_platform_include_dirs",
    "contains_isystem_entry",
]

_DIGITS = "0123456789"


def parse_version_components(text: str) -> List[int]:
    """Parse a dotted version such as ``"12.1.0"`` into integers.

    Returns an empty list when ``text`` is not made of digit groups
    separated by single dots. A trailing dot is tolerated.
    """
    components: List[int] = []
    pos = 0
    while pos < len(text):
        if text[pos] not in _DIGITS:
            return []
        end = pos
        while end < len(text) and text[end] in _DIGITS:
            end += 1
        components.append(int(text[pos:end]))
        if end >= len(text):
            break
        if text[end] != ".":
            return []
        pos = end + 1
    return components


def _subdirectories(root: Path) -> Iterator[Path]:
    try:
        entries = sorted(root.iterdir())
    except OSError:
        return
    for entry in entries:
        if entry.is_dir():
            yield entry


def _latest_versioned(candidates: Iterator[Path]) -> Optional[Path]:
    best: Optional[Tuple[List[int], Path]] = None
    for candidate in candidates:
        version = parse_version_components(candidate.name)
        if not version:
            continue
        if best is None or best[0] < version:
            best = (version, candidate)
    return None if best is None else best[1]


def _latest_version_dir(root: Path) -> Optional[Path]:
    if not root.is_dir():
        return None
    return _latest_versioned(_subdirectories(root))


def _gcc_internal_include(root: Path) -> Optional[Path]:
    if not root.is_dir():
        return None
    versions = (
        version_dir
        for triple_dir in _subdirectories(root)
        for version_dir in _subdirectories(triple_dir)
    )
    best = _latest_versioned(versions)
    if best is None:
        return None
    include_dir = best / "include"
    return include_dir if include_dir.exists() else None


def _collect_include_dirs(root: Path) -> List[str]:
    """Collect include directories found below ``root`` (``/`` on a host)."""
    dirs: List[str] = []

    def append_unique(candidate: Optional[Path]) -> None:
        if candidate is None or not candidate.is_dir():
            return
        normalized = os.path.normpath(str(candidate))
        if normalized not in dirs:
            dirs.append(normalized)

    cxx_root = _latest_version_dir(root / "usr" / "include" / "c++")
    if cxx_root is not None:
        append_unique(cxx_root)
        architecture_dir = next(
            (
                entry
                for entry in _subdirectories(cxx_root)
                if "-linux" in entry.name or "-gnu" in entry.name
            ),
            None,
        )
        append_unique(architecture_dir)
        append_unique(cxx_root / "backward")

    append_unique(_gcc_internal_include(root / "usr" / "lib" / "gcc"))
    append_unique(_gcc_internal_include(root / "usr" / "lib64" / "gcc"))
    append_unique(root / "usr" / "include")
    return dirs


def detect_platform_include_dirs() -> List[str]:
    """Return host C++ include directories to pass via ``-isystem``.

    Only Linux hosts are probed; elsewhere the result is empty.
    """
    if not sys.platform.startswith("linux"):
        return []
    return _collect_include_dirs(Path("/"))


def contains_isystem_entry(args: Sequence[str], directory: str) -> bool:
    """Tell whether ``-isystem <directory>`` already appears in ``args``."""
    return any(
        flag == "-isystem" and value == directory
        for flag, value in zip(args, args[1:])
    )