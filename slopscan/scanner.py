"""Candidate file discovery."""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path

from pathspec import GitIgnoreSpec

from slopscan.parsers import SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)

SKIPPED_DIRS = frozenset({"node_modules"})
IGNORE_FILENAMES = (".gitignore", ".ignore")


def discover_files(
    path: Path,
    *,
    includes: list[str] | None = None,
    excludes: list[str] | None = None,
) -> list[Path]:
    """Return supported source files under ``path`` in sorted order.

    A file argument is returned as-is when its extension is supported; globs
    only filter directory walks. Hidden entries, ``node_modules`` and paths
    listed in ``.gitignore``/``.ignore`` files are not descended into. Globs
    match the path relative to ``path``, so the result does not depend on how
    the root was spelled. A missing path yields no files.
    """
    if path.is_file():
        return [path] if has_supported_extension(path) else []
    if not path.is_dir():
        logger.warning("Path does not exist: %s", path)
        return []

    files = sorted(_walk(path))
    return filter_files(files, root=path, includes=includes or [], excludes=excludes or [])


def has_supported_extension(path: Path) -> bool:
    return path.suffix.lstrip(".").lower() in SUPPORTED_EXTENSIONS


def filter_files(
    files: list[Path], *, root: Path, includes: list[str], excludes: list[str]
) -> list[Path]:
    filtered: list[Path] = []
    for file_path in files:
        relative = file_path.relative_to(root).as_posix()
        if includes and not any(fnmatch.fnmatch(relative, pattern) for pattern in includes):
            continue
        if excludes and any(fnmatch.fnmatch(relative, pattern) for pattern in excludes):
            continue
        filtered.append(file_path)
    return filtered


def _walk(root: Path) -> list[Path]:
    found: list[Path] = []
    specs: list[tuple[Path, GitIgnoreSpec]] = []

    def on_error(exc: OSError) -> None:
        logger.warning("Cannot read %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        current = Path(dirpath)
        spec = _load_ignore_spec(current)
        if spec is not None:
            specs.append((current, spec))

        dirnames[:] = [
            name
            for name in dirnames
            if not name.startswith(".")
            and name not in SKIPPED_DIRS
            and not _is_ignored(current / name, specs, is_dir=True)
        ]
        for filename in filenames:
            if filename.startswith("."):
                continue
            candidate = current / filename
            if has_supported_extension(candidate) and not _is_ignored(
                candidate, specs, is_dir=False
            ):
                found.append(candidate)
    return found


def _load_ignore_spec(directory: Path) -> GitIgnoreSpec | None:
    lines: list[str] = []
    for filename in IGNORE_FILENAMES:
        ignore_file = directory / filename
        if not ignore_file.is_file():
            continue
        try:
            lines.extend(ignore_file.read_text(encoding="utf-8").splitlines())
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read ignore file %s: %s", ignore_file, exc)
    if not lines:
        return None
    return GitIgnoreSpec.from_lines(lines)


def _is_ignored(
    candidate: Path, specs: list[tuple[Path, GitIgnoreSpec]], *, is_dir: bool
) -> bool:
    """Check ``candidate`` against every ignore spec declared in an ancestor directory."""
    for base, spec in specs:
        if not candidate.is_relative_to(base):
            continue
        relative = candidate.relative_to(base).as_posix()
        if is_dir:
            relative += "/"
        if spec.match_file(relative):
            return True
    return False
