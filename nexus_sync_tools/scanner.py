from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from .layout import SEPARATOR, decode_default_layout, gav_coordinates, is_considered
from .models import Artifact

LOGGER = logging.getLogger(__name__)


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _iter_candidate_files(directory: Path) -> Iterator[Path]:
    try:
        with os.scandir(directory) as handle:
            entries = sorted(handle, key=lambda entry: entry.name)
    except OSError as exc:
        LOGGER.warning("Skipping %s: %s", directory, exc)
        return

    for entry in entries:
        path = Path(entry.path)
        if _is_hidden(entry.name):
            # Nexus keeps its cache and trash in dot-directories.
            LOGGER.info("Skipping %s", path)
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError as exc:
            LOGGER.warning("Skipping %s: %s", path, exc)
            continue
        if is_dir:
            yield from _iter_candidate_files(path)
        elif is_file and is_considered(entry.name):
            yield path


def scan_root(root: Path) -> list[Artifact]:
    if not root.is_dir():
        LOGGER.warning("Skipping %s: not a directory", root)
        return []

    artifacts: list[Artifact] = []
    for path in _iter_candidate_files(root):
        filename = SEPARATOR.join(path.relative_to(root).parts)
        gav = decode_default_layout(filename)
        LOGGER.debug("%s -> %s", filename, gav_coordinates(gav))
        if not gav.is_complete:
            LOGGER.warning("%s is not in Maven default layout: %s", filename, gav)
        artifacts.append(Artifact(root=root, filename=filename, gav=gav))
    return artifacts


def scan_roots(roots: Iterable[Path]) -> list[Artifact]:
    artifacts: list[Artifact] = []
    for root in roots:
        found = scan_root(Path(root))
        LOGGER.info("Found %s artifacts below %s", len(found), root)
        artifacts.extend(found)
    return artifacts
