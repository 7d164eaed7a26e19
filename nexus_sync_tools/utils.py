from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@contextmanager
def open_input(path: str | Path | None) -> Iterator[BinaryIO]:
    """Yield the named file for reading, or stdin when no name is given."""
    if not path:
        yield sys.stdin.buffer
        return
    with Path(path).open("rb") as handle:
        yield handle


@contextmanager
def open_output(path: str | Path | None) -> Iterator[TextIO]:
    if not path:
        yield sys.stdout
        return
    with Path(path).open("w", encoding="utf-8") as handle:
        yield handle
