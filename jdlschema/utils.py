# File: jdlschema/utils.py
"""
jdlschema - Utility Functions & Helpers
=======================================
Output-file handling and step timing for the compiler. Standard library only.

``write_if_changed`` is what keeps repeated compiles from touching an
unchanged schema file: the new document is hashed and compared with the
file on disk before anything is written.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.utils")


# ---------------------------------------------------------------------------
# Output files
# ---------------------------------------------------------------------------


def read_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path* as UTF-8, creating parent directories.

    The atomic mode writes a hidden sibling temp file and ``os.replace``-s it
    over the target, so readers never see a half-written schema. Returns the
    number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data: bytes = content.encode("utf-8")

    if not atomic:
        path.write_bytes(data)
    else:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    logger.debug("Wrote %d bytes to %s", len(data), path)
    return len(data)


def sha256_hex(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def write_if_changed(path: Path, content: str, force: bool = False) -> bool:
    """
    Write *content* unless *path* already holds the same document.

    With *force* the file is always rewritten. Returns True when written.
    """
    if not force and path.is_file():
        if sha256_hex(read_file(path)) == sha256_hex(content):
            logger.info("Unchanged, skipped: %s", path)
            return False
    write_file(path, content)
    logger.info("Wrote %s", path)
    return True


def count_lines(content: str) -> int:
    """Lines in *content*; a trailing newline does not open a new line."""
    return len(content.splitlines())


# ---------------------------------------------------------------------------
# Step timing
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Timer:
    """
    Wall-clock timer for one pipeline step::

        with Timer("parse") as t:
            schema = parse_jdl(text)
        metric.elapsed_seconds = t.elapsed
    """

    label: str = "step"
    elapsed: float = 0.0
    _started: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._started is not None:
            self.elapsed = time.perf_counter() - self._started
        logger.debug("%s took %.4fs", self.label, self.elapsed)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "read_file",
    "write_file",
    "sha256_hex",
    "write_if_changed",
    "count_lines",
    "Timer",
]

logger.debug("jdlschema.utils loaded — %d public symbols.", len(__all__))
