"""File-system and timing helpers for polling loops."""

import logging
import time
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_file(path: PathLike) -> str:
    return Path(path).read_text(encoding="utf-8")


def delete_file(path: PathLike) -> None:
    """Delete ``path`` if it exists."""
    target = Path(path)
    if target.exists():
        target.unlink()
        logger.debug("Deleted %s", target)


def wait_for(milliseconds: float) -> None:
    """Block the calling thread. All harness polling goes through here."""
    time.sleep(milliseconds / 1000)
