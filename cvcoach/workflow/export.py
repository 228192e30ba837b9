"""Export of the optimized résumé as a UTF-8 text file."""

import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def export_filename(epoch_millis: int | None = None) -> str:
    """``optimized_cv_<epoch-millis>.txt``"""
    if epoch_millis is None:
        epoch_millis = int(time.time() * 1000)
    return f"optimized_cv_{epoch_millis}.txt"


def write_optimized_resume(text: str, directory: str | Path, epoch_millis: int | None = None) -> Path:
    """
    Write ``text`` to a timestamped file in ``directory``.

    The file holds exactly ``text`` encoded as UTF-8; no newline translation
    or trailing newline is applied.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(epoch_millis)
    path.write_bytes(text.encode("utf-8"))
    logger.info(f"Optimized CV written to {path} ({len(text)} chars)")
    return path
