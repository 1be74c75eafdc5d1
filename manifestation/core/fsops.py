# manifestation/core/fsops.py
from __future__ import annotations
import logging
import shutil
from pathlib import Path

from .errors import IOFailureError

logger = logging.getLogger(__name__)

__all__ = ["recreateDir", "ensureDir", "copyFile", "writeText"]



def recreateDir(path: Path) -> Path:
    """
    Removes `path` (and everything below it) if present, then creates it empty.
    Returns the resolved directory.
    """
    try:
        if path.exists():
            logger.debug("Removing previous output at '%s'", path)
            shutil.rmtree(path)
        path.mkdir(parents=True)
        return path.resolve()
    except OSError as err:
        raise IOFailureError(f"Failed to recreate directory '{path}'") from err



def ensureDir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError as err:
        raise IOFailureError(f"Failed to create directory '{path}'") from err



def copyFile(source: Path, destination: Path) -> Path:
    """Copies file bytes from `source` to `destination` (overwriting). The source is left in place."""
    try:
        shutil.copyfile(source, destination)
        return destination
    except OSError as err:
        raise IOFailureError(f"Failed to copy '{source}' to '{destination}'") from err



def writeText(path: Path, text: str) -> Path:
    try:
        # newline="" keeps output identical across platforms
        with open(path, "w", encoding="utf-8", newline="") as file:
            file.write(text)
        return path
    except OSError as err:
        raise IOFailureError(f"Failed to write '{path}'") from err
