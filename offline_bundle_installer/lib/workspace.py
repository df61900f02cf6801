from __future__ import annotations

import logging
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def workspace_path(prefix: str, *, base: Optional[str] = None, now: Optional[datetime] = None) -> Path:
    """<base>/<prefix><YYYYmmdd_HHMMSS>; base defaults to the system temp dir."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(base or tempfile.gettempdir()) / f"{prefix}{stamp}"


def create_workspace(path: Path) -> Path:
    # Same-second reruns or leftovers from a killed run.
    if path.exists():
        logger.info("Removing stale workspace %s", path)
        shutil.rmtree(path)
    path.mkdir(parents=True)
    logger.debug("Created workspace %s", path)
    return path


def remove_workspace(path: Optional[Path]) -> bool:
    """Best-effort recursive removal. Never raises."""
    if path is None or not path.exists():
        return True
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning("Could not remove workspace %s: %s", path, e)
        return False
    logger.info("Cleaned up temporary files")
    return True


def list_children(path: Path) -> List[str]:
    out: list[str] = []
    for child in sorted(path.iterdir(), key=lambda c: c.name.lower()):
        suffix = "/" if child.is_dir() else ""
        out.append(child.name + suffix)
    return out
