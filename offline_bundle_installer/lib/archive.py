from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import List

from ..errors import ExtractFailure

logger = logging.getLogger(__name__)


def _check_member(dest: Path, name: str) -> None:
    target = (dest / name).resolve()
    try:
        target.relative_to(dest)
    except ValueError as e:
        raise ExtractFailure(f"Archive entry escapes extraction directory: {name}") from e


def extract_all(archive_path: str, dest_dir: Path) -> List[str]:
    """Extract every member of a ZIP archive into dest_dir.

    Returns the member names. Corrupt archives, unreadable files and
    entries pointing outside dest_dir raise ExtractFailure.
    """

    dest = Path(dest_dir).resolve()
    try:
        with zipfile.ZipFile(archive_path) as zf:
            names = zf.namelist()
            for name in names:
                _check_member(dest, name)
            zf.extractall(dest)
    except ExtractFailure:
        raise
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError, NotImplementedError, RuntimeError) as e:
        raise ExtractFailure(f"Failed to extract {archive_path}: {e}") from e

    logger.debug("Extracted %d entries from %s", len(names), archive_path)
    return names
