from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from ..config import InstallerConfig
from ..errors import UserCancelled
from ..lib.console import ask_yes_no
from ..lib.dialog import choose_file

logger = logging.getLogger(__name__)

Chooser = Callable[[str, Sequence[Tuple[str, str]]], Optional[str]]


def select_bundle(
    cfg: InstallerConfig,
    *,
    bundle: Optional[str] = None,
    chooser: Chooser = choose_file,
) -> str:
    """Return the bundle path, asking with a file dialog unless one was given."""

    if bundle:
        return str(Path(bundle).expanduser().absolute())

    logger.info("Select the offline bundle archive...")
    path = chooser(cfg.dialog_dir, cfg.dialog_filetypes)
    if not path:
        raise UserCancelled("No file selected")
    logger.info("Selected: %s", path)
    return path


def confirm_install(bundle: str, *, input_fn: Callable[[str], str] = input, assume_yes: bool = False) -> None:
    if assume_yes:
        return
    if not ask_yes_no(f"Install from {Path(bundle).name}?", input_fn):
        raise UserCancelled("Installation declined")
