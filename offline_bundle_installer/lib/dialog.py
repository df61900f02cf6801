from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


def choose_file(initial_dir: str, filetypes: Sequence[Tuple[str, str]], *, title: str = "Select bundle") -> Optional[str]:
    """Show a modal "open file" dialog.

    Returns the chosen absolute path, or None when the dialog is dismissed.
    """

    import tkinter as tk
    from tkinter import filedialog

    root = tk.Tk()
    root.withdraw()
    root.attributes("-topmost", True)
    try:
        path = filedialog.askopenfilename(
            parent=root,
            title=title,
            initialdir=initial_dir,
            filetypes=list(filetypes),
        )
    finally:
        root.destroy()

    if not path:
        logger.debug("File dialog dismissed")
        return None
    return path
