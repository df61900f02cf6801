from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopiedModule:
    name: str
    dest: Path
    has_manifest: bool


def install_module_dir(src: Path, module_root: Path, *, manifest_extension: str) -> CopiedModule:
    """Copy one module directory under module_root, replacing any previous copy.

    Replace, not merge: an existing destination is deleted first.
    """

    s = Path(src)
    if not s.is_dir():
        raise FileNotFoundError(str(s))

    module_root.mkdir(parents=True, exist_ok=True)
    dest = module_root / s.name
    if dest.exists():
        logger.debug("Replacing existing module %s", dest)
        shutil.rmtree(dest)

    shutil.copytree(s, dest)

    ext = manifest_extension.lower()
    has_manifest = any(p.is_file() and p.suffix.lower() == ext for p in dest.iterdir())
    return CopiedModule(name=s.name, dest=dest, has_manifest=has_manifest)
