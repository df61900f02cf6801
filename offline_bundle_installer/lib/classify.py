from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal

from ..config import InstallerConfig
from ..errors import NoPackageStructure

logger = logging.getLogger(__name__)

Strategy = Literal["package_files", "module_dirs"]
UnitKind = Literal["package_file", "module_dir"]

# Trailing version plus anything after it: Foo.Bar.13.3.0.24145081 / Foo.Bar-13.3.0
_VERSION_SUFFIX = re.compile(r"[.-]\d+\.\d+\.\d+.*$")


@dataclass(frozen=True)
class DiscoveredUnit:
    kind: UnitKind
    path: Path
    name: str


@dataclass(frozen=True)
class Classification:
    strategy: Strategy
    units: List[DiscoveredUnit]


def package_display_name(filename: str) -> str:
    """Logical package name of a package file, for display only."""
    stem = Path(filename).stem
    return _VERSION_SUFFIX.sub("", stem) or stem


def find_package_files(workspace: Path, extension: str) -> List[Path]:
    ext = extension.lower()
    return sorted(
        (p for p in workspace.rglob("*") if p.is_file() and p.suffix.lower() == ext),
        key=lambda p: p.name.lower(),
    )


def _has_manifest(directory: Path, extension: str) -> bool:
    ext = extension.lower()
    return any(c.is_file() and c.suffix.lower() == ext for c in directory.iterdir())


def find_module_dirs(workspace: Path, vendor_prefix: str, manifest_extension: str) -> List[Path]:
    out: list[Path] = []
    for child in sorted(workspace.iterdir(), key=lambda c: c.name.lower()):
        if not child.is_dir():
            continue
        if child.name.lower().startswith(vendor_prefix.lower()) or _has_manifest(child, manifest_extension):
            out.append(child)
    return out


def classify(workspace: Path, cfg: InstallerConfig) -> Classification:
    """Pick the install strategy for an extracted bundle.

    Package files anywhere in the tree win over module directories; module
    directories are only looked for among the workspace's immediate children.
    """

    packages = find_package_files(workspace, cfg.package_extension)
    if packages:
        logger.info("Found %d %s package(s)", len(packages), cfg.package_extension)
        return Classification(
            strategy="package_files",
            units=[DiscoveredUnit("package_file", p, package_display_name(p.name)) for p in packages],
        )

    dirs = find_module_dirs(workspace, cfg.vendor_prefix, cfg.manifest_extension)
    if dirs:
        logger.info("Found %d module director%s", len(dirs), "y" if len(dirs) == 1 else "ies")
        return Classification(
            strategy="module_dirs",
            units=[DiscoveredUnit("module_dir", d, d.name) for d in dirs],
        )

    raise NoPackageStructure(
        f"No recognizable package structure found (no {cfg.package_extension} files "
        f"and no {cfg.vendor_prefix}* or {cfg.manifest_extension} module directories)"
    )
