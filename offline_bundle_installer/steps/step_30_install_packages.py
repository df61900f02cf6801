from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List

from ..lib.classify import Classification, DiscoveredUnit
from ..lib.modules import install_module_dir
from ..logging_utils import log_success
from ..pipeline import RunCtx

logger = logging.getLogger(__name__)


def repository_name(prefix: str) -> str:
    """Per-run local repository name; the suffix keeps parallel runs apart."""
    return f"{prefix}{uuid.uuid4().hex[:8]}"


def _source_location(workspace: Path, units: List[DiscoveredUnit]) -> str:
    # Local PowerShellGet repositories only index the top level of a folder.
    parents = {str(u.path.parent) for u in units}
    if len(parents) == 1:
        return parents.pop()
    return str(workspace)


class InstallPackagesStep:
    step_id = "30_install_packages"

    def run(self, ctx: RunCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        classification: Classification = state["classification"]
        if classification.strategy == "package_files":
            state["installed_packages"] = self._install_package_files(ctx, classification.units)
        else:
            state["copied_modules"] = self._install_module_dirs(ctx, classification.units)
        return state

    def _install_package_files(self, ctx: RunCtx, units: List[DiscoveredUnit]) -> List[str]:
        assert ctx.workspace is not None
        cfg = ctx.cfg
        pm = ctx.pm
        repo = repository_name(cfg.repository_prefix)

        if pm.get_source(repo) is not None:
            out = pm.unregister_source(repo)
            if not out.ok:
                ctx.warn("Could not remove stale repository %s: %s", repo, out.message)

        location = _source_location(ctx.workspace, units)
        logger.info("Registering temporary repository %s -> %s", repo, location)
        reg = pm.register_source(repo, location, trusted=True)
        if not reg.ok:
            ctx.warn(reg.message)

        installed: List[str] = []
        try:
            logger.info("Packages in bundle:")
            for u in units:
                logger.info("  - %s", u.name)

            logger.info("Installing %s (with dependencies)...", cfg.umbrella_package)
            out = pm.install_package(cfg.umbrella_package, source=repo, scope="CurrentUser", force=True, allow_clobber=True)
            if out.ok:
                log_success(logger, "%s installed", cfg.umbrella_package)
                installed.append(cfg.umbrella_package)
                return installed

            ctx.warn("%s install failed, installing core packages individually: %s", cfg.umbrella_package, out.message)
            for name in cfg.core_packages:
                if not any(name.lower() in u.path.name.lower() for u in units):
                    logger.debug("No package file for %s", name)
                    continue
                logger.info("Installing %s...", name)
                out = pm.install_package(name, source=repo, scope="CurrentUser", force=True, allow_clobber=True)
                if out.ok:
                    log_success(logger, "  %s installed", name)
                    installed.append(name)
                else:
                    ctx.warn("  %s install failed: %s", name, out.message)
            return installed
        finally:
            out = pm.unregister_source(repo)
            if out.ok:
                logger.debug("Unregistered repository %s", repo)
            else:
                ctx.warn("Could not unregister repository %s: %s", repo, out.message)

    def _install_module_dirs(self, ctx: RunCtx, units: List[DiscoveredUnit]) -> List[str]:
        root = Path(ctx.cfg.module_root)
        logger.info("Installing modules to %s", root)
        root.mkdir(parents=True, exist_ok=True)

        copied: List[str] = []
        # Each module is independent: a failed copy is recorded and the rest continue.
        for u in units:
            try:
                m = install_module_dir(u.path, root, manifest_extension=ctx.cfg.manifest_extension)
            except OSError as e:
                ctx.warn("Failed to copy module %s: %s", u.name, e)
                continue
            copied.append(m.name)
            if m.has_manifest:
                log_success(logger, "  Installed %s", m.name)
            else:
                ctx.warn("  Installed %s (no %s manifest found)", m.name, ctx.cfg.manifest_extension)
        return copied
