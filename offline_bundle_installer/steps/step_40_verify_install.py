from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import VerificationFailure
from ..logging_utils import log_success
from ..pipeline import RunCtx

logger = logging.getLogger(__name__)


class VerifyInstallStep:
    step_id = "40_verify_install"

    def run(self, ctx: RunCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        pm = ctx.pm

        logger.info("Verifying installation...")
        pm.refresh_index()

        modules = sorted(pm.list_installed(cfg.namespace), key=lambda m: m.name.lower())
        if not modules:
            raise VerificationFailure(f"No {cfg.namespace} modules found after installation")

        log_success(logger, "Found %d module(s):", len(modules))
        for m in modules:
            logger.info("  %s %s", m.name, m.version)
        state["installed"] = [{"name": m.name, "version": m.version} for m in modules]

        out = pm.import_package(cfg.umbrella_package, force=True)
        if out.ok:
            count = pm.count_commands(cfg.namespace)
            state["command_count"] = count
            log_success(logger, "%s loaded (%d commands available)", cfg.umbrella_package, count)
            return state

        # Success here only means nothing raised; the fallback imports are not checked.
        ctx.warn("Could not import %s: %s", cfg.umbrella_package, out.message)
        for name in cfg.fallback_imports:
            fb = pm.import_package(name, force=True)
            if fb.ok:
                logger.info("  Imported %s", name)
            else:
                logger.debug("Fallback import of %s failed: %s", name, fb.message)
        state["command_count"] = None
        return state
