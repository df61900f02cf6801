from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..lib.console import ask_yes_no
from ..logging_utils import log_success
from ..pipeline import RunCtx

logger = logging.getLogger(__name__)


class ConfigureStep:
    """Post-install settings; never changes the already reported outcome."""

    step_id = "50_configure"

    def __init__(self, answer: Optional[bool] = None) -> None:
        self.answer = answer

    def run(self, ctx: RunCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        state["configured"] = False
        wanted = self.answer
        if wanted is None:
            wanted = ask_yes_no("Apply recommended configuration now?", ctx.input_fn)
        if not wanted:
            return state

        opts = ctx.cfg.configure_options
        try:
            calls = [
                ("import", lambda: ctx.pm.import_package(ctx.cfg.umbrella_package, force=True)),
                ("telemetry", lambda: ctx.pm.set_configuration(participate_in_ceip=opts["participate_in_ceip"])),
                (
                    "certificates",
                    lambda: ctx.pm.set_configuration(invalid_certificate_action=opts["invalid_certificate_action"]),
                ),
                ("scope", lambda: ctx.pm.set_configuration(scope=opts["scope"])),
            ]
            for label, call in calls:
                out = call()
                if not out.ok:
                    ctx.warn("Configuration (%s) failed: %s", label, out.message)
                    return state

            log_success(logger, "Configuration applied")
            current = ctx.pm.get_configuration()
            if current.ok and current.message:
                logger.info("%s", current.message)
            state["configured"] = True
        except Exception as e:
            ctx.warn("Configuration failed: %s", e)
        return state
