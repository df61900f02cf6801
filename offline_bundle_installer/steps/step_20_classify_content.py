from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.classify import classify
from ..pipeline import RunCtx

logger = logging.getLogger(__name__)


class ClassifyContentStep:
    step_id = "20_classify_content"

    def run(self, ctx: RunCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if ctx.workspace is None:
            raise RuntimeError("workspace missing; extract step must run first")

        result = classify(ctx.workspace, ctx.cfg)
        state["classification"] = result
        state["strategy"] = result.strategy
        logger.debug("Strategy %s (%d units)", result.strategy, len(result.units))
        return state
