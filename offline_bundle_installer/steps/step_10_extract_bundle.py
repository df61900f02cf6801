from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import MissingBundle
from ..lib.archive import extract_all
from ..lib.workspace import create_workspace, list_children, workspace_path
from ..pipeline import RunCtx

logger = logging.getLogger(__name__)


class ExtractBundleStep:
    step_id = "10_extract_bundle"

    def run(self, ctx: RunCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        if not Path(ctx.bundle).is_file():
            raise MissingBundle(f"Bundle not found: {ctx.bundle}")

        # Set before creation so cleanup covers a half-created workspace.
        ctx.workspace = workspace_path(ctx.cfg.workspace_prefix, base=ctx.cfg.temp_dir)
        state["workspace"] = str(ctx.workspace)
        create_workspace(ctx.workspace)

        logger.info("Extracting %s...", Path(ctx.bundle).name)
        entries = extract_all(ctx.bundle, ctx.workspace)
        state["extracted_entries"] = len(entries)

        logger.info("Extracted contents:")
        for child in list_children(ctx.workspace):
            logger.info("  %s", child)
        return state
