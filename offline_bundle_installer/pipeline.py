from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .config import InstallerConfig
from .lib.psget import PackageManager

logger = logging.getLogger(__name__)


@dataclass
class RunCtx:
    """Everything a step may touch during one run."""

    cfg: InstallerConfig
    pm: PackageManager
    bundle: str
    input_fn: Callable[[str], str] = input
    workspace: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)

    def warn(self, msg: str, *args: Any) -> None:
        """Record and log a swallowed best-effort failure."""
        text = msg % args if args else msg
        self.warnings.append(text)
        logger.warning("%s", text)


class Step(Protocol):
    """A single stage of the install run."""

    step_id: str

    def run(self, ctx: RunCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def run_pipeline(
    *,
    ctx: RunCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order. The first exception stops the run and propagates."""

    ran: List[str] = []

    for step in steps:
        state["current_step"] = step.step_id
        logger.debug("Running step %s", step.step_id)
        state = step.run(ctx, state)
        ran.append(step.step_id)

    state["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)
