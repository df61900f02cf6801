from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, Optional

from .config import load_config
from .errors import InstallerError, UserCancelled
from .lib.console import pause
from .lib.psget import PackageManager, PowerShellGet
from .lib.workspace import remove_workspace
from .logging_utils import DEFAULT_LOG_PATH, configure_logging, log_success
from .pipeline import RunCtx, run_pipeline
from .steps import (
    ClassifyContentStep,
    ConfigureStep,
    ExtractBundleStep,
    InstallPackagesStep,
    VerifyInstallStep,
    confirm_install,
    select_bundle,
)
from .steps.select_bundle import Chooser

logger = logging.getLogger(__name__)


def build_steps():
    return [
        ExtractBundleStep(),
        ClassifyContentStep(),
        InstallPackagesStep(),
        VerifyInstallStep(),
    ]


def _new_summary() -> Dict[str, Any]:
    return {
        "bundle": None,
        "workspace": None,
        "strategy": None,
        "installed": [],
        "command_count": None,
        "ok": False,
        "error": None,
        "failed_step": None,
        "cancelled": False,
        "configured": False,
        "warnings": [],
    }


def _install(ctx: RunCtx, summary: Dict[str, Any]) -> None:
    """Extract through verify; the workspace is removed on every path."""

    try:
        result = run_pipeline(ctx=ctx, state=summary, steps=build_steps())
        summary.update(result.state)
        summary["ran_steps"] = result.ran_steps
        summary["ok"] = True
        log_success(logger, "Installation completed successfully")
    except InstallerError as e:
        logger.error("Installation failed: %s", e)
        summary["error"] = str(e)
        summary["failed_step"] = summary.get("current_step")
    except Exception as e:
        logger.exception("Installation failed")
        summary["error"] = str(e)
        summary["failed_step"] = summary.get("current_step")
    finally:
        remove_workspace(ctx.workspace)
        summary.pop("classification", None)
        summary["current_step"] = None


def run(
    *,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    bundle: Optional[str] = None,
    assume_yes: bool = False,
    configure: Optional[bool] = None,
    wait: bool = True,
    pm: Optional[PackageManager] = None,
    chooser: Optional[Chooser] = None,
    input_fn: Callable[[str], str] = input,
) -> Dict[str, Any]:
    """Run one interactive install and return a summary of what happened."""

    actual_log_path = configure_logging(log_path=log_path)
    summary = _new_summary()
    summary["log_path"] = actual_log_path

    try:
        cfg = load_config(config_path)
        select_kwargs: Dict[str, Any] = {"bundle": bundle}
        if chooser is not None:
            select_kwargs["chooser"] = chooser
        path = select_bundle(cfg, **select_kwargs)
        summary["bundle"] = path
        confirm_install(path, input_fn=input_fn, assume_yes=assume_yes)

        if pm is None:
            pm = PowerShellGet.locate(cfg.powershell)

        ctx = RunCtx(cfg=cfg, pm=pm, bundle=path, input_fn=input_fn, warnings=summary["warnings"])
        _install(ctx, summary)

        if summary["ok"]:
            ConfigureStep(answer=configure).run(ctx, summary)
    except UserCancelled as e:
        logger.info("Cancelled: %s", e)
        summary["cancelled"] = True
    except (RuntimeError, OSError, ValueError) as e:
        # Bad config or PowerShell missing; nothing was extracted yet.
        logger.error("%s", e)
        summary["error"] = str(e)
    finally:
        if wait:
            pause(input_fn=input_fn)

    return summary


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="offline-bundle-installer")
    p.add_argument("--config", default=None, help="Path to installer config (yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--bundle", default=None, help="Bundle archive to install (skips the file dialog)")
    p.add_argument("--yes", action="store_true", help="Do not ask before installing")
    g = p.add_mutually_exclusive_group()
    g.add_argument("--configure", dest="configure", action="store_true", default=None, help="Apply configuration without asking")
    g.add_argument("--no-configure", dest="configure", action="store_false", help="Skip configuration without asking")
    p.add_argument("--no-pause", action="store_true", help="Do not wait for a key press at the end")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            log_path=args.log,
            bundle=args.bundle,
            assume_yes=bool(args.yes),
            configure=args.configure,
            wait=not args.no_pause,
        )
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
