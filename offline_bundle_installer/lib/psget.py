from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from .command import CmdResult, run_cmd
from .outcome import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstalledModule:
    name: str
    version: str


class PackageManager(Protocol):
    """Host package-manager operations used by the installer.

    Failures are returned as Outcome(ok=False); only programming errors raise.
    """

    def get_source(self, name: str) -> Optional[Dict[str, Any]]:
        ...

    def register_source(self, name: str, location: str, *, trusted: bool = True) -> Outcome:
        ...

    def unregister_source(self, name: str) -> Outcome:
        ...

    def install_package(
        self,
        name: str,
        *,
        source: str,
        scope: str = "CurrentUser",
        force: bool = True,
        allow_clobber: bool = True,
    ) -> Outcome:
        ...

    def refresh_index(self) -> Outcome:
        ...

    def list_installed(self, pattern: str) -> List[InstalledModule]:
        ...

    def import_package(self, name: str, *, force: bool = True) -> Outcome:
        ...

    def count_commands(self, namespace: str) -> int:
        ...

    def set_configuration(
        self,
        *,
        participate_in_ceip: Optional[bool] = None,
        invalid_certificate_action: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> Outcome:
        ...

    def get_configuration(self) -> Outcome:
        ...


def ps_quote(value: str) -> str:
    """Single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def ps_bool(value: bool) -> str:
    return "$true" if value else "$false"


def find_powershell(preferred: Optional[str] = None) -> Optional[str]:
    for candidate in ([preferred] if preferred else []) + ["pwsh", "powershell"]:
        found = shutil.which(candidate)
        if found:
            return found
    return None


def _error_text(r: CmdResult) -> str:
    text = (r.stderr or r.stdout or "").strip()
    return text.splitlines()[0] if text else f"exit code {r.returncode}"


class PowerShellGet:
    """PackageManager backed by PowerShellGet cmdlets.

    Each call runs in its own PowerShell process. Modules imported through
    import_package() are re-imported at the start of every later script so
    the handle behaves like one session.
    """

    def __init__(self, executable: str, *, timeout_s: float = 900.0) -> None:
        self.executable = executable
        self.timeout_s = timeout_s
        self._imported: List[str] = []

    @classmethod
    def locate(cls, preferred: Optional[str] = None) -> "PowerShellGet":
        exe = find_powershell(preferred)
        if exe is None:
            raise RuntimeError("PowerShell (pwsh or powershell) not found on PATH")
        return cls(exe)

    def _run(self, script: str, *, with_session: bool = True) -> CmdResult:
        prelude = ""
        if with_session and self._imported:
            prelude = "".join(
                f"Import-Module {ps_quote(m)} -Force -ErrorAction SilentlyContinue; " for m in self._imported
            )
        full = "$ProgressPreference = 'SilentlyContinue'; $ErrorActionPreference = 'Stop'; " + prelude + script
        return run_cmd(
            [self.executable, "-NoProfile", "-NonInteractive", "-Command", full],
            check=False,
            timeout_s=self.timeout_s,
        )

    def _outcome(self, r: CmdResult, what: str) -> Outcome:
        if r.ok:
            return Outcome.success(what)
        return Outcome.failure(f"{what} failed (exit {r.returncode}): {_error_text(r)}")

    def get_source(self, name: str) -> Optional[Dict[str, Any]]:
        r = self._run(
            f"$r = Get-PSRepository -Name {ps_quote(name)} -ErrorAction SilentlyContinue; "
            "if ($r) { $r | Select-Object Name, SourceLocation, InstallationPolicy | ConvertTo-Json -Compress }",
            with_session=False,
        )
        if not r.ok or not r.stdout.strip():
            return None
        try:
            data = json.loads(r.stdout)
        except ValueError:
            logger.debug("Unparseable Get-PSRepository output: %s", r.stdout)
            return None
        return data if isinstance(data, dict) else None

    def register_source(self, name: str, location: str, *, trusted: bool = True) -> Outcome:
        policy = "Trusted" if trusted else "Untrusted"
        r = self._run(
            f"Register-PSRepository -Name {ps_quote(name)} -SourceLocation {ps_quote(location)} "
            f"-InstallationPolicy {policy}",
            with_session=False,
        )
        return self._outcome(r, f"Register repository {name}")

    def unregister_source(self, name: str) -> Outcome:
        r = self._run(f"Unregister-PSRepository -Name {ps_quote(name)}", with_session=False)
        return self._outcome(r, f"Unregister repository {name}")

    def install_package(
        self,
        name: str,
        *,
        source: str,
        scope: str = "CurrentUser",
        force: bool = True,
        allow_clobber: bool = True,
    ) -> Outcome:
        script = f"Install-Module -Name {ps_quote(name)} -Repository {ps_quote(source)} -Scope {scope}"
        if force:
            script += " -Force"
        if allow_clobber:
            script += " -AllowClobber"
        r = self._run(script, with_session=False)
        return self._outcome(r, f"Install {name}")

    def refresh_index(self) -> Outcome:
        r = self._run("Get-Module -ListAvailable -Refresh | Out-Null", with_session=False)
        return self._outcome(r, "Refresh module index")

    def list_installed(self, pattern: str) -> List[InstalledModule]:
        r = self._run(
            f"$m = @(Get-Module -ListAvailable -Name {ps_quote(pattern)} | "
            "Select-Object Name, @{n='Version';e={$_.Version.ToString()}}); "
            "ConvertTo-Json -InputObject $m -Compress",
            with_session=False,
        )
        if not r.ok or not r.stdout.strip():
            logger.debug("Listing modules failed: %s", _error_text(r))
            return []
        try:
            data = json.loads(r.stdout)
        except ValueError:
            logger.debug("Unparseable Get-Module output: %s", r.stdout)
            return []
        if isinstance(data, dict):
            data = [data]
        return [InstalledModule(name=str(d.get("Name")), version=str(d.get("Version"))) for d in data or []]

    def import_package(self, name: str, *, force: bool = True) -> Outcome:
        script = f"Import-Module {ps_quote(name)}"
        if force:
            script += " -Force"
        r = self._run(script)
        if r.ok and name not in self._imported:
            self._imported.append(name)
        return self._outcome(r, f"Import {name}")

    def count_commands(self, namespace: str) -> int:
        r = self._run(f"@(Get-Command -Module {ps_quote(namespace)}).Count")
        try:
            return int(r.stdout.strip().splitlines()[-1]) if r.ok else 0
        except (ValueError, IndexError):
            return 0

    def set_configuration(
        self,
        *,
        participate_in_ceip: Optional[bool] = None,
        invalid_certificate_action: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> Outcome:
        script = "Set-PowerCLIConfiguration"
        if participate_in_ceip is not None:
            script += f" -ParticipateInCEIP {ps_bool(participate_in_ceip)}"
        if invalid_certificate_action is not None:
            script += f" -InvalidCertificateAction {invalid_certificate_action}"
        if scope is not None:
            script += f" -Scope {scope}"
        r = self._run(script + " -Confirm:$false | Out-Null")
        return self._outcome(r, "Set configuration")

    def get_configuration(self) -> Outcome:
        r = self._run("Get-PowerCLIConfiguration | Format-Table -AutoSize | Out-String -Width 200")
        out = self._outcome(r, "Get configuration")
        if out.ok:
            return Outcome.success(r.stdout.strip())
        return out
