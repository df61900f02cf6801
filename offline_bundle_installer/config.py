from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_CORE_PACKAGES = [
    "VMware.VimAutomation.Sdk",
    "VMware.VimAutomation.Common",
    "VMware.Vim",
    "VMware.VimAutomation.Core",
    "VMware.PowerCLI",
]

DEFAULT_FALLBACK_IMPORTS = [
    "VMware.VimAutomation.Core",
    "VMware.VimAutomation.Common",
]


def default_module_root() -> str:
    """Per-user module directory PowerShell searches by default."""
    home = Path.home()
    if sys.platform == "win32":
        return str(home / "Documents" / "WindowsPowerShell" / "Modules")
    return str(home / ".local" / "share" / "powershell" / "Modules")


def default_dialog_dir() -> str:
    downloads = Path.home() / "Downloads"
    return str(downloads if downloads.is_dir() else Path.home())


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def vendor_prefix(self) -> str:
        return str(self.raw.get("vendor_prefix") or "VMware.")

    @property
    def namespace(self) -> str:
        return str(self.raw.get("namespace") or f"{self.vendor_prefix}*")

    @property
    def package_extension(self) -> str:
        return str(self.raw.get("package_extension") or ".nupkg")

    @property
    def manifest_extension(self) -> str:
        return str(self.raw.get("manifest_extension") or ".psd1")

    @property
    def umbrella_package(self) -> str:
        return str(self.raw.get("umbrella_package") or "VMware.PowerCLI")

    @property
    def core_packages(self) -> List[str]:
        return [str(p) for p in (self.raw.get("core_packages") or DEFAULT_CORE_PACKAGES)]

    @property
    def fallback_imports(self) -> List[str]:
        return [str(p) for p in (self.raw.get("fallback_imports") or DEFAULT_FALLBACK_IMPORTS)]

    @property
    def workspace_prefix(self) -> str:
        return str(self.raw.get("workspace_prefix") or "PowerCLI_Install_")

    @property
    def repository_prefix(self) -> str:
        return str(self.raw.get("repository_prefix") or "PowerCLI_Local_")

    @property
    def temp_dir(self) -> Optional[str]:
        v = self.raw.get("temp_dir")
        return str(v) if v else None

    @property
    def module_root(self) -> str:
        v = self.raw.get("module_root")
        return os.path.expanduser(str(v)) if v else default_module_root()

    @property
    def powershell(self) -> Optional[str]:
        v = self.raw.get("powershell")
        return str(v) if v else None

    @property
    def dialog_dir(self) -> str:
        v = self.raw.get("dialog_dir")
        return os.path.expanduser(str(v)) if v else default_dialog_dir()

    @property
    def dialog_filetypes(self) -> List[Tuple[str, str]]:
        return [("ZIP archives", "*.zip"), ("All files", "*.*")]

    @property
    def configure_options(self) -> Dict[str, Any]:
        c = self.raw.get("configure") or {}
        return {
            "participate_in_ceip": bool(c.get("participate_in_ceip", False)),
            "invalid_certificate_action": str(c.get("invalid_certificate_action") or "Ignore"),
            "scope": str(c.get("scope") or "User"),
        }


def load_config(path: Optional[str] = None) -> InstallerConfig:
    if not path:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the installer config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid installer config {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Installer config must contain a mapping/object: {p}")

    return InstallerConfig(raw=raw)
