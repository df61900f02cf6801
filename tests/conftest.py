from __future__ import annotations

import fnmatch
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from offline_bundle_installer.lib.classify import package_display_name
from offline_bundle_installer.lib.outcome import Outcome
from offline_bundle_installer.lib.psget import InstalledModule


class FakePackageManager:
    """In-memory PackageManager: installs whatever package files the source holds."""

    def __init__(self, *, preinstalled: Optional[List[InstalledModule]] = None) -> None:
        self.sources: Dict[str, str] = {}
        self.installed: List[InstalledModule] = list(preinstalled or [])
        self.imported: List[str] = []
        self.fail_imports: set = set()
        self.fail_configuration = False
        self.fail_register = False
        self.fail_unregister = False
        self.configuration: Dict[str, Any] = {}
        self.calls: List[tuple] = []
        self.commands = 42

    def get_source(self, name: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("get_source", name))
        if name in self.sources:
            return {"Name": name, "SourceLocation": self.sources[name]}
        return None

    def register_source(self, name: str, location: str, *, trusted: bool = True) -> Outcome:
        self.calls.append(("register_source", name, location, trusted))
        if self.fail_register:
            return Outcome.failure(f"Register repository {name} failed (exit 1): access denied")
        if name in self.sources:
            return Outcome.failure(f"Repository {name} already exists")
        self.sources[name] = location
        return Outcome.success()

    def unregister_source(self, name: str) -> Outcome:
        self.calls.append(("unregister_source", name))
        if self.fail_unregister:
            return Outcome.failure(f"Unregister repository {name} failed (exit 1): file in use")
        if self.sources.pop(name, None) is None:
            return Outcome.failure(f"No repository {name}")
        return Outcome.success()

    def install_package(self, name, *, source, scope="CurrentUser", force=True, allow_clobber=True) -> Outcome:
        self.calls.append(("install_package", name, source, scope, force, allow_clobber))
        location = self.sources.get(source)
        if location is None:
            return Outcome.failure(f"Unknown repository {source}")
        for f in sorted(Path(location).glob("*.nupkg")):
            if package_display_name(f.name).lower() == name.lower():
                version = f.stem[len(name) + 1 :]
                self.installed.append(InstalledModule(name=name, version=version))
                return Outcome.success()
        return Outcome.failure(f"No match was found for the specified search criteria and module name '{name}'")

    def refresh_index(self) -> Outcome:
        self.calls.append(("refresh_index",))
        return Outcome.success()

    def list_installed(self, pattern: str) -> List[InstalledModule]:
        self.calls.append(("list_installed", pattern))
        return [m for m in self.installed if fnmatch.fnmatchcase(m.name, pattern)]

    def import_package(self, name: str, *, force: bool = True) -> Outcome:
        self.calls.append(("import_package", name, force))
        if name in self.fail_imports or name not in {m.name for m in self.installed}:
            return Outcome.failure(f"The specified module '{name}' was not loaded")
        self.imported.append(name)
        return Outcome.success()

    def count_commands(self, namespace: str) -> int:
        self.calls.append(("count_commands", namespace))
        return self.commands

    def set_configuration(self, *, participate_in_ceip=None, invalid_certificate_action=None, scope=None) -> Outcome:
        self.calls.append(("set_configuration", participate_in_ceip, invalid_certificate_action, scope))
        if self.fail_configuration:
            return Outcome.failure("Set-PowerCLIConfiguration failed")
        for k, v in (
            ("participate_in_ceip", participate_in_ceip),
            ("invalid_certificate_action", invalid_certificate_action),
            ("scope", scope),
        ):
            if v is not None:
                self.configuration[k] = v
        return Outcome.success()

    def get_configuration(self) -> Outcome:
        self.calls.append(("get_configuration",))
        return Outcome.success(repr(self.configuration))

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]


def make_zip(path: Path, files: Dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return path


@pytest.fixture
def fake_pm() -> FakePackageManager:
    return FakePackageManager()


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    d = tmp_path / "temp"
    d.mkdir()
    return d


@pytest.fixture
def module_root(tmp_path: Path) -> Path:
    return tmp_path / "Modules"


@pytest.fixture
def config_file(tmp_path: Path, temp_root: Path, module_root: Path) -> Path:
    p = tmp_path / "installer.yaml"
    p.write_text(
        f"temp_dir: '{temp_root.as_posix()}'\nmodule_root: '{module_root.as_posix()}'\n",
        encoding="utf-8",
    )
    return p


@pytest.fixture
def answers():
    """input() replacement returning queued answers, then empty strings."""

    queue: List[str] = []
    prompts: List[str] = []

    def input_fn(prompt: str) -> str:
        prompts.append(prompt)
        return queue.pop(0) if queue else ""

    input_fn.queue = queue  # type: ignore[attr-defined]
    input_fn.prompts = prompts  # type: ignore[attr-defined]
    return input_fn
