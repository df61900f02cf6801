"""PowerShellGet command construction and output parsing."""

from offline_bundle_installer.lib import psget
from offline_bundle_installer.lib.command import CmdResult
from offline_bundle_installer.lib.psget import PowerShellGet, ps_quote


class Recorder:
    def __init__(self, results=None):
        self.scripts = []
        self.results = list(results or [])

    def __call__(self, argv, **kwargs):
        self.scripts.append(argv[-1])
        if self.results:
            return self.results.pop(0)
        return CmdResult(argv=list(argv), returncode=0, stdout="", stderr="")


def _ok(stdout=""):
    return CmdResult(argv=[], returncode=0, stdout=stdout, stderr="")


def _fail(stderr="boom"):
    return CmdResult(argv=[], returncode=1, stdout="", stderr=stderr)


def test_ps_quote_escapes_single_quotes():
    assert ps_quote("C:\\it's here") == "'C:\\it''s here'"


def test_install_flags(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr(psget, "run_cmd", rec)
    out = PowerShellGet("pwsh").install_package("VMware.PowerCLI", source="PowerCLI_Local_1")
    assert out.ok
    script = rec.scripts[0]
    assert "Install-Module -Name 'VMware.PowerCLI' -Repository 'PowerCLI_Local_1' -Scope CurrentUser" in script
    assert "-Force" in script and "-AllowClobber" in script


def test_failed_command_is_an_outcome(monkeypatch):
    monkeypatch.setattr(psget, "run_cmd", Recorder([_fail("No match was found\nmore")]))
    out = PowerShellGet("pwsh").register_source("R", "/tmp/x")
    assert not out.ok
    assert "No match was found" in out.message
    assert "(exit 1)" in out.message


def test_list_installed_accepts_single_object_and_list(monkeypatch):
    monkeypatch.setattr(
        psget,
        "run_cmd",
        Recorder([
            _ok('{"Name":"VMware.Vim","Version":"8.3.0"}'),
            _ok('[{"Name":"VMware.Vim","Version":"8.3.0"},{"Name":"VMware.PowerCLI","Version":"13.3.0"}]'),
            _ok("[]"),
        ]),
    )
    pm = PowerShellGet("pwsh")
    assert [m.name for m in pm.list_installed("VMware.*")] == ["VMware.Vim"]
    assert [m.version for m in pm.list_installed("VMware.*")] == ["8.3.0", "13.3.0"]
    assert pm.list_installed("VMware.*") == []


def test_get_source_missing(monkeypatch):
    monkeypatch.setattr(psget, "run_cmd", Recorder([_ok("")]))
    assert PowerShellGet("pwsh").get_source("nope") is None


def test_imported_modules_are_reloaded_in_later_scripts(monkeypatch):
    rec = Recorder([_ok(), _ok("17\n")])
    monkeypatch.setattr(psget, "run_cmd", rec)
    pm = PowerShellGet("pwsh")
    assert pm.import_package("VMware.PowerCLI").ok
    assert pm.count_commands("VMware.*") == 17
    assert "Import-Module 'VMware.PowerCLI' -Force" in rec.scripts[1]


def test_set_configuration_only_passes_given_options(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr(psget, "run_cmd", rec)
    pm = PowerShellGet("pwsh")
    pm.set_configuration(participate_in_ceip=False)
    pm.set_configuration(invalid_certificate_action="Ignore")
    pm.set_configuration(scope="User")
    assert "-ParticipateInCEIP $false" in rec.scripts[0] and "-InvalidCertificateAction" not in rec.scripts[0]
    assert "-InvalidCertificateAction Ignore" in rec.scripts[1]
    assert "-Scope User" in rec.scripts[2]
    assert all("-Confirm:$false" in s for s in rec.scripts)
