from .configure import ConfigureStep
from .select_bundle import confirm_install, select_bundle
from .step_10_extract_bundle import ExtractBundleStep
from .step_20_classify_content import ClassifyContentStep
from .step_30_install_packages import InstallPackagesStep
from .step_40_verify_install import VerifyInstallStep

__all__ = [
    "ConfigureStep",
    "confirm_install",
    "select_bundle",
    "ExtractBundleStep",
    "ClassifyContentStep",
    "InstallPackagesStep",
    "VerifyInstallStep",
]
