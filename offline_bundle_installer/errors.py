from __future__ import annotations


class InstallerError(RuntimeError):
    """Failure that ends the run with an overall failed result."""


class UserCancelled(Exception):
    """No bundle chosen or a prompt declined. Not a failure."""


class MissingBundle(InstallerError):
    pass


class ExtractFailure(InstallerError):
    pass


class NoPackageStructure(InstallerError):
    pass


class VerificationFailure(InstallerError):
    pass
