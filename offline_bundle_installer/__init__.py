"""Offline bundle installer (PowerShellGet, VMware PowerCLI by default).

Core design goals:
- Single linear run: select, extract, classify, install, verify
- Extraction workspace removed on every exit path
- Best-effort installs reported as outcomes, not exceptions
- Package manager passed in as a handle so it can be faked
- Centralized logging
"""

__all__ = []
