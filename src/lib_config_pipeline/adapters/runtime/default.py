"""Runtime mode detection.

The runtime mode is the overlay name that the mode pass always applies last:
``docker`` inside a container, otherwise the operating system name.
"""

from __future__ import annotations

import sys
from pathlib import Path

from ...observability import log_debug

DOCKER_MARKER = Path("/.dockerenv")

#: ``sys.platform`` values mapped to the overlay names used under ``mods``.
_PLATFORM_MODES = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
}


def platform_mode(platform: str | None = None) -> str:
    """Return the overlay name for *platform* (``sys.platform`` by default).

    Examples
    --------
    >>> platform_mode("win32"), platform_mode("linux"), platform_mode("freebsd14")
    ('windows', 'linux', 'freebsd')
    """

    current = platform or sys.platform
    if current in _PLATFORM_MODES:
        return _PLATFORM_MODES[current]
    return current.rstrip("0123456789") or current


def detect_runtime_mode(*, marker: Path = DOCKER_MARKER, platform: str | None = None) -> str:
    """Return ``"docker"`` when *marker* exists, otherwise the platform mode.

    A marker that cannot be inspected for any reason other than absence
    (permission denied, for example) is treated as present.
    """

    try:
        marker.stat()
    except FileNotFoundError:
        mode = platform_mode(platform)
    except OSError:
        mode = "docker"
    else:
        mode = "docker"
    log_debug("runtime_mode_detected", stage="modes", path=str(marker), mode=mode)
    return mode
