"""Environment variable overlay.

Purpose
-------
Translate process environment variables carrying the ``ENV_`` prefix into
dotted store keys.

Key behaviours
--------------
* ``ENV_SERVER_PORT=8080`` sets ``server.port`` to the string ``"8080"``.
* The prefix is stripped, the rest lower-cased, and every ``_`` becomes a
  ``.``. This is a naming convention, not an escaping scheme: a key that
  really contains an underscore cannot be addressed, and case is discarded.
* Values stay strings; typed accessors on the store do any conversion.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...domain.store import PropertyStore
from ...observability import log_debug, make_event

ENV_PREFIX = "ENV_"


def env_key(name: str, prefix: str = ENV_PREFIX) -> str | None:
    """Return the dotted key for the variable *name*, ``None`` when it is out of scope.

    Examples
    --------
    >>> env_key("ENV_SERVER_PORT")
    'server.port'
    >>> env_key("ENV_LOGGER_Level")
    'logger.level'
    >>> env_key("HOME") is None
    True
    """

    if not name.startswith(prefix):
        return None
    stripped = name[len(prefix) :]
    if not stripped:
        return None
    return stripped.lower().replace("_", ".")


class DefaultEnvLoader:
    """Apply ``ENV_*`` variables to a store.

    Parameters
    ----------
    environ:
        Mapping to read from. Defaults to :data:`os.environ`.
    prefix:
        Variable prefix, ``ENV_`` unless overridden.
    """

    def __init__(self, *, environ: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX) -> None:
        self._environ = environ if environ is not None else os.environ
        self._prefix = prefix

    def apply(self, store: PropertyStore) -> list[str]:
        """Set every matching variable on *store* and return the keys written.

        Examples
        --------
        >>> store = PropertyStore()
        >>> DefaultEnvLoader(environ={"ENV_SERVER_PORT": "8080", "PATH": "/bin"}).apply(store)
        ['server.port']
        >>> store.get("server.port")
        '8080'
        """

        applied: list[str] = []
        for name in sorted(self._environ):
            key = env_key(name, self._prefix)
            if key is None:
                continue
            store.set(key, self._environ[name], layer="env")
            applied.append(key)
        log_debug("env_applied", **make_event("env", None, {"keys": applied}))
        return applied


def apply_env(store: PropertyStore, environ: Mapping[str, str] | None = None) -> list[str]:
    """Apply ``ENV_*`` variables from *environ* (``os.environ`` by default)."""

    return DefaultEnvLoader(environ=environ).apply(store)
