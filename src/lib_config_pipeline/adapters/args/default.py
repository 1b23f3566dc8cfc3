"""Command-line argument overlay.

Every ``--key=value`` token sets ``key`` to the literal string ``value``. A
token without ``=`` sets the key to the empty string, which is enough for
presence flags such as ``--keys.help``. Tokens that do not start with ``--``
are ignored.
"""

from __future__ import annotations

import sys
from typing import Sequence

from ...domain.store import PropertyStore
from ...observability import log_debug, make_event

ARG_PREFIX = "--"


def parse_arg(token: str) -> tuple[str, str] | None:
    """Return ``(key, value)`` for an override token, ``None`` for anything else.

    Examples
    --------
    >>> parse_arg("--server.port=8080")
    ('server.port', '8080')
    >>> parse_arg("--query=a=b")
    ('query', 'a=b')
    >>> parse_arg("--keys.help")
    ('keys.help', '')
    >>> parse_arg("serve") is None
    True
    """

    if not token.startswith(ARG_PREFIX):
        return None
    key, _, value = token[len(ARG_PREFIX) :].partition("=")
    if not key:
        return None
    return key, value


def apply_args(store: PropertyStore, argv: Sequence[str] | None = None) -> list[str]:
    """Set every ``--key=value`` token from *argv* (``sys.argv[1:]`` by default).

    Returns the keys that were written, in argument order.
    """

    tokens = sys.argv[1:] if argv is None else argv
    applied: list[str] = []
    for token in tokens:
        parsed = parse_arg(token)
        if parsed is None:
            continue
        key, value = parsed
        store.set(key, value, layer="args")
        applied.append(key)
    log_debug("args_applied", **make_event("args", None, {"keys": applied}))
    return applied
