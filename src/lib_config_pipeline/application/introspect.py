"""Diagnostic dump of the resolved store when ``keys.help`` is set."""

from __future__ import annotations

import sys
from typing import TextIO

from ..domain.store import PropertyStore
from ..observability import log_debug, make_event

HELP_KEY = "keys.help"


def introspect(store: PropertyStore, stream: TextIO | None = None) -> bool:
    """Write the whole store as indented JSON to *stream* when ``keys.help`` is present.

    Returns ``True`` when a dump was written. The store is only read.
    """

    if store.get(HELP_KEY) is None:
        return False
    target = stream if stream is not None else sys.stdout
    target.write(store.to_json(indent=2) + "\n")
    target.flush()
    log_debug("configuration_dumped", **make_event("help", None))
    return True
