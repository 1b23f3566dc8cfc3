"""Registry of named, caller-extensible functions.

Purpose
-------
Map scheme, suffix and check names to the functions that implement them:
source readers, decoders, check predicates and check factories. A registry is
an explicit object so tests can build an isolated one, while
:func:`lib_config_pipeline.core.default_registry` offers the process-wide
instance bootstrap code normally uses.

Contents
--------
* :class:`RegistryKind` – the four entry flavours.
* :class:`Registry` – lock-guarded ``register`` / ``lookup`` plus typed helpers.

Concurrency
-----------
All maps are guarded by one re-entrant lock, so registering an extension
late in the process lifetime is safe even while routing code performs lookups
from other threads.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable

from ..observability import log_debug
from .ports import CheckFactory, CheckPredicate, Decoder, SourceReader

DEFAULT_READER = "default"


class RegistryKind(str, Enum):
    """Flavours of registry entries."""

    READER = "reader"
    DECODER = "decoder"
    CHECK = "check"
    CHECK_FACTORY = "check_factory"


class Registry:
    """Thread-safe name → function mapping for every registry flavour.

    Examples
    --------
    >>> registry = Registry()
    >>> registry.register(RegistryKind.CHECK, "even", lambda arg: arg.isdigit() and int(arg) % 2 == 0)
    >>> registry.check("even")("4")
    True
    >>> registry.check("odd") is None
    True
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: dict[RegistryKind, dict[str, Callable[..., Any]]] = {kind: {} for kind in RegistryKind}

    def register(self, kind: RegistryKind | str, name: str, function: Callable[..., Any]) -> None:
        """Insert or replace the entry *name* of flavour *kind*."""

        resolved = RegistryKind(kind)
        with self._lock:
            self._entries[resolved][name] = function
        log_debug("registry_entry_registered", kind=resolved.value, name=name)

    def lookup(self, kind: RegistryKind | str, name: str) -> Callable[..., Any] | None:
        """Return the entry *name* of flavour *kind* or ``None``."""

        with self._lock:
            return self._entries[RegistryKind(kind)].get(name)

    def names(self, kind: RegistryKind | str) -> list[str]:
        """Return the registered names of flavour *kind*, sorted."""

        with self._lock:
            return sorted(self._entries[RegistryKind(kind)])

    def reader(self, scheme: str | None) -> SourceReader | None:
        """Return the reader for *scheme*, falling back to the ``default`` reader."""

        with self._lock:
            readers = self._entries[RegistryKind.READER]
            if scheme and scheme in readers:
                return readers[scheme]
            return readers.get(DEFAULT_READER)

    def decoder(self, suffix: str) -> Decoder | None:
        """Return the decoder registered for the file *suffix* (``".json"`` ...)."""

        return self.lookup(RegistryKind.DECODER, suffix.lower())

    def check(self, name: str) -> CheckPredicate | None:
        """Return the check predicate registered as *name*."""

        return self.lookup(RegistryKind.CHECK, name)

    def check_factory(self, name: str) -> CheckFactory | None:
        """Return the check factory registered as *name*."""

        return self.lookup(RegistryKind.CHECK_FACTORY, name)

    def new_check(self, name: str, parameter: str) -> CheckPredicate | None:
        """Compile *parameter* with the factory *name*.

        Returns ``None`` when no such factory exists or when the factory rejects
        the parameter; callers decide whether that is fatal.
        """

        factory = self.check_factory(name)
        if factory is None:
            return None
        return factory(parameter)
