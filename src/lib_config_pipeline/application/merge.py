"""Application-layer merge policy.

Purpose
-------
Apply a structured document onto a :class:`PropertyStore` while tracking
provenance. Both the decoder (document onto root) and the mode overlay
(``mods.<mode>`` onto root) use the same policy, so there is exactly one place
that defines how nested values combine.

Contents
    - ``merge_into``: public entry point.
    - ``_merge_mapping`` / ``_merge_branch``: recursive stanzas.

Policy
------
* mapping onto mapping → merged key by key, recursively
* mapping onto anything else → the old value is replaced by the mapping
* empty mapping onto a mapping → no change
* list or scalar → replaces the previous value outright
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy

from ..domain.store import PropertyStore


def merge_into(
    store: PropertyStore,
    incoming: Mapping[str, object],
    *,
    layer: str,
    path: str | None = None,
    prefix: list[str] | None = None,
) -> None:
    """Merge *incoming* into *store* below *prefix* (the root by default).

    Parameters
    ----------
    store:
        Target store, mutated in place.
    incoming:
        Document to apply. It is copied first, so it may safely be a subtree
        of *store* itself.
    layer / path:
        Provenance recorded for every leaf written.

    Examples
    --------
    >>> store = PropertyStore({"db": {"host": "localhost", "port": 5432}})
    >>> merge_into(store, {"db": {"port": 6432}, "debug": True}, layer="mods.dev")
    >>> store.get("db.host"), store.get("db.port"), store.get("debug")
    ('localhost', 6432, True)
    >>> store.origin("db.port")["layer"]
    'mods.dev'
    """

    _merge_mapping(store, deepcopy(dict(incoming)), layer, path, list(prefix or []))


def _merge_mapping(
    store: PropertyStore,
    incoming: Mapping[str, object],
    layer: str,
    path: str | None,
    segments: list[str],
) -> None:
    """Recursively merge ``incoming`` below ``segments``."""

    for key, value in incoming.items():
        target = segments + [str(key)]
        if isinstance(value, Mapping):
            _merge_branch(store, value, layer, path, target)
        else:
            store.set_path(target, value, layer=layer, path=path)


def _merge_branch(
    store: PropertyStore,
    value: Mapping[str, object],
    layer: str,
    path: str | None,
    segments: list[str],
) -> None:
    """Merge mapping ``value`` at ``segments``, replacing non-mapping values first."""

    existing = store.get_path(segments)
    if not isinstance(existing, Mapping):
        store.set_path(segments, {}, layer=layer, path=path)
    if value:
        _merge_mapping(store, value, layer, path, segments)
