"""Mutable hierarchical property store.

Purpose
-------
Hold the configuration tree that every pipeline stage reads from and writes
into. Keys are dot-separated paths (``server.port``); intermediate levels are
plain ``dict`` objects and leaves are plain Python scalars, lists, or bytes.
The module contains no I/O so it can be shared by every layer.

Contents
--------
* :class:`SourceInfo` – provenance record for a resolved leaf.
* :class:`PropertyStore` – ``Mapping`` over the top-level keys with dotted
  ``get``/``set``, provenance lookups, and typed accessors.
* :func:`split_key` – turn a dotted key into path segments.

System Role
-----------
Created by the caller (or by :func:`lib_config_pipeline.core.resolve_config`)
and handed to each stage. Stages never replace the store, they mutate it, so
later stages win over earlier ones at the leaf level.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Iterator, Sequence, TypedDict

from .errors import ValidationError

_MISSING: Any = object()

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


class SourceInfo(TypedDict):
    """Describe which stage last wrote a key.

    Attributes
    ----------
    layer:
        Stage name (``"file"``, ``"args"``, ``"env"``, ``"mods.docker"`` ...).
    path:
        Source descriptor that produced the value, ``None`` for in-memory
        sources such as arguments and environment variables.
    key:
        Fully qualified dotted key.
    """

    layer: str
    path: str | None
    key: str


def split_key(key: str) -> list[str]:
    """Return the path segments of *key*; the empty key addresses the root.

    Examples
    --------
    >>> split_key("mods.docker.port")
    ['mods', 'docker', 'port']
    >>> split_key("")
    []
    """

    return key.split(".") if key else []


class PropertyStore(Mapping[str, Any]):
    """Mutable configuration tree addressed by dotted keys.

    Why
    ----
    Pipeline stages need one shared, writable structure that downstream
    application code can query with ``get("server.port")`` without walking
    nested dictionaries by hand.

    What
    ----
    Implements the :class:`Mapping` protocol over top-level keys, dotted
    :meth:`get` / :meth:`set`, leaf provenance via :meth:`origin`, and typed
    accessors that raise :class:`ValidationError` instead of guessing.

    Examples
    --------
    >>> store = PropertyStore({"server": {"host": "localhost"}})
    >>> store.set("server.port", "8080", layer="env")
    >>> store.get("server.port")
    '8080'
    >>> store.get_int("server.port")
    8080
    >>> store.origin("server.port")
    {'layer': 'env', 'path': None, 'key': 'server.port'}
    >>> store.get("server.missing", "fallback")
    'fallback'
    """

    def __init__(self, data: Mapping[str, Any] | None = None, *, layer: str = "defaults") -> None:
        self._data: dict[str, Any] = {}
        self._meta: dict[str, SourceInfo] = {}
        for key, value in (data or {}).items():
            self.set_path([key], _clone(value), layer=layer)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PropertyStore({self._data!r})"

    def get(self, key: str, default: Any = None) -> Any:  # type: ignore[override]
        """Resolve dotted *key* and return ``default`` when any segment is missing.

        ``get("")`` returns the live root mapping. Nested containers are
        returned by reference; use :meth:`as_dict` for a detached copy.
        """

        return self.get_path(split_key(key), default)

    def get_path(self, segments: Sequence[str], default: Any = None) -> Any:
        """Resolve pre-split *segments*, useful when a key itself contains dots."""

        current: Any = self._data
        for part in segments:
            if not isinstance(current, Mapping) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key: str, value: Any, *, layer: str = "runtime", path: str | None = None) -> None:
        """Store *value* under dotted *key*, creating intermediate levels.

        A scalar standing where an intermediate level is required gets
        replaced by a fresh mapping. Setting the empty key is rejected because
        the root must stay a mapping.
        """

        segments = split_key(key)
        if not segments:
            raise ValidationError("cannot replace the configuration root")
        self.set_path(segments, value, layer=layer, path=path)

    def set_path(
        self,
        segments: Sequence[str],
        value: Any,
        *,
        layer: str = "runtime",
        path: str | None = None,
    ) -> None:
        """Store *value* at pre-split *segments* and record provenance."""

        if not segments:
            raise ValidationError("cannot replace the configuration root")
        cursor = self._data
        for index, part in enumerate(segments[:-1]):
            # An ancestor holding children is never a leaf.
            self._meta.pop(".".join(segments[: index + 1]), None)
            child = cursor.get(part)
            if not isinstance(child, dict):
                child = {}
                cursor[part] = child
            cursor = child
        dotted = ".".join(segments)
        self._forget_origin(dotted, cursor.get(segments[-1]))
        cursor[segments[-1]] = value
        self._record_origin(dotted, value, layer, path)

    def origin(self, key: str) -> SourceInfo | None:
        """Return provenance for the leaf *key* or ``None`` when unknown."""

        return self._meta.get(key)

    def provenance(self) -> dict[str, SourceInfo]:
        """Return a copy of every recorded provenance entry keyed by dotted key."""

        return {key: SourceInfo(**info) for key, info in self._meta.items()}

    def as_dict(self) -> dict[str, Any]:
        """Return a deep, detached copy of the whole tree."""

        return _clone(self._data)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the tree to JSON; ``bytes`` leaves are rendered as UTF-8 text.

        Examples
        --------
        >>> PropertyStore({"keys": {"configdata": b'{"a":1}'}}).to_json()
        '{"keys":{"configdata":"{\\\\"a\\\\":1}"}}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False, default=_json_default)

    def get_str(self, key: str, default: Any = _MISSING) -> str:
        """Return *key* as text; scalars are stringified, containers rejected."""

        value = self._require(key, default)
        if isinstance(value, str):
            return value
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        raise ValidationError(f"{key} holds {type(value).__name__}, expected text")

    def get_int(self, key: str, default: Any = _MISSING) -> int:
        """Return *key* as ``int``; accepts integer strings and integral floats."""

        value = self._require(key, default)
        if isinstance(value, bool):
            raise ValidationError(f"{key} holds a boolean, expected an integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip(), 10)
            except ValueError as exc:
                raise ValidationError(f"{key}={value!r} is not an integer") from exc
        raise ValidationError(f"{key} holds {type(value).__name__}, expected an integer")

    def get_bool(self, key: str, default: Any = _MISSING) -> bool:
        """Return *key* as ``bool``; understands ``true/false``, ``yes/no``, ``on/off``, ``1/0``."""

        value = self._require(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise ValidationError(f"{key}={value!r} is not a boolean")

    def get_list(self, key: str, default: Any = _MISSING) -> list[Any]:
        """Return *key* as a list copy; tuples are accepted, everything else rejected."""

        value = self._require(key, default)
        if isinstance(value, (list, tuple)):
            return list(value)
        raise ValidationError(f"{key} holds {type(value).__name__}, expected a list")

    def get_str_list(self, key: str, default: Any = _MISSING) -> list[str]:
        """Return *key* as a list of strings; a lone string becomes a one-item list."""

        value = self._require(key, default)
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [item if isinstance(item, str) else str(item) for item in value]
        raise ValidationError(f"{key} holds {type(value).__name__}, expected a list of strings")

    def _require(self, key: str, default: Any) -> Any:
        value = self.get(key)
        if value is not None:
            return value
        if default is _MISSING:
            raise ValidationError(f"{key} is not set")
        return default

    def _forget_origin(self, dotted: str, previous: Any) -> None:
        """Drop provenance for *previous*, the subtree being replaced at *dotted*."""

        self._meta.pop(dotted, None)
        if isinstance(previous, Mapping):
            for key, child in previous.items():
                self._forget_origin(f"{dotted}.{key}", child)

    def _record_origin(self, dotted: str, value: Any, layer: str, path: str | None) -> None:
        if isinstance(value, Mapping) and value:
            for key, child in value.items():
                self._record_origin(f"{dotted}.{key}", child, layer, path)
            return
        self._meta[dotted] = SourceInfo(layer=layer, path=path, key=dotted)


def _clone(value: Any) -> Any:
    """Deep-copy mappings and lists; other values are immutable enough to share."""

    if isinstance(value, Mapping):
        return {key: _clone(child) for key, child in value.items()}
    if isinstance(value, list):
        return [_clone(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_clone(item) for item in value)
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)
