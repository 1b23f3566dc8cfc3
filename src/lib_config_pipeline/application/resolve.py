"""Source resolution with ordered fallback.

Purpose
-------
Walk the source descriptors stored at ``keys.config`` and commit to the first
one whose reader succeeds. The raw bytes and the winning descriptor are stored
under ``keys.configdata`` and ``keys.configpath`` for the decoder.

Contents
--------
* :data:`CONFIG_KEY` / :data:`CONFIG_DATA_KEY` / :data:`CONFIG_PATH_KEY` – reserved keys.
* :func:`split_descriptor` – separate the scheme from the rest of a descriptor.
* :func:`resolve_sources` – the fallback loop.
"""

from __future__ import annotations

from ..domain.errors import AllSourcesFailed, ConfigError, SourceUnreachable
from ..domain.store import PropertyStore
from ..observability import log_debug, log_info, make_event
from .ports import SourceReader
from .registry import Registry

CONFIG_KEY = "keys.config"
CONFIG_DATA_KEY = "keys.configdata"
CONFIG_PATH_KEY = "keys.configpath"


def split_descriptor(descriptor: str) -> tuple[str | None, str]:
    """Split *descriptor* at the first ``://`` into ``(scheme, remainder)``.

    Examples
    --------
    >>> split_descriptor("https://cfg.example/app.json")
    ('https', 'cfg.example/app.json')
    >>> split_descriptor("/etc/app/config.json")
    (None, '/etc/app/config.json')
    """

    scheme, separator, remainder = descriptor.partition("://")
    if not separator:
        return None, descriptor
    return scheme, remainder


def resolve_sources(store: PropertyStore, registry: Registry) -> str | None:
    """Read the first reachable source listed at ``keys.config``.

    Why
    ----
    Deployments list several candidate locations (a remote endpoint, then a
    local file) and expect the first one that works to be used.

    What
    ----
    For each descriptor, pick the reader registered for its scheme (or the
    ``default`` reader) and call it. A :class:`SourceUnreachable`, or any
    non-``ConfigError`` exception raised by a reader, is recorded and the next
    descriptor is tried. Other :class:`ConfigError` subclasses such as
    :class:`UnknownContentType` propagate unchanged.

    Returns
    -------
    str | None
        The descriptor that was read, or ``None`` when no sources are listed.

    Raises
    ------
    AllSourcesFailed
        When every descriptor failed; ``errors`` holds each individual failure.
    """

    descriptors = store.get_str_list(CONFIG_KEY, default=[])
    failures: list[SourceUnreachable] = []
    for descriptor in descriptors:
        scheme, _ = split_descriptor(descriptor)
        reader = registry.reader(scheme)
        if reader is None:
            raise ConfigError(f"no reader registered for {descriptor!r} and no default reader available")
        try:
            data = _read(reader, descriptor)
        except SourceUnreachable as exc:
            log_debug("source_failed", **make_event("resolve", descriptor, {"error": str(exc)}))
            failures.append(exc)
            continue
        store.set(CONFIG_DATA_KEY, data, layer="resolve", path=descriptor)
        store.set(CONFIG_PATH_KEY, descriptor, layer="resolve", path=descriptor)
        log_info("source_read", **make_event("resolve", descriptor, {"size": len(data), "skipped": len(failures)}))
        return descriptor
    if failures:
        log_info("sources_exhausted", **make_event("resolve", None, {"attempts": len(failures)}))
        raise AllSourcesFailed(failures)
    return None


def _read(reader: SourceReader, descriptor: str) -> bytes:
    """Call *reader*, turning foreign exceptions into :class:`SourceUnreachable`."""

    try:
        return reader(descriptor)
    except ConfigError:
        raise
    except Exception as exc:
        raise SourceUnreachable(descriptor, f"{type(exc).__name__}: {exc}") from exc
