"""Decode the resolved configuration bytes into the store root."""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import urlsplit

from ..domain.errors import ConfigError
from ..domain.store import PropertyStore
from ..observability import log_info, make_event
from .merge import merge_into
from .registry import Registry
from .resolve import CONFIG_DATA_KEY, CONFIG_PATH_KEY, split_descriptor

FALLBACK_SUFFIX = ".json"


def descriptor_suffix(descriptor: str | None) -> str:
    """Return the lower-case file suffix of *descriptor*, ignoring URL query and fragment.

    Examples
    --------
    >>> descriptor_suffix("https://cfg.example/app.YAML?rev=3")
    '.yaml'
    >>> descriptor_suffix("file:///etc/app/config.toml")
    '.toml'
    >>> descriptor_suffix(None)
    ''
    """

    if not descriptor:
        return ""
    scheme, remainder = split_descriptor(descriptor)
    path = urlsplit(descriptor).path if scheme in ("http", "https") else remainder
    return PurePosixPath(path).suffix.lower()


def decode_into(store: PropertyStore, registry: Registry) -> bool:
    """Parse ``keys.configdata`` and merge its top-level fields into the root.

    The decoder is picked by the suffix of ``keys.configpath``; unknown or
    missing suffixes fall back to JSON. A missing payload is a no-op and
    returns ``False``. Parse errors surface as
    :class:`~lib_config_pipeline.domain.errors.DecodeFailure` from the decoder.
    """

    data = store.get(CONFIG_DATA_KEY)
    if data is None:
        return False
    if isinstance(data, str):
        data = data.encode("utf-8")
    descriptor = store.get(CONFIG_PATH_KEY)
    suffix = descriptor_suffix(descriptor)
    decoder = registry.decoder(suffix) or registry.decoder(FALLBACK_SUFFIX)
    if decoder is None:
        raise ConfigError(f"no decoder registered for {suffix or 'unknown'} content")
    document = decoder(data)
    merge_into(store, document, layer="file", path=descriptor)
    log_info("config_decoded", **make_event("decode", descriptor, {"keys": len(document)}))
    return True
