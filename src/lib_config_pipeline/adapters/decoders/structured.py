"""Structured document decoders.

Purpose
-------
Convert the raw bytes fetched by a reader into Python mappings that the merge
policy understands. Decoders are small wrappers around ``json``, ``tomllib``
and ``yaml.safe_load`` so error handling and logging live in one place.

Contents
--------
* :class:`BaseDecoder` – shared mapping validation.
* :class:`JSONDecoder` – the fallback format.
* :class:`TOMLDecoder` – TOML via :mod:`tomllib` (``tomli`` before 3.11).
* :class:`YAMLDecoder` – YAML via PyYAML.

System Role
-----------
Registered by suffix in the registry and invoked by
:func:`lib_config_pipeline.application.decode.decode_into`.
"""

from __future__ import annotations

import json
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...domain.errors import DecodeFailure
from ...observability import log_debug, log_error


class BaseDecoder:
    """Common utilities shared by the structured decoders."""

    format_name = "unknown"

    @classmethod
    def _ensure_mapping(cls, data: object) -> Mapping[str, object]:
        """Ensure *data* is a mapping, otherwise raise ``DecodeFailure``.

        Examples
        --------
        >>> BaseDecoder._ensure_mapping({"key": 1})
        {'key': 1}
        >>> BaseDecoder._ensure_mapping([1, 2])
        Traceback (most recent call last):
        ...
        lib_config_pipeline.domain.errors.DecodeFailure: unknown document must be an object, got list
        """

        if not isinstance(data, Mapping):
            raise DecodeFailure(f"{cls.format_name} document must be an object, got {type(data).__name__}")
        return data

    def _failed(self, exc: Exception) -> DecodeFailure:
        log_error("config_decode_failed", stage="decode", path=None, format=self.format_name, error=str(exc))
        return DecodeFailure(f"invalid {self.format_name}: {exc}")

    def _decoded(self, data: object) -> Mapping[str, object]:
        result = self._ensure_mapping(data)
        log_debug("config_document_parsed", stage="decode", path=None, format=self.format_name, keys=len(result))
        return result


class JSONDecoder(BaseDecoder):
    """Decode JSON objects.

    Examples
    --------
    >>> JSONDecoder()(b'{"server": {"port": 8080}}')["server"]["port"]
    8080
    """

    format_name = "json"

    def __call__(self, payload: bytes) -> Mapping[str, object]:
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._failed(exc) from exc
        return self._decoded(data)


class TOMLDecoder(BaseDecoder):
    """Decode TOML documents.

    Examples
    --------
    >>> TOMLDecoder()(b'[server]\\nport = 8080\\n')["server"]["port"]
    8080
    """

    format_name = "toml"

    def __call__(self, payload: bytes) -> Mapping[str, object]:
        try:
            data = tomllib.loads(payload.decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._failed(exc) from exc
        return self._decoded(data)


class YAMLDecoder(BaseDecoder):
    """Decode YAML documents; an empty document decodes to an empty mapping.

    Examples
    --------
    >>> YAMLDecoder()(b"server:\\n  port: 8080\\n")["server"]["port"]
    8080
    >>> YAMLDecoder()(b"# nothing here\\n")
    {}
    """

    format_name = "yaml"

    def __call__(self, payload: bytes) -> Mapping[str, object]:
        try:
            data = yaml.safe_load(payload)
        except yaml.YAMLError as exc:
            raise self._failed(exc) from exc
        if data is None:
            data = {}
        return self._decoded(data)
