"""Local filesystem reader.

Purpose
-------
Implement the :class:`lib_config_pipeline.application.ports.SourceReader`
protocol for bare paths and ``file://`` descriptors.

Key behaviours
--------------
* A literal ``file://`` prefix is stripped; everything else is used as-is.
* The file name must carry an extension, because the decoder is chosen from
  it. The check runs after the read attempt and takes priority over a read
  failure, so ``/etc/app/config`` fails with ``UnknownContentType`` whether or
  not the file exists.
* ``OSError`` during the read becomes :class:`SourceUnreachable`, which the
  resolver recovers from.
"""

from __future__ import annotations

from pathlib import Path

from ...domain.errors import SourceUnreachable, UnknownContentType
from ...observability import log_debug

FILE_PREFIX = "file://"


def local_path(descriptor: str) -> str:
    """Return the filesystem path named by *descriptor*.

    Examples
    --------
    >>> local_path("file:///etc/app/config.json")
    '/etc/app/config.json'
    >>> local_path("config.json")
    'config.json'
    """

    if descriptor.startswith(FILE_PREFIX):
        return descriptor[len(FILE_PREFIX) :]
    return descriptor


def read_file(descriptor: str) -> bytes:
    """Read the local file named by *descriptor*.

    Raises
    ------
    UnknownContentType
        When the last path segment has no ``.``.
    SourceUnreachable
        When the file cannot be read.
    """

    path = local_path(descriptor)
    try:
        payload = Path(path).read_bytes()
    except OSError as exc:
        _require_extension(descriptor, path)
        raise SourceUnreachable(descriptor, exc.strerror or str(exc)) from exc
    _require_extension(descriptor, path)
    log_debug("config_file_read", stage="resolve", path=descriptor, size=len(payload))
    return payload


def _require_extension(descriptor: str, path: str) -> None:
    if "." not in Path(path).name:
        raise UnknownContentType(f"read file config {descriptor}: file has no extension to select a decoder")
