"""Network reader for ``http://`` and ``https://`` descriptors.

Purpose
-------
Fetch a configuration document with one synchronous ``GET``. There is no
retry inside the reader; falling back to the next descriptor is the
resolver's job.

Contents
--------
* :class:`HTTPReader` – callable reader, optionally bound to an
  ``httpx.Client`` or an explicit timeout.
* :func:`read_http` – the built-in reader using httpx defaults.
"""

from __future__ import annotations

import httpx

from ...domain.errors import SourceUnreachable
from ...observability import log_debug


class HTTPReader:
    """Fetch configuration bytes over HTTP(S).

    Why
    ----
    The default transport settings (httpx's five second timeout, standard
    redirect following) suit a one-shot bootstrap fetch. Callers needing a
    tighter deadline, proxies, or a mock transport construct their own
    instance and register it for the scheme.

    Parameters
    ----------
    client:
        Client used for the request. When omitted a short-lived client is
        created per call.
    timeout:
        Timeout passed to the per-call client; ignored when *client* is given.
    """

    def __init__(self, *, client: httpx.Client | None = None, timeout: float | httpx.Timeout | None = None) -> None:
        self._client = client
        self._timeout = timeout

    def __call__(self, descriptor: str) -> bytes:
        """GET *descriptor* and return the body of a 2xx response.

        Raises
        ------
        SourceUnreachable
            On transport errors and non-2xx responses.
        """

        try:
            if self._client is not None:
                response = self._client.get(descriptor, follow_redirects=True)
            else:
                timeout = self._timeout if self._timeout is not None else httpx.Timeout(5.0)
                with httpx.Client(timeout=timeout, follow_redirects=True) as client:
                    response = client.get(descriptor)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SourceUnreachable(descriptor, f"{type(exc).__name__}: {exc}") from exc
        if not response.is_success:
            raise SourceUnreachable(descriptor, f"unexpected status {response.status_code} {response.reason_phrase}")
        payload = response.content
        log_debug("config_http_read", stage="resolve", path=descriptor, status=response.status_code, size=len(payload))
        return payload


read_http = HTTPReader()
"""Reader registered for ``http`` and ``https`` by default."""
