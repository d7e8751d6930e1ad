"""HTTP transport — a thin wrapper over a ``requests.Session``.

One attempt per request, no retries. Every request carries a bounded
timeout so no fetch blocks indefinitely. Transport errors surface as
``requests.RequestException``; callers translate them into pipeline
errors that name the offending URL.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import requests

from bottlefetch import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"bottlefetch/{__version__}"


class HttpClient:
    """Single-attempt GET client with a fixed timeout.

    Parameters
    ----------
    timeout:
        Seconds to wait for connect and for each read.
    session:
        Optional pre-built session (tests inject one; the default is fresh).
    chunk_size:
        Chunk size for streamed downloads.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        *,
        session: requests.Session | None = None,
        chunk_size: int = 1024 * 1024,
    ) -> None:
        self.timeout = timeout
        self.chunk_size = chunk_size
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self._session = session

    def get_text(self, url: str) -> str:
        """GET ``url`` and return the body as text; raises on non-2xx."""
        logger.debug("GET %s", url)
        response = self._session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    def stream(self, url: str) -> Iterator[bytes]:
        """GET ``url`` and yield the body in chunks; raises on non-2xx."""
        logger.debug("GET %s (streaming)", url)
        with self._session.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if chunk:
                    yield chunk

    def close(self) -> None:
        self._session.close()
