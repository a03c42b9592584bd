"""Transports that fetch raw response bytes for a fully formed URL.

Two implementations are provided:

- HTTPTransport: live requests through an ``httpx.Client``
- FixtureTransport: canned bodies keyed by exact URL, for deterministic tests
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Mapping, Optional, Tuple, Union

import httpx

from .exceptions import TransportError
from .logger import redact_url

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

FixtureBody = Union[bytes, Tuple[bytes, str]]


@dataclass(frozen=True)
class TransportResponse:
    """A fully read response body and its content type."""

    content: bytes
    content_type: str = ""


class MediaStream:
    """Live byte stream returned by the binary endpoints.

    The caller owns the stream and must close it, either explicitly or by
    using it as a context manager.

    Example:
        >>> with client.download(42) as stream:
        ...     with open("track.flac", "wb") as f:
        ...         for chunk in stream.iter_bytes():
        ...             f.write(chunk)
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        content_type: str = "",
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.content_type = content_type
        self._chunks = iter(chunks)
        self._on_close = on_close
        self.closed = False

    def iter_bytes(self) -> Iterator[bytes]:
        """Yield the remaining body in chunks."""
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        for chunk in self._chunks:
            yield chunk

    def read(self) -> bytes:
        """Read the remaining body into memory."""
        return b"".join(self.iter_bytes())

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class Transport:
    """Interface shared by all transports."""

    def fetch(self, url: str) -> TransportResponse:
        """Return the full response body for url.

        Raises:
            TransportError: If the request could not be completed
        """
        raise NotImplementedError

    def open_stream(self, url: str) -> MediaStream:
        """Return a live stream over the response body for url.

        Raises:
            TransportError: If the request could not be completed
        """
        raise NotImplementedError

    def close(self) -> None:
        pass


class HTTPTransport(Transport):
    """Synchronous HTTP transport backed by ``httpx.Client``.

    The underlying client is safe to share between threads.

    Attributes:
        client: httpx.Client used for all requests
    """

    def __init__(
        self,
        timeout: float = 30.0,
        read_timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize HTTP transport.

        Args:
            timeout: Connect and write timeout in seconds
            read_timeout: Read timeout in seconds (for large responses)
            client: Pre-configured httpx.Client to use instead of a new one
        """
        if client is None:
            client = httpx.Client(
                timeout=httpx.Timeout(
                    connect=timeout,
                    read=read_timeout,
                    write=timeout,
                    pool=5.0,
                ),
                follow_redirects=True,
            )
        self.client = client

    def fetch(self, url: str) -> TransportResponse:
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise TransportError(redact_url(url), f"HTTP {status_code}", status_code) from e
        except httpx.HTTPError as e:
            raise TransportError(redact_url(url), str(e) or type(e).__name__) from e

        return TransportResponse(
            content=response.content,
            content_type=response.headers.get("content-type", ""),
        )

    def open_stream(self, url: str) -> MediaStream:
        request = self.client.build_request("GET", url)
        try:
            response = self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(redact_url(url), str(e) or type(e).__name__) from e

        if response.is_error:
            response.close()
            raise TransportError(
                redact_url(url), f"HTTP {response.status_code}", response.status_code
            )

        return MediaStream(
            self._iter_body(response, url),
            content_type=response.headers.get("content-type", ""),
            on_close=response.close,
        )

    @staticmethod
    def _iter_body(response: httpx.Response, url: str) -> Iterator[bytes]:
        # failures while reading the body surface as TransportError too
        try:
            for chunk in response.iter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            raise TransportError(redact_url(url), str(e) or type(e).__name__) from e

    def close(self) -> None:
        self.client.close()


class FixtureTransport(Transport):
    """Transport answering from a mapping of exact URL to canned body.

    Values are either raw bytes (served as JSON) or a (bytes, content_type)
    pair. Build the keys with the same URL function the client uses so that
    they stay in sync with real request shapes.
    """

    def __init__(self, responses: Mapping[str, FixtureBody]):
        self.responses = dict(responses)

    def _lookup(self, url: str) -> Tuple[bytes, str]:
        try:
            body = self.responses[url]
        except KeyError:
            raise TransportError(redact_url(url), "No mock data") from None
        if isinstance(body, tuple):
            return body
        return body, JSON_CONTENT_TYPE

    def fetch(self, url: str) -> TransportResponse:
        content, content_type = self._lookup(url)
        return TransportResponse(content=content, content_type=content_type)

    def open_stream(self, url: str) -> MediaStream:
        content, content_type = self._lookup(url)
        return MediaStream([content], content_type=content_type)
