"""HTTP fetching of key sources."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import httpx
import structlog

from ..config import GlobalConfig
from .parser import KeyParser


class FetchError(Exception):
    """A single source could not produce content."""

    kind = "fetch"

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class NetworkError(FetchError):
    """Connection, DNS, TLS, proxy or timeout failure."""

    kind = "network"


class StatusError(FetchError):
    """The source answered with anything other than 200 OK."""

    kind = "status"

    def __init__(self, source: str, status_code: int) -> None:
        super().__init__(source, f"received status code {status_code}")
        self.status_code = status_code


class BodyError(FetchError):
    """The response body could not be read to completion."""

    kind = "body"


@dataclass(slots=True)
class FetchResult:
    """Outcome of fetching one source: keys on success, the error otherwise."""

    source: str
    keys: list[str] = field(default_factory=list)
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_client(config: GlobalConfig) -> httpx.Client:
    """Create the shared client; SOCKS proxies need the ``httpx[socks]`` extra."""

    return httpx.Client(
        proxy=config.proxy,
        timeout=httpx.Timeout(config.timeout),
        follow_redirects=True,
    )


class Fetcher:
    """Retrieve a source page and hand its text to the key parser."""

    def __init__(
        self,
        global_config: GlobalConfig,
        client: httpx.Client | None = None,
        parser: KeyParser | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.global_config = global_config
        self.timeout = global_config.timeout
        self.parser = parser or KeyParser()
        self.logger = logger or structlog.get_logger("warpkeys.fetcher")
        self._client = client or build_client(global_config)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def fetch(self, source: str, timeout: float | None = None) -> list[str]:
        """Fetch ``source`` once and return the keys found in its body.

        ``timeout`` bounds the whole call: connecting, redirects and reading
        the body. Raises :class:`NetworkError`, :class:`StatusError` or
        :class:`BodyError`. There is no retry.
        """

        effective_timeout = timeout or self.timeout
        deadline = time.monotonic() + effective_timeout
        try:
            with self._client.stream("GET", source, timeout=effective_timeout) as response:
                if response.status_code != httpx.codes.OK:
                    raise StatusError(source, response.status_code)
                text = self._read_body(source, response, deadline)
        except FetchError:
            raise
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(source, f"request failed: {exc}") from exc
        return self.parser.extract(text)

    @staticmethod
    def _read_body(source: str, response: httpx.Response, deadline: float) -> str:
        chunks: list[bytes] = []
        try:
            if time.monotonic() > deadline:
                raise NetworkError(source, "timed out")
            for chunk in response.iter_bytes():
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise NetworkError(source, "timed out reading body")
        except httpx.TimeoutException as exc:
            raise NetworkError(source, f"timed out reading body: {exc}") from exc
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise BodyError(source, f"failed to read response body: {exc}") from exc
        return b"".join(chunks).decode(response.charset_encoding or "utf-8", errors="replace")

    def fetch_result(
        self, source: str, logger: structlog.BoundLogger | None = None
    ) -> FetchResult:
        log = logger or self.logger.bind(source=source)
        log.debug("fetch_started", url=source)
        try:
            keys = self.fetch(source)
        except FetchError as exc:
            log.warning("fetch_failed", url=source, kind=exc.kind, error=exc.reason)
            return FetchResult(source=source, error=exc)
        log.info("fetch_succeeded", url=source, keys=len(keys))
        return FetchResult(source=source, keys=keys)


__all__ = [
    "BodyError",
    "FetchError",
    "FetchResult",
    "Fetcher",
    "NetworkError",
    "StatusError",
    "build_client",
]
