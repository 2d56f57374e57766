"""Shared fixtures: isolated home directory, configs and fake HTTP sources."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterator, Mapping

import httpx
import pytest

from warpkeys.config import GlobalConfig

SOURCES = (
    "https://t.me/s/alpha",
    "https://t.me/s/bravo",
    "https://t.me/s/charlie",
    "https://t.me/s/delta",
)


def make_page(*keys: str) -> str:
    """Render a channel-like HTML page carrying ``keys`` inside <code> tags."""

    posts = "\n".join(
        f'<div class="tgme_widget_message_text">New key: <code>{key}</code> enjoy</div>'
        for key in keys
    )
    return f"<html><body>{posts}</body></html>"


def _respond(request: httpx.Request, outcome: Any) -> httpx.Response:
    if isinstance(outcome, type) and issubclass(outcome, Exception):
        raise outcome("simulated failure", request=request)
    if isinstance(outcome, httpx.Response):
        return outcome
    if isinstance(outcome, int):
        return httpx.Response(outcome, text="")
    return httpx.Response(200, text=str(outcome))


@pytest.fixture(autouse=True)
def warpkeys_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("WARPKEYS_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def sample_global_config(tmp_path: Path) -> Callable[..., GlobalConfig]:
    def _builder(**overrides: Any) -> GlobalConfig:
        base: dict[str, Any] = {
            "sources": SOURCES,
            "output_dir": tmp_path / "data",
        }
        base.update(overrides)
        return GlobalConfig(**base)

    return _builder


@pytest.fixture
def mock_client() -> Iterator[Callable[..., httpx.Client]]:
    """Build an ``httpx.Client`` whose responses come from a URL → outcome map.

    An outcome is page text (200), an int status code, a prepared
    ``httpx.Response`` or an ``httpx`` exception class to raise.
    """

    clients: list[httpx.Client] = []

    def _builder(
        routes: Mapping[str, Any],
        on_request: Callable[[httpx.Request], None] | None = None,
    ) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            if on_request is not None:
                on_request(request)
            return _respond(request, routes[str(request.url)])

        client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)
        clients.append(client)
        return client

    yield _builder
    for client in clients:
        client.close()


@pytest.fixture
def page() -> Callable[..., str]:
    return make_page


@pytest.fixture
def sources() -> tuple[str, ...]:
    return SOURCES
