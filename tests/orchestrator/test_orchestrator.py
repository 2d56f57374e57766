from __future__ import annotations

import threading

import httpx
import pytest

from warpkeys import orchestrator as orchestrator_module
from warpkeys.engine import Fetcher, Sampler
from warpkeys.engine.exporter import FilesystemError
from warpkeys.orchestrator import Orchestrator


def _orchestrator(config, client, seed: int = 11) -> Orchestrator:
    sampler = Sampler(config.full_limit, config.lite_limit, seed=seed)
    return Orchestrator(config, fetcher=Fetcher(config, client=client), sampler=sampler)


def _lines(path) -> list[str]:
    return path.read_text(encoding="utf-8").split("\n")


def test_every_source_returns_the_same_two_keys(
    sample_global_config, mock_client, page, sources
) -> None:
    config = sample_global_config()
    routes = {url: page("abc-123", "xyz-999") for url in sources}
    with _orchestrator(config, mock_client(routes)) as orchestrator:
        summary = orchestrator.harvest()

    assert summary.found
    assert summary.sources == 4 and summary.succeeded == 4 and summary.failed == 0
    assert summary.collected == 8
    assert summary.unique == 2
    assert sorted(_lines(config.full_path)) == ["abc-123", "xyz-999"]
    assert sorted(_lines(config.lite_path)) == ["abc-123", "xyz-999"]
    assert not config.full_path.read_text(encoding="utf-8").endswith("\n")
    assert summary.written == [config.full_path, config.lite_path]


def test_all_sources_failing_writes_nothing(sample_global_config, mock_client, sources) -> None:
    config = sample_global_config()
    routes = {url: httpx.ConnectError for url in sources}
    with _orchestrator(config, mock_client(routes)) as orchestrator:
        summary = orchestrator.harvest()

    assert not summary.found
    assert summary.failed == 4
    assert set(summary.errors) == set(sources)
    assert summary.written == []
    assert not config.output_dir.exists()


def test_one_large_source_is_capped(sample_global_config, mock_client, page, sources) -> None:
    config = sample_global_config()
    big = [f"key-{index:03d}-Zx" for index in range(120)]
    routes = {url: page() for url in sources}
    routes[sources[2]] = page(*big)
    with _orchestrator(config, mock_client(routes)) as orchestrator:
        summary = orchestrator.harvest()

    full = _lines(config.full_path)
    lite = _lines(config.lite_path)
    assert len(full) == 100 and len(set(full)) == 100
    assert len(lite) == 15 and len(set(lite)) == 15
    assert set(full) <= set(big)
    assert set(lite) <= set(big)
    assert summary.unique == 120


def test_failing_source_does_not_block_others(
    sample_global_config, mock_client, page, sources
) -> None:
    config = sample_global_config()
    routes = {
        sources[0]: 500,
        sources[1]: page("good-1"),
        sources[2]: httpx.ReadTimeout,
        sources[3]: page("good-2", "good-1"),
    }
    with _orchestrator(config, mock_client(routes)) as orchestrator:
        summary = orchestrator.harvest()

    assert summary.succeeded == 2 and summary.failed == 2
    assert sorted(_lines(config.full_path)) == ["good-1", "good-2"]
    assert "received status code 500" in summary.errors[sources[0]]


def test_collect_merges_without_deduplicating(
    sample_global_config, mock_client, page, sources
) -> None:
    config = sample_global_config()
    routes = {url: page("dup-1") for url in sources}
    routes[sources[0]] = page("dup-1", "only-0")
    with _orchestrator(config, mock_client(routes)) as orchestrator:
        merged = orchestrator.collect()
    assert sorted(merged) == ["dup-1", "dup-1", "dup-1", "dup-1", "only-0"]


def test_collect_accepts_explicit_sources(sample_global_config, mock_client, page) -> None:
    config = sample_global_config()
    extra = "https://example.org/keys"
    with _orchestrator(config, mock_client({extra: page("ex-1")})) as orchestrator:
        assert orchestrator.collect([extra]) == ["ex-1"]
        assert orchestrator.collect([]) == []


def test_all_fetches_run_concurrently(sample_global_config, mock_client, page, sources) -> None:
    config = sample_global_config()
    barrier = threading.Barrier(len(sources), timeout=5)
    routes = {url: page(f"k-{index}") for index, url in enumerate(sources)}
    client = mock_client(routes, on_request=lambda _request: barrier.wait())
    with _orchestrator(config, client) as orchestrator:
        merged = orchestrator.collect()
    assert sorted(merged) == ["k-0", "k-1", "k-2", "k-3"]


def test_unwritable_output_raises_filesystem_error(
    sample_global_config, mock_client, page, sources, tmp_path
) -> None:
    blocked = tmp_path / "blocked"
    blocked.write_text("not a directory", encoding="utf-8")
    config = sample_global_config(output_dir=blocked)
    routes = {url: page("abc-123") for url in sources}
    with _orchestrator(config, mock_client(routes)) as orchestrator:
        with pytest.raises(FilesystemError):
            orchestrator.harvest()


def test_custom_filenames_and_limits(sample_global_config, mock_client, page, sources) -> None:
    config = sample_global_config(
        full_filename="all.txt", lite_filename="few.txt", full_limit=3, lite_limit=1
    )
    routes = {url: page(f"{url[-5:]}-1", f"{url[-5:]}-2") for url in sources}
    with _orchestrator(config, mock_client(routes)) as orchestrator:
        orchestrator.harvest()
    assert len(_lines(config.output_dir / "all.txt")) == 3
    assert len(_lines(config.output_dir / "few.txt")) == 1


def test_unexpected_worker_error_only_fails_that_source(
    sample_global_config, mock_client, page, sources, monkeypatch
) -> None:
    real_source_logger = orchestrator_module.source_logger

    def flaky_source_logger(source: str):
        if source == sources[0]:
            raise OSError("cannot open source log")
        return real_source_logger(source)

    monkeypatch.setattr(orchestrator_module, "source_logger", flaky_source_logger)
    config = sample_global_config()
    client = mock_client({url: page("abc-123") for url in sources})
    with _orchestrator(config, client) as orchestrator:
        summary = orchestrator.harvest()

    assert summary.failed == 1
    assert summary.succeeded == len(sources) - 1
    assert "cannot open source log" in summary.errors[sources[0]]
    assert _lines(config.full_path) == ["abc-123"]
