"""Run orchestrator wiring together fetching, fan-in, dedup, sampling and export."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from .config import GlobalConfig
from .engine import (
    FetchError,
    FetchResult,
    Fetcher,
    ResultCollector,
    Sampler,
    ThreadPoolManager,
    dedupe,
)
from .engine.exporter import BaseExporter, KeyFileExporter
from .logging_conf import configure_logging, source_logger
from .ui import ProgressReporter


@dataclass(slots=True)
class HarvestSummary:
    """What one run fetched, kept and wrote."""

    sources: int
    succeeded: int
    failed: int
    collected: int
    unique: int
    full: list[str] = field(default_factory=list)
    lite: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.unique > 0


class Orchestrator:
    """Central coordinator for a single harvest run."""

    def __init__(
        self,
        global_config: GlobalConfig,
        fetcher: Fetcher | None = None,
        thread_pool: ThreadPoolManager | None = None,
        sampler: Sampler | None = None,
        exporter: BaseExporter | None = None,
    ) -> None:
        self.global_config = global_config
        self.fetcher = fetcher or Fetcher(global_config)
        self.thread_pool = thread_pool or ThreadPoolManager()
        self.sampler = sampler or Sampler(global_config.full_limit, global_config.lite_limit)
        self.exporter = exporter or KeyFileExporter(global_config.output_dir)
        self.logger = configure_logging().bind(component="orchestrator")

    def close(self) -> None:
        self.thread_pool.shutdown()
        self.fetcher.close()

    def __enter__(self) -> "Orchestrator":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    def collect(
        self,
        sources: Iterable[str] | None = None,
        progress: ProgressReporter | None = None,
    ) -> list[str]:
        """Fetch every source concurrently and return the merged keys.

        Duplicates are kept and the order interleaves sources arbitrarily.
        Failed sources contribute nothing.
        """

        merged, _results = self._fan_in(sources, progress)
        return merged

    def _fan_in(
        self,
        sources: Iterable[str] | None,
        progress: ProgressReporter | None,
    ) -> tuple[list[str], list[FetchResult]]:
        targets: Sequence[str] = tuple(self.global_config.sources if sources is None else sources)
        if not targets:
            return [], []
        collector = ResultCollector(len(targets))

        def _run(source: str) -> FetchResult:
            try:
                result = self.fetcher.fetch_result(source, logger=source_logger(source))
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("source_failed", url=source, error=str(exc))
                result = FetchResult(source=source, error=FetchError(source, str(exc)))
            if result.ok:
                collector.put(result.keys)
            if progress is not None:
                progress.advance(success=result.ok, current_url=source)
            return result

        try:
            futures = self.thread_pool.fan_out(_run, targets)
            self.thread_pool.wait_all(futures)
            results = [future.result() for future in futures]
        finally:
            self.thread_pool.shutdown()
        batches = len(collector)
        merged = collector.drain()
        self.logger.info(
            "collect_finished",
            sources=len(targets),
            batches=batches,
            failed=sum(1 for result in results if not result.ok),
            keys=len(merged),
        )
        return merged, results

    def harvest(self, progress_enabled: bool = False) -> HarvestSummary:
        """Run the full pipeline and write the artifacts when keys were found."""

        sources = self.global_config.sources
        progress = ProgressReporter(enabled=progress_enabled)
        progress.start(len(sources))
        try:
            merged, results = self._fan_in(sources, progress)
        finally:
            progress.close()

        unique = dedupe(merged)
        summary = HarvestSummary(
            sources=len(sources),
            succeeded=sum(1 for result in results if result.ok),
            failed=sum(1 for result in results if not result.ok),
            collected=len(merged),
            unique=len(unique),
            errors={
                result.source: str(result.error.reason)
                for result in results
                if result.error is not None
            },
        )
        if not unique:
            self.logger.info("no_keys_found", sources=summary.sources, failed=summary.failed)
            return summary

        sample = self.sampler.sample(unique)
        summary.full = sample.full
        summary.lite = sample.lite
        summary.written = self.exporter.export_many(
            {
                self.global_config.full_filename: sample.full,
                self.global_config.lite_filename: sample.lite,
            }
        )
        self.logger.info(
            "artifacts_written",
            full=len(sample.full),
            lite=len(sample.lite),
            paths=[str(path) for path in summary.written],
        )
        return summary


__all__ = ["HarvestSummary", "Orchestrator"]
