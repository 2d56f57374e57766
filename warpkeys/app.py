"""Typer CLI entrypoint for warpkeys."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigError, ConfigRepository, GlobalConfig, ScheduleConfig, ScheduleType
from .engine.exporter import FilesystemError
from .logging_conf import app_log_path, configure_logging, source_log_path, tail_log
from .orchestrator import HarvestSummary, Orchestrator
from .scheduler import APSchedulerAdapter

app = typer.Typer(
    help="Harvest WARP+ keys from public channels into data/full and data/lite.",
    invoke_without_command=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Inspect run logs.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(log_app, name="log")

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: GlobalConfig
    verbose: bool = False
    quiet: bool = False


def build_state(
    verbose: bool = False,
    quiet: bool = False,
    config_path: Path | None = None,
    proxy: str | None = None,
    output_dir: Path | None = None,
    timeout: float | None = None,
) -> AppState:
    repository = ConfigRepository()
    configure_logging(verbose=verbose)
    config = repository.load_global_config(
        config_path, proxy=proxy, output_dir=output_dir, timeout=timeout
    )
    return AppState(repository=repository, config=config, verbose=verbose, quiet=quiet)


def build_orchestrator(config: GlobalConfig) -> Orchestrator:
    return Orchestrator(config)


def build_scheduler() -> APSchedulerAdapter:
    return APSchedulerAdapter()


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state()
        ctx.obj = state
    return state


# Progress bar only on an interactive terminal.
def _progress_default_enabled() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _render_summary_table(summary: HarvestSummary) -> Table:
    table = Table(title="Harvest result", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Sources fetched", f"{summary.succeeded}/{summary.sources}")
    table.add_row("Sources failed", str(summary.failed))
    table.add_row("Keys collected", str(summary.collected))
    table.add_row("Unique keys", str(summary.unique))
    table.add_row("Full keys", str(len(summary.full)))
    table.add_row("Lite keys", str(len(summary.lite)))
    for path in summary.written:
        table.add_row("Written", str(path))
    return table


def _harvest(state: AppState) -> HarvestSummary:
    progress_flag = _progress_default_enabled() and not state.quiet
    with build_orchestrator(state.config) as orchestrator:
        summary = orchestrator.harvest(progress_enabled=progress_flag)
    for source, reason in summary.errors.items():
        console.print(f"Error fetching keys from {source}: {reason}", style="yellow", markup=False)
    if not summary.found:
        console.print("No keys found.")
        return summary
    console.print("successfully.")
    if not state.quiet:
        console.print(_render_summary_table(summary))
    return summary


def _scheduled_harvest(state: AppState) -> None:
    logger = configure_logging().bind(component="cli")
    try:
        _harvest(state)
    except FilesystemError as exc:
        logger.error("scheduled_harvest_failed", path=str(exc.path), error=exc.reason)
        console.print(f"Error writing keys: {exc}", style="red", markup=False)


@app.callback()
def main(
    ctx: typer.Context,
    proxy: Optional[str] = typer.Option(
        None,
        "--proxy",
        help="HTTP or SOCKS5 proxy URL (e.g. http://proxy.example.com:8080 or socks5://localhost:1080).",
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="YAML or JSON file overriding sources, limits and output paths."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", help="Directory receiving the full and lite files (default: data)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Per-request timeout in seconds (default: 10)."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    quiet: bool = typer.Option(False, "--quiet", help="Only print the outcome line."),
) -> None:
    try:
        ctx.obj = build_state(
            verbose=verbose,
            quiet=quiet,
            config_path=config_path,
            proxy=proxy,
            output_dir=output_dir,
            timeout=timeout,
        )
    except ConfigError as exc:
        configure_logging().error("invalid_configuration", error=str(exc))
        console.print(f"Invalid configuration: {exc}", style="red", markup=False)
        raise typer.Exit(code=1)
    if ctx.invoked_subcommand is not None:
        return
    try:
        _harvest(ctx.obj)
    except FilesystemError as exc:
        configure_logging().error("write_failed", path=str(exc.path), error=exc.reason)
        console.print(f"Error writing keys: {exc}", style="red", markup=False)
        raise typer.Exit(code=1)


@app.command("schedule", help="Run the harvest repeatedly on a cron or interval trigger.")
def schedule(
    ctx: typer.Context,
    cron: Optional[str] = typer.Option(None, "--cron", help="Crontab expression, e.g. '0 */6 * * *'."),
    every: Optional[float] = typer.Option(None, "--every", help="Interval in seconds."),
) -> None:
    state = _get_state(ctx)
    if cron and every:
        raise typer.BadParameter("Use either --cron or --every, not both.")
    try:
        if cron:
            schedule_config = ScheduleConfig(type=ScheduleType.CRON, value=cron)
        elif every is not None:
            schedule_config = ScheduleConfig(type=ScheduleType.INTERVAL, value=every)
        elif state.config.schedule is not None:
            schedule_config = state.config.schedule
        else:
            console.print("No schedule given: pass --cron, --every or a config `schedule` block.", style="red")
            raise typer.Exit(code=1)
        adapter = build_scheduler()
        adapter.schedule_harvest(schedule_config, lambda: _scheduled_harvest(state))
    except (TypeError, ValueError) as exc:
        console.print(f"Invalid schedule: {exc}", style="red", markup=False)
        raise typer.Exit(code=1)
    console.print(
        f"Harvest scheduled ({schedule_config.type.value}: {schedule_config.value}); press Ctrl+C to stop.",
        style="green",
    )
    adapter.start()
    adapter.shutdown()


@log_app.command("show", help="Show the most recent log lines.")
def log_show(
    source: Optional[str] = typer.Option(
        None, "--source", help="Source URL (omit for the application log)."
    ),
    tail: int = typer.Option(100, "--tail", help="Number of lines to show."),
) -> None:
    path = source_log_path(source) if source else app_log_path()
    lines = tail_log(path, tail)
    if not lines:
        console.print("No log entries yet.", style="dim")
        return
    header = f"{'Source log' if source else 'Application log'} · last {len(lines)} lines"
    console.print(header, style="cyan")
    console.print("".join(lines), markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
