"""Read-only command-line tools for inspecting rotation configuration.

Configuration is edited by the host; these commands only load, validate and
explain it.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from log_rotator.rotation import (
    ConfigStoreError,
    Decision,
    RotationConfig,
    YamlConfigStore,
    hours_until_due,
    resolve,
    should_run,
)
from log_rotator.rotation.task import now_epoch_millis

app = typer.Typer(help="Build log rotator - inspect rotation configuration")
console = Console()


def _config_path(path: Optional[Path]) -> Path:
    """Return the explicit path, or the one from settings."""
    if path is not None:
        return path
    from log_rotator.config import get_settings  # noqa: PLC0415

    return get_settings().rotation_config_path


def _load(path: Optional[Path]) -> RotationConfig:
    """Load a config file, exiting with status 1 when it is invalid."""
    config_path = _config_path(path)
    try:
        return YamlConfigStore(config_path).load()
    except ConfigStoreError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _format_epoch_millis(epoch_millis: int) -> str:
    if epoch_millis <= 0:
        return "never"
    return datetime.fromtimestamp(epoch_millis / 1000, tz=timezone.utc).isoformat()


@app.command()
def validate(
    path: Optional[Path] = typer.Argument(None, help="Rotation config file (YAML)"),
) -> None:
    """Validate a rotation config file and print its policies and rules."""
    config = _load(path)

    console.print(f"[green]Valid rotation configuration:[/green] {_config_path(path)}")
    console.print(f"Rotation enabled: {config.rotation_enabled}")
    console.print(f"Update interval: {config.update_interval_hours}h")
    console.print(
        f"Jobs with own discarder: {config.policy_for_jobs_with_own_discarder.value}"
    )
    console.print(
        f"Jobs without own discarder: {config.policy_for_jobs_without_own_discarder.value}"
    )

    if not config.global_rules:
        console.print("[dim]No global rules configured.[/dim]")
        return

    table = Table(title=f"Global Rules ({len(config.global_rules)})")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Job Name Pattern", style="green", overflow="fold")
    table.add_column("Discarder", style="blue")
    for index, rule in enumerate(config.global_rules):
        table.add_row(str(index), escape(rule.job_name_pattern), escape(rule.discarder))
    console.print(table)


@app.command()
def status(
    path: Optional[Path] = typer.Argument(None, help="Rotation config file (YAML)"),
) -> None:
    """Show when the last pass ran and whether the next one is due."""
    config = _load(path)
    now = now_epoch_millis()

    console.print(f"Last rotated: {_format_epoch_millis(config.last_rotated_epoch_millis)}")
    remaining = hours_until_due(config, now)
    if remaining is None:
        console.print("[yellow]Periodic rotation is disabled.[/yellow]")
    elif should_run(config, now):
        console.print("[green]A rotation pass is due now.[/green]")
    else:
        console.print(f"Next pass due in {remaining:.2f}h")


@app.command(name="explain")
def explain(
    job_name: str = typer.Argument(..., help="Full name of the job"),
    own: bool = typer.Option(
        False, "--own", help="Treat the job as having its own discarder"
    ),
    path: Optional[Path] = typer.Option(None, "--config", help="Rotation config file (YAML)"),
) -> None:
    """Explain which policy a pass would apply to a job."""
    config = _load(path)
    mode = (
        config.policy_for_jobs_with_own_discarder
        if own
        else config.policy_for_jobs_without_own_discarder
    )
    action = resolve(own, mode, config.global_rules, job_name)
    label = escape(job_name)

    if action.decision is Decision.SKIP:
        console.print(f"{label}: skipped (policy {mode.value})")
    elif action.decision is Decision.APPLY_OWN:
        console.print(f"{label}: job's own discarder")
    elif action.decision is Decision.APPLY_GLOBAL and action.rule_index is not None:
        rule = config.global_rules[action.rule_index]
        console.print(
            f"{label}: global rule {action.rule_index} "
            f"({escape(repr(rule.job_name_pattern))} -> {escape(rule.discarder)})"
        )
    elif action.decision is Decision.APPLY_GLOBAL:
        console.print(f"{label}: no global rule matches; logs are kept")
    else:
        console.print(f"[red]{label}: unsupported policy {mode.value}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
