"""Command Line Interface for dirsave."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .app import BackupApplicationService, build_service
from .backup import BackupPolicy, EngineError, JobError
from .cli_ids import JobIdSyntaxError, parse_job_ids
from .config import DEFAULT_CONFIG_PATH, DirSaveConfig, load_config
from .state import BackupStatus, JsonStateWriter, TqdmProgressSink, load_state
from .util import format_size, setup_logging

console = Console()

POLICY_CHOICE = click.Choice([policy.value for policy in BackupPolicy], case_sensitive=False)

STATUS_STYLES = {
    BackupStatus.ACTIVE: "yellow",
    BackupStatus.DONE: "green",
    BackupStatus.ERROR: "red",
    BackupStatus.INACTIVE: "dim",
}


def _get_config(ctx: click.Context) -> DirSaveConfig:
    return ctx.obj["config"]


def _get_service(ctx: click.Context, show_progress: bool = False) -> BackupApplicationService:
    config = _get_config(ctx)
    if not show_progress:
        return build_service(config)

    sink = TqdmProgressSink(JsonStateWriter(config.state_path, load_state(config.state_path)))
    return build_service(config, progress_sink=sink)


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help=f"Configuration file path (default: {DEFAULT_CONFIG_PATH})")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[Path]):
    """dirsave - named directory backup jobs."""
    ctx.ensure_object(dict)
    config = load_config(config_path)
    setup_logging(level="DEBUG" if verbose else config.log_level, log_file=config.resolve_log_file())
    ctx.obj["config"] = config


@cli.group()
def job():
    """Backup job management commands."""
    pass


@job.command("add")
@click.argument("name")
@click.argument("source")
@click.argument("destination")
@click.option("--type", "-t", "policy", type=POLICY_CHOICE, default=BackupPolicy.COMPLETE.value,
              show_default=True, help="Backup type")
@click.pass_context
def job_add(ctx: click.Context, name: str, source: str, destination: str, policy: str):
    """Create a backup job."""
    try:
        created = _get_service(ctx).create_job(name, source, destination, BackupPolicy(policy.lower()))
    except (JobError, ValueError) as e:
        _fail(f"Cannot create job: {e}")
        return

    console.print(f"[bold green]Job created:[/bold green] {created.describe()}")


@job.command("list")
@click.pass_context
def job_list(ctx: click.Context):
    """List backup jobs."""
    jobs = _get_service(ctx).list_jobs()

    if not jobs:
        console.print("[yellow]No backup jobs defined[/yellow]")
        return

    table = Table(title="Backup Jobs")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Source", style="white")
    table.add_column("Destination", style="white")
    table.add_column("Type", style="white")

    for backup_job in jobs:
        table.add_row(
            str(backup_job.id),
            backup_job.name,
            backup_job.source,
            backup_job.destination,
            backup_job.policy.value,
        )

    console.print(table)


@job.command("remove")
@click.argument("job_id", type=int)
@click.pass_context
def job_remove(ctx: click.Context, job_id: int):
    """Delete a backup job."""
    try:
        _get_service(ctx).remove_job(job_id)
    except JobError as e:
        _fail(str(e))
        return

    console.print(f"[green]Job {job_id} removed[/green]")


@job.command("update")
@click.argument("job_id", type=int)
@click.option("--name", help="New job name")
@click.option("--source", help="New source directory")
@click.option("--destination", help="New destination directory")
@click.option("--type", "-t", "policy", type=POLICY_CHOICE, help="New backup type")
@click.pass_context
def job_update(ctx: click.Context, job_id: int, name: Optional[str], source: Optional[str],
               destination: Optional[str], policy: Optional[str]):
    """Change fields of an existing backup job."""
    service = _get_service(ctx)
    try:
        current = service.get_job(job_id)
        fields = current.model_dump()
        if name is not None:
            fields["name"] = name
        if source is not None:
            fields["source"] = source
        if destination is not None:
            fields["destination"] = destination
        if policy is not None:
            fields["policy"] = BackupPolicy(policy.lower())

        updated = service.update_job(type(current)(**fields))
    except (JobError, ValueError) as e:
        _fail(f"Cannot update job: {e}")
        return

    console.print(f"[bold green]Job updated:[/bold green] {updated.describe()}")


@cli.command("run")
@click.argument("job_ids", required=False)
@click.option("--all", "run_all", is_flag=True, help="Run every defined job")
@click.option("--no-progress", is_flag=True, help="Do not show a progress bar")
@click.pass_context
def run(ctx: click.Context, job_ids: Optional[str], run_all: bool, no_progress: bool):
    """Run backup jobs: JOB_IDS is 3, 1;3;5 or 1-5."""
    if run_all == bool(job_ids):
        raise click.UsageError("Give either JOB_IDS or --all")

    service = _get_service(ctx, show_progress=not no_progress)

    try:
        if run_all:
            jobs = service.run_all_jobs()
        else:
            jobs = service.run_jobs_by_ids(parse_job_ids(job_ids))
    except JobIdSyntaxError as e:
        raise click.BadParameter(str(e), param_hint="JOB_IDS") from e
    except (JobError, EngineError) as e:
        _fail(f"Backup failed: {e}")
        return

    if not jobs:
        console.print("[yellow]No backup jobs defined[/yellow]")
        return

    console.print(f"[bold green]Completed {len(jobs)} backup job(s)[/bold green]")


@cli.command("state")
@click.pass_context
def state(ctx: click.Context):
    """Show the last known state of each job."""
    global_state = load_state(_get_config(ctx).state_path)

    if not global_state.entries:
        console.print("[yellow]No job has run yet[/yellow]")
        return

    table = Table(title=f"Job State (updated {global_state.updated_at:%Y-%m-%d %H:%M:%S} UTC)")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Status", style="white")
    table.add_column("Progress", style="white")
    table.add_column("Files left", style="white")
    table.add_column("Size left", style="white")
    table.add_column("Failed", style="white")
    table.add_column("Last update", style="white")

    for job_id, entry in sorted(global_state.entries.items()):
        style = STATUS_STYLES.get(entry.status, "white")
        table.add_row(
            str(job_id),
            entry.job_name,
            f"[{style}]{entry.status.value}[/{style}]",
            f"{entry.progress_percent}%",
            f"{entry.remaining_files}/{entry.total_files}",
            format_size(entry.remaining_size_bytes),
            str(entry.failed_files),
            f"{entry.timestamp:%Y-%m-%d %H:%M:%S}",
        )

    console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
