"""CLI entry point for the release splitter.

Provides commands:
  - split: Split every oversized file under the release directory into parts
  - candidates: List the files a split would touch, without changing anything
  - backup-path: Show where a file's original would be parked during a split
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from relsplit.config import RunConfiguration, default_config, load_config
from relsplit.constants import DEFAULT_CONFIG_PATH
from relsplit.exceptions import ConfigurationError
from relsplit.orchestrator import SplitOrchestrator
from relsplit.parts import plan_chunks
from relsplit.paths import layout_from_config
from relsplit.scanner import FileScanner

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Split oversized release artifacts into numbered parts for size-limited hosts",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
console = Console()

MERGE_RECIPE = (
    "Rebuild a split file by concatenating its parts in order:\n"
    "  POSIX:   cat NAME.part?? > NAME\n"
    "  Windows: copy /b NAME.part01+NAME.part02+... NAME"
)

# Shared option types
DirOption = Annotated[
    Path | None,
    typer.Option("--dir", help="Release directory to scan", resolve_path=True),
]
MaxBytesOption = Annotated[
    int | None,
    typer.Option("--max-bytes", help="Largest file size left unsplit"),
]
ChunkBytesOption = Annotated[
    int | None,
    typer.Option("--chunk-bytes", help="Size of each part (<= --max-bytes)"),
]
BufferBytesOption = Annotated[
    int | None,
    typer.Option("--buffer-bytes", help="Read buffer size while splitting"),
]
RepoRootOption = Annotated[
    Path | None,
    typer.Option("--repo-root", help="Repository root (default: current directory)", resolve_path=True),
]
BackupRootOption = Annotated[
    Path | None,
    typer.Option("--backup-root", help="Where originals are parked (default: <repo-root>/backup)", resolve_path=True),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help=f"Split config JSON (default: {DEFAULT_CONFIG_PATH} if present)"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log engine activity"),
]


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    pkg_logger = logging.getLogger("relsplit")
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setLevel(logging.DEBUG)
        pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG)


def _build_config(
    *,
    root_dir: Path | None,
    max_bytes: int | None,
    chunk_bytes: int | None,
    buffer_bytes: int | None,
    repo_root: Path | None,
    backup_root: Path | None,
    config_path: Path | None,
    dry_run: bool = False,
) -> RunConfiguration:
    """Merge defaults < config file < CLI flags, then validate."""
    config = default_config(repo_root)

    if config_path is not None and not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")
    file_path = config_path or (config.repo_root / DEFAULT_CONFIG_PATH)
    if file_path.exists():
        try:
            config = load_config(file_path, base=config)
        except ValueError as e:
            raise ConfigurationError(f"Failed to load config {file_path}: {e}") from e
        logger.debug("Loaded config from %s", file_path)

    if repo_root is not None and repo_root != config.repo_root:
        config = config.with_overrides(repo_root=repo_root, backup_root=backup_root)

    config = config.with_overrides(
        root_dir=root_dir,
        max_bytes=max_bytes,
        chunk_bytes=chunk_bytes,
        buffer_bytes=buffer_bytes,
        backup_root=backup_root,
        dry_run=dry_run or None,
    )
    return config.validate()


def _display(path: Path, root: Path) -> str:
    """Path relative to the release dir when it lies inside it."""
    try:
        return str(path.relative_to(root.absolute()))
    except ValueError:
        return str(path)


def _config_or_exit(**kwargs: object) -> RunConfiguration:
    try:
        return _build_config(**kwargs)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


@app.command()
def split(
    root_dir: DirOption = None,
    max_bytes: MaxBytesOption = None,
    chunk_bytes: ChunkBytesOption = None,
    buffer_bytes: BufferBytesOption = None,
    repo_root: RepoRootOption = None,
    backup_root: BackupRootOption = None,
    config_path: ConfigOption = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Report planned actions without touching any file"),
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Split every file above --max-bytes into --chunk-bytes parts."""
    _configure_logging(verbose)
    config = _config_or_exit(
        root_dir=root_dir,
        max_bytes=max_bytes,
        chunk_bytes=chunk_bytes,
        buffer_bytes=buffer_bytes,
        repo_root=repo_root,
        backup_root=backup_root,
        config_path=config_path,
        dry_run=dry_run,
    )

    console.print(
        Panel(
            f"Release dir: [bold]{escape(str(config.root_dir))}[/bold]\n"
            f"Backup root: [bold]{escape(str(config.backup_root))}[/bold]",
            title="Release Splitter" + (" (dry run)" if config.dry_run else ""),
        )
    )

    orchestrator = SplitOrchestrator(config, console)
    try:
        summary = orchestrator.run()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    except OSError as e:
        console.print(f"[red]Split failed:[/red] {escape(str(e))}")
        console.print("[dim]Originals already moved are in the backup tree; re-run to retry.[/dim]")
        raise typer.Exit(code=1)

    if not summary.results:
        return

    table = Table(title="Split Summary" + (" (dry run)" if summary.dry_run else ""))
    table.add_column("File", style="bold")
    table.add_column("Size", justify="right")
    table.add_column("Parts", justify="right")
    table.add_column("Stale parts removed", justify="right")
    for result in summary.results:
        table.add_row(
            escape(_display(result.candidate.path, config.root_dir)),
            f"{result.candidate.size}",
            f"[green]{result.part_count}[/green]",
            str(len(result.removed_parts)),
        )
    console.print(table)
    console.print(f"[dim]{escape(MERGE_RECIPE)}[/dim]")


@app.command()
def candidates(
    root_dir: DirOption = None,
    max_bytes: MaxBytesOption = None,
    chunk_bytes: ChunkBytesOption = None,
    repo_root: RepoRootOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List files a split would touch. Never changes anything."""
    _configure_logging(verbose)
    config = _config_or_exit(
        root_dir=root_dir,
        max_bytes=max_bytes,
        chunk_bytes=chunk_bytes,
        buffer_bytes=None,
        repo_root=repo_root,
        backup_root=None,
        config_path=config_path,
    )

    if not config.root_dir.is_dir():
        console.print(
            f"[yellow]Release dir not found:[/yellow] {escape(str(config.root_dir))}"
        )
        return

    found = FileScanner(config).scan()
    if not found:
        console.print(f"[green]No files exceed {config.max_bytes} bytes[/green]")
        return

    table = Table(title=f"Files > {config.max_bytes} bytes")
    table.add_column("File", style="bold")
    table.add_column("Size", justify="right")
    table.add_column("Parts", justify="right")
    for candidate in found:
        count = len(plan_chunks(candidate.size, config.chunk_bytes))
        style = "red" if count > config.max_parts else "green"
        table.add_row(
            escape(_display(candidate.path, config.root_dir)),
            str(candidate.size),
            f"[{style}]{count}[/{style}]",
        )
    console.print(table)


@app.command("backup-path")
def backup_path(
    file: Annotated[Path, typer.Argument(help="File to locate a backup for", resolve_path=True)],
    repo_root: RepoRootOption = None,
    backup_root: BackupRootOption = None,
) -> None:
    """Print where FILE's original would be parked during a split."""
    config = default_config(repo_root).with_overrides(backup_root=backup_root)
    location = layout_from_config(config).location_for(file)
    typer.echo(str(location))


if __name__ == "__main__":
    app()
