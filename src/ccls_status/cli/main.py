"""CLI entry point for ccls-status."""

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.text import Text

from .. import __version__
from ..core.config import ConfigError, ConfigManager
from ..project.workspace import Workspace
from ..runtime.logging import bootstrap_logging
from ..status.models import InfoResponse
from ..status.render import info_snapshot
from ..status.target import TargetResolver
from ..util.log import Log

app = typer.Typer(
    name="ccls-status",
    help="Inspect ccls index status and the active compilation database target",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)
log = Log.create({"service": "cli"})


@dataclass
class CliState:
    config_files: List[str] = field(default_factory=list)
    log_level: Optional[str] = None
    log_format: Optional[str] = None
    print_logs: bool = False


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"ccls-status {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config: Optional[List[Path]] = typer.Option(
        None,
        "--config",
        "-c",
        help="Extra config file, merged over workspace config",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="debug, info, warn or error"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="kv, json or pretty"),
    print_logs: bool = typer.Option(False, "--print-logs", help="Write logs to stderr instead of a file"),
):
    """Inspect ccls index status."""
    ctx.obj = CliState(
        config_files=[str(path) for path in config or []],
        log_level=log_level,
        log_format=log_format,
        print_logs=print_logs,
    )


def _setup(ctx: typer.Context, directory: str, overrides: Dict[str, Any]) -> TargetResolver:
    state: CliState = ctx.obj or CliState()
    workspace = Workspace.discover(directory)
    manager = ConfigManager(
        workspace.first or directory,
        files=state.config_files,
        overrides=overrides,
    )
    try:
        cfg = manager.get()
        bootstrap_logging(
            cfg,
            level=state.log_level,
            format=state.log_format,
            console=state.print_logs or None,
            file=False if state.print_logs else None,
        )
    except (ConfigError, ValueError) as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    log.debug("cli configured", {"workspace": workspace.first, "sources": manager.sources()})
    return TargetResolver(manager, workspace)


def _db_dir_overrides(db_dir: Optional[str]) -> Dict[str, Any]:
    if not db_dir:
        return {}
    return {"ccls": {"misc": {"compilationDatabaseDirectory": db_dir}}}


@app.command()
def target(
    ctx: typer.Context,
    workspace: str = typer.Option(".", "--workspace", "-w", help="Workspace directory"),
    db_dir: Optional[str] = typer.Option(
        None,
        "--db-dir",
        help="Compilation database directory (overrides ccls.misc.compilationDatabaseDirectory)",
    ),
):
    """Print the label of the active compilation database."""
    resolver = _setup(ctx, workspace, _db_dir_overrides(db_dir))
    typer.echo(resolver.resolve_label())
    Log.close()


@app.command()
def render(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Saved $ccls/info response, or - for stdin"),
    workspace: str = typer.Option(".", "--workspace", "-w", help="Workspace directory"),
    db_dir: Optional[str] = typer.Option(None, "--db-dir", help="Compilation database directory"),
):
    """Render the status line and tooltip for a saved info response."""
    resolver = _setup(ctx, workspace, _db_dir_overrides(db_dir))

    try:
        if file == "-":
            payload = json.load(sys.stdin)
        else:
            payload = json.loads(Path(file).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        err_console.print(f"[red]Cannot read info response: {e}[/red]")
        raise typer.Exit(1)

    if not isinstance(payload, dict):
        err_console.print("[red]Info response must be a JSON object[/red]")
        raise typer.Exit(1)

    snapshot = info_snapshot(InfoResponse.model_validate(payload), resolver.resolve_label())
    console.print(Text(snapshot.title, style="bold"))
    console.print(Text(snapshot.detail))
    Log.close()


if __name__ == "__main__":
    app()
