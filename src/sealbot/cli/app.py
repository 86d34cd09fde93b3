"""Main CLI application."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer
from rich.console import Console

from sealbot import __version__
from sealbot.core.models.workflow import WorkflowKind

if TYPE_CHECKING:
    from sealbot.core.models.config import Config

# Create main app
app = typer.Typer(
    name="sealbot",
    help="Sui Seal testnet task automation",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]SealBot[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """SealBot - allowlist and subscription workflows for many wallets."""
    pass


def load_config(file: Path | None) -> Config:
    """Load configuration from a YAML file, or from the environment only."""
    from sealbot.core.models.config import Config

    if file:
        try:
            return Config.from_yaml(file)
        except Exception as e:
            console.print(f"[red]Failed to load config {file}: {e}[/red]")
            raise typer.Exit(1)
    return Config()


@app.command()
def run(
    wallets: Annotated[
        Path | None,
        typer.Option("--wallets", "-w", help="Wallet credentials file (one per line)"),
    ] = None,
    proxies: Annotated[
        Path | None,
        typer.Option("--proxies", "-p", help="Proxy list file"),
    ] = None,
    workflow: Annotated[
        WorkflowKind | None,
        typer.Option("--workflow", help="Workflow to run for every wallet"),
    ] = None,
    repetitions: Annotated[
        int | None,
        typer.Option("--repetitions", "-n", min=1, help="Repetitions per wallet"),
    ] = None,
    delay: Annotated[
        float | None,
        typer.Option("--delay", "-d", min=0, help="Seconds between repetitions"),
    ] = None,
    image: Annotated[
        str | None,
        typer.Option("--image", "-i", help="Content to upload (URL or local path)"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file path"),
    ] = None,
) -> None:
    """Run the selected workflow for every wallet."""
    from sealbot.cli.commands.run import execute_run, prompt_repetitions

    cfg = load_config(config)

    if repetitions is None:
        repetitions = prompt_repetitions()

    overrides: dict[str, Any] = {"workflow": {"repetitions": repetitions}}
    if wallets:
        overrides.setdefault("files", {})["wallets"] = str(wallets)
    if proxies:
        overrides.setdefault("files", {})["proxies"] = str(proxies)
    if workflow:
        overrides["workflow"]["kind"] = workflow.value
    if delay is not None:
        overrides["workflow"]["repeat_delay"] = delay
    if image:
        overrides["workflow"]["content_source"] = image

    exit_code = execute_run(cfg.merge(overrides))
    if exit_code:
        raise typer.Exit(exit_code)


@app.command()
def proxy(
    action: Annotated[
        str,
        typer.Argument(help="Action: list"),
    ],
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="Proxy file"),
    ] = None,
) -> None:
    """Inspect the proxy list."""
    from sealbot.cli.commands.proxy import run_proxy_command

    exit_code = run_proxy_command(action, file or load_config(None).files.proxies)
    if exit_code:
        raise typer.Exit(exit_code)


@app.command()
def config(
    action: Annotated[
        str,
        typer.Argument(help="Action: show, validate, init"),
    ],
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="Config file"),
    ] = None,
) -> None:
    """Manage configuration."""
    from sealbot.core.models.config import Config

    if action == "show":
        cfg = Config()
        if file and file.exists():
            cfg = Config.from_yaml(file)

        console.print("[bold]Current Configuration:[/bold]")
        console.print_json(data=cfg.to_dict())

    elif action == "validate":
        if not file:
            console.print("[red]--file is required for validate[/red]")
            raise typer.Exit(1)
        try:
            Config.from_yaml(file)
        except Exception as e:
            console.print(f"[red]Config validation failed: {e}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]Config file {file} is valid![/green]")

    elif action == "init":
        output_path = file or Path("./config.yaml")
        Config().to_yaml(output_path)
        console.print(f"[green]Config initialized at {output_path}[/green]")

    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        raise typer.Exit(1)


def main() -> None:
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
