"""Command line interface for Passthrough."""

from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import Settings

app = typer.Typer(help="Passthrough - transparent HTTP reverse proxy")
console = Console()


def load_settings() -> Settings:
    """Load settings, exiting with a readable message when they are invalid."""
    try:
        return Settings()
    except ValidationError as e:
        console.print("[bold red]Invalid configuration:[/bold red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"  [red]{field}[/red]: {error['msg']}")
        raise typer.Exit(1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Start the proxy server."""
    import uvicorn

    settings = load_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    log_level = "debug" if debug else settings.log_level.lower()

    console.print(
        f"[bold blue]Forwarding {host}:{port} to {settings.base_url}[/bold blue]"
    )

    uvicorn.run(
        "passthrough.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


@app.command()
def config_check() -> None:
    """Show the effective configuration."""
    settings = load_settings()

    table = Table(title="Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="yellow")

    table.add_row("Base URL", settings.base_url)
    table.add_row(
        "Upstream Timeout",
        f"{settings.upstream_timeout}s" if settings.upstream_timeout else "Disabled",
    )
    table.add_row("Follow Redirects", "Yes" if settings.follow_redirects else "No")
    table.add_row("Log File", settings.log_file)
    table.add_row("Console Max Chars", str(settings.console_max_chars))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Listen", f"{settings.api_host}:{settings.api_port}")

    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
