"""Start command implementation"""

import os

import click
from pydantic import ValidationError
from rich.console import Console

from ...backend.config import INSTANCE_PATH_ENV, Settings
from ..util import (
    get_instance_path,
    is_initialized,
    is_running,
    get_pid_file,
)

console = Console()


@click.command(name="start", help="Start DSA Tracker backend server")
@click.argument(
    "path",
    type=click.Path(),
    required=False,
)
def start(path: str = None):
    """Start DSA Tracker backend server in the foreground

    Args:
        path: Instance directory path (default: ~/.dsa_tracker)
    """
    instance_path = get_instance_path(path)

    # Check if initialized
    if not is_initialized(instance_path):
        console.print(
            f"[red]Error: Not initialized at {instance_path}[/red]"
        )
        console.print(
            f"[yellow]Run: dsa-tracker init {path if path else ''}[/yellow]"
        )
        raise click.Abort()

    # Check if already running
    if is_running(instance_path):
        console.print("[red]Error: Instance already running[/red]")
        console.print(f"[yellow]Location: {instance_path}[/yellow]")
        raise click.Abort()

    # Settings pick up config.toml from the instance directory
    os.environ[INSTANCE_PATH_ENV] = str(instance_path)
    try:
        settings = Settings()
    except ValidationError as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise click.Abort()

    host = settings.server_host
    port = settings.server_port

    console.print(f"[cyan]Starting DSA Tracker from {instance_path}[/cyan]")
    console.print(f"[cyan]Server: http://{host}:{port}[/cyan]")
    console.print(f"[cyan]Docs: http://{host}:{port}/docs[/cyan]")
    console.print("")

    import uvicorn
    from ...backend.app import create_app

    app = create_app(settings)

    # Save PID (current process)
    pid_file = get_pid_file(instance_path)
    pid_file.write_text(str(os.getpid()))

    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
        )
    finally:
        # Clean up PID file when server stops
        pid_file.unlink(missing_ok=True)
