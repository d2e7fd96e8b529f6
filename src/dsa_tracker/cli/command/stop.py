"""Stop command implementation"""

import os
import signal
import time

import click
from rich.console import Console

from ..util import (
    get_instance_path,
    is_initialized,
    is_running,
    get_pid_file,
    process_alive,
    read_pid,
)

console = Console()

GRACEFUL_TIMEOUT_SECONDS = 10


def _wait_for_exit(pid: int, timeout: float) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not process_alive(pid):
            return True
        time.sleep(0.2)
    return not process_alive(pid)


@click.command(name="stop", help="Stop DSA Tracker backend server")
@click.argument(
    "path",
    type=click.Path(),
    required=False,
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Force kill if graceful shutdown fails",
)
def stop(path: str = None, force: bool = False):
    """Stop DSA Tracker backend server

    Sends SIGTERM and waits for the server to exit; with ``--force`` a
    server still alive after the grace period is killed.

    Args:
        path: Instance directory path (default: ~/.dsa_tracker)
        force: Force kill if graceful shutdown fails
    """
    instance_path = get_instance_path(path)

    if not is_initialized(instance_path):
        console.print(
            f"[red]Error: Not initialized at {instance_path}[/red]"
        )
        raise click.Abort()

    if not is_running(instance_path):
        console.print(f"[yellow]Instance not running at {instance_path}[/yellow]")
        return

    pid = read_pid(instance_path)
    console.print(f"Stopping DSA Tracker (pid {pid})...")
    os.kill(pid, signal.SIGTERM)

    if not _wait_for_exit(pid, GRACEFUL_TIMEOUT_SECONDS):
        if not force:
            console.print(
                f"[red]Error: Server did not stop within {GRACEFUL_TIMEOUT_SECONDS}s[/red]"
            )
            console.print("[yellow]Retry with --force to kill it[/yellow]")
            raise click.Abort()
        os.kill(pid, signal.SIGKILL)
        _wait_for_exit(pid, GRACEFUL_TIMEOUT_SECONDS)

    get_pid_file(instance_path).unlink(missing_ok=True)
    console.print("[green]✓ DSA Tracker stopped[/green]")
