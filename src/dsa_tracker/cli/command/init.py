"""Init command implementation"""

import asyncio
import secrets
from datetime import datetime

import click
from rich.console import Console

from ..util import get_instance_path, is_initialized, write_instance_info

console = Console()

CONFIG_TEMPLATE = """# DSA Tracker instance configuration
# Environment variables (e.g. SMTP_PASSWORD) override the values below.

debug = false
database_url = "sqlite:///{db_path}"
log_dir = "{log_dir}"

secret_key = "{secret_key}"
access_token_expire_minutes = 10080

server_host = "0.0.0.0"
server_port = 3000
cors_origins = ["http://localhost:5173", "http://localhost:3000"]

# Verification emails (verification fails when SMTP is not configured
# unless debug = true, which logs the code instead)
smtp_host = "smtp.gmail.com"
smtp_port = 587
smtp_use_ssl = false
smtp_user = ""
smtp_password = ""
smtp_from = ""
smtp_from_name = "DSA Tracker"

# Optional token raising the GitHub API rate limit
github_token = ""
"""


async def _create_tables(database_url: str) -> None:
    from ...backend.database import create_engine, create_db_and_tables

    engine = create_engine(database_url)
    try:
        await create_db_and_tables(engine)
    finally:
        await engine.dispose()


@click.command(name="init", help="Initialize a new DSA Tracker instance")
@click.argument(
    "path",
    type=click.Path(),
    required=False,
)
def init(path: str = None):
    """Initialize a new DSA Tracker instance

    Args:
        path: Instance directory path (default: ~/.dsa_tracker)
    """
    instance_path = get_instance_path(path)

    # Check if already initialized
    if is_initialized(instance_path):
        console.print(
            f"[red]Error: Already initialized at {instance_path}[/red]"
        )
        raise click.Abort()

    if instance_path.exists() and any(instance_path.iterdir()):
        console.print(
            f"[red]Error: Directory is not empty: {instance_path}[/red]"
        )
        raise click.Abort()

    # 1. Create directory structure
    console.print(f"Initializing DSA Tracker instance at {instance_path}")
    console.print("")

    instance_path.mkdir(parents=True, exist_ok=True)
    (instance_path / "data").mkdir(exist_ok=True)
    (instance_path / "logs").mkdir(exist_ok=True)

    # 2. Generate config.toml with a fresh signing key
    console.print("Generating configuration...")

    db_path = instance_path / "data" / "dsa_tracker.db"
    database_url = f"sqlite:///{db_path.as_posix()}"
    config_file = instance_path / "config.toml"
    config_file.write_text(CONFIG_TEMPLATE.format(
        db_path=db_path.as_posix(),
        log_dir=(instance_path / "logs").as_posix(),
        secret_key=secrets.token_urlsafe(48),
    ))

    # 3. Initialize database
    console.print("Initializing database...")
    asyncio.run(_create_tables(database_url))

    # 4. Create instance flag file last, so a failed init can be retried
    write_instance_info(instance_path, {
        "initialized_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "instance_path": str(instance_path),
        "database_path": str(db_path),
    })

    console.print("")
    console.print("[green]✓ DSA Tracker instance initialized successfully![/green]")
    console.print("")
    console.print(f"Location: {instance_path}")
    console.print("")
    console.print("Next steps:")
    console.print("  1. Configure SMTP for verification emails:")
    console.print(f"     {config_file}")
    console.print("")
    console.print("  2. Start the backend server:")
    if path:
        console.print(f"     dsa-tracker start {path}")
    else:
        console.print("     dsa-tracker start")
    console.print("")
    console.print(f"Database: {db_path}")
    console.print(f"Logs: {instance_path / 'logs'}/")
