"""Admin commands for init and backup."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from tally.commands.common import console
from tally.config import create_default_config, get_config_path
from tally.store.schema import get_data_dir, get_db_path, init_database


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        console.print("[red]Database not found. Run 'tally init' first.[/red]", style="bold")
        sys.exit(1)

    backup_dir = Path(output_dir).expanduser() if output_dir else get_data_dir() / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        db_backup = backup_dir / f"tally_{timestamp}.db"
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def init_command(force: bool = False) -> None:
    """Initialize tally database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    # Guard: refuse to overwrite without force flag
    if not force and (db_exists or config_exists):
        console.print("[red]Initialization failed:[/red]", style="bold")
        if db_exists:
            console.print(f"  Database already exists: {db_path}")
        if config_exists:
            console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'tally init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        if force and db_exists:
            db_path.unlink()

        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        console.print("[green]✓[/green] Database initialized")

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        console.print("\n[green]Initialization complete![/green]", style="bold")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
