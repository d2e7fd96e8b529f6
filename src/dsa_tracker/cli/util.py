"""CLI utility functions"""

import json
import os
from pathlib import Path

from ..backend import config

INSTANCE_FLAG_FILE = ".dsa_tracker_instance"


def get_instance_path(path: str | None = None) -> Path:
    """Get instance path, default to $DSA_TRACKER_INSTANCE_PATH or ~/.dsa_tracker

    Args:
        path: Custom path (relative or absolute), None for default

    Returns:
        Resolved absolute path
    """
    if path is None:
        return config.get_instance_path().resolve()
    return Path(path).expanduser().resolve()


def is_initialized(instance_path: Path) -> bool:
    """Check if instance is initialized

    Args:
        instance_path: Instance directory path

    Returns:
        True if the instance flag file exists
    """
    return (instance_path / INSTANCE_FLAG_FILE).exists()


def write_instance_info(instance_path: Path, info: dict) -> None:
    with open(instance_path / INSTANCE_FLAG_FILE, "w") as f:
        json.dump(info, f, indent=2)


def get_pid_file(instance_path: Path) -> Path:
    """Get PID file path"""
    return instance_path / ".dsa_tracker.pid"


def read_pid(instance_path: Path) -> int | None:
    """PID recorded by ``start``, or None when absent or unreadable"""
    try:
        return int(get_pid_file(instance_path).read_text().strip())
    except (FileNotFoundError, ValueError):
        return None


def process_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by another user
        return True
    return True


def is_running(instance_path: Path) -> bool:
    """Check if instance is running

    A PID file whose process is gone is stale and gets removed.

    Args:
        instance_path: Instance directory path

    Returns:
        True if the recorded server process is alive
    """
    pid = read_pid(instance_path)
    if pid is None:
        return False
    if process_alive(pid):
        return True
    get_pid_file(instance_path).unlink(missing_ok=True)
    return False
