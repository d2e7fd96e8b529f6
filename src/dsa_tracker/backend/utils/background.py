"""Detached background tasks

The event loop only keeps weak references to tasks, so every detached task
is held in ``_background_tasks`` until it finishes.
"""
import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)

_background_tasks: set[asyncio.Task] = set()


def fire_and_forget(coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
    """Schedule ``coro`` without awaiting it

    Failures are logged and never reach the caller. A coroutine returning
    ``False`` is treated as a reported failure.
    """
    task = asyncio.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_on_done)
    return task


def _on_done(task: asyncio.Task) -> None:
    _background_tasks.discard(task)

    if task.cancelled():
        logger.warning(f"Background task {task.get_name()} was cancelled")
        return

    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}", exc_info=exc)
    elif task.result() is False:
        logger.error(f"Background task {task.get_name()} reported failure")
    else:
        logger.debug(f"Background task {task.get_name()} finished")


def pending_tasks() -> set[asyncio.Task]:
    """Snapshot of detached tasks that have not finished yet"""
    return set(_background_tasks)
