"""Stop a project this process started when the command is interrupted.

SIGINT arrives as ``KeyboardInterrupt``; SIGTERM is turned into a
cancellation of the running task while the guard is active.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from expcli.output.console import Terminal
    from expcli.xdl import ProjectManager

logger = logging.getLogger(__name__)


def _cancel_on_sigterm(loop: asyncio.AbstractEventLoop) -> bool:
    task = asyncio.current_task()
    if task is None:
        return False
    try:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
    except (NotImplementedError, RuntimeError, ValueError):
        # No signal support on this loop or outside the main thread.
        logger.debug("SIGTERM handler not installed", exc_info=True)
        return False
    return True


@asynccontextmanager
async def stop_project_on_interrupt(
    projects: ProjectManager, project_dir: Path, terminal: Terminal
) -> AsyncIterator[None]:
    loop = asyncio.get_running_loop()
    installed = _cancel_on_sigterm(loop)
    try:
        yield
    except (KeyboardInterrupt, asyncio.CancelledError):
        terminal.info("Stopping packager...")
        await projects.stop(project_dir)
        terminal.info("Packager stopped.")
        raise
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGTERM)
