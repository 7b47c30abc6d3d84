# ============================================================================
# TASK RUNNER
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Runtime - Asynchronous task execution context
# PURPOSE: Run coroutines on a background loop and block callers on them
# CREATED: 18 OCT 2026
# ============================================================================
"""
Task Runner

Lifecycle calls are synchronous, but some collaborators (entity lookup)
are asynchronous. The TaskRunner owns an asyncio event loop running on a
daemon thread; synchronous code submits a coroutine and blocks on the
resulting future.

- Timeouts cancel the coroutine on the loop before raising TimeoutError
- An interrupt delivered to the blocked caller (KeyboardInterrupt)
  cancels the coroutine too, then propagates
- Cancellation inside the coroutine surfaces as
  concurrent.futures.CancelledError, an ordinary Exception

Usage:
    runner = TaskRunner()
    entity = runner.run(directory.lookup("db"), timeout=5, description="Finding db")
    runner.close()
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


class TaskRunner:
    """Background asyncio loop for blocking callers."""

    def __init__(self, name: str = "task-runner"):
        self._name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _ensure_started(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                ready = threading.Event()
                loop = asyncio.new_event_loop()

                def _serve():
                    asyncio.set_event_loop(loop)
                    loop.call_soon(ready.set)
                    loop.run_forever()

                self._thread = threading.Thread(target=_serve, name=self._name, daemon=True)
                self._thread.start()
                ready.wait()
                self._loop = loop
                logger.debug(f"Started background loop {self._name}")
            return self._loop

    def run(
        self,
        awaitable: Awaitable[Any],
        timeout: Optional[float] = None,
        description: str = "",
    ) -> Any:
        """
        Run an awaitable on the background loop and wait for its result.

        Args:
            awaitable: Coroutine to run
            timeout: Seconds to wait before cancelling (None = no limit)
            description: Human-readable label for logs

        Returns:
            The coroutine's result

        Raises:
            TimeoutError: If the timeout elapsed (the coroutine is cancelled)
            concurrent.futures.CancelledError: If the coroutine was cancelled
            Exception: Whatever the coroutine raised
        """
        loop = self._ensure_started()
        future = asyncio.run_coroutine_threadsafe(_as_coroutine(awaitable), loop)
        label = description or "background task"

        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            logger.warning(f"{label} timed out after {timeout}s, cancelled")
            raise TimeoutError(f"{label} timed out after {timeout}s")
        except concurrent.futures.CancelledError:
            logger.warning(f"{label} was cancelled")
            raise
        except KeyboardInterrupt:
            future.cancel()
            logger.warning(f"{label} interrupted, cancelled")
            raise

    def close(self) -> None:
        """Stop the background loop and join its thread."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop, self._thread = None, None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=5)
        loop.close()
        logger.debug(f"Stopped background loop {self._name}")

    def __enter__(self) -> "TaskRunner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


async def _as_coroutine(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


__all__ = ["TaskRunner"]
