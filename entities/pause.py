# ============================================================================
# PAUSE ENTITY
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Timed wait
# PURPOSE: Block the calling thread for a configured duration
# CREATED: 18 OCT 2026
# ============================================================================
"""
Pause Entity

start() blocks for the configured duration and then reports RUNNING.
Another thread may call interrupt() to end the wait early; the pause then
goes ON_FIRE and raises InterruptedWait. stop() returns immediately.

Example config:
    {"duration": "2s"}     # also "2000ms", 2000, timedelta(seconds=2)
"""

import logging
import threading
from datetime import timedelta
from typing import Any, Mapping, Optional, Sequence, Tuple

from core.errors import InterruptedWait
from core.models import PauseConfig
from entities.base import Entity, ManagedEntity
from entities.registry import register_entity_type

logger = logging.getLogger(__name__)


@register_entity_type("pause")
class Pause(ManagedEntity):
    """Waits for a fixed duration."""
    entity_type = "pause"

    def __init__(self, config: Optional[Mapping[str, Any]] = None, parent: Optional[Entity] = None):
        super().__init__(config, parent)
        self.pause_config: PauseConfig = self._resolve_config(PauseConfig)
        self._interrupted = threading.Event()

    @property
    def duration(self) -> timedelta:
        return self.pause_config.duration

    def interrupt(self) -> None:
        """End an in-progress wait. Safe to call from any thread."""
        logger.info(f"{self.display_name}: interrupt requested")
        self._interrupted.set()

    def start(self, locations: Sequence[str] = ()) -> None:
        # Cleared before STARTING is published so an interrupt seen after it still fires
        self._interrupted.clear()
        super().start(locations)

    def do_start(self, locations: Tuple[str, ...]) -> None:
        seconds = self.duration.total_seconds()
        logger.info(f"{self.display_name}: pausing for {seconds}s")

        if self._interrupted.wait(timeout=seconds):
            raise InterruptedWait(f"Pause {self.display_name} interrupted before {seconds}s elapsed")

    def do_stop(self) -> None:
        pass


__all__ = ["Pause"]
