# ============================================================================
# LOOP ENTITY
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Repeated child execution
# PURPOSE: Drive startable children through a fixed number of passes
# CREATED: 18 OCT 2026
# ============================================================================
"""
Loop Entity

Pass 0 starts every startable child in order; every later pass restarts
them. A count of zero or less does nothing at all.

Failure policy (ignore.exceptions):
- false: the first child failure aborts the loop and propagates unchanged
- true:  the failure is logged with its traceback, counted in the
         loop.failures.ignored sensor, and the loop carries on

Example config:
    {"count": 3, "ignore.exceptions": true}
"""

import logging
from typing import Any, Mapping, Optional, Tuple

from core.contracts import Sensors
from core.logging import log_checkpoint
from core.models import LoopConfig
from entities.base import Entity, ManagedEntity
from entities.registry import register_entity_type

logger = logging.getLogger(__name__)


@register_entity_type("loop")
class Loop(ManagedEntity):
    """Starts, then repeatedly restarts, its children."""
    entity_type = "loop"

    def __init__(self, config: Optional[Mapping[str, Any]] = None, parent: Optional[Entity] = None):
        super().__init__(config, parent)
        self.loop_config: LoopConfig = self._resolve_config(LoopConfig)

    @property
    def ignored_failures(self) -> int:
        return self.sensors.get(Sensors.LOOP_IGNORED_FAILURES, 0)

    def do_start(self, locations: Tuple[str, ...]) -> None:
        count = self.loop_config.count
        ignore = self.loop_config.ignore_exceptions
        self.sensors.set(Sensors.LOOP_IGNORED_FAILURES, 0)

        if count <= 0:
            logger.info(f"{self.display_name}: count is {count}, nothing to run")
            return

        children = self.startable_children()
        ignored = 0
        for iteration in range(count):
            self.sensors.set(Sensors.LOOP_ITERATION, iteration)
            for child in children:
                try:
                    if iteration == 0:
                        logger.debug(f"Pass {iteration}: starting {child.display_name}")
                        child.start(locations)
                    else:
                        logger.debug(f"Pass {iteration}: restarting {child.display_name}")
                        child.restart()
                except Exception as e:
                    if not ignore:
                        logger.error(f"{self.display_name}: pass {iteration} aborted by {child.display_name}: {e}")
                        raise
                    ignored += 1
                    self.sensors.set(Sensors.LOOP_IGNORED_FAILURES, ignored)
                    logger.warning(
                        f"{self.display_name}: ignoring failure of {child.display_name} "
                        f"in pass {iteration}",
                        exc_info=True,
                    )

            log_checkpoint("loop_pass_completed", {"iteration": iteration, "count": count}, logger)


__all__ = ["Loop"]
