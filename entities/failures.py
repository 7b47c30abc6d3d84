# ============================================================================
# FAILURE AGGREGATION
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Child failure collection
# PURPOSE: Keep driving children after one fails, then raise one failure
# CREATED: 18 OCT 2026
# ============================================================================
"""
Failure Aggregation

A control entity driving several children records each child failure and
moves on. After the pass, raise_if_any() raises a single
AggregatedChildFailure carrying every underlying exception, in order.

Only Exception subclasses are collected; KeyboardInterrupt and
SystemExit pass straight through.

Usage:
    collector = FailureCollector(self, "start")
    for child in children:
        collector.run(child, child.start, locations)
    collector.raise_if_any()
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, TYPE_CHECKING

from core.errors import AggregatedChildFailure

if TYPE_CHECKING:
    from entities.base import Entity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildFailure:
    """One recorded child failure."""
    child: "Entity"
    operation: str
    error: Exception


class FailureCollector:
    """Ordered record of child failures for one owner operation."""

    def __init__(self, owner: "Entity", operation: str):
        self.owner = owner
        self.operation = operation
        self._records: List[ChildFailure] = []

    def run(self, child: "Entity", action: Callable[..., Any], *args: Any) -> bool:
        """
        Run action(*args), recording a failure against child.

        Returns:
            True if the action completed
        """
        try:
            action(*args)
            return True
        except Exception as e:
            self.record(child, e)
            return False

    def record(self, child: "Entity", error: Exception) -> None:
        logger.error(
            f"{self.owner.display_name}: {self.operation} of child "
            f"{child.display_name} ({child.id}) failed: {error}"
        )
        self._records.append(ChildFailure(child=child, operation=self.operation, error=error))

    @property
    def failures(self) -> List[ChildFailure]:
        return list(self._records)

    def raise_if_any(self) -> None:
        """Raise AggregatedChildFailure if anything was recorded."""
        if not self._records:
            return

        errors = [r.error for r in self._records]
        raise AggregatedChildFailure(
            f"{len(errors)} child failure(s) during {self.operation} of {self.owner.display_name}",
            errors,
            [r.child.display_name for r in self._records],
        ) from errors[0]

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)


__all__ = ["ChildFailure", "FailureCollector"]
