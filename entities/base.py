# ============================================================================
# ENTITY BASE CLASSES
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Entity tree and lifecycle template
# PURPOSE: Ownership, sensors, and the start/stop/restart state machine
# CREATED: 18 OCT 2026
# ============================================================================
"""
Entity Base Classes

- Startable: the start/stop/restart capability. Control entities drive
  only children that satisfy it; anything else is skipped silently.
- SensorStore: named values an entity publishes to observers.
- Entity: identity, configuration and an ordered, exclusively owned
  list of children.
- ManagedEntity: an Entity with the lifecycle template. Subclasses fill
  in do_start()/do_stop(); the template owns every sensor write for
  service.state and service.isUp.

State sequence per call:

    start():  STARTING -> RUNNING    (or ON_FIRE, failure re-raised)
    stop():   STOPPING -> STOPPED    (or ON_FIRE, failure re-raised)
    restart(): stop() then start(previous locations)
"""

import logging
import threading
import uuid
from typing import (
    Any, Callable, ClassVar, Dict, List, Mapping, Optional, Protocol,
    Sequence, Tuple, Type, TypeVar, TYPE_CHECKING, runtime_checkable,
)

from pydantic import BaseModel, ValidationError

from core.contracts import EntityData, Lifecycle, Sensors
from core.errors import EntityConfigurationError
from core.logging import log_checkpoint, log_context
from entities.failures import FailureCollector

if TYPE_CHECKING:
    from runtime.management import ManagementContext

logger = logging.getLogger(__name__)

ConfigModel = TypeVar("ConfigModel", bound=BaseModel)
SensorListener = Callable[["Entity", str, Any], None]


# ============================================================================
# CAPABILITY
# ============================================================================

@runtime_checkable
class Startable(Protocol):
    """Anything that can be started, stopped and restarted."""

    def start(self, locations: Sequence[str]) -> None:
        ...

    def stop(self) -> None:
        ...

    def restart(self) -> None:
        ...


# ============================================================================
# SENSORS
# ============================================================================

class SensorStore:
    """Named values published by one entity."""

    def __init__(self, owner: "Entity"):
        self._owner = owner
        self._values: Dict[str, Any] = {}
        self._listeners: List[SensorListener] = []
        self._lock = threading.Lock()

    def set(self, name: str, value: Any) -> None:
        with self._lock:
            self._values[name] = value
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(self._owner, name, value)
            except Exception as e:
                logger.warning(f"Sensor listener failed for {name} on {self._owner.id}: {e}")

    def get(self, name: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(name, default)

    def subscribe(self, listener: SensorListener) -> Callable[[], None]:
        """
        Call listener(entity, name, value) after every sensor write.

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._values)

    def __getitem__(self, name: str) -> Any:
        with self._lock:
            return self._values[name]

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._values


# ============================================================================
# ENTITY
# ============================================================================

class Entity:
    """
    A node in the entity tree.

    Configuration keys shared by every entity:
        id:   plan identifier, used by binding lookups
        name: display name (defaults to the class name)
    """
    entity_type: ClassVar[str] = "entity"

    def __init__(self, config: Optional[Mapping[str, Any]] = None, parent: Optional["Entity"] = None):
        self.config: Dict[str, Any] = dict(config or {})
        self.id: str = uuid.uuid4().hex[:12]
        plan_id = self.config.get("id")
        self.plan_id: Optional[str] = str(plan_id) if plan_id is not None else None
        self.display_name: str = str(self.config.get("name") or type(self).__name__)
        self.parent: Optional["Entity"] = None
        self.sensors = SensorStore(self)

        self._children: List["Entity"] = []
        self._management: Optional["ManagementContext"] = None
        self._locations: Tuple[str, ...] = ()

        self.sensors.set(Sensors.SERVICE_UP, False)
        self.sensors.set(Sensors.SERVICE_STATE, Lifecycle.CREATED)

        if parent is not None:
            parent.add_child(self)

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    @property
    def children(self) -> Tuple["Entity", ...]:
        return tuple(self._children)

    def add_child(self, child: "Entity") -> "Entity":
        """
        Append a child, keeping declaration order.

        Raises:
            ValueError: If the child already belongs to another parent
        """
        if child.parent is not None and child.parent is not self:
            raise ValueError(
                f"Entity {child.display_name} ({child.id}) already has parent "
                f"{child.parent.display_name} ({child.parent.id})"
            )
        if child.parent is self:
            return child

        # Registered first so a rejected child never joins the tree
        management = self.management
        if management is not None:
            management.manage(child)

        child.parent = self
        self._children.append(child)
        return child

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    def attach_management(self, management: "ManagementContext") -> None:
        self._management = management

    @property
    def management(self) -> Optional["ManagementContext"]:
        if self._management is not None:
            return self._management
        if self.parent is not None:
            return self.parent.management
        return None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> Lifecycle:
        return self.sensors.get(Sensors.SERVICE_STATE)

    @property
    def service_up(self) -> bool:
        return bool(self.sensors.get(Sensors.SERVICE_UP))

    @property
    def locations(self) -> Tuple[str, ...]:
        """Locations passed to the most recent start()."""
        return self._locations

    def get_config(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def to_data(self) -> EntityData:
        return EntityData(
            entity_id=self.id,
            entity_type=self.entity_type,
            display_name=self.display_name,
            plan_id=self.plan_id,
            state=self.state,
            service_up=self.service_up,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.display_name} id={self.id}>"


# ============================================================================
# MANAGED ENTITY
# ============================================================================

class ManagedEntity(Entity):
    """
    Entity with the lifecycle template.

    Subclasses override do_start(locations) and do_stop(). The default
    do_stop() stops every startable child and aggregates their failures.
    """
    entity_type: ClassVar[str] = "managed"

    def start(self, locations: Sequence[str] = ()) -> None:
        if isinstance(locations, str):
            raise TypeError(f"locations must be a sequence of strings, not a single string: {locations!r}")
        self._locations = tuple(locations)
        self._transition(
            "start", Lifecycle.STARTING, Lifecycle.RUNNING,
            lambda: self.do_start(self._locations),
        )

    def stop(self) -> None:
        self._transition("stop", Lifecycle.STOPPING, Lifecycle.STOPPED, self.do_stop)

    def restart(self) -> None:
        self.stop()
        self.start(self._locations)

    def do_start(self, locations: Tuple[str, ...]) -> None:
        pass

    def do_stop(self) -> None:
        self.stop_children()

    def _transition(
        self,
        operation: str,
        entering: Lifecycle,
        settled: Lifecycle,
        work: Callable[[], None],
    ) -> None:
        """Run one lifecycle call: entering state, work, settled state or ON_FIRE."""
        with log_context(entity_id=self.id, entity_type=self.entity_type, operation=operation):
            self.set_service_state(False, entering)
            try:
                work()
            except BaseException as e:
                self.set_service_state(False, Lifecycle.ON_FIRE)
                logger.error(f"{self.display_name} ({self.id}) failed to {operation}: {e}")
                raise

            self.set_service_state(settled.is_service_up(), settled)
            logger.info(f"{self.display_name} ({self.id}) is {settled.value}")
            log_checkpoint(f"entity_{settled.value}", {"name": self.display_name}, logger)

    def set_service_state(self, up: bool, state: Lifecycle) -> None:
        current = self.state
        if current is not None and current is not state and not current.can_transition_to(state):
            logger.warning(
                f"Unexpected transition {current.value} -> {state.value} on {self.display_name} ({self.id})"
            )
        # isUp is never observed true outside RUNNING
        if up:
            self.sensors.set(Sensors.SERVICE_STATE, state)
            self.sensors.set(Sensors.SERVICE_UP, up)
        else:
            self.sensors.set(Sensors.SERVICE_UP, up)
            self.sensors.set(Sensors.SERVICE_STATE, state)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def startable_children(self) -> List[Entity]:
        startable = []
        for child in self._children:
            if isinstance(child, Startable):
                startable.append(child)
            else:
                logger.debug(f"Skipping non-startable child {child.display_name}")
        return startable

    def start_children(self, children: Sequence[Entity], locations: Sequence[str]) -> None:
        """Start each child in order; failures are aggregated, not fatal."""
        collector = FailureCollector(self, "start")
        for child in children:
            logger.debug(f"Starting child {child.display_name}")
            collector.run(child, child.start, locations)
        collector.raise_if_any()

    def stop_children(self) -> None:
        collector = FailureCollector(self, "stop")
        for child in self.startable_children():
            logger.debug(f"Stopping child {child.display_name}")
            collector.run(child, child.stop)
        collector.raise_if_any()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _resolve_config(self, model: Type[ConfigModel]) -> ConfigModel:
        """
        Validate this entity's configuration once.

        Raises:
            EntityConfigurationError: If validation fails
        """
        try:
            return model.model_validate(self.config)
        except ValidationError as e:
            raise EntityConfigurationError(self.entity_type, str(e)) from e


__all__ = [
    "Startable",
    "SensorListener",
    "SensorStore",
    "Entity",
    "ManagedEntity",
]
