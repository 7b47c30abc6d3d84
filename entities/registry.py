# ============================================================================
# ENTITY TYPE REGISTRY
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Entity type registration and lookup
# PURPOSE: Map blueprint type names to entity classes
# CREATED: 18 OCT 2026
# ============================================================================
"""
Entity Type Registry

Blueprints name entity types ("loop", "if_else", ...). Entity classes
register under those names at import time via decorator; importing the
entities package registers every built-in type.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar

from core.errors import UnknownEntityTypeError

logger = logging.getLogger(__name__)

EntityClass = TypeVar("EntityClass", bound=type)

_entity_types: Dict[str, type] = {}
_entity_type_metadata: Dict[str, Dict[str, Any]] = {}


def register_entity_type(name: str, *, description: str = "") -> Callable[[EntityClass], EntityClass]:
    """
    Decorator to register an entity class under a blueprint type name.

    Raises:
        ValueError: If the name is already registered to another class

    Example:
        @register_entity_type("pause")
        class Pause(ManagedEntity):
            ...
    """
    def decorator(cls: EntityClass) -> EntityClass:
        existing = _entity_types.get(name)
        if existing is not None and existing is not cls:
            raise ValueError(f"Entity type already registered: {name} ({existing.__name__})")

        _entity_types[name] = cls
        _entity_type_metadata[name] = {
            "name": name,
            "description": description or (cls.__doc__ or "").strip().split("\n")[0],
            "class": cls.__name__,
            "module": cls.__module__,
            "registered_at": datetime.now(timezone.utc).isoformat(),
        }
        logger.debug(f"Registered entity type: {name} ({cls.__module__}.{cls.__name__})")
        return cls

    return decorator


def get_entity_type(name: str) -> Optional[type]:
    return _entity_types.get(name)


def get_entity_type_or_raise(name: str) -> type:
    """
    Raises:
        UnknownEntityTypeError: If nothing is registered under name
    """
    cls = _entity_types.get(name)
    if cls is None:
        raise UnknownEntityTypeError(name)
    return cls


def create_entity(name: str, config: Optional[Mapping[str, Any]] = None):
    """Instantiate a registered entity type with its configuration."""
    return get_entity_type_or_raise(name)(config)


def list_entity_types() -> List[Dict[str, Any]]:
    return list(_entity_type_metadata.values())


__all__ = [
    "register_entity_type",
    "get_entity_type",
    "get_entity_type_or_raise",
    "create_entity",
    "list_entity_types",
]
