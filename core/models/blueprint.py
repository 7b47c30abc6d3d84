# ============================================================================
# BLUEPRINT MODELS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core model - Entity tree blueprint
# PURPOSE: Describe an entity tree loaded from YAML
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: EntityDefinition, Blueprint
# DEPENDENCIES: pydantic
# ============================================================================
"""
Blueprint Models

A Blueprint is the template for an entity tree:

    name: Conditional restart
    services:
      - type: loop
        id: restarts
        count: 3
        ignore.exceptions: true
        children:
          - type: counting
            id: target

Any key on an entity that is not one of type/id/name/config/children is
treated as a configuration key. An explicit ``config:`` block may be
used instead (or as well); it wins over flattened keys.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class EntityDefinition(BaseModel):
    """
    Definition of a single entity in a blueprint.

    This is the TEMPLATE - what entity to build.
    The Entity (in entities/base.py) is the INSTANCE.
    """
    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1, max_length=64, description="Registered entity type")
    id: Optional[str] = Field(
        default=None,
        max_length=128,
        description="Plan identifier, used by bindings to find this entity"
    )
    name: Optional[str] = Field(default=None, max_length=256)
    config: Dict[str, Any] = Field(default_factory=dict)
    children: List["EntityDefinition"] = Field(default_factory=list)

    def entity_config(self) -> Dict[str, Any]:
        """Merged configuration for the entity constructor."""
        merged: Dict[str, Any] = dict(self.model_extra or {})
        merged.update(self.config)
        if self.id is not None:
            merged["id"] = self.id
        if self.name is not None:
            merged["name"] = self.name
        return merged

    def walk(self):
        """Yield this definition and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


class Blueprint(BaseModel):
    """Complete entity tree definition loaded from YAML."""
    name: str = Field(default="application", max_length=256)
    description: Optional[str] = None
    services: List[EntityDefinition] = Field(
        ...,
        min_length=1,
        description="Top-level entities, started in order"
    )

    def validate_structure(self) -> List[str]:
        """
        Validate blueprint structure.

        Returns list of validation errors (empty if valid).
        """
        errors = []
        seen: Dict[str, int] = {}
        for service in self.services:
            for definition in service.walk():
                if definition.id is None:
                    continue
                seen[definition.id] = seen.get(definition.id, 0) + 1
        duplicates = sorted(plan_id for plan_id, count in seen.items() if count > 1)
        if duplicates:
            errors.append(f"Duplicate entity ids: {duplicates}")
        return errors


EntityDefinition.model_rebuild()
