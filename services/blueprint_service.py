# ============================================================================
# BLUEPRINT SERVICE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Service - Blueprint loading and tree construction
# PURPOSE: Load blueprint YAML and build managed entity trees from it
# CREATED: 18 OCT 2026
# ============================================================================
"""
Blueprint Service

Loads blueprint definitions from YAML files (or strings), caches them by
name, and builds the entity tree a blueprint describes. Blueprint files
are stored in the blueprints/ directory.

Usage:
    service = BlueprintService()
    blueprint = service.load_file("blueprints/conditional_restart.yaml")
    with ManagementContext() as mgmt:
        app = service.build(blueprint, mgmt)
        app.start([])
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

import entities  # noqa: F401  registers the built-in entity types
from core.errors import BlueprintError, ControlFlowError
from core.logging import get_logger
from core.models import Blueprint, EntityDefinition
from entities.application import Application
from entities.base import Entity
from entities.registry import create_entity
from runtime.management import ManagementContext

logger = get_logger(__name__)


class BlueprintService:
    """Service for loading blueprints and building entity trees."""

    def __init__(self, blueprints_dir: Optional[str] = None):
        """
        Initialize blueprint service.

        Args:
            blueprints_dir: Directory containing blueprint YAML files.
                            Defaults to ./blueprints/
        """
        if blueprints_dir:
            self.blueprints_dir = Path(blueprints_dir)
        else:
            self.blueprints_dir = Path(__file__).parent.parent / "blueprints"

        self._cache: Dict[str, Blueprint] = {}
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all(self) -> int:
        """
        Load every *.yaml / *.yml blueprint in the blueprints directory.

        Returns:
            Number of blueprints loaded
        """
        if not self.blueprints_dir.exists():
            logger.warning(f"Blueprints directory not found: {self.blueprints_dir}")
            return 0

        count = 0
        for pattern in ("*.yaml", "*.yml"):
            for yaml_file in sorted(self.blueprints_dir.glob(pattern)):
                try:
                    blueprint = self.load_file(yaml_file)
                except BlueprintError as e:
                    logger.error(f"Failed to load {yaml_file}: {e}")
                    continue
                self._cache[blueprint.name] = blueprint
                count += 1
                logger.info(f"Loaded blueprint: {blueprint.name}")

        self._loaded = True
        logger.info(f"Loaded {count} blueprints from {self.blueprints_dir}")
        return count

    def load_file(self, path: Union[str, Path]) -> Blueprint:
        """
        Load a blueprint from a YAML file.

        Raises:
            BlueprintError: Unreadable file or invalid document
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise BlueprintError(f"Cannot read blueprint {path}: {e}") from e
        return self.load_string(text, source=str(path))

    def load_string(self, text: str, source: str = "<string>") -> Blueprint:
        """
        Parse and validate a blueprint document.

        Raises:
            BlueprintError: Invalid YAML, schema or structure
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise BlueprintError(f"Invalid YAML in {source}: {e}") from e

        if not isinstance(data, dict):
            raise BlueprintError(f"Blueprint {source} must be a mapping, got {type(data).__name__}")

        try:
            blueprint = Blueprint.model_validate(data)
        except ValidationError as e:
            raise BlueprintError(f"Invalid blueprint in {source}: {e}") from e

        errors = blueprint.validate_structure()
        if errors:
            raise BlueprintError(f"Invalid blueprint in {source}: {errors}")

        logger.debug(f"Parsed blueprint {blueprint.name} from {source}")
        return blueprint

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[Blueprint]:
        if not self._loaded:
            self.load_all()
        return self._cache.get(name)

    def get_or_raise(self, name: str) -> Blueprint:
        """
        Raises:
            KeyError: If no blueprint has that name
        """
        blueprint = self.get(name)
        if blueprint is None:
            raise KeyError(f"Blueprint not found: {name}")
        return blueprint

    def list_all(self) -> List[Blueprint]:
        if not self._loaded:
            self.load_all()
        return list(self._cache.values())

    def register(self, blueprint: Blueprint) -> None:
        """Register a blueprint (for testing or programmatic use)."""
        errors = blueprint.validate_structure()
        if errors:
            raise ValueError(f"Invalid blueprint: {errors}")
        self._cache[blueprint.name] = blueprint
        logger.info(f"Registered blueprint: {blueprint.name}")

    def reload(self) -> int:
        self._cache.clear()
        self._loaded = False
        return self.load_all()

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def build(self, blueprint: Blueprint, management: ManagementContext) -> Application:
        """
        Build and manage the entity tree for a blueprint.

        Returns:
            The root Application; its children are the blueprint services

        Raises:
            BlueprintError: Unknown entity type or invalid entity config
        """
        app = Application({"name": blueprint.name})
        for definition in blueprint.services:
            app.add_child(self._build_entity(definition))

        management.manage(app)
        logger.info(
            f"Built blueprint {blueprint.name}: "
            f"{sum(1 for s in blueprint.services for _ in s.walk())} entities"
        )
        return app

    def _build_entity(self, definition: EntityDefinition) -> Entity:
        try:
            entity = create_entity(definition.type, definition.entity_config())
        except ControlFlowError as e:
            label = definition.id or definition.name or definition.type
            raise BlueprintError(f"Cannot build entity [{label}]: {e}") from e

        for child in definition.children:
            entity.add_child(self._build_entity(child))
        return entity


__all__ = ["BlueprintService"]
