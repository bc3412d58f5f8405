"""
Model Registry - In-memory store of named model definitions.

Provides:
- Registration by name (last write wins)
- Exact-name lookup and discovery
- Registry statistics

The compatibility matrix of a definition is stored but never enforced here;
only scoring code reads it.
"""

from typing import Any, Iterator

from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.models.definitions import ModelDefinition

logger = get_logger(__name__)


class ModelRegistry:
    """
    Registry of model definitions.

    One instance is created during setup and passed to the components that
    need it (compiler, orchestrator, normalizer). Registration is expected to
    finish before translation requests start; reads are safe afterwards.

    Usage:
        registry = ModelRegistry()
        registry.register(ModelDefinition(name="content", schema={...}))

        definition = registry.get("content")
        names = registry.list_names()
    """

    def __init__(self) -> None:
        self._models: dict[str, ModelDefinition] = {}

    def register(self, definition: ModelDefinition) -> ModelDefinition:
        """
        Register a model definition, replacing any definition with the same name.

        Args:
            definition: The model definition

        Returns:
            The registered definition
        """
        replaced = definition.name in self._models
        self._models[definition.name] = definition

        logger.info(
            f"{'Re-registered' if replaced else 'Registered'} model: {definition.name} "
            f"(version={definition.version}, entities={len(definition.schema)})"
        )
        return definition

    def unregister(self, name: str) -> bool:
        """Remove a model. Returns False when it was not registered."""
        if name not in self._models:
            return False
        del self._models[name]
        logger.info(f"Unregistered model: {name}")
        return True

    def get(self, name: str) -> ModelDefinition | None:
        """Get a model definition by exact name."""
        return self._models.get(name)

    def is_registered(self, name: str) -> bool:
        return name in self._models

    def list_names(self) -> list[str]:
        """Names in registration order."""
        return list(self._models.keys())

    def list_definitions(self) -> list[ModelDefinition]:
        return list(self._models.values())

    def get_stats(self) -> dict[str, Any]:
        """Get registry statistics."""
        return {
            "total_models": len(self._models),
            "total_entities": sum(len(m.schema) for m in self._models.values()),
            "models": {
                name: {
                    "version": m.version,
                    "entities": len(m.schema),
                }
                for name, m in self._models.items()
            },
        }

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[ModelDefinition]:
        return iter(list(self._models.values()))
