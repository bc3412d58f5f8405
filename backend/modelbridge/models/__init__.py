"""Model definitions, graphs and the model registry."""

from modelbridge.models.catalog import (
    STANDARD_MODEL_NAMES,
    load_model_definitions,
    register_standard_models,
)
from modelbridge.models.definitions import (
    CompatibilityMatrix,
    EntityDefinition,
    FieldConstraints,
    FieldDefinition,
    FieldType,
    Graph,
    ModelDefinition,
    RelationshipDefinition,
    TranslationResult,
)
from modelbridge.models.registry import ModelRegistry

__all__ = [
    "CompatibilityMatrix",
    "EntityDefinition",
    "FieldConstraints",
    "FieldDefinition",
    "FieldType",
    "Graph",
    "ModelDefinition",
    "ModelRegistry",
    "RelationshipDefinition",
    "STANDARD_MODEL_NAMES",
    "TranslationResult",
    "load_model_definitions",
    "register_standard_models",
]
