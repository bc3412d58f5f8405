"""
Model definitions - schemas, graphs and translation results.

Provides the value types shared by the registry, the matcher, the
translation engine and the context normalizer:
- ModelDefinition / EntityDefinition / FieldDefinition
- CompatibilityMatrix (advisory hints only)
- Graph (a concrete data instance of a model)
- TranslationResult
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel


class FieldType(str, Enum):
    """Supported field types."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    ENUM = "enum"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "FieldType":
        """Map a declared type name onto a FieldType, defaulting to OTHER."""
        if isinstance(value, FieldType):
            return value
        aliases = {
            "str": cls.STRING,
            "text": cls.STRING,
            "int": cls.NUMBER,
            "integer": cls.NUMBER,
            "float": cls.NUMBER,
            "decimal": cls.NUMBER,
            "bool": cls.BOOLEAN,
            "datetime": cls.DATE,
            "timestamp": cls.DATE,
            "list": cls.ARRAY,
        }
        name = str(value or "").lower()
        try:
            return cls(name)
        except ValueError:
            return aliases.get(name, cls.OTHER)


@dataclass
class FieldConstraints:
    """Optional validation constraints of a field."""

    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    enum_values: list[Any] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.min is None and self.max is None and not self.pattern and not self.enum_values


@dataclass
class FieldDefinition:
    """A single field of an entity."""

    name: str
    type: FieldType = FieldType.STRING
    required: bool = False
    constraints: FieldConstraints = field(default_factory=FieldConstraints)
    default: Any = None
    has_default: bool = False
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldDefinition":
        validation = data.get("validation") or {}
        return cls(
            name=str(data["name"]),
            type=FieldType.parse(data.get("type", "string")),
            required=bool(data.get("required", False)),
            constraints=FieldConstraints(
                min=validation.get("min"),
                max=validation.get("max"),
                pattern=validation.get("pattern"),
                enum_values=list(data.get("values") or validation.get("enum") or []),
            ),
            default=data.get("default"),
            has_default="default" in data,
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "required": self.required,
        }
        if not self.constraints.is_empty():
            result["validation"] = {
                k: v for k, v in {
                    "min": self.constraints.min,
                    "max": self.constraints.max,
                    "pattern": self.constraints.pattern,
                }.items() if v is not None
            }
            if self.constraints.enum_values:
                result["values"] = list(self.constraints.enum_values)
        if self.has_default:
            result["default"] = self.default
        return result


@dataclass
class RelationshipDefinition:
    """A relationship from one entity to another."""

    to_entity: str
    kind: str = "one-to-many"
    foreign_key: str | None = None
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "to_entity": self.to_entity,
            "kind": self.kind,
            "foreign_key": self.foreign_key,
            "description": self.description,
        }


@dataclass
class EntityDefinition:
    """Ordered fields plus relationships of one entity."""

    fields: list[FieldDefinition] = field(default_factory=list)
    relationships: list[RelationshipDefinition] = field(default_factory=list)
    operations: list[str] = field(default_factory=list)
    validator: type[BaseModel] | None = None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EntityDefinition":
        fields = []
        for item in data.get("fields", []) or []:
            if isinstance(item, str):
                fields.append(FieldDefinition(name=item))
            else:
                fields.append(FieldDefinition.from_dict(item))

        relationships = [
            RelationshipDefinition(
                to_entity=rel.get("entity") or rel.get("to_entity", ""),
                kind=rel.get("type") or rel.get("kind", "one-to-many"),
                foreign_key=rel.get("foreignKey") or rel.get("foreign_key"),
                description=rel.get("description", ""),
            )
            for rel in data.get("relationships", []) or []
        ]

        return cls(
            fields=fields,
            relationships=relationships,
            operations=list(data.get("operations", []) or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "fields": [f.to_dict() for f in self.fields],
            "relationships": [r.to_dict() for r in self.relationships],
            "operations": list(self.operations),
        }


@dataclass
class CompatibilityMatrix:
    """Advisory compatibility hints; never enforced by the registry."""

    direct_compatible: list[str] = field(default_factory=list)
    translatable_from: list[str] = field(default_factory=list)
    translatable_to: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "CompatibilityMatrix":
        data = data or {}
        return cls(
            direct_compatible=list(data.get("directCompatible", data.get("direct_compatible", []))),
            translatable_from=list(data.get("translatableFrom", data.get("translatable_from", []))),
            translatable_to=list(data.get("translatableTo", data.get("translatable_to", []))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "directCompatible": list(self.direct_compatible),
            "translatableFrom": list(self.translatable_from),
            "translatableTo": list(self.translatable_to),
        }


@dataclass
class ModelDefinition:
    """A named, versioned model registered in the ModelRegistry."""

    name: str
    version: str = "1.0.0"
    schema: dict[str, EntityDefinition] = field(default_factory=dict)
    compatibility: CompatibilityMatrix = field(default_factory=CompatibilityMatrix)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def entity_names(self) -> list[str]:
        return list(self.schema.keys())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModelDefinition":
        entities = data.get("entities", data.get("schema", {})) or {}
        return cls(
            name=str(data["name"]),
            version=str(data.get("version", "1.0.0")),
            schema={
                entity_name: EntityDefinition.from_dict(entity_data or {})
                for entity_name, entity_data in entities.items()
            },
            compatibility=CompatibilityMatrix.from_dict(data.get("compatibility")),
            metadata=dict(data.get("metadata", {}) or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "entities": {name: entity.to_dict() for name, entity in self.schema.items()},
            "compatibility": self.compatibility.to_dict(),
            "metadata": dict(self.metadata),
        }


GRAPH_RESERVED_KEYS = {
    "modelType": "model_type",
    "model_type": "model_type",
    "version": "version",
    "schema": "schema",
    "compatibilityMap": "compatibility_map",
    "compatibility_map": "compatibility_map",
    "metadata": "metadata",
}


@dataclass
class Graph:
    """
    A concrete data instance of a model.

    ``data`` holds the payload keyed by entity name; ``metadata`` is a mutable
    bag carried through translations.
    """

    model_type: str
    version: str = "1.0.0"
    schema: dict[str, EntityDefinition] = field(default_factory=dict)
    compatibility_map: CompatibilityMatrix = field(default_factory=CompatibilityMatrix)
    metadata: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_model(
        cls,
        definition: ModelDefinition,
        data: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "Graph":
        """Create an instance of a registered model definition."""
        return cls(
            model_type=definition.name,
            version=definition.version,
            schema=dict(definition.schema),
            compatibility_map=definition.compatibility,
            metadata=dict(metadata or {}),
            data=dict(data or {}),
        )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Graph":
        """
        Build a graph from a plain mapping.

        Reserved keys (modelType, version, schema, compatibilityMap, metadata)
        populate the graph header; every other top-level key becomes data.
        """
        model_type = raw.get("modelType", raw.get("model_type"))
        schema = raw.get("schema") or {}
        compatibility = raw.get("compatibilityMap", raw.get("compatibility_map"))

        return cls(
            model_type=str(model_type) if model_type is not None else "",
            version=str(raw.get("version", "1.0.0")),
            schema={
                name: entity if isinstance(entity, EntityDefinition) else EntityDefinition.from_dict(entity or {})
                for name, entity in schema.items()
            } if isinstance(schema, Mapping) else {},
            compatibility_map=(
                compatibility if isinstance(compatibility, CompatibilityMatrix)
                else CompatibilityMatrix.from_dict(compatibility if isinstance(compatibility, Mapping) else None)
            ),
            metadata=dict(raw.get("metadata") or {}),
            data={k: v for k, v in raw.items() if k not in GRAPH_RESERVED_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "modelType": self.model_type,
            "version": self.version,
            "schema": {name: entity.to_dict() for name, entity in self.schema.items()},
            "compatibilityMap": self.compatibility_map.to_dict(),
            "metadata": copy.deepcopy(self.metadata),
            **copy.deepcopy(self.data),
        }


@dataclass
class TranslationResult:
    """Outcome of one translation or normalization request."""

    success: bool
    translated_graph: Graph | Mapping[str, Any] | None = None
    translation_map: dict[str, str] = field(default_factory=dict)
    lossy_fields: list[str] = field(default_factory=list)
    added_fields: list[str] = field(default_factory=list)
    confidence: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None

    def __post_init__(self) -> None:
        self.confidence = max(0.0, min(1.0, float(self.confidence)))

    @property
    def translation_type(self) -> str | None:
        return self.metadata.get("translationType")

    @classmethod
    def failure(
        cls,
        error: Exception,
        translation_type: str = "failed",
        **metadata: Any,
    ) -> "TranslationResult":
        """Structured failure; never raised."""
        return cls(
            success=False,
            translated_graph=None,
            translation_map={},
            lossy_fields=[],
            added_fields=[],
            confidence=0.0,
            metadata={"translationType": translation_type, **metadata},
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "translated_graph": (
                self.translated_graph.to_dict()
                if isinstance(self.translated_graph, Graph)
                else self.translated_graph
            ),
            "translation_map": dict(self.translation_map),
            "lossy_fields": list(self.lossy_fields),
            "added_fields": list(self.added_fields),
            "confidence": self.confidence,
            "metadata": dict(self.metadata),
            "error": str(self.error) if self.error else None,
        }
