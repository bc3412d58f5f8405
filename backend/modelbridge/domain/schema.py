"""
Record validator synthesis.

Compiles the field definitions of an entity into a pydantic model class:
- string: length and pattern constraints
- number: range constraints
- boolean, date, array
- enum: a Literal of the declared values (plain string when none are given)
- anything else: Any

Optional fields default to None unless a default is declared.
"""

import keyword
import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, create_model

from modelbridge.core.exceptions import DomainDefinitionError
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.models.definitions import FieldDefinition, FieldType

logger = get_logger(__name__)


class DomainRecord(BaseModel):
    """Base class of every synthesized record model."""

    model_config = {"populate_by_name": True, "extra": "allow"}


_TYPE_MAPPING: dict[FieldType, Any] = {
    FieldType.STRING: str,
    FieldType.NUMBER: float,
    FieldType.BOOLEAN: bool,
    FieldType.DATE: datetime,
    FieldType.ARRAY: list[Any],
    FieldType.OTHER: Any,
}


def _python_name(name: str) -> str:
    """A valid attribute name for a declared field name."""
    candidate = re.sub(r"\W", "_", name)
    if not candidate or candidate[0].isdigit():
        candidate = f"f_{candidate}"
    candidate = candidate.lstrip("_") or "field"
    if candidate.startswith("model_"):
        candidate = f"f_{candidate}"
    if keyword.iskeyword(candidate) or hasattr(BaseModel, candidate):
        candidate = f"{candidate}_"
    return candidate


def _annotation_for(definition: FieldDefinition) -> Any:
    if definition.type == FieldType.ENUM:
        values = definition.constraints.enum_values
        return Literal[tuple(values)] if values else str
    return _TYPE_MAPPING.get(definition.type, Any)


def _field_kwargs(definition: FieldDefinition) -> dict[str, Any]:
    constraints = definition.constraints
    kwargs: dict[str, Any] = {}

    if definition.type == FieldType.STRING:
        if constraints.min is not None:
            kwargs["min_length"] = int(constraints.min)
        if constraints.max is not None:
            kwargs["max_length"] = int(constraints.max)
        if constraints.pattern:
            kwargs["pattern"] = constraints.pattern
    elif definition.type == FieldType.NUMBER:
        if constraints.min is not None:
            kwargs["ge"] = constraints.min
        if constraints.max is not None:
            kwargs["le"] = constraints.max

    if definition.description:
        kwargs["description"] = definition.description
    return kwargs


def build_field(definition: FieldDefinition) -> tuple[str, tuple[Any, Any]]:
    """
    Compile one field definition.

    Returns:
        (attribute name, (annotation, FieldInfo)) ready for create_model
    """
    annotation = _annotation_for(definition)
    kwargs = _field_kwargs(definition)

    attr_name = _python_name(definition.name)
    if attr_name != definition.name:
        kwargs["alias"] = definition.name

    if definition.has_default:
        kwargs["default"] = definition.default
    elif not definition.required:
        kwargs["default"] = None

    if not definition.required and annotation is not Any:
        annotation = annotation | None

    return attr_name, (annotation, Field(**kwargs))


def build_record_model(entity_name: str, fields: list[FieldDefinition]) -> type[DomainRecord]:
    """
    Create the pydantic model class validating records of an entity.

    Raises:
        DomainDefinitionError: If the fields cannot be compiled
    """
    compiled = dict(build_field(f) for f in fields)
    base_name = _python_name(entity_name)
    model_name = f"{base_name[:1].upper()}{base_name[1:]}Record"

    try:
        return create_model(model_name, __base__=DomainRecord, **compiled)
    except Exception as e:
        logger.error(f"Failed to create record model for {entity_name}: {e}")
        raise DomainDefinitionError(f"Invalid field definitions for entity {entity_name}: {e}") from e


def format_issues(error: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into readable messages."""
    issues = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "<record>"
        issues.append(f"{location}: {item.get('msg', 'invalid value')}")
    return issues
