"""
Business domain input types.

These describe what an external business-context loader hands to the
compiler, and what the compiler hands back (service mappings, workflow
suggestions). Both camelCase and snake_case keys are accepted.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


Priority = Literal["low", "medium", "high"]
Complexity = Literal["simple", "moderate", "complex"]

_MODEL_CONFIG = {"populate_by_name": True, "extra": "allow"}


class FieldValidation(BaseModel):
    """Validation constraints of a business field."""

    min: float | None = Field(default=None, description="Minimum length or value")
    max: float | None = Field(default=None, description="Maximum length or value")
    pattern: str | None = Field(default=None, description="Regular expression for strings")


class BusinessField(BaseModel):
    """A declared field of a business entity."""

    name: str = Field(..., min_length=1, description="Field name")
    type: str = Field("string", description="string, number, boolean, date, array, enum")
    required: bool = Field(False, description="Whether the field is required")
    optional: bool = Field(False, description="Forces the field optional even if required")
    values: list[Any] | None = Field(None, description="Allowed values for enum fields")
    validation: FieldValidation | None = Field(None, description="Length/range/pattern constraints")
    default: Any = Field(None, description="Default value")
    description: str = Field("", description="Field description")

    model_config = _MODEL_CONFIG

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    @property
    def is_required(self) -> bool:
        return self.required and not self.optional


class BusinessRelationship(BaseModel):
    """A relationship declared on a business entity."""

    entity: str = Field(..., description="Target entity name")
    type: str = Field("one-to-many", description="Relationship kind")
    foreign_key: str | None = Field(None, alias="foreignKey", description="Foreign key field")
    description: str = Field("", description="Relationship description")

    model_config = _MODEL_CONFIG


class BusinessEntity(BaseModel):
    """A business entity: declared fields, relationships and business rules."""

    fields: list[BusinessField] = Field(default_factory=list)
    relationships: list[BusinessRelationship] = Field(default_factory=list)
    business_rules: list[str] = Field(default_factory=list, alias="businessRules")

    model_config = _MODEL_CONFIG


class BusinessWorkflow(BaseModel):
    """A workflow declared by the business."""

    name: str = Field(..., description="Workflow name")
    description: str = Field("", description="Workflow description")
    steps: list[str] = Field(default_factory=list, description="Ordered step descriptions")

    model_config = _MODEL_CONFIG


class BusinessDomainModel(BaseModel):
    """
    Declarative description of a business domain.

    Example:
        BusinessDomainModel.model_validate({
            "businessType": "restaurant",
            "description": "Neighbourhood bistro",
            "entities": {
                "customer": {"fields": [{"name": "email", "type": "string", "required": True}]},
            },
        })
    """

    business_type: str = Field(..., min_length=1, alias="businessType", description="Domain type name")
    description: str = Field("", description="Free-form business description")
    entities: dict[str, BusinessEntity] = Field(default_factory=dict)
    workflows: list[BusinessWorkflow] = Field(default_factory=list)
    business_rules: list[str] = Field(default_factory=list, alias="businessRules")

    model_config = _MODEL_CONFIG

    @property
    def entity_names(self) -> list[str]:
        return list(self.entities.keys())


class EntityMapping(BaseModel):
    """Mapping of one service entity onto a business entity."""

    mapping: str = Field(..., description="Target reference, e.g. business.customer")
    fields: dict[str, str] = Field(default_factory=dict, description="Service field -> business field")
    confidence: float = Field(0.0, ge=0.0, le=1.0, description="Matcher score")


class TranslationMapping(BaseModel):
    """Service-to-domain mapping produced by generate_service_mappings."""

    source_model: str = Field(..., description="Service name")
    target_model: str = Field(..., description="Business domain type")
    mappings: dict[str, EntityMapping] = Field(default_factory=dict)
    confidence: float = Field(0.0, ge=0.0, le=1.0, description="Overall mapping confidence")
    bidirectional: bool = Field(True)
    metadata: dict[str, Any] = Field(default_factory=dict)


class WorkflowSuggestion(BaseModel):
    """A suggested automation workflow."""

    name: str
    description: str = ""
    steps: list[str] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list)
    business_entities: list[str] = Field(default_factory=list)
    estimated_savings: str = ""
    priority: Priority = "medium"
    complexity: Complexity = "moderate"


class RecordValidation(BaseModel):
    """Outcome of validating one record against a compiled entity."""

    valid: bool
    entity: str
    issues: list[str] = Field(default_factory=list)
    data: dict[str, Any] | None = None
