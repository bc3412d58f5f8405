"""
Business Domain Compiler.

Turns a declarative business domain description into a registered model:
- Every entity gets the standard fields id, createdAt and updatedAt
- Each entity is compiled into a pydantic record validator
- Default compatibility hints and descriptive metadata are attached

It also maps external service schemas onto a domain and suggests workflows
for the services a business has connected.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationError

from modelbridge.core.config import ModelBridgeConfig, get_config
from modelbridge.core.exceptions import (
    DomainDefinitionError,
    DomainNotFoundError,
    ModelNotFoundError,
)
from modelbridge.domain.schema import build_record_model, format_issues
from modelbridge.domain.types import (
    BusinessDomainModel,
    BusinessEntity,
    BusinessField,
    EntityMapping,
    RecordValidation,
    TranslationMapping,
    WorkflowSuggestion,
)
from modelbridge.domain.workflows import WorkflowRuleTable
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.matching.matcher import EntityMatcher
from modelbridge.models.definitions import (
    CompatibilityMatrix,
    EntityDefinition,
    FieldConstraints,
    FieldDefinition,
    FieldType,
    ModelDefinition,
    RelationshipDefinition,
)
from modelbridge.models.registry import ModelRegistry

logger = get_logger(__name__)

COVERAGE_BONUS = 0.2

_PATCH_KEYS = {"businessType": "business_type", "businessRules": "business_rules"}


def standard_fields() -> list[FieldDefinition]:
    """The fields every business entity carries."""
    return [
        FieldDefinition(
            name="id",
            type=FieldType.STRING,
            required=True,
            constraints=FieldConstraints(min=1),
            description="Record identifier",
        ),
        FieldDefinition(name="createdAt", type=FieldType.DATE, description="Creation time"),
        FieldDefinition(name="updatedAt", type=FieldType.DATE, description="Last update time"),
    ]


def _field_definition(business_field: BusinessField) -> FieldDefinition:
    validation = business_field.validation
    return FieldDefinition(
        name=business_field.name,
        type=FieldType.parse(business_field.type),
        required=business_field.is_required,
        constraints=FieldConstraints(
            min=validation.min if validation else None,
            max=validation.max if validation else None,
            pattern=validation.pattern if validation else None,
            enum_values=list(business_field.values or []),
        ),
        default=business_field.default,
        has_default=business_field.has_default,
        description=business_field.description,
    )


def compile_entity(entity_name: str, entity: BusinessEntity) -> EntityDefinition:
    """Compile one business entity into an entity definition with a validator."""
    fields: dict[str, FieldDefinition] = {f.name: f for f in standard_fields()}
    for business_field in entity.fields:
        fields[business_field.name] = _field_definition(business_field)

    ordered = list(fields.values())
    return EntityDefinition(
        fields=ordered,
        relationships=[
            RelationshipDefinition(
                to_entity=rel.entity,
                kind=rel.type,
                foreign_key=rel.foreign_key,
                description=rel.description,
            )
            for rel in entity.relationships
        ],
        validator=build_record_model(entity_name, ordered),
    )


class BusinessDomainCompiler:
    """
    Compiles business domains into the model registry.

    Usage:
        compiler = BusinessDomainCompiler(registry)
        compiler.register_domain({
            "businessType": "restaurant",
            "entities": {"customer": {"fields": [{"name": "email", "type": "string"}]}},
        })

        mapping = compiler.generate_service_mappings("restaurant", stripe)
        suggestions = compiler.suggest_workflows("restaurant", [stripe, mailchimp])
    """

    def __init__(
        self,
        model_registry: ModelRegistry,
        matcher: EntityMatcher | None = None,
        config: ModelBridgeConfig | None = None,
        workflow_table: WorkflowRuleTable | None = None,
    ) -> None:
        self.registry = model_registry
        self.config = config or get_config()
        self.matcher = matcher or EntityMatcher.from_config(self.config)
        self.workflow_table = workflow_table or WorkflowRuleTable.from_yaml()
        self._domains: dict[str, BusinessDomainModel] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def register_domain(self, description: BusinessDomainModel | Mapping[str, Any]) -> ModelDefinition:
        """
        Compile a business domain and register it under its business type.

        Raises:
            DomainDefinitionError: If the description is malformed
        """
        domain = self._coerce_domain(description)
        logger.info(f"Registering business domain: {domain.business_type}")

        schema = {
            entity_name: compile_entity(entity_name, entity)
            for entity_name, entity in domain.entities.items()
        }
        definition = ModelDefinition(
            name=domain.business_type,
            version=self.config.domain.default_version,
            schema=schema,
            compatibility=self._default_compatibility(),
            metadata=self._domain_metadata(domain),
        )

        self._domains[domain.business_type] = domain
        self.registry.register(definition)

        logger.info(
            f"Business domain registered: {domain.business_type} "
            f"(entities={len(domain.entities)}, workflows={len(domain.workflows)})"
        )
        return definition

    def update_domain(self, name: str, patch: BusinessDomainModel | Mapping[str, Any]) -> ModelDefinition:
        """
        Shallow-merge a patch into a registered domain and re-register it.

        Raises:
            DomainNotFoundError: If the domain was never registered
        """
        existing = self._domains.get(name)
        if existing is None:
            raise DomainNotFoundError(name)

        if isinstance(patch, BaseModel):
            updates = patch.model_dump(exclude_unset=True)
        else:
            updates = {_PATCH_KEYS.get(k, k): v for k, v in patch.items()}

        merged = {**existing.model_dump(exclude_unset=True), **updates}
        return self.register_domain(merged)

    def get_domain(self, name: str) -> BusinessDomainModel | None:
        return self._domains.get(name)

    def is_domain_registered(self, name: str) -> bool:
        return name in self._domains

    def list_domains(self) -> list[str]:
        return list(self._domains.keys())

    def validate_record(self, domain_type: str, entity: str, record: Mapping[str, Any]) -> RecordValidation:
        """
        Validate a record against the compiled validator of a domain entity.

        Raises:
            DomainNotFoundError: If the domain is not registered
            ModelNotFoundError: If the domain has no such entity
        """
        definition = self.registry.get(domain_type)
        if definition is None or domain_type not in self._domains:
            raise DomainNotFoundError(domain_type)

        entity_def = definition.schema.get(entity)
        if entity_def is None or entity_def.validator is None:
            raise ModelNotFoundError(f"Entity {entity} not found in domain {domain_type}")

        try:
            validated = entity_def.validator.model_validate(dict(record))
        except ValidationError as e:
            return RecordValidation(valid=False, entity=entity, issues=format_issues(e))

        return RecordValidation(valid=True, entity=entity, data=validated.model_dump(by_alias=True))

    # =========================================================================
    # Service mapping
    # =========================================================================

    def generate_service_mappings(
        self,
        domain: BusinessDomainModel | Mapping[str, Any] | str,
        service_schema: Any,
    ) -> TranslationMapping:
        """
        Map every entity of a service schema onto its best domain entity.

        Service entities with no domain match above the threshold are left out.
        """
        domain = self._resolve_domain(domain)
        service_name, service_version, service_entities = _service_parts(service_schema)

        logger.info(f"Generating service mappings: {service_name} -> {domain.business_type}")

        mappings: dict[str, EntityMapping] = {}
        for service_entity, service_def in service_entities.items():
            match = self.matcher.best_match(service_entity, service_def, domain.entities)
            if match is None:
                continue
            mappings[service_entity] = EntityMapping(
                mapping=f"business.{match.entity}",
                fields=match.field_mappings,
                confidence=match.score,
            )

        confidence = self._mapping_confidence(mappings, len(domain.entities))
        logger.info(
            f"Service mappings generated: {len(mappings)} mappings, "
            f"confidence {confidence * 100:.1f}% ({service_name} -> {domain.business_type})"
        )

        return TranslationMapping(
            source_model=service_name,
            target_model=domain.business_type,
            mappings=mappings,
            confidence=confidence,
            bidirectional=True,
            metadata={
                "generatedFrom": "business-context",
                "timestamp": datetime.now().isoformat(),
                "businessType": domain.business_type,
                "serviceVersion": service_version,
            },
        )

    @staticmethod
    def _mapping_confidence(mappings: dict[str, EntityMapping], domain_entity_count: int) -> float:
        if not mappings:
            return 0.0
        average = sum(m.confidence for m in mappings.values()) / len(mappings)
        coverage = len(mappings) / domain_entity_count if domain_entity_count else 0.0
        return min(average + min(COVERAGE_BONUS, coverage * COVERAGE_BONUS), 1.0)

    def suggest_workflows(
        self,
        domain: BusinessDomainModel | Mapping[str, Any] | str,
        available_services: Iterable[Any],
    ) -> list[WorkflowSuggestion]:
        return self.workflow_table.suggest(self._resolve_domain(domain), list(available_services))

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _coerce_domain(description: BusinessDomainModel | Mapping[str, Any]) -> BusinessDomainModel:
        if isinstance(description, BusinessDomainModel):
            return description
        try:
            return BusinessDomainModel.model_validate(description)
        except ValidationError as e:
            raise DomainDefinitionError(f"Invalid business domain description: {e}") from e

    def _resolve_domain(self, domain: BusinessDomainModel | Mapping[str, Any] | str) -> BusinessDomainModel:
        if isinstance(domain, str):
            resolved = self._domains.get(domain)
            if resolved is None:
                raise DomainNotFoundError(domain)
            return resolved
        return self._coerce_domain(domain)

    def _default_compatibility(self) -> CompatibilityMatrix:
        domain_config = self.config.domain
        return CompatibilityMatrix(
            direct_compatible=[domain_config.universal_tag],
            translatable_from=list(domain_config.translatable_from),
            translatable_to=list(domain_config.translatable_to),
        )

    @staticmethod
    def _domain_metadata(domain: BusinessDomainModel) -> dict[str, Any]:
        return {
            "businessDescription": domain.description,
            "generatedFrom": "business-context",
            "entities": domain.entity_names,
            "workflows": [w.name for w in domain.workflows],
            "businessRules": list(domain.business_rules),
            "relationships": [
                {
                    "from": entity_name,
                    "to": rel.entity,
                    "type": rel.type,
                    "foreignKey": rel.foreign_key,
                    "description": rel.description,
                }
                for entity_name, entity in domain.entities.items()
                for rel in entity.relationships
            ],
            "createdAt": datetime.now().isoformat(),
        }


def _service_parts(service_schema: Any) -> tuple[str, str, Mapping[str, Any]]:
    """(name, version, entities) of a ServiceCapability or a raw mapping."""
    if isinstance(service_schema, Mapping):
        return (
            str(service_schema.get("name", "")),
            str(service_schema.get("version", "")),
            service_schema.get("entities") or {},
        )
    return (
        str(getattr(service_schema, "name", "")),
        str(getattr(service_schema, "version", "")),
        getattr(service_schema, "entities", None) or {},
    )
