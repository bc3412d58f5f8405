"""
Business domains.

Compiles declarative business descriptions into registered models, maps
external service schemas onto them and suggests workflows.
"""

from modelbridge.domain.compiler import BusinessDomainCompiler, compile_entity, standard_fields
from modelbridge.domain.schema import DomainRecord, build_record_model
from modelbridge.domain.services import ServiceCapability, load_known_services
from modelbridge.domain.types import (
    BusinessDomainModel,
    BusinessEntity,
    BusinessField,
    BusinessRelationship,
    BusinessWorkflow,
    EntityMapping,
    RecordValidation,
    TranslationMapping,
    WorkflowSuggestion,
)
from modelbridge.domain.workflows import WorkflowRule, WorkflowRuleTable

__all__ = [
    "BusinessDomainCompiler",
    "BusinessDomainModel",
    "BusinessEntity",
    "BusinessField",
    "BusinessRelationship",
    "BusinessWorkflow",
    "DomainRecord",
    "EntityMapping",
    "RecordValidation",
    "ServiceCapability",
    "TranslationMapping",
    "WorkflowRule",
    "WorkflowRuleTable",
    "WorkflowSuggestion",
    "build_record_model",
    "compile_entity",
    "load_known_services",
    "standard_fields",
]
