"""
Workflow suggestion rule table.

Templates are keyed by business domain type. Dispatch never changes when a
template is added: register_template() is the only extension point.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from modelbridge.core.config import CONFIG_DIR
from modelbridge.domain.types import (
    BusinessDomainModel,
    Complexity,
    Priority,
    WorkflowSuggestion,
)
from modelbridge.infrastructure.logging.logging_config import get_logger

logger = get_logger(__name__)

WORKFLOW_TEMPLATES_PATH = CONFIG_DIR / "workflow_templates.yaml"

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


class WorkflowRule(BaseModel):
    """One suggestion rule."""

    name: str
    description: str = ""
    steps: list[str] = Field(default_factory=list)
    required_services: list[str] = Field(default_factory=list)
    min_services: int = Field(0, ge=0)
    entities: list[str] = Field(default_factory=list)
    all_entities: bool = False
    estimated_savings: str = ""
    priority: Priority = "medium"
    complexity: Complexity = "moderate"


def _service_descriptor(service: Any) -> tuple[str, set[str]]:
    """(name, lowercased name + capability tags) of a service description."""
    if isinstance(service, str):
        name, capabilities = service, []
    elif isinstance(service, Mapping):
        name, capabilities = str(service.get("name", "")), service.get("capabilities") or []
    else:
        name, capabilities = str(getattr(service, "name", "")), getattr(service, "capabilities", None) or []
    return name, {name.lower(), *(str(c).lower() for c in capabilities)}


class WorkflowRuleTable:
    """
    Rule table producing workflow suggestions.

    Usage:
        table = WorkflowRuleTable.from_yaml()
        table.register_template("bakery", [{"name": "preorders", "required_services": ["payments"]}])
        suggestions = table.suggest(domain, services)
    """

    def __init__(
        self,
        templates: Mapping[str, Iterable[WorkflowRule | Mapping[str, Any]]] | None = None,
        generic_rules: Iterable[WorkflowRule | Mapping[str, Any]] | None = None,
    ) -> None:
        self._templates: dict[str, list[WorkflowRule]] = {}
        self._generic: list[WorkflowRule] = [self._to_rule(r) for r in generic_rules or []]
        for domain_type, rules in (templates or {}).items():
            self.register_template(domain_type, rules)

    @classmethod
    def from_yaml(cls, config_path: str | Path | None = None) -> "WorkflowRuleTable":
        path = Path(config_path) if config_path else WORKFLOW_TEMPLATES_PATH
        if not path.exists():
            logger.warning(f"Workflow templates not found: {path}, using an empty rule table")
            return cls()

        with open(path, "r", encoding="utf-8") as f:
            config: dict[str, Any] = yaml.safe_load(f) or {}

        table = cls(templates=config.get("templates") or {}, generic_rules=config.get("generic") or [])
        logger.info(f"Loaded workflow templates for {len(table._templates)} domain types from {path}")
        return table

    @staticmethod
    def _to_rule(rule: WorkflowRule | Mapping[str, Any]) -> WorkflowRule:
        return rule if isinstance(rule, WorkflowRule) else WorkflowRule.model_validate(rule)

    def register_template(
        self,
        domain_type: str,
        rules: Iterable[WorkflowRule | Mapping[str, Any]],
    ) -> None:
        """Register (or replace) the rules of a domain type."""
        self._templates[domain_type.lower()] = [self._to_rule(r) for r in rules]
        logger.debug(f"Registered workflow template: {domain_type}")

    def register_generic_rule(self, rule: WorkflowRule | Mapping[str, Any]) -> None:
        self._generic.append(self._to_rule(rule))

    def domain_types(self) -> list[str]:
        return list(self._templates.keys())

    def rules_for(self, domain_type: str) -> list[WorkflowRule]:
        return list(self._templates.get(domain_type.lower(), []))

    def suggest(
        self,
        domain: BusinessDomainModel,
        available_services: Iterable[Any],
    ) -> list[WorkflowSuggestion]:
        """
        Suggest workflows for a domain given the services at hand.

        Returns:
            Suggestions ordered high -> medium -> low, stable within a priority
        """
        services = [_service_descriptor(s) for s in available_services]
        declared = {name.lower(): name for name in domain.entity_names}

        suggestions = []
        for rule in self.rules_for(domain.business_type) + self._generic:
            if len(services) < rule.min_services:
                continue

            used = self._services_for(rule, services)
            if used is None:
                continue

            if rule.all_entities:
                entities = list(domain.entity_names)
            else:
                entities = [declared[e.lower()] for e in rule.entities if e.lower() in declared]

            suggestions.append(WorkflowSuggestion(
                name=rule.name,
                description=rule.description,
                steps=list(rule.steps),
                services=used,
                business_entities=entities,
                estimated_savings=rule.estimated_savings,
                priority=rule.priority,
                complexity=rule.complexity,
            ))

        suggestions.sort(key=lambda s: PRIORITY_ORDER.get(s.priority, 1))
        logger.info(
            f"Suggested {len(suggestions)} workflows for {domain.business_type} "
            f"with {len(services)} services"
        )
        return suggestions

    @staticmethod
    def _services_for(rule: WorkflowRule, services: list[tuple[str, set[str]]]) -> list[str] | None:
        """Names of the services a rule uses, or None when a requirement is unmet."""
        if not rule.required_services:
            return [name for name, _ in services]

        used: list[str] = []
        for requirement in rule.required_services:
            match = next((name for name, tags in services if requirement.lower() in tags), None)
            if match is None:
                return None
            if match not in used:
                used.append(match)
        return used
