"""
Service catalogue.

Describes external services (their entities, authentication shape, rate
limits and capability tags) and turns them into model definitions so a
service schema can be registered and translated like any other model.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from modelbridge.core.config import CONFIG_DIR
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.models.definitions import (
    CompatibilityMatrix,
    EntityDefinition,
    FieldDefinition,
    FieldType,
    ModelDefinition,
)

logger = get_logger(__name__)

SERVICES_PATH = CONFIG_DIR / "services.yaml"


class ServiceField(BaseModel):
    name: str
    type: str = "string"
    required: bool = False


class ServiceEntity(BaseModel):
    fields: list[ServiceField] = Field(default_factory=list)
    operations: list[str] = Field(default_factory=list)


class ServiceAuthentication(BaseModel):
    type: str = Field("api-key", description="api-key, bearer, oauth, basic")
    required: bool = True


class RateLimit(BaseModel):
    requests: int = Field(..., ge=1)
    period: str = "1 second"


class ServiceCapability(BaseModel):
    """Description of an external service schema."""

    name: str = Field(..., min_length=1)
    version: str = "1.0.0"
    description: str = ""
    entities: dict[str, ServiceEntity] = Field(default_factory=dict)
    authentication: ServiceAuthentication = Field(default_factory=ServiceAuthentication)
    rate_limit: RateLimit | None = Field(None, alias="rateLimit")
    capabilities: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def has_capability(self, tag: str) -> bool:
        tag = tag.lower()
        return self.name.lower() == tag or tag in (c.lower() for c in self.capabilities)

    def to_model_definition(self) -> ModelDefinition:
        """Build a registrable model definition from this service description."""
        schema = {
            entity_name: EntityDefinition(
                fields=[
                    FieldDefinition(
                        name=f.name,
                        type=FieldType.parse(f.type),
                        required=f.required,
                    )
                    for f in entity.fields
                ],
                operations=list(entity.operations),
            )
            for entity_name, entity in self.entities.items()
        }
        return ModelDefinition(
            name=self.name,
            version=self.version,
            schema=schema,
            compatibility=CompatibilityMatrix(direct_compatible=[self.name]),
            metadata={
                "description": self.description,
                "capabilities": list(self.capabilities),
                "authentication": self.authentication.model_dump(),
                "generatedFrom": "service-capability",
            },
        )


def load_known_services(config_path: str | Path | None = None) -> dict[str, ServiceCapability]:
    """Read the service catalogue, keyed by service name."""
    path = Path(config_path) if config_path else SERVICES_PATH
    if not path.exists():
        logger.warning(f"Service catalogue not found: {path}")
        return {}

    with open(path, "r", encoding="utf-8") as f:
        config: dict[str, Any] = yaml.safe_load(f) or {}

    services = {}
    for item in config.get("services", []):
        service = ServiceCapability.model_validate(item)
        services[service.name] = service

    logger.info(f"Loaded {len(services)} known services from {path}")
    return services
