"""Bridge generation from two model definitions."""

from datetime import datetime

from modelbridge.bridges.bridge import Bridge, BridgeMetadata
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.matching.matcher import EntityMatcher
from modelbridge.models.definitions import ModelDefinition
from modelbridge.translation.scoring import SchemaOverlapScoring, TranslationScoring

logger = get_logger(__name__)


class BridgeFactory:
    """
    Proposes a bridge between two models.

    Mappings are the Entity.field -> Entity.field pairs found by the matcher;
    efficiency and confidence come from the scoring strategy. The bridge has
    no transformations; callers add rules where plain renames are not enough.
    """

    def __init__(self, matcher: EntityMatcher | None = None, scoring: TranslationScoring | None = None) -> None:
        self.matcher = matcher or EntityMatcher()
        self.scoring = scoring or SchemaOverlapScoring(self.matcher)

    def between(self, source: ModelDefinition, target: ModelDefinition) -> Bridge:
        mappings: dict[str, str] = {}
        for entity_name, entity_def in source.schema.items():
            match = self.matcher.best_match(entity_name, entity_def, target.schema)
            if match is None:
                continue
            for source_field, target_field in match.field_mappings.items():
                mappings[f"{entity_name}.{source_field}"] = f"{match.entity}.{target_field}"

        bridge = Bridge(
            id=f"{source.name}-to-{target.name}",
            version="1.0.0",
            source=source.name,
            target=target.name,
            mappings=mappings,
            transformations={},
            metadata=BridgeMetadata(
                efficiency=self.scoring.efficiency(source, target),
                confidence=self.scoring.confidence(source, target),
                last_updated=datetime.now(),
            ),
        )
        logger.info(f"Generated bridge {bridge.id} with {len(mappings)} mappings")
        return bridge
