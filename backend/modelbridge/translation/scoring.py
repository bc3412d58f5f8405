"""
Translation scoring strategies.

Confidence and efficiency are heuristics. The orchestrator and the standard
translator depend only on the TranslationScoring protocol, so a strategy can
be swapped without touching orchestration.
"""

from typing import Protocol

from modelbridge.core.config import ScoringConfig, get_config
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.matching.matcher import EntityMatcher
from modelbridge.models.definitions import EntityDefinition, ModelDefinition

logger = get_logger(__name__)


class TranslationScoring(Protocol):
    """Scores a translation between two model definitions."""

    def confidence(self, source: ModelDefinition, target: ModelDefinition) -> float:
        ...

    def efficiency(self, source: ModelDefinition, target: ModelDefinition) -> float:
        ...


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class SchemaOverlapScoring:
    """
    Scores translations by how well the two schemas overlap.

    overlap is the mean, over both directions, of each entity's best match
    score against the other schema. Then:

        confidence = min(confidence_cap, floor + (1 - floor) * overlap)
        efficiency = efficiency_floor + (1 - efficiency_floor) * overlap

    With the default cap of 0.95, confidence is strictly below 1.
    """

    def __init__(self, matcher: EntityMatcher | None = None, config: ScoringConfig | None = None) -> None:
        self.matcher = matcher or EntityMatcher()
        self.config = config or get_config().scoring

    def _directional_overlap(
        self,
        source: dict[str, EntityDefinition],
        target: dict[str, EntityDefinition],
    ) -> float:
        if not source or not target:
            return 0.0
        total = 0.0
        for name, definition in source.items():
            total += max(
                self.matcher.score(name, definition, other, other_def)
                for other, other_def in target.items()
            )
        return total / len(source)

    def overlap(self, source: ModelDefinition, target: ModelDefinition) -> float:
        """Symmetric schema overlap in [0, 1]."""
        forward = self._directional_overlap(source.schema, target.schema)
        backward = self._directional_overlap(target.schema, source.schema)
        return _clamp((forward + backward) / 2)

    def confidence(self, source: ModelDefinition, target: ModelDefinition) -> float:
        floor = self.config.confidence_floor
        value = floor + (1.0 - floor) * self.overlap(source, target)
        confidence = _clamp(min(self.config.confidence_cap, value))
        logger.debug(f"Confidence {source.name} -> {target.name}: {confidence:.3f}")
        return confidence

    def efficiency(self, source: ModelDefinition, target: ModelDefinition) -> float:
        floor = self.config.efficiency_floor
        return _clamp(floor + (1.0 - floor) * self.overlap(source, target))
