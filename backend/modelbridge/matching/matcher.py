"""
Entity/Field Matcher - Heuristic similarity between named entities.

The match score of two entities is a weighted sum of:
- name similarity: 1.0 for a case-insensitive exact match, the configured
  synonym score when either name is a listed synonym of the other, else 0
- field overlap: |common field names| / max(|fields_a|, |fields_b|)
- operation overlap (optional, weight 0 by default): same ratio on operations

A match is accepted only when the score exceeds the threshold.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable

from modelbridge.core.config import (
    MatcherConfig,
    MatchWeights,
    ModelBridgeConfig,
    get_config,
    normalize_synonym_table,
)
from modelbridge.infrastructure.logging.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class EntityMatch:
    """Best match of an entity among candidates."""

    entity: str
    score: float
    field_mappings: dict[str, str] = field(default_factory=dict)


def _names_of(items: Iterable[Any] | None) -> list[str]:
    names = []
    for item in items or []:
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, Mapping):
            if "name" in item:
                names.append(str(item["name"]))
        elif hasattr(item, "name"):
            names.append(str(item.name))
    return names


def field_names_of(definition: Any) -> list[str]:
    """Field names of an EntityDefinition, a pydantic entity or a raw mapping."""
    if definition is None:
        return []
    if isinstance(definition, Mapping):
        return _names_of(definition.get("fields"))
    return _names_of(getattr(definition, "fields", None))


def operations_of(definition: Any) -> list[str]:
    if definition is None:
        return []
    if isinstance(definition, Mapping):
        return [str(op) for op in definition.get("operations") or []]
    return [str(op) for op in getattr(definition, "operations", None) or []]


def _overlap(a: list[str], b: list[str]) -> float:
    if not a or not b:
        return 0.0
    set_a = {x.lower() for x in a}
    set_b = {x.lower() for x in b}
    return len(set_a & set_b) / max(len(set_a), len(set_b))


class EntityMatcher:
    """
    Pure heuristic scorer comparing two named entity definitions.

    Usage:
        matcher = EntityMatcher()
        score = matcher.score("customer", stripe_customer, "client", domain_client)
        if matcher.is_match(score):
            fields = matcher.map_fields(stripe_customer, domain_client)
    """

    def __init__(
        self,
        config: MatcherConfig | None = None,
        entity_synonyms: dict[str, list[str]] | None = None,
        field_synonyms: dict[str, list[str]] | None = None,
        compatible_entities: dict[str, list[str]] | None = None,
    ) -> None:
        defaults = get_config()
        self.config = config or defaults.matcher
        self.entity_synonyms = (
            defaults.entity_synonyms if entity_synonyms is None
            else normalize_synonym_table(entity_synonyms)
        )
        self.field_synonyms = (
            defaults.field_synonyms if field_synonyms is None
            else normalize_synonym_table(field_synonyms)
        )
        self.compatible_entities = (
            defaults.compatible_entities if compatible_entities is None
            else normalize_synonym_table(compatible_entities)
        )

    @classmethod
    def from_config(cls, config: ModelBridgeConfig) -> "EntityMatcher":
        return cls(
            config=config.matcher,
            entity_synonyms=config.entity_synonyms,
            field_synonyms=config.field_synonyms,
            compatible_entities=config.compatible_entities,
        )

    @property
    def weights(self) -> MatchWeights:
        return self.config.weights

    @property
    def threshold(self) -> float:
        return self.config.threshold

    def name_similarity(self, name_a: str, name_b: str) -> float:
        a = name_a.lower()
        b = name_b.lower()
        if a == b:
            return 1.0
        if b in self.entity_synonyms.get(a, []) or a in self.entity_synonyms.get(b, []):
            return self.config.synonym_score
        return 0.0

    def field_overlap(self, def_a: Any, def_b: Any) -> float:
        return _overlap(field_names_of(def_a), field_names_of(def_b))

    def operation_overlap(self, def_a: Any, def_b: Any) -> float:
        return _overlap(operations_of(def_a), operations_of(def_b))

    def score(self, entity_a: str, def_a: Any, entity_b: str, def_b: Any) -> float:
        """Weighted match score in [0, 1]."""
        weights = self.weights
        total = (
            self.name_similarity(entity_a, entity_b) * weights.name
            + self.field_overlap(def_a, def_b) * weights.fields
        )
        if weights.operations:
            total += self.operation_overlap(def_a, def_b) * weights.operations
        return max(0.0, min(total, 1.0))

    def is_match(self, score: float) -> bool:
        return score > self.threshold

    def best_match(
        self,
        entity: str,
        definition: Any,
        candidates: Mapping[str, Any],
    ) -> EntityMatch | None:
        """
        Find the best-scoring candidate above the threshold.

        Ties keep the earliest candidate.
        """
        best: EntityMatch | None = None
        for candidate, candidate_def in candidates.items():
            score = self.score(entity, definition, candidate, candidate_def)
            if not self.is_match(score):
                continue
            if best is None or score > best.score:
                best = EntityMatch(
                    entity=candidate,
                    score=score,
                    field_mappings=self.map_fields(definition, candidate_def),
                )

        if best:
            logger.debug(f"Matched entity {entity} -> {best.entity} (score={best.score:.2f})")
        return best

    def fields_related(self, field_a: str, field_b: str) -> bool:
        a = field_a.lower()
        b = field_b.lower()
        if a == b:
            return True
        return b in self.field_synonyms.get(a, []) or a in self.field_synonyms.get(b, [])

    def map_fields(self, def_a: Any, def_b: Any) -> dict[str, str]:
        """Map each field of def_a to the first related field of def_b."""
        targets = field_names_of(def_b)
        mappings: dict[str, str] = {}
        for source in field_names_of(def_a):
            exact = next((t for t in targets if t.lower() == source.lower()), None)
            match = exact or next((t for t in targets if self.fields_related(source, t)), None)
            if match is not None:
                mappings[source] = match
        return mappings

    def are_entities_compatible(self, entity_a: str, entity_b: str) -> bool:
        """Equal names, or both names in the same compatibility group."""
        a = entity_a.lower()
        b = entity_b.lower()
        if a == b:
            return True
        for base, synonyms in self.compatible_entities.items():
            group = {base, *synonyms}
            if a in group and b in group:
                return True
        return False
