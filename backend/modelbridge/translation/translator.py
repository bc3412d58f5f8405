"""
Translators - strategies converting a graph from one model to another.

A translator is any object satisfying the Translator protocol; translate()
may be a plain function or a coroutine. StandardTranslator is generated for
every ordered pair of registered models; FunctionTranslator wraps a
caller-supplied function as a custom translator.
"""

import copy
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Awaitable, Callable, Protocol

from modelbridge.core.events import TranslationContext
from modelbridge.core.exceptions import ModelNotFoundError
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.matching.matcher import EntityMatcher
from modelbridge.models.definitions import Graph, ModelDefinition, TranslationResult
from modelbridge.models.registry import ModelRegistry
from modelbridge.translation.scoring import TranslationScoring

logger = get_logger(__name__)


def translator_key(source_model: str, target_model: str) -> str:
    """Registry key of an ordered model pair."""
    return f"{source_model}->{target_model}"


class Translator(Protocol):
    source_model: str
    target_model: str
    version: str
    name: str

    def can_translate(self, source: str, target: str) -> bool:
        ...

    def translate(
        self,
        graph: Graph,
        ctx: TranslationContext | None = None,
    ) -> TranslationResult | Awaitable[TranslationResult]:
        ...

    def get_efficiency_score(self) -> float:
        ...


def _rename_record(record: Any, field_map: dict[str, str]) -> Any:
    if not isinstance(record, Mapping):
        return None
    return {field_map[k]: copy.deepcopy(v) for k, v in record.items() if k in field_map}


def _rename_records(records: Any, field_map: dict[str, str]) -> Any:
    if isinstance(records, list):
        renamed = [_rename_record(r, field_map) for r in records]
        return [r for r in renamed if r is not None]
    return _rename_record(records, field_map)


class StandardTranslator:
    """
    Schema-driven translator between two registered models.

    The result graph takes the target model's type, version, schema and
    compatibility hints, and the source metadata plus translatedFrom and
    translationTimestamp. Source entities matched to a target entity have
    their records copied with fields renamed; everything else is reported as
    lossy. Confidence comes from the scoring strategy on every call.
    """

    version = "1.0.0"

    def __init__(
        self,
        source_model: str,
        target_model: str,
        registry: ModelRegistry,
        matcher: EntityMatcher,
        scoring: TranslationScoring,
    ) -> None:
        self.source_model = source_model
        self.target_model = target_model
        self.name = f"standard:{translator_key(source_model, target_model)}"
        self._registry = registry
        self._matcher = matcher
        self._scoring = scoring

    def can_translate(self, source: str, target: str) -> bool:
        return source == self.source_model and target == self.target_model

    def _definitions(self) -> tuple[ModelDefinition, ModelDefinition]:
        source = self._registry.get(self.source_model)
        target = self._registry.get(self.target_model)
        if source is None or target is None:
            missing = self.source_model if source is None else self.target_model
            raise ModelNotFoundError(f"Model {missing} is no longer registered")
        return source, target

    def get_efficiency_score(self) -> float:
        source = self._registry.get(self.source_model)
        target = self._registry.get(self.target_model)
        if source is None or target is None:
            return 0.0
        return self._scoring.efficiency(source, target)

    def translate(self, graph: Graph, ctx: TranslationContext | None = None) -> TranslationResult:
        source_def, target_def = self._definitions()
        source_schema = graph.schema or source_def.schema

        translation_map: dict[str, str] = {}
        lossy_fields: list[str] = []
        matched_targets: set[str] = set()
        data: dict[str, Any] = {}

        for entity_name, entity_def in source_schema.items():
            match = self._matcher.best_match(entity_name, entity_def, target_def.schema)
            if match is None:
                lossy_fields.append(entity_name)
                continue

            matched_targets.add(match.entity)
            translation_map[entity_name] = match.entity
            for field_name in entity_def.field_names:
                target_field = match.field_mappings.get(field_name)
                if target_field is None:
                    lossy_fields.append(f"{entity_name}.{field_name}")
                else:
                    translation_map[f"{entity_name}.{field_name}"] = f"{match.entity}.{target_field}"

            if entity_name in graph.data:
                self._merge(data, match.entity, _rename_records(graph.data[entity_name], match.field_mappings))

        for key in graph.data:
            if key not in source_schema:
                lossy_fields.append(key)

        added_fields = [name for name in target_def.schema if name not in matched_targets]

        translated = Graph(
            model_type=self.target_model,
            version=target_def.version,
            schema=dict(target_def.schema),
            compatibility_map=target_def.compatibility,
            metadata={
                **graph.metadata,
                "translatedFrom": self.source_model,
                "translationTimestamp": datetime.now().isoformat(),
            },
            data=data,
        )

        return TranslationResult(
            success=True,
            translated_graph=translated,
            translation_map=translation_map,
            lossy_fields=lossy_fields,
            added_fields=added_fields,
            confidence=self._scoring.confidence(source_def, target_def),
            metadata={
                "translationType": "standard",
                "translator": self.name,
                "matchedEntities": len(matched_targets),
            },
        )

    @staticmethod
    def _merge(data: dict[str, Any], entity: str, records: Any) -> None:
        if records is None:
            return
        existing = data.get(entity)
        if existing is None:
            data[entity] = records
        elif isinstance(existing, list):
            existing.extend(records if isinstance(records, list) else [records])
        else:
            data[entity] = [existing, *(records if isinstance(records, list) else [records])]


TranslateFunc = Callable[[Graph, TranslationContext | None], Any]


class FunctionTranslator:
    """
    Custom translator backed by a plain function or coroutine function.

    Usage:
        async def content_to_commerce(graph, ctx):
            ...
            return TranslationResult(success=True, translated_graph=out, confidence=0.8)

        orchestrator.register_translator(
            FunctionTranslator("content", "commerce", content_to_commerce, efficiency=0.8)
        )
    """

    def __init__(
        self,
        source_model: str,
        target_model: str,
        func: TranslateFunc,
        efficiency: float = 0.5,
        version: str = "1.0.0",
        name: str | None = None,
    ) -> None:
        self.source_model = source_model
        self.target_model = target_model
        self.version = version
        self.name = name or f"custom:{translator_key(source_model, target_model)}"
        self._func = func
        self._efficiency = efficiency

    def can_translate(self, source: str, target: str) -> bool:
        return source == self.source_model and target == self.target_model

    def translate(self, graph: Graph, ctx: TranslationContext | None = None) -> Any:
        return self._func(graph, ctx)

    def get_efficiency_score(self) -> float:
        return self._efficiency
