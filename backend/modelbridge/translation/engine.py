"""
Translation Orchestrator - drives a single graph translation end to end.

Flow of translate_graph():
1. Same registered model on both sides: return the caller's graph object (no events)
2. Emit a start progress event
3. Missing translator or malformed graph: structured failure
4. Invoke the translator once (awaiting it when it is a coroutine); an
   exception becomes a structured failure carrying TranslationExecutionError
5. Emit a completion progress event whose message mentions the confidence
"""

import inspect
import time
from collections.abc import Mapping
from typing import Any

from modelbridge.core.config import ModelBridgeConfig, get_config
from modelbridge.core.events import ProgressEvent, TranslationContext
from modelbridge.core.exceptions import (
    MalformedGraphError,
    ModelNotFoundError,
    TranslationExecutionError,
    TranslatorNotFoundError,
)
from modelbridge.infrastructure.logging.logging_config import get_logger, log_context
from modelbridge.matching.matcher import EntityMatcher
from modelbridge.models.definitions import Graph, TranslationResult
from modelbridge.models.registry import ModelRegistry
from modelbridge.translation.registry import TranslatorRegistry
from modelbridge.translation.scoring import SchemaOverlapScoring, TranslationScoring
from modelbridge.translation.translator import StandardTranslator, Translator

logger = get_logger(__name__)

PROGRESS_STAGE = "transform"
PROGRESS_STEP = "graph-translation"


def coerce_graph(graph: Any) -> Graph | None:
    """A Graph for a Graph or mapping input, None for anything else."""
    if isinstance(graph, Graph):
        return graph
    if isinstance(graph, Mapping):
        return Graph.from_dict(graph)
    return None


class TranslationOrchestrator:
    """
    Holds one translator per ordered pair of registered models.

    Standard translators are generated at construction for every ordered
    pair of the models registered at that moment. Custom translators replace
    them through register_translator().

    Usage:
        orchestrator = TranslationOrchestrator(registry)
        result = await orchestrator.translate_graph(graph, "commerce", TranslationContext())
    """

    def __init__(
        self,
        model_registry: ModelRegistry,
        translator_registry: TranslatorRegistry | None = None,
        scoring: TranslationScoring | None = None,
        matcher: EntityMatcher | None = None,
        config: ModelBridgeConfig | None = None,
    ) -> None:
        config = config or get_config()
        self.models = model_registry
        self.matcher = matcher or EntityMatcher.from_config(config)
        self.scoring = scoring or SchemaOverlapScoring(self.matcher, config.scoring)
        self.translators = translator_registry if translator_registry is not None else TranslatorRegistry()

        added = self.refresh_standard_translators()
        logger.info(f"Translation orchestrator ready: {len(self.models)} models, {added} standard translators")

    def refresh_standard_translators(self) -> int:
        """
        Add a standard translator for every ordered pair that has none.

        Returns:
            Number of translators added
        """
        names = self.models.list_names()
        added = 0
        for source in names:
            for target in names:
                if source == target or self.translators.get(source, target) is not None:
                    continue
                self.translators.register(
                    StandardTranslator(source, target, self.models, self.matcher, self.scoring)
                )
                added += 1
        return added

    def register_translator(self, translator: Translator) -> None:
        self.translators.register(translator)

    def can_communicate_directly(self, source_model: str, target_model: str) -> bool:
        return source_model == target_model and self.models.is_registered(source_model)

    def get_efficiency(self, source_model: str, target_model: str) -> float:
        """1 for the same model, the translator's score for a known pair, else 0."""
        if source_model == target_model:
            return 1.0
        translator = self.translators.get(source_model, target_model)
        if translator is None:
            return 0.0
        return max(0.0, min(1.0, float(translator.get_efficiency_score())))

    def get_available_translators(self) -> list[str]:
        return [
            f"{t.source_model}->{t.target_model}"
            for t in self.translators
            if t.source_model != t.target_model
        ]

    def generate_bridge(self, source_model: str, target_model: str) -> Any:
        """
        Propose a Bridge between two registered models.

        Raises:
            ModelNotFoundError: If either model is not registered
        """
        from modelbridge.bridges.factory import BridgeFactory

        source = self.models.get(source_model)
        target = self.models.get(target_model)
        if source is None or target is None:
            missing = source_model if source is None else target_model
            raise ModelNotFoundError(f"Model {missing} is not registered")
        return BridgeFactory(self.matcher, self.scoring).between(source, target)

    async def translate_graph(
        self,
        graph: Graph | Mapping[str, Any] | None,
        target_model: str,
        ctx: TranslationContext | None = None,
    ) -> TranslationResult:
        """Translate a graph into the target model. Never raises for bad input."""
        ctx = ctx or TranslationContext()
        malformed: Exception | None = None
        try:
            source_graph = coerce_graph(graph)
        except Exception as e:
            logger.warning(f"Rejected malformed graph for translation to {target_model}: {e}")
            source_graph, malformed = None, e
        source_model = source_graph.model_type if source_graph else ""

        if source_model and self.can_communicate_directly(source_model, target_model):
            return TranslationResult(
                success=True,
                translated_graph=graph,
                confidence=1.0,
                metadata={"translationType": "direct"},
            )

        start = time.perf_counter()
        ctx.events.emit(ProgressEvent(
            stage=PROGRESS_STAGE,
            step=PROGRESS_STEP,
            processed=0,
            total=1,
            percentage=0.0,
            message=f"Translating {source_model or 'unknown model'} to {target_model}",
        ))

        if not source_model:
            if malformed is not None:
                error = MalformedGraphError(f"Graph is malformed: {malformed}")
            else:
                error = MalformedGraphError("Graph is missing or has no modelType")
            error.__cause__ = malformed
            result = TranslationResult.failure(error)
        else:
            translator = self.translators.get(source_model, target_model)
            if translator is None:
                result = TranslationResult.failure(TranslatorNotFoundError(source_model, target_model))
            else:
                with log_context(source=source_model, target=target_model, run_id=ctx.run_id):
                    result = await self._invoke(translator, source_graph, ctx)

        result.metadata["duration"] = (time.perf_counter() - start) * 1000

        if result.success:
            message = f"Translation completed with {result.confidence:.2f} confidence"
        else:
            logger.warning(f"Translation {source_model or '?'} -> {target_model} failed: {result.error}")
            message = f"Translation failed with {result.confidence:.2f} confidence: {result.error}"

        ctx.events.emit(ProgressEvent(
            stage=PROGRESS_STAGE,
            step=PROGRESS_STEP,
            processed=1,
            total=1,
            percentage=100.0,
            message=message,
        ))
        return result

    async def _invoke(self, translator: Translator, graph: Graph, ctx: TranslationContext) -> TranslationResult:
        try:
            outcome = translator.translate(graph, ctx)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return self._coerce_result(outcome, translator)
        except Exception as e:
            logger.error_with_context(
                f"Translator {translator.name} failed: {e}",
                {"translator": translator.name},
                exc_info=True,
            )
            error = TranslationExecutionError(f"Translator {translator.name} failed: {e}")
            error.__cause__ = e
            return TranslationResult.failure(error, translator=translator.name)

    @staticmethod
    def _coerce_result(outcome: Any, translator: Translator) -> TranslationResult:
        if isinstance(outcome, TranslationResult):
            outcome.metadata.setdefault("translationType", "custom")
            return outcome
        if isinstance(outcome, Graph):
            return TranslationResult(
                success=True,
                translated_graph=outcome,
                confidence=translator.get_efficiency_score(),
                metadata={"translationType": "custom", "translator": translator.name},
            )
        raise TypeError(f"Translator returned {type(outcome).__name__}, expected TranslationResult")
