"""
Context Normalizer - brings untyped external graphs into a chosen model.

Detection order:
1. An explicit modelType (or model_type) on the external graph
2. The first registered model (registration order) with an entity name
   matching a top-level key of the graph, case-insensitively
"""

from collections.abc import Mapping
from typing import Any

from modelbridge.core.config import ModelBridgeConfig, get_config
from modelbridge.core.events import TranslationContext
from modelbridge.core.exceptions import MalformedGraphError, ModelDetectionError
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.models.definitions import GRAPH_RESERVED_KEYS, Graph, TranslationResult
from modelbridge.models.registry import ModelRegistry
from modelbridge.translation.engine import TranslationOrchestrator

logger = get_logger(__name__)

NORMALIZATION_FAILED = "normalization-failed"
NORMALIZATION_MINIMAL = "normalization-minimal"


class ContextNormalizer:
    """
    Usage:
        normalizer = ContextNormalizer(registry, orchestrator)
        result = await normalizer.normalize_to_context({"Product": [...]}, "creative-portfolio")
    """

    def __init__(
        self,
        model_registry: ModelRegistry,
        orchestrator: TranslationOrchestrator,
        config: ModelBridgeConfig | None = None,
    ) -> None:
        self.models = model_registry
        self.orchestrator = orchestrator
        self.config = config or get_config()

    def detect_model(self, external: Any) -> str | None:
        """Name of the model an external graph belongs to, or None."""
        if isinstance(external, Graph):
            return external.model_type or None
        if not isinstance(external, Mapping):
            return None

        explicit = external.get("modelType", external.get("model_type"))
        if explicit:
            return str(explicit)

        keys = {str(k).lower() for k in external if k not in GRAPH_RESERVED_KEYS}
        for definition in self.models.list_definitions():
            if any(entity.lower() in keys for entity in definition.entity_names):
                return definition.name
        return None

    async def normalize_to_context(
        self,
        external_graph: Any,
        target_model: str,
        ctx: TranslationContext | None = None,
    ) -> TranslationResult:
        """Detect the model of an external graph and translate it. Never raises for bad input."""
        ctx = ctx or TranslationContext()

        if external_graph is None or not isinstance(external_graph, (Mapping, Graph)):
            logger.warning("Normalization rejected: external graph is missing or not an object")
            return TranslationResult.failure(
                MalformedGraphError("External graph is missing or not an object"),
                translation_type=NORMALIZATION_FAILED,
            )

        detected = self.detect_model(external_graph)
        if detected is None:
            logger.warning("Normalization failed: could not detect the source model")
            return TranslationResult.failure(
                ModelDetectionError("Could not detect the model of the external graph"),
                translation_type=NORMALIZATION_FAILED,
            )

        try:
            graph = self._to_graph(external_graph, detected)
        except Exception as e:
            logger.warning(f"Normalization failed: external graph for {detected} is malformed: {e}")
            error = MalformedGraphError(f"External graph is malformed: {e}")
            error.__cause__ = e
            return TranslationResult.failure(
                error,
                translation_type=NORMALIZATION_FAILED,
                detectedModel=detected,
            )

        logger.debug(f"Detected model {detected} for normalization into {target_model}")

        if detected == target_model:
            return TranslationResult(
                success=True,
                translated_graph=graph,
                confidence=self.config.scoring.normalization_confidence,
                metadata={"translationType": NORMALIZATION_MINIMAL, "detectedModel": detected},
            )

        result = await self.orchestrator.translate_graph(graph, target_model, ctx)
        result.metadata["detectedModel"] = detected
        return result

    def _to_graph(self, external: Mapping[str, Any] | Graph, model_name: str) -> Graph:
        if isinstance(external, Graph):
            return external

        parsed = Graph.from_dict(external)
        metadata = {"source": "external", "normalized": True, **parsed.metadata}

        definition = self.models.get(model_name)
        if definition is None:
            parsed.model_type = model_name
            parsed.metadata = metadata
            return parsed
        return Graph.for_model(definition, data=parsed.data, metadata=metadata)
