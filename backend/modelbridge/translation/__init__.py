"""
Cross-model translation.

Translators, the translator registry, the orchestrator driving single
translation requests, and the normalizer for untyped external graphs.
"""

from modelbridge.translation.engine import TranslationOrchestrator, coerce_graph
from modelbridge.translation.normalizer import ContextNormalizer
from modelbridge.translation.registry import TranslatorRegistry
from modelbridge.translation.scoring import SchemaOverlapScoring, TranslationScoring
from modelbridge.translation.translator import (
    FunctionTranslator,
    StandardTranslator,
    Translator,
    translator_key,
)

__all__ = [
    "ContextNormalizer",
    "FunctionTranslator",
    "SchemaOverlapScoring",
    "StandardTranslator",
    "TranslationOrchestrator",
    "TranslationScoring",
    "Translator",
    "TranslatorRegistry",
    "coerce_graph",
    "translator_key",
]
