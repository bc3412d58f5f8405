"""Core configuration, errors, progress events and path helpers."""

from modelbridge.core.config import (
    MatchWeights,
    ModelBridgeConfig,
    get_config,
    load_config,
    reload_config,
)
from modelbridge.core.events import ProgressEmitter, ProgressEvent, TranslationContext
from modelbridge.core.exceptions import (
    BridgeConfigurationError,
    BridgeTransformationError,
    DomainDefinitionError,
    DomainNotFoundError,
    ExecutionFailure,
    LookupFailure,
    MalformedGraphError,
    ModelBridgeError,
    ModelDetectionError,
    ModelNotFoundError,
    TranslationExecutionError,
    TranslatorNotFoundError,
    ValidationFailure,
)
from modelbridge.core.paths import MISSING, get_path, has_path, set_path

__all__ = [
    "BridgeConfigurationError",
    "BridgeTransformationError",
    "DomainDefinitionError",
    "DomainNotFoundError",
    "ExecutionFailure",
    "LookupFailure",
    "MISSING",
    "MalformedGraphError",
    "MatchWeights",
    "ModelBridgeConfig",
    "ModelBridgeError",
    "ModelDetectionError",
    "ModelNotFoundError",
    "ProgressEmitter",
    "ProgressEvent",
    "TranslationContext",
    "TranslationExecutionError",
    "TranslatorNotFoundError",
    "ValidationFailure",
    "get_config",
    "get_path",
    "has_path",
    "load_config",
    "reload_config",
    "set_path",
]
