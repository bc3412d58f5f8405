"""Declarative bridges: mappings plus rule chains applied to single records."""

from modelbridge.bridges.bridge import (
    Bridge,
    BridgeExecutionResult,
    BridgeExecutor,
    BridgeMetadata,
    BridgeRule,
    BridgeTransformation,
    execute_bridge,
    validate_bridge,
)
from modelbridge.bridges.factory import BridgeFactory
from modelbridge.bridges.loader import load_bridge, load_bridges_from_yaml
from modelbridge.bridges.registry import BridgeRegistry
from modelbridge.bridges.transforms import get_transform, list_transforms, register_transform

__all__ = [
    "Bridge",
    "BridgeExecutionResult",
    "BridgeExecutor",
    "BridgeFactory",
    "BridgeMetadata",
    "BridgeRegistry",
    "BridgeRule",
    "BridgeTransformation",
    "execute_bridge",
    "get_transform",
    "list_transforms",
    "load_bridge",
    "load_bridges_from_yaml",
    "register_transform",
    "validate_bridge",
]
