"""
Bridges - standalone mapping and rule-chain definitions between two schemas.

A bridge is independent of the model registry. It is validated once and can
then be executed against any number of records:

    bridge = Bridge(
        id="stripe-to-crm",
        version="1.0.0",
        source="stripe",
        target="crm",
        mappings={"customer.email": "fields.email"},
        transformations={
            "display_name": BridgeTransformation(
                source="customer.name",
                target="fields.displayName",
                rules=[BridgeRule("upper", "name", str.upper)],
            ),
        },
        metadata=BridgeMetadata(efficiency=0.9, confidence=0.8),
    )

    result = await BridgeExecutor(bridge).execute({"customer": {"email": "a@b.com", "name": "john"}})
"""

import copy
import inspect
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from modelbridge.core.exceptions import BridgeConfigurationError, BridgeTransformationError
from modelbridge.core.paths import MISSING, get_path, set_path, split_path
from modelbridge.infrastructure.logging.logging_config import get_logger

logger = get_logger(__name__)

Transform = Callable[[Any], Any]
Condition = Callable[[Mapping[str, Any]], Any]


@dataclass
class BridgeRule:
    """One step of a transformation chain."""

    name: str
    source_field: str
    transform: Transform
    condition: Condition | None = None


@dataclass
class BridgeTransformation:
    """Reads a source path, runs the rules in order and writes the target path."""

    source: str
    target: str
    rules: list[BridgeRule] = field(default_factory=list)


@dataclass
class BridgeMetadata:
    efficiency: float = 0.0
    confidence: float = 0.0
    last_updated: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "efficiency": self.efficiency,
            "confidence": self.confidence,
            "lastUpdated": self.last_updated.isoformat() if isinstance(self.last_updated, datetime) else self.last_updated,
        }


@dataclass
class Bridge:
    """
    Mapping plus transformation definition between a source and a target schema.

    Fields are not type-checked on construction; validate_bridge() decides
    whether a bridge is usable.
    """

    id: str
    version: str
    source: str
    target: str
    mappings: dict[str, str] = field(default_factory=dict)
    transformations: dict[str, BridgeTransformation] = field(default_factory=dict)
    metadata: BridgeMetadata = field(default_factory=BridgeMetadata)


@dataclass
class BridgeExecutionResult:
    data: dict[str, Any]
    metadata: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "metadata": self.metadata}


def _attr(obj: Any, *names: str) -> Any:
    """First present attribute (or mapping key) among names, else MISSING."""
    for name in names:
        if isinstance(obj, Mapping):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return MISSING


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_timestamp(value: Any) -> bool:
    if isinstance(value, datetime):
        return True
    if isinstance(value, str):
        try:
            datetime.fromisoformat(value)
        except ValueError:
            return False
        return True
    return False


def _is_path(value: Any) -> bool:
    return isinstance(value, str) and bool(split_path(value))


def _is_valid_rule(rule: Any) -> bool:
    if not callable(_attr(rule, "transform")):
        return False
    condition = _attr(rule, "condition")
    return condition is MISSING or condition is None or callable(condition)


def _is_valid_transformation(transformation: Any) -> bool:
    if not _is_path(_attr(transformation, "source")) or not _is_path(_attr(transformation, "target")):
        return False
    rules = _attr(transformation, "rules")
    if rules is MISSING:
        return True
    return isinstance(rules, (list, tuple)) and all(_is_valid_rule(rule) for rule in rules)


def validate_bridge(bridge: Any) -> bool:
    """
    Check that a bridge is usable.

    Requires non-empty string id, version, source and target; mappings from
    path to path; transformations with source and target paths and a list of
    rules, each with a callable transform; numeric efficiency and confidence;
    and a valid last-updated timestamp. Both dataclass and mapping shaped
    bridges are accepted. Never raises.
    """
    if bridge is None:
        return False

    for name in ("id", "version", "source", "target"):
        value = _attr(bridge, name)
        if not isinstance(value, str) or not value:
            logger.debug(f"Bridge invalid: {name} must be a non-empty string")
            return False

    mappings = _attr(bridge, "mappings")
    transformations = _attr(bridge, "transformations")
    for name, value in (("mappings", mappings), ("transformations", transformations)):
        if not isinstance(value, Mapping):
            logger.debug(f"Bridge invalid: {name} must be a mapping")
            return False

    for source_path, target_path in mappings.items():
        if not _is_path(source_path) or not _is_path(target_path):
            logger.debug(f"Bridge invalid: mapping {source_path!r} -> {target_path!r} must join two paths")
            return False

    for name, transformation in transformations.items():
        if not _is_valid_transformation(transformation):
            logger.debug(f"Bridge invalid: transformation {name!r} is malformed")
            return False

    metadata = _attr(bridge, "metadata")
    if metadata is MISSING or metadata is None:
        return False
    if not _is_number(_attr(metadata, "efficiency")) or not _is_number(_attr(metadata, "confidence")):
        logger.debug("Bridge invalid: efficiency and confidence must be numbers")
        return False
    if not _is_timestamp(_attr(metadata, "last_updated", "lastUpdated")):
        logger.debug("Bridge invalid: lastUpdated must be a timestamp")
        return False

    return True


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class BridgeExecutor:
    """Applies a bridge to one record at a time. The bridge is never mutated."""

    def __init__(self, bridge: Bridge) -> None:
        self.bridge = bridge

    def validate(self) -> bool:
        return validate_bridge(self.bridge)

    async def execute(self, record: Mapping[str, Any]) -> BridgeExecutionResult:
        """
        Apply mappings then transformations to a record.

        Raises:
            BridgeConfigurationError: If the bridge does not validate
            BridgeTransformationError: If a rule raises; the rule's exception is chained
        """
        bridge_id = _attr(self.bridge, "id")
        if not self.validate():
            raise BridgeConfigurationError(f"Bridge {None if bridge_id is MISSING else bridge_id!r} is invalid")

        start = time.perf_counter()
        data: dict[str, Any] = {}

        for source_path, target_path in _attr(self.bridge, "mappings").items():
            value = get_path(record, source_path)
            if value is MISSING:
                continue
            set_path(data, target_path, copy.deepcopy(value))

        for name, transformation in _attr(self.bridge, "transformations").items():
            source_path = _attr(transformation, "source")
            value = get_path(record, source_path)
            if value is MISSING:
                logger.debug(f"Skipping transformation {name}: {source_path} not present")
                continue

            rules = _attr(transformation, "rules")
            value = copy.deepcopy(value)
            for rule in [] if rules is MISSING else rules:
                rule_name = _attr(rule, "name")
                rule_name = name if rule_name is MISSING else str(rule_name)
                condition = _attr(rule, "condition")
                try:
                    if condition not in (MISSING, None) and not await _resolve(condition(record)):
                        continue
                    value = await _resolve(_attr(rule, "transform")(value))
                except Exception as e:
                    logger.error_with_context(
                        f"Bridge {bridge_id} rule {rule_name} failed: {e}",
                        {"bridge": bridge_id, "transformation": name, "rule": rule_name},
                    )
                    raise BridgeTransformationError(str(e), rule_name=rule_name) from e

            set_path(data, _attr(transformation, "target"), value)

        duration = (time.perf_counter() - start) * 1000
        logger.debug(f"Executed bridge {bridge_id} in {duration:.2f}ms")

        return BridgeExecutionResult(
            data=data,
            metadata={
                "timestamp": datetime.now().isoformat(),
                "duration": duration,
                "source": _attr(self.bridge, "source"),
                "target": _attr(self.bridge, "target"),
                "stats": {"processed": 1, "succeeded": 1, "failed": 0},
            },
        )


async def execute_bridge(bridge: Bridge, record: Mapping[str, Any]) -> BridgeExecutionResult:
    return await BridgeExecutor(bridge).execute(record)
