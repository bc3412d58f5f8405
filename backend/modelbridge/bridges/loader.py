"""
Bridge loading from external configuration.

YAML format:
```yaml
bridges:
  - id: stripe-to-crm
    version: "1.0.0"
    source: stripe
    target: crm
    mappings:
      customer.email: fields.email
    transformations:
      display_name:
        source: customer.name
        target: fields.displayName
        rules:
          - {name: upper, transform: uppercase}
          - name: cents
            transform: to_cents
            when: {path: customer.currency, equals: usd}
    metadata:
      efficiency: 0.9
      confidence: 0.8
      lastUpdated: "2024-06-01T00:00:00"
```

Loading builds the bridge only; registration decides whether it is valid.
"""

import functools
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from modelbridge.bridges.bridge import (
    Bridge,
    BridgeMetadata,
    BridgeRule,
    BridgeTransformation,
    Condition,
)
from modelbridge.bridges.transforms import get_transform
from modelbridge.core.exceptions import BridgeConfigurationError
from modelbridge.core.paths import get_path, has_path, split_path
from modelbridge.infrastructure.logging.logging_config import get_logger

logger = get_logger(__name__)


def _condition(when: Mapping[str, Any]) -> Condition:
    path = when.get("path")
    if not path:
        raise BridgeConfigurationError("Rule condition requires a path")

    if "equals" in when:
        expected = when["equals"]
        return lambda record: get_path(record, path) == expected
    if "exists" in when:
        expected_exists = bool(when["exists"])
        return lambda record: has_path(record, path) == expected_exists

    raise BridgeConfigurationError(f"Rule condition on {path} needs 'equals' or 'exists'")


def _rule(data: Mapping[str, Any], default_field: str) -> BridgeRule:
    transform_name = data.get("transform")
    if not transform_name:
        raise BridgeConfigurationError(f"Rule {data.get('name')!r} has no transform")

    func = get_transform(transform_name)
    args = data.get("args") or {}
    transform = functools.partial(func, **args) if args else func
    when = data.get("when")

    return BridgeRule(
        name=str(data.get("name", transform_name)),
        source_field=str(data.get("source_field", data.get("sourceField", default_field))),
        transform=transform,
        condition=_condition(when) if when else None,
    )


def _transformation(data: Mapping[str, Any]) -> BridgeTransformation:
    source = str(data.get("source", ""))
    parts = split_path(source)
    default_field = parts[-1] if parts else source
    return BridgeTransformation(
        source=source,
        target=str(data.get("target", "")),
        rules=[_rule(r, default_field) for r in data.get("rules") or []],
    )


def _timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if value is None:
        return datetime.now()
    return value


def load_bridge(data: Mapping[str, Any]) -> Bridge:
    """
    Build a Bridge from a configuration mapping.

    Raises:
        BridgeConfigurationError: If a rule references an unknown transform or
            a malformed condition
    """
    metadata = data.get("metadata") or {}
    transformations = data.get("transformations")

    return Bridge(
        id=data.get("id", ""),
        version=str(data.get("version", "")),
        source=data.get("source", ""),
        target=data.get("target", ""),
        mappings=dict(data.get("mappings") or {}),
        transformations={
            name: _transformation(t) for name, t in transformations.items()
        } if isinstance(transformations, Mapping) else {},
        metadata=BridgeMetadata(
            efficiency=metadata.get("efficiency", 0.0),
            confidence=metadata.get("confidence", 0.0),
            last_updated=_timestamp(metadata.get("lastUpdated", metadata.get("last_updated"))),
        ),
    )


def load_bridges_from_yaml(config_path: str | Path) -> list[Bridge]:
    """Load every bridge declared in a YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise BridgeConfigurationError(f"Bridge config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        config: dict[str, Any] = yaml.safe_load(f) or {}

    bridges = [load_bridge(item) for item in config.get("bridges", [])]
    logger.info(f"Loaded {len(bridges)} bridges from {path}")
    return bridges
