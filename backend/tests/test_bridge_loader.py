"""
Tests for loading bridges from configuration and the named transforms.
"""

from datetime import date, datetime

import pytest

from modelbridge.bridges.bridge import execute_bridge, validate_bridge
from modelbridge.bridges.loader import load_bridge, load_bridges_from_yaml
from modelbridge.bridges.registry import BridgeRegistry
from modelbridge.bridges.transforms import (
    get_transform,
    iso_date,
    list_transforms,
    register_transform,
    split,
    to_cents,
    to_number,
)
from modelbridge.core.exceptions import BridgeConfigurationError


BRIDGES_YAML = """
bridges:
  - id: shop-to-crm
    version: "1.0.0"
    source: shopify
    target: crm
    mappings:
      order.email: contact.email
    transformations:
      total:
        source: order.total
        target: invoice.amountCents
        rules:
          - name: cents
            transform: to_cents
            when: {path: order.currency, equals: USD}
      tags:
        source: order.tags
        target: contact.tags
        rules:
          - {name: split, transform: split, args: {separator: ";"}}
    metadata:
      efficiency: 0.9
      confidence: 0.8
      lastUpdated: "2024-06-01T00:00:00"
  - id: crm-to-mail
    version: "1.0.0"
    source: crm
    target: mailchimp
    mappings:
      contact.email: member.email_address
    metadata:
      efficiency: 0.7
      confidence: 0.6
      lastUpdated: 2024-06-01
"""


class TestTransforms:
    """Tests for the named transforms."""

    def test_registered_names(self):
        assert {"uppercase", "to_cents", "iso_date", "split", "join"} <= set(list_transforms())

    def test_to_number(self):
        assert to_number("42") == 42
        assert to_number(" 4.5 ") == 4.5
        with pytest.raises(ValueError):
            to_number(True)

    def test_to_cents_rounds_half_up(self):
        assert to_cents(12.345) == 1235
        assert to_cents("19.99") == 1999
        assert to_cents(3) == 300

    def test_iso_date(self):
        assert iso_date(datetime(2024, 6, 1, 12, 30)) == "2024-06-01T12:30:00"
        assert iso_date(date(2024, 6, 1)) == "2024-06-01"
        assert iso_date("2024-06-01T12:30:00") == "2024-06-01T12:30:00"
        assert iso_date(0) == "1970-01-01T00:00:00+00:00"

    def test_split(self):
        assert split("a, b,,c") == ["a", "b", "c"]
        assert split("a;b", separator=";") == ["a", "b"]

    def test_unknown_transform(self):
        with pytest.raises(BridgeConfigurationError, match="Unknown transform: reverse"):
            get_transform("reverse")

    def test_register_transform(self, monkeypatch):
        import modelbridge.bridges.transforms as transforms

        monkeypatch.setattr(transforms, "_TRANSFORMS", dict(transforms._TRANSFORMS))
        register_transform("reverse", lambda value: str(value)[::-1])
        assert get_transform("reverse")("abc") == "cba"


class TestLoadBridge:
    """Tests for load_bridge()."""

    def test_minimal_definition(self):
        bridge = load_bridge({
            "id": "a-to-b",
            "version": "1.0.0",
            "source": "a",
            "target": "b",
            "metadata": {"efficiency": 1.0, "confidence": 1.0},
        })
        assert bridge.mappings == {}
        assert bridge.transformations == {}
        assert isinstance(bridge.metadata.last_updated, datetime)
        assert validate_bridge(bridge) is True

    def test_rule_defaults(self):
        bridge = load_bridge({
            "id": "a-to-b",
            "version": "1",
            "source": "a",
            "target": "b",
            "transformations": {
                "name": {
                    "source": "customer.name",
                    "target": "contact.name",
                    "rules": [{"transform": "uppercase"}],
                },
            },
        })
        rule = bridge.transformations["name"].rules[0]
        assert rule.name == "uppercase"
        assert rule.source_field == "name"
        assert rule.condition is None

    def test_unknown_transform_raises(self):
        with pytest.raises(BridgeConfigurationError):
            load_bridge({
                "id": "a-to-b",
                "transformations": {"x": {"source": "a", "target": "b", "rules": [{"transform": "nope"}]}},
            })

    def test_rule_without_transform_raises(self):
        with pytest.raises(BridgeConfigurationError):
            load_bridge({
                "id": "a-to-b",
                "transformations": {"x": {"source": "a", "target": "b", "rules": [{"name": "empty"}]}},
            })

    def test_malformed_condition_raises(self):
        with pytest.raises(BridgeConfigurationError):
            load_bridge({
                "id": "a-to-b",
                "transformations": {
                    "x": {
                        "source": "a",
                        "target": "b",
                        "rules": [{"transform": "uppercase", "when": {"path": "a", "above": 1}}],
                    },
                },
            })

    def test_invalid_bridge_loads_but_does_not_register(self):
        bridge = load_bridge({"id": "a-to-b", "metadata": {"efficiency": "fast", "confidence": 0.5}})
        assert BridgeRegistry().register(bridge) is False


class TestLoadFromYaml:
    """Tests for load_bridges_from_yaml()."""

    @pytest.fixture
    def bridges_file(self, tmp_path):
        path = tmp_path / "bridges.yaml"
        path.write_text(BRIDGES_YAML, encoding="utf-8")
        return path

    def test_loads_all(self, bridges_file):
        bridges = load_bridges_from_yaml(bridges_file)

        assert [b.id for b in bridges] == ["shop-to-crm", "crm-to-mail"]
        assert all(validate_bridge(b) for b in bridges)
        assert bridges[1].metadata.last_updated == datetime(2024, 6, 1)

    def test_missing_file(self, tmp_path):
        with pytest.raises(BridgeConfigurationError):
            load_bridges_from_yaml(tmp_path / "missing.yaml")

    @pytest.mark.asyncio
    async def test_execute_loaded_bridge(self, bridges_file):
        bridge = load_bridges_from_yaml(bridges_file)[0]
        result = await execute_bridge(bridge, {
            "order": {"email": "a@b.com", "total": 12.345, "currency": "USD", "tags": "gift;rush"},
        })

        assert result.data == {
            "contact": {"email": "a@b.com", "tags": ["gift", "rush"]},
            "invoice": {"amountCents": 1235},
        }

    @pytest.mark.asyncio
    async def test_condition_from_config(self, bridges_file):
        bridge = load_bridges_from_yaml(bridges_file)[0]
        result = await execute_bridge(bridge, {"order": {"total": 12.5, "currency": "EUR"}})
        assert result.data == {"invoice": {"amountCents": 12.5}}
