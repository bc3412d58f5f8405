"""
Tests for bridge validation, execution and the bridge registry.
"""

import asyncio
import dataclasses
from datetime import datetime

import pytest

from modelbridge.bridges.bridge import (
    Bridge,
    BridgeExecutor,
    BridgeMetadata,
    BridgeRule,
    BridgeTransformation,
    execute_bridge,
    validate_bridge,
)
from modelbridge.bridges.registry import BridgeRegistry
from modelbridge.core.exceptions import BridgeConfigurationError, BridgeTransformationError


def make_bridge(**overrides):
    values = {
        "id": "stripe-to-crm",
        "version": "1.0.0",
        "source": "stripe",
        "target": "crm",
        "mappings": {"customer.email": "fields.email"},
        "transformations": {},
        "metadata": BridgeMetadata(efficiency=0.9, confidence=0.8, last_updated=datetime(2024, 6, 1)),
    }
    values.update(overrides)
    return Bridge(**values)


def upper_name(rules=None):
    return {
        "display_name": BridgeTransformation(
            source="customer.name",
            target="fields.displayName",
            rules=rules if rules is not None else [BridgeRule("upper", "name", str.upper)],
        ),
    }


RECORD = {"customer": {"email": "john@example.com", "name": "john doe", "tags": ["vip"]}}


class TestValidateBridge:
    """Tests for validate_bridge()."""

    def test_complete_bridge(self):
        assert validate_bridge(make_bridge()) is True

    def test_empty_mappings_are_valid(self):
        assert validate_bridge(make_bridge(mappings={}, transformations={})) is True

    @pytest.mark.parametrize("changes", [
        {"id": ""},
        {"version": None},
        {"source": 42},
        {"target": ""},
        {"mappings": None},
        {"transformations": ["not", "a", "mapping"]},
        {"metadata": None},
        {"metadata": BridgeMetadata(efficiency="high", confidence=0.8)},
        {"metadata": BridgeMetadata(efficiency=0.9, confidence=True)},
        {"metadata": BridgeMetadata(efficiency=0.9, confidence=0.8, last_updated="yesterday")},
    ])
    def test_invalid_variants(self, changes):
        assert validate_bridge(dataclasses.replace(make_bridge(), **changes)) is False

    def test_none(self):
        assert validate_bridge(None) is False

    def test_mapping_shaped_bridge(self):
        assert validate_bridge({
            "id": "a-to-b",
            "version": "1",
            "source": "a",
            "target": "b",
            "mappings": {},
            "transformations": {},
            "metadata": {"efficiency": 1, "confidence": 0.5, "lastUpdated": "2024-06-01T00:00:00"},
        }) is True

    def test_iso_string_timestamp(self):
        metadata = BridgeMetadata(efficiency=0.9, confidence=0.8, last_updated="2024-06-01T12:30:00")
        assert validate_bridge(make_bridge(metadata=metadata)) is True

    @pytest.mark.parametrize("changes", [
        {"mappings": {"customer.email": 5}},
        {"mappings": {"customer.email": ""}},
        {"mappings": {3: "fields.email"}},
        {"transformations": {"up": "customer.name"}},
        {"transformations": {"up": {"source": "customer.name", "rules": []}}},
        {"transformations": {"up": {"source": "customer.name", "target": "fields.name", "rules": "upper"}}},
        {"transformations": {"up": {"source": "customer.name", "target": "fields.name", "rules": [{"name": "x"}]}}},
        {"transformations": upper_name([BridgeRule("upper", "name", "not callable")])},
    ])
    def test_malformed_entries(self, changes):
        bridge = make_bridge(**changes)
        assert validate_bridge(bridge) is False
        assert BridgeExecutor(bridge).validate() is False


class TestBridgeExecutor:
    """Tests for BridgeExecutor.execute()."""

    @pytest.mark.asyncio
    async def test_mapping_copies_value(self):
        result = await BridgeExecutor(make_bridge()).execute(RECORD)

        assert result.data == {"fields": {"email": "john@example.com"}}
        assert result.metadata["source"] == "stripe"
        assert result.metadata["target"] == "crm"
        assert result.metadata["stats"] == {"processed": 1, "succeeded": 1, "failed": 0}
        assert result.metadata["duration"] >= 0

    @pytest.mark.asyncio
    async def test_transformation_rule(self):
        bridge = make_bridge(transformations=upper_name())
        result = await execute_bridge(bridge, RECORD)
        assert result.data["fields"]["displayName"] == "JOHN DOE"

    @pytest.mark.asyncio
    async def test_rules_run_in_order(self):
        rules = [
            BridgeRule("upper", "name", str.upper),
            BridgeRule("suffix", "name", lambda v: v + "!"),
            BridgeRule("lower", "name", str.lower),
        ]
        result = await execute_bridge(make_bridge(transformations=upper_name(rules)), RECORD)
        assert result.data["fields"]["displayName"] == "john doe!"

    @pytest.mark.asyncio
    async def test_missing_source_is_skipped(self):
        bridge = make_bridge(
            mappings={"customer.phone": "fields.phone", "customer.email": "fields.email"},
            transformations=upper_name(),
        )
        result = await execute_bridge(bridge, {"customer": {"email": "a@b.com"}})

        assert result.data == {"fields": {"email": "a@b.com"}}
        assert "phone" not in result.data["fields"]
        assert "displayName" not in result.data["fields"]

    @pytest.mark.asyncio
    async def test_stored_none_is_written(self):
        result = await execute_bridge(make_bridge(), {"customer": {"email": None}})
        assert result.data == {"fields": {"email": None}}

    @pytest.mark.asyncio
    async def test_non_mapping_intermediate(self):
        result = await execute_bridge(make_bridge(), {"customer": "john"})
        assert result.data == {}

    @pytest.mark.asyncio
    async def test_rule_failure_is_chained(self):
        def explode(value):
            raise RuntimeError("X")

        bridge = make_bridge(transformations=upper_name([BridgeRule("explode", "name", explode)]))

        with pytest.raises(BridgeTransformationError) as exc_info:
            await execute_bridge(bridge, RECORD)

        assert "Bridge transformation failed" in str(exc_info.value)
        assert "X" in str(exc_info.value)
        assert exc_info.value.rule_name == "explode"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_false_condition_skips_rule_only(self):
        rules = [
            BridgeRule("upper", "name", str.upper, condition=lambda record: record.get("vip", False)),
            BridgeRule("suffix", "name", lambda v: v + "!"),
        ]
        result = await execute_bridge(make_bridge(transformations=upper_name(rules)), RECORD)
        assert result.data["fields"]["displayName"] == "john doe!"

    @pytest.mark.asyncio
    async def test_async_rule_and_condition(self):
        async def slow_upper(value):
            await asyncio.sleep(0)
            return value.upper()

        async def is_customer(record):
            return "customer" in record

        rules = [BridgeRule("upper", "name", slow_upper, condition=is_customer)]
        result = await execute_bridge(make_bridge(transformations=upper_name(rules)), RECORD)
        assert result.data["fields"]["displayName"] == "JOHN DOE"

    @pytest.mark.asyncio
    async def test_input_is_not_mutated(self):
        record = {"customer": {"email": "a@b.com", "name": "john", "tags": ["vip"]}}
        bridge = make_bridge(
            mappings={"customer.tags": "fields.tags"},
            transformations={
                "tags": BridgeTransformation(
                    source="customer.tags",
                    target="fields.allTags",
                    rules=[BridgeRule("append", "tags", lambda v: v.append("new") or v)],
                ),
            },
        )
        result = await execute_bridge(bridge, record)

        result.data["fields"]["tags"].append("changed")
        assert record == {"customer": {"email": "a@b.com", "name": "john", "tags": ["vip"]}}
        assert result.data["fields"]["allTags"] == ["vip", "new"]

    @pytest.mark.asyncio
    async def test_invalid_bridge_raises(self):
        executor = BridgeExecutor(make_bridge(id=""))
        assert executor.validate() is False
        with pytest.raises(BridgeConfigurationError):
            await executor.execute(RECORD)

    @pytest.mark.asyncio
    async def test_malformed_mapping_target_raises_configuration_error(self):
        executor = BridgeExecutor(make_bridge(mappings={"customer.email": 5}))
        with pytest.raises(BridgeConfigurationError):
            await executor.execute(RECORD)

    @pytest.mark.asyncio
    async def test_mapping_shaped_transformation(self):
        bridge = make_bridge(transformations={
            "display_name": {
                "source": "customer.name",
                "target": "fields.displayName",
                "rules": [{"name": "upper", "transform": str.upper}],
            },
            "raw_name": {"source": "customer.name", "target": "fields.rawName", "rules": []},
        })
        assert validate_bridge(bridge) is True

        result = await execute_bridge(bridge, RECORD)
        assert result.data["fields"] == {
            "email": "john@example.com",
            "displayName": "JOHN DOE",
            "rawName": "john doe",
        }

    @pytest.mark.asyncio
    async def test_mapping_shaped_bridge_executes(self):
        bridge = {
            "id": "a-to-b",
            "version": "1",
            "source": "a",
            "target": "b",
            "mappings": {"customer.email": "email"},
            "transformations": {
                "tier": {
                    "source": "customer.name",
                    "target": "tier",
                    "rules": [{"transform": len, "condition": lambda r: "email" in r["customer"]}],
                },
            },
            "metadata": {"efficiency": 1, "confidence": 0.5, "lastUpdated": "2024-06-01T00:00:00"},
        }
        result = await execute_bridge(bridge, RECORD)

        assert result.data == {"email": "john@example.com", "tier": 8}
        assert result.metadata["source"] == "a"
        assert result.metadata["target"] == "b"

    @pytest.mark.asyncio
    async def test_bridge_is_reusable(self):
        executor = BridgeExecutor(make_bridge(transformations=upper_name()))
        first = await executor.execute(RECORD)
        second = await executor.execute({"customer": {"name": "ada"}})

        assert first.data["fields"]["displayName"] == "JOHN DOE"
        assert second.data == {"fields": {"displayName": "ADA"}}


class TestBridgeRegistry:
    """Tests for BridgeRegistry."""

    @pytest.fixture
    def registry(self):
        return BridgeRegistry()

    def test_register_and_lookup(self, registry):
        bridge = make_bridge()
        assert registry.register(bridge) is True
        assert registry.get("stripe-to-crm") is bridge
        assert registry.get_bridge("stripe", "crm") is bridge
        assert registry.get_bridge("crm", "stripe") is None
        assert len(registry) == 1

    def test_rejects_invalid(self, registry):
        assert registry.register(make_bridge(version="")) is False
        assert len(registry) == 0

    def test_same_pair_replaces(self, registry):
        registry.register(make_bridge())
        newer = make_bridge(id="stripe-to-crm-v2")
        registry.register(newer)

        assert registry.get_bridge("stripe", "crm") is newer
        assert registry.get("stripe-to-crm") is None
        assert len(registry) == 1

    def test_same_id_new_pair(self, registry):
        registry.register(make_bridge())
        moved = make_bridge(target="erp")
        registry.register(moved)

        assert registry.get_bridge("stripe", "crm") is None
        assert registry.get_bridge("stripe", "erp") is moved
        assert registry.list_bridges() == [moved]

    @pytest.mark.asyncio
    async def test_get_executor(self, registry):
        registry.register(make_bridge())
        executor = registry.get_executor("stripe", "crm")
        result = await executor.execute(RECORD)

        assert result.data["fields"]["email"] == "john@example.com"
        assert registry.get_executor("stripe", "erp") is None
