"""
Tests for workflow suggestions.
"""

import pytest

from modelbridge.domain.compiler import BusinessDomainCompiler
from modelbridge.domain.services import load_known_services
from modelbridge.domain.types import BusinessDomainModel
from modelbridge.domain.workflows import WorkflowRule, WorkflowRuleTable
from modelbridge.models.registry import ModelRegistry


def make_domain(business_type, *entities):
    return BusinessDomainModel.model_validate({
        "businessType": business_type,
        "entities": {name: {"fields": [{"name": "name"}]} for name in entities},
    })


@pytest.fixture
def table():
    return WorkflowRuleTable.from_yaml()


@pytest.fixture
def services():
    return load_known_services()


class TestWorkflowRuleTable:
    """Tests for WorkflowRuleTable.suggest()."""

    def test_packaged_templates(self, table):
        assert set(table.domain_types()) >= {"restaurant", "ecommerce", "consulting"}

    def test_unknown_domain_gets_generic_rules(self, table):
        domain = make_domain("bakery", "customer", "order")
        suggestions = table.suggest(domain, ["stripe", "mailchimp"])

        assert [s.name for s in suggestions] == ["automated_data_sync", "service_health_monitoring"]
        sync = suggestions[0]
        assert sync.services == ["stripe", "mailchimp"]
        assert sync.business_entities == ["customer", "order"]
        assert suggestions[1].business_entities == []

    def test_single_service_gets_no_generic_rules(self, table):
        domain = make_domain("bakery", "customer")
        assert table.suggest(domain, ["stripe"]) == []

    def test_no_services(self, table):
        assert table.suggest(make_domain("restaurant", "customer"), []) == []

    def test_capability_tag_matching(self, table, services):
        domain = make_domain("restaurant", "customer", "reservation")
        suggestions = table.suggest(domain, [services["stripe"]])

        assert [s.name for s in suggestions] == ["reservation_payment_flow"]
        assert suggestions[0].services == ["stripe"]

    def test_entities_restricted_to_declared(self, table, services):
        domain = make_domain("restaurant", "Customer", "reservation")
        flow = table.suggest(domain, [services["stripe"]])[0]
        assert flow.business_entities == ["reservation", "Customer"]

    def test_domain_type_lookup_ignores_case(self, table, services):
        domain = make_domain("Restaurant", "customer")
        assert [s.name for s in table.suggest(domain, [services["stripe"]])] == ["reservation_payment_flow"]

    def test_mapping_services(self, table):
        domain = make_domain("ecommerce", "order", "product")
        suggestions = table.suggest(domain, [
            {"name": "shop", "capabilities": ["inventory"]},
            {"name": "pay", "capabilities": ["payments"]},
        ])
        fulfillment = next(s for s in suggestions if s.name == "order_fulfillment")
        assert fulfillment.services == ["shop", "pay"]
        assert fulfillment.business_entities == ["order", "product"]

    def test_sorted_by_priority(self, table, services):
        domain = make_domain("restaurant", "customer", "reservation")
        suggestions = table.suggest(domain, [services["stripe"], services["mailchimp"], services["notion"]])
        priorities = [s.priority for s in suggestions]
        assert priorities == sorted(priorities, key=["high", "medium", "low"].index)
        assert suggestions[-1].name == "menu_documentation"

    def test_register_template(self, table):
        table.register_template("Bakery", [
            {"name": "preorders", "required_services": ["payments"], "priority": "low"},
            WorkflowRule(name="daily_specials", required_services=["marketing"], priority="high"),
        ])
        domain = make_domain("bakery", "customer")
        suggestions = table.suggest(domain, [{"name": "stripe", "capabilities": ["payments"]}])
        assert [s.name for s in suggestions] == ["preorders"]
        assert [r.name for r in table.rules_for("BAKERY")] == ["preorders", "daily_specials"]

    def test_register_template_replaces(self, table):
        table.register_template("restaurant", [{"name": "only_rule"}])
        assert [r.name for r in table.rules_for("restaurant")] == ["only_rule"]

    def test_missing_templates_file(self, tmp_path):
        table = WorkflowRuleTable.from_yaml(tmp_path / "missing.yaml")
        assert table.domain_types() == []
        assert table.suggest(make_domain("restaurant", "customer"), ["a", "b"]) == []


class TestCompilerSuggestions:
    """suggest_workflows() through the domain compiler."""

    def test_restaurant_with_stripe_and_mailchimp(self, services):
        compiler = BusinessDomainCompiler(ModelRegistry())
        compiler.register_domain({
            "businessType": "restaurant",
            "entities": {
                "customer": {"fields": [{"name": "email", "type": "string"}]},
                "reservation": {"fields": [{"name": "time", "type": "date"}]},
            },
            "workflows": [{"name": "confirm_booking"}],
        })

        suggestions = compiler.suggest_workflows("restaurant", [services["stripe"], services["mailchimp"]])

        assert [s.name for s in suggestions] == [
            "reservation_payment_flow",
            "automated_data_sync",
            "guest_newsletter",
            "service_health_monitoring",
        ]
        assert "confirm_booking" not in [s.name for s in suggestions]
        assert suggestions[0].business_entities == ["reservation", "customer"]
        assert suggestions[2].services == ["mailchimp"]
