"""
Core Utility Tests.

Unit tests for dotted-path access, progress events and field type parsing.
"""

import unittest
from unittest.mock import MagicMock, patch

from modelbridge.core.events import ProgressEmitter, ProgressEvent, TranslationContext
from modelbridge.core.paths import MISSING, get_path, has_path, set_path, split_path
from modelbridge.models.definitions import FieldType


class TestPaths(unittest.TestCase):
    """Tests for dotted-path helpers."""

    def setUp(self):
        self.data = {"customer": {"name": "Ada", "phone": None, "address": {"city": "Paris"}}}

    def test_get_nested(self):
        """Test reading nested values."""
        self.assertEqual(get_path(self.data, "customer.name"), "Ada")
        self.assertEqual(get_path(self.data, "customer.address.city"), "Paris")

    def test_get_missing(self):
        """Test missing keys and non-mapping intermediates."""
        self.assertIs(get_path(self.data, "customer.email"), MISSING)
        self.assertIs(get_path(self.data, "customer.name.first"), MISSING)
        self.assertIs(get_path(None, "customer"), MISSING)
        self.assertFalse(MISSING)

    def test_stored_none_is_present(self):
        """Test that a stored None is not treated as missing."""
        self.assertIsNone(get_path(self.data, "customer.phone"))
        self.assertTrue(has_path(self.data, "customer.phone"))
        self.assertFalse(has_path(self.data, "customer.email"))

    def test_set_creates_intermediates(self):
        """Test writing into an empty target."""
        target = {}
        set_path(target, "fields.contact.email", "a@b.com")
        self.assertEqual(target, {"fields": {"contact": {"email": "a@b.com"}}})

    def test_set_replaces_scalar_intermediate(self):
        target = {"fields": "flat"}
        set_path(target, "fields.email", "a@b.com")
        self.assertEqual(target, {"fields": {"email": "a@b.com"}})

    def test_set_empty_path(self):
        with self.assertRaises(ValueError):
            set_path({}, "", 1)

    def test_split_path(self):
        self.assertEqual(split_path("a..b."), ["a", "b"])


class TestProgressEmitter(unittest.TestCase):
    """Tests for ProgressEmitter."""

    def _event(self, percentage):
        return ProgressEvent(stage="transform", step="graph-translation", percentage=percentage)

    def test_listeners_run_in_order(self):
        """Test listener ordering."""
        emitter = ProgressEmitter()
        calls = []
        emitter.on(lambda e: calls.append(("first", e.percentage)))
        emitter.on(lambda e: calls.append(("second", e.percentage)))

        emitter.emit(self._event(0.0))
        emitter.emit(self._event(100.0))

        self.assertEqual(calls, [
            ("first", 0.0), ("second", 0.0), ("first", 100.0), ("second", 100.0),
        ])
        self.assertEqual([e.percentage for e in emitter.history], [0.0, 100.0])

    def test_off(self):
        emitter = ProgressEmitter()
        listener = MagicMock()
        emitter.on(listener)
        emitter.off(listener)
        emitter.off(listener)

        emitter.emit(self._event(0.0))
        listener.assert_not_called()

    def test_history_can_be_disabled(self):
        emitter = ProgressEmitter(keep_history=False)
        emitter.emit(self._event(0.0))
        self.assertEqual(emitter.history, [])

    def test_failing_listener_is_logged(self):
        """Test that a listener error does not reach the emitter."""
        emitter = ProgressEmitter()
        after = MagicMock()
        emitter.on(MagicMock(side_effect=RuntimeError("listener down")))
        emitter.on(after)

        with patch("modelbridge.core.events.logger") as logger:
            emitter.emit(self._event(50.0))

        logger.exception.assert_called_once()
        after.assert_called_once()

    def test_event_to_dict(self):
        data = self._event(100.0).to_dict()
        self.assertEqual(data["stage"], "transform")
        self.assertEqual(data["percentage"], 100.0)
        self.assertIn("timestamp", data)

    def test_context_has_own_emitter(self):
        self.assertIsNot(TranslationContext().events, TranslationContext().events)


class TestFieldType(unittest.TestCase):
    """Tests for FieldType.parse."""

    def test_known_names(self):
        self.assertEqual(FieldType.parse("string"), FieldType.STRING)
        self.assertEqual(FieldType.parse("DATE"), FieldType.DATE)
        self.assertEqual(FieldType.parse(FieldType.ENUM), FieldType.ENUM)

    def test_aliases(self):
        self.assertEqual(FieldType.parse("int"), FieldType.NUMBER)
        self.assertEqual(FieldType.parse("datetime"), FieldType.DATE)
        self.assertEqual(FieldType.parse("bool"), FieldType.BOOLEAN)

    def test_unknown(self):
        self.assertEqual(FieldType.parse("object"), FieldType.OTHER)
        self.assertEqual(FieldType.parse(None), FieldType.OTHER)


if __name__ == "__main__":
    unittest.main()
