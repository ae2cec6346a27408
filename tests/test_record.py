"""Tests for field tracking, persistence, and serialization of records."""

from __future__ import annotations

import unittest
from unittest.mock import Mock

from tracked_models.exceptions import SchemaError, UnknownFieldError
from tracked_models.fields import UNSET, FieldSpec
from tracked_models.record import Record
from tracked_models.serialization import export_json
from tracked_models.state import EntityState


class FooRecord(Record):
    fields = (
        FieldSpec("bar"),
        FieldSpec("qux", default=5),
    )


class TaggedFooRecord(FooRecord):
    fields = (FieldSpec("tags", default_factory=list),)


class RecordTests(unittest.TestCase):
    """Validate accessors, dirty tracking, and change events."""

    def setUp(self) -> None:
        self.record = FooRecord("1")

    def test_constructs_dirty_with_defaults(self) -> None:
        self.assertTrue(self.record.dirty)
        self.assertEqual(self.record.state, EntityState.DIRTY)
        self.assertEqual(self.record.pk, "1")
        self.assertEqual(self.record.qux, 5)
        self.assertIs(self.record.bar, UNSET)

    def test_field_names_follow_declaration_order(self) -> None:
        self.assertEqual(FooRecord.field_names(), ("pk", "bar", "qux"))
        self.assertEqual(TaggedFooRecord.field_names(), ("pk", "bar", "qux", "tags"))

    def test_attribute_and_method_access_agree(self) -> None:
        self.record.bar = "foo"
        self.assertEqual(self.record.bar, "foo")
        self.assertEqual(self.record.get("bar"), "foo")

        self.record.set("qux", 7)
        self.assertEqual(self.record.qux, 7)

    def test_constructor_accepts_field_values(self) -> None:
        record = FooRecord("9", bar="hello", qux=1)
        self.assertEqual(record.bar, "hello")
        self.assertEqual(record.qux, 1)

    def test_unknown_fields_raise(self) -> None:
        with self.assertRaises(UnknownFieldError):
            self.record.get("nope")
        with self.assertRaises(UnknownFieldError):
            self.record.set("nope", 1)
        with self.assertRaises(UnknownFieldError):
            FooRecord("2", nope=1)

    def test_default_factory_is_called_per_record(self) -> None:
        first = TaggedFooRecord("1")
        second = TaggedFooRecord("2")
        first.tags.append("x")
        self.assertEqual(second.tags, [])

    def test_changed_fields_after_set(self) -> None:
        self.record.bar = "foo"
        self.assertEqual(self.record.changed_fields, ["pk", "bar", "qux"])

    def test_set_emits_change_then_field_change_once(self) -> None:
        calls: list[str] = []
        self.record.on("change", lambda: calls.append("change"))
        self.record.on("change:bar", lambda: calls.append("change:bar"))
        self.record.on("change:qux", lambda: calls.append("change:qux"))

        self.record.bar = "foo"
        self.assertEqual(calls, ["change", "change:bar"])

    def test_set_with_identical_value_still_emits(self) -> None:
        self.record.persist()
        spy = Mock()
        self.record.on("change", spy)

        self.record.qux = 5
        spy.assert_called_once()
        self.assertTrue(self.record.dirty)
        self.assertEqual(self.record.changed_fields, [])

    def test_persist_snapshots_and_emits(self) -> None:
        spy = Mock()
        self.record.on("persist", spy)

        self.record.bar = "foo"
        spy.assert_not_called()

        self.assertTrue(self.record.persist())
        spy.assert_called_once()
        self.assertFalse(self.record.dirty)
        self.assertEqual(self.record.state, EntityState.CLEAN)
        self.assertEqual(self.record.changed_fields, [])
        self.assertEqual(
            self.record.persisted_fields, {"pk": "1", "bar": "foo", "qux": 5}
        )

    def test_persist_is_idempotent(self) -> None:
        spy = Mock()
        self.record.on("persist", spy)
        self.assertTrue(self.record.persist())
        self.assertFalse(self.record.persist())
        spy.assert_called_once()
        self.assertFalse(self.record.dirty)

    def test_mutation_after_persist_marks_dirty(self) -> None:
        self.record.persist()
        self.record.qux = 6
        self.assertTrue(self.record.dirty)
        self.assertEqual(self.record.changed_fields, ["qux"])

        self.record.qux = 5
        self.assertTrue(self.record.dirty)
        self.assertEqual(self.record.changed_fields, [])

    def test_persisted_snapshot_starts_unset(self) -> None:
        self.assertEqual(
            self.record.persisted_fields, {"pk": UNSET, "bar": UNSET, "qux": UNSET}
        )


class RecordSerializationTests(unittest.TestCase):
    """Validate the serialization contract."""

    def test_serializes_defaults_after_construction(self) -> None:
        self.assertEqual(FooRecord("1").to_serializable(), {"pk": "1", "qux": 5})

    def test_json_uses_declaration_order(self) -> None:
        record = FooRecord("1")
        self.assertEqual(export_json(record), '{"pk":"1","qux":5}')

        record.bar = "foo"
        self.assertEqual(export_json(record), '{"pk":"1","bar":"foo","qux":5}')

    def test_serializes_current_not_persisted_values(self) -> None:
        record = FooRecord("1")
        record.persist()
        record.qux = 8
        self.assertEqual(record.to_serializable()["qux"], 8)


class RecordSchemaTests(unittest.TestCase):
    """Validate schema declaration errors."""

    def test_duplicate_field_is_rejected(self) -> None:
        with self.assertRaises(SchemaError):

            class Broken(Record):
                fields = (FieldSpec("a"), FieldSpec("a"))

    def test_redeclaring_inherited_field_is_rejected(self) -> None:
        with self.assertRaises(SchemaError):

            class Broken(FooRecord):
                fields = (FieldSpec("qux"),)

    def test_shadowing_record_api_is_rejected(self) -> None:
        with self.assertRaises(SchemaError):

            class Broken(Record):
                fields = (FieldSpec("persist"),)

    def test_non_fieldspec_entry_is_rejected(self) -> None:
        with self.assertRaises(SchemaError):

            class Broken(Record):
                fields = ("name",)

    def test_fieldspec_validates_itself(self) -> None:
        with self.assertRaises(SchemaError):
            FieldSpec("not a name")
        with self.assertRaises(SchemaError):
            FieldSpec("items", default=[], default_factory=list)


if __name__ == "__main__":
    unittest.main()
