"""Tests for entityspine.entity — construction and initialized-field tracking."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from entities import BlogPost, Document, Reading, SampleRecord
from entityspine.errors import DecodeError, SchemaError, ValidationError
from entityspine.hydration import RowHydrator
from entityspine.protocols import ColumnDescriptor


class TestCreate:
    def test_store_default_left_uninitialized(self):
        record = SampleRecord.create(value="foo")
        assert record.value == "foo"
        assert not record.is_initialized("has_default")
        assert not record.is_initialized("id")

    def test_without_arguments_names_missing_field(self):
        with pytest.raises(ValidationError, match="value") as exc_info:
            SampleRecord.create()
        assert exc_info.value.field == "value"

    def test_unknown_field(self):
        with pytest.raises(ValidationError) as exc_info:
            SampleRecord(value="x", nope=1)
        assert exc_info.value.field == "nope"

    def test_class_defaults_initialize_fields(self):
        post = BlogPost.create(title="T", slug="t")
        assert post.is_initialized("body")
        assert post.body is None
        assert not post.is_initialized("created")

    def test_mutable_defaults_not_shared(self):
        first = BlogPost(title="a", slug="a")
        second = BlogPost(title="b", slug="b")
        first.body = "changed"
        assert second.body is None

    def test_field_named_like_entity_method(self):
        with pytest.raises(SchemaError, match="metadata"):
            Document.create(metadata={"a": 1})


class TestInitializedState:
    def test_reading_uninitialized_field_raises(self):
        record = SampleRecord(value="x")
        with pytest.raises(AttributeError):
            record.has_default

    def test_assignment_initializes(self):
        record = SampleRecord(value="x")
        record.has_default = "y"
        assert record.is_initialized("has_default")

    def test_initialized_fields_in_declaration_order(self):
        record = SampleRecord(has_default="y", value="x")
        assert list(record.initialized_fields()) == ["value", "has_default"]

    def test_none_counts_as_initialized(self):
        assert SampleRecord(id=None).is_initialized("id")


class TestTypeLevel:
    def test_schema_name_and_key(self):
        assert SampleRecord.schema_name() == "test"
        assert BlogPost.schema_name() == "blog_post"
        assert BlogPost.primary_key_name() == "id"


class TestFromRow:
    def test_hydrates(self):
        columns = [ColumnDescriptor("id"), ColumnDescriptor("value"), ColumnDescriptor("has_default")]
        record = SampleRecord.from_row(columns, [5, "v", "bar"])
        assert record == SampleRecord(id=5, value="v", has_default="bar")

    def test_missing_column(self):
        columns = [ColumnDescriptor("id"), ColumnDescriptor("has_default")]
        with pytest.raises(ValidationError, match="value"):
            SampleRecord.from_row(columns, [5, "bar"])


class TestSetField:
    def test_applies_coercion(self):
        record = Reading(value="x")
        record.set_field("date_time", 0, hydrator=RowHydrator(default_timezone=UTC))
        assert record.date_time == datetime(1970, 1, 1, tzinfo=UTC)

    def test_decode_failure(self):
        with pytest.raises(DecodeError):
            Reading(value="x").set_field("simple_array", "[")

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            Reading(value="x").set_field("nope", 1)


class TestDunder:
    def test_equality_by_type_and_values(self):
        assert SampleRecord(value="x") == SampleRecord(value="x")
        assert SampleRecord(value="x") != SampleRecord(value="y")
        assert SampleRecord(value="x") != SampleRecord(value="x", has_default="bar")

    def test_repr_lists_initialized_fields(self):
        assert repr(SampleRecord(id=1, value="x")) == "SampleRecord(id=1, value='x')"

    def test_records_are_unhashable(self):
        with pytest.raises(TypeError):
            hash(SampleRecord(value="x"))
