"""Tests for entityspine.statements — DML generation and value marshalling."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from entities import BlogPost, Counter, Money, OnlyKey, SampleRecord
from entityspine.dialect import PostgreSQLDialect
from entityspine.errors import SchemaError, ValidationError
from entityspine.statements import Statement, StatementBuilder, marshal


@pytest.fixture
def builder() -> StatementBuilder:
    return StatementBuilder()


class TestMarshal:
    def test_scalars_unchanged(self):
        for value in (None, "x", 3, 1.5, True, b"\x00"):
            assert marshal(value) == value

    def test_datetime_iso(self):
        value = datetime(2025, 2, 16, 15, 32, tzinfo=UTC)
        assert marshal(value) == "2025-02-16T15:32:00+00:00"

    def test_structured_json(self):
        assert marshal(["a", "b"]) == '["a", "b"]'
        assert marshal({"k": 1}) == '{"k": 1}'

    def test_string_representable(self):
        assert marshal(Money(1250)) == "1250"

    def test_plain_object_unchanged(self):
        obj = object()
        assert marshal(obj) is obj


class TestInsert:
    def test_only_initialized_fields(self, builder):
        stmt = builder.insert(SampleRecord.create(value="foo"))
        assert stmt == Statement('INSERT INTO "test" ("value") VALUES (?)', ["foo"])

    def test_defaults_and_marshalling(self, builder):
        post = BlogPost(title="Hello", slug="hello", tags=["a"], price=Money(5))
        stmt = builder.insert(post)
        assert stmt.sql == (
            'INSERT INTO "blog_post" ("title","slug","body","tags","price","updated") '
            "VALUES (?,?,?,?,?,?)"
        )
        assert stmt.params == ["Hello", "hello", None, '["a"]', "5", None]

    def test_explicit_key_included(self, builder):
        stmt = builder.insert(SampleRecord(id=7, value="v"))
        assert stmt.sql == 'INSERT INTO "test" ("id","value") VALUES (?,?)'
        assert stmt.params == [7, "v"]

    def test_nothing_initialized(self, builder):
        stmt = builder.insert(OnlyKey())
        assert stmt == Statement('INSERT INTO "only_key" DEFAULT VALUES', [])

    def test_dialect_placeholders(self):
        stmt = StatementBuilder(PostgreSQLDialect()).insert(SampleRecord(value="v"))
        assert stmt.sql == 'INSERT INTO "test" ("value") VALUES (%s)'


class TestUpdate:
    def test_all_non_key_fields_key_last(self, builder):
        stmt = builder.update(SampleRecord(id=3, value="x", has_default="y"))
        assert stmt.sql == 'UPDATE "test" SET "value" = ?,"has_default" = ? WHERE "id" = ?'
        assert stmt.params == ["x", "y", 3]

    def test_constant_on_update_inlined(self, builder):
        created = datetime(2025, 1, 1, tzinfo=UTC)
        post = BlogPost(id=1, title="T", slug="t", created=created)
        stmt = builder.update(post)
        assert stmt.sql == (
            'UPDATE "blog_post" SET "title" = ?,"slug" = ?,"body" = ?,"tags" = ?,'
            "\"price\" = ?,\"created\" = ?,\"updated\" = datetime('now') WHERE \"id\" = ?"
        )
        assert stmt.params == ["T", "t", None, None, None, "2025-01-01T00:00:00+00:00", 1]

    def test_plain_on_update_value_bound(self, builder):
        stmt = builder.update(Counter(id=2, hits=41, label="c"))
        assert stmt.sql == 'UPDATE "counter" SET "hits" = ?,"label" = ? WHERE "id" = ?'
        assert stmt.params == [0, "c", 2]

    def test_uninitialized_key(self, builder):
        with pytest.raises(ValidationError) as exc_info:
            builder.update(SampleRecord(value="x", has_default="y"))
        assert exc_info.value.field == "id"

    def test_uninitialized_field(self, builder):
        with pytest.raises(ValidationError) as exc_info:
            builder.update(SampleRecord(id=1, value="x"))
        assert exc_info.value.field == "has_default"

    def test_no_assignable_fields(self, builder):
        with pytest.raises(SchemaError, match="no non-key fields"):
            builder.update(OnlyKey(id=1))


class TestReadsAndDelete:
    def test_delete(self, builder):
        stmt = builder.delete(SampleRecord.metadata(), 4)
        assert stmt == Statement('DELETE FROM "test" WHERE "id" = ?', [4])

    def test_select_by_primary_key(self, builder):
        stmt = builder.select_by_primary_key(BlogPost.metadata(), 9)
        assert stmt == Statement('SELECT * FROM "blog_post" WHERE "id" = ?', [9])

    def test_select_all(self, builder):
        assert builder.select_all(SampleRecord.metadata()) == Statement(
            'SELECT * FROM "test"', []
        )
