"""Tests for entityspine.metadata — field discovery, kinds and primary keys."""

from __future__ import annotations

from datetime import datetime

import pytest

from entities import (
    BlogPost,
    Document,
    Measurement,
    Money,
    Orphan,
    Reading,
    SampleRecord,
    TwoKeys,
    Unsupported,
)
from entityspine.errors import ErrorCategory, SchemaError
from entityspine.markers import MarkerKind
from entityspine.metadata import FieldKind, MetadataInspector, get_inspector


@pytest.fixture
def inspector() -> MetadataInspector:
    return MetadataInspector()


class TestSchemaName:
    def test_derived_from_class_name(self, inspector):
        assert inspector.schema_name(BlogPost) == "blog_post"
        assert inspector.schema_name(Reading) == "reading"

    def test_explicit_override(self, inspector):
        assert inspector.schema_name(SampleRecord) == "test"


class TestFields:
    def test_declaration_order(self, inspector):
        names = [f.name for f in inspector.fields(BlogPost)]
        assert names == ["id", "title", "slug", "body", "tags", "price", "created", "updated"]
        assert [f.order for f in inspector.fields(BlogPost)] == list(range(8))

    def test_private_and_classvar_names_skipped(self, inspector):
        names = {f.name for f in inspector.fields(BlogPost)}
        assert "registry" not in names
        assert "_draft" not in names

    def test_kinds(self, inspector):
        kinds = {f.name: f.kind for f in inspector.fields(BlogPost)}
        assert kinds == {
            "id": FieldKind.INTEGER,
            "title": FieldKind.TEXT,
            "slug": FieldKind.TEXT,
            "body": FieldKind.TEXT,
            "tags": FieldKind.STRUCTURED,
            "price": FieldKind.CUSTOM,
            "created": FieldKind.DATETIME,
            "updated": FieldKind.DATETIME,
        }

    def test_python_types(self, inspector):
        meta = inspector.inspect(BlogPost)
        assert meta.field("created").python_type is datetime
        assert meta.field("tags").python_type is list
        assert meta.field("price").python_type is Money

    def test_bare_list_is_structured(self, inspector):
        assert inspector.inspect(Reading).field("simple_array").kind is FieldKind.STRUCTURED

    def test_nullability(self, inspector):
        meta = inspector.inspect(Reading)
        assert meta.field("id").nullable
        assert not meta.field("value").nullable
        assert meta.field("is_nullable").nullable

    def test_markers_in_declaration_order(self, inspector):
        field = inspector.inspect(BlogPost).field("id")
        assert [m.kind for m in field.markers] == [
            MarkerKind.PRIMARY_KEY,
            MarkerKind.AUTO_INCREMENT,
        ]
        assert field.has(MarkerKind.AUTO_INCREMENT)
        assert field.first(MarkerKind.UNIQUE) is None

    def test_class_defaults_recorded(self, inspector):
        meta = inspector.inspect(BlogPost)
        assert meta.field("body").has_default
        assert meta.field("body").default is None
        assert not meta.field("title").has_default
        assert not meta.field("id").has_default
        assert meta.field("updated").has_default

    def test_unsupported_type_is_schema_error(self, inspector):
        with pytest.raises(SchemaError, match="members") as exc_info:
            inspector.inspect(Unsupported)
        assert exc_info.value.category == ErrorCategory.SCHEMA
        assert exc_info.value.context.entity == "Unsupported"

    def test_field_shadowing_entity_method_rejected(self, inspector):
        with pytest.raises(SchemaError, match="shadows Entity.metadata") as exc_info:
            inspector.inspect(Document)
        assert exc_info.value.context.entity == "Document"

    def test_float_without_sql_type_still_inspects(self, inspector):
        assert inspector.inspect(Measurement).field("ratio").kind is FieldKind.REAL


class TestColumnLookup:
    def test_snake_case_column_maps_to_field(self, inspector):
        meta = inspector.inspect(Reading)
        assert meta.field_for_column("date_time").name == "date_time"
        assert meta.field_for_column("has_default").name == "has_default"

    def test_unknown_column(self, inspector):
        assert inspector.inspect(Reading).field_for_column("nope") is None


class TestPrimaryKey:
    def test_single_key(self, inspector):
        assert inspector.primary_key_field(BlogPost).name == "id"

    def test_missing_key(self, inspector):
        with pytest.raises(SchemaError, match="does not have a primary key"):
            inspector.primary_key_field(Orphan)

    def test_multiple_keys(self, inspector):
        with pytest.raises(SchemaError, match="more than one primary key: left, right"):
            inspector.primary_key_field(TwoKeys)


class TestCache:
    def test_inspect_is_cached(self, inspector):
        assert inspector.inspect(BlogPost) is inspector.inspect(BlogPost)

    def test_clear_cache(self, inspector):
        first = inspector.inspect(BlogPost)
        inspector.clear_cache()
        assert inspector.inspect(BlogPost) is not first
        assert inspector.inspect(BlogPost) == first

    def test_shared_inspector_backs_entity_metadata(self):
        assert BlogPost.metadata() is get_inspector().inspect(BlogPost)
