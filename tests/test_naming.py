"""Tests for entityspine.naming."""

import pytest

from entityspine.naming import camel_to_snake, snake_to_camel


class TestCamelToSnake:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("BlogPost", "blog_post"),
            ("hasDefault", "has_default"),
            ("dateTime", "date_time"),
            ("Test", "test"),
            ("value", "value"),
        ],
    )
    def test_converts(self, name, expected):
        assert camel_to_snake(name) == expected

    def test_snake_case_is_identity(self):
        assert camel_to_snake("simple_array") == "simple_array"

    def test_uppercase_runs_split_per_letter(self):
        """Known limitation: acronyms are not kept together."""
        assert camel_to_snake("HTTPCode") == "h_t_t_p_code"


class TestSnakeToCamel:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("has_default", "hasDefault"),
            ("date_time", "dateTime"),
            ("is_nullable", "isNullable"),
            ("value", "value"),
            ("Blog_post", "blogPost"),
        ],
    )
    def test_converts(self, name, expected):
        assert snake_to_camel(name) == expected

    def test_inverse_for_plain_identifiers(self):
        for name in ("simpleArray", "hasDefault", "id"):
            assert snake_to_camel(camel_to_snake(name)) == name
