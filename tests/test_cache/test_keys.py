"""Tests for cache key derivation."""

from __future__ import annotations

from academy.cache import make_key


class TestMakeKey:
    def test_no_params_is_bare_resource(self) -> None:
        assert make_key("/api/courses") == "/api/courses"

    def test_empty_params_match_no_params(self) -> None:
        assert make_key("/api/courses", {}) == make_key("/api/courses", None)

    def test_param_order_does_not_matter(self) -> None:
        assert make_key("/api/blogs", {"a": 1, "b": 2}) == make_key("/api/blogs", {"b": 2, "a": 1})

    def test_different_values_differ(self) -> None:
        assert make_key("/api/blogs", {"a": 1}) != make_key("/api/blogs", {"a": 2})

    def test_different_resources_differ(self) -> None:
        assert make_key("/api/blogs", {"a": 1}) != make_key("/api/courses", {"a": 1})

    def test_params_differ_from_bare(self) -> None:
        assert make_key("/api/blogs", {"category": "ai"}) != make_key("/api/blogs")

    def test_compact_json_format(self) -> None:
        assert make_key("/api/blogs", {"category": "python"}) == '/api/blogs?{"category":"python"}'

    def test_string_and_int_values_differ(self) -> None:
        assert make_key("/r", {"page": 1}) != make_key("/r", {"page": "1"})

    def test_mixed_key_types_are_accepted(self) -> None:
        assert make_key("/r", {1: "a", "b": 2}) == '/r?{"1":"a","b":2}'

    def test_key_names_compare_as_strings(self) -> None:
        assert make_key("/r", {1: "a"}) == make_key("/r", {"1": "a"})
