"""
Unit tests for index name glob matching.
"""

import pytest

from oscleaner.retention.models import IndexInfo
from oscleaner.retention.patterns import matches, filter_by_pattern


class TestMatches:
    """Test suite for matches()."""

    def test_wildcards_on_both_sides(self):
        assert matches("*-myindex-*", "prod-myindex-2024.01.01") is True
        assert matches("*-myindex-*", "prod-other-2024.01.01") is False

    def test_empty_pattern(self):
        assert matches("", "") is True
        assert matches("", "x") is False

    def test_star_matches_empty_string(self):
        assert matches("logs-*", "logs-") is True
        assert matches("*", "") is True
        assert matches("a*b*c", "abc") is True

    def test_full_string_match_only(self):
        assert matches("logs", "app-logs") is False
        assert matches("logs-*", "app-logs-2024.01.01") is False
        assert matches("*-logs", "app-logs-2024.01.01") is False

    def test_case_sensitive(self):
        assert matches("Logs-*", "logs-2024.01.01") is False

    @pytest.mark.parametrize("pattern,name", [
        ("logs-?", "logs-?"),
        ("logs-[0-9]", "logs-[0-9]"),
        ("a.b", "a.b"),
        ("a+b(c)", "a+b(c)"),
    ])
    def test_other_characters_are_literal(self, pattern, name):
        assert matches(pattern, name) is True

    def test_question_mark_is_not_a_wildcard(self):
        assert matches("logs-?", "logs-a") is False
        assert matches("a.b", "axb") is False

    def test_multiple_stars(self):
        assert matches("*-logs-*-*", "app-logs-eu-2024.01.01") is True
        assert matches("*-logs-*-*", "app-logs-2024.01.01") is False


class TestFilterByPattern:
    """Test suite for filter_by_pattern()."""

    def test_keeps_input_order(self):
        indices = [
            IndexInfo("b-logs-2024.01.02", 1),
            IndexInfo("metrics-2024.01.01", 1),
            IndexInfo("a-logs-2024.01.01", 1),
        ]
        result = filter_by_pattern(indices, "*-logs-*")
        assert [index.name for index in result] == ["b-logs-2024.01.02", "a-logs-2024.01.01"]
