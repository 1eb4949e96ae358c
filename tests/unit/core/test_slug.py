"""Unit tests for core/utils/slug.py"""

import pytest

from pagepub.core.utils.slug import slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello, World!", "hello-world"),
    ("Hello World", "hello-world"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("my_file_name", "my_file_name"),
    ("!!!", ""),
    ("", ""),
])
def test_slugify_basic(text, expected):
    """slugify collapses non-word runs, trims separators, and lowercases."""
    assert slugify(text) == expected


def test_slugify_is_deterministic():
    """The same text always yields the same slug."""
    assert slugify("API Reference (v2)") == slugify("API Reference (v2)") == "api-reference-v2"


def test_slugify_strips_both_ends():
    """Leading and trailing separators are both removed."""
    assert slugify("--Both Ends--") == "both-ends"
