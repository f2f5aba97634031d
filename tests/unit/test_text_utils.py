# tests/unit/test_text_utils.py
"""Unit tests for text utilities."""

import pytest

from inboxsage.utils.text_utils import (
    COMMON_TAGS,
    estimate_reading_time,
    extract_excerpt,
    extract_image_url,
    extract_tags,
    strip_html,
)


@pytest.mark.unit
class TestStripHtml:
    """Tests for strip_html function."""

    def test_strip_html_removes_tags_and_entities(self):
        """Should drop tags and decode entities."""
        assert strip_html("<p>Hello &amp; <b>world</b></p>") == "Hello & world"

    def test_strip_html_empty(self):
        """Should return empty string for None."""
        assert strip_html(None) == ""


@pytest.mark.unit
class TestReadingTime:
    """Tests for estimate_reading_time function."""

    def test_rounds_up_at_200_wpm(self):
        """Should round partial minutes up."""
        text = " ".join(["word"] * 450)
        assert estimate_reading_time(text) == 3

    def test_ignores_markup(self):
        """Should count words of the stripped text only."""
        text = "<div>" + " ".join(["<span>word</span>"] * 200) + "</div>"
        assert estimate_reading_time(text) == 1

    def test_minimum_one_minute(self):
        """Should never return less than one minute."""
        assert estimate_reading_time("") == 1
        assert estimate_reading_time(None) == 1


@pytest.mark.unit
class TestExtractExcerpt:
    """Tests for extract_excerpt function."""

    def test_short_text_unchanged(self):
        """Should return short text as-is, without markup."""
        assert extract_excerpt("<p>Short post.</p>") == "Short post."

    def test_long_text_cut_at_word_boundary(self):
        """Should cut at a word boundary and append an ellipsis."""
        text = "alpha beta gamma delta " * 20
        excerpt = extract_excerpt(text, max_length=30)

        assert excerpt.endswith("...")
        assert len(excerpt) <= 33
        body = excerpt[:-3]
        assert body.split()[-1] in {"alpha", "beta", "gamma", "delta"}
        assert not body.endswith(" ")


@pytest.mark.unit
class TestExtractImageUrl:
    """Tests for extract_image_url function."""

    def test_first_image(self):
        """Should return the src of the first image."""
        html = '<p>x</p><img alt="a" src="https://cdn.example.com/1.png"><img src="https://cdn.example.com/2.png">'
        assert extract_image_url(html) == "https://cdn.example.com/1.png"

    def test_no_image(self):
        """Should return None when there is no image."""
        assert extract_image_url("<p>No pictures here</p>") is None
        assert extract_image_url(None) is None


@pytest.mark.unit
class TestExtractTags:
    """Tests for extract_tags function."""

    def test_matches_whole_words(self):
        """Should match known tags on word boundaries only."""
        tags = extract_tags("<p>AI startups are moving into crypto.</p>")
        assert tags == ["ai", "crypto"]

    def test_caps_at_five(self):
        """Should return at most five tags."""
        assert extract_tags(" ".join(COMMON_TAGS)) == COMMON_TAGS[:5]

    def test_empty(self):
        """Should return an empty list for missing content."""
        assert extract_tags(None) == []

