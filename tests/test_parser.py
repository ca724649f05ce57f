"""Tests for img tag markup parsing."""

import dataclasses

import pytest

from imgtag.parser import ImageAttributes, parse, split_title


class TestParseSource:
    """Tests for finding the image source."""

    def test_absolute_path(self):
        """A leading slash marks the source."""
        attrs = parse("/images/ninja.png")
        assert attrs.src == "/images/ninja.png"
        assert attrs.classes is None

    def test_http_url(self):
        """http URLs are recognized as the source."""
        attrs = parse("http://site.com/images/ninja.png")
        assert attrs.src == "http://site.com/images/ninja.png"

    def test_https_url(self):
        """https URLs are recognized as the source."""
        attrs = parse("https://site.com/ninja.png")
        assert attrs.src == "https://site.com/ninja.png"

    def test_relative_path(self):
        """A token containing a slash is a relative source."""
        attrs = parse("images/ninja.png")
        assert attrs.src == "images/ninja.png"

    def test_empty_markup(self):
        """Empty markup does not match."""
        assert parse("") is None

    def test_whitespace_only(self):
        """Whitespace-only markup does not match."""
        assert parse("   ") is None

    def test_no_path_token(self):
        """Text without a path or URL does not match."""
        assert parse("left half 150 150 Ninja Attack!") is None

    def test_surrounding_whitespace_ignored(self):
        """Markup as passed by a tag (with padding) parses the same."""
        assert parse(" /images/ninja.png Ninja Attack! ") == parse(
            "/images/ninja.png Ninja Attack!"
        )


class TestParseClasses:
    """Tests for the class list before the source."""

    def test_multiple_classes(self):
        """All tokens before the source form the class list."""
        attrs = parse("left half http://site.com/images/ninja.png Ninja Attack!")
        assert attrs.classes == "left half"
        assert attrs.src == "http://site.com/images/ninja.png"

    def test_double_quotes_removed(self):
        """Double quotes are stripped from the class list."""
        attrs = parse('"left half" /images/ninja.png')
        assert attrs.classes == "left half"

    def test_title_with_slash_becomes_source(self):
        """The last path-like token wins, as the class group is greedy."""
        attrs = parse("/images/a.png see a/b")
        assert attrs.classes == "/images/a.png see"
        assert attrs.src == "a/b"


class TestParseSize:
    """Tests for width and height."""

    def test_width_and_height(self):
        attrs = parse("/images/ninja.png 150 100")
        assert attrs.width == "150"
        assert attrs.height == "100"
        assert attrs.title is None

    def test_width_only(self):
        attrs = parse("/images/ninja.png 150")
        assert attrs.width == "150"
        assert attrs.height is None

    def test_non_numeric_token_is_title(self):
        """A non-numeric token after the source starts the title."""
        attrs = parse("/images/ninja.png large 200")
        assert attrs.width is None
        assert attrs.height is None
        assert attrs.title == "large 200"

    def test_digits_followed_by_letters(self):
        """Leading digits are taken as width and the rest is dropped."""
        attrs = parse("/images/ninja.png 300px wide")
        assert attrs.width == "300"
        assert attrs.height is None
        assert attrs.title is None


class TestParseTitle:
    """Tests for title and alt text."""

    def test_plain_title_used_as_alt(self):
        """Unquoted trailing text becomes both title and alt."""
        attrs = parse("/images/ninja.png Ninja Attack!")
        assert attrs.title == "Ninja Attack!"
        assert attrs.alt == "Ninja Attack!"

    def test_quoted_title_and_alt(self):
        """Two double-quoted segments give title and alt."""
        attrs = parse(
            'left half http://site.com/images/ninja.png 150 150 "Ninja Attack!" '
            '"Ninja in attack posture"'
        )
        assert attrs.classes == "left half"
        assert attrs.width == "150"
        assert attrs.height == "150"
        assert attrs.title == "Ninja Attack!"
        assert attrs.alt == "Ninja in attack posture"

    def test_single_quoted_pair(self):
        """Single quotes work for the pair too."""
        attrs = parse("/images/ninja.png 'Ninja Attack!' 'A ninja'")
        assert attrs.title == "Ninja Attack!"
        assert attrs.alt == "A ninja"

    def test_empty_quoted_title(self):
        """Empty quotes leave that value unset."""
        attrs = parse('/images/ninja.png "" "Only alt"')
        assert attrs.title is None
        assert attrs.alt == "Only alt"

    def test_quotes_in_title_escaped(self):
        """Double quotes in an unpaired title become entities in title and alt."""
        attrs = parse('/images/ninja.png Say "hi" now')
        assert attrs.title == "Say &#34;hi&#34; now"
        assert attrs.alt == "Say &#34;hi&#34; now"

    def test_no_title(self):
        attrs = parse("/images/ninja.png")
        assert attrs.title is None
        assert attrs.alt is None


class TestSplitTitle:
    """Tests for split_title()."""

    def test_none(self):
        assert split_title(None) == (None, None)

    def test_pair_found_inside_text(self):
        """The quoted pair may be surrounded by other text."""
        assert split_title('see "One" "Two" here') == ("One", "Two")

    def test_single_quoted_segment_is_plain(self):
        """One quoted segment is not a pair."""
        assert split_title('"One"') == ("&#34;One&#34;", "&#34;One&#34;")


class TestImageAttributes:
    """Tests for the ImageAttributes record."""

    def test_items_in_fixed_order(self):
        """Present attributes come out as class, src, width, height, title, alt."""
        attrs = ImageAttributes(
            src="/a.png", classes="left", width="1", height="2", title="T", alt="A"
        )
        assert [key for key, _ in attrs.items()] == [
            "class",
            "src",
            "width",
            "height",
            "title",
            "alt",
        ]

    def test_absent_attributes_skipped(self):
        attrs = ImageAttributes(src="/a.png", title="T", alt="T")
        assert attrs.to_dict() == {"src": "/a.png", "title": "T", "alt": "T"}

    def test_is_immutable(self):
        attrs = ImageAttributes(src="/a.png")
        with pytest.raises(dataclasses.FrozenInstanceError):
            attrs.src = "/b.png"
