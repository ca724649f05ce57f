"""Parser for the {% img %} tag markup.

Syntax:
    [class name(s)] [http[s]:/]/path/to/image [width [height]] [title text | "title text" ["alt text"]]
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

# Class list is greedy and backtracks until a source-like token follows it
MARKUP_PATTERN = re.compile(
    r"(?P<classes>\S.*\s+)?"
    r"(?P<src>(?:https?://|/|\S+/)\S+)"
    r"(?:\s+(?P<width>\d+))?"
    r"(?:\s+(?P<height>\d+))?"
    r"(?P<title>\s+.+)?",
    re.IGNORECASE,
)

# "title" "alt" or 'title' 'alt'
QUOTED_PAIR_PATTERN = re.compile(
    r"""["'](?P<title>[^"']+)?["']\s+["'](?P<alt>[^"']+)?["']"""
)

QUOTE_ENTITY = "&#34;"

# Attribute order used when emitting the tag
ATTRIBUTE_ORDER = ("class", "src", "width", "height", "title", "alt")


@dataclass(frozen=True)
class ImageAttributes:
    """Attributes parsed from one tag occurrence."""

    src: str
    classes: str | None = None
    width: str | None = None
    height: str | None = None
    title: str | None = None
    alt: str | None = None

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield present (attribute, value) pairs in emission order."""
        values = {
            "class": self.classes,
            "src": self.src,
            "width": self.width,
            "height": self.height,
            "title": self.title,
            "alt": self.alt,
        }
        for key in ATTRIBUTE_ORDER:
            if values[key] is not None:
                yield key, values[key]

    def to_dict(self) -> dict[str, str]:
        return dict(self.items())


def _group(match: re.Match, name: str) -> str | None:
    value = match.group(name)
    return value.strip() if value is not None else None


def split_title(title: str | None) -> tuple[str | None, str | None]:
    """Split trailing text into (title, alt).

    A quoted pair gives its two segments, either of which may be None when
    its quotes are empty. Any other text becomes both title and alt, with
    double quotes replaced by an HTML entity.
    """
    if title is None:
        return None, None

    pair = QUOTED_PAIR_PATTERN.search(title)
    if pair:
        return pair.group("title"), pair.group("alt")

    escaped = title.replace('"', QUOTE_ENTITY)
    return escaped, escaped


def parse(markup: str) -> ImageAttributes | None:
    """Parse tag markup into ImageAttributes.

    Args:
        markup: Raw tag argument string (everything between "img" and "%}")

    Returns:
        Parsed attributes, or None if no source-like token was found
    """
    match = MARKUP_PATTERN.search(markup)
    if match is None:
        return None

    title, alt = split_title(_group(match, "title"))

    classes = _group(match, "classes")
    if classes is not None:
        classes = classes.replace('"', "")

    return ImageAttributes(
        src=_group(match, "src"),
        classes=classes,
        width=_group(match, "width"),
        height=_group(match, "height"),
        title=title,
        alt=alt,
    )
