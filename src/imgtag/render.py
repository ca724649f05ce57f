"""Rendering of parsed {% img %} tags to HTML."""

import re
from collections.abc import Callable
from dataclasses import replace

from .dimensions import ImageSize
from .logging import debug
from .parser import ImageAttributes, parse

ERROR_MESSAGE = (
    "Error processing input, expected syntax: "
    "{% img [class name(s)] /url/to/image [width height] [title text] %}"
)

DEFAULT_SITE_ROOT = "source"

CAPTION_CLASS = "caption"

ABSOLUTE_URL_PATTERN = re.compile(r"https?://\S+")

DimensionLookup = Callable[[str], ImageSize | None]


def resolve_source(src: str, site_root: str = DEFAULT_SITE_ROOT) -> str:
    """Return src unchanged for absolute URLs, otherwise prefixed with site_root."""
    if ABSOLUTE_URL_PATTERN.search(src):
        return src
    return site_root + src


def format_attributes(attrs: ImageAttributes) -> str:
    return " ".join(f'{key}="{value}"' for key, value in attrs.items())


def is_caption(attrs: ImageAttributes) -> bool:
    return attrs.classes is not None and CAPTION_CLASS in attrs.classes


def lookup_width(url: str, dimension_lookup: DimensionLookup | None) -> str:
    """Ask dimension_lookup for the image width, or return "" if unavailable."""
    if dimension_lookup is None:
        return ""
    try:
        size = dimension_lookup(url)
    except Exception as e:
        debug(f"Dimension lookup failed for {url}: {e}")
        return ""
    if size is None:
        return ""
    return str(size[0])


def render_plain(attrs: ImageAttributes) -> str:
    return f"<img {format_attributes(attrs)}>"


def render_caption(
    attrs: ImageAttributes, dimension_lookup: DimensionLookup | None = None
) -> str:
    """Render the caption-wrapped variant.

    The first "caption" in the class list is dropped and the rest moves to
    the wrapper span. Without an explicit width the image is probed, and
    the style keeps an empty number when that fails.
    """
    if attrs.width is not None:
        display_width = attrs.width
    else:
        display_width = lookup_width(attrs.src, dimension_lookup)

    remaining = attrs.classes.replace(CAPTION_CLASS, "", 1)
    wrapper_class = ("caption-wrapper " + remaining).rstrip()
    inner = replace(attrs, classes=None)

    return (
        f'<span class="{wrapper_class}" style="width: {display_width}px">'
        f'<img class="caption" {format_attributes(inner)}>'
        f'<span class="caption-text">{attrs.alt or ""}</span>'
        "</span>"
    )


def render(
    attrs: ImageAttributes | None,
    dimension_lookup: DimensionLookup | None = None,
    site_root: str = DEFAULT_SITE_ROOT,
) -> str:
    """Render parsed tag attributes to an HTML fragment.

    Args:
        attrs: Result of parse(), None when the markup did not match
        dimension_lookup: Callable returning the pixel size of an image URL
            or path, used only for captions without an explicit width
        site_root: Prefix for sources that are not absolute URLs

    Returns:
        An <img> tag, a caption wrapper, or ERROR_MESSAGE
    """
    if attrs is None:
        return ERROR_MESSAGE

    resolved = replace(attrs, src=resolve_source(attrs.src, site_root))

    if is_caption(resolved):
        return render_caption(resolved, dimension_lookup)
    return render_plain(resolved)


def render_markup(
    markup: str,
    dimension_lookup: DimensionLookup | None = None,
    site_root: str = DEFAULT_SITE_ROOT,
) -> str:
    """Parse and render tag markup in one step."""
    attrs = parse(markup)
    if attrs is None:
        debug(f"No image source found in tag markup: {markup!r}")
    return render(attrs, dimension_lookup=dimension_lookup, site_root=site_root)
