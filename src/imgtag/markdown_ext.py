"""
Markdown extension for the {% img %} tag.
Converts {% img [class names] /path/to/image [width [height]] [title] %} to an
<img> tag, or to a caption wrapper when the classes include "caption".
"""

import re

from markdown import Extension
from markdown.preprocessors import Preprocessor

from .dimensions import DEFAULT_MAX_BYTES, DEFAULT_TIMEOUT, bind_lookup
from .render import DEFAULT_SITE_ROOT, render_markup

# Pattern to match {% img markup %}
IMG_TAG_PATTERN = re.compile(r"\{%\s*img\b(?P<markup>.*?)%\}")


class ImageTagPreprocessor(Preprocessor):
    """Preprocessor replacing {% img %} tags with rendered HTML."""

    def __init__(self, md, site_root=DEFAULT_SITE_ROOT, dimension_lookup=None):
        super().__init__(md)
        self.site_root = site_root
        self.dimension_lookup = dimension_lookup

    def run(self, lines):
        """Process lines to replace each tag with stashed HTML."""
        return [IMG_TAG_PATTERN.sub(self._replace_tag, line) for line in lines]

    def _replace_tag(self, match):
        html = render_markup(
            match.group("markup"),
            dimension_lookup=self.dimension_lookup,
            site_root=self.site_root,
        )
        # Stash so inline markdown leaves attribute and caption text alone
        return self.md.htmlStash.store(html)


class ImageTagExtension(Extension):
    """Markdown extension registering the img tag."""

    def __init__(self, dimension_lookup=None, **kwargs):
        # Callable(uri) -> ImageSize or None, overriding the built-in lookup
        self.dimension_lookup = dimension_lookup
        self.config = {
            "site_root": [
                DEFAULT_SITE_ROOT,
                "Prefix for image sources that are not http(s) URLs",
            ],
            "probe_dimensions": [
                True,
                "Look up the image width for captions without one",
            ],
            "lookup_timeout": [DEFAULT_TIMEOUT, "Timeout in seconds for remote images"],
            "lookup_max_bytes": [
                DEFAULT_MAX_BYTES,
                "Stop reading a remote image after this many bytes",
            ],
        }
        super().__init__(**kwargs)

    def _dimension_lookup(self):
        if self.dimension_lookup is not None:
            return self.dimension_lookup
        if not self.getConfig("probe_dimensions"):
            return None

        return bind_lookup(
            timeout=self.getConfig("lookup_timeout"),
            max_bytes=self.getConfig("lookup_max_bytes"),
        )

    def extendMarkdown(self, md):
        """Register the preprocessor with markdown."""
        processor = ImageTagPreprocessor(
            md,
            site_root=self.getConfig("site_root"),
            dimension_lookup=self._dimension_lookup(),
        )
        # After normalize_whitespace (30), which strips stash placeholders
        md.preprocessors.register(processor, "img", 25)


def makeExtension(**kwargs):
    """Entry point for markdown extension."""
    return ImageTagExtension(**kwargs)
