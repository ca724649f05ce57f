"""Jinja2 extension providing the {% img %} tag.

Usage:
    env = Environment(extensions=[ImageTagExtension])
    env.img_site_root = "/"
    env.img_dimension_lookup = fetch_image_size

Tag markup is free text (``Ninja Attack!`` is not a valid Jinja expression),
so the extension quotes it into a string literal while preprocessing the
template source. The markup is then parsed once when the template is
compiled and rendered each time the template is evaluated.
"""

import json
import re
from dataclasses import astuple

from jinja2 import nodes
from jinja2.ext import Extension
from markupsafe import Markup

from .parser import ImageAttributes, parse as parse_markup
from .render import DEFAULT_SITE_ROOT, render


class ImageTagExtension(Extension):
    """Registers the ``img`` tag with a Jinja2 environment."""

    tags = {"img"}

    def __init__(self, environment):
        super().__init__(environment)
        environment.extend(
            img_site_root=DEFAULT_SITE_ROOT,
            img_dimension_lookup=None,
        )
        start = re.escape(environment.block_start_string)
        end = re.escape(environment.block_end_string)
        self._tag_pattern = re.compile(
            "(?P<start>%s[-+]?)\\s*img\\b(?P<markup>.*?)(?P<end>[-+]?%s)" % (start, end)
        )
        # Raw blocks are split out and left untouched
        self._raw_pattern = re.compile(
            "(%s[-+]?\\s*raw\\s*[-+]?%s.*?%s[-+]?\\s*endraw\\s*[-+]?%s)"
            % (start, end, start, end),
            re.DOTALL,
        )

    def _quote_tag(self, match):
        markup = json.dumps(match.group("markup"), ensure_ascii=False)
        return f"{match.group('start')} img {markup} {match.group('end')}"

    def preprocess(self, source, name, filename=None):
        parts = self._raw_pattern.split(source)
        # Odd indices are the captured raw blocks
        return "".join(
            part if i % 2 else self._tag_pattern.sub(self._quote_tag, part)
            for i, part in enumerate(parts)
        )

    def parse(self, parser):
        lineno = next(parser.stream).lineno
        markup = parser.stream.expect("string").value

        attrs = parse_markup(markup)
        values = astuple(attrs) if attrs is not None else None

        call = self.call_method("_render_tag", [nodes.Const(values)], lineno=lineno)
        return nodes.Output([call], lineno=lineno)

    def _render_tag(self, values):
        attrs = ImageAttributes(*values) if values is not None else None
        html = render(
            attrs,
            dimension_lookup=self.environment.img_dimension_lookup,
            site_root=self.environment.img_site_root,
        )
        return Markup(html)
