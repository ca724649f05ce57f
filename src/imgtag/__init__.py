"""imgtag - the {% img %} tag for static site pages."""

from .parser import ImageAttributes, parse
from .render import ERROR_MESSAGE, render, render_markup

__all__ = ["ERROR_MESSAGE", "ImageAttributes", "parse", "render", "render_markup"]
