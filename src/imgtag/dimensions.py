"""Image dimension probing for caption widths.

Reads only as much of a local file or remote resource as Pillow needs to
decode the image header.
"""

from collections.abc import Callable
from contextlib import suppress
from pathlib import Path
from typing import NamedTuple

import requests
from PIL import Image, ImageFile

from .logging import debug

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_BYTES = 1024 * 1024
CHUNK_SIZE = 1024

# Errors Pillow raises for missing, truncated or unsupported images
IMAGE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


class ImageSize(NamedTuple):
    width: int
    height: int


def is_remote(uri: str) -> bool:
    return uri.lower().startswith(("http://", "https://"))


def fetch_remote_size(
    url: str, timeout: float = DEFAULT_TIMEOUT, max_bytes: int = DEFAULT_MAX_BYTES
) -> ImageSize | None:
    """Stream a remote image until its header reveals the pixel size."""
    parser = ImageFile.Parser()
    received = 0

    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                parser.feed(chunk)
                if parser.image is not None:
                    return ImageSize(*parser.image.size)
                received += len(chunk)
                if received >= max_bytes:
                    debug(f"Gave up probing {url} after {received} bytes")
                    return None
    finally:
        # close() complains about the unread remainder of the image
        with suppress(*IMAGE_ERRORS):
            parser.close()

    return None


def read_local_size(path: Path) -> ImageSize:
    """Read the pixel size of a local image file without decoding it."""
    with Image.open(path) as img:
        return ImageSize(*img.size)


def fetch_image_size(
    uri: str, timeout: float = DEFAULT_TIMEOUT, max_bytes: int = DEFAULT_MAX_BYTES
) -> ImageSize | None:
    """Get the pixel size of an image URL or filesystem path.

    Args:
        uri: http(s) URL or local path
        timeout: Network timeout in seconds for remote images
        max_bytes: Stop reading a remote image after this many bytes

    Returns:
        ImageSize, or None if the image is unreachable or unreadable
    """
    try:
        if is_remote(uri):
            return fetch_remote_size(uri, timeout=timeout, max_bytes=max_bytes)
        return read_local_size(Path(uri))
    except requests.RequestException as e:
        debug(f"Could not fetch {uri}: {e}")
    except IMAGE_ERRORS as e:
        debug(f"Could not read image size of {uri}: {e}")
    return None


def bind_lookup(
    timeout: float = DEFAULT_TIMEOUT, max_bytes: int = DEFAULT_MAX_BYTES
) -> Callable[[str], ImageSize | None]:
    """Return a one-argument fetch_image_size with fixed limits."""

    def lookup(uri: str) -> ImageSize | None:
        return fetch_image_size(uri, timeout=timeout, max_bytes=max_bytes)

    return lookup


def make_dimension_lookup(config) -> Callable[[str], ImageSize | None] | None:
    """Build a lookup callable from a Config, or None if probing is disabled."""
    if not config.lookup.enabled:
        return None

    return bind_lookup(timeout=config.lookup.timeout, max_bytes=config.lookup.max_bytes)
