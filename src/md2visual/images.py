#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/images.py
"""Local image resolution and metadata probing.

Only local files are ever opened. A reference is resolved against a base
directory, checked for existence and readability, and probed with Pillow for
its pixel size when the document does not state one. Remote URLs are rejected
before any I/O happens.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from md2visual.ast.nodes import Image as ImageNode
from md2visual.constants import DEPS_IMAGE, LOCAL_IMAGE_SCHEMES, MIN_URL_SCHEME_LENGTH
from md2visual.exceptions import ImageUnavailableError
from md2visual.utils.decorators import requires_dependencies
from md2visual.visual import Image

logger = logging.getLogger(__name__)


def _url_scheme(url: str) -> str:
    scheme = urlparse(url).scheme.lower()
    # "C:\images\a.png" parses with scheme "c"
    if len(scheme) < MIN_URL_SCHEME_LENGTH:
        return ""
    return scheme


def resolve_image_path(url: str, base_directory: Optional[Path] = None) -> Path:
    """Turn an image reference into an absolute local path.

    Parameters
    ----------
    url : str
        Image path as written in the document: a relative or absolute path,
        or a ``file://`` URL
    base_directory : Path, optional
        Directory relative paths resolve against (default: current directory)

    Returns
    -------
    Path
        Absolute path. Existence is not checked here.

    Raises
    ------
    ImageUnavailableError
        If the reference is empty or uses a non-local scheme

    """
    if not url or not url.strip():
        raise ImageUnavailableError(url, "empty image path")

    scheme = _url_scheme(url)
    if scheme not in LOCAL_IMAGE_SCHEMES:
        raise ImageUnavailableError(url, f"'{scheme}' images are not loaded, only local files")

    base = base_directory if base_directory is not None else Path.cwd()
    if scheme == "file":
        return Path(os.path.abspath(base / url2pathname(urlparse(url).path)))

    path = Path(os.path.abspath(base / url))
    # Markdown parsers percent-encode link destinations ("my%20image.png")
    try:
        if not path.exists():
            unquoted = Path(os.path.abspath(base / unquote(url)))
            if unquoted.exists():
                return unquoted
    except (OSError, ValueError) as e:
        raise ImageUnavailableError(url, "path cannot be checked", original_error=e) from e
    return path


@requires_dependencies("image probe", DEPS_IMAGE)
def probe_image_size(path: Path) -> Tuple[Optional[int], Optional[int]]:
    """Read the pixel size of an image file with Pillow.

    Parameters
    ----------
    path : Path
        Existing local file

    Returns
    -------
    tuple of (int or None, int or None)
        ``(width, height)``, or ``(None, None)`` when Pillow does not
        recognise the format

    Raises
    ------
    ImageUnavailableError
        If the file cannot be read

    """
    from PIL import Image as PILImage
    from PIL import UnidentifiedImageError

    try:
        with PILImage.open(path) as img:
            width, height = img.size
    except UnidentifiedImageError:
        logger.debug(f"Pillow could not identify {path}, leaving dimensions unset")
        return None, None
    except OSError as e:
        raise ImageUnavailableError(str(path), "file not readable", original_error=e) from e
    return width, height


def load_image(node: ImageNode, base_directory: Optional[Path] = None) -> Image:
    """Resolve an image node into a visual image.

    Parameters
    ----------
    node : md2visual.ast.Image
        Image reference from the document
    base_directory : Path, optional
        Directory relative paths resolve against

    Returns
    -------
    md2visual.visual.Image
        Resolved image. Dimensions stated in the document win over probed ones.

    Raises
    ------
    ImageUnavailableError
        If the image is remote, missing or unreadable

    """
    path = resolve_image_path(node.url, base_directory)
    logger.debug(f"Resolved image '{node.url}' to {path}")

    try:
        is_file = path.is_file()
        readable = is_file and os.access(path, os.R_OK)
    except (OSError, ValueError) as e:
        raise ImageUnavailableError(node.url, "file not readable", original_error=e) from e
    if not is_file:
        raise ImageUnavailableError(node.url, "file not found")
    if not readable:
        raise ImageUnavailableError(node.url, "file not readable")

    width, height = node.width, node.height
    if width is None or height is None:
        probed_width, probed_height = probe_image_size(path)
        width = width if width is not None else probed_width
        height = height if height is not None else probed_height

    return Image(resolved_path=path, alt=node.alt_text, title=node.title, width=width, height=height)
