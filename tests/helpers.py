"""Page record factories for tests."""

import posixpath
from pathlib import Path

from kiln.core.pages import PageRecord
from kiln.core.types import URLPath

INPUT_DIR = Path("/site/src")
OUTPUT_DIR = Path("/site/dist")


def stem_for(url: str) -> str:
    """Path stem of a URL: ``/about/`` is ``/about/index``."""
    if url.endswith("/"):
        return f"{url}index"
    return posixpath.splitext(url)[0]


def make_page(url: str, title: str | None = None) -> PageRecord:
    """Create an in-memory page record for ``url``."""
    stem = stem_for(url)
    relative = stem.lstrip("/")
    name = posixpath.basename(stem)
    slug = posixpath.basename(posixpath.dirname(stem)) if name == "index" else name
    return PageRecord(
        input_path=INPUT_DIR / f"{relative}.html",
        output_path=OUTPUT_DIR / f"{relative}.html",
        url=URLPath(url),
        file_path_stem=stem,
        file_slug=slug,
        extension=".html",
        title=title,
    )
