"""Page title lookup with an in-process cache.

Titles come from, in order: the page's ``title`` metadata, the first
``<title>`` element of its content, and finally its file slug. Results are
memoized for the lifetime of the resolver and never invalidated.
"""

import logging
import re
from collections.abc import Callable
from pathlib import Path

from kiln.core.pages import PageRecord
from kiln.errors import PageLoadError

logger = logging.getLogger(__name__)

OptimizeTitle = Callable[[str], str]

# Shown for pages whose title can't be resolved
NO_TITLE = "__NO_TITLE__"

_TITLE_RE = re.compile(r"<title>(.*?)</title>", re.IGNORECASE | re.DOTALL)


def title_from_html(content: str, optimize_title: OptimizeTitle | None = None) -> str:
    """Extract the first ``<title>`` text from HTML.

    Returns:
        Trimmed (and optimized) title, empty string if there is none
    """
    match = _TITLE_RE.search(content)
    title = match.group(1).strip() if match else ""
    if optimize_title is not None:
        return optimize_title(title)
    return title


class TitleResolver:
    """Resolves page titles, caching results by path stem or file path."""

    def __init__(self, static_dir: Path | None = None) -> None:
        """Initialize resolver.

        Args:
            static_dir: Directory of built HTML files used to look up titles
                of URLs that have no source page
        """
        self._static_dir = static_dir
        self._cache: dict[str, str] = {}

    @property
    def static_dir(self) -> Path | None:
        return self._static_dir

    def get_title(
        self,
        page: PageRecord,
        optimize_title: OptimizeTitle | None = None,
        *,
        safe: bool = False,
    ) -> str:
        """Get the title of a page.

        Args:
            page: Page to resolve
            optimize_title: Applied to titles extracted from HTML
            safe: Return an empty string instead of raising when the page
                can't be loaded

        Returns:
            Page title

        Raises:
            PageLoadError: If the page can't be loaded and ``safe`` is False
        """
        cached = self._cache.get(page.file_path_stem)
        if cached is not None:
            return cached

        try:
            page_content = page.load()
        except PageLoadError:
            if safe:
                logger.debug("Title lookup failed for %s", page.input_path)
                return ""
            raise

        meta_title = page_content.meta.get("title")
        title = (
            (meta_title if isinstance(meta_title, str) else None)
            or title_from_html(page_content.content, optimize_title)
            or page.file_slug
        )
        self._cache[page.file_path_stem] = title
        return title

    def get_title_from_static_file(
        self,
        file_path: Path,
        optimize_title: OptimizeTitle | None = None,
    ) -> str | None:
        """Get the title of a built HTML file.

        Returns:
            Title, or None if the file doesn't exist
        """
        key = str(file_path)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if not file_path.is_file():
            return None

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("Cannot read static file %s", file_path)
            return None

        title = title_from_html(content, optimize_title)
        self._cache[key] = title
        return title

    def static_file_for_url(self, url: str) -> Path | None:
        """Map a URL to the built file that would be served for it."""
        if self._static_dir is None:
            return None
        relative = url.lstrip("/")
        if url.endswith("/"):
            relative = f"{relative}index.html"
        return self._static_dir / relative

    def clear(self) -> None:
        """Drop all cached titles."""
        self._cache.clear()
