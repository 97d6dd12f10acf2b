"""Site page catalog.

Holds the flat list of pages with URL, output path and source path lookups.
Hierarchy is not stored here: breadcrumbs and navigation derive it from the
URLs on demand.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from kiln.core.globs import matches_any
from kiln.core.pages import PageRecord, get_file
from kiln.core.title import NO_TITLE, OptimizeTitle, TitleResolver


class Site:
    """Page catalog with O(1) lookups by URL, output path and source path."""

    __slots__ = ("_input_dir", "_output_index", "_pages", "_source_index", "_url_index")

    def __init__(self, pages: list[PageRecord], input_dir: Path) -> None:
        """Initialize site.

        Args:
            pages: All pages, in discovery order
            input_dir: Root of the source tree
        """
        self._pages = pages
        self._input_dir = input_dir
        self._url_index = {page.url: i for i, page in enumerate(pages)}
        self._output_index = {page.output_path: i for i, page in enumerate(pages)}
        self._source_index = {page.input_path: i for i, page in enumerate(pages)}

    @property
    def input_dir(self) -> Path:
        return self._input_dir

    @property
    def pages(self) -> list[PageRecord]:
        return list(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[PageRecord]:
        return iter(self._pages)

    def get_page(self, url: str) -> PageRecord | None:
        """Get page by URL.

        Args:
            url: Page URL (e.g., "/about/" or "about/")

        Returns:
            Page if found, None otherwise
        """
        idx = self._url_index.get(self._normalize_path(url))
        if idx is None:
            return None
        return self._pages[idx]

    def get_page_by_output(self, output_path: Path) -> PageRecord | None:
        """Get the page that is written to ``output_path``."""
        idx = self._output_index.get(output_path)
        if idx is None:
            return None
        return self._pages[idx]

    def get_page_by_source(self, source_path: Path) -> PageRecord | None:
        """Get page by source file path.

        Args:
            source_path: Absolute path, or path relative to the input directory

        Returns:
            Page if found, None otherwise
        """
        if not source_path.is_absolute():
            source_path = self._input_dir / source_path
        idx = self._source_index.get(source_path)
        if idx is None:
            return None
        return self._pages[idx]

    def with_titles(
        self,
        resolver: TitleResolver,
        optimize_title: OptimizeTitle | None = None,
    ) -> list[PageRecord]:
        """Return all pages with their titles resolved."""
        return resolve_page_titles(self._pages, resolver, optimize_title)

    def _normalize_path(self, path: str) -> str:
        """Normalize path to have leading slash."""
        return path if path.startswith("/") else f"/{path}"


def resolve_page_titles(
    pages: Iterable[PageRecord],
    resolver: TitleResolver,
    optimize_title: OptimizeTitle | None = None,
) -> list[PageRecord]:
    """Give every page a title.

    Own titles are trimmed. Pages without one use the resolver, and pages
    whose title can't be looked up get ``__NO_TITLE__``.
    """
    titled: list[PageRecord] = []
    for page in pages:
        title = page.title.strip() if page.title else ""
        if not title:
            title = resolver.get_title(page, optimize_title, safe=True) or NO_TITLE
        titled.append(page.with_title(title))
    return titled


class SiteLoader:
    """Discovers pages under the input directory."""

    def __init__(
        self,
        input_dir: Path,
        output_dir: Path,
        *,
        page_glob: str = "**/*.html",
        output_extension: str = ".html",
        ignore: list[str] | None = None,
    ) -> None:
        """Initialize loader.

        Args:
            input_dir: Root of the source tree
            output_dir: Root of the output tree
            page_glob: Pattern selecting page files, relative to input_dir
            output_extension: Extension of written pages
            ignore: Patterns of source paths to skip
        """
        self._input_dir = input_dir
        self._output_dir = output_dir
        self._page_glob = page_glob
        self._output_extension = output_extension
        self._ignore = ignore or []

    @property
    def input_dir(self) -> Path:
        return self._input_dir

    def load(self) -> Site:
        """Discover pages and build the site catalog.

        Files and directories starting with ``_`` or ``.`` are skipped
        (layouts, partials, hidden files).

        Returns:
            Site with pages in sorted path order
        """
        if not self._input_dir.is_dir():
            return Site([], self._input_dir)

        pages: list[PageRecord] = []
        for path in sorted(self._input_dir.glob(self._page_glob)):
            if not path.is_file() or not self.is_included(path):
                continue
            pages.append(get_file(path, self._input_dir, self._output_dir, self._output_extension))

        return Site(pages, self._input_dir)

    def is_included(self, path: Path) -> bool:
        """Check whether a source file takes part in the build."""
        relative = path.relative_to(self._input_dir)
        if any(part.startswith(("_", ".")) for part in relative.parts):
            return False
        return not matches_any(relative.as_posix(), self._ignore, match_parents=True)
