"""Page compilation.

Renders a page body as a Jinja2 template, then wraps it in the layout named
by its front matter. Templates receive the global data files, the page,
``page_list`` with every titled page, its breadcrumbs, a ``nav()`` function
returning the navigation tree and a ``title_list()`` function for the
document title. The ``date`` filter formats dates.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)
from markupsafe import Markup

from kiln.core.breadcrumbs import get_breadcrumbs
from kiln.core.navigation import NavNode, get_nav_tree
from kiln.core.pages import PageRecord
from kiln.core.site import Site, resolve_page_titles
from kiln.core.title import TitleResolver
from kiln.core.title_list import title_list
from kiln.data import FILTERS
from kiln.errors import CompileError
from kiln.hooks import Hooks

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Result of compiling a page."""

    html: str
    title: str
    page: PageRecord


class PageCompiler:
    """Compiles pages of a site into HTML."""

    def __init__(
        self,
        site: Site,
        *,
        layouts_dir: Path,
        title_resolver: TitleResolver,
        hooks: Hooks | None = None,
        base_url: str = "/",
        site_name: str | None = None,
        ignore_globs: list[str] | None = None,
        data: dict[str, Any] | None = None,
        content_variable_name: str = "content",
    ) -> None:
        """Initialize compiler.

        Args:
            site: Catalog of all pages, used for breadcrumbs and navigation
            layouts_dir: Directory containing layout templates
            title_resolver: Shared title lookup
            hooks: User callables (title optimizer, breadcrumb/nav transforms)
            base_url: Breadcrumb items above this URL are dropped
            site_name: Default suffix and fallback of ``title_list()``
            ignore_globs: URLs left out of navigation trees
            content_variable_name: Name under which layouts receive the page body
            data: Global data available to every page
        """
        self._site = site
        self._layouts_dir = layouts_dir
        self._title_resolver = title_resolver
        self._hooks = hooks or Hooks()
        self._base_url = base_url
        self._site_name = site_name
        self._ignore_globs = ignore_globs or []
        self._content_variable_name = content_variable_name
        self._data = data or {}
        self._env = Environment(
            loader=FileSystemLoader(str(layouts_dir)),
            autoescape=select_autoescape(["html", "xml"], default_for_string=True),
        )
        self._env.filters.update(FILTERS)

    @property
    def site(self) -> Site:
        return self._site

    def compile(self, page: PageRecord) -> CompileResult:
        """Compile a page.

        Args:
            page: Page to compile

        Returns:
            CompileResult with the final HTML

        Raises:
            PageLoadError: If the page can't be read
            CompileError: If the page or its layout fails to render
        """
        logger.debug("Compiling %s", page.input_path)
        page_content = page.load()
        meta = page_content.meta
        optimize_title = self._hooks.optimize_title
        page_records = self._site.pages
        if self._hooks.page_list is not None:
            page_records = list(self._hooks.page_list(page_records))
        pages = resolve_page_titles(page_records, self._title_resolver, optimize_title)

        breadcrumbs = get_breadcrumbs(
            page,
            pages,
            base_url=self._base_url,
            optimize_title=optimize_title,
            transform_item=self._hooks.transform_breadcrumb_item,
            title_resolver=self._title_resolver,
        )

        def nav(**options: Any) -> NavNode | None:
            nav_options: dict[str, Any] = {
                "optimize_title": optimize_title,
                "ignore_globs": self._ignore_globs,
                **options,
                "transform_node": self._hooks.transform_nav_node,
            }
            return get_nav_tree(page, pages, title_resolver=self._title_resolver, **nav_options)

        def titles(**options: Any) -> str:
            return title_list(breadcrumbs, **{"site_name": self._site_name, **options})

        compile_data: dict[str, Any] = {
            **self._data,
            **self._hooks.global_data,
            **meta,
            "page": page,
            "page_list": pages,
            "filters": FILTERS,
            "breadcrumbs": breadcrumbs,
            "nav": nav,
            "title_list": titles,
        }

        try:
            html = self._env.from_string(page_content.content).render(compile_data)
        except TemplateError as e:
            raise CompileError(f"Failed to compile the page: {page.input_path}: {e}") from e

        layout_name = meta.get("layout")
        if layout_name:
            html = self._apply_layout(str(layout_name), html, compile_data, page)

        title = page.title or self._title_resolver.get_title(page, optimize_title, safe=True)
        return CompileResult(html=html, title=title, page=page)

    def _apply_layout(
        self,
        layout_name: str,
        html: str,
        compile_data: dict[str, Any],
        page: PageRecord,
    ) -> str:
        candidates = [layout_name]
        if not Path(layout_name).suffix:
            candidates.append(f"{layout_name}.html")

        try:
            layout = self._env.select_template(candidates)
        except TemplateNotFound as e:
            raise CompileError(f"Layout not found: {layout_name}") from e
        except TemplateError as e:
            raise CompileError(f"Failed to compile the layout: {layout_name}: {e}") from e

        layout_data = {**compile_data, self._content_variable_name: Markup(html)}
        try:
            return layout.render(layout_data)
        except TemplateError as e:
            raise CompileError(
                f"Failed to compile the layout: {layout.filename} (Content: {page.input_path}): {e}"
            ) from e
