"""Breadcrumb trail builder.

Selects the ancestor index pages of a page from the flat page list. No tree
is built: ancestry is decided from the path stems alone.
"""

import posixpath
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from kiln.core.pages import PageRecord
from kiln.core.title import NO_TITLE, OptimizeTitle, TitleResolver
from kiln.core.tree import url_depth


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item.

    ``meta`` holds extra fields attached by ``transform_item``.
    """

    title: str | None
    href: str
    depth: int
    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {**self.meta, "title": self.title, "href": self.href, "depth": self.depth}


TransformItem = Callable[[BreadcrumbItem], BreadcrumbItem | None]


def is_ancestor_or_self(base_path_stem: str, target_path_stem: str) -> bool:
    """Check whether a page is an ancestor index page of, or equal to, the base page.

    Args:
        base_path_stem: Path stem of the page the trail is built for
        target_path_stem: Path stem of the candidate page

    Returns:
        True if the candidate is an index page of a directory containing the
        base page, or is the base page itself
    """
    dirname = posixpath.dirname(target_path_stem)
    name = posixpath.basename(target_path_stem)
    included = dirname == "/" or base_path_stem.startswith(f"{dirname}/")
    is_index = name == "index"
    is_self = base_path_stem == target_path_stem
    return (included and is_index) or is_self


def get_breadcrumbs(
    page: PageRecord,
    pages: Sequence[PageRecord],
    *,
    base_url: str = "/",
    optimize_title: OptimizeTitle | None = None,
    transform_item: TransformItem | None = None,
    title_resolver: TitleResolver | None = None,
) -> list[BreadcrumbItem]:
    """Build the breadcrumb trail for a page, root first.

    Args:
        page: Page the trail is built for
        pages: All pages of the site
        base_url: Items shallower than this URL are dropped
        optimize_title: Applied to titles extracted from page content
        transform_item: Applied to every item; returning None drops the item.
            Exceptions propagate to the caller.
        title_resolver: Used when a page has no title of its own

    Returns:
        Items in strictly increasing depth
    """
    base_depth = url_depth(base_url)

    items: list[BreadcrumbItem] = []
    for source_page in pages:
        if not is_ancestor_or_self(page.file_path_stem, source_page.file_path_stem):
            continue
        depth = url_depth(source_page.url)
        if depth < base_depth:
            continue
        items.append(
            BreadcrumbItem(
                title=_resolve_title(source_page, optimize_title, title_resolver),
                href=source_page.url,
                depth=depth,
            )
        )

    items.sort(key=lambda item: item.depth)

    if transform_item is None:
        return items

    transformed = (transform_item(item) for item in items)
    return [item for item in transformed if item is not None]


def _resolve_title(
    page: PageRecord,
    optimize_title: OptimizeTitle | None,
    title_resolver: TitleResolver | None,
) -> str:
    own_title = page.title.strip() if page.title else ""
    if own_title:
        return own_title
    if title_resolver is not None:
        resolved = title_resolver.get_title(page, optimize_title, safe=True)
        if resolved:
            return resolved
    return NO_TITLE
