"""Document title built from a breadcrumb trail."""

from collections.abc import Sequence

from kiln.core.breadcrumbs import BreadcrumbItem


def title_list(
    breadcrumbs: Sequence[BreadcrumbItem],
    *,
    separator: str = " | ",
    base_url: str = "/",
    prefix: str = "",
    suffix: str | None = None,
    site_name: str | None = None,
    fallback: str | None = None,
) -> str:
    """Join breadcrumb titles, deepest first.

    Example: ``"Team | About | My Site"`` for ``/about/team/``.

    Args:
        breadcrumbs: Trail as returned by ``get_breadcrumbs``
        separator: Placed between titles
        base_url: Items at this URL (and the root) are left out
        prefix: Prepended to the result as-is
        suffix: Appended as the last segment when any title remains
            (default: ``site_name``)
        site_name: Site name used for the suffix and fallback defaults
        fallback: Used when no titles remain (default: ``site_name``)

    Returns:
        Title string
    """
    if suffix is None:
        suffix = site_name
    if fallback is None:
        fallback = site_name

    titles = [
        item.title.strip()
        for item in reversed(breadcrumbs)
        if item.href not in (base_url, "/") and item.title is not None
    ]
    if titles and suffix and suffix.strip():
        titles.append(suffix.strip())
    if not titles and fallback:
        titles.append(fallback.strip())

    return prefix + separator.join(titles)
