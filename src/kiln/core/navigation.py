"""Navigation tree builder.

Builds the navigation subtree shown for a page: the full site tree is built
from the page URLs, then cut at an ancestor of the current page and
optionally filtered bottom-up by a caller transform.
"""

from collections.abc import Callable, Sequence
from dataclasses import replace

from kiln.core.pages import PageRecord
from kiln.core.title import OptimizeTitle, TitleResolver
from kiln.core.tree import TreeNode, build_tree, find_current_node, parent_url

NavNode = TreeNode

TransformNode = Callable[[NavNode], NavNode | None]


def not_found_title(node: NavNode) -> str:
    return f"⛔️ NOT FOUND ({node.stem})"


def get_nav_tree(
    current_page: PageRecord,
    pages: Sequence[PageRecord],
    *,
    base_depth: int | None = None,
    ignore_globs: list[str] | None = None,
    optimize_title: OptimizeTitle | None = None,
    transform_node: TransformNode | None = None,
    title_resolver: TitleResolver | None = None,
) -> NavNode | None:
    """Get the navigation tree for the current page.

    Depth levels: ``/`` is 0, ``/about/`` is 1, ``/about/history/`` is 2.

    Args:
        current_page: Page the navigation is built for
        pages: All pages of the site
        base_depth: Depth of the returned subtree root
            (default: current page's depth - 1)
        ignore_globs: URLs matching these patterns are left out of the tree
        optimize_title: Applied to titles extracted from HTML
        transform_node: Applied bottom-up to every node; returning None removes
            the node with its subtree. Exceptions propagate to the caller.
        title_resolver: Resolves titles of untitled pages and of URLs without
            a source page

    Returns:
        Subtree rooted at the ancestor at ``base_depth``, or None when the
        current page isn't in the tree, the depth can't be reached, or the
        transform removed the subtree root
    """
    pages_by_url = {page.url: page for page in pages}

    def enrich(node: NavNode) -> None:
        page = pages_by_url.get(node.url)
        if page is not None:
            node.title = _page_title(page, optimize_title, title_resolver)
            return
        static_title = None
        if title_resolver is not None:
            static_file = title_resolver.static_file_for_url(node.url)
            if static_file is not None:
                static_title = title_resolver.get_title_from_static_file(
                    static_file, optimize_title
                )
        node.title = static_title if static_title is not None else not_found_title(node)

    tree = build_tree(
        (page.url for page in pages),
        current_page.url,
        enrich,
        ignore_globs=ignore_globs,
    )

    current_node = find_current_node(tree)
    if current_node is None:
        return None

    target_depth = base_depth if base_depth is not None else current_node.depth - 1
    ancestor = find_ancestor_at_depth(current_node.url, tree, target_depth)
    if ancestor is None:
        return None

    if transform_node is None:
        return ancestor

    return transform_tree_nodes(ancestor, transform_node)


def find_ancestor_at_depth(current_url: str, tree: NavNode, target_depth: int) -> NavNode | None:
    """Walk down from ``tree`` towards the current page until ``target_depth``.

    Only directories containing the current page are followed, so the
    current page itself is never returned unless it is the root.

    Returns:
        Node at the target depth, or None if the directory chain is shorter
    """
    target_depth = max(0, target_depth)
    directory = parent_url(current_url) or "/"
    node = tree
    while node.depth != target_depth:
        next_node = next(
            (
                child
                for child in node.children
                if child.is_directory and directory.startswith(child.url)
            ),
            None,
        )
        if next_node is None:
            return None
        node = next_node
    return node


def transform_tree_nodes(node: NavNode, transform_node: TransformNode) -> NavNode | None:
    """Apply ``transform_node`` to a tree, children before parents.

    Each node is passed as a copy whose children are the already transformed,
    surviving children in their original order. A None result drops the
    node and everything under it.
    """
    children = [
        transformed
        for transformed in (transform_tree_nodes(child, transform_node) for child in node.children)
        if transformed is not None
    ]
    return transform_node(replace(node, children=children, meta=dict(node.meta)))


def _page_title(
    page: PageRecord,
    optimize_title: OptimizeTitle | None,
    title_resolver: TitleResolver | None,
) -> str:
    if page.title:
        return page.title
    if title_resolver is not None:
        return title_resolver.get_title(page, optimize_title, safe=True)
    return ""
