"""Path tree builder.

Converts a flat list of URL paths into a rooted tree. Hierarchy is inferred
purely from the URL strings: directory URLs end with ``/`` and own the
pages beneath them, missing intermediate directories are synthesized.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, TypedDict

from kiln.core.globs import matches_any
from kiln.core.types import URLPath

_INDEX_RE = re.compile(r"(?<=/)index(?:\.[A-Za-z0-9]+)?$")


class TreeNodeDict(TypedDict, total=False):
    """Dictionary representation of a tree node."""

    url: str
    stem: str
    depth: int
    current: bool
    isAncestor: bool
    title: str
    children: list[TreeNodeDict]


@dataclass
class TreeNode:
    """Node of a page tree.

    ``meta`` holds extra fields attached by caller transforms.
    """

    url: URLPath
    stem: str
    depth: int
    title: str = ""
    current: bool = False
    is_ancestor: bool = False
    children: list[TreeNode] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_directory(self) -> bool:
        return self.url.endswith("/")

    def to_dict(self) -> TreeNodeDict:
        """Convert to dictionary for JSON serialization.

        Meta values are included, but never replace the structural fields.
        """
        result: TreeNodeDict = {
            **self.meta,  # type: ignore[typeddict-item]
            "url": self.url,
            "stem": self.stem,
            "depth": self.depth,
            "current": self.current,
            "isAncestor": self.is_ancestor,
            "title": self.title,
            "children": [child.to_dict() for child in self.children],
        }
        return result


def normalize_url(url: str) -> URLPath:
    """Normalize a URL path for tree lookups.

    Adds the leading slash and collapses a trailing index file into its
    directory URL (``/about/index.html`` becomes ``/about/``).
    """
    if not url.startswith("/"):
        url = f"/{url}"
    return URLPath(_INDEX_RE.sub("", url))


def url_depth(url: str) -> int:
    """Count non-empty path segments. The root ``/`` has depth 0."""
    return len([segment for segment in url.split("/") if segment])


def url_stem(url: str) -> str:
    """Structural stem: directory URLs unchanged, file URLs without extension."""
    if url.endswith("/"):
        return url
    root, _ = posixpath.splitext(url)
    return root


def parent_url(url: str) -> URLPath | None:
    """Return the URL of the directory containing ``url``, None for the root."""
    if url == "/":
        return None
    trimmed = url.rstrip("/")
    parent = posixpath.dirname(trimmed)
    return URLPath(parent if parent.endswith("/") else f"{parent}/")


def build_tree(
    urls: Iterable[str],
    current_url: str | None = None,
    enrich: Callable[[TreeNode], None] | None = None,
    *,
    ignore_globs: list[str] | None = None,
) -> TreeNode:
    """Build a rooted tree from a flat collection of URL paths.

    Args:
        urls: Page URLs (e.g., "/", "/about/", "/about/team.html")
        current_url: URL of the page being resolved for. No node is marked
            current when it is absent from ``urls``.
        enrich: Called once per node, pre-order, after structural flags are
            set. Synthesized ancestor nodes are enriched too.
        ignore_globs: URLs matching any of these patterns are left out

    Returns:
        Root node of the tree (always present, even for empty input)
    """
    root = _new_node(URLPath("/"))
    nodes: dict[str, TreeNode] = {root.url: root}

    def ensure(url: URLPath) -> TreeNode:
        node = nodes.get(url)
        if node is not None:
            return node
        parent = ensure(parent_url(url) or URLPath("/"))
        node = _new_node(url)
        parent.children.append(node)
        nodes[url] = node
        return node

    for raw in urls:
        url = normalize_url(raw)
        if matches_any(url, ignore_globs, match_parents=True):
            continue
        ensure(url)

    if current_url is not None:
        _mark_current(nodes, normalize_url(current_url))

    if enrich is not None:
        for node in iter_nodes(root):
            enrich(node)

    return root


def _new_node(url: URLPath) -> TreeNode:
    return TreeNode(url=url, stem=url_stem(url), depth=url_depth(url))


def _mark_current(nodes: dict[str, TreeNode], current_url: URLPath) -> None:
    current = nodes.get(current_url)
    if current is None:
        return
    current.current = True
    ancestor_url = parent_url(current_url)
    while ancestor_url is not None:
        nodes[ancestor_url].is_ancestor = True
        ancestor_url = parent_url(ancestor_url)


def iter_nodes(tree: TreeNode) -> Iterator[TreeNode]:
    """Iterate over all nodes in pre-order."""
    yield tree
    for child in tree.children:
        yield from iter_nodes(child)


def find_node(tree: TreeNode, predicate: Callable[[TreeNode], bool]) -> TreeNode | None:
    """Depth-first search for the first node matching ``predicate``."""
    for node in iter_nodes(tree):
        if predicate(node):
            return node
    return None


def find_current_node(tree: TreeNode) -> TreeNode | None:
    """Find the node marked as current."""
    return find_node(tree, lambda node: node.current)


def find_node_by_url(tree: TreeNode | None, url: str) -> TreeNode | None:
    """Find a node by its URL."""
    if tree is None:
        return None
    return find_node(tree, lambda node: node.url == url)
