"""User hooks loaded from a Python module.

A hooks module may define any of::

    def optimize_title(title: str) -> str: ...
    def transform_breadcrumb_item(item: BreadcrumbItem) -> BreadcrumbItem | None: ...
    def transform_nav_node(node: NavNode) -> NavNode | None: ...
    def page_list(pages: list[PageRecord]) -> list[PageRecord]: ...
    response_transforms: list[ResponseTransform] = [...]
    global_data: dict[str, object] = {...}
"""

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from importlib import import_module
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from types import ModuleType
from typing import Any

from kiln.core.breadcrumbs import TransformItem
from kiln.core.navigation import TransformNode
from kiln.core.pages import PageRecord
from kiln.core.title import OptimizeTitle
from kiln.errors import HooksError
from kiln.transform import ResponseTransform

PageListHook = Callable[[list[PageRecord]], list[PageRecord]]


@dataclass(frozen=True)
class Hooks:
    """Callables supplied by the site author."""

    optimize_title: OptimizeTitle | None = None
    transform_breadcrumb_item: TransformItem | None = None
    transform_nav_node: TransformNode | None = None
    page_list: PageListHook | None = None
    response_transforms: list[ResponseTransform] = field(default_factory=list)
    global_data: dict[str, Any] = field(default_factory=dict)


def load_hooks(reference: str | None, base_dir: Path | None = None) -> Hooks:
    """Load hooks from a module path or dotted module name.

    Args:
        reference: ``path/to/hooks.py`` (relative to base_dir) or
            ``package.module``; None yields empty hooks
        base_dir: Directory relative paths are resolved against

    Returns:
        Hooks found in the module

    Raises:
        HooksError: If the module can't be imported or a hook has the wrong type
    """
    if reference is None:
        return Hooks()

    reference = reference.strip()
    if not reference:
        raise HooksError("hooks reference must be a non-empty string")

    if reference.endswith(".py") or "/" in reference:
        module = _load_from_path(_resolve_path(reference, base_dir))
    else:
        try:
            module = import_module(reference)
        except ImportError as e:
            raise HooksError(f"Cannot import hooks module '{reference}': {e}") from e

    return Hooks(
        optimize_title=_callable_attr(module, "optimize_title"),
        transform_breadcrumb_item=_callable_attr(module, "transform_breadcrumb_item"),
        transform_nav_node=_callable_attr(module, "transform_nav_node"),
        page_list=_callable_attr(module, "page_list"),
        response_transforms=_response_transforms(module),
        global_data=_global_data(module),
    )


def _resolve_path(reference: str, base_dir: Path | None) -> Path:
    path = Path(reference).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    if not path.is_file():
        raise HooksError(f"Hooks file not found: {path}")
    return path


def _load_from_path(path: Path) -> ModuleType:
    module_name = f"kiln_hooks_{abs(hash(path.resolve()))}"
    spec = spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise HooksError(f"Cannot load hooks from {path}")
    module = module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise HooksError(f"Error while loading hooks from {path}: {e}") from e
    return module


def _callable_attr(module: ModuleType, name: str) -> Any:
    value = getattr(module, name, None)
    if value is not None and not callable(value):
        raise HooksError(f"Hook '{name}' must be callable")
    return value


def _response_transforms(module: ModuleType) -> list[ResponseTransform]:
    value = getattr(module, "response_transforms", None)
    if value is None:
        return []
    if not isinstance(value, list | tuple):
        raise HooksError("response_transforms must be a list")
    for item in value:
        if not isinstance(item, ResponseTransform):
            raise HooksError("response_transforms items must be ResponseTransform instances")
    return list(value)


def _global_data(module: ModuleType) -> dict[str, Any]:
    value = getattr(module, "global_data", None)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise HooksError("global_data must be a dictionary")
    return dict(value)
