"""Response transforms for the development server.

Transforms rewrite response bodies before they are sent (e.g., injecting a
reload script). They run in serve mode only and never during a build.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

from kiln.core.globs import matches_any

logger = logging.getLogger(__name__)

Body = str | bytes


@dataclass(frozen=True)
class TransformContext:
    """Request information passed to transforms."""

    path: str
    content_type: str | None = None
    input_path: Path | None = None
    output_path: Path | None = None
    is_serve: bool = True


@dataclass(frozen=True)
class TransformFilter:
    """Restricts which responses a transform applies to.

    Attributes:
        include: Path globs to transform (default: every path)
        exclude: Path globs to skip
        content_type: Content types to transform; ``*`` is a wildcard,
            otherwise a substring match is used
    """

    include: list[str] | None = None
    exclude: list[str] | None = None
    content_type: list[str] | None = None


@dataclass(frozen=True)
class ResponseTransform:
    """Named response body transform."""

    transform: Callable[[Body, TransformContext], Body | Awaitable[Body]]
    name: str | None = None
    filter: TransformFilter | None = None


async def apply_transforms(
    content: Body,
    context: TransformContext,
    transforms: Sequence[ResponseTransform] | None,
) -> Body:
    """Apply matching transforms in order.

    A transform that raises is logged and skipped; the content from the
    previous step is kept.

    Args:
        content: Response body
        context: Request information
        transforms: Transforms to try

    Returns:
        Transformed body
    """
    if not context.is_serve or not transforms:
        return content

    result = content
    for transform in transforms:
        if not should_apply_transform(transform, context):
            continue
        try:
            value = transform.transform(result, context)
            if inspect.isawaitable(value):
                value = await value
        except Exception:
            logger.exception(
                "Transform error [%s] at %s", transform.name or "anonymous", context.path
            )
            continue
        result = value

    return result


def should_apply_transform(transform: ResponseTransform, context: TransformContext) -> bool:
    """Check a transform's filter against the request."""
    transform_filter = transform.filter
    if transform_filter is None:
        return True

    if transform_filter.include is not None or transform_filter.exclude is not None:
        includes = transform_filter.include if transform_filter.include is not None else ["**/*"]
        if not matches_any(context.path, includes):
            return False
        if matches_any(context.path, transform_filter.exclude):
            return False

    if transform_filter.content_type and context.content_type:
        if not any(
            _matches_content_type(context.content_type, pattern)
            for pattern in transform_filter.content_type
        ):
            return False

    return True


def _matches_content_type(content_type: str, pattern: str) -> bool:
    if "*" in pattern:
        return fnmatchcase(content_type, pattern)
    return pattern in content_type
