"""Tests for response transforms."""

import pytest
from kiln.transform import (
    Body,
    ResponseTransform,
    TransformContext,
    TransformFilter,
    apply_transforms,
    should_apply_transform,
)


def _append(suffix: str):
    def transform(content: Body, context: TransformContext) -> Body:
        assert isinstance(content, str)
        return content + suffix

    return transform


HTML_CONTEXT = TransformContext(path="about/index.html", content_type="text/html")


class TestApplyTransforms:
    """Tests for apply_transforms()."""

    @pytest.mark.asyncio
    async def test__transforms__applied_in_order(self) -> None:
        """Each transform receives the previous result."""
        transforms = [ResponseTransform(_append("a")), ResponseTransform(_append("b"))]

        result = await apply_transforms("x", HTML_CONTEXT, transforms)

        assert result == "xab"

    @pytest.mark.asyncio
    async def test__async_transform__awaited(self) -> None:
        """Coroutine transforms are awaited."""

        async def upper(content: Body, context: TransformContext) -> Body:
            assert isinstance(content, str)
            return content.upper()

        result = await apply_transforms("x", HTML_CONTEXT, [ResponseTransform(upper)])

        assert result == "X"

    @pytest.mark.asyncio
    async def test__failing_transform__skipped(self) -> None:
        """A transform that raises keeps the previous content."""

        def broken(content: Body, context: TransformContext) -> Body:
            raise RuntimeError("broken")

        transforms = [ResponseTransform(broken, name="broken"), ResponseTransform(_append("!"))]

        result = await apply_transforms("x", HTML_CONTEXT, transforms)

        assert result == "x!"

    @pytest.mark.asyncio
    async def test__build_mode__no_transforms(self) -> None:
        """Transforms only run while serving."""
        context = TransformContext(path="index.html", content_type="text/html", is_serve=False)

        result = await apply_transforms("x", context, [ResponseTransform(_append("!"))])

        assert result == "x"

    @pytest.mark.asyncio
    async def test__filtered_out__not_applied(self) -> None:
        """Transforms whose filter doesn't match are skipped."""
        transform = ResponseTransform(
            _append("!"), filter=TransformFilter(content_type=["text/css"])
        )

        result = await apply_transforms("x", HTML_CONTEXT, [transform])

        assert result == "x"


class TestShouldApplyTransform:
    """Tests for should_apply_transform()."""

    def test__no_filter__applies(self) -> None:
        """Unfiltered transforms apply everywhere."""
        assert should_apply_transform(ResponseTransform(_append("")), HTML_CONTEXT)

    def test__include__matches_path(self) -> None:
        """Include patterns restrict paths."""
        transform = ResponseTransform(_append(""), filter=TransformFilter(include=["about/**"]))

        assert should_apply_transform(transform, HTML_CONTEXT)
        assert not should_apply_transform(
            transform, TransformContext(path="blog/index.html", content_type="text/html")
        )

    def test__exclude__wins_over_default_include(self) -> None:
        """Excluded paths are skipped."""
        transform = ResponseTransform(_append(""), filter=TransformFilter(exclude=["about/**"]))

        assert not should_apply_transform(transform, HTML_CONTEXT)

    def test__include__star_stays_in_top_directory(self) -> None:
        """A "*.html" include only covers files at the top level."""
        transform = ResponseTransform(_append(""), filter=TransformFilter(include=["*.html"]))

        assert not should_apply_transform(transform, HTML_CONTEXT)
        assert should_apply_transform(
            transform, TransformContext(path="index.html", content_type="text/html")
        )

    def test__exclude__directory_name__does_not_cover_contents(self) -> None:
        """Excluding a directory name leaves the files inside it alone."""
        transform = ResponseTransform(_append(""), filter=TransformFilter(exclude=["about"]))

        assert should_apply_transform(transform, HTML_CONTEXT)

    def test__content_type__wildcard_and_substring(self) -> None:
        """Content type patterns support wildcards and substrings."""
        wildcard = ResponseTransform(_append(""), filter=TransformFilter(content_type=["text/*"]))
        substring = ResponseTransform(_append(""), filter=TransformFilter(content_type=["html"]))
        other = ResponseTransform(_append(""), filter=TransformFilter(content_type=["image/*"]))

        assert should_apply_transform(wildcard, HTML_CONTEXT)
        assert should_apply_transform(substring, HTML_CONTEXT)
        assert not should_apply_transform(other, HTML_CONTEXT)
