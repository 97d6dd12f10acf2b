"""Tests for server module."""

from typing import Any

import pytest
from aiohttp import web
from kiln.app_keys import compiler_key, config_key, hooks_key, verbose_key
from kiln.config import Config
from kiln.hooks import Hooks
from kiln.server import create_app
from kiln.transform import Body, ResponseTransform, TransformContext, TransformFilter


@pytest.fixture
def site_config(test_config: Config) -> Config:
    input_dir = test_config.dir.input_dir
    (input_dir / "about").mkdir()
    (input_dir / "index.html").write_text("---\ntitle: Home\n---\n<body>{{ title }}</body>")
    (input_dir / "about" / "index.html").write_text("---\ntitle: About\n---\n<body>About</body>")
    (input_dir / "broken.html").write_text("---\nlayout: missing\n---\nBody")
    (input_dir / "style.css").write_text("body {}")
    output_dir = test_config.dir.output_dir
    output_dir.mkdir()
    (output_dir / "built.html").write_text("<body>Built</body>")
    return test_config


def _inject(content: Body, context: TransformContext) -> Body:
    assert isinstance(content, str)
    return content.replace("</body>", "<script>reload()</script></body>")


class TestCreateApp:
    """Tests for create_app()."""

    def test__valid_config__returns_configured_app(self, site_config: Config) -> None:
        """Create app with valid configuration."""
        app = create_app(site_config, hooks=Hooks())

        assert app[config_key] is site_config
        assert app[hooks_key] == Hooks()
        assert app[verbose_key] is False
        assert len(app[compiler_key].site) == 3


class TestServeFile:
    """Tests for the catch-all route."""

    @pytest.fixture
    def app(self, site_config: Config) -> web.Application:
        hooks = Hooks(
            response_transforms=[
                ResponseTransform(
                    _inject, name="inject", filter=TransformFilter(content_type=["text/html"])
                )
            ]
        )
        return create_app(site_config, hooks=hooks)

    @pytest.mark.asyncio
    async def test__root__compiles_index_page(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Root path compiles the index page and applies transforms."""
        client = await aiohttp_client(app)
        response = await client.get("/")

        assert response.status == 200
        assert "text/html" in response.headers["Content-Type"]
        assert await response.text() == "<body>Home<script>reload()</script></body>"

    @pytest.mark.asyncio
    async def test__directory_url__compiles_index_page(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Directory URLs map to index pages."""
        client = await aiohttp_client(app)
        response = await client.get("/about/")

        assert response.status == 200
        assert "About" in await response.text()

    @pytest.mark.asyncio
    async def test__page__recompiled_on_each_request(
        self,
        aiohttp_client: Any,
        app: web.Application,
        site_config: Config,
    ) -> None:
        """Edits are visible without restarting."""
        client = await aiohttp_client(app)
        await client.get("/about/")
        (site_config.dir.input_dir / "about" / "index.html").write_text("<body>Changed</body>")

        response = await client.get("/about/")

        assert "Changed" in await response.text()

    @pytest.mark.asyncio
    async def test__compile_error__returns_500(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Compile failures are reported as text."""
        client = await aiohttp_client(app)
        response = await client.get("/broken")

        assert response.status == 500
        assert "Layout not found: missing" in await response.text()

    @pytest.mark.asyncio
    async def test__static_file__served_from_input(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Non-page files come from the input directory, untransformed by HTML filters."""
        client = await aiohttp_client(app)
        response = await client.get("/style.css")

        assert response.status == 200
        assert "text/css" in response.headers["Content-Type"]
        assert await response.text() == "body {}"

    @pytest.mark.asyncio
    async def test__built_file__served_from_output(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Files in the output directory are served and transformed."""
        client = await aiohttp_client(app)
        response = await client.get("/built.html")

        assert response.status == 200
        assert await response.text() == "<body>Built<script>reload()</script></body>"

    @pytest.mark.asyncio
    async def test__unknown_path__returns_404(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Missing files are not found."""
        client = await aiohttp_client(app)
        response = await client.get("/missing/")

        assert response.status == 404
