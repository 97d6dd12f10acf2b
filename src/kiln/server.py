"""aiohttp development server for kiln.

Pages are compiled on every request so edits show up on reload. Other
files are served from the output directory, then from the input directory.
Response transforms from the hooks module are applied to every body.
"""

import logging
import mimetypes
import os
from pathlib import Path

from aiohttp import web

from kiln.app_keys import compiler_key, config_key, hooks_key, verbose_key
from kiln.builder import create_compiler, create_site_loader
from kiln.config import Config
from kiln.core.pages import url_to_local_path
from kiln.core.title import TitleResolver
from kiln.hooks import Hooks, load_hooks
from kiln.transform import Body, TransformContext, apply_transforms

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".svg": "image/svg+xml",
}

_TEXT_TYPES = ("text/", "application/json", "application/xml", "image/svg+xml")


async def serve_file(request: web.Request) -> web.Response:
    """Compile or read the file for the requested URL."""
    config = request.app[config_key]
    compiler = request.app[compiler_key]
    hooks = request.app[hooks_key]

    local_path = url_to_local_path(request.path, config.pages.output_extension)
    content_type = _content_type(local_path)
    output_dir = Path(os.path.abspath(config.dir.output_dir))
    output_path = Path(os.path.abspath(output_dir / local_path))
    if not output_path.is_relative_to(output_dir):
        raise web.HTTPNotFound()

    page = compiler.site.get_page_by_output(output_path)
    if page is not None:
        if request.app[verbose_key]:
            logger.info("Compile: %s", page.input_path)
        try:
            result = compiler.compile(page)
        except Exception as e:
            logger.exception("Failed to compile %s", page.input_path)
            return web.Response(text=str(e), status=500)

        context = TransformContext(
            path=local_path,
            content_type=content_type,
            input_path=page.input_path,
            output_path=page.output_path,
        )
        body = await apply_transforms(result.html, context, hooks.response_transforms)
        return _response(body, content_type)

    for base_dir in (output_dir, Path(os.path.abspath(config.dir.input_dir))):
        candidate = Path(os.path.abspath(base_dir / local_path))
        if not candidate.is_relative_to(base_dir) or not candidate.is_file():
            continue
        raw = candidate.read_bytes()
        content: Body = raw
        if _is_text(content_type):
            try:
                content = raw.decode("utf-8")
            except UnicodeDecodeError:
                content = raw
        context = TransformContext(
            path=local_path,
            content_type=content_type,
            output_path=candidate,
        )
        body = await apply_transforms(content, context, hooks.response_transforms)
        return _response(body, content_type)

    raise web.HTTPNotFound()


def create_app(config: Config, *, hooks: Hooks | None = None, verbose: bool = False) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        hooks: User hooks (default: loaded from config.hooks_module)
        verbose: Log every compiled page

    Returns:
        Configured aiohttp application
    """
    if hooks is None:
        hooks = load_hooks(config.hooks_module, config.root_dir)

    site = create_site_loader(config).load()
    title_resolver = TitleResolver(config.dir.output_dir)
    compiler = create_compiler(config, site, hooks, title_resolver)

    app = web.Application()
    app[config_key] = config
    app[compiler_key] = compiler
    app[hooks_key] = hooks
    app[verbose_key] = verbose

    app.router.add_get("/{path:.*}", serve_file)

    return app


def run_server(config: Config, *, hooks: Hooks | None = None, verbose: bool = False) -> None:
    """Run the server.

    Args:
        config: Application configuration
        hooks: User hooks (default: loaded from config.hooks_module)
        verbose: Log every compiled page
    """
    app = create_app(config, hooks=hooks, verbose=verbose)
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)


def _content_type(local_path: str) -> str:
    extension = os.path.splitext(local_path)[1].lower()
    if extension in CONTENT_TYPES:
        return CONTENT_TYPES[extension]
    guessed, _ = mimetypes.guess_type(local_path)
    return guessed or "application/octet-stream"


def _is_text(content_type: str) -> bool:
    return content_type.startswith(_TEXT_TYPES)


def _response(body: Body, content_type: str) -> web.Response:
    if isinstance(body, str):
        return web.Response(text=body, content_type=content_type)
    return web.Response(body=body, content_type=content_type)
