"""Static site build.

Compiles every page of the site into the output directory and copies all
other source files verbatim.
"""

import logging
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path

from kiln.config import Config
from kiln.core.globs import match_glob
from kiln.core.renderer import PageCompiler
from kiln.core.site import Site, SiteLoader
from kiln.core.title import TitleResolver
from kiln.data import load_global_data
from kiln.hooks import Hooks, load_hooks

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Summary of a build."""

    pages: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    elapsed: float = 0.0


def create_site_loader(config: Config) -> SiteLoader:
    """Create the page discovery for a configuration."""
    return SiteLoader(
        config.dir.input_dir,
        config.dir.output_dir,
        page_glob=config.pages.glob,
        output_extension=config.pages.output_extension,
        ignore=config.pages.ignore,
    )


def create_compiler(
    config: Config,
    site: Site,
    hooks: Hooks,
    title_resolver: TitleResolver | None = None,
) -> PageCompiler:
    """Create a page compiler for a configuration."""
    return PageCompiler(
        site,
        layouts_dir=config.dir.layouts_dir,
        title_resolver=title_resolver or TitleResolver(config.dir.output_dir),
        hooks=hooks,
        base_url=config.site.base_url,
        site_name=config.site.site_name,
        ignore_globs=config.navigation.ignore_globs,
        data=load_global_data(config.dir.data_dir),
    )


def build(
    config: Config,
    *,
    hooks: Hooks | None = None,
    target_glob: str | None = None,
) -> BuildResult:
    """Build the site.

    Args:
        config: Application configuration
        hooks: User hooks (default: loaded from config.hooks_module)
        target_glob: Only build source files matching this pattern

    Returns:
        BuildResult listing written files

    Raises:
        PageLoadError: If a page can't be read
        CompileError: If a page fails to compile
        HooksError: If the hooks module can't be loaded
        DataLoadError: If a global data file can't be parsed
    """
    start = time.perf_counter()
    if hooks is None:
        hooks = load_hooks(config.hooks_module, config.root_dir)

    loader = create_site_loader(config)
    site = loader.load()
    compiler = create_compiler(config, site, hooks)
    result = BuildResult()

    logger.info("Build started: %d pages in %s", len(site), config.dir.input_dir)

    for page in site:
        relative = page.input_path.relative_to(config.dir.input_dir).as_posix()
        if target_glob is not None and not match_glob(relative, target_glob):
            continue
        compiled = compiler.compile(page)
        _write(page.output_path, compiled.html)
        result.pages.append(page.output_path)
        logger.info("Compiled %s -> %s", relative, page.output_path)

    for source in _static_files(loader, site, config):
        relative = source.relative_to(config.dir.input_dir)
        if target_glob is not None and not match_glob(relative.as_posix(), target_glob):
            continue
        destination = config.dir.output_dir / relative
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
        result.files.append(destination)
        logger.debug("Copied %s", relative)

    result.elapsed = time.perf_counter() - start
    logger.info(
        "Build completed in %.2fs (%d pages, %d files)",
        result.elapsed,
        len(result.pages),
        len(result.files),
    )
    return result


def _static_files(loader: SiteLoader, site: Site, config: Config) -> list[Path]:
    """Source files that are not pages and are copied as-is."""
    input_dir = config.dir.input_dir
    if not input_dir.is_dir():
        return []

    excluded_dirs = [config.dir.layouts_dir.resolve(), config.dir.output_dir.resolve()]
    if config.dir.data_dir is not None:
        excluded_dirs.append(config.dir.data_dir.resolve())
    sources = {page.input_path for page in site}
    sidecars = {source.with_suffix(".json") for source in sources}
    files: list[Path] = []
    for path in sorted(input_dir.rglob("*")):
        if not path.is_file() or path in sources:
            continue
        if any(path.resolve().is_relative_to(directory) for directory in excluded_dirs):
            continue
        if path in sidecars:
            continue
        if loader.is_included(path):
            files.append(path)
    return files


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
