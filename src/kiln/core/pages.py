"""Page files and their output locations.

A page is a source file under the input directory. Its URL, path stem and
slug are derived from the path it will be written to in the output
directory.
"""

import json
import os
import posixpath
import re
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from kiln.core.types import URLPath
from kiln.errors import PageLoadError

_TRAILING_INDEX_RE = re.compile(r"(?:(?<=/)|^)index(?:\.[a-z]+)?$")
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


@dataclass(frozen=True)
class OutputPathInfo:
    """Output location of a source file."""

    output_path: Path
    name: str
    extension: str
    rel_dir: str
    root_rel_path: str
    root_rel_path_with_ext: str


@dataclass(frozen=True)
class PageContent:
    """Loaded page: merged metadata, body without front matter, raw text."""

    meta: dict[str, Any]
    content: str
    raw: str


@dataclass(frozen=True)
class PageRecord:
    """Compilable page file."""

    input_path: Path
    output_path: Path
    url: URLPath
    file_path_stem: str
    file_slug: str
    extension: str
    title: str | None = field(default=None, compare=False)

    def load(self) -> PageContent:
        """Read the page and its metadata.

        Front matter is merged with an optional sidecar ``<name>.json``
        file; sidecar values win.

        Raises:
            PageLoadError: If the file can't be read or metadata is malformed
        """
        try:
            raw = self.input_path.read_text(encoding="utf-8")
        except OSError as e:
            raise PageLoadError(f"Cannot read page {self.input_path}: {e}") from e

        meta, content = parse_front_matter(raw, source=self.input_path)

        sidecar = self.input_path.with_suffix(".json")
        if sidecar.exists():
            try:
                data = json.loads(sidecar.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise PageLoadError(f"Invalid page data {sidecar}: {e}") from e
            if not isinstance(data, dict):
                raise PageLoadError(f"Page data must be an object: {sidecar}")
            meta = {**meta, **data}

        return PageContent(meta=meta, content=content, raw=raw)

    def with_title(self, title: str | None) -> "PageRecord":
        return replace(self, title=title)


def parse_front_matter(raw: str, *, source: Path | None = None) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from page content.

    Args:
        raw: Full file content
        source: File path used in error messages

    Returns:
        Tuple of (metadata, content without front matter)

    Raises:
        PageLoadError: If the front matter is not a YAML mapping
    """
    match = _FRONT_MATTER_RE.match(raw)
    if match is None:
        return {}, raw

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise PageLoadError(f"Invalid front matter in {source or '<string>'}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PageLoadError(f"Front matter must be a mapping in {source or '<string>'}")

    return data, raw[match.end() :]


def compute_output_path(
    input_path: Path,
    input_dir: Path,
    output_dir: Path,
    output_extension: str,
) -> OutputPathInfo:
    """Compute where a source file is written.

    Args:
        input_path: Source file path
        input_dir: Root of the source tree
        output_dir: Root of the output tree
        output_extension: Extension of the written file (e.g., ".html"), may be empty

    Returns:
        OutputPathInfo with paths relative to the roots in POSIX form
    """
    input_path = Path(os.path.abspath(input_path))
    input_dir = Path(os.path.abspath(input_dir))
    output_dir = Path(os.path.abspath(output_dir))

    original_extension = input_path.suffix
    name = input_path.name[: len(input_path.name) - len(original_extension)]
    rel_dir = PurePosixPath(*input_path.parent.relative_to(input_dir).parts).as_posix()
    rel_dir = "" if rel_dir == "." else rel_dir
    root_rel_path = posixpath.join(rel_dir, name) if rel_dir else name
    root_rel_path_with_ext = f"{root_rel_path}{output_extension}"

    return OutputPathInfo(
        output_path=output_dir / root_rel_path_with_ext,
        name=name,
        extension=original_extension.lower(),
        rel_dir=rel_dir,
        root_rel_path=root_rel_path,
        root_rel_path_with_ext=root_rel_path_with_ext,
    )


def get_file(
    input_path: Path,
    input_dir: Path,
    output_dir: Path,
    output_extension: str,
) -> PageRecord:
    """Create a PageRecord for a source file."""
    info = compute_output_path(input_path, input_dir, output_dir, output_extension)

    file_path_stem = f"/{info.root_rel_path}"
    url = "/" + _TRAILING_INDEX_RE.sub("", info.root_rel_path_with_ext)
    if info.name == "index":
        file_slug = Path(os.path.abspath(input_path)).parent.name
    else:
        file_slug = info.name

    return PageRecord(
        input_path=Path(input_path),
        output_path=info.output_path,
        url=URLPath(url),
        file_path_stem=file_path_stem,
        file_slug=file_slug,
        extension=info.extension,
    )


def url_to_local_path(url: str, default_extension: str = ".html") -> str:
    """Map a request URL to a path relative to the output directory.

    ``/about/`` maps to ``about/index.html``, an extension-less ``/about``
    to ``about.html``. Query strings and fragments are ignored.
    """
    path = url.split("?", 1)[0].split("#", 1)[0]
    path = path.lstrip("/")
    if path == "" or path.endswith("/"):
        return f"{path}index{default_extension}"
    if not posixpath.splitext(path)[1]:
        return f"{path}{default_extension}"
    return path


def url_to_file(
    url: str,
    input_dir: Path,
    output_dir: Path,
    output_extension: str,
    source_extension: str = ".html",
) -> PageRecord:
    """Create the PageRecord whose output would be served at ``url``."""
    local_path = url_to_local_path(url, output_extension)
    root, _ = posixpath.splitext(local_path)
    return get_file(input_dir / f"{root}{source_extension}", input_dir, output_dir, output_extension)
