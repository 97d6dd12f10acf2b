"""Configuration management for kiln.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "kiln.toml"


@dataclass
class DirConfig:
    """Directory configuration."""

    input_dir: Path = field(default_factory=lambda: Path("src"))
    output_dir: Path = field(default_factory=lambda: Path("dist"))
    layouts_dir: Path = field(default_factory=lambda: Path("_layouts"))
    data_dir: Path | None = None


@dataclass
class ServerConfig:
    """Development server configuration."""

    host: str = "localhost"
    port: int = 3000
    start_path: str = "/"


@dataclass
class SiteConfig:
    """Site-wide values used by breadcrumbs and titles."""

    base_url: str = "/"
    site_name: str | None = None


@dataclass
class PagesConfig:
    """Page discovery configuration."""

    glob: str = "**/*.html"
    output_extension: str = ".html"
    ignore: list[str] = field(default_factory=list)


@dataclass
class NavigationConfig:
    """Navigation tree configuration."""

    ignore_globs: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Application configuration."""

    dir: DirConfig
    server: ServerConfig
    site: SiteConfig
    pages: PagesConfig
    navigation: NavigationConfig
    hooks_module: str | None = None
    config_path: Path | None = None

    @property
    def root_dir(self) -> Path:
        """Directory relative paths in the configuration refer to."""
        if self.config_path is not None:
            return self.config_path.parent
        return Path.cwd()

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for kiln.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        """Create config with all defaults, relative to the current directory."""
        cwd = Path.cwd()
        return cls(
            dir=DirConfig(
                input_dir=cwd / "src",
                output_dir=cwd / "dist",
                layouts_dir=cwd / "_layouts",
            ),
            server=ServerConfig(),
            site=SiteConfig(),
            pages=PagesConfig(),
            navigation=NavigationConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        path = path.resolve()
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid configuration file {path}: {e}") from e

        config_dir = path.parent

        return cls(
            dir=cls._parse_dir(data.get("dir"), config_dir),
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site")),
            pages=cls._parse_pages(data.get("pages")),
            navigation=cls._parse_navigation(data.get("navigation")),
            hooks_module=cls._parse_hooks(data.get("hooks")),
            config_path=path,
        )

    @classmethod
    def _parse_dir(cls, data: object, config_dir: Path) -> DirConfig:
        """Parse dir configuration section.

        Args:
            data: Raw dir section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DirConfig instance
        """
        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ValueError("dir section must be a dictionary")

        paths: dict[str, Path] = {}
        for key, default in (("input", "src"), ("output", "dist"), ("layouts", "_layouts")):
            value = data.get(key, default)
            if not isinstance(value, str):
                raise ValueError(f"dir.{key} must be a string")
            paths[key] = config_dir / value

        data_dir = data.get("data")
        if data_dir is not None and not isinstance(data_dir, str):
            raise ValueError("dir.data must be a string")

        return DirConfig(
            input_dir=paths["input"],
            output_dir=paths["output"],
            layouts_dir=paths["layouts"],
            data_dir=config_dir / data_dir if data_dir is not None else None,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "localhost")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 3000)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        start_path = data.get("start_path", "/")
        if not isinstance(start_path, str):
            raise ValueError("server.start_path must be a string")

        return ServerConfig(host=host, port=port, start_path=start_path)

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section."""
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        base_url = data.get("base_url", "/")
        if not isinstance(base_url, str):
            raise ValueError("site.base_url must be a string")

        site_name = data.get("site_name")
        if site_name is not None and not isinstance(site_name, str):
            raise ValueError("site.site_name must be a string")

        return SiteConfig(base_url=base_url, site_name=site_name)

    @classmethod
    def _parse_pages(cls, data: object) -> PagesConfig:
        """Parse pages configuration section."""
        if data is None:
            return PagesConfig()

        if not isinstance(data, dict):
            raise ValueError("pages section must be a dictionary")

        glob = data.get("glob", "**/*.html")
        if not isinstance(glob, str):
            raise ValueError("pages.glob must be a string")

        output_extension = data.get("output_extension", ".html")
        if not isinstance(output_extension, str):
            raise ValueError("pages.output_extension must be a string")

        ignore = cls._parse_string_list(data.get("ignore", []), "pages.ignore")

        return PagesConfig(glob=glob, output_extension=output_extension, ignore=ignore)

    @classmethod
    def _parse_navigation(cls, data: object) -> NavigationConfig:
        """Parse navigation configuration section."""
        if data is None:
            return NavigationConfig()

        if not isinstance(data, dict):
            raise ValueError("navigation section must be a dictionary")

        ignore_globs = cls._parse_string_list(
            data.get("ignore_globs", []), "navigation.ignore_globs"
        )
        return NavigationConfig(ignore_globs=ignore_globs)

    @classmethod
    def _parse_hooks(cls, data: object) -> str | None:
        """Parse hooks configuration section.

        Returns:
            Hooks module reference or None if not configured
        """
        if data is None:
            return None

        if not isinstance(data, dict):
            raise ValueError("hooks section must be a dictionary")

        module = data.get("module")
        if module is not None and not isinstance(module, str):
            raise ValueError("hooks.module must be a string")
        return module

    @classmethod
    def _parse_string_list(cls, data: object, name: str) -> list[str]:
        if not isinstance(data, list):
            raise ValueError(f"{name} must be a list")
        items: list[str] = []
        for item in data:
            if not isinstance(item, str):
                raise ValueError(f"{name} items must be strings")
            items.append(item)
        return items

    def with_overrides(
        self,
        *,
        input_dir: Path | None = None,
        output_dir: Path | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            input_dir: Override dir.input
            output_dir: Override dir.output
            host: Override server.host
            port: Override server.port

        Returns:
            New Config instance with overrides applied
        """
        directories = self.dir
        if input_dir is not None or output_dir is not None:
            directories = replace(
                self.dir,
                input_dir=input_dir if input_dir is not None else self.dir.input_dir,
                output_dir=output_dir if output_dir is not None else self.dir.output_dir,
            )

        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        return replace(self, dir=directories, server=server)
