"""Configuration management for Diplodocus.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from diplodocus.core.navigation import parse_nav_links
from diplodocus.core.types import NavLink

CONFIG_FILENAME = "diplodocus.toml"

DEFAULT_SITE_NAME = "diplodocus"
DEFAULT_FAVICON = "https://twemoji.maxcdn.com/v/13.1.0/72x72/1f4e6.png"


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(frozen=True)
class DocsConfig:
    """Content directory configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))
    default_extension: str = "html"
    markdown_extension: str = "md"


@dataclass(frozen=True)
class SiteConfig:
    """Site-wide page configuration, overridable per page via front-matter."""

    name: str = DEFAULT_SITE_NAME
    description: str = ""
    favicon: str = DEFAULT_FAVICON
    image: str = ""
    twitter: str = ""
    lang: str = "en"
    remove_default_styles: bool = False
    toc_levels: tuple[int, ...] = ()
    bottom_head: str = ""
    bottom_body: str = ""
    nav: tuple[NavLink, ...] = ()


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    server: ServerConfig
    docs: DocsConfig
    site: SiteConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for diplodocus.toml in current directory and parents.

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
            return cls.default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def default(cls) -> Config:
        """Create config with all defaults."""
        return cls(server=ServerConfig(), docs=DocsConfig(), site=SiteConfig())

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
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        server = cls._parse_server(data.get("server"))
        docs = cls._parse_docs(data.get("docs"), config_dir)
        site = cls._parse_site(data.get("site"), data.get("nav"))

        return cls(server=server, docs=docs, site=site, config_path=path)

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

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(source_dir=config_dir / "docs")

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        source_dir = data.get("source_dir", "docs")
        if not isinstance(source_dir, str):
            raise ValueError("docs.source_dir must be a string")

        default_extension = _parse_extension(data, "default_extension", "html")
        markdown_extension = _parse_extension(data, "markdown_extension", "md")
        if default_extension == markdown_extension:
            raise ValueError("docs.default_extension and docs.markdown_extension must differ")

        return DocsConfig(
            source_dir=config_dir / source_dir,
            default_extension=default_extension,
            markdown_extension=markdown_extension,
        )

    @classmethod
    def _parse_site(cls, data: object, nav_data: object) -> SiteConfig:
        """Parse site configuration section and navigation tree.

        Args:
            data: Raw site section data
            nav_data: Raw top-level nav array

        Returns:
            SiteConfig instance
        """
        nav = parse_nav_links(nav_data) if nav_data is not None else ()

        if data is None:
            return SiteConfig(nav=nav)

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        strings: dict[str, str] = {}
        for key, default in (
            ("name", DEFAULT_SITE_NAME),
            ("description", ""),
            ("favicon", DEFAULT_FAVICON),
            ("image", ""),
            ("twitter", ""),
            ("lang", "en"),
            ("bottom_head", ""),
            ("bottom_body", ""),
        ):
            value = data.get(key, default)
            if not isinstance(value, str):
                raise ValueError(f"site.{key} must be a string")
            strings[key] = value

        remove_default_styles = data.get("remove_default_styles", False)
        if not isinstance(remove_default_styles, bool):
            raise ValueError("site.remove_default_styles must be a boolean")

        toc_levels_raw = data.get("toc_levels", [])
        if not isinstance(toc_levels_raw, list):
            raise ValueError("site.toc_levels must be a list")
        toc_levels: list[int] = []
        for item in toc_levels_raw:
            if not isinstance(item, int) or isinstance(item, bool):
                raise ValueError("site.toc_levels items must be integers")
            toc_levels.append(item)

        return SiteConfig(
            **strings,
            remove_default_styles=remove_default_styles,
            toc_levels=tuple(toc_levels),
            nav=nav,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        site_name: str | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            source_dir: Override docs.source_dir
            site_name: Override site.name

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        docs = self.docs
        if source_dir is not None:
            docs = replace(self.docs, source_dir=source_dir)

        site = self.site
        if site_name is not None:
            site = replace(self.site, name=site_name)

        return replace(self, server=server, docs=docs, site=site)


def _parse_extension(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ValueError(f"docs.{key} must be a non-empty string")
    return value.lstrip(".")
