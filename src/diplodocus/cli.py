"""CLI interface for Diplodocus.

Command-line tool for serving a content directory as a website.
"""

import logging
from pathlib import Path

import click
import yaml

from diplodocus.config import Config


@click.group()
@click.version_option(package_name="diplodocus")
def cli() -> None:
    """Diplodocus - serve markdown and HTML pages as a website."""


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover diplodocus.toml)",
)
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Content source directory (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--site-name",
    default=None,
    help="Site name shown in headers and titles (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log every resolved request)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
    site_name: str | None,
    verbose: bool,
) -> None:
    """Start the site server."""
    from diplodocus.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        source_dir=source_dir,
        site_name=site_name,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    click.echo(f"Site name: {config.site.name}")
    if config.site.toc_levels:
        levels = ", ".join(str(level) for level in config.site.toc_levels)
        click.echo(f"Table of contents levels: {levels}")
    else:
        click.echo("Table of contents: disabled")

    run_server(config)


@cli.command()
@click.argument("markdown_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover diplodocus.toml)",
)
@click.option(
    "--url",
    "page_url",
    default="http://localhost/",
    show_default=True,
    help="Page URL used for canonical and Open Graph metadata",
)
def render(markdown_file: Path, config_path: Path | None, page_url: str) -> None:
    """Render a markdown file to a complete HTML page on stdout."""
    from diplodocus.core.markdown import MarkdownRenderer
    from diplodocus.core.page import merge_meta, render_page

    config = _load_config(config_path)
    renderer = MarkdownRenderer()

    try:
        result = renderer.render(markdown_file.read_text(encoding="utf-8"))
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Failed to render {markdown_file}: {e}") from e

    meta = merge_meta(config.site, result.meta)
    click.echo(render_page(result.content, meta, page_url, renderer))
