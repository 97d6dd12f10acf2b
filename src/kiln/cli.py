"""CLI interface for kiln.

Command-line tool for building and serving static sites.
"""

import logging
import sys
from pathlib import Path

import click

from kiln.config import Config
from kiln.errors import KilnError


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(
    config_path: Path | None,
    *,
    input_dir: Path | None = None,
    output_dir: Path | None = None,
    host: str | None = None,
    port: int | None = None,
) -> Config:
    try:
        return Config.load(config_path).with_overrides(
            input_dir=input_dir, output_dir=output_dir, host=host, port=port
        )
    except (ValueError, FileNotFoundError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Path to configuration file (default: auto-discover kiln.toml)",
)
input_dir_option = click.option(
    "--input-dir",
    "-i",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Source directory (overrides config)",
)
output_dir_option = click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)


@click.group()
def cli() -> None:
    """Kiln - static site builder."""


@cli.command()
@config_option
@input_dir_option
@output_dir_option
@click.option(
    "--glob",
    "-g",
    "target_glob",
    default=None,
    help="Only build source files matching this pattern",
)
@verbose_option
def build(
    config_path: Path | None,
    input_dir: Path | None,
    output_dir: Path | None,
    target_glob: str | None,
    verbose: bool,
) -> None:
    """Build the site into the output directory."""
    from kiln.builder import build as build_site

    _configure_logging(verbose)
    config = _load_config(config_path, input_dir=input_dir, output_dir=output_dir)

    click.echo(f"Input directory: {config.dir.input_dir}")
    click.echo(f"Output directory: {config.dir.output_dir}")

    try:
        result = build_site(config, target_glob=target_glob)
    except KilnError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(
        click.style(
            f"Built {len(result.pages)} pages and copied {len(result.files)} files "
            f"in {result.elapsed:.2f}s",
            fg="green",
        )
    )


@cli.command()
@config_option
@input_dir_option
@output_dir_option
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
@verbose_option
def serve(
    config_path: Path | None,
    input_dir: Path | None,
    output_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
) -> None:
    """Start the development server."""
    from kiln.server import run_server

    _configure_logging(verbose)
    config = _load_config(
        config_path,
        input_dir=input_dir,
        output_dir=output_dir,
        host=host,
        port=port,
    )

    start_path = config.server.start_path.lstrip("/")
    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Input directory: {config.dir.input_dir}")
    click.echo(f"Open http://{config.server.host}:{config.server.port}/{start_path}")

    try:
        run_server(config, verbose=verbose)
    except KilnError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
