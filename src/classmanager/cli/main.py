"""classmanager CLI entry point: Click group with subcommands."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from classmanager import __version__


def _read(css_file: str) -> str:
    return Path(css_file).read_text(encoding="utf-8")


@click.group()
@click.version_option(version=__version__, prog_name="classmanager")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output")
def cli(verbose: bool) -> None:
    """classmanager - custom CSS classes for the block editor."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "output_dir", default="lza-css", help="Output directory")
def build(css_file: str, output_dir: str) -> None:
    """Save CSS_FILE and write the minified, root-variable and editor stylesheets."""
    from classmanager.config import ClassManagerConfig
    from classmanager.pipeline import CSSProcessor

    processor = CSSProcessor(ClassManagerConfig(output_dir=output_dir))
    if not processor.process_css(_read(css_file)):
        click.echo(f"Failed to save stylesheets to {output_dir}", err=True)
        sys.exit(1)

    paths = processor.paths
    for path in (paths.custom_css, paths.custom_css_min, paths.root_vars, paths.editor_css):
        click.echo(f"Wrote {path}")


@cli.command()
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--keep-root/--drop-root",
    default=True,
    help="Keep or drop the first :root block before minifying",
)
def minify(css_file: str, keep_root: bool) -> None:
    """Print CSS_FILE minified."""
    from classmanager.css import minify_css, remove_root_variables

    css = _read(css_file)
    if not keep_root:
        css = remove_root_variables(css)
    click.echo(minify_css(css))


@cli.command("editor-css")
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
def editor_css(css_file: str) -> None:
    """Print the editor-safe version of CSS_FILE."""
    from classmanager.css import generate_editor_safe_css

    click.echo(generate_editor_safe_css(_read(css_file)), nl=False)


@cli.command()
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array")
def classes(css_file: str, as_json: bool) -> None:
    """List the class names defined in CSS_FILE."""
    from classmanager.css import class_name_feed

    names = class_name_feed(_read(css_file))
    if as_json:
        click.echo(json.dumps(names))
        return
    for name in names:
        click.echo(name)


@cli.command()
@click.option("--out", "output_dir", default="lza-css", help="Output directory")
def info(output_dir: str) -> None:
    """Show sizes of the stored stylesheets."""
    from classmanager.config import ClassManagerConfig
    from classmanager.pipeline import CSSProcessor, format_file_size

    processor = CSSProcessor(ClassManagerConfig(output_dir=output_dir))
    file_info = processor.file_info()
    if file_info is None:
        click.echo(f"No stylesheets found in {output_dir}", err=True)
        sys.exit(1)

    if file_info.is_smaller:
        click.echo(
            f"Minified classes: {format_file_size(file_info.minified_size)} "
            f"(Original: {format_file_size(file_info.original_size)}) - "
            f"{file_info.percent_reduction}% reduction"
        )
    else:
        click.echo("Minified file is not smaller than original.")
    if file_info.root_vars_size:
        click.echo(f"Root variables: {format_file_size(file_info.root_vars_size)}")
    click.echo(f"CSS files stored in: {output_dir}")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=5000, type=int, help="Port to bind to")
@click.option("--out", "output_dir", default="lza-css", help="Output directory")
@click.option(
    "--preferences",
    "preferences_path",
    default="classmanager-preferences.json",
    help="Theme preferences file",
)
@click.option("--debug/--no-debug", default=False, help="Enable debug mode")
def serve(host: str, port: int, output_dir: str, preferences_path: str, debug: bool) -> None:
    """Start the classmanager JSON API."""
    from classmanager.config import ClassManagerConfig
    from classmanager.web.app import create_app

    config = ClassManagerConfig(
        output_dir=output_dir, preferences_path=preferences_path, host=host, port=port
    )
    app = create_app(config=config)
    click.echo(f"Starting classmanager on {host}:{port}")
    app.run(host=config.host, port=config.port, debug=debug)
