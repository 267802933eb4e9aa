"""CLI interface for Menustage.

Command-line tool for inspecting, normalizing and editing menu documents.
"""

import json
import logging
import sys
from pathlib import Path

import click

from menustage.config import Config
from menustage.core.converter import MenuNode, dump_tree, from_tree
from menustage.document import read_menu_file
from menustage.editor import EditorHandlers, MenuEditor
from menustage.reorder import ListReorderable

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover menustage.toml)",
)
max_depth_option = click.option(
    "--max-depth",
    type=click.IntRange(min=0),
    default=None,
    help="Deepest allowed menu level (overrides config)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Menustage - hierarchical menu editor."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("menu_file", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the flat sequence as JSON")
def flatten(menu_file: Path, as_json: bool) -> None:
    """Print a menu document as a flat depth-annotated list."""
    nodes = _read_or_exit(menu_file)
    items = from_tree(nodes)

    if as_json:
        click.echo(
            json.dumps(
                [{"depth": item.depth, **item.to_dict()} for item in items],
                indent=2,
            ),
        )
        return

    for item in items:
        url = f" <{item.url}>" if item.url else ""
        click.echo(f"{'  ' * item.depth}{item.title}{url}")


@cli.command()
@click.argument("menu_file", type=click.Path(exists=True, path_type=Path))
@config_option
@max_depth_option
def normalize(menu_file: Path, config_path: Path | None, max_depth: int | None) -> None:
    """Load a menu, repair its depths and print the nested result."""
    config = _load_config(config_path, max_depth)
    nodes = _read_or_exit(menu_file)

    editor = MenuEditor(config.editor, reorderable=ListReorderable())
    editor.load(dump_tree(nodes))
    editor.flush()

    click.echo(json.dumps(editor.data("object"), indent=2))


@cli.command()
@click.argument("menu_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--action",
    "-a",
    "actions",
    multiple=True,
    required=True,
    help="ACTION:INDEX (up, down, child-in, child-out, remove, cancel, toggle) "
    "or move:FROM:TO; applied in order",
)
@click.option("--yes", "-y", is_flag=True, help="Remove without asking")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the result to a file instead of stdout",
)
@config_option
@max_depth_option
def edit(
    menu_file: Path,
    actions: tuple[str, ...],
    yes: bool,
    output: Path | None,
    config_path: Path | None,
    max_depth: int | None,
) -> None:
    """Apply editor actions to a menu document."""
    config = _load_config(config_path, max_depth)
    nodes = _read_or_exit(menu_file)

    handlers = EditorHandlers(on_confirm_remove=(lambda item: True) if yes else None)
    reorderable = ListReorderable()
    editor = MenuEditor(config.editor, handlers, reorderable)
    editor.load(dump_tree(nodes))
    editor.flush()

    for spec in actions:
        parts = spec.split(":")
        try:
            if parts[0] == "move" and len(parts) == 3:
                applied = reorderable.move(int(parts[1]), int(parts[2]))
            elif len(parts) == 2:
                applied = editor.dispatch(int(parts[1]), parts[0])
            else:
                raise ValueError(spec)
        except ValueError:
            click.echo(click.style(f"Error: invalid action '{spec}'", fg="red"), err=True)
            sys.exit(1)

        if not applied:
            click.echo(click.style(f"Skipped: {spec}", fg="yellow"), err=True)

    result = json.dumps(editor.data("object"), indent=2)
    if output is None:
        click.echo(result)
    else:
        output.write_text(result + "\n", encoding="utf-8")
        click.echo(click.style(f"Menu written to {output}", fg="green"))


@cli.command()
@config_option
@click.option(
    "--menu-file",
    "-m",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Initial menu document (overrides config)",
)
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@max_depth_option
def serve(
    config_path: Path | None,
    menu_file: Path | None,
    host: str | None,
    port: int | None,
    max_depth: int | None,
) -> None:
    """Start the editor session API server."""
    from menustage.server import run_server

    config = _load_config(config_path, max_depth).with_overrides(
        host=host,
        port=port,
        menu_file=menu_file,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    if config.editor.menu_file:
        click.echo(f"Menu file: {config.editor.menu_file}")
    else:
        click.echo("Menu file: none (empty menu)")
    click.echo(f"Max depth: {config.editor.max_depth}")

    try:
        run_server(config)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _load_config(config_path: Path | None, max_depth: int | None) -> Config:
    """Load configuration or exit with error."""
    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)
    return config.with_overrides(max_depth=max_depth)


def _read_or_exit(menu_file: Path) -> list[MenuNode]:
    """Read a menu document or exit with error."""
    try:
        return read_menu_file(menu_file)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
