"""CLI for rendering rat graph nodes."""

import json
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from rat_graph.config import Settings, load_settings
from rat_graph.core.render.renderer import DocumentRenderer
from rat_graph.core.tree.navigation import walk
from rat_graph.exceptions import ConfigError, NodeNotFoundError, TraversalError
from rat_graph.logging_config import configure_logging
from rat_graph.models.node import Node
from rat_graph.providers.filesystem import FilesystemProvider
from rat_graph.urlresolve import UrlResolver

app = typer.Typer(help="rat graph: render nodes of a markdown graph.")

GraphDirOption = Annotated[
    Path | None,
    typer.Option("--graph-dir", "-g", help="Directory with the graph's markdown files"),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Settings file (YAML)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _settings(config: Path | None) -> Settings:
    try:
        return load_settings(config)
    except ConfigError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


def _open_provider(settings: Settings, graph_dir: Path | None) -> FilesystemProvider:
    if graph_dir is not None:
        settings = replace(settings, graph_dir=graph_dir)
    try:
        return FilesystemProvider.from_settings(settings)
    except ConfigError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


def _get_node(provider: FilesystemProvider, path: str) -> Node:
    try:
        return provider.get_by_path(path)
    except NodeNotFoundError as e:
        logger.error("Node not found: {}", e)
        raise typer.Exit(1) from e


@app.command()
def render(
    path: str = typer.Argument(..., help="Node path, e.g. projects/rat"),
    graph_dir: GraphDirOption = None,
    config: ConfigOption = None,
    indent: int = typer.Option(2, "--indent", "-i", help="JSON indentation, 0 for compact"),
) -> None:
    """Render a node's content and print the part tree as JSON."""
    settings = _settings(config)
    provider = _open_provider(settings, graph_dir)
    node = _get_node(provider, path)

    renderer = DocumentRenderer(provider, url_resolver=UrlResolver(settings.fileservers))
    part = renderer.render_node(node)
    typer.echo(json.dumps(part.to_dict(), indent=indent or None, ensure_ascii=False))


@app.command()
def tree(
    path: str = typer.Argument("", help="Node path to start from (default: root)"),
    depth: Annotated[
        int | None,
        typer.Option("--depth", "-d", help="Max levels below the start node"),
    ] = None,
    graph_dir: GraphDirOption = None,
    config: ConfigOption = None,
) -> None:
    """Print a node and its descendants in display order."""
    provider = _open_provider(_settings(config), graph_dir)
    start = _get_node(provider, path)

    def visit(level: int, node: Node) -> bool:
        typer.echo(f"{'  ' * level}{node.name}  [id={node.id}]")
        return depth is None or level < depth

    try:
        walk(provider, start, visit)
    except (NodeNotFoundError, TraversalError) as e:
        logger.error("Failed to walk graph: {}", e)
        raise typer.Exit(1) from e


@app.command(name="resolve-file")
def resolve_file(
    path: str = typer.Argument(..., help="Relative file path"),
    config: ConfigOption = None,
) -> None:
    """Print the URL of the first configured fileserver serving a file."""
    settings = _settings(config)
    try:
        url = UrlResolver(settings.fileservers).resolve(path)
    except NodeNotFoundError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    typer.echo(url)
