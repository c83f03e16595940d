"""Node commands: resolve a path, render a subtree, evict a node."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nodefacade.services.details import DetailService
from nodefacade.services.render import RenderService
from nodefacade.services.resolver import PathService

if TYPE_CHECKING:
    from nodefacade.commands._context import AppContext


@click.command()
@click.argument("path")
@click.pass_obj
def resolve(app: AppContext, path: str) -> None:
    """Resolve PATH (e.g. Enterprise/Finance/Invoice) to its node."""
    app.emit(app.run(PathService(app.facade).resolve, path))


@click.command()
@click.argument("path")
@click.option(
    "-d",
    "--depth",
    type=int,
    default=None,
    help="Levels of children to include (default: [traversal] default_depth).",
)
@click.pass_obj
def get(app: AppContext, path: str, depth: int | None) -> None:
    """Render the node at PATH with its children down to --depth."""
    app.emit(app.run(RenderService(app.facade).render_path, path, depth))


@click.command()
@click.argument("node_id", type=int)
@click.pass_obj
def evict(app: AppContext, node_id: int) -> None:
    """Drop NODE_ID from the detail and projection caches."""
    app.emit(DetailService(app.facade).evict(node_id))
