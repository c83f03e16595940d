"""Command group: run and explain attribute queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nodefacade.services.query import QueryService

if TYPE_CHECKING:
    from nodefacade.commands._context import AppContext


@click.group()
def query() -> None:
    """Run boolean queries over node and category attributes.

    \b
    Examples:
      nodefacade query run "node.name == 'Invoice'"
      nodefacade query run "Finance.Status == 'Approved' && Finance.Amount > 100"
      nodefacade query explain "node.subType == 144 || node.subType == 0"
    """


@query.command()
@click.argument("query_text")
@click.pass_obj
def run(app: AppContext, query_text: str) -> None:
    """Execute QUERY_TEXT and list the matching nodes."""
    app.emit(app.run(QueryService(app.facade).execute, query_text))


@query.command()
@click.argument("query_text")
@click.pass_obj
def explain(app: AppContext, query_text: str) -> None:
    """Show the parsed tree and compiled SQL for QUERY_TEXT."""
    app.emit(QueryService(app.facade).explain(query_text))
