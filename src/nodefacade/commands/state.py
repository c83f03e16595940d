"""Standalone command: report facade and repository state."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nodefacade.services.state import StateService

if TYPE_CHECKING:
    from nodefacade.commands._context import AppContext


@click.command()
@click.pass_obj
def state(app: AppContext) -> None:
    """Show the system identifier, versions, and cache statistics."""
    app.emit(app.run(StateService(app.facade).state))
