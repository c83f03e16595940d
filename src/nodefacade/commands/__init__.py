"""Subcommand modules for nodefacade.

Provides register_commands() which uses deferred imports to keep
``nodefacade --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the query group and the standalone node commands."""
    # --- Groups ---
    from nodefacade.commands.query import query

    cli.add_command(query)

    # --- Standalone commands ---
    from nodefacade.commands.node import evict, get, resolve
    from nodefacade.commands.state import state

    cli.add_command(resolve)
    cli.add_command(get)
    cli.add_command(evict)
    cli.add_command(state)
