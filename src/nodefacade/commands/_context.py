"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Facade initialization, dispatch of
service calls onto the store pool, and centralized result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nodefacade.config.logging import configure_logging
from nodefacade.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from collections.abc import Callable

    from nodefacade.config.settings import FacadeSettings
    from nodefacade.infrastructure.facade import Facade
    from nodefacade.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The facade is created lazily on first use so ``--help`` and
    ``--version`` never open the store.
    """

    def __init__(self, settings: FacadeSettings) -> None:
        self.settings = settings
        self._facade: Facade | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def facade(self) -> Facade:
        """The facade instance (created lazily on first access)."""
        if self._facade is None:
            from nodefacade.infrastructure.facade import Facade

            self._facade = Facade(self.settings)
        return self._facade

    def run[**P](
        self,
        call: Callable[P, ServiceResult],
        /,
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> ServiceResult:
        """Run a service call on the store pool and wait for its result."""
        return self.facade.pool.run(call, *args, **kwargs)

    def close(self) -> None:
        if self._facade is not None:
            self._facade.close()
            self._facade = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
