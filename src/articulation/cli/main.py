"""Primary Typer application wiring the articulation CLI."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

import typer
from rich.table import Table
from typer.core import TyperGroup

from . import forest
from .common import CLIError, configure_state, console, parse_override

ExceptionHandler = Callable[[BaseException], Any]


class ArticulationGroup(TyperGroup):
    """Click group that routes registered exceptions to their handlers.

    Handlers run inside Click's own invocation, so a returned ``typer.Exit`` is
    turned into the process exit code by every entry point, the installed
    console script included.
    """

    exception_handlers: list[tuple[type[BaseException], ExceptionHandler]] = []

    def _resolve_handler(self, exception: BaseException) -> ExceptionHandler | None:
        for registered_type, handler in self.exception_handlers:
            if isinstance(exception, registered_type):
                return handler
        return None

    def invoke(self, ctx: typer.Context) -> Any:
        try:
            return super().invoke(ctx)
        except Exception as exc:
            handler = self._resolve_handler(exc)
            if handler is None:
                raise
            result = handler(exc)
            if isinstance(result, BaseException):
                raise result from exc
            return result


class ArticulationTyper(typer.Typer):
    """Typer subclass that supports registering exception handlers."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._exception_handlers: list[tuple[type[BaseException], ExceptionHandler]] = []
        group_cls = type(
            "ArticulationGroup",
            (ArticulationGroup,),
            {"exception_handlers": self._exception_handlers},
        )
        kwargs.setdefault("cls", group_cls)
        super().__init__(*args, **kwargs)

    def exception_handler(
        self, exception_type: type[BaseException]
    ) -> Callable[[ExceptionHandler], ExceptionHandler]:
        def decorator(handler: ExceptionHandler) -> ExceptionHandler:
            self._exception_handlers.append((exception_type, handler))
            return handler

        return decorator


app = ArticulationTyper(
    add_completion=False,
    help="Derive rigid body hierarchies from unordered bodies and joints.",
    no_args_is_help=True,
)


@app.exception_handler(CLIError)
def handle_cli_error(exception: CLIError) -> typer.Exit:
    """Render ``CLIError`` messages without stack traces."""

    console.print(f"[bold red]Error:[/bold red] {exception}")
    return typer.Exit(code=2)


@app.callback()
def main(
    ctx: typer.Context,
    environment: Optional[str] = typer.Option(
        None,
        "--environment",
        "-e",
        help="Active configuration environment (development, testing, production).",
        show_default=False,
    ),
    override: List[str] = typer.Option(  # noqa: B008 - Typer callback signature
        [],
        "--override",
        "-o",
        metavar="KEY=VALUE",
        help="Configuration override in dotted.key=value notation (repeatable).",
    ),
    run_id: Optional[str] = typer.Option(
        None,
        "--run-id",
        help="Explicit run identifier used in log records.",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit debug logging and extended summaries.",
    ),
) -> None:
    """Configure shared CLI state prior to executing subcommands."""

    overrides = [parse_override(item) for item in override]
    configure_state(
        ctx,
        environment=environment,
        overrides=overrides,
        run_id=run_id,
        verbose=verbose,
    )

    if verbose:
        state = ctx.obj
        table = Table(title="CLI Context", show_header=False, box=None)
        table.add_row("Environment", state.environment)
        table.add_row("Run ID", state.run_id)
        console.print(table)


app.command("build")(forest.build_command)
app.command("validate")(forest.validate_command)
app.command("demo")(forest.demo_command)
