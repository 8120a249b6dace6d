"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="codebase-reader",
    help="Codebase Reader - Multi-Language Static Analysis",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import analyze as _analyze, file as _file  # noqa: F401, E402
from .stats import stats as _stats, languages as _languages  # noqa: F401, E402
