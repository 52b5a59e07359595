"""Main entry point for the ts CLI.

This is the only module that decides exit codes: command handlers raise
TsCliError subclasses and ``_run`` turns them into a diagnostic on stderr
plus ``typer.Exit``.
"""

import sys
from typing import List, Optional

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel

from ts_cli import __version__
from ts_cli.commands import COMMANDS, dispatch
from ts_cli.config.settings import (
    DEFAULT_INPUT_FORMAT,
    DEFAULT_OUTPUT_FORMAT,
    EXIT_FAILURE,
)
from ts_cli.errors import TsCliError
from ts_cli.formats import FORMATS
from ts_cli.timestamp import Timestamp
from ts_cli.utils.completion import complete_format_name
from ts_cli.utils.output import (
    console,
    create_table,
    detail,
    err_console,
    error,
    result,
)

app = typer.Typer(
    name="ts",
    help="ts - print, compare and convert timestamps",
    add_completion=True,
    no_args_is_help=True,
)

# Unknown dash-prefixed tokens (negative millisecond values such as -5000)
# are passed through as timestamp arguments.
TIMESTAMP_CONTEXT = {"ignore_unknown_options": True}

# Instant used for the example column of `ts formats`
EXAMPLE_TIMESTAMP = Timestamp.from_unix_millis(1609459200123)


def _input_option(default: Optional[str]):
    return typer.Option(
        default,
        "--input",
        "-i",
        "--from",
        "-f",
        help="Format of the timestamps given as arguments",
        autocompletion=complete_format_name,
    )


def _output_option(default: Optional[str]):
    return typer.Option(
        default,
        "--output",
        "-o",
        "--to",
        "-t",
        help="Format to print timestamps in",
        autocompletion=complete_format_name,
    )


def _timestamps_argument(help_text: str):
    return typer.Argument(None, help=help_text, show_default=False)


def report_error(exc: TsCliError, debug: bool = False) -> None:
    """Write a TsCliError to stderr."""
    error(exc.user_message)
    if exc.internal_details:
        detail(exc.internal_details)
    if debug:
        detail(f"Error type: {type(exc).__name__}")
        if exc.wrapped is not None:
            detail(f"Caused by {type(exc.wrapped).__name__}: {exc.wrapped}")


def _run(
    ctx: typer.Context,
    command: str,
    args: Optional[List[str]],
    input_format: Optional[str],
    output_format: Optional[str],
) -> None:
    """Run a command, using group-level flags where the command gave none."""
    settings = ctx.ensure_object(dict)
    input_format = input_format or settings.get("input", DEFAULT_INPUT_FORMAT)
    output_format = output_format or settings.get("output", DEFAULT_OUTPUT_FORMAT)

    try:
        output = dispatch(command, input_format, output_format, args or [])
    except TsCliError as e:
        report_error(e, debug=settings.get("debug", False))
        raise typer.Exit(e.exit_code)

    result(output)


@app.command("now", context_settings=TIMESTAMP_CONTEXT, help=COMMANDS["now"].help)
def now_command(
    ctx: typer.Context,
    args: Optional[List[str]] = _timestamps_argument("Takes no timestamps"),
    input_format: Optional[str] = _input_option(None),
    output_format: Optional[str] = _output_option(None),
):
    _run(ctx, "now", args, input_format, output_format)


@app.command("diff", context_settings=TIMESTAMP_CONTEXT, help=COMMANDS["diff"].help)
def diff_command(
    ctx: typer.Context,
    args: Optional[List[str]] = _timestamps_argument("Two timestamps: START END (prints END - START)"),
    input_format: Optional[str] = _input_option(None),
    output_format: Optional[str] = _output_option(None),
):
    _run(ctx, "diff", args, input_format, output_format)


@app.command("conv", context_settings=TIMESTAMP_CONTEXT, help=COMMANDS["conv"].help)
def conv_command(
    ctx: typer.Context,
    args: Optional[List[str]] = _timestamps_argument("The timestamp to convert"),
    input_format: Optional[str] = _input_option(None),
    output_format: Optional[str] = _output_option(None),
):
    _run(ctx, "conv", args, input_format, output_format)


@app.command("pb", context_settings=TIMESTAMP_CONTEXT, help=COMMANDS["pb"].help)
def pb_command(
    ctx: typer.Context,
    args: Optional[List[str]] = _timestamps_argument("The timestamp to break down"),
    input_format: Optional[str] = _input_option(None),
    output_format: Optional[str] = _output_option(None),
):
    _run(ctx, "pb", args, input_format, output_format)


@app.command("formats")
def formats_command():
    """List the supported timestamp formats."""
    table = create_table(
        "Timestamp Formats",
        [("Name", "cyan"), ("Description", "white"), ("Example", "dim")],
    )
    for fmt in FORMATS.values():
        table.add_row(fmt.name, fmt.description, fmt.format(EXAMPLE_TIMESTAMP.local()))
    console.print(table)


@app.command()
def version():
    """Show CLI version."""
    console.print(f"[bold cyan]ts-cli[/] v{__version__}")


@app.callback()
def main(
    ctx: typer.Context,
    input_format: str = _input_option(DEFAULT_INPUT_FORMAT),
    output_format: str = _output_option(DEFAULT_OUTPUT_FORMAT),
    debug: bool = typer.Option(False, "--debug", help="Show error types and underlying causes"),
):
    """
    ts - print, compare and convert timestamps.

    Formats: rfc3339, db, pb, ms (see `ts formats`).

    Examples:
    - ts now -o ms
    - ts diff 2021-01-01T00:00:00Z 2021-01-01T00:00:01Z
    - ts conv -i ms -o db 1609459200000
    - ts pb -i ms 1609459200000
    """
    ctx.obj = {"input": input_format, "output": output_format, "debug": debug}


def run() -> None:
    """Console script entry point."""
    try:
        app()
    except Exception as e:
        err_console.print(Panel(
            f"[red]An unexpected error occurred:[/]\n\n"
            f"[bold white]{escape(str(e))}[/bold white]\n\n"
            f"[dim]Type: {type(e).__name__}[/dim]",
            title="[bold red]Unexpected Error[/bold red]",
            border_style="red",
            box=box.ROUNDED,
        ))
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    run()
