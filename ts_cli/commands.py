"""Command handlers and the command registry.

Every handler takes the resolved parse function, the resolved format function
and the positional arguments, and returns the text to print. Handlers raise
TsCliError subclasses on failure and never exit the process.
"""

from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

from ts_cli.errors import ParseError, UsageError
from ts_cli.formats import FormatFunc, ParseFunc, format_pb, get_formatter, get_parser
from ts_cli.timestamp import Timestamp, millis_between

Handler = Callable[[ParseFunc, FormatFunc, Sequence[str]], str]

_ORDINALS = ("first", "second")


class Command(NamedTuple):
    name: str
    handler: Handler
    arity: int
    help: str


def _require_args(command: str, args: Sequence[str], count: int) -> None:
    if len(args) != count:
        noun = "timestamp" if count == 1 else "timestamps"
        raise UsageError(f"'{command}' takes exactly {count} {noun}, got {len(args)}")


def _parse_args(parser: ParseFunc, args: Sequence[str]) -> List[Timestamp]:
    """Parse each argument in order, tagging errors with the position."""
    parsed = []
    for index, raw in enumerate(args):
        try:
            parsed.append(parser(raw))
        except ParseError as e:
            if len(args) > 1:
                raise e.at(_ORDINALS[index]) from e.wrapped
            raise
    return parsed


def now(parser: ParseFunc, formatter: FormatFunc, args: Sequence[str]) -> str:
    """Print the current time in the output format."""
    _require_args("now", args, 0)
    return formatter(Timestamp.now())


def diff(parser: ParseFunc, formatter: FormatFunc, args: Sequence[str]) -> str:
    """Print the difference between two timestamps in milliseconds."""
    _require_args("diff", args, 2)
    start, end = _parse_args(parser, args)
    return str(millis_between(start, end))


def convert(parser: ParseFunc, formatter: FormatFunc, args: Sequence[str]) -> str:
    """Convert a timestamp from the input format to the output format."""
    _require_args("conv", args, 1)
    (ts,) = _parse_args(parser, args)
    return formatter(ts)


def pb(parser: ParseFunc, formatter: FormatFunc, args: Sequence[str]) -> str:
    """Print the protobuf seconds/nanos breakdown, whatever the output format."""
    _require_args("pb", args, 1)
    (ts,) = _parse_args(parser, args)
    return format_pb(ts)


COMMANDS: Dict[str, Command] = {
    "now": Command("now", now, 0, "Print the current timestamp"),
    "diff": Command("diff", diff, 2, "Print the difference between two timestamps in milliseconds"),
    "conv": Command("conv", convert, 1, "Convert a timestamp from one format to another"),
    "pb": Command("pb", pb, 1, "Print the protobuf seconds/nanos components of a timestamp"),
}


def dispatch(
    command: Optional[str],
    input_format: str,
    output_format: str,
    args: Sequence[str] = (),
) -> str:
    """Run one command and return its output.

    Both format names are resolved before anything else, so an unknown
    format is reported even for commands that do not use it.

    Raises:
        UsageError: Missing or unknown command, or wrong argument count
        UnknownFormatError: Unregistered input or output format
        ParseError: An argument does not match the input format
    """
    if not command:
        raise UsageError("Must provide a command", f"Commands: {', '.join(COMMANDS)}")
    parser = get_parser(input_format)
    formatter = get_formatter(output_format)
    entry = COMMANDS.get(command)
    if entry is None:
        raise UsageError(f"Unknown command: {command!r}", f"Commands: {', '.join(COMMANDS)}")
    return entry.handler(parser, formatter, list(args))
