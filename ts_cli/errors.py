"""Exception hierarchy for the ts CLI.

Command handlers raise these; only ``ts_cli.main`` turns them into exit codes.
"""

from typing import Optional, Sequence

from ts_cli.config.settings import EXIT_FAILURE, EXIT_USAGE


class TsCliError(Exception):
    """Base exception for every error reported to the user.

    Carries a user-facing message, an optional detail line printed under
    it, and the wrapped exception (shown with ``--debug``).
    """

    exit_code = EXIT_FAILURE

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Optional[Exception] = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details
        self.wrapped = wrapped


class UsageError(TsCliError):
    """Raised for a missing or unknown command, or a wrong argument count."""

    exit_code = EXIT_USAGE


class UnknownFormatError(TsCliError):
    """Raised when a format name is not in the registry."""

    def __init__(self, role: str, name: str, valid: Sequence[str]) -> None:
        super().__init__(
            f"Invalid {role} format: {name!r}",
            internal_details=f"Valid formats: {', '.join(valid)}",
        )
        self.role = role
        self.name = name


class ParseError(TsCliError):
    """Raised when a timestamp does not match the input format's grammar.

    Format parse functions raise it without a ``position``; the command
    handler fills it in for the user-facing message.
    """

    def __init__(
        self,
        raw: str,
        format_name: str,
        reason: str,
        position: str = "",
        wrapped: Optional[Exception] = None,
    ) -> None:
        self.raw = raw
        self.format_name = format_name
        self.reason = reason
        self.position = position
        label = f"{position} timestamp" if position else "timestamp"
        super().__init__(
            f"Error parsing {label} {raw!r} as {format_name}",
            internal_details=reason,
            wrapped=wrapped,
        )

    def at(self, position: str) -> "ParseError":
        """Copy of this error tagged with the argument's position."""
        return ParseError(self.raw, self.format_name, self.reason, position, self.wrapped)
