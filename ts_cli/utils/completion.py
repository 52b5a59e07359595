"""Autocompletion utilities for Typer commands."""

from typing import List

import typer

from ts_cli.formats import available_formats


def complete_format_name(ctx: typer.Context, incomplete: str) -> List[str]:
    """Autocomplete timestamp format names."""
    return [name for name in available_formats() if name.startswith(incomplete)]
