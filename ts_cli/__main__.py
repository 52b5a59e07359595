"""Allow running as ``python -m ts_cli``."""

from ts_cli.main import run

run()
