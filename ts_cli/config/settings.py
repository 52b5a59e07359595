"""Fixed defaults for the CLI.

The tool reads no config files and no environment variables; command-line
flags are the only configuration, and these are their defaults.
"""

DEFAULT_INPUT_FORMAT = "rfc3339"
DEFAULT_OUTPUT_FORMAT = "rfc3339"

# Exit codes. EXIT_USAGE matches click's code for usage errors.
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130
