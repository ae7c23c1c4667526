"""
Terminal interaction: reading piped or typed input and reporting outcomes.

Status lines go to stderr so that armored output on stdout can be redirected
or piped without them.
"""
import logging
import sys

logger = logging.getLogger(__name__)

LEVELS = ('info', 'warn', 'success', 'fatal')


def read_all_input(stream=None) -> str:
    """Read until end of input (CTRL-D on a terminal)."""
    stream = stream or sys.stdin
    sys.stderr.flush()
    return stream.read()


def report(level: str, message, stream=None):
    """Print a status line; ``fatal`` exits with status 1 afterwards."""
    if level not in LEVELS:
        raise ValueError(f"Unknown report level: {level}")
    stream = stream or sys.stderr
    logger.debug(f"{level}: {message}")
    label = 'FATAL' if level == 'fatal' else level
    print(f"({label}) {message}", file=stream)
    if level == 'fatal':
        raise SystemExit(1)
