"""
Command-line schedule parsing.

Unknown flags are ignored and malformed values leave the default in place.
"""

import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass, replace

from yield_agent.scheduler.models import ScheduleConfig

USAGE = """\
Yield Agent Scheduler Usage:
  python -m yield_agent [options]

Options:
  -i, --interval <minutes>     Set interval between runs (default: 60)
  --no-start-immediate         Don't run immediately on start
  -m, --max-runs <number>      Maximum number of runs before stopping
  -h, --help                   Show this help message

Examples:
  python -m yield_agent                          # Run every 60 minutes
  python -m yield_agent -i 30                    # Run every 30 minutes
  python -m yield_agent -i 15 -m 10              # Run every 15 minutes, max 10 times
  python -m yield_agent --no-start-immediate -i 120  # Run every 2 hours, don't start immediately
"""

INTERVAL_FLAGS = ("--interval", "-i")
MAX_RUNS_FLAGS = ("--max-runs", "-m")
NO_START_IMMEDIATE_FLAG = "--no-start-immediate"
HELP_FLAGS = ("--help", "-h")

_LEADING_INT = re.compile(r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|([0-9]+))")


@dataclass
class ScheduleArgs:
    """Result of parsing command-line arguments."""
    config: ScheduleConfig
    show_help: bool = False


def parse_positive_int(value: str | None) -> int | None:
    """
    Parse the leading integer of a token.

    "30" -> 30, "15min" -> 15, "0x10" -> 16, "abc" -> None, "-5" -> None.

    Returns:
        The integer if it is strictly positive, else None.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    sign, hex_digits, digits = match.groups()
    number = int(hex_digits, 16) if hex_digits else int(digits)
    if sign == "-":
        number = -number
    return number if number > 0 else None


def parse_schedule_from_args(
    args: Sequence[str] | None = None,
    base: ScheduleConfig | None = None,
) -> ScheduleArgs:
    """
    Parse schedule flags from command-line tokens.

    Value-taking flags always consume the next token, even when it is
    missing or invalid. --help stops parsing; the caller decides whether
    to print USAGE and exit.

    Args:
        args: Tokens to scan (defaults to sys.argv[1:])
        base: Config providing defaults (defaults to ScheduleConfig())

    Returns:
        ScheduleArgs with the resulting config and help flag.
    """
    tokens = list(sys.argv[1:] if args is None else args)
    config = base or ScheduleConfig()

    i = 0
    while i < len(tokens):
        arg = tokens[i]

        if arg in INTERVAL_FLAGS:
            interval = parse_positive_int(tokens[i + 1] if i + 1 < len(tokens) else None)
            if interval is not None:
                config = replace(config, interval_minutes=interval)
            i += 1

        elif arg == NO_START_IMMEDIATE_FLAG:
            config = replace(config, start_immediately=False)

        elif arg in MAX_RUNS_FLAGS:
            max_runs = parse_positive_int(tokens[i + 1] if i + 1 < len(tokens) else None)
            if max_runs is not None:
                config = replace(config, max_runs=max_runs)
            i += 1

        elif arg in HELP_FLAGS:
            return ScheduleArgs(config=config, show_help=True)

        i += 1

    return ScheduleArgs(config=config)
