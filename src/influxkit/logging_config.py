"""
Logging for the `influxkit` namespace.

The package only emits records; it installs no output until an application
calls [`setup_sdk_logging()`][influxkit.logging_config.setup_sdk_logging].
Modules log at DEBUG (clock-derived timestamps, batch flushes, parsed raw
queries) and at WARNING when input is silently reshaped (overwritten
duplicate keys, skipped all-null Arrow rows, oversized lines).
"""

import logging as root_logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

SDK_LOGGER_NAME = "influxkit"


def setup_sdk_logging(
    level="INFO",
    pretty: bool = False,
    console: Optional[Console] = None,
    propagate: bool = False,
):
    """
    Routes `influxkit` records to a single handler.

    Calling it again replaces the previous handler.

    Args:
        level: Threshold for the `influxkit` logger, e.g. `"DEBUG"`.
        pretty: Render through `rich` (colors, markup, rich tracebacks)
            instead of plain `time [LEVEL] name: message` lines on stderr.
        console: The `rich` console used when `pretty` is set. Defaults to
            one writing to stderr.
        propagate: Also pass records up to the root logger.
    """
    logger = root_logging.getLogger(SDK_LOGGER_NAME)
    logger.handlers.clear()

    if pretty:
        handler = RichHandler(
            level=level,
            console=console or Console(stderr=True),
            show_time=True,
            show_path=True,
            markup=True,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(root_logging.Formatter("[dim white]%(name)s[/dim white]: %(message)s"))
        ready = f"Logging to the console at level [bold]{level}[/bold]"
    else:
        handler = root_logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            root_logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        ready = f"Logging to stderr at level {level}"

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
    logger.info(ready)


def get_logger(name: Optional[str] = None) -> root_logging.Logger:
    """
    Returns `name`'s logger, or the package logger `influxkit` when omitted.

    Modules call `get_logger(__name__)` so their records nest under `influxkit`.
    """
    return root_logging.getLogger(name or SDK_LOGGER_NAME)
