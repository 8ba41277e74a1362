#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub logging utilities with colored console output support."""

import logging
import logging.handlers
import os
import platform
import re
import sys
from datetime import datetime
from typing import Optional, TextIO

import colorama

from kspub import KSPUB_DEBUG_LOG_FILE, KSPUB_DEBUG_LOGGING_DISABLED, __version__

colorama.just_fix_windows_console()

SECRET_OPTIONS = ("-p", "--password", "--key-password")


class ColoredFormatter(logging.Formatter):
    """kspub Colored Logging Formatter.

    Debug and error records carry the source location and time since start.

    :cvar LEVEL_COLORS: Terminal color of each logging level.
    """

    FORMAT = logging.BASIC_FORMAT
    FORMAT_DEBUG = FORMAT + " (%(relativeCreated)dms since start, %(filename)s:%(lineno)d)"
    LEVEL_COLORS = {
        logging.DEBUG: colorama.Fore.BLUE,
        logging.INFO: colorama.Fore.WHITE + colorama.Style.BRIGHT,
        logging.WARNING: colorama.Fore.YELLOW,
        logging.ERROR: colorama.Fore.RED,
        logging.CRITICAL: colorama.Fore.RED + colorama.Style.BRIGHT,
    }

    def __init__(self, colored: bool = True) -> None:
        """Create the formatter.

        :param colored: Wrap records into terminal color codes.
        """
        super().__init__()
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with the layout and color of its level.

        :param record: Input logging record to print.
        :return: Formatted logging string.
        """
        verbose = record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL)
        fmt = self.FORMAT_DEBUG if verbose else self.FORMAT
        if self.colored:
            fmt = self.LEVEL_COLORS.get(record.levelno, "") + fmt + colorama.Style.RESET_ALL
        elif isinstance(record.msg, str):
            record.msg = re.sub(r"\x1b\[\d{1,3}m", "", record.msg)
        return logging.Formatter(fmt).format(record)


def mask_secrets(argv: list[str]) -> list[str]:
    """Replace values of password options in command line by asterisks.

    :param argv: Command line arguments.
    :return: Command line arguments safe to be logged.
    """
    masked = []
    hide_next = False
    for arg in argv:
        if hide_next:
            masked.append("***")
            hide_next = False
            continue
        option, sep, _ = arg.partition("=")
        if option in SECRET_OPTIONS:
            if sep:
                masked.append(f"{option}=***")
            else:
                masked.append(arg)
                hide_next = True
            continue
        masked.append(arg)
    return masked


def _install_debug_log(target_logger: logging.Logger) -> None:
    """Attach rotating debug log file handler, once per log file.

    :param target_logger: Logger to attach the handler to.
    """
    # handlers keep absolute path of their file
    log_file = os.path.abspath(KSPUB_DEBUG_LOG_FILE)
    for handler in target_logger.handlers:
        if (
            isinstance(handler, logging.handlers.RotatingFileHandler)
            and handler.baseFilename == log_file
        ):
            return
    os.makedirs(os.path.dirname(log_file), exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file, mode="a", maxBytes=1_000_000, backupCount=5, encoding="utf-8"
    )
    handler.setFormatter(ColoredFormatter(colored=False))
    handler.setLevel(logging.DEBUG)
    target_logger.addHandler(handler)

    header = [
        f"KSPUB DEBUG LOGGING STARTED {datetime.now():%Y-%m-%d %H:%M:%S}",
        f"kspub version: {__version__}",
        f"Python version: {sys.version.split()[0]}",
        f"OS version: {platform.platform()}",
        f"Last command: {mask_secrets(sys.argv)}",
    ]
    width = max(len(line) for line in header)
    target_logger.debug("*" * (width + 4))
    for line in header:
        target_logger.debug(f"* {line.ljust(width)} *")
    target_logger.debug("*" * (width + 4))


def install(
    level: Optional[int] = None,
    stream: TextIO = sys.stderr,
    colored: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
    create_debug_logger: bool = True,
) -> None:
    """Install kspub log handlers.

    Console output is colored for terminals unless NO_COLOR is set
    (https://no-color.org/). The debug log file gets all records unless
    KSPUB_DEBUG_LOGGING_DISABLED is set.

    :param level: logging level of the console, defaults to logging.WARNING
    :param stream: stream to output logging, defaults to sys.stderr
    :param colored: force colored output on or off
    :param logger: defaults to kspub logger
    :param create_debug_logger: create debug log file handler
    """
    target_logger = logger or logging.getLogger("kspub")
    target_logger.setLevel(logging.DEBUG)

    if colored is None:
        colored = "NO_COLOR" not in os.environ and hasattr(stream, "isatty") and stream.isatty()

    handler = logging.StreamHandler(stream)
    handler.setLevel(level or logging.WARNING)
    handler.setFormatter(ColoredFormatter(colored))
    target_logger.addHandler(handler)

    if create_debug_logger and not KSPUB_DEBUG_LOGGING_DISABLED:
        try:
            _install_debug_log(target_logger)
        except OSError as exc:
            target_logger.warning(f"Failed to initialize debug logging: {str(exc)}")
