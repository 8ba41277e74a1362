#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub application utilities and helper functions."""

import logging
import sys
from functools import wraps
from typing import Any, Callable, Optional

import click

from kspub import KSPUB_DEBUG_LOG_FILE, KSPUB_DEBUG_LOGGING_DISABLED
from kspub.exceptions import KSPError

logger = logging.getLogger(__name__)


class KSPAppError(KSPError):
    """kspub application error exception for CLI tools.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "{description}"

    def __init__(self, desc: Optional[str] = None, error_code: int = 1) -> None:
        """Initialize the AppError.

        :param desc: Description to print out on command line, defaults to None
        :param error_code: Error code passed to OS, defaults to 1
        """
        super().__init__(desc)
        self.description = desc
        self.error_code = error_code


def _print_debug_log_hint() -> None:
    if not KSPUB_DEBUG_LOGGING_DISABLED:
        click.secho(
            f"See debug log file: {KSPUB_DEBUG_LOG_FILE} for more info.", fg="yellow", err=True
        )


def catch_kspub_error(function: Callable) -> Callable:
    """Catch and handle KSPError and other exceptions.

    When KSPAppError is raised, its message is printed and the process exits
    with its error code (default is 1).

    When KSPError or AssertionError is raised, the message is printed, the
    traceback is logged on debug level and the process exits with the exit
    code of the exception class. Keystore errors have their own codes, other
    errors use 2.

    Other exceptions (including KeyboardInterrupt) exit with code 3.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            retval = function(*args, **kwargs)
            return retval
        except KSPAppError as app_exc:
            if app_exc.description:
                click.echo(f"{app_exc.__class__.__name__}: {app_exc}", err=True)
            if 0 < app_exc.error_code < 256:
                sys.exit(app_exc.error_code)
            sys.exit(1)
        except KSPError as kspub_exc:
            click.echo(f"{kspub_exc.__class__.__name__}: {kspub_exc}", err=True)
            logger.debug(str(kspub_exc), exc_info=True)
            _print_debug_log_hint()
            sys.exit(kspub_exc.exit_code)
        except AssertionError as assert_exc:
            click.echo(f"{assert_exc.__class__.__name__}: {assert_exc}", err=True)
            logger.debug(str(assert_exc), exc_info=True)
            _print_debug_log_hint()
            sys.exit(2)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            _print_debug_log_hint()
            sys.exit(3)

    return wrapper
