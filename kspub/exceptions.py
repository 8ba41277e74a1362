#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub exception classes.

This module defines the base of the exception hierarchy used throughout the
kspub library. Every exception carries the process exit code the command line
tool reports when the exception terminates it.
"""

from typing import Optional

#######################################################################
# # Keystore Public Key Reader Exceptions
#######################################################################


class KSPError(Exception):
    """kspub Base Exception.

    Base exception class for all kspub-related errors. All kspub specific
    exceptions inherit from this class, which provides consistent error
    formatting and the process exit code used by the command line tool.

    :cvar fmt: Default error message format template.
    :cvar exit_code: Exit code reported by the command line tool.
    """

    fmt = "KSPUB: {description}"
    exit_code = 2

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base kspub Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class KSPKeyError(KSPError, KeyError):
    """kspub Key Error exception for missing dictionary keys."""


class KSPParsingError(KSPError):
    """kspub parsing error exception.

    Raised when binary data (keys, certificates) cannot be decoded.
    """
