#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub - Keystore public key reader.

Opens a password protected keystore (PKCS#12, JKS or JCEKS), looks up a key
entry by its alias and prints the public key of the certificate stored under
the same alias.

MULTIPLE INTERFACES:
    - Python library (``kspub.keystore``, ``kspub.public_key``)
    - Command line tool ``kspub``
"""

import os
from typing import Optional, Union

from packaging.version import Version, parse
from platformdirs import PlatformDirs

from .__version__ import __version__ as kspub_version


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


version: Version = parse(kspub_version)

__author__ = "NXP"
__license__ = "BSD-3-Clause"
__version__ = str(version)

# The kspub behavior settings
KSPUB_VERSION_BASE = version.base_version
KSPUB_DATA_FOLDER = os.environ.get("KSPUB_DATA_FOLDER") or os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "data"
)
KSPUB_PLATFORM_DIRS = PlatformDirs(
    appauthor="kspub",
    appname="kspub",
    version=KSPUB_VERSION_BASE,
)

KSPUB_DEBUG_LOGGING_DISABLED = value_to_bool(os.environ.get("KSPUB_DEBUG_LOGGING_DISABLED"))
KSPUB_DEBUG_LOG_FILE = os.environ.get(
    "KSPUB_DEBUG_LOG_FILE", os.path.join(KSPUB_PLATFORM_DIRS.user_log_dir, "debug.log")
)
