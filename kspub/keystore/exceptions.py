#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub keystore exceptions.

Every failure kind of keystore handling has its own exception class and its
own process exit code, so scripts calling the command line tool can tell the
failures apart.
"""

from kspub.exceptions import KSPError


class KSPKeyStoreError(KSPError):
    """General keystore error."""

    fmt = "KSPUB Keystore: {description}"


class KSPKeyStoreNotFoundError(KSPKeyStoreError):
    """Keystore file does not exist or cannot be opened."""

    exit_code = 4


class KSPKeyStoreAuthenticationError(KSPKeyStoreError):
    """Keystore integrity check or key decryption failed, typically a wrong password."""

    exit_code = 5


class KSPKeyStoreFormatError(KSPKeyStoreError):
    """Keystore data are not a well-formed keystore container."""

    exit_code = 6


class KSPUnsupportedKeyStoreError(KSPKeyStoreFormatError):
    """Keystore format is recognized but cannot be handled by this installation."""


class KSPAliasNotFoundError(KSPKeyStoreError):
    """No entry with the requested alias is present in the keystore."""

    exit_code = 7


class KSPNotPrivateKeyError(KSPKeyStoreError):
    """Entry under the requested alias does not hold a private key."""

    exit_code = 8
