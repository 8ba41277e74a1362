#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub cryptographic exceptions module."""

from kspub.exceptions import KSPError


class KSPCryptoError(KSPError):
    """General kspub Crypto Error.

    Base exception class for failures of key and certificate handling.
    """


class KSPInvalidKeyType(KSPCryptoError):
    """Key of unsupported type was found."""


class KSPKeysNotMatchingError(KSPCryptoError):
    """Private key and certificate public key do not form a key pair."""
