#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub keystore module.

Read-only access to password protected keystores in PKCS#12, JKS and JCEKS
formats.
"""

from kspub.keystore.entries import (
    KeyStoreEntry,
    PrivateKeyEntry,
    SecretKeyEntry,
    TrustedCertificateEntry,
)
from kspub.keystore.exceptions import (
    KSPAliasNotFoundError,
    KSPKeyStoreAuthenticationError,
    KSPKeyStoreError,
    KSPKeyStoreFormatError,
    KSPKeyStoreNotFoundError,
    KSPNotPrivateKeyError,
    KSPUnsupportedKeyStoreError,
)
from kspub.keystore.java_keystore import IS_JKS_SUPPORTED
from kspub.keystore.keystore import KeyStore, KeyStoreType

__all__ = [
    "IS_JKS_SUPPORTED",
    "KeyStore",
    "KeyStoreType",
    "KeyStoreEntry",
    "PrivateKeyEntry",
    "SecretKeyEntry",
    "TrustedCertificateEntry",
    "KSPAliasNotFoundError",
    "KSPKeyStoreAuthenticationError",
    "KSPKeyStoreError",
    "KSPKeyStoreFormatError",
    "KSPKeyStoreNotFoundError",
    "KSPNotPrivateKeyError",
    "KSPUnsupportedKeyStoreError",
]
