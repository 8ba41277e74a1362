#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Public key extraction from keystore key entries.

The public key of a key entry is taken from the certificate stored under the
same alias and is presented as its DER encoded SubjectPublicKeyInfo structure,
by default as a single line of Base64 text.
"""

import base64
import logging
from enum import Enum
from typing import Optional, Union

from kspub.crypto.crypto_types import KSPEncoding
from kspub.crypto.exceptions import KSPInvalidKeyType, KSPKeysNotMatchingError
from kspub.crypto.keys import PrivateKey, PublicKey
from kspub.keystore.exceptions import (
    KSPKeyStoreError,
    KSPNotPrivateKeyError,
    KSPUnsupportedKeyStoreError,
)
from kspub.keystore.keystore import KeyStore

logger = logging.getLogger(__name__)


class PublicKeyFormat(str, Enum):
    """Output formats of the public key."""

    BASE64 = "base64"
    PEM = "pem"
    DER = "der"
    HEX = "hex"

    @property
    def is_binary(self) -> bool:
        """The format produces binary data, not text."""
        return self == PublicKeyFormat.DER

    @classmethod
    def labels(cls) -> list[str]:
        """Get names of all formats.

        :return: List of format names.
        """
        return [member.value for member in cls]


def extract_public_key(
    keystore: KeyStore,
    alias: str,
    key_password: Optional[str] = None,
    verify_key_pair: bool = False,
) -> PublicKey:
    """Extract public key of the private key entry.

    The key stored under the alias is recovered first, only a private key is
    accepted. The public key is then taken from the certificate stored under
    the same alias.

    :param keystore: Loaded keystore.
    :param alias: Alias of the private key entry.
    :param key_password: Password of the private key, keys protected by the keystore password need none.
    :param verify_key_pair: Check that the private key matches the certificate public key.
    :raises KSPAliasNotFoundError: There is no entry with the alias.
    :raises KSPNotPrivateKeyError: The entry is not a private key entry.
    :raises KSPKeyStoreAuthenticationError: The private key cannot be recovered with the password.
    :raises KSPKeyStoreError: The private key has no certificate.
    :raises KSPUnsupportedKeyStoreError: The key algorithm is not supported.
    :raises KSPKeysNotMatchingError: The private key does not match the certificate.
    :return: Public key of the certificate.
    """
    entry = keystore.get_entry(alias)
    key = keystore.get_key(entry.alias, key_password)
    if not isinstance(key, PrivateKey):
        raise KSPNotPrivateKeyError(
            f"Entry '{entry.alias}' is a {entry.ENTRY_TYPE}, not a private key entry"
        )
    logger.info(f"Private key found under alias '{entry.alias}': {repr(key)}")

    certificate = keystore.get_certificate(entry.alias)
    if certificate is None:
        raise KSPKeyStoreError(f"Private key entry '{entry.alias}' has no certificate")
    logger.debug(f"Certificate: {repr(certificate)}")

    try:
        public_key = certificate.get_public_key()
    except KSPInvalidKeyType as exc:
        raise KSPUnsupportedKeyStoreError(
            f"Certificate of '{entry.alias}' has a key of unsupported algorithm"
        ) from exc
    if verify_key_pair and not key.verify_public_key(public_key):
        raise KSPKeysNotMatchingError(
            f"Private key of '{entry.alias}' does not match the public key of its certificate"
        )
    return public_key


def format_public_key(
    public_key: PublicKey, output_format: PublicKeyFormat = PublicKeyFormat.BASE64
) -> Union[str, bytes]:
    """Format public key for output.

    :param public_key: Public key to be formatted.
    :param output_format: Requested output format, defaults to Base64.
    :return: Text of the key for text formats, DER bytes for binary format.
    """
    der = public_key.export(KSPEncoding.DER)
    if output_format == PublicKeyFormat.BASE64:
        return base64.b64encode(der).decode("ascii")
    if output_format == PublicKeyFormat.PEM:
        return public_key.export(KSPEncoding.PEM).decode("ascii").strip()
    if output_format == PublicKeyFormat.HEX:
        return der.hex()
    return der
