#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub JKS and JCEKS keystore reader.

The proprietary Java keystore formats are read using the pyjks library, which
is an optional dependency (``pip install kspub[jks]``).
"""

import importlib.util
import logging
import struct
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from kspub.crypto.certificate import Certificate
from kspub.crypto.exceptions import KSPInvalidKeyType
from kspub.crypto.keys import PrivateKey
from kspub.exceptions import KSPError
from kspub.keystore.entries import (
    KeyStoreEntry,
    PrivateKeyEntry,
    SecretKeyEntry,
    TrustedCertificateEntry,
)
from kspub.keystore.exceptions import (
    KSPKeyStoreAuthenticationError,
    KSPKeyStoreFormatError,
    KSPUnsupportedKeyStoreError,
)

logger = logging.getLogger(__name__)

IS_JKS_SUPPORTED = importlib.util.find_spec("jks") is not None

if IS_JKS_SUPPORTED:
    import jks

JKS_MAGIC = b"\xfe\xed\xfe\xed"
JCEKS_MAGIC = b"\xce\xce\xce\xce"


def _timestamp(entry: Any) -> Optional[datetime]:
    """Convert pyjks timestamp (milliseconds since epoch) to datetime."""
    if not entry.timestamp:
        return None
    return datetime.fromtimestamp(entry.timestamp / 1000, tz=timezone.utc)


def _certificate(cert_type: str, cert_data: bytes) -> Certificate:
    if cert_type != "X.509":
        raise KSPKeyStoreFormatError(f"Unsupported certificate type: {cert_type}")
    return Certificate.parse(cert_data)


def _private_key(entry: Any) -> PrivateKey:
    """Create private key of decrypted pyjks entry.

    :param entry: pyjks private key entry, decrypted.
    :raises KSPUnsupportedKeyStoreError: Key algorithm is not supported.
    :return: Private key.
    """
    try:
        return PrivateKey.parse(entry.pkey_pkcs8)
    except KSPInvalidKeyType as exc:
        raise KSPUnsupportedKeyStoreError(
            f"Private key '{entry.alias}' uses unsupported algorithm: {exc.description}"
        ) from exc


def _private_key_decryptor(entry: Any) -> Callable[[str], PrivateKey]:
    """Create decryptor of pyjks private key entry.

    :param entry: pyjks private key entry, still encrypted.
    :return: Callable decrypting the entry with a key password.
    """

    def decrypt(password: str) -> PrivateKey:
        try:
            entry.decrypt(password)
        except jks.util.DecryptionFailureException as exc:
            raise KSPKeyStoreAuthenticationError(
                f"Cannot recover key '{entry.alias}', the key password is incorrect"
            ) from exc
        except jks.util.KeystoreException as exc:
            raise KSPKeyStoreFormatError(f"Cannot recover key '{entry.alias}': {str(exc)}") from exc
        return _private_key(entry)

    return decrypt


def _secret_key_decryptor(entry: Any) -> Callable[[str], tuple[str, bytes]]:
    """Create decryptor of pyjks secret key entry.

    :param entry: pyjks secret key entry, still encrypted.
    :return: Callable decrypting the entry with a key password.
    """

    def decrypt(password: str) -> tuple[str, bytes]:
        try:
            entry.decrypt(password)
        except jks.util.DecryptionFailureException as exc:
            raise KSPKeyStoreAuthenticationError(
                f"Cannot recover key '{entry.alias}', the key password is incorrect"
            ) from exc
        except jks.util.KeystoreException as exc:
            raise KSPKeyStoreFormatError(f"Cannot recover key '{entry.alias}': {str(exc)}") from exc
        return entry.algorithm, entry.key

    return decrypt


def _convert_entry(entry: Any) -> KeyStoreEntry:
    """Convert pyjks entry into kspub keystore entry.

    :param entry: pyjks keystore entry.
    :raises KSPKeyStoreFormatError: Unknown entry kind.
    :return: kspub keystore entry.
    """
    timestamp = _timestamp(entry)
    if isinstance(entry, jks.PrivateKeyEntry):
        chain = [_certificate(cert_type, cert_data) for cert_type, cert_data in entry.cert_chain]
        if entry.is_decrypted():
            try:
                private_key = _private_key(entry)
            except KSPUnsupportedKeyStoreError as exc:
                logger.warning(f"Private key '{entry.alias}' uses unsupported algorithm")
                return PrivateKeyEntry(entry.alias, chain, load_error=exc, timestamp=timestamp)
            return PrivateKeyEntry(entry.alias, chain, private_key=private_key, timestamp=timestamp)
        return PrivateKeyEntry(
            entry.alias, chain, decryptor=_private_key_decryptor(entry), timestamp=timestamp
        )
    if isinstance(entry, jks.TrustedCertEntry):
        return TrustedCertificateEntry(
            entry.alias, _certificate(entry.type, entry.cert), timestamp=timestamp
        )
    if isinstance(entry, jks.SecretKeyEntry):
        if entry.is_decrypted():
            return SecretKeyEntry(
                entry.alias, algorithm=entry.algorithm, key=entry.key, timestamp=timestamp
            )
        return SecretKeyEntry(
            entry.alias, decryptor=_secret_key_decryptor(entry), timestamp=timestamp
        )
    raise KSPKeyStoreFormatError(f"Unsupported keystore entry: {type(entry).__name__}")


def parse_java_keystore(data: bytes, password: Optional[str]) -> list[KeyStoreEntry]:
    """Parse entries of JKS or JCEKS keystore.

    Keys protected by the keystore password are decrypted right away, the others
    stay encrypted until their key password is provided.

    :param data: JKS or JCEKS keystore data.
    :param password: Keystore password.
    :raises KSPUnsupportedKeyStoreError: pyjks library is not installed.
    :raises KSPKeyStoreAuthenticationError: Keystore integrity check failed.
    :raises KSPKeyStoreFormatError: Data are not a valid JKS or JCEKS keystore.
    :return: List of keystore entries.
    """
    if not IS_JKS_SUPPORTED:
        raise KSPUnsupportedKeyStoreError(
            "JKS and JCEKS keystores require the pyjks library, install it by 'pip install kspub[jks]'"
        )
    try:
        store = jks.KeyStore.loads(data, password or "", try_decrypt_keys=True)
    except jks.util.KeystoreSignatureException as exc:
        raise KSPKeyStoreAuthenticationError(
            "Keystore was tampered with, or password was incorrect"
        ) from exc
    except (jks.util.KeystoreException, ValueError, IndexError, struct.error) as exc:
        raise KSPKeyStoreFormatError(f"Invalid Java keystore: {str(exc)}") from exc

    logger.debug(f"Java keystore parsed, type: {store.store_type}, {len(store.entries)} entries")
    try:
        return [_convert_entry(entry) for entry in store.entries.values()]
    except KSPKeyStoreFormatError:
        raise
    except KSPError as exc:
        raise KSPKeyStoreFormatError(f"Invalid keystore entry: {exc.description}") from exc
