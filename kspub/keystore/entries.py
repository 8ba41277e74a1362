#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub keystore entries.

A keystore maps aliases to entries of three kinds: private keys with their
certificate chain, trusted certificates and secret (symmetric) keys. Encrypted
key material is decrypted on demand.
"""

from datetime import datetime
from typing import Callable, Optional

from kspub.crypto.certificate import Certificate
from kspub.crypto.keys import PrivateKey
from kspub.exceptions import KSPError
from kspub.keystore.exceptions import KSPKeyStoreAuthenticationError
from kspub.utils.abstract import RawBaseClass


class KeyStoreEntry(RawBaseClass):
    """Common base of keystore entries.

    :cvar ENTRY_TYPE: Entry type name as printed by keytool.
    """

    ENTRY_TYPE = "Unknown"

    def __init__(self, alias: str, timestamp: Optional[datetime] = None) -> None:
        """Initialize the entry.

        :param alias: Alias of the entry.
        :param timestamp: Creation date of the entry, if the keystore records it.
        """
        self.alias = alias
        self.timestamp = timestamp

    def get_certificate(self) -> Optional[Certificate]:
        """Get the certificate associated with the entry.

        :return: Certificate or None when the entry has no certificate.
        """
        return None

    def __repr__(self) -> str:
        return f"{self.ENTRY_TYPE}({self.alias!r})"

    def __str__(self) -> str:
        created = f", created {self.timestamp:%Y-%m-%d %H:%M:%S}" if self.timestamp else ""
        return f"{self.alias}, {self.ENTRY_TYPE}{created}"


class PrivateKeyEntry(KeyStoreEntry):
    """Private key with its certificate chain, leaf certificate first."""

    ENTRY_TYPE = "PrivateKeyEntry"

    def __init__(
        self,
        alias: str,
        certificate_chain: list[Certificate],
        private_key: Optional[PrivateKey] = None,
        decryptor: Optional[Callable[[str], PrivateKey]] = None,
        timestamp: Optional[datetime] = None,
        load_error: Optional[KSPError] = None,
    ) -> None:
        """Initialize the private key entry.

        Either the already decrypted private key, a decryptor or the load error
        must be given. The decryptor gets the key password and returns the
        private key, it raises KSPKeyStoreAuthenticationError when the password
        is wrong. The load error is raised on every access to a key which
        cannot be used, the rest of the keystore stays readable.

        :param alias: Alias of the entry.
        :param certificate_chain: Certificate chain, leaf certificate first.
        :param private_key: Decrypted private key.
        :param decryptor: Callable decrypting the private key with a password.
        :param timestamp: Creation date of the entry.
        :param load_error: Error of a key that cannot be recovered.
        """
        super().__init__(alias, timestamp)
        assert private_key or decryptor or load_error
        self.certificate_chain = certificate_chain
        self._private_key = private_key
        self._decryptor = decryptor
        self._load_error = load_error

    @property
    def is_decrypted(self) -> bool:
        """Private key has already been decrypted."""
        return self._private_key is not None

    def get_private_key(self, password: Optional[str] = None) -> PrivateKey:
        """Get the private key, decrypting it when needed.

        :param password: Key password, needed only when the key is still encrypted.
        :raises KSPKeyStoreAuthenticationError: Key is encrypted and the password is missing or wrong.
        :raises KSPError: The key cannot be used, e.g. its algorithm is not supported.
        :return: Private key.
        """
        if self._load_error is not None:
            raise self._load_error
        if self._private_key is None:
            if password is None or self._decryptor is None:
                raise KSPKeyStoreAuthenticationError(
                    f"Private key '{self.alias}' is protected by a different password, "
                    "provide the key password"
                )
            self._private_key = self._decryptor(password)
        return self._private_key

    def get_certificate(self) -> Optional[Certificate]:
        """Get the leaf certificate of the chain.

        :return: Leaf certificate or None for an empty chain.
        """
        return self.certificate_chain[0] if self.certificate_chain else None


class TrustedCertificateEntry(KeyStoreEntry):
    """Trusted certificate without a private key."""

    ENTRY_TYPE = "trustedCertEntry"

    def __init__(
        self, alias: str, certificate: Certificate, timestamp: Optional[datetime] = None
    ) -> None:
        super().__init__(alias, timestamp)
        self.certificate = certificate

    def get_certificate(self) -> Optional[Certificate]:
        """Get the trusted certificate.

        :return: The certificate.
        """
        return self.certificate


class SecretKeyEntry(KeyStoreEntry):
    """Secret (symmetric) key, found in JCEKS keystores only."""

    ENTRY_TYPE = "SecretKeyEntry"

    def __init__(
        self,
        alias: str,
        algorithm: Optional[str] = None,
        key: Optional[bytes] = None,
        decryptor: Optional[Callable[[str], tuple[str, bytes]]] = None,
        timestamp: Optional[datetime] = None,
    ) -> None:
        """Initialize the secret key entry.

        :param alias: Alias of the entry.
        :param algorithm: Key algorithm name, unknown until the key is decrypted.
        :param key: Decrypted key bytes.
        :param decryptor: Callable returning algorithm name and key bytes for a password.
        :param timestamp: Creation date of the entry.
        """
        super().__init__(alias, timestamp)
        assert key is not None or decryptor
        self.algorithm = algorithm
        self._key = key
        self._decryptor = decryptor

    @property
    def is_decrypted(self) -> bool:
        """Secret key has already been decrypted."""
        return self._key is not None

    def get_secret_key(self, password: Optional[str] = None) -> bytes:
        """Get the secret key bytes, decrypting them when needed.

        :param password: Key password, needed only when the key is still encrypted.
        :raises KSPKeyStoreAuthenticationError: Key is encrypted and the password is missing or wrong.
        :return: Secret key bytes.
        """
        if self._key is None:
            if password is None or self._decryptor is None:
                raise KSPKeyStoreAuthenticationError(
                    f"Secret key '{self.alias}' is protected by a different password, "
                    "provide the key password"
                )
            self.algorithm, self._key = self._decryptor(password)
        return self._key
