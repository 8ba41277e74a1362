#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub keystore.

Read-only view of a password protected keystore file. The keystore is loaded
once, the password is used to verify its integrity and to decrypt the key
entries and it is not kept afterwards. Entries are looked up by alias.
"""

import logging
from enum import Enum
from typing import Iterable, Iterator, Optional, Union

from typing_extensions import Self

from kspub.crypto.certificate import Certificate
from kspub.crypto.keys import PrivateKey
from kspub.keystore.entries import (
    KeyStoreEntry,
    PrivateKeyEntry,
    SecretKeyEntry,
    TrustedCertificateEntry,
)
from kspub.keystore.exceptions import (
    KSPAliasNotFoundError,
    KSPKeyStoreFormatError,
    KSPKeyStoreNotFoundError,
)
from kspub.keystore.java_keystore import JCEKS_MAGIC, JKS_MAGIC, parse_java_keystore
from kspub.keystore.pkcs12 import is_pkcs12, parse_pkcs12
from kspub.utils.abstract import RawBaseClass
from kspub.utils.misc import get_printable_path

logger = logging.getLogger(__name__)


class KeyStoreType(str, Enum):
    """Supported keystore container formats."""

    PKCS12 = "pkcs12"
    JKS = "jks"
    JCEKS = "jceks"

    @classmethod
    def labels(cls) -> list[str]:
        """Get names of all keystore types.

        :return: List of keystore type names.
        """
        return [member.value for member in cls]

    @classmethod
    def detect(cls, data: bytes) -> "KeyStoreType":
        """Detect keystore type from its content.

        :param data: Keystore data.
        :raises KSPKeyStoreFormatError: Data are not any of the supported keystore formats.
        :return: Detected keystore type.
        """
        if data[:4] == JKS_MAGIC:
            return cls.JKS
        if data[:4] == JCEKS_MAGIC:
            return cls.JCEKS
        if is_pkcs12(data):
            return cls.PKCS12
        raise KSPKeyStoreFormatError(
            f"Unrecognized keystore format, supported formats: {', '.join(cls.labels())}"
        )


class KeyStore(RawBaseClass):
    """Keystore: ordered mapping of aliases to keystore entries."""

    def __init__(self, store_type: KeyStoreType, entries: Iterable[KeyStoreEntry]) -> None:
        """Initialize the keystore.

        :param store_type: Format of the keystore.
        :param entries: Keystore entries, the first entry of duplicated alias wins.
        """
        self.store_type = store_type
        self._entries: dict[str, KeyStoreEntry] = {}
        for entry in entries:
            if entry.alias in self._entries:
                logger.warning(f"Duplicate alias '{entry.alias}' ignored")
                continue
            self._entries[entry.alias] = entry

    @classmethod
    def load(
        cls,
        path: str,
        password: Optional[str],
        store_type: Optional[KeyStoreType] = None,
    ) -> Self:
        """Load keystore from file.

        :param path: Path to the keystore file.
        :param password: Keystore password.
        :param store_type: Expected keystore type, detected from the content when None.
        :raises KSPKeyStoreNotFoundError: File does not exist or cannot be read.
        :return: Loaded keystore.
        """
        logger.info(f"Loading keystore {get_printable_path(path)}")
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError as exc:
            raise KSPKeyStoreNotFoundError(f"Keystore file '{path}' does not exist") from exc
        except OSError as exc:
            raise KSPKeyStoreNotFoundError(
                f"Keystore file '{path}' cannot be read: {exc.strerror}"
            ) from exc
        return cls.parse(data, password, store_type)

    @classmethod
    def parse(
        cls,
        data: bytes,
        password: Optional[str],
        store_type: Optional[KeyStoreType] = None,
    ) -> Self:
        """Parse keystore from bytes.

        :param data: Keystore data.
        :param password: Keystore password.
        :param store_type: Expected keystore type, detected from the content when None.
        :raises KSPKeyStoreFormatError: Data are not a keystore of the expected type.
        :raises KSPKeyStoreAuthenticationError: Wrong keystore password.
        :return: Parsed keystore.
        """
        detected_type = KeyStoreType.detect(data)
        if store_type and store_type != detected_type:
            raise KSPKeyStoreFormatError(
                f"Keystore is of type {detected_type.value}, expected {store_type.value}"
            )
        logger.debug(f"Keystore type: {detected_type.value}")
        if detected_type == KeyStoreType.PKCS12:
            entries = parse_pkcs12(data, password)
        else:
            entries = parse_java_keystore(data, password)
        return cls(detected_type, entries)

    @property
    def aliases(self) -> list[str]:
        """List of all aliases in keystore order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and self.find_entry(alias) is not None

    def __iter__(self) -> Iterator[KeyStoreEntry]:
        return iter(self._entries.values())

    def find_entry(self, alias: str) -> Optional[KeyStoreEntry]:
        """Find entry by alias.

        Exact match is preferred, aliases are compared case-insensitively
        otherwise, as Java keystores do.

        :param alias: Alias of the entry.
        :return: Keystore entry or None when there is no such alias.
        """
        entry = self._entries.get(alias)
        if entry is not None:
            return entry
        folded = alias.casefold()
        for name, candidate in self._entries.items():
            if name.casefold() == folded:
                return candidate
        return None

    def get_entry(self, alias: str) -> KeyStoreEntry:
        """Get entry by alias.

        :param alias: Alias of the entry.
        :raises KSPAliasNotFoundError: There is no entry with the alias.
        :return: Keystore entry.
        """
        entry = self.find_entry(alias)
        if entry is None:
            known = ", ".join(f"'{name}'" for name in self.aliases) or "none"
            raise KSPAliasNotFoundError(f"Alias '{alias}' not found, available aliases: {known}")
        return entry

    def get_key(
        self, alias: str, password: Optional[str] = None
    ) -> Optional[Union[PrivateKey, bytes]]:
        """Get key stored under the alias.

        :param alias: Alias of the entry.
        :param password: Key password, needed only for keys protected by other than keystore password.
        :raises KSPAliasNotFoundError: There is no entry with the alias.
        :raises KSPKeyStoreAuthenticationError: Key password is missing or wrong.
        :return: Private key, secret key bytes or None for certificate entries.
        """
        entry = self.get_entry(alias)
        if isinstance(entry, PrivateKeyEntry):
            return entry.get_private_key(password)
        if isinstance(entry, SecretKeyEntry):
            return entry.get_secret_key(password)
        return None

    def get_certificate(self, alias: str) -> Optional[Certificate]:
        """Get certificate stored under the alias.

        :param alias: Alias of the entry.
        :raises KSPAliasNotFoundError: There is no entry with the alias.
        :return: Leaf certificate of key entry, trusted certificate or None.
        """
        return self.get_entry(alias).get_certificate()

    def get_certificate_chain(self, alias: str) -> list[Certificate]:
        """Get certificate chain stored under the alias.

        :param alias: Alias of the entry.
        :raises KSPAliasNotFoundError: There is no entry with the alias.
        :return: Certificate chain of a key entry, empty list for other entries.
        """
        entry = self.get_entry(alias)
        if isinstance(entry, PrivateKeyEntry):
            return list(entry.certificate_chain)
        return []

    def is_key_entry(self, alias: str) -> bool:
        """Check whether the alias identifies a private or secret key entry."""
        return isinstance(self.find_entry(alias), (PrivateKeyEntry, SecretKeyEntry))

    def is_private_key_entry(self, alias: str) -> bool:
        """Check whether the alias identifies a private key entry."""
        return isinstance(self.find_entry(alias), PrivateKeyEntry)

    def is_certificate_entry(self, alias: str) -> bool:
        """Check whether the alias identifies a trusted certificate entry."""
        return isinstance(self.find_entry(alias), TrustedCertificateEntry)

    def __repr__(self) -> str:
        return f"KeyStore({self.store_type.value}, {len(self)} entries)"

    def __str__(self) -> str:
        nfo = f"Keystore type: {self.store_type.value.upper()}\n"
        nfo += f"Your keystore contains {len(self)} entries\n"
        for entry in self:
            nfo += f"  {str(entry)}\n"
        return nfo
