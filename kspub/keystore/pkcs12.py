#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub PKCS#12 keystore reader.

PKCS#12 is the default keystore type of current Java platforms. The PFX
structure holds safe bags: private keys, usually shrouded (encrypted) with the
keystore password, and certificates. The friendly name attribute of a bag is
the alias of the entry. A certificate belongs to the private key whose public
key it carries, the rest of the key's certificate chain is found by issuer.
"""

import logging
from typing import Any, Iterator, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    PublicFormat,
    load_der_private_key,
    pkcs12,
)
from pyasn1.codec.ber import decoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import char, univ
from pyasn1_modules import rfc5652, rfc7292

from kspub.crypto.certificate import Certificate
from kspub.crypto.exceptions import KSPInvalidKeyType
from kspub.crypto.keys import PrivateKey
from kspub.keystore.entries import KeyStoreEntry, PrivateKeyEntry, TrustedCertificateEntry
from kspub.keystore.exceptions import (
    KSPKeyStoreAuthenticationError,
    KSPKeyStoreFormatError,
    KSPUnsupportedKeyStoreError,
)

logger = logging.getLogger(__name__)

PFX_VERSION = 3
# Java names keys without friendly name by a counter starting at 1
DEFAULT_KEY_ALIAS = "1"


def is_pkcs12(data: bytes) -> bool:
    """Check whether the data look like a PKCS#12 (PFX) structure.

    The PFX is a SEQUENCE whose first element is the INTEGER version 3.

    :param data: Keystore data.
    :return: True if the data are a PFX structure.
    """
    if not data or data[0] != 0x30:
        return False
    try:
        pfx, _ = decoder.decode(data)
        version = pfx[0]
    except (PyAsn1Error, IndexError, TypeError):
        return False
    return isinstance(version, univ.Integer) and int(version) == PFX_VERSION


def _public_key_der(public_key: Any) -> bytes:
    return public_key.public_bytes(Encoding.DER, PublicFormat.SubjectPublicKeyInfo)


class _KeyBag:
    """Private key found in a key bag, already decrypted."""

    def __init__(self, key: Any, friendly_name: Optional[str]) -> None:
        self.key = key
        self.friendly_name = friendly_name
        self.public_key = _public_key_der(key.public_key())


def _friendly_name(bag: rfc7292.SafeBag) -> Optional[str]:
    attributes = bag["bagAttributes"]
    if not attributes.isValue:
        return None
    for attribute in attributes:
        if attribute["attrType"] == rfc7292.pkcs_9_at_friendlyName and len(
            attribute["attrValues"]
        ):
            name, _ = decoder.decode(
                attribute["attrValues"][0].asOctets(), asn1Spec=char.BMPString()
            )
            return str(name)
    return None


def _safe_bags(data: bytes) -> Iterator[rfc7292.SafeBag]:
    """Iterate safe bags stored in plain (not encrypted) safe contents.

    Encrypted safe contents hold certificates, those are read by the
    cryptography library.

    :param data: PKCS#12 data.
    :raises PyAsn1Error: Malformed PFX structure.
    :return: Iterator of safe bags.
    """
    pfx, _ = decoder.decode(data, asn1Spec=rfc7292.PFX())
    auth_safe = pfx["authSafe"]
    if auth_safe["contentType"] != rfc5652.id_data:
        raise KSPUnsupportedKeyStoreError("PKCS#12 keystore with public-key integrity mode")
    content, _ = decoder.decode(auth_safe["content"].asOctets(), asn1Spec=univ.OctetString())
    safes, _ = decoder.decode(content.asOctets(), asn1Spec=rfc7292.AuthenticatedSafe())
    for content_info in safes:
        if content_info["contentType"] != rfc5652.id_data:
            continue
        content, _ = decoder.decode(
            content_info["content"].asOctets(), asn1Spec=univ.OctetString()
        )
        bags, _ = decoder.decode(content.asOctets(), asn1Spec=rfc7292.SafeContents())
        yield from bags


def _read_key_bags(data: bytes, password: Optional[str]) -> list[_KeyBag]:
    """Read and decrypt all private keys of the PKCS#12 structure.

    :param data: PKCS#12 data.
    :param password: Keystore password, shrouded keys are encrypted by it.
    :raises KSPKeyStoreFormatError: Malformed PFX structure.
    :raises KSPKeyStoreAuthenticationError: Shrouded key cannot be decrypted.
    :raises KSPUnsupportedKeyStoreError: Key of unknown algorithm or encryption.
    :return: List of keys in the keystore order.
    """
    keys = []
    try:
        for bag in _safe_bags(data):
            if bag["bagId"] == rfc7292.id_keyBag:
                secret = None
            elif bag["bagId"] == rfc7292.id_pkcs8ShroudedKeyBag:
                secret = password.encode("utf-8") if password is not None else b""
            else:
                continue
            name = _friendly_name(bag)
            try:
                key = load_der_private_key(bag["bagValue"].asOctets(), secret)
            except UnsupportedAlgorithm as exc:
                raise KSPUnsupportedKeyStoreError(
                    f"Private key '{name}' uses unsupported algorithm: {str(exc)}"
                ) from exc
            except (ValueError, TypeError) as exc:
                raise KSPKeyStoreAuthenticationError(
                    f"Cannot recover private key '{name}', the password is incorrect"
                ) from exc
            keys.append(_KeyBag(key, name))
    except PyAsn1Error as exc:
        raise KSPKeyStoreFormatError(f"Invalid PKCS#12 structure: {str(exc)}") from exc
    return keys


def _leaf_certificate(
    key: _KeyBag, certificates: list[pkcs12.PKCS12Certificate]
) -> Optional[pkcs12.PKCS12Certificate]:
    """Find certificate of the key, certificate of the same friendly name is preferred."""
    matching = [
        cert
        for cert in certificates
        if _public_key_der(cert.certificate.public_key()) == key.public_key
    ]
    for cert in matching:
        if key.friendly_name is not None and _cert_name(cert) == key.friendly_name:
            return cert
    return matching[0] if matching else None


def _cert_name(cert: pkcs12.PKCS12Certificate) -> Optional[str]:
    if cert.friendly_name is None:
        return None
    return cert.friendly_name.decode("utf-8", errors="replace")


def _certificate_chain(
    leaf: pkcs12.PKCS12Certificate, certificates: list[pkcs12.PKCS12Certificate]
) -> list[pkcs12.PKCS12Certificate]:
    """Build certificate chain from the leaf up to the self-issued root."""
    chain = [leaf]
    current = leaf.certificate
    while current.issuer != current.subject:
        issuer = next(
            (
                cert
                for cert in certificates
                if cert.certificate.subject == current.issuer and all(cert is not c for c in chain)
            ),
            None,
        )
        if issuer is None:
            break
        chain.append(issuer)
        current = issuer.certificate
    return chain


def _private_key_entry(
    alias: str, key: _KeyBag, chain: list[pkcs12.PKCS12Certificate]
) -> PrivateKeyEntry:
    certificates = [Certificate(cert.certificate) for cert in chain]
    try:
        return PrivateKeyEntry(alias, certificates, private_key=PrivateKey.create(key.key))
    except KSPInvalidKeyType as exc:
        logger.warning(f"Private key '{alias}' uses unsupported algorithm")
        return PrivateKeyEntry(
            alias,
            certificates,
            load_error=KSPUnsupportedKeyStoreError(
                f"Private key '{alias}' uses unsupported algorithm: {exc.description}"
            ),
        )


def parse_pkcs12(data: bytes, password: Optional[str]) -> list[KeyStoreEntry]:
    """Parse entries of PKCS#12 keystore.

    Every private key becomes a private key entry with the chain of its
    certificate, the chain is empty when the keystore holds no certificate of
    the key. Other certificates with a friendly name become trusted
    certificate entries.

    :param data: PKCS#12 data.
    :param password: Keystore password, integrity and key encryption share it.
    :raises KSPKeyStoreAuthenticationError: Wrong password.
    :raises KSPUnsupportedKeyStoreError: Keystore uses unsupported algorithms.
    :raises KSPKeyStoreFormatError: Data are not a valid PKCS#12 structure.
    :return: List of keystore entries.
    """
    if not is_pkcs12(data):
        raise KSPKeyStoreFormatError("Data are not a PKCS#12 keystore")
    try:
        secret = password.encode("utf-8") if password is not None else None
        store = pkcs12.load_pkcs12(data, secret)
    except UnsupportedAlgorithm as exc:
        raise KSPUnsupportedKeyStoreError(
            f"PKCS#12 keystore uses unsupported algorithm: {str(exc)}"
        ) from exc
    except ValueError as exc:
        # the structure is a valid PFX, so the MAC or the decryption failed
        logger.debug(f"PKCS#12 loading failed: {str(exc)}")
        raise KSPKeyStoreAuthenticationError(
            "Keystore was tampered with, or password was incorrect"
        ) from exc

    keys = _read_key_bags(data, password)
    if store.key is not None:
        public_key = _public_key_der(store.key.public_key())
        if all(key.public_key != public_key for key in keys):
            # key bag stored in encrypted safe contents
            keys.append(_KeyBag(store.key, None))

    certificates = list(store.additional_certs)
    if store.cert is not None:
        certificates.insert(0, store.cert)

    leaves = [_leaf_certificate(key, certificates) for key in keys]
    # certificates of other keys never continue a chain
    issuers = [cert for cert in certificates if not any(cert is leaf for leaf in leaves)]

    entries: list[KeyStoreEntry] = []
    in_chain: list[pkcs12.PKCS12Certificate] = []
    counter = 1
    for key, leaf in zip(keys, leaves):
        alias = key.friendly_name or (_cert_name(leaf) if leaf else None)
        if alias is None:
            alias = str(counter)
            counter += 1
        chain: list[pkcs12.PKCS12Certificate] = []
        if leaf is None:
            logger.warning(f"Private key '{alias}' has no certificate")
        else:
            chain = _certificate_chain(leaf, issuers)
            in_chain.extend(chain)
        entries.append(_private_key_entry(alias, key, chain))

    for cert in issuers:
        name = _cert_name(cert)
        if name is not None:
            entries.append(TrustedCertificateEntry(name, Certificate(cert.certificate)))
        elif not any(cert is chain_cert for chain_cert in in_chain):
            logger.warning("Certificate without alias and outside of any chain ignored")

    logger.debug(f"PKCS#12 keystore parsed, {len(entries)} entries")
    return entries
