#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub testing utilities creating keystores on the fly."""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import x25519
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    Encoding,
    NoEncryption,
    PrivateFormat,
    pkcs12,
)
from pyasn1.codec.der import encoder
from pyasn1.type import univ

from kspub.crypto.certificate import Certificate, generate_name
from kspub.crypto.hash import EnumHashAlgorithm, get_hash
from kspub.crypto.keys import PrivateKey

KEYSTORE_PASSWORD = "pfauenauge"
KEY_ALIAS = "mykey"


def create_certificate(
    private_key: PrivateKey,
    common_name: str,
    issuer_key: Optional[PrivateKey] = None,
    issuer_name: Optional[str] = None,
) -> Certificate:
    """Create certificate of the key, self-signed unless the issuer is given.

    :param private_key: Private key of the certificate subject.
    :param common_name: Common name of the subject.
    :param issuer_key: Private key of the issuer.
    :param issuer_name: Common name of the issuer.
    :return: Certificate.
    """
    return Certificate.generate_certificate(
        subject=generate_name(common_name, "kspub tests"),
        issuer=generate_name(issuer_name or common_name, "kspub tests"),
        subject_public_key=private_key.get_public_key(),
        issuer_private_key=issuer_key or private_key,
        duration=365,
    )


def create_pkcs12(
    password: Optional[str],
    alias: Optional[str],
    private_key: Optional[PrivateKey],
    certificate: Optional[Certificate],
    chain: Iterable[Certificate] = (),
    trusted: Iterable[tuple[str, Certificate]] = (),
) -> bytes:
    """Create PKCS#12 keystore.

    :param password: Keystore password, None for unprotected keystore.
    :param alias: Alias (friendly name) of the private key.
    :param private_key: Private key or None.
    :param certificate: Certificate of the private key or None.
    :param chain: CA certificates of the key, they get no alias.
    :param trusted: Trusted certificates with their aliases.
    :return: PKCS#12 data.
    """
    cas: list = [cert.cert for cert in chain]
    cas.extend(
        pkcs12.PKCS12Certificate(cert.cert, name.encode("utf-8")) for name, cert in trusted
    )
    return pkcs12.serialize_key_and_certificates(
        name=alias.encode("utf-8") if alias else None,
        key=private_key.key if private_key else None,  # type: ignore
        cert=certificate.cert if certificate else None,
        cas=cas or None,
        encryption_algorithm=(
            BestAvailableEncryption(password.encode("utf-8")) if password else NoEncryption()
        ),
    )


def create_jks(
    password: str,
    private_keys: Iterable[tuple[str, PrivateKey, list[Certificate]]] = (),
    trusted: Iterable[tuple[str, Certificate]] = (),
    key_passwords: Optional[dict[str, str]] = None,
) -> bytes:
    """Create JKS keystore, needs the pyjks library.

    :param password: Keystore password.
    :param private_keys: Private key entries: alias, key and certificate chain.
    :param trusted: Trusted certificates with their aliases.
    :param key_passwords: Passwords of keys differing from the keystore password.
    :return: JKS data.
    """
    import jks  # pylint: disable=import-outside-toplevel

    key_passwords = key_passwords or {}
    entries = []
    for alias, key, chain in private_keys:
        entry = jks.PrivateKeyEntry.new(
            alias, [cert.export() for cert in chain], key.export(), "pkcs8"
        )
        if alias in key_passwords:
            entry.encrypt(key_passwords[alias])
        entries.append(entry)
    for alias, cert in trusted:
        entries.append(jks.TrustedCertEntry.new(alias, cert.export()))
    return jks.KeyStore.new("jks", entries).saves(password)


def create_x25519_certificate(
    issuer_key: PrivateKey, common_name: str, issuer_name: str
) -> tuple[x25519.X25519PrivateKey, Certificate]:
    """Create X25519 key and its certificate, a key type kspub does not support.

    :param issuer_key: Private key of the issuer.
    :param common_name: Common name of the subject.
    :param issuer_name: Common name of the issuer.
    :return: X25519 private key and its certificate.
    """
    key = x25519.X25519PrivateKey.generate()
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(generate_name(common_name, "kspub tests"))
        .issuer_name(generate_name(issuer_name, "kspub tests"))
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=365))
    )
    return key, Certificate(builder.sign(issuer_key.key, hashes.SHA256()))


# ASN.1 object identifiers of PKCS#12 structures
OID_DATA = "1.2.840.113549.1.7.1"
OID_SHROUDED_KEY_BAG = "1.2.840.113549.1.12.10.1.2"
OID_CERT_BAG = "1.2.840.113549.1.12.10.1.3"
OID_X509_CERTIFICATE = "1.2.840.113549.1.9.22.1"
OID_FRIENDLY_NAME = "1.2.840.113549.1.9.20"
OID_LOCAL_KEY_ID = "1.2.840.113549.1.9.21"
OID_SHA256 = "2.16.840.1.101.3.4.2.1"
MAC_ITERATIONS = 2048


def _der(tag: int, content: bytes) -> bytes:
    length = len(content)
    if length < 0x80:
        header = bytes([length])
    else:
        size = length.to_bytes((length.bit_length() + 7) // 8, "big")
        header = bytes([0x80 | len(size)]) + size
    return bytes([tag]) + header + content


def _sequence(*items: bytes) -> bytes:
    return _der(0x30, b"".join(items))


def _oid(value: str) -> bytes:
    return encoder.encode(univ.ObjectIdentifier(value))


def _octets(value: bytes) -> bytes:
    return _der(0x04, value)


def _explicit(content: bytes) -> bytes:
    return _der(0xA0, content)


def _safe_bag(
    bag_id: str, value: bytes, alias: Optional[str], local_key_id: Optional[bytes]
) -> bytes:
    attributes = []
    if alias is not None:
        name = _der(0x1E, alias.encode("utf-16-be"))
        attributes.append(_sequence(_oid(OID_FRIENDLY_NAME), _der(0x31, name)))
    if local_key_id is not None:
        attributes.append(_sequence(_oid(OID_LOCAL_KEY_ID), _der(0x31, _octets(local_key_id))))
    bag_attributes = _der(0x31, b"".join(attributes)) if attributes else b""
    return _sequence(_oid(bag_id), _explicit(value), bag_attributes)


def _certificate_bag(
    cert: Certificate, alias: Optional[str] = None, local_key_id: Optional[bytes] = None
) -> bytes:
    value = _sequence(_oid(OID_X509_CERTIFICATE), _explicit(_octets(cert.export())))
    return _safe_bag(OID_CERT_BAG, value, alias, local_key_id)


def _mac_key(password: str, salt: bytes, iterations: int) -> bytes:
    """Derive MAC key by PKCS#12 key derivation, one SHA-256 block is enough."""
    block = 64
    secret = password.encode("utf-16-be") + b"\x00\x00"

    def fill(data: bytes) -> bytes:
        size = block * ((len(data) + block - 1) // block)
        return (data * (size // len(data) + 1))[:size]

    digest = bytes([3]) * block + fill(salt) + fill(secret)
    for _ in range(iterations):
        digest = get_hash(digest, EnumHashAlgorithm.SHA256)
    return digest


def create_pkcs12_store(
    password: str,
    keys: Iterable[tuple[Optional[str], Any, list[Certificate]]],
    trusted: Iterable[tuple[str, Certificate]] = (),
) -> bytes:
    """Create PKCS#12 keystore with any number of private keys, like keytool does.

    The key bags and the certificate bags are stored in one plain safe
    contents, keys are shrouded by the keystore password.

    :param password: Keystore password.
    :param keys: Private key entries: alias or None, cryptography private key and
        certificate chain, leaf first. Chain certificates after the leaf get no alias.
    :param trusted: Trusted certificates with their aliases.
    :return: PKCS#12 data.
    """
    bags = []
    for index, (alias, key, chain) in enumerate(keys, start=1):
        local_key_id = bytes([index])
        shrouded = key.private_bytes(
            Encoding.DER, PrivateFormat.PKCS8, BestAvailableEncryption(password.encode("utf-8"))
        )
        bags.append(_safe_bag(OID_SHROUDED_KEY_BAG, shrouded, alias, local_key_id))
        for position, cert in enumerate(chain):
            if position == 0:
                bags.append(_certificate_bag(cert, alias, local_key_id))
            else:
                bags.append(_certificate_bag(cert))
    for alias, cert in trusted:
        bags.append(_certificate_bag(cert, alias))

    content_info = _sequence(_oid(OID_DATA), _explicit(_octets(_sequence(*bags))))
    auth_safe = _sequence(content_info)

    salt = os.urandom(16)
    mac = hmac.HMAC(_mac_key(password, salt, MAC_ITERATIONS), hashes.SHA256())
    mac.update(auth_safe)
    digest_info = _sequence(_sequence(_oid(OID_SHA256), b"\x05\x00"), _octets(mac.finalize()))
    mac_data = _sequence(digest_info, _octets(salt), encoder.encode(univ.Integer(MAC_ITERATIONS)))
    return _sequence(
        encoder.encode(univ.Integer(3)),
        _sequence(_oid(OID_DATA), _explicit(_octets(auth_safe))),
        mac_data,
    )
