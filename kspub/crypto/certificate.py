#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub Certificate utilities.

X.509 certificate wrapper used for certificates found in keystore entries. The
public key embedded in the certificate is what kspub ultimately reports.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from typing_extensions import Self

from kspub.crypto.crypto_types import KSPEncoding
from kspub.crypto.exceptions import KSPInvalidKeyType
from kspub.crypto.keys import PrivateKey, PrivateKeyEdDsa, PublicKey
from kspub.exceptions import KSPError, KSPParsingError
from kspub.utils.abstract import BaseClass


class Certificate(BaseClass):
    """kspub Certificate wrapper for X.509 certificates."""

    def __init__(self, certificate: x509.Certificate) -> None:
        """Initialize kspub Certificate wrapper.

        :param certificate: Cryptography Certificate representation to wrap.
        :raises AssertionError: If certificate is not an instance of x509.Certificate.
        """
        assert isinstance(certificate, x509.Certificate)
        self.cert = certificate

    @staticmethod
    def generate_certificate(
        subject: x509.Name,
        issuer: x509.Name,
        subject_public_key: PublicKey,
        issuer_private_key: PrivateKey,
        serial_number: Optional[int] = None,
        duration: Optional[int] = None,
    ) -> "Certificate":
        """Generate X.509 certificate with specified parameters.

        :param subject: Subject name that the CA issues the certificate to.
        :param issuer: Issuer name that issued the certificate.
        :param subject_public_key: Public key of the certificate subject.
        :param issuer_private_key: Private key of the certificate issuer for signing.
        :param serial_number: Certificate serial number, random if not specified.
        :param duration: Certificate validity period in days, defaults to very long period.
        :return: Generated X.509 certificate instance.
        """
        before = datetime.now(timezone.utc) if duration else datetime(2000, 1, 1)
        after = (
            datetime.now(timezone.utc) + timedelta(days=duration)
            if duration
            else datetime(9999, 12, 31)
        )
        crt = x509.CertificateBuilder(
            subject_name=subject,
            issuer_name=issuer,
            not_valid_before=before,
            not_valid_after=after,
            public_key=subject_public_key.key,
            extensions=[],
            serial_number=serial_number or x509.random_serial_number(),
        )
        # EdDSA signatures carry no separate digest
        algorithm = None if isinstance(issuer_private_key, PrivateKeyEdDsa) else hashes.SHA256()
        return Certificate(crt.sign(issuer_private_key.key, algorithm))

    def export(self, encoding: KSPEncoding = KSPEncoding.DER) -> bytes:
        """Export certificate to bytes in specified encoding format.

        :param encoding: The encoding format to use for export, defaults to DER.
        :return: Certificate data as bytes in the specified encoding format.
        """
        return self.cert.public_bytes(KSPEncoding.get_cryptography_encodings(encoding))

    def get_public_key(self) -> PublicKey:
        """Get public key from certificate.

        :raises KSPInvalidKeyType: The certificate carries a key of unsupported algorithm.
        :raises KSPError: The public key of the certificate is malformed.
        :return: Public key extracted from the certificate.
        """
        try:
            public_key = self.cert.public_key()
        except UnsupportedAlgorithm as exc:
            raise KSPInvalidKeyType(f"Unsupported public key algorithm: {str(exc)}") from exc
        except ValueError as exc:
            raise KSPError(f"Cannot extract public key from certificate: {str(exc)}") from exc
        return PublicKey.create(public_key)

    @property
    def issuer(self) -> x509.Name:
        """Get the certificate issuer name.

        :return: Certificate issuer name object.
        """
        return self.cert.issuer

    @property
    def serial_number(self) -> int:
        """Get certificate serial number.

        :return: Serial number of the certificate.
        """
        return self.cert.serial_number

    @property
    def subject(self) -> x509.Name:
        """Get the subject name object from the certificate.

        :return: Subject name object containing certificate subject information.
        """
        return self.cert.subject

    @property
    def not_valid_before(self) -> datetime:
        """Get the certificate's not-valid-before timestamp in UTC."""
        return self.cert.not_valid_before_utc

    @property
    def not_valid_after(self) -> datetime:
        """Get the certificate's expiration timestamp in UTC."""
        return self.cert.not_valid_after_utc

    @property
    def self_issued(self) -> bool:
        """Check whether the subject and the issuer of the certificate are the same."""
        return self.subject == self.issuer

    def __repr__(self) -> str:
        return f"Certificate, SN:{hex(self.cert.serial_number)}"

    def __str__(self) -> str:
        """Get text representation of the certificate information.

        :return: Formatted string with certificate information.
        """
        not_valid_before = self.not_valid_before.strftime("%d.%m.%Y (%H:%M:%S)")
        not_valid_after = self.not_valid_after.strftime("%d.%m.%Y (%H:%M:%S)")
        nfo = ""
        nfo += f"  Subject:                    {self.subject.rfc4514_string()}\n"
        nfo += f"  Issuer:                     {self.issuer.rfc4514_string()}\n"
        nfo += f"  Serial Number:              {hex(self.cert.serial_number)}\n"
        nfo += f"  Validity Range:             {not_valid_before} - {not_valid_after}\n"
        nfo += f"  Self Issued:                {'YES' if self.self_issued else 'NO'}\n"
        return nfo

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse X.509 certificate from bytes array (PEM or DER).

        :param data: Certificate data in PEM or DER format.
        :return: Parsed certificate object.
        :raises KSPParsingError: Cannot load certificate due to invalid format or data.
        """
        try:
            cert = {
                KSPEncoding.PEM: x509.load_pem_x509_certificate,
                KSPEncoding.DER: x509.load_der_x509_certificate,
            }[KSPEncoding.get_file_encodings(data)](data)
            return cls(cert)
        except ValueError as exc:
            raise KSPParsingError(f"Cannot load certificate: ({str(exc)})") from exc


def generate_name(common_name: str, organization: Optional[str] = None) -> x509.Name:
    """Generate x509 Name from a common name and an optional organization.

    :param common_name: Common name (CN) attribute.
    :param organization: Organization (O) attribute, omitted when None.
    :return: x509 Name object.
    """
    attributes = [x509.NameAttribute(x509.NameOID.COMMON_NAME, common_name)]
    if organization:
        attributes.append(x509.NameAttribute(x509.NameOID.ORGANIZATION_NAME, organization))
    return x509.Name(attributes)
