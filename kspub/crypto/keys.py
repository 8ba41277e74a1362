#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""kspub cryptographic key wrappers.

This module wraps the asymmetric keys found in keystore entries (RSA, ECC, DSA
and EdDSA) into a uniform interface. Private keys are parsed from their PKCS#8
encoding, public keys are exported as X.509 SubjectPublicKeyInfo.
"""

import abc
from typing import Any, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)
from cryptography.hazmat.primitives.serialization import (
    load_der_private_key as crypto_load_der_private_key,
)
from cryptography.hazmat.primitives.serialization import (
    load_der_public_key as crypto_load_der_public_key,
)
from cryptography.hazmat.primitives.serialization import (
    load_pem_private_key as crypto_load_pem_private_key,
)
from cryptography.hazmat.primitives.serialization import (
    load_pem_public_key as crypto_load_pem_public_key,
)
from typing_extensions import Self

from kspub.crypto.crypto_types import KSPEncoding
from kspub.crypto.exceptions import KSPCryptoError, KSPInvalidKeyType
from kspub.crypto.hash import EnumHashAlgorithm, get_hash
from kspub.exceptions import KSPError
from kspub.utils.abstract import BaseClass

EdDsaPrivateKey = Union[ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey]
EdDsaPublicKey = Union[ed25519.Ed25519PublicKey, ed448.Ed448PublicKey]


class KSPKeyPassphraseMissing(KSPCryptoError):
    """Private key is encrypted and no passphrase was provided."""


class KSPWrongKeyPassphrase(KSPCryptoError):
    """Provided passphrase does not decrypt the private key."""


def _crypto_load_private_key(data: bytes, password: Optional[bytes]) -> Any:
    """Load private key from PEM or DER encoded data.

    :param data: Raw key data in bytes.
    :param password: Optional password for encrypted private keys.
    :raises KSPWrongKeyPassphrase: Private key is encrypted and passphrase is incorrect.
    :raises KSPKeyPassphraseMissing: Private key is encrypted and passphrase is missing.
    :raises KSPError: The data is not a supported private key.
    :return: Loaded private key object of the cryptography library.
    """
    crypto_load_function = {
        KSPEncoding.DER: crypto_load_der_private_key,
        KSPEncoding.PEM: crypto_load_pem_private_key,
    }[KSPEncoding.get_file_encodings(data)]
    try:
        return crypto_load_function(data, password)
    except ValueError as exc:
        if exc.args and "Incorrect password" in str(exc.args[0]):
            raise KSPWrongKeyPassphrase("Provided password was incorrect.") from exc
        raise KSPError(f"Cannot load private key: {str(exc)}") from exc
    except TypeError as exc:
        if "Password was not given but private key is encrypted" in str(exc):
            raise KSPKeyPassphraseMissing(str(exc)) from exc
        raise KSPError(f"Cannot load private key: {str(exc)}") from exc
    except UnsupportedAlgorithm as exc:
        raise KSPInvalidKeyType(f"Unsupported private key algorithm: {str(exc)}") from exc


def _crypto_load_public_key(data: bytes) -> Any:
    """Load public key from PEM or DER (SubjectPublicKeyInfo) encoded data.

    :param data: Raw key data in bytes.
    :raises KSPError: The data is not a supported public key.
    :return: Loaded public key object of the cryptography library.
    """
    crypto_load_function = {
        KSPEncoding.DER: crypto_load_der_public_key,
        KSPEncoding.PEM: crypto_load_pem_public_key,
    }[KSPEncoding.get_file_encodings(data)]
    try:
        return crypto_load_function(data)
    except (UnsupportedAlgorithm, ValueError) as exc:
        raise KSPError(f"Cannot load public key: {str(exc)}") from exc


class PrivateKey(BaseClass, abc.ABC):
    """kspub Private Key abstract base class.

    Uniform interface over the private keys stored in keystore key entries.
    """

    key: Any
    ALGORITHM = "Unknown"

    def __init__(self, key: Any) -> None:
        """Create the private key wrapper.

        :param key: Private key object of the cryptography library.
        """
        self.key = key

    @property
    def algorithm(self) -> str:
        """Get the algorithm name as used by Java keystores (RSA, EC, DSA, ...).

        :return: Name of the key algorithm.
        """
        return self.ALGORITHM

    @property
    @abc.abstractmethod
    def key_size(self) -> int:
        """Get key size in bits.

        :return: Key size in bits.
        """

    def get_public_key(self) -> "PublicKey":
        """Get public key from the private key.

        :return: Public key object derived from this private key.
        """
        return PublicKey.create(self.key.public_key())

    def verify_public_key(self, public_key: "PublicKey") -> bool:
        """Verify that the given public key forms a key pair with this private key.

        :param public_key: Public key to verify against this private key.
        :return: True if the keys form a valid pair, False otherwise.
        """
        return self.get_public_key() == public_key

    def __eq__(self, obj: Any) -> bool:
        """Check object equality.

        :param obj: Object to compare with this instance.
        :return: True if objects are of the same class and have identical public keys.
        """
        return isinstance(obj, self.__class__) and self.get_public_key() == obj.get_public_key()

    def export(
        self,
        password: Optional[str] = None,
        encoding: KSPEncoding = KSPEncoding.DER,
    ) -> bytes:
        """Export the private key as PKCS#8 in requested encoding.

        :param password: Password to private key; None to store without password.
        :param encoding: Encoding type, default is DER.
        :return: Private key in bytes.
        """
        enc = (
            BestAvailableEncryption(password=password.encode("utf-8"))
            if password
            else NoEncryption()
        )
        return self.key.private_bytes(
            KSPEncoding.get_cryptography_encodings(encoding), PrivateFormat.PKCS8, enc
        )

    @classmethod
    def parse(cls, data: bytes, password: Optional[str] = None) -> Self:
        """Parse private key from bytes array (PKCS#8, PKCS#1 or SEC1 in PEM/DER).

        :param data: Raw key data to be parsed.
        :param password: Password for encrypted private key; None for unencrypted keys.
        :raises KSPInvalidKeyType: Parsed key is not of the requested class.
        :return: Recreated private key object.
        """
        private_key = cls.create(
            _crypto_load_private_key(data, password.encode("utf-8") if password else None)
        )
        if not isinstance(private_key, cls):
            raise KSPInvalidKeyType(f"Can't parse {cls.__name__} from given data")
        return private_key

    @classmethod
    def create(cls, key: Any) -> Self:
        """Create Private Key object from supported cryptographic key types.

        :param key: A private key object of the cryptography library.
        :raises KSPInvalidKeyType: Unsupported private key type provided.
        :return: kspub Private Key object wrapping the input key.
        """
        SUPPORTED_KEYS = {
            PrivateKeyEcc: ec.EllipticCurvePrivateKey,
            PrivateKeyRsa: rsa.RSAPrivateKey,
            PrivateKeyDsa: dsa.DSAPrivateKey,
            PrivateKeyEdDsa: (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey),
        }
        for k, v in SUPPORTED_KEYS.items():
            if isinstance(key, v):
                return k(key)  # type: ignore

        raise KSPInvalidKeyType(f"Unsupported key type: {str(key)}")

    def __repr__(self) -> str:
        return f"{self.algorithm}{self.key_size} Private Key"

    def __str__(self) -> str:
        return f"{self.algorithm} Private key, {self.key_size} bits"


class PublicKey(BaseClass, abc.ABC):
    """kspub Public Key abstraction.

    Uniform interface over the public keys embedded in certificates. The
    standard binary encoding of every key type is the X.509
    SubjectPublicKeyInfo structure.
    """

    key: Any
    ALGORITHM = "Unknown"

    def __init__(self, key: Any) -> None:
        """Create the public key wrapper.

        :param key: Public key object of the cryptography library.
        """
        self.key = key

    @property
    def algorithm(self) -> str:
        """Get the algorithm name as used by Java keystores (RSA, EC, DSA, ...).

        :return: Name of the key algorithm.
        """
        return self.ALGORITHM

    @property
    @abc.abstractmethod
    def key_size(self) -> int:
        """Get key size in bits.

        :return: Key size in bits.
        """

    @property
    @abc.abstractmethod
    def public_numbers(self) -> Any:
        """Get the public numbers of the cryptographic key.

        :return: Public key numbers object, or raw bytes for EdDSA keys.
        """

    def export(self, encoding: KSPEncoding = KSPEncoding.DER) -> bytes:
        """Export the public key as SubjectPublicKeyInfo in requested encoding.

        :param encoding: Encoding of the exported key, defaults to DER.
        :return: Byte representation of the key.
        """
        return self.key.public_bytes(
            KSPEncoding.get_cryptography_encodings(encoding),
            PublicFormat.SubjectPublicKeyInfo,
        )

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse public key from PEM or DER SubjectPublicKeyInfo data.

        :param data: Raw bytes containing public key data.
        :raises KSPInvalidKeyType: Parsed key is not of the requested class.
        :return: Parsed public key object.
        """
        public_key = cls.create(_crypto_load_public_key(data))
        if not isinstance(public_key, cls):
            raise KSPInvalidKeyType(f"Can't parse {cls.__name__} from given data")
        return public_key

    def key_hash(self, algorithm: EnumHashAlgorithm = EnumHashAlgorithm.SHA256) -> bytes:
        """Get hash of the DER encoded key.

        :param algorithm: Hash algorithm to use for key hashing, defaults to SHA256.
        :return: Hash of the key data as bytes.
        """
        return get_hash(self.export(KSPEncoding.DER), algorithm)

    def __eq__(self, obj: Any) -> bool:
        """Check object equality.

        :param obj: Object to compare with this instance.
        :return: True if objects are of the same class with identical public numbers.
        """
        return isinstance(obj, self.__class__) and self.public_numbers == obj.public_numbers

    @classmethod
    def create(cls, key: Any) -> Self:
        """Create Public Key object from supported key types.

        :param key: A public key object of the cryptography library.
        :raises KSPInvalidKeyType: Unsupported public key type provided.
        :return: kspub Public Key object wrapping the input key.
        """
        SUPPORTED_KEYS = {
            PublicKeyEcc: ec.EllipticCurvePublicKey,
            PublicKeyRsa: rsa.RSAPublicKey,
            PublicKeyDsa: dsa.DSAPublicKey,
            PublicKeyEdDsa: (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey),
        }
        for k, v in SUPPORTED_KEYS.items():
            if isinstance(key, v):
                return k(key)  # type: ignore

        raise KSPInvalidKeyType(f"Unsupported key type: {str(key)}")

    def __repr__(self) -> str:
        return f"{self.algorithm}{self.key_size} Public Key"

    def __str__(self) -> str:
        return f"{self.algorithm} Public key, {self.key_size} bits"


# ===================================================================================================
#
#                                      RSA Keys
#
# ===================================================================================================


class PrivateKeyRsa(PrivateKey):
    """kspub RSA Private Key."""

    key: rsa.RSAPrivateKey
    ALGORITHM = "RSA"

    @classmethod
    def generate_key(cls, key_size: int = 2048, exponent: int = 65537) -> Self:
        """Generate kspub RSA private key.

        :param key_size: Key size in bits, must be >= 1024.
        :param exponent: Public exponent, must be >= 3 and odd.
        :return: New kspub private key instance.
        """
        return cls(rsa.generate_private_key(public_exponent=exponent, key_size=key_size))

    @property
    def key_size(self) -> int:
        """Key size in bits.

        :return: Key size in bits.
        """
        return self.key.key_size


class PublicKeyRsa(PublicKey):
    """kspub RSA Public Key."""

    key: rsa.RSAPublicKey
    ALGORITHM = "RSA"

    @property
    def key_size(self) -> int:
        """Key size in bits.

        :return: Key size in bits.
        """
        return self.key.key_size

    @property
    def public_numbers(self) -> rsa.RSAPublicNumbers:
        """Public numbers of key.

        :return: Public numbers
        """
        return self.key.public_numbers()

    @property
    def e(self) -> int:
        """Get the public exponent E of the RSA key."""
        return self.public_numbers.e

    @property
    def n(self) -> int:
        """Get the RSA public key modulus N."""
        return self.public_numbers.n

    def __str__(self) -> str:
        return f"RSA{self.key_size} Public key: \ne({hex(self.e)}) \nn({hex(self.n)})"


# ===================================================================================================
#
#                                      ECC Keys
#
# ===================================================================================================


class KeyEccCommon:
    """Common properties of ECC private and public keys."""

    key: Union[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey]
    ALGORITHM = "EC"

    @property
    def curve(self) -> str:
        """Get the name of the elliptic curve of the key.

        :return: Curve name, e.g. 'secp256r1'.
        """
        return self.key.curve.name

    @property
    def key_size(self) -> int:
        """Get the key size in bits.

        :return: Size of the key in bits.
        """
        return self.key.key_size


class PrivateKeyEcc(KeyEccCommon, PrivateKey):
    """kspub ECC Private Key."""

    key: ec.EllipticCurvePrivateKey

    @classmethod
    def generate_key(cls, curve_name: str = "secp256r1") -> Self:
        """Generate kspub ECC private key.

        :param curve_name: Name of the elliptic curve, defaults to secp256r1.
        :raises KSPInvalidKeyType: Unknown curve name.
        :return: New kspub private key instance.
        """
        curve = {
            "secp256r1": ec.SECP256R1,
            "secp384r1": ec.SECP384R1,
            "secp521r1": ec.SECP521R1,
            "secp256k1": ec.SECP256K1,
        }.get(curve_name)
        if curve is None:
            raise KSPInvalidKeyType(f"Unsupported ECC curve: {curve_name}")
        return cls(ec.generate_private_key(curve()))

    def __repr__(self) -> str:
        return f"ECC {self.curve} Private Key"


class PublicKeyEcc(KeyEccCommon, PublicKey):
    """kspub ECC Public Key."""

    key: ec.EllipticCurvePublicKey

    @property
    def public_numbers(self) -> ec.EllipticCurvePublicNumbers:
        """Get public numbers of the ECC key.

        :return: Public numbers (curve and coordinates).
        """
        return self.key.public_numbers()

    def __repr__(self) -> str:
        return f"ECC {self.curve} Public Key"

    def __str__(self) -> str:
        numbers = self.public_numbers
        return f"ECC ({self.curve}) Public key: \nx({hex(numbers.x)}) \ny({hex(numbers.y)})"


# ===================================================================================================
#
#                                      DSA Keys
#
# ===================================================================================================


class PrivateKeyDsa(PrivateKey):
    """kspub DSA Private Key, the keytool default of old JDKs."""

    key: dsa.DSAPrivateKey
    ALGORITHM = "DSA"

    @classmethod
    def generate_key(cls, key_size: int = 2048) -> Self:
        """Generate kspub DSA private key.

        :param key_size: Key size in bits.
        :return: New kspub private key instance.
        """
        return cls(dsa.generate_private_key(key_size=key_size))

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return self.key.key_size


class PublicKeyDsa(PublicKey):
    """kspub DSA Public Key."""

    key: dsa.DSAPublicKey
    ALGORITHM = "DSA"

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return self.key.key_size

    @property
    def public_numbers(self) -> dsa.DSAPublicNumbers:
        """Public numbers of key."""
        return self.key.public_numbers()


# ===================================================================================================
#
#                                      EdDSA Keys
#
# ===================================================================================================


class PrivateKeyEdDsa(PrivateKey):
    """kspub EdDSA (Ed25519, Ed448) Private Key."""

    key: EdDsaPrivateKey

    @classmethod
    def generate_key(cls, ed448_curve: bool = False) -> Self:
        """Generate kspub EdDSA private key.

        :param ed448_curve: Generate Ed448 key instead of Ed25519.
        :return: New kspub private key instance.
        """
        if ed448_curve:
            return cls(ed448.Ed448PrivateKey.generate())
        return cls(ed25519.Ed25519PrivateKey.generate())

    @property
    def algorithm(self) -> str:
        """Get the algorithm name (Ed25519 or Ed448)."""
        return "Ed25519" if isinstance(self.key, ed25519.Ed25519PrivateKey) else "Ed448"

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return 256 if isinstance(self.key, ed25519.Ed25519PrivateKey) else 448


class PublicKeyEdDsa(PublicKey):
    """kspub EdDSA (Ed25519, Ed448) Public Key."""

    key: EdDsaPublicKey

    @property
    def algorithm(self) -> str:
        """Get the algorithm name (Ed25519 or Ed448)."""
        return "Ed25519" if isinstance(self.key, ed25519.Ed25519PublicKey) else "Ed448"

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return 256 if isinstance(self.key, ed25519.Ed25519PublicKey) else 448

    @property
    def public_numbers(self) -> bytes:
        """EdDSA keys have no numbers, the raw public key bytes are used instead."""
        return self.key.public_bytes(Encoding.Raw, PublicFormat.Raw)
