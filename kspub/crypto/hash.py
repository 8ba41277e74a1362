#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub hash algorithms used for key and certificate fingerprints."""

from enum import Enum

from cryptography.hazmat.primitives import hashes

from kspub.exceptions import KSPError


class EnumHashAlgorithm(str, Enum):
    """Hash algorithm enumeration for fingerprint computation."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"


def get_hash_algorithm(algorithm: EnumHashAlgorithm) -> hashes.HashAlgorithm:
    """Get hash algorithm instance for specified algorithm type.

    :param algorithm: Hash algorithm type enumeration value.
    :raises KSPError: If the specified algorithm is not supported.
    :return: Instance of the corresponding hash algorithm class.
    """
    algo_cls = getattr(hashes, algorithm.value.upper(), None)  # hack: get class object by name
    if algo_cls is None:
        raise KSPError(f"Unsupported algorithm: hashes.{algorithm.value.upper()}")
    return algo_cls()  # pylint: disable=not-callable


def get_hash(data: bytes, algorithm: EnumHashAlgorithm = EnumHashAlgorithm.SHA256) -> bytes:
    """Compute hash digest from input data using specified algorithm.

    :param data: Input data to be hashed.
    :param algorithm: Hash algorithm to use for computation.
    :raises KSPError: If the specified algorithm is not supported.
    :return: Hash digest as bytes.
    """
    hash_obj = hashes.Hash(get_hash_algorithm(algorithm))
    hash_obj.update(data)
    return hash_obj.finalize()


def format_fingerprint(digest: bytes) -> str:
    """Format digest as colon separated upper case hex pairs, like keytool does.

    :param digest: Hash digest.
    :return: Fingerprint string, e.g. ``AB:CD:...``.
    """
    return ":".join(f"{byte:02X}" for byte in digest)
