#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub hash functions test suite."""

from binascii import unhexlify

import pytest

from kspub.crypto.hash import EnumHashAlgorithm, format_fingerprint, get_hash


def test_hash() -> None:
    """Test SHA256 hash calculation against known value."""
    plain_text = b"testestestestestestestestestestestestestestestestestestestest"
    text_sha256 = unhexlify("41116FE4EFB90A050AABB83419E19BF2196A0E76AB8E3034C8D674042EE23621")
    assert get_hash(plain_text) == text_sha256


@pytest.mark.parametrize(
    "algorithm,expected",
    [
        (EnumHashAlgorithm.SHA1, "2fd4e1c67a2d28fced849ee1bb76e7391b93eb12"),
        (
            EnumHashAlgorithm.SHA256,
            "d7a8fbb307d7809469ca9abcb0082e4f8d5651e46d3cdb762d02d0bf37c9e592",
        ),
        (
            EnumHashAlgorithm.SHA384,
            "ca737f1014a48f4c0b6dd43cb177b0afd9e5169367544c494011e3317dbf9a50"
            "9cb1e5dc1e85a941bbee3d7f2afbc9b1",
        ),
    ],
)
def test_hash_algorithms(algorithm: EnumHashAlgorithm, expected: str) -> None:
    """Test supported hash algorithms with known test vectors.

    :param algorithm: Hash algorithm.
    :param expected: Expected digest as hex string.
    """
    assert get_hash(b"The quick brown fox jumps over the lazy dog", algorithm).hex() == expected


def test_format_fingerprint() -> None:
    """Test keytool-like fingerprint formatting."""
    assert format_fingerprint(bytes([0x0A, 0xBC, 0xFF])) == "0A:BC:FF"
    assert format_fingerprint(b"") == ""
