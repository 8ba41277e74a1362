#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub pytest configuration and shared test fixtures."""

import logging
import os
from typing import Any, Iterator

import pytest

os.environ["KSPUB_DEBUG_LOGGING_DISABLED"] = "True"

# pylint: disable=wrong-import-position
from kspub.crypto.certificate import Certificate
from kspub.crypto.keys import PrivateKeyEcc, PrivateKeyRsa
from tests.cli_runner import CliRunner
from tests.misc import KEY_ALIAS, KEYSTORE_PASSWORD, create_certificate, create_pkcs12


@pytest.fixture
def cli_runner() -> CliRunner:
    """Get CLI runner instance for testing.

    :return: CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_kspub_logger() -> Iterator[None]:
    """Remove log handlers installed by the command line tool during the test."""
    kspub_logger = logging.getLogger("kspub")
    handlers = list(kspub_logger.handlers)
    yield
    for handler in kspub_logger.handlers[:]:
        if handler not in handlers:
            kspub_logger.removeHandler(handler)


@pytest.fixture(scope="session")
def rsa_key() -> PrivateKeyRsa:
    """RSA 2048 private key shared by the tests."""
    return PrivateKeyRsa.generate_key()


@pytest.fixture(scope="session")
def ecc_key() -> PrivateKeyEcc:
    """ECC P-256 private key shared by the tests."""
    return PrivateKeyEcc.generate_key()


@pytest.fixture(scope="session")
def ca_key() -> PrivateKeyEcc:
    """ECC P-384 private key of the test CA."""
    return PrivateKeyEcc.generate_key("secp384r1")


@pytest.fixture(scope="session")
def ca_cert(ca_key: PrivateKeyEcc) -> Certificate:
    """Self-signed certificate of the test CA."""
    return create_certificate(ca_key, "kspub test CA")


@pytest.fixture(scope="session")
def rsa_cert(rsa_key: PrivateKeyRsa, ca_key: PrivateKeyEcc) -> Certificate:
    """Certificate of the RSA key issued by the test CA."""
    return create_certificate(rsa_key, "kspub RSA", issuer_key=ca_key, issuer_name="kspub test CA")


@pytest.fixture(scope="session")
def ecc_cert(ecc_key: PrivateKeyEcc) -> Certificate:
    """Self-signed certificate of the ECC key."""
    return create_certificate(ecc_key, "kspub ECC")


@pytest.fixture(scope="session")
def pkcs12_data(rsa_key: PrivateKeyRsa, rsa_cert: Certificate, ca_cert: Certificate, ecc_cert: Certificate) -> bytes:
    """PKCS#12 keystore: RSA key 'mykey' with CA in chain, trusted certificate 'trusted'."""
    return create_pkcs12(
        KEYSTORE_PASSWORD,
        KEY_ALIAS,
        rsa_key,
        rsa_cert,
        chain=[ca_cert],
        trusted=[("trusted", ecc_cert)],
    )


@pytest.fixture
def pkcs12_file(tmp_path: Any, pkcs12_data: bytes) -> str:
    """Path to PKCS#12 keystore file named like the default keystore."""
    path = os.path.join(tmp_path, ".keystore")
    with open(path, "wb") as f:
        f.write(pkcs12_data)
    return path
