#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of public key extraction settings."""

import os
from typing import Any

import pytest
import yaml

from kspub.exceptions import KSPError
from kspub.keystore.config import (
    DEFAULT_ALIAS,
    DEFAULT_KEYSTORE,
    KeyStoreSettings,
    parse_store_type,
)
from kspub.keystore.keystore import KeyStoreType
from kspub.public_key import PublicKeyFormat
from kspub.utils.config import Config


def _write_config(tmpdir: Any, config: dict, name: str = "config.yaml") -> Config:
    path = os.path.join(tmpdir, name)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f)
    return Config.create_from_file(path)


def test_defaults() -> None:
    """Test default settings."""
    settings = KeyStoreSettings()
    assert settings.keystore == DEFAULT_KEYSTORE == ".keystore"
    assert settings.alias == DEFAULT_ALIAS == "mykey"
    assert settings.password is None
    assert settings.store_type is None
    assert settings.output_format == PublicKeyFormat.BASE64


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, None),
        ("", None),
        ("auto", None),
        ("AUTO", None),
        ("pkcs12", KeyStoreType.PKCS12),
        ("JKS", KeyStoreType.JKS),
        ("jceks", KeyStoreType.JCEKS),
    ],
)
def test_parse_store_type(value: Any, expected: Any) -> None:
    """Test conversion of keystore type names."""
    assert parse_store_type(value) == expected


def test_load_from_config(tmpdir: Any, monkeypatch: Any) -> None:
    """Test settings loaded from configuration file, paths are relative to the file."""
    monkeypatch.setenv("KSPUB_TEST_PASSWORD", "from environment")
    config = _write_config(
        tmpdir,
        {
            "keystore": "keys/release.p12",
            "password": "$KSPUB_TEST_PASSWORD",
            "type": "pkcs12",
            "alias": "release",
            "key_password": 123456,
            "format": "pem",
            "output": "out/public.pem",
        },
    )
    settings = KeyStoreSettings.load_from_config(config)
    base = str(tmpdir).replace("\\", "/")
    assert settings.keystore == f"{base}/keys/release.p12"
    assert settings.password == "from environment"
    assert settings.store_type == KeyStoreType.PKCS12
    assert settings.alias == "release"
    assert settings.key_password == "123456"
    assert settings.output_format == PublicKeyFormat.PEM
    assert settings.output == f"{base}/out/public.pem"


def test_load_from_config_minimal(tmpdir: Any) -> None:
    """Test configuration with the keystore only."""
    settings = KeyStoreSettings.load_from_config(_write_config(tmpdir, {"keystore": "a.p12"}))
    assert settings.password is None
    assert settings.alias == DEFAULT_ALIAS
    assert settings.store_type is None
    assert settings.output is None


def test_load_from_config_password_file(tmpdir: Any) -> None:
    """Test password read from a file next to the configuration."""
    with open(os.path.join(tmpdir, "password.txt"), "w", encoding="utf-8") as f:
        f.write("secret from file\nsecond line\n")
    config = _write_config(tmpdir, {"keystore": "a.p12", "password": "password.txt"})
    assert KeyStoreSettings.load_from_config(config).password == "secret from file"


@pytest.mark.parametrize(
    "config,message",
    [
        ({"password": "abc"}, "Missing field"),
        ({"keystore": "a.p12", "type": "bks"}, "Allowed values"),
        ({"keystore": "a.p12", "format": "xml"}, "Allowed values"),
        ({"keystore": 42}, "Configuration validation failed"),
    ],
)
def test_load_from_config_invalid(tmpdir: Any, config: dict, message: str) -> None:
    """Test validation of configuration file."""
    with pytest.raises(KSPError, match=message):
        KeyStoreSettings.load_from_config(_write_config(tmpdir, config))


def test_load_from_config_unknown_property(tmpdir: Any, caplog: Any) -> None:
    """Test that unknown property is reported as warning only."""
    config = _write_config(tmpdir, {"keystore": "a.p12", "alais": "typo"})
    settings = KeyStoreSettings.load_from_config(config)
    assert settings.alias == DEFAULT_ALIAS
    assert "alais" in caplog.text


def test_update() -> None:
    """Test that update overrides values except None ones and unknown names."""
    settings = KeyStoreSettings(keystore="a.p12", password="abc", alias="key")
    updated = settings.update(keystore="b.p12", password=None, alias="other", unknown="x")
    assert updated.keystore == "b.p12"
    assert updated.password == "abc"
    assert updated.alias == "other"
    assert settings.keystore == "a.p12"


def test_repr_hides_passwords() -> None:
    """Test that passwords are not part of settings representation."""
    settings = KeyStoreSettings(password="very secret", key_password="also secret")
    assert "secret" not in repr(settings)
    assert "keystore='.keystore'" in repr(settings)
