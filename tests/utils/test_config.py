#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""Tests of kspub configuration object."""

import os
from typing import Any

import pytest

from kspub.exceptions import KSPError, KSPKeyError
from kspub.utils.config import Config
from kspub.utils.misc import write_file


@pytest.fixture
def config(tmpdir: Any) -> Config:
    """Configuration loaded from file in temporary directory."""
    path = os.path.join(tmpdir, "config.yaml")
    write_file(
        "keystore: keys/store.p12\n"
        "password: secret.txt\n"
        "number: 42\n"
        "nested:\n"
        "  value: inner\n",
        path,
    )
    write_file("secret from file\n", os.path.join(tmpdir, "secret.txt"))
    return Config.create_from_file(path)


def test_create_from_file(config: Config, tmpdir: Any) -> None:
    """Test that the configuration knows its location."""
    assert config.config_dir == str(tmpdir).replace("\\", "/")
    assert config.config_name == "config.yaml"
    assert config.search_paths == [config.config_dir]


def test_get(config: Config) -> None:
    """Test access to nested values."""
    assert config["nested/value"] == "inner"
    assert config.get("nested/value") == "inner"
    assert config.get("nested/missing", "default") == "default"
    assert config.get("number/value") is None
    with pytest.raises(KSPKeyError):
        config["missing"]  # pylint: disable=pointless-statement


def test_get_str(config: Config) -> None:
    """Test access to string values."""
    assert config.get_str("keystore") == "keys/store.p12"
    assert config.get_str("missing", "default") == "default"
    with pytest.raises(KSPError, match="not string"):
        config.get_str("number")


def test_get_file_path(config: Config, tmpdir: Any) -> None:
    """Test that relative paths are based on the configuration directory."""
    assert config.get_file_path("keystore") == f"{config.config_dir}/keys/store.p12"
    absolute = os.path.join(tmpdir, "other.p12").replace("\\", "/")
    config["keystore"] = absolute
    assert config.get_file_path("keystore") == absolute


def test_load_secret(config: Config) -> None:
    """Test secrets read from file next to the configuration."""
    assert config.load_secret("password") == "secret from file"
    assert config.load_secret("number") == "42"
    assert config.load_secret("missing", "default") == "default"
    with pytest.raises(KSPError, match="doesn't exist"):
        config.load_secret("missing")
