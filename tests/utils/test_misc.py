#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""Tests of kspub miscellaneous utilities."""

import json
import os
from typing import Any

import pytest

from kspub import value_to_bool
from kspub.exceptions import KSPError
from kspub.utils.misc import (
    find_file,
    get_abs_path,
    get_data_file_path,
    get_printable_path,
    get_schema_file,
    load_configuration,
    load_secret,
    load_text,
    write_file,
)


def test_write_and_load(tmpdir: Any) -> None:
    """Test writing files into missing directory and loading them back."""
    text_file = os.path.join(tmpdir, "sub", "dir", "file.txt")
    assert write_file("hello", text_file) == 5
    assert load_text(text_file) == "hello"

    binary_file = os.path.join(tmpdir, "file.bin")
    write_file(b"\x00\x01", binary_file, mode="wb")
    with open(binary_file, "rb") as f:
        assert f.read() == b"\x00\x01"
    assert load_text("file.txt", search_paths=[os.path.join(tmpdir, "sub", "dir")]) == "hello"


def test_find_file(tmpdir: Any) -> None:
    """Test searching of file in search paths."""
    write_file("x", os.path.join(tmpdir, "found.txt"))
    expected = os.path.join(tmpdir, "found.txt").replace("\\", "/")
    assert find_file("found.txt", search_paths=["", str(tmpdir)]) == expected
    assert find_file(expected) == expected
    assert find_file("missing.txt", search_paths=[str(tmpdir)], raise_exc=False) == ""
    with pytest.raises(KSPError, match="Searched in"):
        find_file("missing.txt", search_paths=[str(tmpdir)])
    with pytest.raises(KSPError):
        find_file(os.path.join(tmpdir, "missing.txt"))


def test_get_abs_path(tmpdir: Any) -> None:
    """Test conversion of relative paths to absolute ones."""
    base = str(tmpdir).replace("\\", "/")
    assert get_abs_path("a/b.txt", base) == f"{base}/a/b.txt"
    assert get_abs_path(f"{base}/c.txt", "/ignored") == f"{base}/c.txt"


def test_get_printable_path(tmpdir: Any, monkeypatch: Any) -> None:
    """Test that paths below current directory are printed relative."""
    monkeypatch.chdir(tmpdir)
    assert get_printable_path(os.path.join(tmpdir, "out", "key.txt")) == "out/key.txt"


@pytest.mark.parametrize(
    "content",
    [
        json.dumps({"keystore": "a.p12", "alias": "k"}),
        "keystore: a.p12\nalias: k\n",
    ],
)
def test_load_configuration(tmpdir: Any, content: str) -> None:
    """Test loading configuration in JSON and YAML."""
    path = os.path.join(tmpdir, "config")
    write_file(content, path)
    assert load_configuration(path) == {"keystore": "a.p12", "alias": "k"}


@pytest.mark.parametrize(
    "content,message",
    [("", "Can't parse"), ("- item\n- item\n", "Invalid configuration"), ("a: [b", "Can't parse")],
)
def test_load_configuration_invalid(tmpdir: Any, content: str, message: str) -> None:
    """Test loading of invalid configuration files."""
    path = os.path.join(tmpdir, "config.yaml")
    write_file(content, path)
    with pytest.raises(KSPError, match=message):
        load_configuration(path)
    with pytest.raises(KSPError, match="Can't load"):
        load_configuration(os.path.join(tmpdir, "missing.yaml"))


def test_load_secret(tmpdir: Any, monkeypatch: Any) -> None:
    """Test loading secret as value, environment variable and file."""
    write_file("from file\nignored\n", os.path.join(tmpdir, "secret.txt"))
    monkeypatch.setenv("KSPUB_TEST_SECRET", "from env")
    monkeypatch.setenv("KSPUB_TEST_SECRET_FILE", os.path.join(tmpdir, "secret.txt"))

    assert load_secret("plain value") == "plain value"
    assert load_secret("$KSPUB_TEST_SECRET") == "from env"
    assert load_secret("secret.txt", search_paths=[str(tmpdir)]) == "from file"
    assert load_secret("$KSPUB_TEST_SECRET_FILE") == "from file"


def test_data_files() -> None:
    """Test access to files of kspub data folder."""
    assert os.path.isfile(get_data_file_path("keystore_template.yaml"))
    schemas = get_schema_file("keystore")
    assert set(schemas) == {"keystore", "key", "output"}
    # every call gets own copy
    schemas["keystore"]["required"].append("anything")
    assert get_schema_file("keystore")["keystore"]["required"] == ["keystore"]
    with pytest.raises(KSPError):
        get_schema_file("missing")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("True", True),
        ("1", True),
        ("T", True),
        ("false", False),
        ("yes", False),
        (None, False),
        (1, True),
    ],
)
def test_value_to_bool(value: Any, expected: bool) -> None:
    """Test conversion of environment variable values to boolean."""
    assert value_to_bool(value) is expected
