#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub miscellaneous utilities.

File loading and storing, searching of files in search paths, configuration
file parsing and resolution of secrets (passwords).
"""

import copy
import json
import logging
import os
from functools import lru_cache
from typing import Any, Optional, Union

import yaml

from kspub import KSPUB_DATA_FOLDER
from kspub.exceptions import KSPError

logger = logging.getLogger(__name__)


def _posix(path: str) -> str:
    return path.replace("\\", "/")


def get_abs_path(file_path: str, base_dir: Optional[str] = None) -> str:
    """Get absolute path with forward slashes.

    :param file_path: Relative or absolute path.
    :param base_dir: Base of relative paths, defaults to current working directory.
    :return: Absolute path.
    """
    if os.path.isabs(file_path):
        return _posix(file_path)
    return _posix(os.path.abspath(os.path.join(base_dir or os.getcwd(), file_path)))


def find_file(
    file_path: str,
    use_cwd: bool = True,
    search_paths: Optional[list[str]] = None,
    raise_exc: bool = True,
) -> str:
    """Find existing file.

    Absolute paths are only checked. Relative paths are tried against the
    search paths first, then against the current working directory.

    :param file_path: File name or path.
    :param use_cwd: Try current working directory too, defaults to True.
    :param search_paths: Directories to search in, defaults to None.
    :param raise_exc: Raise exception when not found, defaults to True.
    :raises KSPError: File not found and raise_exc is set.
    :return: Absolute path to the file, empty string when not found and raise_exc is not set.
    """
    file_path = _posix(file_path)
    if os.path.isabs(file_path):
        candidates = [file_path]
    else:
        candidates = [get_abs_path(file_path, base) for base in search_paths or [] if base]
        if use_cwd:
            candidates.append(get_abs_path(file_path))
    for candidate in candidates:
        if os.path.isfile(candidate):
            return candidate

    message = f"Path '{file_path}' not found"
    if not os.path.isabs(file_path):
        searched = ([os.getcwd()] if use_cwd else []) + [s for s in search_paths or [] if s]
        message += f", Searched in: {', '.join(_posix(s) for s in searched)}"
    if raise_exc:
        raise KSPError(message)
    logger.debug(message)
    return ""


def load_file(
    path: str, mode: str = "r", search_paths: Optional[list[str]] = None
) -> Union[str, bytes]:
    """Load content of file found in search paths.

    :param path: Path to the file.
    :param mode: 'r' for text (UTF-8) or 'rb' for binary.
    :param search_paths: Directories to search in, defaults to None.
    :raises KSPError: File not found.
    :return: Text or bytes, depending on the mode.
    """
    path = find_file(path, search_paths=search_paths)
    binary = "b" in mode
    logger.debug(f"Loading {'binary' if binary else 'text'} file from {path}")
    with open(path, mode, encoding=None if binary else "utf-8") as f:
        return f.read()


def load_text(path: str, search_paths: Optional[list[str]] = None) -> str:
    """Load text file.

    :param path: Path to the file.
    :param search_paths: Directories to search in, defaults to None.
    :return: Content of the file.
    """
    text = load_file(path, mode="r", search_paths=search_paths)
    assert isinstance(text, str)
    return text


def write_file(
    data: Union[str, bytes],
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
) -> int:
    """Write data into file, missing parent directories are created.

    :param data: Text or bytes.
    :param path: Path to the file.
    :param mode: 'w' for text, 'wb' for binary, defaults to 'w'.
    :param encoding: Encoding of text, defaults to 'utf-8'.
    :return: Number of characters or bytes written.
    """
    path = _posix(path)
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    binary = "b" in mode
    logger.debug(f"Storing {'binary' if binary else 'text'} file at {path}")
    with open(path, mode, encoding=None if binary else encoding) as f:
        return f.write(data)


def load_configuration(path: str, search_paths: Optional[list[str]] = None) -> dict:
    """Load configuration dictionary from JSON or YAML file.

    :param path: Path to the configuration file.
    :param search_paths: Directories to search in, defaults to None.
    :raises KSPError: File cannot be read or is not a dictionary in JSON or YAML.
    :return: Configuration dictionary.
    """
    try:
        text = load_text(path, search_paths=search_paths)
    except (KSPError, OSError, UnicodeDecodeError) as exc:
        raise KSPError(f"Can't load configuration file: {str(exc)}") from exc

    try:
        config = json.loads(text)
    except json.JSONDecodeError:
        try:
            config = yaml.safe_load(text)
        except yaml.YAMLError:
            config = None

    if not config:
        raise KSPError(f"Can't parse configuration file: {path}")
    if not isinstance(config, dict):
        raise KSPError(f"Invalid configuration file: {path}")
    return config


def load_secret(value: str, search_paths: Optional[list[str]] = None) -> str:
    """Resolve secret value.

    Environment variables ('$NAME') and '~' are expanded first. When the result
    is a path to an existing file, the first line of the file is the secret,
    otherwise the expanded value itself.

    :param value: Secret, reference to environment variable or path to file.
    :param search_paths: Directories to search the file in, defaults to None.
    :return: The secret.
    """
    value = os.path.expanduser(os.path.expandvars(value))
    path = find_file(value, search_paths=search_paths, raise_exc=False)
    if not path:
        return value
    with open(path, encoding="utf-8") as f:
        return f.readline().strip()


def get_printable_path(path: str) -> str:
    """Get path relative to current directory when it is shorter.

    :param path: Path to print.
    :return: Relative or absolute path with forward slashes.
    """
    try:
        relative = os.path.relpath(path)
    except ValueError:
        # path on another drive
        return _posix(path)
    return _posix(relative if len(relative) < len(path) else path)


def get_data_file_path(path: str) -> str:
    """Get absolute path of a file in the kspub data folder.

    :param path: Path relative to the data folder.
    :raises KSPError: The file does not exist.
    :return: Absolute path to the data file.
    """
    return find_file(path, use_cwd=False, search_paths=[KSPUB_DATA_FOLDER])


@lru_cache(maxsize=None)
def _load_schema_file(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def get_schema_file(feature: str) -> dict[str, Any]:
    """Get validation schemas of the feature.

    :param feature: Name of the feature.
    :raises KSPError: The schema file does not exist.
    :return: Copy of the schemas, safe to modify.
    """
    path = get_data_file_path(os.path.join("jsonschemas", f"sch_{feature}.yaml"))
    return copy.deepcopy(_load_schema_file(path))
