#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub configuration management utilities.

Configuration is a dictionary loaded from a YAML or JSON file. Relative paths
in the configuration are resolved against the directory of the file.
"""

import logging
import os
from typing import Any, Optional

from typing_extensions import Self

from kspub.exceptions import KSPError, KSPKeyError
from kspub.utils.misc import load_configuration, load_secret
from kspub.utils.schema_validator import check_config

logger = logging.getLogger(__name__)


class Config(dict):
    """kspub Configuration Manager.

    Dictionary with support of nested key addressing using path separators and
    with knowledge of the configuration file location.

    :cvar SEP: Path separator used for nested key addressing in configuration.
    """

    SEP = "/"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.config_dir = os.getcwd()
        self.config_name = ""
        self.search_paths: list[str] = []

    @classmethod
    def create_from_file(cls, file_path: str) -> Self:
        """Create configuration object from file.

        :param file_path: Path to the configuration file to load.
        :return: Configuration object with loaded data and set search paths.
        """
        cfg_abs_path = os.path.abspath(file_path).replace("\\", "/")
        cfg = cls(load_configuration(cfg_abs_path))
        cfg_dir = os.path.dirname(cfg_abs_path)
        cfg.search_paths = [cfg_dir]
        cfg.config_dir = cfg_dir
        cfg.config_name = os.path.basename(cfg_abs_path)
        logger.debug(f"Configuration loaded from {cfg_abs_path}")
        return cfg

    def get(self, key: str, defaults: Optional[Any] = None) -> Any:
        """Get configuration value with nested key support.

        :param key: Key name including support of key path with '/'.
        :param defaults: Default value in case that item doesn't exist, defaults to None.
        :return: Configuration value or default if key not found.
        """
        try:
            return self.__getitem__(key)
        except KSPError:
            return defaults

    def __getitem__(self, key: str) -> Any:
        """Get configuration value by key path.

        :param key: Configuration key or '/' separated path to nested value.
        :raises KSPKeyError: Key doesn't exist in configuration.
        :return: Configuration value at the specified key path.
        """
        source: Any = self
        for part in key.split(self.SEP):
            value = dict.get(source, part) if isinstance(source, dict) else None
            if value is None:
                raise KSPKeyError(f"The {key} doesn't exist in configuration")
            source = value
        return source

    def get_file_path(self, key: str) -> str:
        """Get the absolute file path, relative paths are based on the config directory.

        The file does not need to exist.

        :param key: Key path to config with file path.
        :return: The absolute path to the file with forward slashes.
        """
        path = os.path.expanduser(str(self[key]))
        if os.path.isabs(path):
            return path.replace("\\", "/")
        return str(os.path.abspath(os.path.join(self.config_dir, path))).replace("\\", "/")

    def get_str(self, key: str, default: Optional[str] = None) -> str:
        """Get the key value as string.

        :param key: Key name of the configuration entry.
        :param default: Default value to return if the key doesn't exist in configuration.
        :raises KSPError: If the retrieved value is not a string type.
        :return: Configuration value as string.
        """
        ret = self.get(key, default)
        if not isinstance(ret, str):
            raise KSPError(f"The value is not string at key: {key}")
        return ret

    def load_secret(self, key: str, default: Optional[str] = None) -> str:
        """Load secret text from the configuration value.

        The value is a literal secret, '$ENV_VAR' reference to environment
        variable or path to a file whose first line is the secret.

        :param key: Key name of the configuration key.
        :param default: Default value if configuration doesn't contain the key.
        :raises KSPError: If the key doesn't exist and no default is provided.
        :return: The actual secret value.
        """
        ret = self.get(key, default)
        if ret is None:
            raise KSPError(f"The key '{key}' for secret doesn't exist.")
        return load_secret(value=str(ret), search_paths=self.search_paths)

    def check(self, schemas: list[dict[str, Any]], check_unknown_props: bool = False) -> None:
        """Check configuration against validation schemas.

        :param schemas: List of validation schemas.
        :param check_unknown_props: If True, warn about unknown properties in config.
        """
        check_config(
            self, schemas, search_paths=self.search_paths, check_unknown_props=check_unknown_props
        )
