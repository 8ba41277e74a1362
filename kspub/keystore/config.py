#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Settings of the public key extraction.

The settings come from three sources in order of precedence: command line
options (with environment variable fallbacks), the configuration file and the
built-in defaults.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from typing_extensions import Self

from kspub.keystore.keystore import KeyStoreType
from kspub.public_key import PublicKeyFormat
from kspub.utils.config import Config
from kspub.utils.misc import get_schema_file

logger = logging.getLogger(__name__)

DEFAULT_KEYSTORE = ".keystore"
DEFAULT_ALIAS = "mykey"


def parse_store_type(value: Optional[str]) -> Optional[KeyStoreType]:
    """Convert keystore type name to keystore type, 'auto' means detection.

    :param value: Keystore type name or None.
    :return: Keystore type or None for detection from content.
    """
    if not value or value.lower() == "auto":
        return None
    return KeyStoreType(value.lower())


@dataclass
class KeyStoreSettings:
    """Settings of public key extraction."""

    keystore: str = DEFAULT_KEYSTORE
    password: Optional[str] = None
    alias: str = DEFAULT_ALIAS
    key_password: Optional[str] = None
    store_type: Optional[KeyStoreType] = None
    output_format: PublicKeyFormat = PublicKeyFormat.BASE64
    output: Optional[str] = None

    @classmethod
    def get_validation_schemas(cls) -> list[dict[str, Any]]:
        """Get validation schemas of the configuration file.

        :return: List of validation schemas.
        """
        schemas = get_schema_file("keystore")
        return [schemas["keystore"], schemas["key"], schemas["output"]]

    @classmethod
    def load_from_config(cls, config: Config) -> Self:
        """Load settings from configuration.

        :param config: Configuration loaded from file.
        :raises KSPError: Invalid configuration.
        :return: Settings, missing values are defaults.
        """
        config.check(cls.get_validation_schemas(), check_unknown_props=True)
        settings = cls(
            keystore=config.get_file_path("keystore"),
            alias=config.get_str("alias", DEFAULT_ALIAS),
            store_type=parse_store_type(config.get("type")),
            output_format=PublicKeyFormat(config.get_str("format", PublicKeyFormat.BASE64.value)),
        )
        if "password" in config:
            settings.password = config.load_secret("password")
        if "key_password" in config:
            settings.key_password = config.load_secret("key_password")
        if "output" in config:
            settings.output = config.get_file_path("output")
        logger.debug(f"Settings loaded from configuration {config.config_name}")
        return settings

    def update(self, **overrides: Any) -> Self:
        """Create settings with values overridden, None values are ignored.

        :param overrides: Values overriding the current settings.
        :return: Updated settings.
        """
        names = {field.name for field in fields(self)}
        values = {
            key: value for key, value in overrides.items() if key in names and value is not None
        }
        return replace(self, **values)

    def __repr__(self) -> str:
        # passwords are never shown
        return (
            f"KeyStoreSettings(keystore={self.keystore!r}, alias={self.alias!r}, "
            f"store_type={self.store_type}, output_format={self.output_format.value}, "
            f"output={self.output!r})"
        )
