#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub schema-based configuration validation utilities."""

import copy
import logging
import os
from typing import Any, Callable, Optional

import fastjsonschema
from deepmerge import always_merger

from kspub.exceptions import KSPError
from kspub.utils.misc import find_file

logger = logging.getLogger(__name__)


def _print_validation_fail_reason(exc: fastjsonschema.JsonSchemaValueException) -> str:
    """Format JSON schema validation failure into human-readable error message.

    :param exc: The JSON schema validation exception to process.
    :return: Formatted error message explaining the validation failure reason.
    """
    message = str(exc)
    if exc.rule == "required":
        missing = filter(lambda x: x not in exc.value.keys(), exc.rule_definition)
        message += f"; Missing field(s): {', '.join(missing)}"
    elif exc.rule == "format" and exc.rule_definition == "file":
        message += f"; Non-existing file: {exc.value}"
    elif exc.rule == "enum":
        message += f"; Allowed values: {', '.join(str(v) for v in exc.rule_definition)}"
    return message


def check_unknown_properties(config_dict: dict, schema_dict: dict, path: str = "") -> None:
    """Check for properties of configuration not described by the schema.

    Unknown properties are reported as warnings, they are most often typos.

    :param config_dict: Configuration dictionary to check.
    :param schema_dict: JSON schema dictionary defining allowed properties.
    :param path: Current path in the configuration for reporting.
    """
    schema_props = schema_dict.get("properties", {})
    for key, value in config_dict.items():
        current_path = f"{path}.{key}" if path else key
        if key not in schema_props:
            logger.warning(f"Unknown property found in configuration: '{current_path}'")
            continue
        if isinstance(value, dict) and "properties" in schema_props[key]:
            check_unknown_properties(value, schema_props[key], current_path)


def check_config(
    config: dict[str, Any],
    schemas: list[dict[str, Any]],
    extra_formatters: Optional[dict[str, Callable[[str], bool]]] = None,
    search_paths: Optional[list[str]] = None,
    check_unknown_props: bool = False,
) -> None:
    """Check the configuration by provided list of validation schemas.

    :param config: Configuration dictionary to validate.
    :param schemas: List of JSON schema dictionaries, they are merged before validation.
    :param extra_formatters: Additional custom format validators for schema validation.
    :param search_paths: List of directory paths to search for files during validation.
    :param check_unknown_props: Whether to warn about unknown properties in config.
    :raises KSPError: Invalid validation schema or configuration validation failed.
    """
    custom_formatters: dict[str, Callable[[str], bool]] = {
        "file": lambda x: bool(find_file(x, search_paths=search_paths, raise_exc=False)),
        "file_name": lambda x: os.path.basename(x.replace("\\", "/")) not in ("", None),
    }

    config_to_check = copy.deepcopy(config)

    schema: dict[str, Any] = {}
    for sch in schemas:
        always_merger.merge(schema, copy.deepcopy(sch))
    formats = always_merger.merge(custom_formatters, extra_formatters or {})
    if check_unknown_props and "properties" in schema:
        check_unknown_properties(config_to_check, schema)

    try:
        validator = fastjsonschema.compile(schema, formats=formats)
    except (TypeError, fastjsonschema.JsonSchemaDefinitionException) as exc:
        raise KSPError(f"Invalid validation schema to check config: {str(exc)}") from exc
    try:
        validator(config_to_check)
    except fastjsonschema.JsonSchemaValueException as exc:
        message = _print_validation_fail_reason(exc)
        raise KSPError(f"Configuration validation failed: {message}") from exc
