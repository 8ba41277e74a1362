#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Console script for kspub, the keystore public key reader."""

import logging
import sys
from typing import Any, Optional

import click

from kspub.apps.utils import kspub_logger
from kspub.apps.utils.common_cli_options import (
    CommandsTreeGroup,
    kspub_apps_common_options,
    kspub_config_option,
    kspub_keystore_options,
    kspub_output_option,
)
from kspub.apps.utils.utils import KSPAppError, catch_kspub_error
from kspub.crypto.exceptions import KSPInvalidKeyType
from kspub.crypto.hash import format_fingerprint
from kspub.keystore.config import KeyStoreSettings, parse_store_type
from kspub.keystore.entries import SecretKeyEntry
from kspub.keystore.keystore import KeyStore
from kspub.public_key import PublicKeyFormat, extract_public_key, format_public_key
from kspub.utils.config import Config
from kspub.utils.misc import (
    get_data_file_path,
    get_printable_path,
    load_secret,
    load_text,
    write_file,
)

logger = logging.getLogger(__name__)


def load_settings(
    config: Optional[str], store_type: Optional[str], **overrides: Any
) -> KeyStoreSettings:
    """Merge settings from configuration file and command line options.

    :param config: Path to configuration file or None.
    :param store_type: Keystore type from command line or None.
    :param overrides: Command line option values, None for options not used.
    :raises KSPAppError: Keystore password is not specified.
    :return: Final settings.
    """
    settings = KeyStoreSettings()
    if config:
        settings = KeyStoreSettings.load_from_config(Config.create_from_file(config))
    for secret in ("password", "key_password"):
        if overrides.get(secret) is not None:
            overrides[secret] = load_secret(overrides[secret])
    settings = settings.update(**overrides)
    if store_type:
        settings.store_type = parse_store_type(store_type)
    if settings.password is None:
        raise KSPAppError(
            "Keystore password is not specified. Use '-p' option, "
            "KSPUB_KEYSTORE_PASSWORD environment variable or 'password' in configuration file."
        )
    logger.debug(f"Settings: {settings!r}")
    return settings


@click.group(name="kspub", no_args_is_help=True, cls=CommandsTreeGroup)
@kspub_apps_common_options
def main(log_level: int) -> None:
    """Keystore public key reader."""
    kspub_logger.install(level=log_level)


@main.command(name="get-public-key")
@kspub_keystore_options
@click.option(
    "-a",
    "--alias",
    envvar="KSPUB_KEY_ALIAS",
    help="Alias of the private key entry, defaults to 'mykey'. [env var: KSPUB_KEY_ALIAS]",
)
@click.option(
    "--key-password",
    envvar="KSPUB_KEY_PASSWORD",
    metavar="PASSWORD",
    help="""Password of the private key when it differs from the keystore password,
    same syntax as keystore password. [env var: KSPUB_KEY_PASSWORD]""",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(PublicKeyFormat.labels(), case_sensitive=False),
    help="Output format of the public key, defaults to base64. Format 'der' needs '-o' option.",
)
@kspub_output_option(
    required=False,
    help="Path to a file, where to store the public key. Printed to standard output by default.",
)
@click.option(
    "--verify-key-pair",
    is_flag=True,
    default=False,
    help="Check that the private key matches the public key of its certificate.",
)
@kspub_config_option(required=False)
def get_public_key(
    keystore: Optional[str],
    password: Optional[str],
    store_type: Optional[str],
    alias: Optional[str],
    key_password: Optional[str],
    output_format: Optional[str],
    output: Optional[str],
    verify_key_pair: bool,
    config: Optional[str],
) -> None:
    """Print public key of the private key entry as single Base64 line.

    The public key is the DER encoded SubjectPublicKeyInfo of the certificate
    stored under the same alias as the private key.
    """
    settings = load_settings(
        config,
        store_type,
        keystore=keystore,
        password=password,
        alias=alias,
        key_password=key_password,
        output_format=PublicKeyFormat(output_format.lower()) if output_format else None,
        output=output,
    )
    if settings.output_format.is_binary and not settings.output:
        raise KSPAppError(
            f"Output format '{settings.output_format.value}' is binary, use '-o' option."
        )

    key_store = KeyStore.load(settings.keystore, settings.password, settings.store_type)
    public_key = extract_public_key(
        key_store, settings.alias, settings.key_password, verify_key_pair=verify_key_pair
    )
    logger.info(f"Public key: {repr(public_key)}")
    data = format_public_key(public_key, settings.output_format)

    if settings.output:
        if isinstance(data, bytes):
            write_file(data, settings.output, mode="wb")
        else:
            write_file(data + "\n", settings.output)
        click.echo(f"Public key has been stored into: {get_printable_path(settings.output)}")
    else:
        click.echo(data)


@main.command(name="list")
@kspub_keystore_options
@kspub_config_option(required=False)
def list_entries(
    keystore: Optional[str],
    password: Optional[str],
    store_type: Optional[str],
    config: Optional[str],
) -> None:
    """List entries of the keystore with public key fingerprints."""
    settings = load_settings(config, store_type, keystore=keystore, password=password)
    key_store = KeyStore.load(settings.keystore, settings.password, settings.store_type)

    click.echo(f"Keystore type: {key_store.store_type.value.upper()}")
    click.echo(f"Your keystore contains {len(key_store)} entries\n")
    for entry in key_store:
        click.echo(str(entry))
        certificate = entry.get_certificate()
        if certificate:
            try:
                public_key = certificate.get_public_key()
            except KSPInvalidKeyType:
                click.echo("  Key algorithm: unsupported")
                continue
            click.echo(f"  Key algorithm: {public_key.algorithm}, {public_key.key_size} bits")
            click.echo(
                "  Public key fingerprint (SHA-256): "
                f"{format_fingerprint(public_key.key_hash())}"
            )
        elif isinstance(entry, SecretKeyEntry):
            click.echo(f"  Key algorithm: {entry.algorithm or 'unknown (encrypted)'}")


@main.command(name="get-template", no_args_is_help=True)
@kspub_output_option(force=True)
def get_template(output: str) -> None:
    """Generate the template of kspub YAML configuration file."""
    template = load_text(get_data_file_path("keystore_template.yaml"))
    write_file(template, output)
    click.echo(f"The configuration template has been created: {get_printable_path(output)}")


@catch_kspub_error
def safe_main() -> None:
    """Call the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
