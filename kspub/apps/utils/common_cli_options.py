#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Click options shared by kspub commands."""

import logging
import os
from gettext import gettext
from typing import Any, Callable, Optional, TypeVar, Union

import click
from click_command_tree import _build_command_tree, _CommandWrapper

from kspub import __version__ as kspub_version
from kspub.keystore.keystore import KeyStoreType

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])

logger = logging.getLogger(__name__)


def kspub_apps_common_options(options: FC) -> FC:
    """Options of the kspub command group.

    Adds --help, --version and the verbosity flags; provides `log_level: int`.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(kspub_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Print debugging messages.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print informational messages.",
    )(options)
    return options


def kspub_keystore_options(options: FC) -> FC:
    """Click options selecting the keystore.

    Provides: `keystore: str` path to keystore file, `password: str` keystore
    password and `store_type: str` keystore type. Options without value fall
    back to environment variables.

    :return: click decorator
    """
    options = click.option(
        "-t",
        "--type",
        "store_type",
        type=click.Choice(["auto"] + KeyStoreType.labels(), case_sensitive=False),
        default=None,
        help="Keystore type, detected from the keystore content by default.",
    )(options)
    options = click.option(
        "-p",
        "--password",
        envvar="KSPUB_KEYSTORE_PASSWORD",
        metavar="PASSWORD",
        help="""Keystore password: the value itself, '$ENV_VAR' with the value or a path
        to a file whose first line is the password. [env var: KSPUB_KEYSTORE_PASSWORD]""",
    )(options)
    options = click.option(
        "-k",
        "--keystore",
        envvar="KSPUB_KEYSTORE",
        type=click.Path(dir_okay=False),
        help="Path to the keystore file, defaults to '.keystore'. [env var: KSPUB_KEYSTORE]",
    )(options)
    return options


def kspub_config_option(
    required: bool = True,
    help: Optional[str] = None,  # pylint: disable=redefined-builtin
) -> Callable:
    """Click option with path to YAML/JSON configuration file.

    Provides: `config: str` absolute path to an existing file.

    :param required: The configuration file must be given.
    :param help: Help text replacing the default one.
    :return: Click decorator.
    """

    def decorator(func: Callable[[FC], FC]) -> Callable[[FC], FC]:
        return click.option(
            "-c",
            "--config",
            type=click.Path(resolve_path=True, exists=True, dir_okay=False),
            required=required,
            help=help or "Path to the YAML/JSON configuration file.",
        )(func)

    return decorator


def kspub_output_option(
    required: bool = True,
    force: bool = False,
    help: Optional[str] = None,  # pylint: disable=redefined-builtin
) -> Callable:
    """Click option with path to output file.

    Provides: `output: str` absolute path to the file. With `force` the
    existing file is overwritten only when --force is given; the force flag
    itself is consumed here and not passed to the command.

    :param required: The output file must be given, defaults to True.
    :param force: Add --force option protecting existing files, defaults to False.
    :param help: Help text replacing the default one.
    :return: Click decorator
    """

    def callback(
        ctx: click.Context,
        param: click.Parameter,  # pylint: disable=unused-argument
        value: str,
    ) -> str:
        if ctx.resilient_parsing:
            return value
        overwrite = ctx.params.pop("force", False)
        if force and value and os.path.exists(value):
            if not overwrite:
                click.echo(
                    "Output file already exists. "
                    "Please use --force if you want to overwrite existing files."
                )
                ctx.abort()
            logger.debug(f"Overwriting existing file {value}")
        return value

    def decorator(func: Callable[[FC], FC]) -> Callable[[FC], FC]:
        if force:
            func = click.option(
                "--force",
                default=False,
                is_flag=True,
                is_eager=True,
                help="Overwrite existing output file.",
            )(func)
        return click.option(
            "-o",
            "--output",
            type=click.Path(resolve_path=True, dir_okay=False),
            required=required,
            help=help or "Path to a file, where to store the output.",
            callback=callback,
        )(func)

    return decorator


class CommandsTreeGroup(click.Group):
    """Click group printing its commands as a tree in the help message."""

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Write the commands section of the help.

        :param ctx: click Context
        :param formatter: click HelpFormatter
        """
        rows = _get_tree(_build_command_tree(ctx.find_root().command))
        with formatter.section(gettext("Commands")):
            formatter.write_dl(rows, col_max=40)


def _short_help(command: click.Command) -> str:
    doc = (command.__doc__ or "").strip().partition("\n")[0]
    return doc if len(doc) <= 78 else doc[:78] + ".."


def _get_tree(
    node: _CommandWrapper, rows: Optional[list[tuple[str, str]]] = None, indent: str = ""
) -> list[tuple[str, str]]:
    """Flatten command tree into rows of command name and its short help.

    :param node: Node of the command tree.
    :param rows: Rows collected so far, None for the root node.
    :param indent: Prefix drawn in front of the children of the node.
    :return: Definition list for click HelpFormatter.
    """
    if rows is None:
        rows = [(node.name, _short_help(node.command))]
    children = sorted(node.children, key=lambda child: child.name)
    for index, child in enumerate(children):
        last = index == len(children) - 1
        branch = "└── " if last else "├── "
        rows.append((indent + branch + child.name, _short_help(child.command)))
        _get_tree(child, rows, indent + ("    " if last else "│   "))
    return rows
