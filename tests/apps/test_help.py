#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""kspub CLI help functionality testing module."""

import logging
from typing import Any

from kspub.apps import kspub
from tests.cli_runner import CliRunner


def run_help(cli_runner: CliRunner, command_group: Any, help_option: bool) -> None:
    """Run help command and check the help message is displayed.

    :param cli_runner: CLI test runner instance for executing commands.
    :param command_group: The CLI command group or command to test help functionality for.
    :param help_option: Use --help option or trigger help by missing arguments.
    """
    expected_code = cli_runner.get_help_error_code(use_help_flag=help_option)

    result = cli_runner.invoke(
        command_group, ["--help"] if help_option else None, expected_code=expected_code
    )
    assert "Show this message and exit." in result.output


def test_kspub_help(cli_runner: CliRunner) -> None:
    """Test help of the kspub application, the commands are printed as tree."""
    run_help(cli_runner, kspub.main, help_option=True)
    run_help(cli_runner, kspub.main, help_option=False)
    result = cli_runner.invoke(kspub.main, ["--help"])
    for name in kspub.main.commands:
        assert name in result.output


def test_kspub_subcommands_help(cli_runner: CliRunner) -> None:
    """Test help of all kspub subcommands."""
    for name, command in kspub.main.commands.items():
        logging.debug(f"running help for {name}")
        run_help(cli_runner, command, help_option=True)
    run_help(cli_runner, kspub.main.commands["get-template"], help_option=False)
