#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub version option test suite."""

from kspub import __version__ as kspub_version
from kspub.apps import kspub
from tests.cli_runner import CliRunner


def test_kspub_version(cli_runner: CliRunner) -> None:
    """Test that --version prints the kspub version."""
    result = cli_runner.invoke(kspub.main, ["--version"])
    assert kspub_version in result.output
