#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub cryptographic objects.

This module provides wrappers of keys and X.509 certificates as they are stored
in keystore entries.
"""
