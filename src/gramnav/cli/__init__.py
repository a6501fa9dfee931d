# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""CLI interface for gramnav."""

from gramnav.cli.app import app, main


__all__ = ("app", "main")
