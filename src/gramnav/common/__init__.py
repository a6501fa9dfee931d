# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shared runtime helpers."""

from gramnav.common.logging import setup_logger


__all__ = ("setup_logger",)
