# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Analysis settings."""

from gramnav.config.settings import AnalysisSettings, get_settings, make_settings


__all__ = ("AnalysisSettings", "get_settings", "make_settings")
