# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Set up a logger with optional rich formatting."""

from __future__ import annotations

import logging

from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def get_rich_handler(**kwargs: Any) -> RichHandler:
    """Create a `RichHandler` writing to stderr."""
    return RichHandler(
        console=Console(stderr=True, markup=True, soft_wrap=True), markup=True, **kwargs
    )


def resolve_level(level: int | str) -> int:
    """Resolve a level name like `"debug"` to its numeric value."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelNamesMapping().get(level.strip().upper())
    if resolved is None:
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logger(
    name: str | None = "gramnav",
    *,
    level: int | str = logging.WARNING,
    rich: bool = True,
    rich_options: dict[str, Any] | None = None,
) -> logging.Logger:
    """Set up a logger with optional rich formatting."""
    int_level = resolve_level(level)
    if not rich:
        logging.basicConfig(level=int_level)
        return logging.getLogger(name)
    handler = get_rich_handler(**(rich_options or {}))
    logger = logging.getLogger(name)
    logger.setLevel(int_level)
    # Clear existing handlers to prevent duplication
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger


__all__ = ("get_rich_handler", "resolve_level", "setup_logger")
