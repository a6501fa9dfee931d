# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Run the gramnav CLI with `python -m gramnav`."""

from gramnav.cli.app import main


if __name__ == "__main__":
    main()
