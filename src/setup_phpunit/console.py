# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Terminal output helpers shared by the provisioning steps."""

from __future__ import annotations

import logging
import os
import sys

RED = "\033[0;31m"
RESET = "\033[0m"

DEBUG_ENV = "SETUP_PHPUNIT_DEBUG"


def info(message: str) -> None:
    print(message, flush=True)


def warning(message: str) -> None:
    print(f"{RED}WARNING{RESET} {message}", file=sys.stderr, flush=True)


def error(message: str) -> None:
    print(f"{RED}ERROR{RESET} {message}", file=sys.stderr, flush=True)


def configure_logging() -> None:
    level = logging.DEBUG if os.environ.get(DEBUG_ENV) == "1" else logging.WARNING
    logging.basicConfig(level=level, format="[setup-phpunit] %(levelname)s %(name)s: %(message)s")
