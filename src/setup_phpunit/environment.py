# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Detect the host OS family and the Local site's public directory."""

from __future__ import annotations

import enum
import platform
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class OsFamily(enum.Enum):
    MAC_LIKE = "MacOS"
    OTHER = "Linux/WSL"


@dataclass(frozen=True)
class Environment:
    os_family: OsFamily
    cwd: Path
    public_dir: Optional[Path]

    @property
    def is_mac(self) -> bool:
        return self.os_family is OsFamily.MAC_LIKE


def detect_os_family(system: Optional[str] = None) -> OsFamily:
    if system is None:
        system = platform.system()
    if system == "Darwin":
        return OsFamily.MAC_LIKE
    return OsFamily.OTHER


def find_public_dir(cwd: Path) -> Optional[Path]:
    """Return the site's ``app/public`` directory when run from ``app`` or ``app/public``."""
    match = re.search(r"app.*$", str(cwd))
    if not match:
        return None
    tail = match.group(0)
    if tail == "app/public":
        return cwd
    if tail == "app":
        return cwd / "public"
    return None


def detect_environment(cwd: Optional[Path] = None, system: Optional[str] = None) -> Environment:
    cwd = Path.cwd() if cwd is None else cwd
    return Environment(os_family=detect_os_family(system), cwd=cwd, public_dir=find_public_dir(cwd))
