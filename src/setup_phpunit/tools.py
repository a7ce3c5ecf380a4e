# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Narrow wrappers around the external tools the setup relies on.

Every network, export, sync and database action goes through one of the
capability protocols below so the workflow can be driven by fakes in tests.
The concrete classes shell out to ``wget``, ``svn``, ``rsync`` and the MySQL
client tools.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import urllib.request
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

USER_AGENT = "setup-phpunit"


def run_command(
    cmd: List[str],
    *,
    check: bool = True,
    capture: bool = True,
    input_text: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> subprocess.CompletedProcess:
    logger.debug("running %s", " ".join(cmd))
    return subprocess.run(
        cmd,
        check=check,
        stdout=subprocess.PIPE if capture else None,
        stderr=subprocess.PIPE if capture else None,
        input=input_text,
        cwd=cwd,
        text=True,
    )


def command_succeeds(cmd: List[str]) -> bool:
    try:
        result = run_command(cmd, check=False)
    except OSError as exc:
        logger.debug("%s failed to start: %s", cmd[0], exc)
        return False
    return result.returncode == 0


def is_executable(name: str) -> bool:
    path = shutil.which(name)
    return bool(path) and os.path.isfile(path) and os.access(path, os.X_OK)


@runtime_checkable
class Fetcher(Protocol):
    """Retrieve remote files over HTTP."""

    def exists(self, url: str) -> bool:
        ...

    def download(self, url: str, dest: Path) -> bool:
        ...

    def read_json(self, url: str) -> Optional[dict]:
        ...


@runtime_checkable
class Exporter(Protocol):
    """Export a path from a Subversion repository without working copy metadata."""

    def export(self, url: str, dest: Path) -> bool:
        ...


@runtime_checkable
class Syncer(Protocol):
    """Make ``dest`` an exact mirror of ``src``."""

    def mirror(self, src: Path, dest: Path) -> None:
        ...


@runtime_checkable
class DbClient(Protocol):
    """Database client calls used to provision the test database."""

    def list_database(self, name: str) -> bool:
        ...

    def use_database(self, name: str) -> bool:
        ...

    def create_database(self, name: str) -> None:
        ...


class WgetFetcher:
    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def exists(self, url: str) -> bool:
        return command_succeeds(["wget", "--spider", url])

    def download(self, url: str, dest: Path) -> bool:
        try:
            result = run_command(["wget", "-q", "--show-progress", "-O", str(dest), url], check=False, capture=False)
        except OSError as exc:
            logger.debug("wget failed to start: %s", exc)
            return False
        return result.returncode == 0

    def read_json(self, url: str) -> Optional[dict]:
        try:
            req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                data = json.load(resp)
        except Exception as exc:
            logger.debug("metadata request to %s failed: %s", url, exc)
            return None
        return data if isinstance(data, dict) else None


class SvnExporter:
    def export(self, url: str, dest: Path) -> bool:
        return command_succeeds(["svn", "export", "--quiet", "--force", url, str(dest)])


class RsyncSyncer:
    def mirror(self, src: Path, dest: Path) -> None:
        # Trailing slash copies the contents of src rather than src itself.
        run_command(["rsync", "-a", "--delete", f"{src}/", str(dest)])


class MysqlClient:
    """MySQL command-line client authenticated through a defaults file."""

    def __init__(self, defaults_file: Path):
        self.defaults_file = defaults_file

    def _defaults(self) -> str:
        return f"--defaults-file={self.defaults_file}"

    def list_database(self, name: str) -> bool:
        if not shutil.which("mysqlshow"):
            return False
        try:
            result = run_command(["mysqlshow", self._defaults(), name], check=False)
        except OSError:
            return False
        if result.returncode != 0:
            return False
        lines = [line for line in result.stdout.splitlines() if "Wildcard" not in line]
        return any(name in line for line in lines)

    def use_database(self, name: str) -> bool:
        return command_succeeds(["mysql", self._defaults(), "-e", f"use {name}"])

    def create_database(self, name: str) -> None:
        run_command(["mysqladmin", self._defaults(), "create", name])
