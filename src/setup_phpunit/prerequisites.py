# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Check for and install the command-line tools the setup shells out to."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List

from . import console
from .environment import OsFamily
from .errors import CONNECTION, MissingPackagesError, PrerequisiteError
from .settings import COMPOSER_PATH_LINE, append_line_once
from .tools import is_executable, run_command

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ["wget", "curl", "svn", "rsync", "composer", "git"]
APT_PACKAGES = ["wget", "subversion", "curl", "git", "rsync"]
BREW_PACKAGES = ["wget", "svn"]

HOMEBREW_INSTALLER = "https://raw.githubusercontent.com/Homebrew/install/master/install.sh"
COMPOSER_INSTALLER = "https://getcomposer.org/installer"

CURL_BIN = Path("/usr/bin/curl")
COMPOSER_BIN = Path("/usr/local/bin/composer")

Runner = Callable[..., subprocess.CompletedProcess]


def missing_tools(tools: List[str] = REQUIRED_TOOLS) -> List[str]:
    return [tool for tool in tools if not is_executable(tool)]


class PackageInstaller:
    """Install or update the required tools for one OS family."""

    def __init__(
        self,
        os_family: OsFamily,
        startup_file: Path,
        run: Runner = run_command,
        curl_bin: Path = CURL_BIN,
        composer_bin: Path = COMPOSER_BIN,
    ):
        self.os_family = os_family
        self.startup_file = startup_file
        self.run = run
        self.curl_bin = curl_bin
        self.composer_bin = composer_bin

    def install(self, installing: bool) -> None:
        if self.os_family is OsFamily.MAC_LIKE:
            if installing:
                self._install_mac()
            return
        self._install_other()

    def _install_mac(self) -> None:
        # xcode-select exits non-zero when the tools are already present.
        self.run(["xcode-select", "--install"], check=False, capture=False)
        script = self.run(["curl", "-fsSL", HOMEBREW_INSTALLER]).stdout
        self.run(["/bin/bash", "-c", script], capture=False)
        for package in BREW_PACKAGES:
            self.run(["brew", "install", package], capture=False)

    def _install_other(self) -> None:
        self.run(["apt-get", "update", "-y"], capture=False)
        self.run(["apt-get", "install", "-y", *APT_PACKAGES], capture=False)

        if self.curl_bin.is_file() and not self.composer_bin.is_file():
            self._install_composer()
        elif self.composer_bin.is_file():
            console.info("Updating composer...")
            result = self.run(["composer", "self-update"], check=False, capture=False)
            if result.returncode != 0:
                console.warning(f"Could not update composer. {CONNECTION}")

    def _install_composer(self) -> None:
        installer = self.run(["curl", "-sS", COMPOSER_INSTALLER]).stdout
        self.run(["php"], input_text=installer, capture=False)
        phar = Path("composer.phar")
        try:
            shutil.move(str(phar), str(self.composer_bin))
        except OSError as exc:
            raise PrerequisiteError(f"Could not move composer.phar to {self.composer_bin}: {exc}") from exc
        if self.startup_file.is_file():
            console.info("Adding .composer/vendor/bin to the PATH")
            append_line_once(self.startup_file, COMPOSER_PATH_LINE)


def ensure_prerequisites(installer: PackageInstaller, update: bool, check: Callable[[], List[str]] = missing_tools) -> None:
    """Install missing tools (or update all of them) and verify the result."""
    missing = check()
    installing = bool(missing)
    if installing or update:
        console.info("Installing packages..." if installing else "Updating packages...")
        logger.debug("missing tools: %s", missing)
        try:
            installer.install(installing)
        except (subprocess.CalledProcessError, OSError) as exc:
            console.warning(f"Package installation failed: {exc}")

    missing = check()
    if missing:
        raise MissingPackagesError(missing)
