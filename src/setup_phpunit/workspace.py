# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Temporary paths used during one run and their cleanup."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TMP_ROOT = Path(os.environ.get("SETUP_PHPUNIT_TMP", "/tmp"))
DEFAULT_RUNNER_BIN = Path(os.environ.get("PHPUNIT_BIN", "/usr/local/bin/phpunit"))


@dataclass(frozen=True)
class Workspace:
    tmp_root: Path = DEFAULT_TMP_ROOT
    runner_bin: Path = DEFAULT_RUNNER_BIN

    @property
    def core_staging(self) -> Path:
        return self.tmp_root / "tmp-wordpress"

    @property
    def tests_staging(self) -> Path:
        return self.tmp_root / "tmp-wordpress-tests-lib"

    @property
    def credentials_file(self) -> Path:
        return self.tmp_root / "my.cnf"

    @property
    def release_archive(self) -> Path:
        return self.tmp_root / "wordpress.tar.gz"

    @property
    def nightly_archive(self) -> Path:
        return self.tmp_root / "wordpress-latest.zip"

    @property
    def config_copy(self) -> Path:
        return self.tmp_root / "wp-tests-config.php"

    def runner_download(self, version: str) -> Path:
        return self.tmp_root / f"phpunit-{version}.phar"

    def temporary_paths(self) -> list[Path]:
        return [
            self.core_staging,
            self.tests_staging,
            self.credentials_file,
            self.release_archive,
            self.nightly_archive,
        ]

    def clean(self) -> None:
        """Remove every temporary path; safe to call any number of times."""
        for path in self.temporary_paths():
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path, ignore_errors=True)
            elif path.exists() or path.is_symlink():
                path.unlink(missing_ok=True)

    def prepare(self) -> None:
        self.clean()
        self.core_staging.mkdir(parents=True)
        self.tests_staging.mkdir(parents=True)
