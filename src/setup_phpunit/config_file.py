# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Fill in the placeholders of ``wp-tests-config.php``."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from . import console

CORE_DIR_PLACEHOLDER = "dirname( __FILE__ ) . '/src/'"
DB_NAME_PLACEHOLDER = "youremptytestdbnamehere"
DB_USER_PLACEHOLDER = "yourusernamehere"
DB_PASS_PLACEHOLDER = "yourpasswordhere"

CONFIG_NAME = "wp-tests-config.php"
SAMPLE_NAME = "wp-tests-config-sample.php"

DEFAULT_DB_NAME = os.environ.get("WP_TESTS_DB_NAME", "wordpress_test")
DEFAULT_DB_USER = os.environ.get("WP_TESTS_DB_USER", "root")
DEFAULT_DB_PASS = os.environ.get("WP_TESTS_DB_PASS", "root")


@dataclass(frozen=True)
class Credentials:
    db_name: str = DEFAULT_DB_NAME
    user: str = DEFAULT_DB_USER
    password: str = DEFAULT_DB_PASS

    def replacements(self) -> Dict[str, str]:
        return {
            DB_NAME_PLACEHOLDER: self.db_name,
            DB_USER_PLACEHOLDER: self.user,
            DB_PASS_PLACEHOLDER: self.password,
        }


def substitute(text: str, replacements: Dict[str, str]) -> str:
    for token, value in replacements.items():
        text = text.replace(token, value)
    return text


def config_replacements(core_dir: Path, credentials: Credentials) -> Dict[str, str]:
    replacements = {CORE_DIR_PLACEHOLDER: f"'{core_dir}/'"}
    replacements.update(credentials.replacements())
    return replacements


def rewrite_in_place(path: Path, replacements: Dict[str, str], backup: bool = False) -> bool:
    original = path.read_text()
    if backup:
        path.with_name(path.name + ".bak").write_text(original)
    updated = substitute(original, replacements)
    if updated != original:
        path.write_text(updated)
        return True
    return False


def write_local_config(public_dir: Path, credentials: Credentials) -> Optional[Path]:
    """Create ``wp-tests-config.php`` from a develop checkout's sample in ``public_dir``."""
    sample = public_dir / SAMPLE_NAME
    if not sample.is_file():
        return None
    console.info(f"Create credentials for {CONFIG_NAME}...")
    target = public_dir / CONFIG_NAME
    target.write_text(substitute(sample.read_text(), credentials.replacements()))
    return target


def generate_config(
    config_path: Path,
    core_dir: Path,
    credentials: Credentials,
    copy_path: Path,
    public_dir: Optional[Path] = None,
    backup: bool = False,
) -> None:
    if config_path.is_file():
        console.info(f"Updating {CONFIG_NAME}...")
        rewrite_in_place(config_path, config_replacements(core_dir, credentials), backup=backup)
        # VVV keeps its tests config outside the tests directory.
        shutil.copyfile(config_path, copy_path)

    if public_dir is None:
        return

    write_local_config(public_dir, credentials)
    public_config = public_dir / CONFIG_NAME
    if not public_config.exists() and config_path.is_file() and public_dir.is_dir():
        shutil.copyfile(config_path, public_config)
        console.info(f"'{config_path}' -> '{public_config}'")
