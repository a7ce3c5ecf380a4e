# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Load or create the WordPress test paths persisted in the shell-startup file.

Plugins scaffolded by WP-CLI (and VVV) read ``WP_CORE_DIR`` and
``WP_TESTS_DIR`` from the environment, so both paths are written to
``~/.bashrc`` as ``export`` lines the first time the setup runs. The values are
then carried through the run in a :class:`Settings` record.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from . import console
from .errors import EnvironmentConfigError

CORE_DIR_KEY = "WP_CORE_DIR"
TESTS_DIR_KEY = "WP_TESTS_DIR"

DEFAULT_CORE_DIR = "/tmp/wordpress"
DEFAULT_TESTS_DIR = "/tmp/wordpress-tests-lib"
DEFAULT_STARTUP_FILE = Path(
    os.environ.get("SETUP_PHPUNIT_STARTUP_FILE", str(Path.home() / ".bashrc"))
)

COMPOSER_PATH_LINE = 'export PATH="$PATH:$HOME/.composer/vendor/bin"'

_EXPORT_RE = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")


@dataclass(frozen=True)
class Settings:
    core_dir: Path
    tests_dir: Path

    @property
    def config_file(self) -> Path:
        return self.tests_dir / "wp-tests-config.php"


def load_exports(path: Path) -> Dict[str, str]:
    env: Dict[str, str] = {}
    if not path.exists():
        return env
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _EXPORT_RE.match(line)
        if not match:
            continue
        key, value = match.groups()
        env[key] = value.strip().strip("'\"")
    return env


def append_line_once(path: Path, line: str) -> bool:
    """Append ``line`` to ``path`` unless an identical line is already present."""
    text = path.read_text() if path.exists() else ""
    if line in text.splitlines():
        return False
    with path.open("a") as fh:
        if text and not text.endswith("\n"):
            fh.write("\n")
        fh.write(line + "\n")
    return True


def ensure_startup_file(path: Path) -> None:
    if not path.exists():
        console.info(f"Creating {path}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()


def _resolve(key: str, environ: Mapping[str, str], exports: Mapping[str, str]) -> Optional[str]:
    return environ.get(key) or exports.get(key) or None


def load_settings(
    startup_file: Path = DEFAULT_STARTUP_FILE,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Return the core/tests paths, declaring defaults in ``startup_file`` when missing."""
    environ = os.environ if environ is None else environ
    ensure_startup_file(startup_file)

    exports = load_exports(startup_file)
    for key, default in ((TESTS_DIR_KEY, DEFAULT_TESTS_DIR), (CORE_DIR_KEY, DEFAULT_CORE_DIR)):
        if not _resolve(key, environ, exports):
            console.info(f"Setting {key} environment variable")
            append_line_once(startup_file, f"export {key}={default}")

    exports = load_exports(startup_file)
    core_dir = _resolve(CORE_DIR_KEY, environ, exports)
    tests_dir = _resolve(TESTS_DIR_KEY, environ, exports)
    if not core_dir or not tests_dir:
        raise EnvironmentConfigError("The WordPress directories for PHPUnit are not set")
    return Settings(
        core_dir=Path(os.path.expandvars(os.path.expanduser(core_dir))),
        tests_dir=Path(os.path.expandvars(os.path.expanduser(tests_dir))),
    )
