# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Create the MySQL database the WordPress test suite runs against."""

from __future__ import annotations

import subprocess
from pathlib import Path

from . import console
from .config_file import Credentials
from .errors import DatabaseError
from .tools import DbClient


def write_client_credentials(path: Path, credentials: Credentials) -> Path:
    # Keeps the MySQL clients from prompting for a password.
    path.write_text(f"[client]\npassword={credentials.password}\nuser={credentials.user}")
    path.chmod(0o600)
    return path


def database_exists(client: DbClient, name: str) -> bool:
    if client.list_database(name):
        return True
    return client.use_database(name)


def provision_database(client: DbClient, name: str) -> bool:
    """Create ``name`` unless it already exists. Returns True when it was created."""
    console.info(f"Checking if database {name} exists")
    if database_exists(client, name):
        console.info(f"Database {name} already exists")
        return False

    console.info(f"Creating database {name}")
    try:
        client.create_database(name)
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip()
        raise DatabaseError(f"Could not create database {name}: {detail or exc}") from exc
    except OSError as exc:
        raise DatabaseError(f"Could not create database {name}: {exc}") from exc
    return True
