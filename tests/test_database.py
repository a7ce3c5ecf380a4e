# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

import os
import stat

import pytest

from conftest import FakeDbClient
from setup_phpunit.config_file import Credentials
from setup_phpunit.database import database_exists, provision_database, write_client_credentials
from setup_phpunit.errors import DatabaseError
from setup_phpunit.tools import MysqlClient


def fake_bin(directory, name, body):
    path = directory / name
    path.write_text(f"#!/usr/bin/env bash\n{body}\n")
    path.chmod(stat.S_IRWXU)
    return path


@pytest.fixture
def mysql_bin(tmp_path, monkeypatch):
    """Fake MySQL client tools backed by a directory of database markers."""
    bindir = tmp_path / "bin"
    bindir.mkdir()
    state = tmp_path / "databases"
    state.mkdir()
    log = tmp_path / "calls.log"
    fake_bin(
        bindir,
        "mysqlshow",
        f'echo "mysqlshow $*" >> "{log}"\n'
        f'if [ -e "{state}/$2" ]; then echo "Wildcard: $2"; echo "| Databases |"; echo "| $2 |"; exit 0; fi\n'
        'echo "mysqlshow: Unknown database" >&2; exit 1',
    )
    fake_bin(
        bindir,
        "mysql",
        f'echo "mysql $*" >> "{log}"\n'
        'db="${3#use }"\n'
        f'[ -e "{state}/$db" ]',
    )
    fake_bin(
        bindir,
        "mysqladmin",
        f'echo "mysqladmin $*" >> "{log}"\n'
        f'touch "{state}/$3"',
    )
    monkeypatch.setenv("PATH", f"{bindir}{os.pathsep}{os.environ['PATH']}")
    return state, log


def test_credentials_file(tmp_path):
    path = write_client_credentials(tmp_path / "my.cnf", Credentials(user="root", password="secret"))
    assert path.read_text() == "[client]\npassword=secret\nuser=root"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_provision_creates_once():
    client = FakeDbClient()
    assert provision_database(client, "wordpress_test") is True
    assert provision_database(client, "wordpress_test") is False
    assert client.created == ["wordpress_test"]


def test_use_database_fallback_detects_existing():
    client = FakeDbClient(existing={"wordpress_test"}, listing=False)
    assert database_exists(client, "wordpress_test") is True
    assert provision_database(client, "wordpress_test") is False
    assert client.created == []


def test_failed_create_is_fatal():
    class BrokenClient(FakeDbClient):
        def create_database(self, name):
            raise OSError("mysqladmin: not found")

    with pytest.raises(DatabaseError):
        provision_database(BrokenClient(), "wordpress_test")


def test_mysql_client_against_fake_tools(tmp_path, mysql_bin):
    state, log = mysql_bin
    defaults = write_client_credentials(tmp_path / "my.cnf", Credentials())
    client = MysqlClient(defaults)

    assert provision_database(client, "wordpress_test") is True
    assert (state / "wordpress_test").exists()
    assert provision_database(client, "wordpress_test") is False

    calls = log.read_text().splitlines()
    creates = [line for line in calls if line.startswith("mysqladmin")]
    assert creates == [f"mysqladmin --defaults-file={defaults} create wordpress_test"]
    assert f"mysqlshow --defaults-file={defaults} wordpress_test" in calls


def test_mysql_client_create_failure(tmp_path, mysql_bin):
    bindir = tmp_path / "bin"
    fake_bin(bindir, "mysqladmin", 'echo "access denied" >&2; exit 1')
    client = MysqlClient(tmp_path / "my.cnf")

    with pytest.raises(DatabaseError, match="access denied"):
        provision_database(client, "wordpress_test")
