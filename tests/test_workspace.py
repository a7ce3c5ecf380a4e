# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

from pathlib import Path

from setup_phpunit.environment import OsFamily, detect_environment, detect_os_family, find_public_dir


def seed(workspace):
    workspace.core_staging.mkdir()
    (workspace.core_staging / "index.php").write_text("<?php\n")
    (workspace.tests_staging / "includes").mkdir(parents=True)
    workspace.credentials_file.write_text("[client]\n")
    workspace.release_archive.write_bytes(b"tgz")


def test_clean_removes_all_temporary_paths(workspace):
    seed(workspace)
    workspace.clean()
    for path in workspace.temporary_paths():
        assert not path.exists()


def test_clean_is_idempotent(workspace):
    workspace.clean()
    workspace.clean()
    assert workspace.tmp_root.exists()


def test_prepare_discards_stale_leftovers(workspace):
    seed(workspace)
    workspace.prepare()
    assert workspace.core_staging.is_dir()
    assert list(workspace.core_staging.iterdir()) == []
    assert list(workspace.tests_staging.iterdir()) == []
    assert not workspace.credentials_file.exists()


def test_os_family():
    assert detect_os_family("Darwin") is OsFamily.MAC_LIKE
    assert detect_os_family("Linux") is OsFamily.OTHER
    assert detect_os_family("FreeBSD") is OsFamily.OTHER


def test_public_dir_from_app_root():
    app = Path("/Users/dev/Local Sites/demo/app")
    assert find_public_dir(app) == app / "public"


def test_public_dir_from_public():
    public = Path("/Users/dev/Local Sites/demo/app/public")
    assert find_public_dir(public) == public


def test_public_dir_unset_elsewhere():
    assert find_public_dir(Path("/srv/www/wp-content")) is None
    assert find_public_dir(Path("/home/apps/app")) is None
    env = detect_environment(cwd=Path("/srv/www"), system="Linux")
    assert env.public_dir is None
    assert env.os_family is OsFamily.OTHER
    assert env.is_mac is False
