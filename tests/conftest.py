# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

import io
import shutil
import tarfile
import zipfile
from pathlib import Path

import pytest

from setup_phpunit.environment import Environment, OsFamily
from setup_phpunit.settings import Settings
from setup_phpunit.workspace import Workspace

CONFIG_SAMPLE = """<?php
define( 'ABSPATH', dirname( __FILE__ ) . '/src/' );
define( 'DB_NAME', 'youremptytestdbnamehere' );
define( 'DB_USER', 'yourusernamehere' );
define( 'DB_PASSWORD', 'yourpasswordhere' );
define( 'DB_HOST', 'localhost' );
"""


def make_tarball(files, top="wordpress"):
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            data = content.encode()
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def make_zip(files, top="wordpress"):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            zf.writestr(f"{top}/{name}", content)
    return buf.getvalue()


class FakeFetcher:
    def __init__(self, files=None, metadata=None, reachable=None):
        self.files = dict(files or {})
        self.metadata = metadata
        self.reachable = set(reachable or [])
        self.downloads = []
        self.metadata_requests = 0

    def exists(self, url):
        return url in self.files or url in self.reachable

    def download(self, url, dest):
        self.downloads.append(url)
        if url not in self.files:
            return False
        Path(dest).write_bytes(self.files[url])
        return True

    def read_json(self, url):
        self.metadata_requests += 1
        return self.metadata


class FakeExporter:
    """Serves svn exports from a mapping of url -> {relative path: content} or file content."""

    def __init__(self, tree=None):
        self.tree = dict(tree or {})
        self.exports = []

    def export(self, url, dest):
        self.exports.append(url)
        if url not in self.tree:
            return False
        entry = self.tree[url]
        dest = Path(dest)
        if isinstance(entry, dict):
            dest.mkdir(parents=True, exist_ok=True)
            for name, content in entry.items():
                target = dest / name
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content)
        else:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(entry)
        return True


class CopySyncer:
    def __init__(self):
        self.calls = []

    def mirror(self, src, dest):
        self.calls.append((Path(src), Path(dest)))
        dest = Path(dest)
        if dest.exists():
            shutil.rmtree(dest)
        shutil.copytree(src, dest)


class FakeDbClient:
    def __init__(self, existing=(), listing=True):
        self.existing = set(existing)
        self.listing = listing
        self.created = []

    def list_database(self, name):
        return self.listing and name in self.existing

    def use_database(self, name):
        return name in self.existing

    def create_database(self, name):
        self.created.append(name)
        self.existing.add(name)


def suite_tree(channel_path, marker="suite"):
    base = f"https://develop.svn.wordpress.org/{channel_path}"
    return {
        f"{base}/tests/phpunit/includes/": {"functions.php": f"<?php // {marker} includes\n", "bootstrap.php": "<?php\n"},
        f"{base}/tests/phpunit/data/": {"themedir1/style.css": f"/* {marker} */\n"},
        f"{base}/wp-tests-config-sample.php": CONFIG_SAMPLE,
    }


@pytest.fixture
def workspace(tmp_path):
    root = tmp_path / "tmp"
    root.mkdir()
    return Workspace(tmp_root=root, runner_bin=tmp_path / "bin" / "phpunit")


@pytest.fixture
def settings(tmp_path):
    return Settings(core_dir=tmp_path / "wordpress", tests_dir=tmp_path / "wordpress-tests-lib")


@pytest.fixture
def linux_env(tmp_path):
    return Environment(os_family=OsFamily.OTHER, cwd=tmp_path, public_dir=None)
