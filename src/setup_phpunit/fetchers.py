# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Download PHPUnit, WordPress and the WordPress PHPUnit test suite."""

from __future__ import annotations

import enum
import logging
import os
import shutil
import stat
import tarfile
import zipfile
from pathlib import Path, PurePosixPath

from . import console
from .errors import CONNECTION, DownloadError, FrameworkFetchError, TestSuiteError
from .settings import Settings
from .tools import Exporter, Fetcher, Syncer
from .versions import ArchiveChannel, ChannelKind
from .workspace import Workspace

logger = logging.getLogger(__name__)

PHPUNIT_URL = "https://phar.phpunit.de/phpunit-{version}.phar"
RELEASE_URL = "https://wordpress.org/wordpress-{version}.tar.gz"
NIGHTLY_URL = "https://wordpress.org/nightly-builds/wordpress-latest.zip"
SVN_ROOT = "https://develop.svn.wordpress.org"

SUITE_PATHS = ["includes", "data", "wp-tests-config.php"]


class StepResult(enum.Enum):
    OK = "ok"
    FAILED = "failed"


def download(fetcher: Fetcher, url: str, dest: Path) -> StepResult:
    """Fetch ``url`` into ``dest``, printing a warning when it cannot be retrieved."""
    if fetcher.exists(url) and fetcher.download(url, dest) and dest.is_file():
        return StepResult.OK
    console.warning(f"Could not download {url} {CONNECTION}")
    return StepResult.FAILED


def install_runner(version: str, fetcher: Fetcher, workspace: Workspace) -> Path:
    console.info(f"Installing PHPUnit {version}... ")
    url = PHPUNIT_URL.format(version=version)
    phar = workspace.runner_download(version)
    if download(fetcher, url, phar) is not StepResult.OK:
        raise DownloadError(url)
    mode = phar.stat().st_mode
    phar.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    workspace.runner_bin.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(phar), str(workspace.runner_bin))
    console.info(f"'{phar}' -> '{workspace.runner_bin}'")
    return workspace.runner_bin


def extract_tarball(archive: Path, dest: Path, strip_components: int = 1) -> None:
    with tarfile.open(archive, "r:gz") as tar:
        members = []
        for member in tar.getmembers():
            parts = PurePosixPath(member.name).parts[strip_components:]
            if not parts:
                continue
            member.name = str(PurePosixPath(*parts))
            members.append(member)
        tar.extractall(dest, members=members, filter="data")


def extract_zip(archive: Path, dest: Path) -> None:
    with zipfile.ZipFile(archive) as zf:
        zf.extractall(dest)


def unpack(extract, archive: Path, dest: Path, version: str) -> None:
    try:
        extract(archive, dest)
    except (tarfile.TarError, zipfile.BadZipFile, OSError) as exc:
        console.warning(f"Could not unpack {archive.name}: {exc}")
        raise FrameworkFetchError(f"Could not install WordPress {version}") from exc


def install_framework(version: str, channel: ArchiveChannel, fetcher: Fetcher, exporter: Exporter, syncer: Syncer, settings: Settings, workspace: Workspace) -> None:
    staging = workspace.core_staging
    if channel.kind is ChannelKind.TRUNK:
        console.info("Installing WordPress trunk... ")
        url = f"{SVN_ROOT}/trunk/src/"
        if not exporter.export(url, staging):
            console.warning(f"Could not export {url} {CONNECTION}")
            raise FrameworkFetchError("Could not install WordPress trunk")
        syncer.mirror(staging, settings.core_dir)
    elif channel.kind is ChannelKind.NIGHTLY:
        console.info("Installing WordPress nightly... ")
        if download(fetcher, NIGHTLY_URL, workspace.nightly_archive) is not StepResult.OK:
            raise FrameworkFetchError("Could not install WordPress nightly")
        unpack(extract_zip, workspace.nightly_archive, staging, "nightly")
        syncer.mirror(staging / "wordpress", settings.core_dir)
    elif channel.kind is ChannelKind.TAGGED:
        console.info(f"Installing WordPress {version}... ")
        url = RELEASE_URL.format(version=channel.version)
        if download(fetcher, url, workspace.release_archive) is not StepResult.OK:
            raise FrameworkFetchError(f"Could not install WordPress {version}")
        unpack(extract_tarball, workspace.release_archive, staging, version)
        syncer.mirror(staging, settings.core_dir)
    else:
        raise AssertionError(f"unhandled channel {channel.kind}")


def export_test_suite(channel: ArchiveChannel, exporter: Exporter, fetcher: Fetcher, workspace: Workspace) -> StepResult:
    staging = workspace.tests_staging
    base = f"{SVN_ROOT}/{channel.svn_path}"
    if fetcher.exists(f"{base}/tests/phpunit/includes/"):
        exporter.export(f"{base}/tests/phpunit/includes/", staging / "includes")
        exporter.export(f"{base}/tests/phpunit/data/", staging / "data")
        exporter.export(f"{base}/wp-tests-config-sample.php", staging / "wp-tests-config.php")
        missing = [path for path in SUITE_PATHS if not (staging / path).exists()]
        if not missing:
            return StepResult.OK
        logger.debug("test suite export incomplete, missing %s", missing)

    console.warning(f"Could not download {channel.label} Test Suite. {CONNECTION}")
    return StepResult.FAILED


def install_test_suite(channel: ArchiveChannel, exporter: Exporter, fetcher: Fetcher, syncer: Syncer, settings: Settings, workspace: Workspace) -> ArchiveChannel:
    """Export the test suite for ``channel``, falling back to trunk once.

    Returns the channel that was actually installed.
    """
    console.info(f"Installing WordPress {channel.label} Test Suite...")
    if export_test_suite(channel, exporter, fetcher, workspace) is StepResult.OK:
        syncer.mirror(workspace.tests_staging, settings.tests_dir)
        return channel

    if channel.is_trunk:
        raise TestSuiteError("Could not install the WordPress test suite")

    console.info("Installing Test Suite from trunk...")
    shutil.rmtree(workspace.tests_staging, ignore_errors=True)
    workspace.tests_staging.mkdir(parents=True)
    trunk = ArchiveChannel.trunk()
    if export_test_suite(trunk, exporter, fetcher, workspace) is StepResult.OK:
        syncer.mirror(workspace.tests_staging, settings.tests_dir)
        return trunk
    raise TestSuiteError("Could not install the WordPress test suite from trunk")


def ensure_directories(settings: Settings) -> None:
    for path in (settings.core_dir, settings.tests_dir):
        os.makedirs(path, exist_ok=True)

