# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Resolve the PHPUnit, WordPress and test-suite versions for a run."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from packaging.specifiers import SpecifierSet
from packaging.version import InvalidVersion, Version

from .errors import CONNECTION, VersionResolutionError
from .tools import Fetcher, run_command

logger = logging.getLogger(__name__)

VERSION_CHECK_URL = "http://api.wordpress.org/core/version-check/1.7/"

LATEST = "latest"
TRUNK = "trunk"
NIGHTLY = "nightly"

NEWEST_RUNNER = "7"

# https://phpunit.de/supported-versions.html
# Bands are the first three characters of PHP_VERSION.
RUNNER_BANDS: List[Tuple[SpecifierSet, str]] = [
    (SpecifierSet("==5.6"), "4"),
    (SpecifierSet(">=7.0,<7.2"), "6"),
]


class ChannelKind(enum.Enum):
    TRUNK = "trunk"
    NIGHTLY = "nightly"
    TAGGED = "tagged"


@dataclass(frozen=True)
class ArchiveChannel:
    kind: ChannelKind
    version: Optional[str] = None

    @classmethod
    def trunk(cls) -> "ArchiveChannel":
        return cls(ChannelKind.TRUNK)

    @classmethod
    def nightly(cls) -> "ArchiveChannel":
        return cls(ChannelKind.NIGHTLY)

    @classmethod
    def tagged(cls, version: str) -> "ArchiveChannel":
        if not version:
            raise ValueError("tagged channel needs a version")
        return cls(ChannelKind.TAGGED, version)

    @property
    def is_trunk(self) -> bool:
        return self.kind is ChannelKind.TRUNK

    @property
    def svn_path(self) -> str:
        """Path below the develop.svn.wordpress.org root; nightly builds come from trunk."""
        if self.kind is ChannelKind.TAGGED:
            return f"tags/{self.version}"
        return TRUNK

    @property
    def label(self) -> str:
        if self.kind is ChannelKind.TAGGED:
            return str(self.version)
        return self.kind.value


def detect_php_version() -> str:
    try:
        result = run_command(["php", "-r", "echo PHP_VERSION;"], check=False)
    except OSError as exc:
        logger.debug("php not available: %s", exc)
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def runner_version_for(php_version: str) -> str:
    band = php_version[:3]
    try:
        version = Version(band)
    except InvalidVersion:
        return NEWEST_RUNNER
    for specifier, runner in RUNNER_BANDS:
        if version in specifier:
            return runner
    return NEWEST_RUNNER


def resolve_runner_version(explicit: Optional[str], php_version: Optional[str] = None) -> str:
    if explicit:
        return explicit
    if php_version is None:
        php_version = detect_php_version()
    return runner_version_for(php_version)


def fetch_latest_version(fetcher: Fetcher, url: str = VERSION_CHECK_URL) -> Optional[str]:
    # The http endpoint serves a single offer; https serves several.
    data = fetcher.read_json(url)
    if not data:
        return None
    for offer in data.get("offers") or []:
        version = offer.get("version") if isinstance(offer, dict) else None
        if version:
            return str(version)
    return None


def resolve_framework_version(requested: str, fetcher: Fetcher) -> str:
    if requested != LATEST:
        return requested
    latest = fetch_latest_version(fetcher)
    if not latest:
        raise VersionResolutionError(
            f"Could not get latest WordPress version from api.wordpress.org. {CONNECTION}"
        )
    return latest


def framework_channel(version: str) -> ArchiveChannel:
    if version == TRUNK:
        return ArchiveChannel.trunk()
    if version == NIGHTLY:
        return ArchiveChannel.nightly()
    return ArchiveChannel.tagged(version)


def suite_channel(requested: Optional[str], framework_version: str, fetcher: Fetcher) -> ArchiveChannel:
    """Map the requested test-suite version to the channel it is exported from."""
    version = requested or framework_version
    if version in (TRUNK, NIGHTLY):
        return ArchiveChannel.trunk()
    if version == LATEST:
        if framework_version in (TRUNK, NIGHTLY):
            return ArchiveChannel.tagged(resolve_framework_version(LATEST, fetcher))
        return ArchiveChannel.tagged(framework_version)
    return ArchiveChannel.tagged(version)

