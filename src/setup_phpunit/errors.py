# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Exceptions raised by the provisioning steps."""

from __future__ import annotations

CONNECTION = "Make sure you're connected to the internet."
QUIT = "Stopping script..."


class SetupError(Exception):
    """Fatal failure; the run stops after cleanup."""

    tag = "ERROR"
    reported = False


class UsageError(SetupError):
    pass


class MissingPackagesError(SetupError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing packages: {', '.join(missing)}. {CONNECTION}")


class DownloadError(SetupError):
    tag = "WARNING"
    reported = True

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Could not download {url} {CONNECTION}")


class VersionResolutionError(SetupError):
    pass


class EnvironmentConfigError(SetupError):
    pass


class FrameworkFetchError(SetupError):
    pass


class TestSuiteError(SetupError):
    __test__ = False


class DatabaseError(SetupError):
    pass


class PrerequisiteError(SetupError):
    pass
