# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""The provisioning pipeline, run step by step in a fixed order."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from . import console
from .config_file import Credentials, generate_config
from .database import provision_database, write_client_credentials
from .environment import Environment, detect_environment
from .errors import QUIT, SetupError
from .fetchers import ensure_directories, install_framework, install_runner, install_test_suite
from .prerequisites import PackageInstaller, ensure_prerequisites, missing_tools
from .settings import DEFAULT_STARTUP_FILE, Settings, load_settings
from .tools import DbClient, Exporter, Fetcher, MysqlClient, RsyncSyncer, SvnExporter, Syncer, WgetFetcher
from .versions import (
    LATEST,
    framework_channel,
    resolve_framework_version,
    resolve_runner_version,
    suite_channel,
)
from .workspace import Workspace

logger = logging.getLogger(__name__)


@dataclass
class Options:
    runner_version: Optional[str] = None
    framework_version: str = LATEST
    test_library_version: Optional[str] = None
    update_packages: bool = False


@dataclass
class Toolbox:
    fetcher: Fetcher = field(default_factory=WgetFetcher)
    exporter: Exporter = field(default_factory=SvnExporter)
    syncer: Syncer = field(default_factory=RsyncSyncer)
    db_client_factory: Callable[[Path], DbClient] = MysqlClient


@dataclass
class RunResult:
    runner_version: str
    framework_version: str
    suite_version: str
    settings: Settings
    database_created: bool


class Provisioner:
    def __init__(
        self,
        workspace: Optional[Workspace] = None,
        toolbox: Optional[Toolbox] = None,
        environment: Optional[Environment] = None,
        startup_file: Path = DEFAULT_STARTUP_FILE,
        credentials: Optional[Credentials] = None,
        installer: Optional[PackageInstaller] = None,
        check_tools: Callable[[], List[str]] = missing_tools,
        php_version: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.workspace = workspace or Workspace()
        self.toolbox = toolbox or Toolbox()
        self.environment = environment or detect_environment()
        self.startup_file = startup_file
        self.credentials = credentials or Credentials()
        self.installer = installer or PackageInstaller(self.environment.os_family, startup_file)
        self.check_tools = check_tools
        self.php_version = php_version
        self.environ = environ

    def run(self, options: Options) -> RunResult:
        env = self.environment
        tools = self.toolbox
        console.info(env.os_family.value)

        ensure_prerequisites(self.installer, options.update_packages, check=self.check_tools)

        runner_version = resolve_runner_version(options.runner_version, self.php_version)
        install_runner(runner_version, tools.fetcher, self.workspace)

        settings = load_settings(self.startup_file, self.environ)
        logger.debug("core dir %s, tests dir %s", settings.core_dir, settings.tests_dir)

        self.workspace.prepare()
        ensure_directories(settings)

        framework_version = resolve_framework_version(options.framework_version or LATEST, tools.fetcher)
        install_framework(
            framework_version,
            framework_channel(framework_version),
            tools.fetcher,
            tools.exporter,
            tools.syncer,
            settings,
            self.workspace,
        )

        requested_suite = options.test_library_version or framework_version
        installed = install_test_suite(
            suite_channel(requested_suite, framework_version, tools.fetcher),
            tools.exporter,
            tools.fetcher,
            tools.syncer,
            settings,
            self.workspace,
        )

        generate_config(
            settings.config_file,
            settings.core_dir,
            self.credentials,
            self.workspace.config_copy,
            public_dir=env.public_dir,
            backup=env.is_mac,
        )

        defaults_file = write_client_credentials(self.workspace.credentials_file, self.credentials)
        created = provision_database(tools.db_client_factory(defaults_file), self.credentials.db_name)

        self.workspace.clean()
        console.info("\nFinished setting up packages\n")
        return RunResult(
            runner_version=runner_version,
            framework_version=framework_version,
            suite_version=installed.label,
            settings=settings,
            database_created=created,
        )


def run_setup(options: Options, provisioner: Provisioner) -> int:
    """Run the pipeline, converting any fatal error into cleanup and exit status 1."""
    try:
        provisioner.run(options)
    except SetupError as exc:
        if exc.reported:
            logger.debug("%s", exc)
        elif exc.tag == "WARNING":
            console.warning(str(exc))
        else:
            console.error(str(exc))
        console.info(QUIT)
        provisioner.workspace.clean()
        return 1
    except subprocess.CalledProcessError as exc:
        console.error(f"{' '.join(exc.cmd)} exited with status {exc.returncode}")
        console.info(QUIT)
        provisioner.workspace.clean()
        return 1
    except OSError as exc:
        console.error(str(exc))
        console.info(QUIT)
        provisioner.workspace.clean()
        return 1
    return 0
