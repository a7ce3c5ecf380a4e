# SPDX-FileCopyrightText: 2025 Blackcat Informatics® Inc.
# SPDX-License-Identifier: MIT

"""Install PHPUnit, WordPress and the WordPress test suite for a Local site."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from . import console
from .errors import QUIT, UsageError
from .workflow import Options, Provisioner, run_setup
from .workspace import Workspace

PROG = "setup-phpunit"
HELP_FLAGS = ("-?", "--help")

EPILOG = f"""\
example:
  {PROG} --phpunit-version=6 --wp-version=trunk

PHPUnit is installed as /usr/local/bin/phpunit. WordPress is installed in
$WP_CORE_DIR (default /tmp/wordpress) and the test suite in $WP_TESTS_DIR
(default /tmp/wordpress-tests-lib); both variables are added to ~/.bashrc.
"""


class SetupArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> SetupArgumentParser:
    parser = SetupArgumentParser(
        prog=PROG,
        description="Install PHPUnit in the Local by Flywheel app",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--phpunit-version",
        "--runner-version",
        dest="runner_version",
        metavar="MAJOR",
        help="PHPUnit version to install (default depends on the PHP version)",
    )
    parser.add_argument(
        "--wp-version",
        "--framework-version",
        dest="framework_version",
        metavar="VERSION",
        help="WordPress version to install. Accepts a version number, 'latest', 'trunk' or 'nightly'. Default 'latest'",
    )
    parser.add_argument(
        "--wp-ts-version",
        "--test-library-version",
        dest="test_library_version",
        metavar="VERSION",
        help="WordPress Test Suite version to install. Accepts a version number, 'latest', 'trunk' or 'nightly'. Default --wp-version option",
    )
    parser.add_argument(
        "--update-packages",
        action="store_true",
        help="Update curl, wget, rsync, git, subversion and composer",
    )
    parser.add_argument(*HELP_FLAGS, action="store_true", dest="help", help="Display information about this script")
    return parser


def parse_args(argv: List[str]) -> argparse.Namespace:
    """Parse ``argv``; every argument must be one of the recognised ``--name=value`` flags.

    Arguments are taken in order, so anything after ``--help`` is ignored.
    """
    for index, arg in enumerate(argv):
        if arg in HELP_FLAGS:
            argv = argv[: index + 1]
            break
    for arg in argv:
        if not arg.startswith("-"):
            raise UsageError(f"Unknown option: {arg}.")
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)
    if extras:
        raise UsageError(f"Unknown option: {extras[0]}.")
    return args


def options_from_args(args: argparse.Namespace) -> Options:
    return Options(
        runner_version=args.runner_version or None,
        framework_version=args.framework_version or "latest",
        test_library_version=args.test_library_version or None,
        update_packages=args.update_packages,
    )


def main(argv: Optional[List[str]] = None, provisioner: Optional[Provisioner] = None) -> int:
    console.configure_logging()
    argv = sys.argv[1:] if argv is None else argv
    try:
        args = parse_args(argv)
    except UsageError as exc:
        console.info(f"{exc}\nUse \"{PROG} --help\" to see all options\n{QUIT}")
        (provisioner.workspace if provisioner else Workspace()).clean()
        return 1

    if args.help:
        build_parser().print_help()
        return 0

    return run_setup(options_from_args(args), provisioner or Provisioner())


if __name__ == "__main__":  # pragma: no cover - exercised via callers
    sys.exit(main())
