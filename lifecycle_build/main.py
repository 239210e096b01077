# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Lifecycle build stage.

Main entry point for the ``cnb-build`` command. Runs every buildpack of a
previously detected group against the application directory and records
the resulting metadata for the export stage.

Usage:
    cnb-build -layers /layers -app /workspace -buildpacks /cnb/buildpacks
"""

import argparse
import configparser
import logging
import os
import sys
from typing import List, Mapping, Optional, Tuple

from dependency_injector import providers

from common.logging_utils import configure_logging, log_secure_info
from container import BuildContainer
from core.build.exceptions import BuildStageError, InvalidArgumentsError, LifecycleConfigError
from core.build.services import PLACEHOLDER_GROUP_PATH, PLACEHOLDER_PLAN_PATH
from core.build.value_objects import ApiVersion
from orchestrator.build.commands import RunBuildCommand
from orchestrator.build.error_classifier import CODE_SUCCESS

logger = logging.getLogger(__name__)

DEFAULT_BUILDPACKS_DIR = "/cnb/buildpacks"
DEFAULT_LAYERS_DIR = "/layers"
DEFAULT_APP_DIR = "."
DEFAULT_PLATFORM_DIR = "/platform"
DEFAULT_PLATFORM_API = "0.3"
LOG_LEVELS = ("debug", "info", "warn", "warning", "error")


class _LifecycleArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports bad flags as invalid arguments."""

    def error(self, message: str):
        raise InvalidArgumentsError(message)


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    """Build the flag parser; every flag defaults from the environment."""
    parser = _LifecycleArgumentParser(
        prog="cnb-build",
        description="Run the buildpacks of a detected group and record build metadata.",
    )
    parser.add_argument(
        "-buildpacks", "--buildpacks", dest="buildpacks_dir",
        default=environ.get("CNB_BUILDPACKS_DIR", DEFAULT_BUILDPACKS_DIR),
        help="path to buildpacks directory (CNB_BUILDPACKS_DIR)",
    )
    parser.add_argument(
        "-group", "--group", dest="group_path",
        default=environ.get("CNB_GROUP_PATH", PLACEHOLDER_GROUP_PATH),
        help="path to group.toml (CNB_GROUP_PATH)",
    )
    parser.add_argument(
        "-plan", "--plan", dest="plan_path",
        default=environ.get("CNB_PLAN_PATH", PLACEHOLDER_PLAN_PATH),
        help="path to plan.toml (CNB_PLAN_PATH)",
    )
    parser.add_argument(
        "-layers", "--layers", dest="layers_dir",
        default=environ.get("CNB_LAYERS_DIR", DEFAULT_LAYERS_DIR),
        help="path to layers directory (CNB_LAYERS_DIR)",
    )
    parser.add_argument(
        "-app", "--app", dest="app_dir",
        default=environ.get("CNB_APP_DIR", DEFAULT_APP_DIR),
        help="path to app directory (CNB_APP_DIR)",
    )
    parser.add_argument(
        "-platform", "--platform", dest="platform_dir",
        default=environ.get("CNB_PLATFORM_DIR", DEFAULT_PLATFORM_DIR),
        help="path to platform directory (CNB_PLATFORM_DIR)",
    )
    parser.add_argument(
        "-log-level", "--log-level", dest="log_level",
        type=str.lower, choices=LOG_LEVELS, default=None,
        help="logging level (CNB_LOG_LEVEL)",
    )
    parser.add_argument("positional_args", nargs="*", help=argparse.SUPPRESS)
    return parser


def parse_command(
    argv: Optional[List[str]], environ: Mapping[str, str]
) -> Tuple[RunBuildCommand, Optional[str]]:
    """Parse flags into a RunBuildCommand.

    Returns:
        The command and the log level given on the command line, if any.

    Raises:
        InvalidArgumentsError: If the flags cannot be parsed.
    """
    args = build_parser(environ).parse_args(argv)
    command = RunBuildCommand(
        buildpacks_dir=args.buildpacks_dir,
        group_path=args.group_path,
        plan_path=args.plan_path,
        layers_dir=args.layers_dir,
        app_dir=args.app_dir,
        platform_dir=args.platform_dir,
        platform_api=environ.get("CNB_PLATFORM_API", DEFAULT_PLATFORM_API),
        positional_args=tuple(args.positional_args),
    )
    return command, args.log_level


def _platform_api_or_none(value: str) -> Optional[ApiVersion]:
    try:
        return ApiVersion.parse(value)
    except ValueError:
        return None


def main(
    argv: Optional[List[str]] = None,
    container: Optional[BuildContainer] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Run the build stage and return the process exit code."""
    environ = os.environ if environ is None else environ
    if container is None:
        container = BuildContainer(environ=providers.Object(environ))
    classifier = container.error_classifier()
    platform_api = _platform_api_or_none(environ.get("CNB_PLATFORM_API", DEFAULT_PLATFORM_API))

    env_level = environ.get("CNB_LOG_LEVEL", "info").lower()
    configure_logging(env_level if env_level in LOG_LEVELS else "info")
    try:
        command, log_level = parse_command(argv, environ)
        if log_level:
            configure_logging(log_level)
        if command.positional_args:
            raise InvalidArgumentsError()

        try:
            config = container.config()
        except (FileNotFoundError, ValueError, configparser.Error) as exc:
            raise LifecycleConfigError(str(exc), cause=exc) from exc
        if not log_level and config.log_level.lower() in LOG_LEVELS:
            configure_logging(config.log_level.lower())

        result = container.run_build_use_case().execute(command)
    except BuildStageError as err:
        log_secure_info("error", f"ERROR: {err.describe()}", logger_name=__name__)
        logger.debug("Build outcome: %s", classifier.classify(err).value)
        return classifier.exit_code(err, platform_api)

    logger.info(
        "Build succeeded for %d buildpacks; metadata at %s",
        len(result.metadata.buildpacks),
        result.metadata_path,
    )
    return CODE_SUCCESS


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
