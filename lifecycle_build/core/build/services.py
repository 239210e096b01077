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

"""Domain services for the Build stage."""

import logging
import os
from typing import Iterable, List, Optional, Tuple

from core.build.entities import BuildpackGroup
from core.build.exceptions import (
    IncompatibleBuildpackApiError,
    IncompatiblePlatformApiError,
    InvalidArgumentsError,
    PrivilegedExecutionError,
)
from core.build.repositories import PrivilegeChecker
from core.build.value_objects import ApiVersion, BuildPaths

logger = logging.getLogger(__name__)

DEFAULT_GROUP_FILE = "group.toml"
DEFAULT_PLAN_FILE = "plan.toml"
PLACEHOLDER_GROUP_PATH = os.path.join("<layers>", DEFAULT_GROUP_FILE)
PLACEHOLDER_PLAN_PATH = os.path.join("<layers>", DEFAULT_PLAN_FILE)

# Platform API from which group/plan default to the layers directory
LAYERS_DEFAULT_PLATFORM_API = ApiVersion(0, 5)


class BuildPathResolver:
    """Computes default group and plan locations.

    Pure: the result depends only on the platform API and layers directory.
    """

    @staticmethod
    def default_path(file_name: str, platform_api: ApiVersion, layers_dir: str) -> str:
        """Return the default location of ``file_name``.

        Before platform API 0.5 the default directory was the working
        directory; an empty layers directory falls back the same way.
        """
        if platform_api < LAYERS_DEFAULT_PLATFORM_API or not layers_dir:
            return os.path.normpath(os.path.join(".", file_name))
        return os.path.join(layers_dir, file_name)

    def resolve(
        self,
        group_path: str,
        plan_path: str,
        platform_api: ApiVersion,
        layers_dir: str,
    ) -> BuildPaths:
        """Replace placeholder paths with their defaults.

        Args:
            group_path: Group path as given by the caller.
            plan_path: Plan path as given by the caller.
            platform_api: Platform API version.
            layers_dir: Layers directory.

        Returns:
            Resolved group and plan paths. Explicit paths are kept as given.

        Raises:
            InvalidArgumentsError: If a group or plan path is empty.
        """
        for flag, value in (("group", group_path), ("plan", plan_path)):
            if not value or not value.strip():
                raise InvalidArgumentsError(f"{flag} path cannot be empty")
        if group_path == PLACEHOLDER_GROUP_PATH:
            group_path = self.default_path(DEFAULT_GROUP_FILE, platform_api, layers_dir)
        if plan_path == PLACEHOLDER_PLAN_PATH:
            plan_path = self.default_path(DEFAULT_PLAN_FILE, platform_api, layers_dir)
        return BuildPaths(group_path=group_path, plan_path=plan_path)


class BuildpackApiVerifier:
    """Checks buildpack and platform API versions against what is implemented."""

    def __init__(
        self,
        supported_buildpack_apis: Iterable[str],
        deprecated_buildpack_apis: Iterable[str] = (),
        supported_platform_apis: Iterable[str] = (),
        deprecation_mode: str = "warn",
    ) -> None:
        """Initialize verifier.

        Args:
            supported_buildpack_apis: Buildpack API versions this lifecycle implements.
            deprecated_buildpack_apis: Supported versions scheduled for removal.
            supported_platform_apis: Platform API versions this lifecycle implements.
            deprecation_mode: ``warn``, ``error`` or ``quiet``.
        """
        self._supported = [ApiVersion.parse(v) for v in supported_buildpack_apis]
        self._deprecated = [ApiVersion.parse(v) for v in deprecated_buildpack_apis]
        self._supported_platform = [ApiVersion.parse(v) for v in supported_platform_apis]
        self._deprecation_mode = deprecation_mode

    def verify_platform_api(self, platform_api: str) -> ApiVersion:
        """Parse and check the platform API.

        Raises:
            IncompatiblePlatformApiError: If the version is unparseable or unsupported.
        """
        try:
            version = ApiVersion.parse(platform_api)
        except ValueError as exc:
            raise IncompatiblePlatformApiError(platform_api) from exc
        if self._supported_platform and not version.is_supported_by(self._supported_platform):
            raise IncompatiblePlatformApiError(
                platform_api, [str(v) for v in self._supported_platform]
            )
        return version

    def check_buildpack(self, buildpack: str, api: str) -> Optional[str]:
        """Check one buildpack API.

        Returns:
            None if compatible, otherwise the reason it is not.
        """
        try:
            requested = ApiVersion.parse(api)
        except ValueError:
            return f"cannot parse buildpack API '{api}'"

        if not requested.is_supported_by(self._supported):
            return f"buildpack API version '{api}' is incompatible with the lifecycle"

        if requested.is_supported_by(self._deprecated):
            if self._deprecation_mode == "error":
                return f"buildpack API version '{api}' is deprecated"
            if self._deprecation_mode == "warn":
                logger.warning(
                    "Buildpack '%s' requests deprecated API '%s'", buildpack, api
                )
        return None

    def verify(self, group: BuildpackGroup) -> None:
        """Verify every buildpack in the group.

        All entries are checked so the operator sees every incompatibility
        at once; a single offending entry is enough to reject the group.

        Raises:
            IncompatibleBuildpackApiError: If any buildpack is incompatible.
        """
        incompatible: List[Tuple[str, str]] = []
        for buildpack in group:
            api = buildpack.effective_api
            problem = self.check_buildpack(str(buildpack), api)
            if problem is not None:
                logger.error("Buildpack '%s': %s", buildpack, problem)
                incompatible.append((str(buildpack), api))

        if incompatible:
            raise IncompatibleBuildpackApiError(incompatible)
        logger.debug("Verified buildpack APIs for %d buildpacks", len(group))


class PrivilegeGuard:
    """Refuses to run third-party buildpack code with elevated rights."""

    def __init__(self, privilege_checker: PrivilegeChecker) -> None:
        """Initialize guard with a privilege checker."""
        self._privilege_checker = privilege_checker

    def check_not_privileged(self) -> None:
        """Raise if the process is privileged.

        Raises:
            PrivilegedExecutionError: If the process holds elevated privileges.
        """
        if self._privilege_checker.is_privileged():
            logger.error("Build invoked with elevated privileges")
            raise PrivilegedExecutionError()
