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

"""RunBuild use case implementation."""

import logging
import os
from typing import Mapping, Optional, Tuple

from common.logging_utils import log_secure_info, redact_env
from core.build.entities import (
    BuildContext,
    BuildMetadata,
    BuildPlan,
    BuildState,
    BuildpackGroup,
    can_transition,
)
from core.build.exceptions import (
    BuildInfrastructureError,
    BuildStageError,
    BuildpacksDirError,
    InvalidArgumentsError,
)
from core.build.repositories import (
    BuildExecutor,
    GroupRepository,
    MetadataRepository,
    PlanRepository,
)
from core.build.services import BuildPathResolver, BuildpackApiVerifier, PrivilegeGuard
from core.build.value_objects import ApiVersion, BuildEnv, BuildPaths
from orchestrator.build.commands import RunBuildCommand
from orchestrator.build.dtos import BuildResult

logger = logging.getLogger(__name__)


class RunBuildUseCase:
    """Use case for the build stage.

    This use case runs the gates in a fixed order with the following guarantees:
    - No positional arguments: rejected before any file is read
    - Path resolution: placeholder group/plan paths get platform defaults
    - Config loading: group and plan decoded before anything runs
    - API compatibility: every buildpack checked before the engine is called
    - Privilege guard: never runs buildpacks as root
    - Single engine call: the execution engine is invoked exactly once
    - Persistence: metadata written unchanged to the layers directory

    Any gate failure moves straight to FAILED and propagates to the caller.

    Attributes:
        group_repo: Group file reader.
        plan_repo: Plan file reader.
        metadata_repo: Metadata writer.
        path_resolver: Default path resolver.
        api_verifier: Buildpack/platform API verifier.
        privilege_guard: Privilege guard.
        executor: Execution engine.
    """

    def __init__(
        self,
        group_repo: GroupRepository,
        plan_repo: PlanRepository,
        metadata_repo: MetadataRepository,
        path_resolver: BuildPathResolver,
        api_verifier: BuildpackApiVerifier,
        privilege_guard: PrivilegeGuard,
        executor: BuildExecutor,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:  # pylint: disable=too-many-arguments,too-many-positional-arguments
        """Initialize use case with repository and service dependencies.

        Args:
            group_repo: Group repository implementation.
            plan_repo: Plan repository implementation.
            metadata_repo: Metadata repository implementation.
            path_resolver: Resolver for default group/plan paths.
            api_verifier: API compatibility verifier.
            privilege_guard: Guard against privileged execution.
            executor: Execution engine that runs the buildpacks.
            environ: Process environment to snapshot. Defaults to os.environ.
        """
        self._group_repo = group_repo
        self._plan_repo = plan_repo
        self._metadata_repo = metadata_repo
        self._path_resolver = path_resolver
        self._api_verifier = api_verifier
        self._privilege_guard = privilege_guard
        self._executor = executor
        self._environ = environ
        self._state = BuildState.INIT

    @property
    def state(self) -> BuildState:
        """Current state of the invocation."""
        return self._state

    def execute(self, command: RunBuildCommand) -> BuildResult:
        """Run the build stage.

        Args:
            command: RunBuild command with resolved flags.

        Returns:
            BuildResult with the persisted metadata.

        Raises:
            InvalidArgumentsError: If positional arguments were supplied.
            IncompatiblePlatformApiError: If the platform API is unsupported.
            ConfigReadError: If the group or plan cannot be read.
            IncompatibleBuildpackApiError: If any buildpack API is unsupported.
            PrivilegedExecutionError: If running with elevated privileges.
            BuildpacksDirError: If the buildpacks directory cannot be resolved.
            BuildpackFailedError: If a buildpack's build logic failed.
            BuildInfrastructureError: If the engine failed for any other reason.
            MetadataWriteError: If the metadata could not be written.
        """
        self._state = BuildState.INIT
        try:
            return self._run(command)
        except BuildStageError as exc:
            self._fail(exc)
            raise

    def _run(self, command: RunBuildCommand) -> BuildResult:
        platform_api = self._validate_invocation(command)

        paths = self._path_resolver.resolve(
            command.group_path, command.plan_path, platform_api, command.layers_dir
        )
        self._transition(BuildState.PATHS_RESOLVED)

        group, plan = self._read_data(paths)
        self._transition(BuildState.CONFIG_LOADED)

        self._api_verifier.verify(group)
        self._transition(BuildState.VERIFIED)

        self._privilege_guard.check_not_privileged()
        self._transition(BuildState.PRIVILEGE_CHECKED)

        context = self._build_context(command, platform_api, group, plan)
        self._transition(BuildState.BUILDING)
        metadata = self._build(context)

        metadata_path = self._metadata_repo.save(metadata, command.layers_dir)
        self._transition(BuildState.SUCCEEDED)
        log_secure_info(
            "info", "Build metadata written", str(metadata_path), logger_name=__name__
        )

        return BuildResult(
            state=self._state,
            metadata=metadata,
            metadata_path=str(metadata_path),
            group_path=paths.group_path,
            plan_path=paths.plan_path,
        )

    def _validate_invocation(self, command: RunBuildCommand) -> ApiVersion:
        """Reject positional arguments and check the platform API."""
        if command.positional_args:
            logger.error(
                "Received %d unexpected positional arguments", len(command.positional_args)
            )
            raise InvalidArgumentsError()
        return self._api_verifier.verify_platform_api(command.platform_api)

    def _read_data(self, paths: BuildPaths) -> Tuple[BuildpackGroup, BuildPlan]:
        """Load the group and the plan."""
        group = self._group_repo.load(paths.group_path)
        plan = self._plan_repo.load(paths.plan_path)
        logger.info(
            "Loaded group of %d buildpacks (%s) and plan with %d entries",
            len(group),
            ", ".join(group.ids),
            len(plan.entries),
        )
        return group, plan

    def _build_context(
        self,
        command: RunBuildCommand,
        platform_api: ApiVersion,
        group: BuildpackGroup,
        plan: BuildPlan,
    ) -> BuildContext:
        """Assemble the engine input, capturing the environment once."""
        try:
            buildpacks_dir = os.path.abspath(command.buildpacks_dir)
        except (OSError, ValueError) as exc:
            raise BuildpacksDirError(command.buildpacks_dir, cause=exc) from exc

        env = BuildEnv.from_environ(os.environ if self._environ is None else self._environ)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Build environment: %s", redact_env(env.vars))

        return BuildContext(
            buildpacks_dir=buildpacks_dir,
            app_dir=command.app_dir,
            layers_dir=command.layers_dir,
            platform_dir=command.platform_dir,
            platform_api=platform_api,
            env=env,
            group=group,
            plan=plan,
        )

    def _build(self, context: BuildContext) -> BuildMetadata:
        """Hand the context to the execution engine exactly once."""
        try:
            return self._executor.build(context)
        except BuildStageError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise BuildInfrastructureError(str(exc) or type(exc).__name__, cause=exc) from exc

    def _transition(self, target: BuildState) -> None:
        if not can_transition(self._state, target):
            raise BuildInfrastructureError(
                f"invalid build state transition {self._state.value} -> {target.value}"
            )
        logger.debug("Build state %s -> %s", self._state.value, target.value)
        self._state = target

    def _fail(self, error: BuildStageError) -> None:
        logger.debug(
            "Build state %s -> %s (%s)",
            self._state.value,
            BuildState.FAILED.value,
            error.kind.value,
        )
        self._state = BuildState.FAILED
