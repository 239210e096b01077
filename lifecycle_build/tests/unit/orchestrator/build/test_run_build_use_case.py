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

"""Unit tests for RunBuildUseCase."""

import os

import pytest

from core.build.entities import (
    BuildMetadata,
    BuildPlan,
    BuildState,
    BuildpackGroup,
    GroupBuildpack,
    LayerDescriptor,
)
from core.build.exceptions import (
    BuildInfrastructureError,
    BuildpackFailedError,
    ConfigReadError,
    ErrorKind,
    IncompatibleBuildpackApiError,
    IncompatiblePlatformApiError,
    InvalidArgumentsError,
    MetadataWriteError,
    PrivilegedExecutionError,
)
from core.build.services import (
    PLACEHOLDER_GROUP_PATH,
    PLACEHOLDER_PLAN_PATH,
    BuildPathResolver,
    BuildpackApiVerifier,
    PrivilegeGuard,
)
from core.build.value_objects import ApiVersion
from orchestrator.build.commands import RunBuildCommand
from orchestrator.build.use_cases import RunBuildUseCase
from tests.mocks.build_fakes import (
    MockGroupRepository,
    MockMetadataRepository,
    MockPlanRepository,
    MockPrivilegeChecker,
    SpyBuildExecutor,
    sample_group,
    sample_metadata,
    sample_plan,
)


def _verifier(supported=("0.9", "0.10")):
    return BuildpackApiVerifier(
        supported_buildpack_apis=supported,
        supported_platform_apis=["0.8", "0.9", "0.10"],
    )


class TestRunBuildUseCase:
    """Test cases for RunBuildUseCase."""

    @pytest.fixture
    def group_repo(self):
        """Create a group repository returning the sample group."""
        return MockGroupRepository()

    @pytest.fixture
    def plan_repo(self):
        """Create a plan repository returning the sample plan."""
        return MockPlanRepository()

    @pytest.fixture
    def metadata_repo(self):
        """Create a recording metadata repository."""
        return MockMetadataRepository()

    @pytest.fixture
    def privilege_checker(self):
        """Create an unprivileged checker."""
        return MockPrivilegeChecker(privileged=False)

    @pytest.fixture
    def executor(self):
        """Create an execution engine spy."""
        return SpyBuildExecutor()

    @pytest.fixture
    def environ(self):
        """Environment the use case snapshots."""
        return {"PATH": "/usr/bin:/bin", "HOME": "/home/cnb", "REGISTRY_TOKEN": "s3cr3t"}

    @pytest.fixture
    def use_case(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, group_repo, plan_repo, metadata_repo, privilege_checker, executor, environ
    ):
        """Create use case with mocked dependencies."""
        return RunBuildUseCase(
            group_repo=group_repo,
            plan_repo=plan_repo,
            metadata_repo=metadata_repo,
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(),
            privilege_guard=PrivilegeGuard(privilege_checker),
            executor=executor,
            environ=environ,
        )

    @pytest.fixture
    def command(self):
        """Create a command with placeholder group and plan paths."""
        return RunBuildCommand(
            buildpacks_dir="/cnb/buildpacks",
            layers_dir="/layers",
            app_dir="/workspace",
            platform_dir="/platform",
            platform_api="0.9",
        )

    def test_success(self, use_case, command, executor, metadata_repo):
        """Happy path: engine runs once and metadata is saved unchanged."""
        result = use_case.execute(command)

        assert result.state == BuildState.SUCCEEDED
        assert use_case.state == BuildState.SUCCEEDED
        assert executor.call_count == 1
        assert metadata_repo.saved == [(sample_metadata(), "/layers")]
        assert result.metadata == sample_metadata()
        assert result.metadata_path == os.path.join("/layers", "config", "metadata.toml")

    def test_context_handed_to_engine(self, use_case, command, executor):
        """The engine receives the group, plan and snapshot untouched."""
        use_case.execute(command)

        context = executor.contexts[0]
        assert context.group == sample_group()
        assert context.plan == sample_plan()
        assert context.buildpacks_dir == os.path.abspath("/cnb/buildpacks")
        assert context.app_dir == "/workspace"
        assert context.layers_dir == "/layers"
        assert context.platform_dir == "/platform"
        assert context.platform_api == ApiVersion(0, 9)
        assert context.env.to_dict() == {"PATH": "/usr/bin:/bin", "HOME": "/home/cnb"}

    def test_placeholder_paths_resolved(self, use_case, command, group_repo, plan_repo):
        """Placeholders are replaced with layers directory defaults."""
        result = use_case.execute(command)

        assert group_repo.loaded_paths == [os.path.join("/layers", "group.toml")]
        assert plan_repo.loaded_paths == [os.path.join("/layers", "plan.toml")]
        assert result.group_path == os.path.join("/layers", "group.toml")

    def test_explicit_paths_used(self, use_case, group_repo, plan_repo):
        """Explicit paths are read as given."""
        command = RunBuildCommand(
            group_path="/in/group.toml", plan_path="/in/plan.toml", platform_api="0.9"
        )

        use_case.execute(command)

        assert group_repo.loaded_paths == ["/in/group.toml"]
        assert plan_repo.loaded_paths == ["/in/plan.toml"]

    def test_positional_args_rejected_before_any_read(
        self, use_case, group_repo, plan_repo, executor
    ):
        """Positional arguments fail before any file is touched."""
        command = RunBuildCommand(platform_api="0.9", positional_args=("extra",))

        with pytest.raises(InvalidArgumentsError):
            use_case.execute(command)

        assert group_repo.loaded_paths == []
        assert plan_repo.loaded_paths == []
        assert executor.call_count == 0
        assert use_case.state == BuildState.FAILED

    def test_incompatible_platform_api(self, use_case, group_repo, executor):
        """An unsupported platform API fails before reading the group."""
        command = RunBuildCommand(platform_api="0.3")

        with pytest.raises(IncompatiblePlatformApiError):
            use_case.execute(command)

        assert group_repo.loaded_paths == []
        assert executor.call_count == 0

    def test_group_read_failure(self, command, plan_repo, metadata_repo, executor):
        """An unreadable group stops the build before the plan is read."""
        group_repo = MockGroupRepository(
            error=ConfigReadError("/layers/group.toml", "read buildpack group", "missing")
        )
        use_case = RunBuildUseCase(
            group_repo=group_repo,
            plan_repo=plan_repo,
            metadata_repo=metadata_repo,
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(),
            privilege_guard=PrivilegeGuard(MockPrivilegeChecker()),
            executor=executor,
            environ={},
        )

        with pytest.raises(ConfigReadError) as exc_info:
            use_case.execute(command)

        assert exc_info.value.action == "read buildpack group"
        assert plan_repo.loaded_paths == []
        assert executor.call_count == 0
        assert metadata_repo.saved == []

    def test_incompatible_buildpack_api_never_builds(
        self, command, plan_repo, metadata_repo, executor
    ):
        """A single incompatible buildpack keeps the engine from running."""
        group = BuildpackGroup(buildpacks=[
            GroupBuildpack(id="buildpack/a", version="1", api="0.9"),
            GroupBuildpack(id="buildpack/b", version="1", api="0.1"),
        ])
        privilege_checker = MockPrivilegeChecker()
        use_case = RunBuildUseCase(
            group_repo=MockGroupRepository(group=group),
            plan_repo=plan_repo,
            metadata_repo=metadata_repo,
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(),
            privilege_guard=PrivilegeGuard(privilege_checker),
            executor=executor,
            environ={},
        )

        with pytest.raises(IncompatibleBuildpackApiError) as exc_info:
            use_case.execute(command)

        assert exc_info.value.buildpack == "buildpack/b@1"
        assert executor.call_count == 0
        assert privilege_checker.calls == 0
        assert metadata_repo.saved == []
        assert use_case.state == BuildState.FAILED

    def test_privileged_never_builds(self, command, group_repo, plan_repo, metadata_repo, executor):
        """Running as root stops the build before the engine."""
        use_case = RunBuildUseCase(
            group_repo=group_repo,
            plan_repo=plan_repo,
            metadata_repo=metadata_repo,
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(),
            privilege_guard=PrivilegeGuard(MockPrivilegeChecker(privileged=True)),
            executor=executor,
            environ={},
        )

        with pytest.raises(PrivilegedExecutionError):
            use_case.execute(command)

        assert executor.call_count == 0
        assert metadata_repo.saved == []

    def test_buildpack_failure_propagates(self, command, group_repo, plan_repo, metadata_repo):
        """Buildpack failures keep their buildpack classification."""
        executor = SpyBuildExecutor(error=BuildpackFailedError("buildpack/a@1.0", 1))
        use_case = RunBuildUseCase(
            group_repo=group_repo,
            plan_repo=plan_repo,
            metadata_repo=metadata_repo,
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(),
            privilege_guard=PrivilegeGuard(MockPrivilegeChecker()),
            executor=executor,
            environ={},
        )

        with pytest.raises(BuildpackFailedError) as exc_info:
            use_case.execute(command)

        assert exc_info.value.kind == ErrorKind.BUILDPACK
        assert executor.call_count == 1
        assert metadata_repo.saved == []
        assert use_case.state == BuildState.FAILED

    def test_unexpected_engine_error_is_infrastructure(
        self, command, group_repo, plan_repo, metadata_repo
    ):
        """Anything else raised by the engine is an infrastructure failure."""
        cause = RuntimeError("store unreachable")
        use_case = RunBuildUseCase(
            group_repo=group_repo,
            plan_repo=plan_repo,
            metadata_repo=metadata_repo,
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(),
            privilege_guard=PrivilegeGuard(MockPrivilegeChecker()),
            executor=SpyBuildExecutor(error=cause),
            environ={},
        )

        with pytest.raises(BuildInfrastructureError) as exc_info:
            use_case.execute(command)

        assert exc_info.value.kind == ErrorKind.INFRASTRUCTURE
        assert exc_info.value.cause is cause

    def test_metadata_write_failure(self, command, group_repo, plan_repo, executor):
        """A build whose metadata cannot be recorded fails."""
        use_case = RunBuildUseCase(
            group_repo=group_repo,
            plan_repo=plan_repo,
            metadata_repo=MockMetadataRepository(
                error=MetadataWriteError("/layers/config/metadata.toml")
            ),
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(),
            privilege_guard=PrivilegeGuard(MockPrivilegeChecker()),
            executor=executor,
            environ={},
        )

        with pytest.raises(MetadataWriteError):
            use_case.execute(command)

        assert executor.call_count == 1
        assert use_case.state == BuildState.FAILED

    def test_single_buildpack_scenario(self, command, metadata_repo):
        """One compatible buildpack with an empty plan builds and records layers verbatim."""
        group = BuildpackGroup(buildpacks=[
            GroupBuildpack(id="buildpack/a", version="1", api="0.9"),
        ])
        layers = (
            LayerDescriptor(buildpack_id="buildpack/a", name="deps", launch=True, cache=True),
        )
        executor = SpyBuildExecutor(
            metadata=BuildMetadata(buildpacks=group.buildpacks, layers=layers)
        )
        use_case = RunBuildUseCase(
            group_repo=MockGroupRepository(group=group),
            plan_repo=MockPlanRepository(plan=BuildPlan()),
            metadata_repo=metadata_repo,
            path_resolver=BuildPathResolver(),
            api_verifier=_verifier(supported=("0.9", "0.10")),
            privilege_guard=PrivilegeGuard(MockPrivilegeChecker()),
            executor=executor,
            environ={},
        )

        use_case.execute(command)

        assert executor.call_count == 1
        assert executor.contexts[0].group == group
        assert metadata_repo.saved[0][0].layers == layers

    def test_execute_resets_state(self, use_case, command):
        """The use case can run again after a failure."""
        with pytest.raises(InvalidArgumentsError):
            use_case.execute(RunBuildCommand(platform_api="0.9", positional_args=("x",)))

        result = use_case.execute(command)

        assert result.state == BuildState.SUCCEEDED

    def test_placeholders_are_default(self):
        """Commands default to placeholder paths."""
        command = RunBuildCommand()
        assert command.group_path == PLACEHOLDER_GROUP_PATH
        assert command.plan_path == PLACEHOLDER_PLAN_PATH
