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

"""Unit tests for build stage exceptions."""

import pytest

from core.build.exceptions import (
    BuildInfrastructureError,
    BuildStageError,
    BuildpackFailedError,
    BuildpackNotFoundError,
    ConfigReadError,
    ErrorKind,
    ExitReason,
    IncompatibleBuildpackApiError,
    IncompatiblePlatformApiError,
    InvalidArgumentsError,
    InvalidBuildpackOutputError,
    MetadataWriteError,
    PrivilegedExecutionError,
)


class TestBuildStageErrors:
    """Tests for error kinds, reasons and messages."""

    @pytest.mark.parametrize("error,kind,reason", [
        (InvalidArgumentsError(), ErrorKind.INVALID_ARGUMENTS, ExitReason.INVALID_ARGS),
        (ConfigReadError("group.toml", "read buildpack group", "bad"),
         ErrorKind.INFRASTRUCTURE, ExitReason.FAILED),
        (IncompatiblePlatformApiError("0.1"),
         ErrorKind.INFRASTRUCTURE, ExitReason.INCOMPATIBLE_PLATFORM_API),
        (IncompatibleBuildpackApiError([("a@1", "0.1")]),
         ErrorKind.INFRASTRUCTURE, ExitReason.INCOMPATIBLE_BUILDPACK_API),
        (PrivilegedExecutionError(), ErrorKind.INFRASTRUCTURE, ExitReason.FAILED),
        (BuildpackNotFoundError("a@1", "/cnb/a/1/buildpack.toml"),
         ErrorKind.INFRASTRUCTURE, ExitReason.BUILD_ERROR),
        (BuildpackFailedError("a@1", 2), ErrorKind.BUILDPACK, ExitReason.FAILED_BUILD_WITH_ERRORS),
        (InvalidBuildpackOutputError("a@1", "launch.toml", "bad"),
         ErrorKind.BUILDPACK, ExitReason.FAILED_BUILD_WITH_ERRORS),
        (BuildInfrastructureError("boom"), ErrorKind.INFRASTRUCTURE, ExitReason.BUILD_ERROR),
        (MetadataWriteError("/layers/config/metadata.toml"),
         ErrorKind.INFRASTRUCTURE, ExitReason.FAILED),
    ])
    def test_kind_and_reason(self, error, kind, reason):
        """Each error carries its classification."""
        assert isinstance(error, BuildStageError)
        assert error.kind == kind
        assert error.reason == reason

    def test_describe_names_the_action(self):
        """Operator output is 'failed to <action>: <message>'."""
        error = ConfigReadError("/layers/group.toml", "read buildpack group", "file does not exist")
        assert error.describe() == (
            "failed to read buildpack group: /layers/group.toml: file does not exist"
        )

    def test_invalid_arguments_message(self):
        """Positional arguments are reported as unexpected."""
        assert InvalidArgumentsError().describe() == (
            "failed to parse arguments: received unexpected arguments"
        )

    def test_incompatible_buildpack_api_reports_first_and_all(self):
        """The first offender names the action; all offenders are listed."""
        error = IncompatibleBuildpackApiError([("a@1", "0.1"), ("b@2", "9.9")])

        assert error.buildpack == "a@1"
        assert error.api == "0.1"
        assert error.action == "set API for buildpack 'a@1'"
        assert "b@2 (api 9.9)" in error.message
        assert len(error.incompatibilities) == 2

    def test_incompatible_buildpack_api_requires_entry(self):
        """At least one incompatibility is needed."""
        with pytest.raises(ValueError):
            IncompatibleBuildpackApiError([])

    def test_buildpack_failure_includes_stderr(self):
        """Captured stderr becomes part of the message."""
        error = BuildpackFailedError("a@1", 3, "missing dependency\n")

        assert error.exit_code == 3
        assert error.message == "buildpack a@1 exited with status 3: missing dependency"

    def test_privileged_message(self):
        """Privileged runs are refused."""
        assert PrivilegedExecutionError().describe() == "failed to build: refusing to run as root"

    def test_cause_is_kept(self):
        """The underlying exception is available."""
        cause = OSError("disk full")
        error = MetadataWriteError("/layers/config/metadata.toml", cause=cause)

        assert error.cause is cause
        assert error.action == "write build metadata"
