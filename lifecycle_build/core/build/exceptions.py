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

"""Build stage domain exceptions.

Every failure carries an explicit :class:`ErrorKind` so that callers can
tell a failing buildpack apart from a broken platform without inspecting
message text.
"""

from enum import Enum
from typing import Optional, Sequence, Tuple


class ErrorKind(str, Enum):
    """Who is responsible for a failure."""

    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    BUILDPACK = "BUILDPACK"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class ExitReason(str, Enum):
    """Finer grained reason used to pick a numeric exit code."""

    FAILED = "FAILED"
    INVALID_ARGS = "INVALID_ARGS"
    INCOMPATIBLE_PLATFORM_API = "INCOMPATIBLE_PLATFORM_API"
    INCOMPATIBLE_BUILDPACK_API = "INCOMPATIBLE_BUILDPACK_API"
    FAILED_BUILD_WITH_ERRORS = "FAILED_BUILD_WITH_ERRORS"
    BUILD_ERROR = "BUILD_ERROR"


class BuildStageError(Exception):
    """Base exception for build stage errors."""

    kind: ErrorKind = ErrorKind.INFRASTRUCTURE
    reason: ExitReason = ExitReason.FAILED

    def __init__(
        self,
        message: str,
        action: str = "build",
        cause: Optional[BaseException] = None,
    ) -> None:
        """Initialize build stage error.

        Args:
            message: Human-readable error description.
            action: What the lifecycle was doing, e.g. ``read buildpack group``.
            cause: Underlying exception, if any.
        """
        super().__init__(message)
        self.message = message
        self.action = action
        self.cause = cause

    def describe(self) -> str:
        """Return the operator-facing ``failed to <action>: <message>`` line."""
        return f"failed to {self.action}: {self.message}"


class InvalidArgumentsError(BuildStageError):
    """Command invoked with unexpected arguments or unparseable flags."""

    kind = ErrorKind.INVALID_ARGUMENTS
    reason = ExitReason.INVALID_ARGS

    def __init__(self, message: str = "received unexpected arguments") -> None:
        super().__init__(message, action="parse arguments")


class LifecycleConfigError(BuildStageError):
    """Lifecycle configuration could not be loaded."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, action="load lifecycle configuration", cause=cause)


class ConfigReadError(BuildStageError):
    """Group or plan file is missing, unreadable or malformed."""

    def __init__(
        self,
        path: str,
        action: str,
        reason: str = "",
        cause: Optional[BaseException] = None,
    ) -> None:
        """Initialize config read error.

        Args:
            path: File that could not be decoded.
            action: ``read buildpack group`` or ``parse detect plan``.
            reason: Why the file was rejected.
            cause: Underlying decode or I/O exception.
        """
        super().__init__(f"{path}: {reason}", action=action, cause=cause)
        self.path = path
        self.reason_text = reason


class IncompatiblePlatformApiError(BuildStageError):
    """Platform API requested by the caller is not supported."""

    reason = ExitReason.INCOMPATIBLE_PLATFORM_API

    def __init__(self, platform_api: str, supported: Sequence[str] = ()) -> None:
        super().__init__(
            f"platform API version '{platform_api}' is incompatible with the lifecycle"
            + (f" (supported: {', '.join(supported)})" if supported else ""),
            action="set platform API",
        )
        self.platform_api = platform_api
        self.supported = tuple(supported)


class IncompatibleBuildpackApiError(BuildStageError):
    """One or more buildpacks declare an unsupported buildpack API."""

    reason = ExitReason.INCOMPATIBLE_BUILDPACK_API

    def __init__(self, incompatibilities: Sequence[Tuple[str, str]]) -> None:
        """Initialize incompatible buildpack API error.

        Args:
            incompatibilities: ``(buildpack, api)`` pairs in group order.
                The first pair is the one reported in the action.
        """
        if not incompatibilities:
            raise ValueError("At least one incompatible buildpack is required")
        self.incompatibilities = tuple(incompatibilities)
        self.buildpack, self.api = self.incompatibilities[0]
        details = ", ".join(f"{bp} (api {api})" for bp, api in self.incompatibilities)
        super().__init__(
            f"buildpack API version '{self.api}' is incompatible with the lifecycle; "
            f"incompatible buildpacks: {details}",
            action=f"set API for buildpack '{self.buildpack}'",
        )


class PrivilegedExecutionError(BuildStageError):
    """Build refused because the process holds elevated privileges."""

    def __init__(self) -> None:
        super().__init__("refusing to run as root", action="build")


class BuildpacksDirError(BuildStageError):
    """Buildpacks directory could not be resolved."""

    reason = ExitReason.BUILD_ERROR

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"resolve buildpacks directory {path!r}: {cause}", cause=cause)
        self.path = path


class BuildpackNotFoundError(BuildStageError):
    """Buildpack referenced by the group is missing from the store."""

    reason = ExitReason.BUILD_ERROR

    def __init__(
        self,
        buildpack: str,
        path: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(f"buildpack {buildpack} not found at {path}", cause=cause)
        self.buildpack = buildpack
        self.path = path


class BuildpackFailedError(BuildStageError):
    """A buildpack's own build logic failed."""

    kind = ErrorKind.BUILDPACK
    reason = ExitReason.FAILED_BUILD_WITH_ERRORS

    def __init__(
        self,
        buildpack: str,
        exit_code: int,
        error_output: str = "",
    ) -> None:
        """Initialize buildpack failure.

        Args:
            buildpack: Buildpack that failed.
            exit_code: Exit status of the build executable.
            error_output: Captured stderr of the build executable.
        """
        message = f"buildpack {buildpack} exited with status {exit_code}"
        if error_output.strip():
            message = f"{message}: {error_output.strip()}"
        super().__init__(message)
        self.buildpack = buildpack
        self.exit_code = exit_code
        self.error_output = error_output


class BuildInfrastructureError(BuildStageError):
    """The execution engine failed for reasons outside buildpack logic."""

    reason = ExitReason.BUILD_ERROR

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, cause=cause)


class MetadataWriteError(BuildStageError):
    """Build succeeded but its metadata could not be recorded."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{path}: {cause}", action="write build metadata", cause=cause)
        self.path = path


class InvalidBuildpackOutputError(BuildStageError):
    """A buildpack wrote a layer or launch file that cannot be decoded."""

    kind = ErrorKind.BUILDPACK
    reason = ExitReason.FAILED_BUILD_WITH_ERRORS

    def __init__(self, buildpack: str, path: str, reason: str = "") -> None:
        super().__init__(f"buildpack {buildpack} wrote invalid {path}: {reason}")
        self.buildpack = buildpack
        self.path = path
