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

"""Maps build stage failures to process exit outcomes."""

from enum import Enum
from typing import Dict, Optional

from core.build.exceptions import BuildStageError, ErrorKind, ExitReason
from core.build.value_objects import ApiVersion

CODE_SUCCESS = 0

# Platform API from which build exit codes moved to the 5x range
RANGED_CODES_PLATFORM_API = ApiVersion(0, 6)

_COMMON_CODES: Dict[ExitReason, int] = {
    ExitReason.FAILED: 1,
    ExitReason.INVALID_ARGS: 3,
    ExitReason.INCOMPATIBLE_PLATFORM_API: 11,
    ExitReason.INCOMPATIBLE_BUILDPACK_API: 12,
}

_BUILD_CODES: Dict[ExitReason, int] = {
    ExitReason.FAILED_BUILD_WITH_ERRORS: 51,
    ExitReason.BUILD_ERROR: 52,
}

_LEGACY_BUILD_CODES: Dict[ExitReason, int] = {
    ExitReason.FAILED_BUILD_WITH_ERRORS: 401,
    ExitReason.BUILD_ERROR: 402,
}


class ExitOutcome(str, Enum):
    """Operator-facing outcome of one invocation."""

    SUCCESS = "SUCCESS"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    BUILDPACK_EXECUTION_FAILURE = "BUILDPACK_EXECUTION_FAILURE"
    INFRASTRUCTURE_FAILURE = "INFRASTRUCTURE_FAILURE"


_OUTCOMES: Dict[ErrorKind, ExitOutcome] = {
    ErrorKind.INVALID_ARGUMENTS: ExitOutcome.INVALID_ARGUMENTS,
    ErrorKind.BUILDPACK: ExitOutcome.BUILDPACK_EXECUTION_FAILURE,
    ErrorKind.INFRASTRUCTURE: ExitOutcome.INFRASTRUCTURE_FAILURE,
}


class BuildErrorClassifier:
    """Classifies errors by their kind, never by their message."""

    def classify(self, error: Optional[BaseException]) -> ExitOutcome:
        """Return the outcome for ``error``; None means success.

        Errors that are not build stage errors are infrastructure failures.
        """
        if error is None:
            return ExitOutcome.SUCCESS
        if isinstance(error, BuildStageError):
            return _OUTCOMES[error.kind]
        return ExitOutcome.INFRASTRUCTURE_FAILURE

    def exit_code(
        self,
        error: Optional[BaseException],
        platform_api: Optional[ApiVersion] = None,
    ) -> int:
        """Return the process exit code for ``error``.

        Args:
            error: Failure that ended the run, or None on success.
            platform_api: Platform API in effect; older platforms use the
                legacy 4xx build codes. Unknown platform API uses the
                current codes.
        """
        if error is None:
            return CODE_SUCCESS
        reason = error.reason if isinstance(error, BuildStageError) else ExitReason.FAILED
        if reason in _COMMON_CODES:
            return _COMMON_CODES[reason]
        if platform_api is not None and platform_api < RANGED_CODES_PLATFORM_API:
            return _LEGACY_BUILD_CODES[reason]
        return _BUILD_CODES[reason]
