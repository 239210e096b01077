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

"""Build stage domain module.

This module contains domain logic for running a buildpack group.
"""

from core.build.entities import (
    BOMEntry,
    BuildContext,
    BuildMetadata,
    BuildPlan,
    BuildPlanEntry,
    BuildState,
    BuildpackDescriptor,
    BuildpackGroup,
    GroupBuildpack,
    Label,
    LayerDescriptor,
    Process,
    Require,
    Slice,
)
from core.build.exceptions import (
    BuildInfrastructureError,
    BuildStageError,
    BuildpackFailedError,
    BuildpackNotFoundError,
    BuildpacksDirError,
    ConfigReadError,
    ErrorKind,
    ExitReason,
    IncompatibleBuildpackApiError,
    IncompatiblePlatformApiError,
    InvalidArgumentsError,
    InvalidBuildpackOutputError,
    LifecycleConfigError,
    MetadataWriteError,
    PrivilegedExecutionError,
)
from core.build.value_objects import ApiVersion, BuildEnv, BuildPaths

__all__ = [
    "ApiVersion",
    "BOMEntry",
    "BuildContext",
    "BuildEnv",
    "BuildInfrastructureError",
    "BuildMetadata",
    "BuildPaths",
    "BuildPlan",
    "BuildPlanEntry",
    "BuildStageError",
    "BuildState",
    "BuildpackDescriptor",
    "BuildpackFailedError",
    "BuildpackGroup",
    "BuildpackNotFoundError",
    "BuildpacksDirError",
    "ConfigReadError",
    "ErrorKind",
    "ExitReason",
    "GroupBuildpack",
    "IncompatibleBuildpackApiError",
    "IncompatiblePlatformApiError",
    "InvalidArgumentsError",
    "InvalidBuildpackOutputError",
    "Label",
    "LayerDescriptor",
    "LifecycleConfigError",
    "MetadataWriteError",
    "PrivilegedExecutionError",
    "Process",
    "Require",
    "Slice",
]
