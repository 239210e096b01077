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

"""RunBuild command DTO."""

from dataclasses import dataclass, field
from typing import Tuple

from core.build.services import PLACEHOLDER_GROUP_PATH, PLACEHOLDER_PLAN_PATH


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class RunBuildCommand:
    """Command to run the build stage.

    Immutable command object built once per invocation from flags and
    environment.

    Attributes:
        buildpacks_dir: Directory holding the buildpacks.
        group_path: Group file path, or the placeholder to use the default.
        plan_path: Plan file path, or the placeholder to use the default.
        layers_dir: Layers directory.
        app_dir: Application directory.
        platform_dir: Platform directory.
        platform_api: Platform API version string.
        positional_args: Positional arguments received; must be empty.
    """

    buildpacks_dir: str = "/cnb/buildpacks"
    group_path: str = PLACEHOLDER_GROUP_PATH
    plan_path: str = PLACEHOLDER_PLAN_PATH
    layers_dir: str = "/layers"
    app_dir: str = "."
    platform_dir: str = "/platform"
    platform_api: str = "0.3"
    positional_args: Tuple[str, ...] = field(default_factory=tuple)
