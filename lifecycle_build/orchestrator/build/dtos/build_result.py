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

"""Build result DTO."""

from dataclasses import dataclass

from core.build.entities import BuildMetadata, BuildState


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a successful build stage run.

    Attributes:
        state: Final state (always SUCCEEDED for a returned result).
        metadata: Metadata returned by the execution engine.
        metadata_path: Where the metadata was persisted.
        group_path: Group file that was read.
        plan_path: Plan file that was read.
    """

    state: BuildState
    metadata: BuildMetadata
    metadata_path: str
    group_path: str
    plan_path: str
