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

"""Domain entities for the Build stage."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from core.build.value_objects import ApiVersion, BuildEnv

DEFAULT_BUILDPACK_API = "0.2"


@dataclass(frozen=True)
class GroupBuildpack:
    """A buildpack reference inside a group.

    Attributes:
        id: Buildpack identifier (e.g. ``buildpack/a``).
        version: Buildpack version.
        api: Buildpack API version declared by the buildpack.
        optional: Whether detection allowed the buildpack to be skipped.
        homepage: Optional buildpack homepage.
    """

    id: str
    version: str
    api: str = ""
    optional: bool = False
    homepage: str = ""

    def __post_init__(self) -> None:
        """Validate buildpack reference."""
        if not self.id or not self.id.strip():
            raise ValueError("Buildpack id cannot be empty")

    @property
    def escaped_id(self) -> str:
        """Return the id with path separators replaced for use on disk."""
        return self.id.replace("/", "_")

    @property
    def effective_api(self) -> str:
        """Return the declared API, defaulting when the group left it unset."""
        return self.api or DEFAULT_BUILDPACK_API

    def __str__(self) -> str:
        """Return ``id@version``."""
        return f"{self.id}@{self.version}"


@dataclass(frozen=True)
class BuildpackGroup:
    """Ordered buildpack group; iteration order is execution order.

    Attributes:
        buildpacks: Buildpacks in the order they must run.
    """

    buildpacks: Tuple[GroupBuildpack, ...] = ()

    def __post_init__(self) -> None:
        """Store buildpacks as a tuple so order can never be altered."""
        object.__setattr__(self, "buildpacks", tuple(self.buildpacks))

    @property
    def ids(self) -> Tuple[str, ...]:
        """Return buildpack ids in execution order."""
        return tuple(bp.id for bp in self.buildpacks)

    def __iter__(self) -> Iterator[GroupBuildpack]:
        return iter(self.buildpacks)

    def __len__(self) -> int:
        return len(self.buildpacks)


@dataclass(frozen=True)
class BuildpackDescriptor:
    """A buildpack as found in the buildpack store.

    Attributes:
        id: Buildpack identifier from ``buildpack.toml``.
        version: Buildpack version.
        api: Buildpack API declared in ``buildpack.toml``.
        dir: Directory holding ``buildpack.toml`` and ``bin/``.
        name: Human readable name.
        clear_env: Whether the buildpack asked for a clean environment.
    """

    id: str
    version: str
    api: str
    dir: str
    name: str = ""
    clear_env: bool = False

    @property
    def build_executable(self) -> str:
        """Return the path of the ``bin/build`` executable."""
        return os.path.join(self.dir, "bin", "build")


@dataclass(frozen=True)
class Require:
    """A dependency a buildpack must satisfy."""

    name: str
    version: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BuildPlanEntry:
    """Requires routed to the buildpacks that provide them."""

    providers: Tuple[GroupBuildpack, ...] = ()
    requires: Tuple[Require, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "providers", tuple(self.providers))
        object.__setattr__(self, "requires", tuple(self.requires))


@dataclass(frozen=True)
class BuildPlan:
    """Plan negotiated during detection.

    The orchestrator passes the plan through untouched; only the execution
    engine slices it per buildpack with :meth:`find`.
    """

    entries: Tuple[BuildPlanEntry, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    def find(self, buildpack_id: str) -> Tuple[Require, ...]:
        """Return the requires that ``buildpack_id`` provides, in plan order."""
        requires = []
        for entry in self.entries:
            if any(provider.id == buildpack_id for provider in entry.providers):
                requires.extend(entry.requires)
        return tuple(requires)


@dataclass(frozen=True)
class BOMEntry:
    """Bill-of-materials record contributed by a buildpack."""

    name: str
    buildpack_id: str
    version: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Label:
    """Image label contributed by a buildpack."""

    key: str
    value: str


@dataclass(frozen=True)
class LayerDescriptor:
    """A layer produced by a buildpack."""

    buildpack_id: str
    name: str
    launch: bool = False
    build: bool = False
    cache: bool = False


@dataclass(frozen=True)
class Process:
    """Process type made available at launch."""

    type: str
    command: str
    args: Tuple[str, ...] = ()
    direct: bool = False
    buildpack_id: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class Slice:
    """Group of application paths exported as a separate layer."""

    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "paths", tuple(self.paths))


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class BuildMetadata:
    """Result of a successful build, persisted for the export stage.

    Attributes:
        bom: Bill-of-materials entries.
        buildpacks: Buildpacks that ran, in execution order.
        labels: Image labels.
        layers: Layers produced by the buildpacks.
        processes: Launch process types.
        slices: Application slices.
    """

    bom: Tuple[BOMEntry, ...] = ()
    buildpacks: Tuple[GroupBuildpack, ...] = ()
    labels: Tuple[Label, ...] = ()
    layers: Tuple[LayerDescriptor, ...] = ()
    processes: Tuple[Process, ...] = ()
    slices: Tuple[Slice, ...] = ()

    def __post_init__(self) -> None:
        for name in ("bom", "buildpacks", "labels", "layers", "processes", "slices"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class BuildContext:
    """Everything the execution engine needs to run a group.

    Attributes:
        buildpacks_dir: Absolute path to the buildpacks directory.
        app_dir: Application source directory.
        layers_dir: Layers directory owned by this invocation.
        platform_dir: Platform directory.
        platform_api: Platform API version.
        env: Environment snapshot shared by every buildpack.
        group: Ordered buildpack group.
        plan: Detect plan, passed through unchanged.
    """

    buildpacks_dir: str
    app_dir: str
    layers_dir: str
    platform_dir: str
    platform_api: ApiVersion
    env: BuildEnv
    group: BuildpackGroup
    plan: BuildPlan


class BuildState(str, Enum):
    """States a build invocation moves through."""

    INIT = "INIT"
    PATHS_RESOLVED = "PATHS_RESOLVED"
    CONFIG_LOADED = "CONFIG_LOADED"
    VERIFIED = "VERIFIED"
    PRIVILEGE_CHECKED = "PRIVILEGE_CHECKED"
    BUILDING = "BUILDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        """Return True for SUCCEEDED and FAILED."""
        return self in (BuildState.SUCCEEDED, BuildState.FAILED)


_BUILD_STATE_ORDER = (
    BuildState.INIT,
    BuildState.PATHS_RESOLVED,
    BuildState.CONFIG_LOADED,
    BuildState.VERIFIED,
    BuildState.PRIVILEGE_CHECKED,
    BuildState.BUILDING,
    BuildState.SUCCEEDED,
)


def can_transition(current: BuildState, target: Optional[BuildState]) -> bool:
    """Return True if ``current`` may move to ``target``.

    Gates advance one step at a time; any non-terminal state may fail.
    """
    if current.is_terminal or target is None:
        return False
    if target == BuildState.FAILED:
        return True
    return _BUILD_STATE_ORDER.index(target) == _BUILD_STATE_ORDER.index(current) + 1
