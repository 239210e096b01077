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

"""Repository and collaborator interfaces for the Build stage."""

from abc import ABC, abstractmethod
from pathlib import Path

from core.build.entities import (
    BuildContext,
    BuildMetadata,
    BuildPlan,
    BuildpackDescriptor,
    BuildpackGroup,
)


class GroupRepository(ABC):
    """Reads the ordered buildpack group written by detection."""

    @abstractmethod
    def load(self, path: str) -> BuildpackGroup:
        """Load a buildpack group.

        Args:
            path: Resolved path to the group file.

        Returns:
            Buildpack group in execution order.

        Raises:
            ConfigReadError: If the file is missing, unreadable or malformed.
        """
        ...


class PlanRepository(ABC):
    """Reads the build plan written by detection."""

    @abstractmethod
    def load(self, path: str) -> BuildPlan:
        """Load a build plan.

        Args:
            path: Resolved path to the plan file.

        Returns:
            Build plan.

        Raises:
            ConfigReadError: If the file is missing, unreadable or malformed.
        """
        ...


class MetadataRepository(ABC):
    """Persists build metadata for the export stage."""

    @abstractmethod
    def save(self, metadata: BuildMetadata, layers_dir: str) -> Path:
        """Write build metadata under the layers directory.

        Returns:
            Path of the written metadata file.

        Raises:
            MetadataWriteError: If the file cannot be written.
        """
        ...

    @abstractmethod
    def load(self, layers_dir: str) -> BuildMetadata:
        """Read previously written build metadata."""
        ...


class PrivilegeChecker(ABC):  # pylint: disable=R0903
    """Queries the privilege level of the running process."""

    @abstractmethod
    def is_privileged(self) -> bool:
        """Return True if the process runs with elevated privileges."""
        ...


class BuildExecutor(ABC):  # pylint: disable=R0903
    """Runs every buildpack of a group and aggregates their output."""

    @abstractmethod
    def build(self, context: BuildContext) -> BuildMetadata:
        """Run the group described by ``context`` in order.

        Raises:
            BuildpackFailedError: If a buildpack's build logic failed.
            BuildStageError: For infrastructure failures.
        """
        ...


class BuildpackStore(ABC):  # pylint: disable=R0903
    """Looks up buildpacks on disk."""

    @abstractmethod
    def lookup(self, buildpack_id: str, version: str) -> BuildpackDescriptor:
        """Return the descriptor for ``buildpack_id@version``.

        Raises:
            BuildpackNotFoundError: If the buildpack is not in the store.
        """
        ...
