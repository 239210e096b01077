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

"""Directory-backed buildpack store."""

import logging
import os

from core.build.entities import BuildpackDescriptor
from core.build.exceptions import BuildpackNotFoundError
from core.build.repositories import BuildpackStore
from infra.toml.codec import TomlDecodeError, read_model
from infra.toml.schemas import BuildpackFileSchema

logger = logging.getLogger(__name__)

BUILDPACK_FILE_NAME = "buildpack.toml"


class DirBuildpackStore(BuildpackStore):  # pylint: disable=R0903
    """Finds buildpacks laid out as ``<dir>/<escaped id>/<version>/buildpack.toml``."""

    def __init__(self, buildpacks_dir: str) -> None:
        """Initialize store.

        Args:
            buildpacks_dir: Root directory of the store.
        """
        self._dir = buildpacks_dir

    def lookup(self, buildpack_id: str, version: str) -> BuildpackDescriptor:
        """Read ``buildpack.toml`` for ``buildpack_id@version``.

        Raises:
            BuildpackNotFoundError: If the descriptor is missing or invalid.
        """
        bp_dir = os.path.join(self._dir, buildpack_id.replace("/", "_"), version)
        descriptor_path = os.path.join(bp_dir, BUILDPACK_FILE_NAME)
        try:
            schema = read_model(descriptor_path, BuildpackFileSchema)
        except TomlDecodeError as exc:
            raise BuildpackNotFoundError(
                f"{buildpack_id}@{version}", descriptor_path, cause=exc
            ) from exc

        logger.debug("Found buildpack %s@%s in %s", buildpack_id, version, bp_dir)
        return BuildpackDescriptor(
            id=schema.buildpack.id,
            version=schema.buildpack.version or version,
            api=schema.api,
            dir=bp_dir,
            name=schema.buildpack.name,
            clear_env=schema.buildpack.clear_env,
        )
