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

"""TOML implementation of GroupRepository."""

import logging

from core.build.entities import BuildpackGroup
from core.build.exceptions import ConfigReadError
from core.build.repositories import GroupRepository
from infra.toml.codec import TomlDecodeError, read_model
from infra.toml.mappers import GroupMapper
from infra.toml.schemas import GroupFileSchema

logger = logging.getLogger(__name__)

READ_GROUP_ACTION = "read buildpack group"


class TomlGroupRepository(GroupRepository):
    """Reads ``group.toml`` written by the detect stage."""

    def load(self, path: str) -> BuildpackGroup:
        """Load the buildpack group at ``path``.

        Raises:
            ConfigReadError: If the file is missing, unreadable or malformed.
        """
        try:
            schema = read_model(path, GroupFileSchema)
        except TomlDecodeError as exc:
            raise ConfigReadError(path, READ_GROUP_ACTION, exc.reason, cause=exc) from exc

        group = GroupMapper.to_domain(schema)
        logger.debug("Read group from %s: %s", path, ", ".join(group.ids))
        return group
