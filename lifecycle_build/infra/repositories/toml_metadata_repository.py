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

"""TOML implementation of MetadataRepository."""

import logging
import os
from pathlib import Path

from core.build.entities import BuildMetadata
from core.build.exceptions import ConfigReadError, MetadataWriteError
from core.build.repositories import MetadataRepository
from infra.toml.codec import TomlDecodeError, read_model, write_model
from infra.toml.mappers import MetadataMapper
from infra.toml.schemas import MetadataFileSchema

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "config"
METADATA_FILE_NAME = "metadata.toml"


def metadata_file_path(layers_dir: str) -> str:
    """Return ``<layers>/config/metadata.toml``."""
    return os.path.join(layers_dir, CONFIG_DIR_NAME, METADATA_FILE_NAME)


class TomlMetadataRepository(MetadataRepository):
    """Writes build metadata where the export stage expects it."""

    def save(self, metadata: BuildMetadata, layers_dir: str) -> Path:
        """Write ``metadata`` to ``<layers>/config/metadata.toml``.

        Raises:
            MetadataWriteError: If the file cannot be written.
        """
        path = metadata_file_path(layers_dir)
        try:
            written = write_model(path, MetadataMapper.to_schema(metadata))
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write build metadata to %s", path)
            raise MetadataWriteError(path, cause=exc) from exc

        logger.info(
            "Recorded %d layers and %d processes in %s",
            len(metadata.layers),
            len(metadata.processes),
            written,
        )
        return written

    def load(self, layers_dir: str) -> BuildMetadata:
        """Read ``<layers>/config/metadata.toml``.

        Raises:
            ConfigReadError: If the file is missing or malformed.
        """
        path = metadata_file_path(layers_dir)
        try:
            schema = read_model(path, MetadataFileSchema)
        except TomlDecodeError as exc:
            raise ConfigReadError(path, "read build metadata", exc.reason, cause=exc) from exc
        return MetadataMapper.to_domain(schema)
