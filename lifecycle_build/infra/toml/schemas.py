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

"""Pydantic schemas for the TOML files exchanged with other lifecycle stages."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _TomlModel(BaseModel):
    """Base model: tolerate unknown keys, accept dashed lifecycle key names."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class BuildpackRefSchema(_TomlModel):
    """``[[group]]`` / ``[[entries.providers]]`` / ``[[buildpacks]]`` table."""

    id: str = Field(..., min_length=1, description="Buildpack identifier")
    version: str = Field("", description="Buildpack version")
    api: str = Field("", description="Buildpack API version")
    optional: bool = Field(False, description="Buildpack may be skipped")
    homepage: str = Field("", description="Buildpack homepage")


class GroupFileSchema(_TomlModel):
    """``group.toml``."""

    group: List[BuildpackRefSchema] = Field(default_factory=list)


class RequireSchema(_TomlModel):
    """``[[entries.requires]]`` table."""

    name: str = Field(..., min_length=1, description="Required dependency name")
    version: str = Field("", description="Requested version")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PlanEntrySchema(_TomlModel):
    """``[[entries]]`` table."""

    providers: List[BuildpackRefSchema] = Field(default_factory=list)
    requires: List[RequireSchema] = Field(default_factory=list)


class PlanFileSchema(_TomlModel):
    """``plan.toml``."""

    entries: List[PlanEntrySchema] = Field(default_factory=list)


class BuildpackPlanFileSchema(_TomlModel):
    """Per-buildpack ``plan.toml`` handed to ``bin/build``."""

    entries: List[RequireSchema] = Field(default_factory=list)


class BOMEntrySchema(_TomlModel):
    """``[[bom]]`` table."""

    name: str = Field(..., min_length=1)
    version: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    buildpack_id: str = Field("", alias="buildpack-id")


class LabelSchema(_TomlModel):
    """``[[labels]]`` table."""

    key: str = Field(..., min_length=1)
    value: str = ""


class LayerSchema(_TomlModel):
    """``[[layers]]`` table."""

    buildpack_id: str = Field("", alias="buildpack-id")
    name: str = Field(..., min_length=1)
    launch: bool = False
    build: bool = False
    cache: bool = False


class ProcessSchema(_TomlModel):
    """``[[processes]]`` table."""

    type: str = Field(..., min_length=1)
    command: str = ""
    args: List[str] = Field(default_factory=list)
    direct: bool = False
    buildpack_id: str = Field("", alias="buildpack-id")


class SliceSchema(_TomlModel):
    """``[[slices]]`` table."""

    paths: List[str] = Field(default_factory=list)


class MetadataFileSchema(_TomlModel):
    """``<layers>/config/metadata.toml``."""

    bom: List[BOMEntrySchema] = Field(default_factory=list)
    buildpacks: List[BuildpackRefSchema] = Field(default_factory=list)
    labels: List[LabelSchema] = Field(default_factory=list)
    layers: List[LayerSchema] = Field(default_factory=list)
    processes: List[ProcessSchema] = Field(default_factory=list)
    slices: List[SliceSchema] = Field(default_factory=list)


class LaunchFileSchema(_TomlModel):
    """``<layers>/<buildpack>/launch.toml`` written by a buildpack."""

    bom: List[BOMEntrySchema] = Field(default_factory=list)
    labels: List[LabelSchema] = Field(default_factory=list)
    processes: List[ProcessSchema] = Field(default_factory=list)
    slices: List[SliceSchema] = Field(default_factory=list)


class LayerTypesSchema(_TomlModel):
    """``[types]`` table of a layer file."""

    launch: bool = False
    build: bool = False
    cache: bool = False


class LayerFileSchema(_TomlModel):
    """``<layers>/<buildpack>/<layer>.toml`` written by a buildpack.

    Buildpack API 0.6 moved the flags from the top level into ``[types]``;
    both layouts are read.
    """

    launch: bool = False
    build: bool = False
    cache: bool = False
    types: Optional[LayerTypesSchema] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def flags(self) -> LayerTypesSchema:
        """Return the layer flags regardless of layout."""
        if self.types is not None:
            return self.types
        return LayerTypesSchema(launch=self.launch, build=self.build, cache=self.cache)


class BuildpackInfoSchema(_TomlModel):
    """``[buildpack]`` table of ``buildpack.toml``."""

    id: str = Field(..., min_length=1)
    version: str = ""
    name: str = ""
    clear_env: bool = Field(False, alias="clear-env")


class BuildpackFileSchema(_TomlModel):
    """``buildpack.toml`` shipped with a buildpack."""

    api: str = ""
    buildpack: BuildpackInfoSchema
