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

"""Mappers for domain <-> TOML schema conversion.

Explicit mapping between domain entities and file schemas.
No domain logic lives here, only data transformation.
"""

from core.build.entities import (
    BOMEntry,
    BuildMetadata,
    BuildPlan,
    BuildPlanEntry,
    BuildpackGroup,
    GroupBuildpack,
    Label,
    LayerDescriptor,
    Process,
    Require,
    Slice,
)
from .schemas import (
    BOMEntrySchema,
    BuildpackRefSchema,
    GroupFileSchema,
    LabelSchema,
    LayerSchema,
    MetadataFileSchema,
    PlanEntrySchema,
    PlanFileSchema,
    ProcessSchema,
    RequireSchema,
    SliceSchema,
)


class GroupMapper:
    """Mapper for BuildpackGroup ↔ GroupFileSchema."""

    @staticmethod
    def buildpack_to_domain(schema: BuildpackRefSchema) -> GroupBuildpack:
        """Convert a buildpack table to a GroupBuildpack."""
        return GroupBuildpack(
            id=schema.id,
            version=schema.version,
            api=schema.api,
            optional=schema.optional,
            homepage=schema.homepage,
        )

    @staticmethod
    def buildpack_to_schema(buildpack: GroupBuildpack) -> BuildpackRefSchema:
        """Convert a GroupBuildpack to a buildpack table."""
        return BuildpackRefSchema(
            id=buildpack.id,
            version=buildpack.version,
            api=buildpack.api,
            optional=buildpack.optional,
            homepage=buildpack.homepage,
        )

    @staticmethod
    def to_domain(schema: GroupFileSchema) -> BuildpackGroup:
        """Convert group.toml content to a BuildpackGroup, keeping file order."""
        return BuildpackGroup(
            buildpacks=tuple(GroupMapper.buildpack_to_domain(bp) for bp in schema.group)
        )

    @staticmethod
    def to_schema(group: BuildpackGroup) -> GroupFileSchema:
        """Convert a BuildpackGroup to group.toml content."""
        return GroupFileSchema(group=[GroupMapper.buildpack_to_schema(bp) for bp in group])


class PlanMapper:
    """Mapper for BuildPlan ↔ PlanFileSchema."""

    @staticmethod
    def require_to_domain(schema: RequireSchema) -> Require:
        """Convert a requires table to a Require."""
        return Require(name=schema.name, version=schema.version, metadata=dict(schema.metadata))

    @staticmethod
    def require_to_schema(require: Require) -> RequireSchema:
        """Convert a Require to a requires table."""
        return RequireSchema(
            name=require.name, version=require.version, metadata=dict(require.metadata)
        )

    @staticmethod
    def to_domain(schema: PlanFileSchema) -> BuildPlan:
        """Convert plan.toml content to a BuildPlan."""
        return BuildPlan(
            entries=tuple(
                BuildPlanEntry(
                    providers=tuple(
                        GroupMapper.buildpack_to_domain(p) for p in entry.providers
                    ),
                    requires=tuple(PlanMapper.require_to_domain(r) for r in entry.requires),
                )
                for entry in schema.entries
            )
        )

    @staticmethod
    def to_schema(plan: BuildPlan) -> PlanFileSchema:
        """Convert a BuildPlan to plan.toml content."""
        return PlanFileSchema(
            entries=[
                PlanEntrySchema(
                    providers=[GroupMapper.buildpack_to_schema(p) for p in entry.providers],
                    requires=[PlanMapper.require_to_schema(r) for r in entry.requires],
                )
                for entry in plan.entries
            ]
        )


class MetadataMapper:
    """Mapper for BuildMetadata ↔ MetadataFileSchema."""

    @staticmethod
    def bom_to_domain(schema: BOMEntrySchema, buildpack_id: str = "") -> BOMEntry:
        """Convert a bom table; ``buildpack_id`` fills in a missing owner."""
        return BOMEntry(
            name=schema.name,
            buildpack_id=schema.buildpack_id or buildpack_id,
            version=schema.version,
            metadata=dict(schema.metadata),
        )

    @staticmethod
    def process_to_domain(schema: ProcessSchema, buildpack_id: str = "") -> Process:
        """Convert a processes table; ``buildpack_id`` fills in a missing owner."""
        return Process(
            type=schema.type,
            command=schema.command,
            args=tuple(schema.args),
            direct=schema.direct,
            buildpack_id=schema.buildpack_id or buildpack_id,
        )

    @staticmethod
    def label_to_domain(schema: LabelSchema) -> Label:
        """Convert a labels table."""
        return Label(key=schema.key, value=schema.value)

    @staticmethod
    def slice_to_domain(schema: SliceSchema) -> Slice:
        """Convert a slices table."""
        return Slice(paths=tuple(schema.paths))

    @staticmethod
    def to_domain(schema: MetadataFileSchema) -> BuildMetadata:
        """Convert metadata.toml content to BuildMetadata."""
        return BuildMetadata(
            bom=tuple(MetadataMapper.bom_to_domain(b) for b in schema.bom),
            buildpacks=tuple(GroupMapper.buildpack_to_domain(b) for b in schema.buildpacks),
            labels=tuple(MetadataMapper.label_to_domain(label) for label in schema.labels),
            layers=tuple(
                LayerDescriptor(
                    buildpack_id=layer.buildpack_id,
                    name=layer.name,
                    launch=layer.launch,
                    build=layer.build,
                    cache=layer.cache,
                )
                for layer in schema.layers
            ),
            processes=tuple(MetadataMapper.process_to_domain(p) for p in schema.processes),
            slices=tuple(MetadataMapper.slice_to_domain(s) for s in schema.slices),
        )

    @staticmethod
    def to_schema(metadata: BuildMetadata) -> MetadataFileSchema:
        """Convert BuildMetadata to metadata.toml content."""
        return MetadataFileSchema(
            bom=[
                BOMEntrySchema(
                    name=b.name,
                    version=b.version,
                    metadata=dict(b.metadata),
                    buildpack_id=b.buildpack_id,
                )
                for b in metadata.bom
            ],
            buildpacks=[GroupMapper.buildpack_to_schema(b) for b in metadata.buildpacks],
            labels=[LabelSchema(key=label.key, value=label.value) for label in metadata.labels],
            layers=[
                LayerSchema(
                    buildpack_id=layer.buildpack_id,
                    name=layer.name,
                    launch=layer.launch,
                    build=layer.build,
                    cache=layer.cache,
                )
                for layer in metadata.layers
            ],
            processes=[
                ProcessSchema(
                    type=p.type,
                    command=p.command,
                    args=list(p.args),
                    direct=p.direct,
                    buildpack_id=p.buildpack_id,
                )
                for p in metadata.processes
            ],
            slices=[SliceSchema(paths=list(s.paths)) for s in metadata.slices],
        )
