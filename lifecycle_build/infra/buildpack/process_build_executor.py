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

"""Infrastructure adapter that runs buildpack build executables as processes."""

import logging
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

from common.logging_utils import log_secure_info
from core.build.entities import (
    BuildContext,
    BuildMetadata,
    BuildpackDescriptor,
    GroupBuildpack,
    LayerDescriptor,
)
from core.build.exceptions import (
    BuildInfrastructureError,
    BuildpackFailedError,
    InvalidBuildpackOutputError,
)
from core.build.repositories import BuildExecutor, BuildpackStore
from core.build.value_objects import ApiVersion
from infra.buildpack.dir_buildpack_store import DirBuildpackStore
from infra.buildpack.layer_env import apply_build_layer
from infra.toml.codec import TomlDecodeError, read_model, write_model
from infra.toml.mappers import MetadataMapper, PlanMapper
from infra.toml.schemas import BuildpackPlanFileSchema, LaunchFileSchema, LayerFileSchema

logger = logging.getLogger(__name__)

LAUNCH_FILE_NAME = "launch.toml"
RESERVED_TOML_FILES = frozenset({LAUNCH_FILE_NAME, "build.toml", "store.toml"})
PLAN_FILE_NAME = "plan.toml"
ERROR_OUTPUT_MAX_LINES = 20

# Buildpack API from which the lifecycle also passes directories through env
DIRECTORY_ENV_BUILDPACK_API = ApiVersion(0, 8)


class _BuildOutput:  # pylint: disable=too-few-public-methods
    """Accumulates metadata across buildpacks in group order."""

    def __init__(self) -> None:
        self.bom: List = []
        self.labels: List = []
        self.layers: List[LayerDescriptor] = []
        self.processes: List = []
        self.slices: List = []


class ProcessBuildExecutor(BuildExecutor):
    """Runs ``bin/build`` of every buildpack in the group, one after another.

    Buildpack stdout goes straight to ``stdout`` (inherited when None);
    stderr is forwarded line by line and the tail is kept for error reports.
    """

    def __init__(
        self,
        store_factory: Callable[[str], BuildpackStore] = DirBuildpackStore,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        """Initialize executor.

        Args:
            store_factory: Builds a buildpack store for the buildpacks directory.
            stdout: File object for buildpack stdout; must have a file descriptor.
            stderr: Stream that receives forwarded buildpack stderr.
        """
        self._store_factory = store_factory
        self._stdout = stdout
        self._stderr = stderr

    def build(self, context: BuildContext) -> BuildMetadata:
        """Run every buildpack of ``context.group`` in order.

        Raises:
            BuildpackNotFoundError: If a buildpack is missing from the store.
            BuildpackFailedError: If a build executable exits non-zero.
            InvalidBuildpackOutputError: If a buildpack wrote undecodable files.
            BuildInfrastructureError: If a process or directory cannot be set up.
        """
        store = self._store_factory(context.buildpacks_dir)
        env = context.env.to_dict()
        output = _BuildOutput()

        for buildpack in context.group:
            descriptor = store.lookup(buildpack.id, buildpack.version)
            bp_layers_dir = self._ensure_layers_dir(context, buildpack)

            with tempfile.TemporaryDirectory(prefix=f"plan.{buildpack.escaped_id}.") as plan_dir:
                plan_path = os.path.join(plan_dir, PLAN_FILE_NAME)
                self._write_buildpack_plan(context, buildpack, plan_path)
                self._run(context, buildpack, descriptor, bp_layers_dir, plan_path, env)

            self._collect_launch(buildpack, bp_layers_dir, output)
            layers = self._collect_layers(buildpack, bp_layers_dir)
            output.layers.extend(layers)

            for layer in layers:
                if layer.build:
                    apply_build_layer(env, bp_layers_dir / layer.name)

        return BuildMetadata(
            bom=tuple(output.bom),
            buildpacks=tuple(context.group),
            labels=tuple(output.labels),
            layers=tuple(output.layers),
            processes=tuple(output.processes),
            slices=tuple(output.slices),
        )

    @staticmethod
    def _ensure_layers_dir(context: BuildContext, buildpack: GroupBuildpack) -> Path:
        bp_layers_dir = Path(context.layers_dir) / buildpack.escaped_id
        try:
            bp_layers_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BuildInfrastructureError(
                f"create layers directory {bp_layers_dir}: {exc}", cause=exc
            ) from exc
        return bp_layers_dir

    @staticmethod
    def _write_buildpack_plan(
        context: BuildContext, buildpack: GroupBuildpack, plan_path: str
    ) -> None:
        requires = context.plan.find(buildpack.id)
        schema = BuildpackPlanFileSchema(
            entries=[PlanMapper.require_to_schema(require) for require in requires]
        )
        try:
            write_model(plan_path, schema)
        except OSError as exc:
            raise BuildInfrastructureError(
                f"write buildpack plan for {buildpack}: {exc}", cause=exc
            ) from exc

    @staticmethod
    def _buildpack_env(
        context: BuildContext,
        descriptor: BuildpackDescriptor,
        bp_layers_dir: Path,
        plan_path: str,
        env: Dict[str, str],
    ) -> Dict[str, str]:
        """Return the environment for one buildpack process."""
        bp_env = dict(env)
        if not descriptor.clear_env:
            platform_env_dir = Path(context.platform_dir) / "env"
            if platform_env_dir.is_dir():
                for entry in sorted(platform_env_dir.iterdir()):
                    if entry.is_file():
                        bp_env[entry.name] = entry.read_text(encoding="utf-8")

        bp_env["CNB_BUILDPACK_DIR"] = descriptor.dir
        try:
            api = ApiVersion.parse(descriptor.api)
        except ValueError:
            api = None
        if api is not None and api >= DIRECTORY_ENV_BUILDPACK_API:
            bp_env["CNB_LAYERS_DIR"] = str(bp_layers_dir)
            bp_env["CNB_PLATFORM_DIR"] = context.platform_dir
            bp_env["CNB_BP_PLAN_PATH"] = plan_path
        return bp_env

    def _run(
        self,
        context: BuildContext,
        buildpack: GroupBuildpack,
        descriptor: BuildpackDescriptor,
        bp_layers_dir: Path,
        plan_path: str,
        env: Dict[str, str],
    ) -> None:  # pylint: disable=too-many-arguments,too-many-positional-arguments
        """Run ``bin/build`` and wait for it."""
        cmd = [descriptor.build_executable, str(bp_layers_dir), context.platform_dir, plan_path]
        bp_env = self._buildpack_env(context, descriptor, bp_layers_dir, plan_path, env)
        stderr = self._stderr or sys.stderr

        log_secure_info("info", "Running build for buildpack", str(buildpack), logger_name=__name__)
        logger.debug("Executing command: %s", " ".join(cmd))

        try:
            proc = subprocess.Popen(  # pylint: disable=consider-using-with
                cmd,
                cwd=context.app_dir,
                env=bp_env,
                stdout=self._stdout,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                shell=False,
            )
        except OSError as exc:
            raise BuildInfrastructureError(
                f"run build executable for buildpack {buildpack}: {exc}", cause=exc
            ) from exc

        captured: List[str] = []
        try:
            with proc.stderr:
                for line in proc.stderr:
                    stderr.write(line)
                    captured.append(line)
                    if len(captured) > ERROR_OUTPUT_MAX_LINES:
                        captured.pop(0)
        finally:
            returncode = proc.wait()
            stderr.flush()

        if returncode != 0:
            logger.error("Buildpack %s exited with status %d", buildpack, returncode)
            raise BuildpackFailedError(str(buildpack), returncode, "".join(captured))
        logger.debug("Buildpack %s completed", buildpack)

    @staticmethod
    def _collect_launch(
        buildpack: GroupBuildpack, bp_layers_dir: Path, output: _BuildOutput
    ) -> None:
        launch_path = bp_layers_dir / LAUNCH_FILE_NAME
        if not launch_path.exists():
            return
        try:
            launch = read_model(launch_path, LaunchFileSchema)
        except TomlDecodeError as exc:
            raise InvalidBuildpackOutputError(
                str(buildpack), LAUNCH_FILE_NAME, exc.reason
            ) from exc

        output.bom.extend(MetadataMapper.bom_to_domain(b, buildpack.id) for b in launch.bom)
        output.labels.extend(MetadataMapper.label_to_domain(label) for label in launch.labels)
        output.processes.extend(
            MetadataMapper.process_to_domain(p, buildpack.id) for p in launch.processes
        )
        output.slices.extend(MetadataMapper.slice_to_domain(s) for s in launch.slices)

    @staticmethod
    def _collect_layers(
        buildpack: GroupBuildpack, bp_layers_dir: Path
    ) -> List[LayerDescriptor]:
        layers = []
        for layer_file in sorted(bp_layers_dir.glob("*.toml")):
            if layer_file.name in RESERVED_TOML_FILES:
                continue
            try:
                flags = read_model(layer_file, LayerFileSchema).flags()
            except TomlDecodeError as exc:
                raise InvalidBuildpackOutputError(
                    str(buildpack), layer_file.name, exc.reason
                ) from exc
            layers.append(
                LayerDescriptor(
                    buildpack_id=buildpack.id,
                    name=layer_file.stem,
                    launch=flags.launch,
                    build=flags.build,
                    cache=flags.cache,
                )
            )
        return layers
