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

"""Dependency Injector container for the lifecycle build stage."""
# pylint: disable=c-extension-no-member

import os

from dependency_injector import containers, providers

from common.config import load_config
from core.build.services import BuildPathResolver, BuildpackApiVerifier, PrivilegeGuard
from infra.buildpack import DirBuildpackStore, ProcessBuildExecutor
from infra.privilege import ProcessPrivilegeChecker
from infra.repositories import (
    TomlGroupRepository,
    TomlMetadataRepository,
    TomlPlanRepository,
)
from orchestrator.build.error_classifier import BuildErrorClassifier
from orchestrator.build.use_cases import RunBuildUseCase


class BuildContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Container wiring the build stage.

    Configuration is loaded lazily on first use so that a broken config file
    surfaces as a classified failure instead of an import error.
    """

    config_path = providers.Object(None)
    environ = providers.Object(os.environ)

    config = providers.Singleton(load_config, config_path=config_path, environ=environ)

    # --- File repositories ---
    group_repository = providers.Singleton(TomlGroupRepository)
    plan_repository = providers.Singleton(TomlPlanRepository)
    metadata_repository = providers.Singleton(TomlMetadataRepository)

    # --- Services ---
    privilege_checker = providers.Singleton(ProcessPrivilegeChecker)
    path_resolver = providers.Singleton(BuildPathResolver)
    api_verifier = providers.Factory(
        BuildpackApiVerifier,
        supported_buildpack_apis=config.provided.buildpack_api.supported,
        deprecated_buildpack_apis=config.provided.buildpack_api.deprecated,
        supported_platform_apis=config.provided.platform_api.supported,
        deprecation_mode=config.provided.deprecation_mode,
    )
    privilege_guard = providers.Factory(PrivilegeGuard, privilege_checker=privilege_checker)
    error_classifier = providers.Singleton(BuildErrorClassifier)

    # --- Execution engine ---
    build_executor = providers.Factory(
        ProcessBuildExecutor,
        store_factory=providers.Object(DirBuildpackStore),
    )

    run_build_use_case = providers.Factory(
        RunBuildUseCase,
        group_repo=group_repository,
        plan_repo=plan_repository,
        metadata_repo=metadata_repository,
        path_resolver=path_resolver,
        api_verifier=api_verifier,
        privilege_guard=privilege_guard,
        executor=build_executor,
        environ=environ,
    )


__all__ = ["BuildContainer"]
