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

"""TOML implementation of PlanRepository."""

import logging

from core.build.entities import BuildPlan
from core.build.exceptions import ConfigReadError
from core.build.repositories import PlanRepository
from infra.toml.codec import TomlDecodeError, read_model
from infra.toml.mappers import PlanMapper
from infra.toml.schemas import PlanFileSchema

logger = logging.getLogger(__name__)

PARSE_PLAN_ACTION = "parse detect plan"


class TomlPlanRepository(PlanRepository):
    """Reads ``plan.toml`` written by the detect stage."""

    def load(self, path: str) -> BuildPlan:
        """Load the build plan at ``path``.

        Raises:
            ConfigReadError: If the file is missing, unreadable or malformed.
        """
        try:
            schema = read_model(path, PlanFileSchema)
        except TomlDecodeError as exc:
            raise ConfigReadError(path, PARSE_PLAN_ACTION, exc.reason, cause=exc) from exc

        plan = PlanMapper.to_domain(schema)
        logger.debug("Read plan from %s with %d entries", path, len(plan.entries))
        return plan
