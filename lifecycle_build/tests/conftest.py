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

"""Shared pytest fixtures for lifecycle build stage tests."""

# pylint: disable=redefined-outer-name

import logging

import pytest

# Note: pythonpath is set in pytest.ini at project root


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging calls so every test starts from the same root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in [h for h in root.handlers if type(h) is logging.StreamHandler]:
        root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def cnb_environ(tmp_path):
    """Return a minimal process environment pointing at a tmp lifecycle layout."""
    layers = tmp_path / "layers"
    app = tmp_path / "workspace"
    platform = tmp_path / "platform"
    buildpacks = tmp_path / "buildpacks"
    for directory in (layers, app, platform, buildpacks):
        directory.mkdir()
    return {
        "PATH": "/usr/local/bin:/usr/bin:/bin",
        "HOME": str(tmp_path),
        "CNB_LAYERS_DIR": str(layers),
        "CNB_APP_DIR": str(app),
        "CNB_PLATFORM_DIR": str(platform),
        "CNB_BUILDPACKS_DIR": str(buildpacks),
        "CNB_PLATFORM_API": "0.9",
    }
