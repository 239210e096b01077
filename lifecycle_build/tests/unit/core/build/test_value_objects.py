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

"""Unit tests for build stage value objects."""

import pytest

from core.build.value_objects import ApiVersion, BuildEnv, BuildPaths


class TestApiVersion:
    """Tests for ApiVersion."""

    def test_parse_major_minor(self):
        """Parse a plain <major>.<minor> version."""
        assert ApiVersion.parse("0.9") == ApiVersion(0, 9)

    def test_parse_with_prefix_and_no_minor(self):
        """A leading v and a missing minor are accepted."""
        assert ApiVersion.parse("v1") == ApiVersion(1, 0)

    @pytest.mark.parametrize("value", ["", "   ", "abc", "0.x", "1.2.3", None])
    def test_parse_invalid(self, value):
        """Unparseable versions are rejected."""
        with pytest.raises(ValueError):
            ApiVersion.parse(value)

    def test_ordering(self):
        """Versions order numerically, not lexically."""
        assert ApiVersion.parse("0.10") > ApiVersion.parse("0.9")
        assert ApiVersion(0, 5) < ApiVersion(1, 0)

    def test_str(self):
        """String form is <major>.<minor>."""
        assert str(ApiVersion(0, 12)) == "0.12"

    def test_pre_release_requires_exact_minor(self):
        """Pre-1.0 versions only support the same minor."""
        assert ApiVersion(0, 9).supports(ApiVersion(0, 9))
        assert not ApiVersion(0, 9).supports(ApiVersion(0, 8))

    def test_stable_supports_older_minor(self):
        """From 1.0, a newer minor serves older requests of the same major."""
        assert ApiVersion(1, 2).supports(ApiVersion(1, 1))
        assert not ApiVersion(1, 1).supports(ApiVersion(1, 2))
        assert not ApiVersion(2, 0).supports(ApiVersion(1, 0))

    def test_is_supported_by(self):
        """Check against a list of supported versions."""
        supported = [ApiVersion(0, 8), ApiVersion(0, 9)]
        assert ApiVersion(0, 9).is_supported_by(supported)
        assert not ApiVersion(0, 7).is_supported_by(supported)


class TestBuildEnv:
    """Tests for BuildEnv."""

    def test_from_environ_keeps_allow_listed_names(self):
        """Only allow-listed and path variables survive the snapshot."""
        env = BuildEnv.from_environ({
            "PATH": "/usr/bin",
            "HOME": "/home/cnb",
            "CNB_STACK_ID": "stack",
            "SECRET_TOKEN": "s3cr3t",
            "CNB_PLATFORM_API": "0.9",
        })

        assert env.to_dict() == {
            "PATH": "/usr/bin",
            "HOME": "/home/cnb",
            "CNB_STACK_ID": "stack",
        }

    def test_snapshot_is_read_only(self):
        """The captured mapping cannot be mutated."""
        env = BuildEnv.from_environ({"PATH": "/bin"})

        with pytest.raises(TypeError):
            env.vars["PATH"] = "/tmp"

    def test_snapshot_is_independent_of_source(self):
        """Later changes to the source mapping are not seen."""
        source = {"PATH": "/bin"}
        env = BuildEnv.from_environ(source)
        source["PATH"] = "/changed"

        assert env.get("PATH") == "/bin"

    def test_get_default(self):
        """Missing variables return the default."""
        assert BuildEnv().get("HOME", "none") == "none"

    def test_allowed_names_include_path_vars(self):
        """Every POSIX path variable is retained."""
        names = BuildEnv.allowed_names()
        for var in ("PATH", "LD_LIBRARY_PATH", "LIBRARY_PATH", "CPATH", "PKG_CONFIG_PATH"):
            assert var in names


class TestBuildPaths:
    """Tests for BuildPaths."""

    def test_valid_paths(self):
        """Paths are stored as given."""
        paths = BuildPaths(group_path="/layers/group.toml", plan_path="/layers/plan.toml")
        assert paths.group_path == "/layers/group.toml"
        assert paths.plan_path == "/layers/plan.toml"

    @pytest.mark.parametrize("group_path,plan_path", [("", "plan.toml"), ("group.toml", " ")])
    def test_empty_paths_rejected(self, group_path, plan_path):
        """Empty paths are rejected."""
        with pytest.raises(ValueError):
            BuildPaths(group_path=group_path, plan_path=plan_path)
