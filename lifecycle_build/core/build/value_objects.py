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

"""Value objects for the Build stage domain.

All value objects are immutable and defined by their values, not identity.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar, Dict, Iterable, Iterator, List, Mapping, Tuple


@dataclass(frozen=True, order=True)
class ApiVersion:
    """Buildpack or platform API version.

    Attributes:
        major: Major version component.
        minor: Minor version component.

    Raises:
        ValueError: If the version string cannot be parsed.
    """

    major: int
    minor: int

    VERSION_PATTERN: ClassVar[str] = r'^v?(\d+)\.?(\d*)$'

    @classmethod
    def parse(cls, value: str) -> "ApiVersion":
        """Parse a version string such as ``0.9`` or ``v1``."""
        if value is None or not str(value).strip():
            raise ValueError("API version cannot be empty")
        match = re.match(cls.VERSION_PATTERN, str(value).strip())
        if not match:
            raise ValueError(
                f"Invalid API version: {value}. Must match <major>.<minor>"
            )
        minor = int(match.group(2)) if match.group(2) else 0
        return cls(major=int(match.group(1)), minor=minor)

    def supports(self, requested: "ApiVersion") -> bool:
        """Return True if this supported version can serve ``requested``.

        Pre-1.0 versions are only compatible with the exact same minor.
        """
        if self.major != requested.major:
            return False
        if self.major == 0:
            return self.minor == requested.minor
        return self.minor >= requested.minor

    def is_supported_by(self, supported: Iterable["ApiVersion"]) -> bool:
        """Check the version against a list of supported versions."""
        return any(candidate.supports(self) for candidate in supported)

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class BuildEnv:
    """Snapshot of the process environment handed to buildpacks.

    Captured once per build so every buildpack in the group starts from the
    same baseline. Only allow-listed variables survive the snapshot.

    Attributes:
        vars: Read-only mapping of variable name to value.
    """

    vars: Mapping[str, str] = field(default_factory=dict)

    INCLUDE_LIST: ClassVar[Tuple[str, ...]] = (
        "CNB_STACK_ID",
        "HOSTNAME",
        "HOME",
        "HTTPS_PROXY",
        "https_proxy",
        "HTTP_PROXY",
        "http_proxy",
        "NO_PROXY",
        "no_proxy",
    )
    POSIX_PATH_VARS: ClassVar[Dict[str, List[str]]] = {
        "bin": ["PATH"],
        "lib": ["LD_LIBRARY_PATH", "LIBRARY_PATH"],
        "include": ["CPATH"],
        "pkgconfig": ["PKG_CONFIG_PATH"],
    }

    def __post_init__(self) -> None:
        """Freeze the variable mapping."""
        object.__setattr__(self, "vars", MappingProxyType(dict(self.vars)))

    @classmethod
    def allowed_names(cls) -> Tuple[str, ...]:
        """Return every variable name retained from the process environment."""
        path_vars = [name for names in cls.POSIX_PATH_VARS.values() for name in names]
        return cls.INCLUDE_LIST + tuple(path_vars)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "BuildEnv":
        """Capture the allow-listed subset of ``environ``."""
        allowed = set(cls.allowed_names())
        return cls(vars={k: v for k, v in environ.items() if k in allowed})

    def get(self, name: str, default: str = "") -> str:
        """Return the value of ``name`` or ``default``."""
        return self.vars.get(name, default)

    def to_dict(self) -> Dict[str, str]:
        """Return a mutable copy of the variables."""
        return dict(self.vars)

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)

    def __len__(self) -> int:
        return len(self.vars)


@dataclass(frozen=True)
class BuildPaths:
    """Group and plan file locations for one build invocation.

    Attributes:
        group_path: Path to the buildpack group file.
        plan_path: Path to the detect plan file.
    """

    group_path: str
    plan_path: str

    def __post_init__(self) -> None:
        """Validate paths."""
        if not self.group_path or not self.group_path.strip():
            raise ValueError("Group path cannot be empty")
        if not self.plan_path or not self.plan_path.strip():
            raise ValueError("Plan path cannot be empty")
