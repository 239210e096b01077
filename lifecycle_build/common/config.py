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

"""Configuration loader for the lifecycle build stage."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

import configparser

DEFAULT_SUPPORTED_BUILDPACK_APIS = [
    "0.2", "0.3", "0.4", "0.5", "0.6", "0.7", "0.8", "0.9", "0.10",
]
DEFAULT_SUPPORTED_PLATFORM_APIS = [
    "0.3", "0.4", "0.5", "0.6", "0.7", "0.8", "0.9", "0.10", "0.11", "0.12", "0.13",
]
DEPRECATION_MODES = ("warn", "error", "quiet")


@dataclass
class ApiConfig:
    """API versions the lifecycle implements."""
    supported: List[str]
    deprecated: List[str] = field(default_factory=list)


@dataclass
class LifecycleConfig:
    """Lifecycle configuration."""
    buildpack_api: ApiConfig
    platform_api: ApiConfig
    deprecation_mode: str = "warn"
    log_level: str = "info"


def _split_list(raw: str) -> List[str]:
    """Split a comma or whitespace separated list."""
    return [item for item in raw.replace(",", " ").split() if item]


def default_config() -> LifecycleConfig:
    """Return the built-in configuration."""
    return LifecycleConfig(
        buildpack_api=ApiConfig(supported=list(DEFAULT_SUPPORTED_BUILDPACK_APIS)),
        platform_api=ApiConfig(supported=list(DEFAULT_SUPPORTED_PLATFORM_APIS)),
    )


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> LifecycleConfig:
    """Load lifecycle configuration from an optional INI file.

    Args:
        config_path: Path to configuration file. If None, uses the
                    CNB_LIFECYCLE_CONFIG_PATH environment variable; when
                    neither is set the built-in defaults are used.
        environ: Environment to read overrides from. Defaults to os.environ.

    Returns:
        LifecycleConfig instance.

    Raises:
        FileNotFoundError: If a named config file does not exist.
        ValueError: If config is invalid.
    """
    environ = os.environ if environ is None else environ
    config = default_config()

    if config_path is None:
        config_path = environ.get("CNB_LIFECYCLE_CONFIG_PATH") or None

    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        if not parser.sections():
            raise ValueError(f"Empty configuration file: {config_file}")

        for section, api_config in (
            ("buildpack_api", config.buildpack_api),
            ("platform_api", config.platform_api),
        ):
            if parser.has_option(section, "supported"):
                api_config.supported = _split_list(parser.get(section, "supported"))
            if parser.has_option(section, "deprecated"):
                api_config.deprecated = _split_list(parser.get(section, "deprecated"))
            if not api_config.supported:
                raise ValueError(f"{section}.supported cannot be empty")

        config.deprecation_mode = parser.get(
            "lifecycle", "deprecation_mode", fallback=config.deprecation_mode
        )
        config.log_level = parser.get("lifecycle", "log_level", fallback=config.log_level)

    # Environment wins over the file
    config.deprecation_mode = environ.get("CNB_DEPRECATION_MODE", config.deprecation_mode)
    config.log_level = environ.get("CNB_LOG_LEVEL", config.log_level)

    config.deprecation_mode = config.deprecation_mode.strip().lower()
    if config.deprecation_mode not in DEPRECATION_MODES:
        raise ValueError(
            f"Invalid deprecation mode: {config.deprecation_mode}. "
            f"Supported: {', '.join(DEPRECATION_MODES)}"
        )

    return config
