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

"""Environment contributed by build layers to later buildpacks.

A layer flagged ``build = true`` exposes its ``bin``, ``lib``, ``include``
and ``pkgconfig`` directories and the variables in its ``env`` and
``env.build`` directories to every buildpack that runs after it.
"""

import logging
import os
from pathlib import Path
from typing import Dict, MutableMapping

from core.build.value_objects import BuildEnv

logger = logging.getLogger(__name__)

ENV_DIR_NAMES = ("env", "env.build")


def _prepend(env: MutableMapping[str, str], name: str, value: str, delim: str) -> None:
    current = env.get(name)
    env[name] = f"{value}{delim}{current}" if current else value


def _append(env: MutableMapping[str, str], name: str, value: str, delim: str) -> None:
    current = env.get(name)
    env[name] = f"{current}{delim}{value}" if current else value


def _read_env_dir(env_dir: Path) -> Dict[str, str]:
    files = {}
    for entry in sorted(env_dir.iterdir()):
        if entry.is_file():
            files[entry.name] = entry.read_text(encoding="utf-8")
    return files


def apply_env_dir(env: MutableMapping[str, str], env_dir: Path) -> None:
    """Apply ``NAME.override|default|prepend|append`` files from ``env_dir``.

    A file without suffix overrides. Delimiters come from ``NAME.delim``.
    """
    files = _read_env_dir(env_dir)
    for file_name, value in files.items():
        name, _, action = file_name.partition(".")
        if action == "delim":
            continue
        delim = files.get(f"{name}.delim", "")
        if action in ("", "override"):
            env[name] = value
        elif action == "default":
            env.setdefault(name, value)
        elif action == "prepend":
            _prepend(env, name, value, delim)
        elif action == "append":
            _append(env, name, value, delim)
        else:
            logger.warning("Ignoring env file with unknown action: %s", env_dir / file_name)


def apply_build_layer(env: MutableMapping[str, str], layer_dir: Path) -> None:
    """Expose a build layer to the environment of later buildpacks."""
    for subdir, names in BuildEnv.POSIX_PATH_VARS.items():
        path = layer_dir / subdir
        if path.is_dir():
            for name in names:
                _prepend(env, name, str(path), os.pathsep)
    for env_dir_name in ENV_DIR_NAMES:
        env_dir = layer_dir / env_dir_name
        if env_dir.is_dir():
            apply_env_dir(env, env_dir)
