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

"""TOML file helpers shared by the lifecycle file repositories."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Type, TypeVar, Union

import tomli_w
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class TomlDecodeError(ValueError):
    """A TOML file could not be read, parsed or validated."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


def read_toml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a TOML file into a dictionary.

    Raises:
        TomlDecodeError: If the file is missing, unreadable, not UTF-8 or not valid TOML.
    """
    try:
        with open(path, "rb") as toml_file:
            return tomllib.load(toml_file)
    except FileNotFoundError as exc:
        raise TomlDecodeError(path, "file does not exist") from exc
    except OSError as exc:
        raise TomlDecodeError(path, f"cannot read file: {exc.strerror or exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlDecodeError(path, f"invalid TOML: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise TomlDecodeError(path, f"invalid encoding: {exc}") from exc


def read_model(path: Union[str, Path], model: Type[ModelT]) -> ModelT:
    """Read a TOML file and validate it against ``model``.

    Raises:
        TomlDecodeError: If the file cannot be read or does not match the schema.
    """
    data = read_toml(path)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise TomlDecodeError(path, f"invalid content: {exc}") from exc


def write_toml(path: Union[str, Path], data: Dict[str, Any]) -> Path:
    """Write ``data`` as TOML, replacing ``path`` atomically.

    The parent directory is created when missing.

    Raises:
        OSError: If the file cannot be written.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_name(f".{target.name}.tmp")
    try:
        with open(tmp_path, "wb") as toml_file:
            tomli_w.dump(data, toml_file)
        os.replace(tmp_path, target)
    except (OSError, TypeError, ValueError):
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s", target)
    return target


def write_model(path: Union[str, Path], model: BaseModel) -> Path:
    """Serialize a schema model with lifecycle key names and write it."""
    return write_toml(path, model.model_dump(by_alias=True))
