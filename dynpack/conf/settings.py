# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import field_validator

from dynpack.utils import pydantic

_EXTENDS_KEY = 'extends'


class CodecSettings(pydantic.BaseModel):
    # Containers nested deeper than this are rejected, both when encoding and decoding. This also stops
    # self-referencing lists and dicts from recursing forever.
    MAX_DEPTH: int = 256

    # Largest element count, entry count or run length accepted when decoding. Decoded counts are untrusted input, this
    # bounds the memory a single small buffer can make the decoder allocate.
    MAX_CONTAINER_LENGTH: int = 16_777_216

    # Longest varint accepted when decoding, 10 bytes hold any 64-bit value. `None` removes the limit.
    MAX_VARINT_BYTES: Optional[int] = 10

    # Bound on the size of the output of a single encode call. `None` removes the limit.
    MAX_ENCODED_BYTES: Optional[int] = None

    # Bound on the bytes a single decode call may consume. `None` removes the limit.
    MAX_DECODED_BYTES: Optional[int] = None

    @field_validator('MAX_DEPTH', 'MAX_CONTAINER_LENGTH')
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError('must be a positive integer')
        return value

    @field_validator('MAX_VARINT_BYTES', 'MAX_ENCODED_BYTES', 'MAX_DECODED_BYTES')
    @classmethod
    def _validate_optional_positive(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError('must be a positive integer or null')
        return value

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'CodecSettings':
        """Takes a filepath to a yaml file and returns the validated CodecSettings object.

        A file may set the 'extends' key to the path of another settings file, relative to itself, whose values it
        overrides.
        """
        return cls.model_validate(_settings_dict_from_yaml(Path(filepath), seen=set()))


def _settings_dict_from_yaml(filepath: Path, *, seen: set[Path]) -> dict[str, Any]:
    if not os.path.isfile(filepath):
        raise ValueError(f"'{filepath}' is not a file")

    resolved = filepath.resolve()
    if resolved in seen:
        raise ValueError(f"'{filepath}' extends itself")
    seen.add(resolved)

    with open(filepath, 'r') as file:
        contents = yaml.safe_load(file)

    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ValueError(f"'{filepath}' cannot be parsed as a dictionary")

    base_file = contents.pop(_EXTENDS_KEY, None)
    if not base_file:
        return contents

    settings = _settings_dict_from_yaml(filepath.parent / str(base_file), seen=seen)
    settings.update(contents)
    return settings
