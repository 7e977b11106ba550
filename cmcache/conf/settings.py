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

from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

# Each nesting level takes about three interpreter frames while decoding, this keeps the deepest allowed value well
# below the default recursion limit
MAX_DEPTH_LIMIT = 256


class CompiledFileSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra='forbid')

    # First header line of every compiled file
    MAGIC: str = '!RBIX'

    # Container version written in the second header line, it is not checked when reading
    VERSION: int = 0

    # Third header line, reserved for an integrity tag, nothing computes or verifies it yet
    INTEGRITY_TAG: str = 'x'

    # Maximum nesting of arrays, tuples, lookup tables and compiled methods, on both encode and decode
    MAX_DEPTH: int = 128

    @field_validator('MAGIC', 'INTEGRITY_TAG')
    @classmethod
    def _single_line(cls, value: str) -> str:
        if '\n' in value:
            raise ValueError('header fields cannot contain a newline')
        return value

    @field_validator('MAX_DEPTH')
    @classmethod
    def _depth_in_range(cls, value: int) -> int:
        if not 1 <= value <= MAX_DEPTH_LIMIT:
            raise ValueError(f'MAX_DEPTH must be between 1 and {MAX_DEPTH_LIMIT}')
        return value

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str], custom_root: Optional[Path] = None) -> 'CompiledFileSettings':
        """Takes a filepath to a yaml file and returns a validated CompiledFileSettings instance."""
        from cmcache.utils.yaml import model_from_extended_yaml
        return model_from_extended_yaml(cls, filepath=filepath, custom_root=custom_root)
