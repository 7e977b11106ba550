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

from enum import IntEnum, unique


@unique
class Tag(IntEnum):
    """The single ASCII byte that precedes every value, it is always followed by exactly one newline."""

    TRUE = ord('t')
    FALSE = ord('f')
    NIL = ord('n')
    INTEGER = ord('I')
    FLOAT = ord('d')
    STRING = ord('s')
    SYMBOL = ord('x')
    SEND_SITE = ord('S')
    ARRAY = ord('A')
    TUPLE = ord('p')
    INSTRUCTION_SEQUENCE = ord('i')
    LOOKUP_TABLE = ord('l')
    COMPILED_METHOD = ord('M')

    @classmethod
    def from_byte(cls, value: int) -> 'Tag | None':
        try:
            return cls(value)
        except ValueError:
            return None

    def as_bytes(self) -> bytes:
        return bytes([self, 0x0a])


# Format version of the compiled method record, written right after its tag.
COMPILED_METHOD_VERSION = 1
