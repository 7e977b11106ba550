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

from typing_extensions import override

from .deserializer import Deserializer
from .exceptions import OutOfDataError, SerializationError
from .types import Buffer


class BytesDeserializer(Deserializer):
    """Simple implementation of a Deserializer to parse values from a byte sequence.

    This implementation owns an immutable copy of the data and walks it with an integer cursor, every read is bounds
    checked against the end of the buffer. An instance must not be shared between concurrent decodes.
    """

    def __init__(self, data: Buffer) -> None:
        self._data = bytes(data)
        self._size = len(self._data)
        self._pos = 0

    @override
    def finalize(self) -> None:
        if not self.is_empty():
            raise SerializationError('trailing data')
        del self._data

    @override
    def is_empty(self) -> bool:
        return self._pos >= self._size

    @override
    def cur_pos(self) -> int:
        return self._pos

    @override
    def remaining(self) -> int:
        return self._size - self._pos

    @override
    def peek_byte(self) -> int:
        if self.is_empty():
            raise OutOfDataError('not enough bytes to read')
        return self._data[self._pos]

    @override
    def peek_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        if self.remaining() < n:
            raise OutOfDataError(f'not enough bytes to read: need {n}, have {self.remaining()}')
        return self._data[self._pos:self._pos + n]

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        self._pos += 1
        return b

    @override
    def read_bytes(self, n: int) -> bytes:
        b = self.peek_bytes(n)
        self._pos += n
        return b

    @override
    def skip(self, n: int) -> None:
        if n < 0:
            raise ValueError('value cannot be negative')
        if self.remaining() < n:
            raise OutOfDataError(f'not enough bytes to skip: need {n}, have {self.remaining()}')
        self._pos += n

    @override
    def read_line(self) -> bytes:
        if self.is_empty():
            raise OutOfDataError('not enough bytes to read a line')
        end = self._data.find(b'\n', self._pos)
        end = self._size if end < 0 else end + 1
        line = self._data[self._pos:end]
        self._pos = end
        return line

    @override
    def read_all(self) -> bytes:
        b = self._data[self._pos:]
        self._pos = self._size
        return b
