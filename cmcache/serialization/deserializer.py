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

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator

from .exceptions import OutOfDataError
from .types import Buffer

if TYPE_CHECKING:
    from .bytes_deserializer import BytesDeserializer

NEWLINE = 0x0a


class Deserializer(ABC):
    def finalize(self) -> None:
        """Check that all bytes were consumed, the deserializer cannot be used after this."""
        raise TypeError('this deserializer does not support finalization')

    @staticmethod
    def build_bytes_deserializer(data: Buffer) -> BytesDeserializer:
        from .bytes_deserializer import BytesDeserializer
        return BytesDeserializer(data)

    @abstractmethod
    def is_empty(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def cur_pos(self) -> int:
        """Offset of the cursor from the start of the buffer."""
        raise NotImplementedError

    @abstractmethod
    def remaining(self) -> int:
        """Number of bytes not consumed yet."""
        raise NotImplementedError

    @abstractmethod
    def peek_byte(self) -> int:
        """Read a single byte but don't consume from buffer."""
        raise NotImplementedError

    @abstractmethod
    def peek_bytes(self, n: int) -> bytes:
        """Read n bytes but don't consume from buffer."""
        raise NotImplementedError

    @abstractmethod
    def read_byte(self) -> int:
        """Read a single byte as unsigned int."""
        raise NotImplementedError

    @abstractmethod
    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes, newlines included, errors if there isn't enough data."""
        raise NotImplementedError

    def skip(self, n: int) -> None:
        """Advance the cursor by n bytes, errors if there isn't enough data."""
        self.read_bytes(n)

    def read_line(self) -> bytes:
        """Read up to and including the next newline, or up to the end of the buffer if there is no newline left.

        It errors when the buffer is already exhausted.
        """
        # XXX: this is a blanket implementation, implementors of Deserializer should specialize it
        if self.is_empty():
            raise OutOfDataError('not enough bytes to read a line')

        def iter_bytes() -> Iterator[int]:
            while not self.is_empty():
                b = self.read_byte()
                yield b
                if b == NEWLINE:
                    break
        return bytes(iter_bytes())

    @abstractmethod
    def read_all(self) -> bytes:
        """Read all bytes until the reader is empty."""
        raise NotImplementedError
