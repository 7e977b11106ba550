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

r"""
This modules implements encoding of byte sequence by prefixing it with the length of the sequence written as a decimal
line, the raw bytes are followed by a single newline.

Layout: [N: decimal line][N raw bytes][\n]

The payload is read by length, so it may contain newlines.

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'test')
>>> encode_bytes(se, b'a\nb')
>>> encoded = se.finalize()
>>> encoded
b'4\ntest\n3\na\nb\n'

>>> de = Deserializer.build_bytes_deserializer(encoded)
>>> decode_bytes(de)
b'test'
>>> decode_bytes(de)
b'a\nb'
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(b'0\n\n')
>>> decode_bytes(de)
b''

>>> de = Deserializer.build_bytes_deserializer(b'10\nshort\n')
>>> try:
...     decode_bytes(de)
... except OutOfDataError as e:
...     print(*e.args)
not enough bytes to read: need 10, have 6
"""

from cmcache.serialization import Deserializer, OutOfDataError, Serializer  # noqa: F401

from ..types import Buffer
from .line import decode_count, encode_decimal


def encode_bytes(serializer: Serializer, data: Buffer) -> None:
    """ Encodes a byte-sequence adding a length prefix and a newline suffix.

    This module's docstring has more details and examples.
    """
    data = bytes(data)
    encode_decimal(serializer, len(data))
    serializer.write_bytes(data)
    serializer.write_byte(0x0a)


def decode_bytes(deserializer: Deserializer) -> bytes:
    """ Decodes a byte-sequence with a length prefix and a newline suffix.

    This module's docstring has more details and examples.
    """
    size = decode_count(deserializer)
    data = deserializer.read_bytes(size)
    # the newline that follows the payload is consumed without being checked
    deserializer.skip(1)
    return data
