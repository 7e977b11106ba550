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
A collection is basically any value that has a known size and is iterable.

Layout: [N: decimal line][value_0]...[value_N]

>>> from cmcache.serialization.encoding.bytes import encode_bytes, decode_bytes
>>> se = Serializer.build_bytes_serializer()
>>> value = [b'foobar', b'', b'test']
>>> encode_collection(se, value, encode_bytes)
>>> se.finalize()
b'3\n6\nfoobar\n0\n\n4\ntest\n'

Breakdown of the result:

    3\n: 3 as a decimal line, the total length
    6\nfoobar\n: b'foobar' (with length prefix)
    0\n\n: b'' (with length prefix)
    4\ntest\n: b'test' (with length prefix)

When decoding, the builder can be any compatible collection, in the previous example a `list` was encoded, but when
decoding a `tuple` could be used, it only matters that the collection can be initialized with an `Iterable[T]`.

>>> de = Deserializer.build_bytes_deserializer(b'3\n6\nfoobar\n0\n\n4\ntest\n')
>>> decode_collection(de, decode_bytes, tuple)
(b'foobar', b'', b'test')
>>> de.finalize()

A count that cannot possibly fit in what is left of the buffer is rejected before any element is read:

>>> de = Deserializer.build_bytes_deserializer(b'1000000\n1\nx\n')
>>> try:
...     decode_collection(de, decode_bytes, list)
... except OutOfDataError as e:
...     print(*e.args)
count of 1000000 exceeds the 4 bytes left
"""

from collections.abc import Collection, Iterable
from typing import Callable, TypeVar

from cmcache.serialization import Deserializer, OutOfDataError, Serializer
from cmcache.serialization.encoding.line import decode_count, encode_decimal

from . import Decoder, Encoder

T = TypeVar('T')
R = TypeVar('R', bound=Collection)


def check_count(deserializer: Deserializer, count: int) -> None:
    """Every element takes at least one byte, so a count bigger than the bytes left means the data is truncated."""
    left = deserializer.remaining()
    if count > left:
        raise OutOfDataError(f'count of {count} exceeds the {left} bytes left')


def encode_collection(serializer: Serializer, values: Collection[T], encoder: Encoder[T]) -> None:
    encode_decimal(serializer, len(values))
    for value in values:
        encoder(serializer, value)


def decode_collection(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[Iterable[T]], R],
) -> R:
    length = decode_count(deserializer)
    check_count(deserializer, length)
    return builder(decoder(deserializer) for _ in range(length))
