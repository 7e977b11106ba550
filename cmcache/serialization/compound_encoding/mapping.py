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
Encoding a mapping is equivalent to encoding a collection of 2-tuples.

Layout: [N: decimal line][key_0][value_0]...[key_N][value_N]

Entry order is the iteration order of the mapping, readers must not depend on it.

>>> from cmcache.serialization.encoding.bytes import encode_bytes, decode_bytes
>>> from cmcache.serialization.encoding.line import encode_decimal, decode_decimal
>>> se = Serializer.build_bytes_serializer()
>>> value = {
...     b'foo': 1,
...     b'bar': -2,
... }
>>> encode_mapping(se, value, encode_bytes, encode_decimal)
>>> se.finalize()
b'2\n3\nfoo\n1\n3\nbar\n-2\n'

Breakdown of the result:

    2\n: 2 as a decimal line, the total length
    3\nfoo\n: b'foo' with length prefix
    1\n: 1
    3\nbar\n: b'bar' with length prefix
    -2\n: -2

>>> de = Deserializer.build_bytes_deserializer(b'2\n3\nfoo\n1\n3\nbar\n-2\n')
>>> decode_mapping(de, decode_bytes, decode_decimal, dict)
{b'foo': 1, b'bar': -2}
>>> de.finalize()
"""

from collections.abc import Iterable, Mapping
from typing import Callable, TypeVar

from cmcache.serialization import Deserializer, Serializer
from cmcache.serialization.encoding.line import decode_count, encode_decimal

from . import Decoder, Encoder
from .collection import check_count

KT = TypeVar('KT')
VT = TypeVar('VT')
R = TypeVar('R', bound=Mapping)


def encode_mapping(
    serializer: Serializer,
    values_mapping: Mapping[KT, VT],
    key_encoder: Encoder[KT],
    value_encoder: Encoder[VT],
) -> None:
    encode_decimal(serializer, len(values_mapping))
    for key, value in values_mapping.items():
        key_encoder(serializer, key)
        value_encoder(serializer, value)


def decode_mapping(
    deserializer: Deserializer,
    key_decoder: Decoder[KT],
    value_decoder: Decoder[VT],
    mapping_builder: Callable[[Iterable[tuple[KT, VT]]], R],
) -> R:
    size = decode_count(deserializer)
    check_count(deserializer, size)
    return mapping_builder(
        (key_decoder(deserializer), value_decoder(deserializer))
        for _ in range(size)
    )
