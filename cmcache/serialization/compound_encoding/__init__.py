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

"""
Encodings of values that hold other values.

Arrays, tuples, instruction sequences and lookup tables all share the same shape on the wire: a decimal count
line followed by that many items (key and value pairs for tables). The modules here write and read that shape and
hand every item to a callable that knows its type:

    encode_collection(serializer, [1, 2], encode_decimal)
    decode_collection(deserializer, decode_decimal, list)

Item callables only see the serializer or deserializer, any extra state (like the current nesting depth) is bound
beforehand, usually with `functools.partial`.
"""

from typing import Protocol, TypeVar

from cmcache.serialization.deserializer import Deserializer
from cmcache.serialization.serializer import Serializer

T_co = TypeVar('T_co', covariant=True)
T_contra = TypeVar('T_contra', contravariant=True)


class Decoder(Protocol[T_co]):
    """Reads one item."""

    def __call__(self, deserializer: Deserializer, /) -> T_co:
        ...


class Encoder(Protocol[T_contra]):
    """Writes one item."""

    def __call__(self, serializer: Serializer, value: T_contra, /) -> None:
        ...
