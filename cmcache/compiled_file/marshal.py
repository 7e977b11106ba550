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
This module converts values to and from the tagged encoding used as the body of a compiled file.

Every value starts with a one byte tag and a newline, what follows depends on the tag:

    t, f, n   nothing
    I         decimal line
    d         float line (decimal, Infinity, -Infinity or NaN)
    s, x, S   [length line][raw bytes][\n]
    A, p      [count line] followed by count tagged values
    i         [count line] followed by count decimal lines (not tagged)
    l         [count line] followed by count pairs of [length line][raw key bytes][\n] and a tagged value
    M         [version line] followed by the 14 fields of a compiled method as tagged values

>>> marshal([1, b'a'])
b'A\n2\nI\n1\ns\n1\na\n'
>>> unmarshal(b'A\n2\nI\n1\ns\n1\na\n')
[1, b'a']
>>> marshal(LookupTable({Symbol('foo'): 1}))
b'l\n1\n3\nfoo\nI\n1\n'
>>> unmarshal(b'l\n1\n3\nfoo\nI\n1\n')
LookupTable({Symbol('foo'): 1})

Decoding stops after the first complete value, `unmarshal_exact` also requires that nothing follows it:

>>> unmarshal(b't\nf\n')
True
>>> try:
...     unmarshal_exact(b't\nf\n')
... except SerializationError as e:
...     print(*e.args)
trailing data
"""

from functools import partial
from typing import IO, Any, Union

from typing_extensions import assert_never

from cmcache.conf.settings import MAX_DEPTH_LIMIT
from cmcache.model import CompiledMethod, InstructionSequence, LookupTable, SendSite, Symbol
from cmcache.serialization import (
    Deserializer,
    SerializationError,
    Serializer,
    TooDeepError,
    UnknownTagError,
    UnsupportedTypeError,
    UnsupportedVersionError,
)
from cmcache.serialization.compound_encoding.collection import check_count, decode_collection, encode_collection
from cmcache.serialization.compound_encoding.mapping import decode_mapping, encode_mapping
from cmcache.serialization.encoding.bytes import decode_bytes, encode_bytes
from cmcache.serialization.encoding.float import decode_float, encode_float
from cmcache.serialization.encoding.line import decode_count, decode_decimal, encode_decimal
from cmcache.serialization.types import Buffer

from .tags import COMPILED_METHOD_VERSION, Tag

Source = Union[Buffer, IO[bytes]]


def _name_to_bytes(name: str) -> bytes:
    # surrogateescape gives back the exact bytes of names that were not valid utf-8 when read
    try:
        return name.encode('utf-8', 'surrogateescape')
    except UnicodeEncodeError as e:
        raise UnsupportedTypeError(f'text has no utf-8 encoding: {name!r:.80}') from e


def _bytes_to_name(data: bytes) -> str:
    return data.decode('utf-8', 'surrogateescape')


def encode_name(serializer: Serializer, name: str) -> None:
    encode_bytes(serializer, _name_to_bytes(name))


def decode_symbol(deserializer: Deserializer) -> Symbol:
    return Symbol(_bytes_to_name(decode_bytes(deserializer)))


def encode_opcode(serializer: Serializer, opcode: int) -> None:
    if isinstance(opcode, bool) or not isinstance(opcode, int):
        raise UnsupportedTypeError(f'opcode must be an int, got {type(opcode).__name__}')
    encode_decimal(serializer, opcode)


def encode_table_key(serializer: Serializer, key: Any) -> None:
    if isinstance(key, str):
        encode_name(serializer, key)
    elif isinstance(key, (bytes, bytearray, memoryview)):
        encode_bytes(serializer, key)
    else:
        raise UnsupportedTypeError(f'lookup table key must be a symbol, got {type(key).__name__}')


def read_source(source: Source) -> Buffer:
    """Return the bytes of `source`, a stream is read until its end."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return source
    data = source.read()
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f'expected a binary stream, read {type(data).__name__}')
    return data


class Marshal:
    """Encoder and decoder for the tagged value format.

    An instance holds configuration only, every call to `marshal` or `unmarshal` uses its own serializer or
    deserializer, so an instance can be shared between threads.
    """

    def __init__(self, *, max_depth: int | None = None) -> None:
        if max_depth is None:
            from cmcache.conf.get_settings import get_global_settings
            max_depth = get_global_settings().MAX_DEPTH
        if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(f'max_depth must be between 1 and {MAX_DEPTH_LIMIT}')
        self.max_depth = max_depth

    def marshal(self, value: Any) -> bytes:
        """Return the encoding of `value`."""
        serializer = Serializer.build_bytes_serializer()
        self.encode_value(serializer, value)
        return serializer.finalize()

    def unmarshal(self, source: Source) -> Any:
        """Decode the first value of `source`, anything after it is ignored."""
        deserializer = Deserializer.build_bytes_deserializer(read_source(source))
        return self.decode_value(deserializer)

    def unmarshal_exact(self, source: Source) -> Any:
        """Decode a single value and fail if `source` has anything after it."""
        deserializer = Deserializer.build_bytes_deserializer(read_source(source))
        value = self.decode_value(deserializer)
        deserializer.finalize()
        return value

    def _enter(self, depth: int) -> int:
        depth += 1
        if depth > self.max_depth:
            raise TooDeepError(self.max_depth)
        return depth

    def encode_value(self, serializer: Serializer, value: Any, depth: int = 0) -> None:
        """Write the tag and payload of `value`, containers are written recursively."""
        match value:
            case True:
                serializer.write_bytes(Tag.TRUE.as_bytes())
            case False:
                serializer.write_bytes(Tag.FALSE.as_bytes())
            case None:
                serializer.write_bytes(Tag.NIL.as_bytes())
            case int():
                serializer.write_bytes(Tag.INTEGER.as_bytes())
                encode_decimal(serializer, value)
            case float():
                serializer.write_bytes(Tag.FLOAT.as_bytes())
                encode_float(serializer, value)
            case Symbol():
                serializer.write_bytes(Tag.SYMBOL.as_bytes())
                encode_name(serializer, value)
            case str():
                serializer.write_bytes(Tag.STRING.as_bytes())
                encode_name(serializer, value)
            case bytes() | bytearray() | memoryview():
                serializer.write_bytes(Tag.STRING.as_bytes())
                encode_bytes(serializer, value)
            case SendSite():
                serializer.write_bytes(Tag.SEND_SITE.as_bytes())
                encode_name(serializer, value.name)
            case list():
                inner = self._enter(depth)
                serializer.write_bytes(Tag.ARRAY.as_bytes())
                encode_collection(serializer, value, partial(self.encode_value, depth=inner))
            case tuple():
                inner = self._enter(depth)
                serializer.write_bytes(Tag.TUPLE.as_bytes())
                encode_collection(serializer, value, partial(self.encode_value, depth=inner))
            case InstructionSequence():
                serializer.write_bytes(Tag.INSTRUCTION_SEQUENCE.as_bytes())
                encode_collection(serializer, value.opcodes, encode_opcode)
            case dict():
                inner = self._enter(depth)
                serializer.write_bytes(Tag.LOOKUP_TABLE.as_bytes())
                encode_mapping(serializer, value, encode_table_key, partial(self.encode_value, depth=inner))
            case CompiledMethod():
                inner = self._enter(depth)
                serializer.write_bytes(Tag.COMPILED_METHOD.as_bytes())
                encode_decimal(serializer, COMPILED_METHOD_VERSION)
                for field_value in value.field_values():
                    self.encode_value(serializer, field_value, inner)
            case _:
                raise UnsupportedTypeError(f'unknown type {type(value).__name__}: {value!r:.80}')

    def decode_value(self, deserializer: Deserializer, depth: int = 0) -> Any:
        """Read one tagged value, containers are read recursively."""
        offset = deserializer.cur_pos()
        raw_tag = deserializer.read_byte()
        tag = Tag.from_byte(raw_tag)
        if tag is None:
            raise UnknownTagError(raw_tag, offset)
        # the byte after a tag is always a newline and is not checked
        deserializer.skip(1)

        match tag:
            case Tag.TRUE:
                return True
            case Tag.FALSE:
                return False
            case Tag.NIL:
                return None
            case Tag.INTEGER:
                return decode_decimal(deserializer)
            case Tag.FLOAT:
                return decode_float(deserializer)
            case Tag.STRING:
                return decode_bytes(deserializer)
            case Tag.SYMBOL:
                return decode_symbol(deserializer)
            case Tag.SEND_SITE:
                return SendSite(decode_symbol(deserializer))
            case Tag.ARRAY:
                inner = self._enter(depth)
                return decode_collection(deserializer, partial(self.decode_value, depth=inner), list)
            case Tag.TUPLE:
                inner = self._enter(depth)
                return decode_collection(deserializer, partial(self.decode_value, depth=inner), tuple)
            case Tag.INSTRUCTION_SEQUENCE:
                return decode_collection(deserializer, decode_decimal, InstructionSequence)
            case Tag.LOOKUP_TABLE:
                inner = self._enter(depth)
                return decode_mapping(deserializer, decode_symbol, partial(self.decode_value, depth=inner),
                                      LookupTable)
            case Tag.COMPILED_METHOD:
                return self._decode_compiled_method(deserializer, depth)
            case _:
                assert_never(tag)

    def _decode_compiled_method(self, deserializer: Deserializer, depth: int) -> CompiledMethod:
        version = decode_decimal(deserializer)
        if version != COMPILED_METHOD_VERSION:
            raise UnsupportedVersionError(version)
        inner = self._enter(depth)
        field_names = CompiledMethod.field_names()
        check_count(deserializer, len(field_names))
        # fields are not named on the wire, the declaration order of CompiledMethod is the wire order
        values = {name: self.decode_value(deserializer, inner) for name in field_names}
        return CompiledMethod(**values)


def marshal(value: Any, *, max_depth: int | None = None) -> bytes:
    """Shortcut for `Marshal(max_depth=max_depth).marshal(value)`."""
    return Marshal(max_depth=max_depth).marshal(value)


def unmarshal(source: Source, *, max_depth: int | None = None) -> Any:
    """Shortcut for `Marshal(max_depth=max_depth).unmarshal(source)`."""
    return Marshal(max_depth=max_depth).unmarshal(source)


def unmarshal_exact(source: Source, *, max_depth: int | None = None) -> Any:
    """Shortcut for `Marshal(max_depth=max_depth).unmarshal_exact(source)`."""
    return Marshal(max_depth=max_depth).unmarshal_exact(source)
