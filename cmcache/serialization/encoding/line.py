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
This module implements integers written as decimal ASCII text terminated by a newline.

It is used for integer values, lengths, counts, opcode words and format versions. There is no width limit, any Python
int is written with all of its digits.

>>> se = Serializer.build_bytes_serializer()
>>> encode_decimal(se, 42)
>>> encode_decimal(se, -7)
>>> se.finalize()
b'42\n-7\n'

>>> de = Deserializer.build_bytes_deserializer(b'42\n-7\n')
>>> decode_decimal(de)
42
>>> decode_decimal(de)
-7
>>> de.finalize()

The last line of a buffer doesn't need the newline:

>>> de = Deserializer.build_bytes_deserializer(b'12')
>>> decode_decimal(de)
12

>>> de = Deserializer.build_bytes_deserializer(b'1x\n')
>>> try:
...     decode_decimal(de)
... except BadDataError as e:
...     print(*e.args)
invalid decimal line: b'1x'

>>> de = Deserializer.build_bytes_deserializer(b'-1\n')
>>> try:
...     decode_count(de)
... except BadDataError as e:
...     print(*e.args)
count cannot be negative: -1
"""

import re

from cmcache.serialization import BadDataError, Deserializer, Serializer

_DECIMAL_RE = re.compile(rb'-?[0-9]+')

# str()/int() refuse conversions above sys.get_int_max_str_digits() (4300 by default), bigger values are converted in
# chunks below that limit
_CHUNK_DIGITS = 4000
_CHUNK = 10 ** _CHUNK_DIGITS


def int_to_decimal(value: int) -> str:
    """ Convert an int of any size to its exact decimal representation.
    """
    if value < 0:
        return '-' + int_to_decimal(-value)
    if value < _CHUNK:
        return str(value)
    chunks: list[str] = []
    while value >= _CHUNK:
        value, low = divmod(value, _CHUNK)
        chunks.append(str(low).zfill(_CHUNK_DIGITS))
    chunks.append(str(value))
    return ''.join(reversed(chunks))


def decimal_to_int(text: bytes) -> int:
    """ Parse an optionally negative run of ASCII digits of any length.
    """
    if _DECIMAL_RE.fullmatch(text) is None:
        raise BadDataError(f'invalid decimal line: {text!r}')
    negative = text.startswith(b'-')
    digits = text[1:] if negative else text
    if len(digits) <= _CHUNK_DIGITS:
        value = int(digits)
    else:
        value = 0
        for i in range(0, len(digits), _CHUNK_DIGITS):
            chunk = digits[i:i + _CHUNK_DIGITS]
            value = value * 10 ** len(chunk) + int(chunk)
    return -value if negative else value


def encode_decimal(serializer: Serializer, value: int) -> None:
    """ Encodes an int as a decimal line.

    This module's docstring has more details and examples.
    """
    assert isinstance(value, int)
    serializer.write_line(int_to_decimal(value))


def decode_decimal(deserializer: Deserializer) -> int:
    """ Decodes a decimal line, the trailing newline is tolerated but not required.

    This module's docstring has more details and examples.
    """
    line = deserializer.read_line()
    return decimal_to_int(line.rstrip(b'\n'))


def decode_count(deserializer: Deserializer) -> int:
    """ Decodes a decimal line that holds a length or a count, which cannot be negative.
    """
    count = decode_decimal(deserializer)
    if count < 0:
        raise BadDataError(f'count cannot be negative: {count}')
    return count
