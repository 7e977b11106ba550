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
This module implements floats written as decimal text terminated by a newline.

Finite values use Python's shortest round-tripping representation (`repr`). The three special values are written as
the words `Infinity`, `-Infinity` and `NaN`, which are recognized case-insensitively when reading.

>>> se = Serializer.build_bytes_serializer()
>>> encode_float(se, 3.14)
>>> encode_float(se, float('-inf'))
>>> encode_float(se, float('nan'))
>>> se.finalize()
b'3.14\n-Infinity\nNaN\n'

>>> de = Deserializer.build_bytes_deserializer(b'3.14\n-1e+100\ninfinity\n')
>>> decode_float(de)
3.14
>>> decode_float(de)
-1e+100
>>> decode_float(de)
inf

>>> de = Deserializer.build_bytes_deserializer(b'bogus\n')
>>> try:
...     decode_float(de)
... except MalformedFloatError as e:
...     print(*e.args)
invalid float format: 'bogus'
"""

import math

from cmcache.serialization import Deserializer, MalformedFloatError, Serializer

_SPECIALS = {
    'infinity': math.inf,
    '-infinity': -math.inf,
    'nan': math.nan,
}


def float_to_text(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    return repr(value)


def text_to_float(text: str) -> float:
    first = text[1:2] if text.startswith('-') else text[:1]
    if first.isascii() and first.isdigit():
        try:
            return float(text)
        except ValueError as e:
            raise MalformedFloatError(text) from e
    special = _SPECIALS.get(text.lower())
    if special is None:
        raise MalformedFloatError(text)
    return special


def encode_float(serializer: Serializer, value: float) -> None:
    """ Encodes a float as a text line.

    This module's docstring has more details and examples.
    """
    assert isinstance(value, float)
    serializer.write_line(float_to_text(value))


def decode_float(deserializer: Deserializer) -> float:
    """ Decodes a float text line.

    This module's docstring has more details and examples.
    """
    line = deserializer.read_line()
    # latin-1 maps every byte, so garbage is reported as a malformed float and not as a unicode error
    return text_to_float(line.rstrip(b'\n').decode('latin-1'))
