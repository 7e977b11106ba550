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


class SerializationError(Exception):
    """Base class for every error raised while encoding or decoding a compiled file."""


class OutOfDataError(SerializationError):
    """A read requested more bytes (or entries) than remain in the buffer."""


class BadDataError(SerializationError):
    """The data is well framed but holds something the decoder refuses, like a non-decimal number line."""


class UnsupportedTypeError(SerializationError):
    """The encoder was given a value whose type has no tag."""


class UnknownTagError(BadDataError):
    """The decoder found a byte outside the tag alphabet where a tag was expected."""

    def __init__(self, tag: int, offset: int) -> None:
        super().__init__(f'unknown tag {bytes([tag])!r} at offset {offset}')
        self.tag = tag
        self.offset = offset


class MalformedFloatError(BadDataError):
    """A float line is neither a decimal number nor one of Infinity, -Infinity or NaN."""

    def __init__(self, text: str) -> None:
        super().__init__(f'invalid float format: {text!r}')
        self.text = text


class MalformedHeaderError(BadDataError):
    """The container header is short or its version line is not an integer."""


class UnsupportedVersionError(BadDataError):
    """A compiled method record carries a format version other than the supported one."""

    def __init__(self, version: int) -> None:
        super().__init__(f'unknown compiled method version {version}')
        self.version = version


class TooDeepError(BadDataError):
    """ This error is raised when a value nests deeper than the configured maximum depth.

    Both the encoder and the decoder recurse once per nesting level, so the bound keeps a hostile or corrupted file
    from exhausting the interpreter stack.
    """

    def __init__(self, max_depth: int) -> None:
        super().__init__(f'nesting exceeds maximum depth of {max_depth}')
        self.max_depth = max_depth
