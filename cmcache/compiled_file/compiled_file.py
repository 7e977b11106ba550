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
The compiled file container.

A compiled file is three header lines followed by a single tagged value, the body:

    <magic>\\n
    <version>\\n
    <integrity tag>\\n
    <tagged value>

The header is read eagerly and the body is decoded the first time it's asked for. The header fields are informative
only, the body is not checked against them and format changes are tracked by the version of the compiled method record
inside the body.
"""

import io
import os
from threading import Lock
from typing import IO, Any, Optional, Union

from structlog import get_logger

from cmcache.conf.settings import CompiledFileSettings
from cmcache.serialization import BadDataError, MalformedHeaderError
from cmcache.serialization.encoding.line import decimal_to_int, int_to_decimal

from .marshal import Marshal, Source, read_source

logger = get_logger()

StrPath = Union[str, os.PathLike[str]]

_NO_BODY: Any = object()


def _read_header_line(stream: IO[bytes], field: str) -> str:
    line = stream.readline()
    if not line:
        raise MalformedHeaderError(f'missing {field} line')
    if not isinstance(line, bytes):
        raise TypeError(f'expected a binary stream, read {type(line).__name__}')
    return line.decode('utf-8', 'surrogateescape').strip()


class CompiledFile:
    def __init__(
        self,
        magic: str,
        version: int,
        integrity_tag: str,
        stream: Optional[Source] = None,
        *,
        body: Any = _NO_BODY,
        max_depth: Optional[int] = None,
    ) -> None:
        self.magic = magic
        self.version = version
        self.integrity_tag = integrity_tag
        self._source = stream
        self._body = body
        self._body_lock = Lock()
        self._marshal = Marshal(max_depth=max_depth)
        self.log = logger.new(magic=magic, version=version)

    def __repr__(self) -> str:
        return f'CompiledFile(magic={self.magic!r}, version={self.version}, integrity_tag={self.integrity_tag!r})'

    @classmethod
    def from_settings(cls, body: Any = _NO_BODY, *, settings: Optional[CompiledFileSettings] = None) -> 'CompiledFile':
        """Create a compiled file with the header configured in `settings` (global settings by default)."""
        if settings is None:
            from cmcache.conf.get_settings import get_global_settings
            settings = get_global_settings()
        return cls(settings.MAGIC, settings.VERSION, settings.INTEGRITY_TAG, body=body, max_depth=settings.MAX_DEPTH)

    @classmethod
    def load(cls, stream: IO[bytes], *, max_depth: Optional[int] = None) -> 'CompiledFile':
        """Read the header from a binary `stream`, the rest of the stream is kept to decode the body later."""
        magic = _read_header_line(stream, 'magic')
        version_text = _read_header_line(stream, 'version')
        try:
            version = decimal_to_int(version_text.encode('utf-8', 'surrogateescape'))
        except BadDataError as e:
            raise MalformedHeaderError(f'version is not an integer: {version_text!r}') from e
        integrity_tag = _read_header_line(stream, 'integrity tag')
        return cls(magic, version, integrity_tag, stream, max_depth=max_depth)

    @classmethod
    def from_bytes(cls, data: bytes, *, max_depth: Optional[int] = None) -> 'CompiledFile':
        return cls.load(io.BytesIO(data), max_depth=max_depth)

    @classmethod
    def load_file(cls, path: StrPath, *, max_depth: Optional[int] = None) -> 'CompiledFile':
        """Load the compiled file at `path`, its body is decoded before the file is closed."""
        with open(path, 'rb') as fp:
            compiled_file = cls.load(fp, max_depth=max_depth)
            compiled_file.body()
        return compiled_file

    def has_decoded_body(self) -> bool:
        return self._body is not _NO_BODY

    def body(self) -> Any:
        """Return the body, decoding it on the first call only."""
        with self._body_lock:
            if self._body is _NO_BODY:
                if self._source is None:
                    raise ValueError('compiled file has no body to decode')
                # keep the bytes, a stream can only be read once
                self._source = read_source(self._source)
                self.log.debug('decode body', size=len(self._source))
                self._body = self._marshal.unmarshal(self._source)
                self._source = None
            return self._body

    def encode(self, body: Any) -> bytes:
        """Return the header lines followed by the encoding of `body`."""
        header = '\n'.join([self.magic, int_to_decimal(self.version), self.integrity_tag, ''])
        return header.encode('utf-8', 'surrogateescape') + self._marshal.marshal(body)

    def encode_to(self, stream: IO[bytes], body: Any) -> None:
        """Write this header and `body` to `stream`.

        The body is encoded before anything is written, so a value that can't be encoded leaves `stream` untouched.
        """
        stream.write(self.encode(body))

    def write(self, stream: IO[bytes]) -> None:
        """Write this header and this compiled file's own body to `stream`."""
        self.encode_to(stream, self.body())

    @classmethod
    def dump(cls, value: Any, path: StrPath, *, settings: Optional[CompiledFileSettings] = None) -> bool:
        """Write `value` to the compiled file at `path`.

        When the file can't be opened because of permissions nothing is written and False is returned, compiled files
        are a cache and a missing one is recompiled. Any other error is raised.
        """
        compiled_file = cls.from_settings(settings=settings)
        log = compiled_file.log.bind(path=str(path))
        try:
            fp = open(path, 'wb')
        except PermissionError:
            log.info('skip compiled file', reason='permission denied')
            return False
        with fp:
            compiled_file.encode_to(fp, value)
        log.debug('compiled file written')
        return True
