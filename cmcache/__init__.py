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
Reader and writer for compiled files: a three line header followed by a compiled method, or any other value of the
tagged value model, written in a self-describing text and bytes format.

>>> from cmcache import CompiledMethod, InstructionSequence, Symbol, marshal, unmarshal
>>> method = CompiledMethod(name=Symbol('answer'), iseq=InstructionSequence([20, 42, 11]), stack_size=1)
>>> unmarshal(marshal(method)) == method
True
"""

from cmcache.compiled_file import (
    COMPILED_METHOD_VERSION,
    CompiledFile,
    Marshal,
    Tag,
    marshal,
    unmarshal,
    unmarshal_exact,
)
from cmcache.model import CompiledMethod, InstructionSequence, LookupTable, SendSite, Symbol
from cmcache.serialization import (
    BadDataError,
    MalformedFloatError,
    MalformedHeaderError,
    OutOfDataError,
    SerializationError,
    TooDeepError,
    UnknownTagError,
    UnsupportedTypeError,
    UnsupportedVersionError,
)
from cmcache.version import __version__

__all__ = [
    'COMPILED_METHOD_VERSION',
    'CompiledFile',
    'CompiledMethod',
    'InstructionSequence',
    'LookupTable',
    'Marshal',
    'SendSite',
    'Symbol',
    'Tag',
    'marshal',
    'unmarshal',
    'unmarshal_exact',
    'BadDataError',
    'MalformedFloatError',
    'MalformedHeaderError',
    'OutOfDataError',
    'SerializationError',
    'TooDeepError',
    'UnknownTagError',
    'UnsupportedTypeError',
    'UnsupportedVersionError',
    '__version__',
]
