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
Runtime shapes that the compiled file format can hold besides the Python builtins.

The builtins are mapped directly: `bool`, `None`, `int`, `float`, `bytes` (byte strings), `list` (resizable sequences)
and `tuple` (fixed-size sequences). The classes below cover the rest. None of them interpret their contents, they only
give each kind of value a distinct type so that it can be written with its own tag.
"""

from dataclasses import dataclass, fields
from typing import Any, Iterator
from weakref import WeakValueDictionary

# symbols nobody references anymore drop out of the table
_symbol_table: WeakValueDictionary[str, 'Symbol'] = WeakValueDictionary()


class Symbol(str):
    """An interned name.

    Two symbols with the same name are the same object:

    >>> Symbol('foo') is Symbol('foo')
    True
    >>> Symbol('foo') == 'foo'
    True
    >>> Symbol('foo')
    Symbol('foo')
    """

    def __new__(cls, name: str) -> 'Symbol':
        name = str(name)
        symbol = _symbol_table.get(name)
        if symbol is None:
            # setdefault keeps a single instance if two threads race here
            symbol = _symbol_table.setdefault(name, super().__new__(cls, name))
        return symbol

    def __repr__(self) -> str:
        return f'Symbol({str(self)!r})'


@dataclass(slots=True, frozen=True)
class SendSite:
    """A call-site reference, only the name of the called method is kept."""
    name: Symbol

    def __post_init__(self) -> None:
        if not isinstance(self.name, Symbol):
            object.__setattr__(self, 'name', Symbol(self.name))


@dataclass(slots=True, frozen=True)
class InstructionSequence:
    """The raw opcode words of a compiled method."""
    opcodes: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'opcodes', tuple(self.opcodes))

    def __len__(self) -> int:
        return len(self.opcodes)

    def __iter__(self) -> Iterator[int]:
        return iter(self.opcodes)

    def __getitem__(self, index: int) -> int:
        return self.opcodes[index]


class LookupTable(dict[Symbol, Any]):
    """A table keyed by symbols, the order of its entries carries no meaning."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f'LookupTable({dict.__repr__(self)})'


@dataclass(slots=True, frozen=True, kw_only=True)
class CompiledMethod:
    """A compiled method record.

    The fields are written and read in the order they are declared here, changing the order is a format change.
    """
    ivars: Any = None
    primitive: Any = None
    name: Any = None
    iseq: Any = None
    stack_size: Any = None
    local_count: Any = None
    required_args: Any = None
    total_args: Any = None
    splat: Any = None
    literals: Any = None
    exceptions: Any = None
    lines: Any = None
    file: Any = None
    local_names: Any = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def field_values(self) -> list[Any]:
        return [getattr(self, name) for name in self.field_names()]


COMPILED_METHOD_FIELD_COUNT = len(CompiledMethod.field_names())
assert COMPILED_METHOD_FIELD_COUNT == 14

__all__ = [
    'COMPILED_METHOD_FIELD_COUNT',
    'CompiledMethod',
    'InstructionSequence',
    'LookupTable',
    'SendSite',
    'Symbol',
]
