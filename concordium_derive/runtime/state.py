#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, Optional, TypeVar

from typing_extensions import override

from concordium_derive.serialization import Deserializer, OutOfDataError, SerializationError, Serializer

if TYPE_CHECKING:
    from concordium_derive.runtime.host import Host

T = TypeVar('T')


class ContractState(Serializer, Deserializer):
    """ Byte addressable state of a contract, with a cursor shared by reads and writes.

    Writes past the end grow the state, `truncate` shrinks it. Reads never return views of the underlying buffer, so
    the state can be resized while values read from it are alive.
    """

    def __init__(self, buffer: bytearray) -> None:
        self._buffer = buffer
        self._pos = 0

    @classmethod
    def open(cls, host: Host) -> ContractState:
        return cls(host.state)

    def size(self) -> int:
        return len(self._buffer)

    def seek(self, pos: int) -> int:
        """ Move the cursor to an absolute position, which may be past the end."""
        if pos < 0:
            raise SerializationError('cannot seek before the start of the state')
        self._pos = pos
        return self._pos

    def truncate(self, size: Optional[int] = None) -> None:
        """ Shrink the state to `size` bytes, or to the cursor position by default."""
        if size is None:
            size = self._pos
        if size < len(self._buffer):
            del self._buffer[size:]
        self._pos = min(self._pos, size)

    @override
    def cur_pos(self) -> int:
        return self._pos

    @override
    def write_byte(self, data: int) -> None:
        self._write_bytes(data.to_bytes(1, 'little'))

    @override
    def _write_bytes(self, data: bytes | memoryview) -> None:
        end = self._pos + len(data)
        if self._pos > len(self._buffer):
            self._buffer.extend(bytes(self._pos - len(self._buffer)))
        self._buffer[self._pos:end] = data
        self._pos = end

    @override
    def is_empty(self) -> bool:
        return self._pos >= len(self._buffer)

    @override
    def peek_byte(self) -> int:
        if self.is_empty():
            raise OutOfDataError('not enough bytes to read')
        return self._buffer[self._pos]

    @override
    def peek_bytes(self, n: int) -> memoryview:
        if n < 0:
            raise SerializationError('value cannot be negative')
        if len(self._buffer) - self._pos < n:
            raise OutOfDataError('not enough bytes to read')
        return memoryview(bytes(self._buffer[self._pos:self._pos + n]))

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        self._pos += 1
        return b

    @override
    def _read_bytes(self, n: int) -> memoryview:
        b = self.peek_bytes(n)
        self._pos += n
        return b

    @override
    def read_all(self) -> memoryview:
        b = memoryview(bytes(self._buffer[self._pos:]))
        self._pos = max(self._pos, len(self._buffer))
        return b


class StateRef(Generic[T]):
    """ Handle on the decoded state given to a receive function, assigning `value` replaces the state.

    A receive function whose state is immutable (an enum, a frozen dataclass, a NamedTuple or a sized integer) declares
    its state argument as `StateRef[State]`:

    >>> ref = StateRef(1)
    >>> ref.value += 1
    >>> ref
    StateRef(2)
    """

    __slots__ = ('value',)

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f'StateRef({self.value!r})'
