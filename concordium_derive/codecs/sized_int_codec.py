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

from typing import Any, ClassVar

from typing_extensions import Self, override

from concordium_derive.codecs.codec import Codec
from concordium_derive.serialization import Deserializer, Serializer
from concordium_derive.serialization.encoding.int import decode_int, encode_int


class _SizedIntCodec(Codec[int]):
    """ Base class for classes that represent `int` values with a fixed size and signedness, always little-endian.
    """

    _is_hashable = True
    # XXX: subclass must define these values:
    _signed: ClassVar[bool]
    _byte_size: ClassVar[int]

    @classmethod
    def _upper_bound_value(cls) -> int:
        if cls._signed:
            return 2**(cls._byte_size * 8 - 1) - 1
        else:
            return 2**(cls._byte_size * 8) - 1

    @classmethod
    def _lower_bound_value(cls) -> int:
        if cls._signed:
            return -(2**(cls._byte_size * 8 - 1))
        else:
            return 0

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: Codec.TypeMap) -> Self:
        # XXX: the type map only routes sized NewTypes of int here
        return cls()

    @override
    def _check_value(self, value: int, /, *, deep: bool) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('expected integer')
        if value > self._upper_bound_value():
            raise ValueError('above upper bound')
        if value < self._lower_bound_value():
            raise ValueError('below lower bound')

    @override
    def _serialize(self, serializer: Serializer, value: int, /) -> None:
        encode_int(serializer, value, length=self._byte_size, signed=self._signed)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> int:
        return decode_int(deserializer, length=self._byte_size, signed=self._signed)


class U8Codec(_SizedIntCodec):
    _signed = False
    _byte_size = 1


class U16Codec(_SizedIntCodec):
    _signed = False
    _byte_size = 2


class U32Codec(_SizedIntCodec):
    _signed = False
    _byte_size = 4


class U64Codec(_SizedIntCodec):
    _signed = False
    _byte_size = 8


class U128Codec(_SizedIntCodec):
    _signed = False
    _byte_size = 16


class I8Codec(_SizedIntCodec):
    _signed = True
    _byte_size = 1


class I16Codec(_SizedIntCodec):
    _signed = True
    _byte_size = 2


class I32Codec(_SizedIntCodec):
    _signed = True
    _byte_size = 4


class I64Codec(_SizedIntCodec):
    _signed = True
    _byte_size = 8


class I128Codec(_SizedIntCodec):
    _signed = True
    _byte_size = 16
