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

from collections.abc import Iterable
from typing import Any, get_args, get_origin

from typing_extensions import Self, override

from concordium_derive.codecs.codec import Codec
from concordium_derive.serialization import Deserializer, Serializer
from concordium_derive.serialization.compound_encoding.collection import decode_collection, encode_collection
from concordium_derive.serialization.compound_encoding.tuple import decode_tuple, encode_tuple


class TupleCodec(Codec[tuple]):
    """ Represents tuple values, which can either be homogeneous-type variable size or heterogeneous-type fixed size.

    A fixed size tuple is the concatenation of its items, `tuple[()]` encodes to nothing. A variable size tuple has a
    4-byte length prefix, like a list.
    """

    __slots__ = ('_is_hashable', '_varsize', '_args')

    _varsize: bool
    _args: tuple[Codec, ...]

    def __init__(self, args: Codec | Iterable[Codec]) -> None:
        if isinstance(args, Codec):
            self._varsize = True
            self._args = (args,)
        else:
            self._varsize = False
            self._args = tuple(args)
        self._is_hashable = all(arg_codec.is_hashable() for arg_codec in self._args)

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: Codec.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if not issubclass(origin_type, tuple):
            raise TypeError('expected tuple type')
        args = list(get_args(type_))
        if not args and type_ is tuple:
            raise TypeError('expected tuple[<args...>]')
        if args and args[-1] is Ellipsis:
            if len(args) != 2:
                raise TypeError('ellipsis only allowed with one type: tuple[T, ...]')
            arg, _ellipsis = args
            return cls(Codec.from_type(arg, type_map=type_map))
        return cls(Codec.from_type(arg, type_map=type_map) for arg in args)

    @property
    def is_varsize(self) -> bool:
        return self._varsize

    @override
    def _inner_codecs(self) -> Iterable[Codec]:
        return self._args

    @override
    def _check_value(self, value: tuple, /, *, deep: bool) -> None:
        if not isinstance(value, tuple):
            raise TypeError('expected tuple')
        if not self._varsize and len(value) != len(self._args):
            raise TypeError('wrong tuple size')
        if deep:
            if self._varsize:
                arg_codec, = self._args
                for i in value:
                    arg_codec._check_value(i, deep=True)
            else:
                for i, arg_codec in zip(value, self._args):
                    arg_codec._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: tuple, /) -> None:
        if self._varsize:
            encode_collection(serializer, value, self._args[0].serialize)
        else:
            encode_tuple(serializer, value, tuple(i.serialize for i in self._args))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> tuple:
        if self._varsize:
            return decode_collection(deserializer, self._args[0].deserialize, tuple)
        else:
            return decode_tuple(deserializer, tuple(i.deserialize for i in self._args))
