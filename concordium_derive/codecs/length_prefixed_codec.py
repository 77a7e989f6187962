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

"""
Codecs for variable sized values: sequences, maps, sets and strings.

All of them start with a count (elements, entries or utf-8 bytes) encoded as an unsigned little-endian integer of a
configurable width, followed by the items with no further per-item prefix. The width defaults to 4 bytes, the
`size_length`, `map_size_length`, `set_size_length` and `string_size_length` field attributes change it to 1, 2, 4 or
8 bytes.

Maps and sets are always written in ascending key order. When read, the keys are either accepted in any order (the
container resolves repeated keys, the last value wins for a map) or required to be strictly increasing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection, Iterable, Mapping, Sequence, Set
from enum import Enum, unique
from typing import Any, ClassVar, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from concordium_derive.codecs.codec import Codec
from concordium_derive.codecs.utils import is_origin_hashable, pretty_type, strip_annotated
from concordium_derive.serialization import Deserializer, Serializer
from concordium_derive.serialization.compound_encoding.collection import decode_collection, encode_collection
from concordium_derive.serialization.compound_encoding.mapping import decode_mapping, encode_mapping
from concordium_derive.serialization.encoding.bytes import decode_bytes, encode_bytes
from concordium_derive.serialization.encoding.length import VALID_WIDTHS
from concordium_derive.serialization.encoding.utf8 import decode_utf8, encode_utf8

T = TypeVar('T')
C = TypeVar('C', bound=Collection)
KT = TypeVar('KT')
VT = TypeVar('VT')

DEFAULT_LENGTH_WIDTH: int = 4


@unique
class ContainerKind(Enum):
    """What a length prefix counts, the value is the field attribute that selects it."""
    SEQUENCE = 'size_length'
    MAP = 'map_size_length'
    SET = 'set_size_length'
    UTF8_STRING = 'string_size_length'

    @property
    def attribute(self) -> str:
        return self.value


@unique
class OrderPolicy(Enum):
    """How the keys of a map or the members of a set are checked when decoding."""
    UNCHECKED = 'unchecked'
    UNIQUE = 'unique'
    STRICTLY_INCREASING = 'strictly_increasing'


class LengthPrefixedCodec(Codec[C], ABC):
    """ Base class of the codecs that write a count before the items.
    """

    __slots__ = ('_width', '_order_policy')

    _is_hashable = False

    # XXX: subclasses must define these values:
    kind: ClassVar[ContainerKind]
    _default_order_policy: ClassVar[OrderPolicy] = OrderPolicy.UNCHECKED

    def __init__(self, *, width: int, order_policy: OrderPolicy) -> None:
        if width not in VALID_WIDTHS:
            raise ValueError(f'invalid length width: {width}')
        self._width = width
        self._order_policy = order_policy

    @property
    def width(self) -> int:
        return self._width

    @property
    def order_policy(self) -> OrderPolicy:
        return self._order_policy

    @classmethod
    @abstractmethod
    def accepts_type(cls, type_: Any, /) -> bool:
        """ Whether the given type annotation can be encoded by this class."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def with_size_length(
        cls,
        type_: Any,
        /,
        *,
        width: int,
        order_policy: OrderPolicy,
        type_map: Codec.TypeMap,
    ) -> Self:
        """ Instantiate a codec for the given type with an explicit prefix width and order policy."""
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: Codec.TypeMap) -> Self:
        if not cls.accepts_type(type_):
            raise TypeError(f'{cls.__name__} cannot encode {pretty_type(type_)}')
        return cls.with_size_length(
            type_,
            width=DEFAULT_LENGTH_WIDTH,
            order_policy=cls._default_order_policy,
            type_map=type_map,
        )

    @property
    def _strictly_increasing(self) -> bool:
        return self._order_policy is OrderPolicy.STRICTLY_INCREASING


def _single_arg(type_: Any) -> Any:
    args = get_args(type_)
    if len(args) != 1:
        raise TypeError(f'expected {pretty_type(get_origin(type_) or type_)}[<type>]')
    return args[0]


class BytesCodec(LengthPrefixedCodec[bytes]):
    """ Represents builtin `bytes` values, the count is the number of bytes.
    """

    kind = ContainerKind.SEQUENCE
    _is_hashable = True

    @override
    @classmethod
    def accepts_type(cls, type_: Any, /) -> bool:
        return type_ is bytes

    @override
    @classmethod
    def with_size_length(cls, type_: Any, /, *, width: int, order_policy: OrderPolicy,
                         type_map: Codec.TypeMap) -> Self:
        return cls(width=width, order_policy=order_policy)

    @override
    def _check_value(self, value: bytes, /, *, deep: bool) -> None:
        if not isinstance(value, bytes):
            raise TypeError('expected bytes')

    @override
    def _serialize(self, serializer: Serializer, value: bytes, /) -> None:
        encode_bytes(serializer, value, length_width=self._width)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> bytes:
        return decode_bytes(deserializer, length_width=self._width)


class Utf8StringCodec(LengthPrefixedCodec[str]):
    """ Represents builtin `str` values, the count is the number of utf-8 bytes.
    """

    kind = ContainerKind.UTF8_STRING
    _is_hashable = True

    @override
    @classmethod
    def accepts_type(cls, type_: Any, /) -> bool:
        return type_ is str

    @override
    @classmethod
    def with_size_length(cls, type_: Any, /, *, width: int, order_policy: OrderPolicy,
                         type_map: Codec.TypeMap) -> Self:
        return cls(width=width, order_policy=order_policy)

    @override
    def _check_value(self, value: str, /, *, deep: bool) -> None:
        if not isinstance(value, str):
            raise TypeError('expected str')

    @override
    def _serialize(self, serializer: Serializer, value: str, /) -> None:
        encode_utf8(serializer, value, length_width=self._width)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> str:
        return decode_utf8(deserializer, length_width=self._width)


class SequenceCodec(LengthPrefixedCodec[Sequence[T]]):
    """ Represents `list[T]` and `tuple[T, ...]` values, items are written in iteration order.
    """

    __slots__ = ('_item', '_builder')

    kind = ContainerKind.SEQUENCE

    def __init__(self, item: Codec[T], builder: type[list] | type[tuple], *, width: int,
                 order_policy: OrderPolicy) -> None:
        super().__init__(width=width, order_policy=order_policy)
        self._item = item
        self._builder = builder

    @override
    @classmethod
    def accepts_type(cls, type_: Any, /) -> bool:
        origin_type = get_origin(type_) or type_
        if origin_type is list:
            return True
        if origin_type is tuple:
            args = get_args(type_)
            return len(args) == 2 and args[1] is Ellipsis
        return False

    @override
    @classmethod
    def with_size_length(cls, type_: Any, /, *, width: int, order_policy: OrderPolicy,
                         type_map: Codec.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if origin_type is tuple:
            item_type, _ellipsis = get_args(type_)
        else:
            item_type = _single_arg(type_)
        return cls(Codec.from_type(item_type, type_map=type_map), origin_type, width=width,
                   order_policy=order_policy)

    @override
    def _inner_codecs(self) -> Iterable[Codec]:
        return (self._item,)

    @override
    def _check_value(self, value: Sequence[T], /, *, deep: bool) -> None:
        if not isinstance(value, self._builder):
            raise TypeError(f'expected {self._builder.__name__}')
        if deep:
            for i in value:
                self._item._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: Sequence[T], /) -> None:
        encode_collection(serializer, value, self._item.serialize, length_width=self._width)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Sequence[T]:
        return decode_collection(deserializer, self._item.deserialize, self._builder, length_width=self._width)


class SetCodec(LengthPrefixedCodec[Set[T]]):
    """ Represents `set[T]` and `frozenset[T]` values, members are written in ascending order.
    """

    __slots__ = ('_is_hashable', '_item', '_builder')

    kind = ContainerKind.SET
    _default_order_policy = OrderPolicy.STRICTLY_INCREASING

    def __init__(self, item: Codec[T], builder: type[set] | type[frozenset], *, width: int,
                 order_policy: OrderPolicy) -> None:
        super().__init__(width=width, order_policy=order_policy)
        self._item = item
        self._builder = builder
        self._is_hashable = builder is frozenset

    @override
    @classmethod
    def accepts_type(cls, type_: Any, /) -> bool:
        return (get_origin(type_) or type_) in (set, frozenset)

    @override
    @classmethod
    def with_size_length(cls, type_: Any, /, *, width: int, order_policy: OrderPolicy,
                         type_map: Codec.TypeMap) -> Self:
        member_type = strip_annotated(_single_arg(type_))
        if not is_origin_hashable(member_type):
            raise TypeError(f'{pretty_type(member_type)} is not hashable')
        return cls(Codec.from_type(member_type, type_map=type_map), get_origin(type_) or type_, width=width,
                   order_policy=order_policy)

    @override
    def _inner_codecs(self) -> Iterable[Codec]:
        return (self._item,)

    @override
    def _check_value(self, value: Set[T], /, *, deep: bool) -> None:
        if not isinstance(value, (set, frozenset)):
            raise TypeError('expected set')
        if deep:
            for i in value:
                self._item._check_value(i, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: Set[T], /) -> None:
        encode_collection(serializer, value, self._item.serialize, length_width=self._width, sort_values=True)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Set[T]:
        return decode_collection(
            deserializer,
            self._item.deserialize,
            self._builder,
            length_width=self._width,
            strictly_increasing=self._strictly_increasing,
        )


class MapCodec(LengthPrefixedCodec[Mapping[KT, VT]]):
    """ Represents `dict[K, V]` values, entries are written in ascending key order.
    """

    __slots__ = ('_key', '_value')

    kind = ContainerKind.MAP
    _default_order_policy = OrderPolicy.STRICTLY_INCREASING

    def __init__(self, key: Codec[KT], value: Codec[VT], *, width: int, order_policy: OrderPolicy) -> None:
        super().__init__(width=width, order_policy=order_policy)
        self._key = key
        self._value = value

    @override
    @classmethod
    def accepts_type(cls, type_: Any, /) -> bool:
        return (get_origin(type_) or type_) is dict

    @override
    @classmethod
    def with_size_length(cls, type_: Any, /, *, width: int, order_policy: OrderPolicy,
                         type_map: Codec.TypeMap) -> Self:
        args = get_args(type_)
        if len(args) != 2:
            raise TypeError('expected dict[<key type>, <value type>]')
        key_type, value_type = args
        if not is_origin_hashable(strip_annotated(key_type)):
            raise TypeError(f'{pretty_type(key_type)} is not hashable')
        return cls(
            Codec.from_type(key_type, type_map=type_map),
            Codec.from_type(value_type, type_map=type_map),
            width=width,
            order_policy=order_policy,
        )

    @override
    def _inner_codecs(self) -> Iterable[Codec]:
        return (self._key, self._value)

    @override
    def _check_value(self, value: Mapping[KT, VT], /, *, deep: bool) -> None:
        if not isinstance(value, dict):
            raise TypeError('expected dict')
        if deep:
            for k, v in value.items():
                self._key._check_value(k, deep=True)
                self._value._check_value(v, deep=True)

    @override
    def _serialize(self, serializer: Serializer, value: Mapping[KT, VT], /) -> None:
        encode_mapping(
            serializer,
            value,
            self._key.serialize,
            self._value.serialize,
            length_width=self._width,
            sort_keys=True,
        )

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Mapping[KT, VT]:
        return decode_mapping(
            deserializer,
            self._key.deserialize,
            self._value.deserialize,
            dict,
            length_width=self._width,
            strictly_increasing=self._strictly_increasing,
        )


_CODECS_BY_KIND: dict[ContainerKind, tuple[type[LengthPrefixedCodec], ...]] = {
    ContainerKind.SEQUENCE: (BytesCodec, SequenceCodec),
    ContainerKind.MAP: (MapCodec,),
    ContainerKind.SET: (SetCodec,),
    ContainerKind.UTF8_STRING: (Utf8StringCodec,),
}

_EXPECTED_BY_KIND: dict[ContainerKind, str] = {
    ContainerKind.SEQUENCE: 'a list[T], a tuple[T, ...] or bytes',
    ContainerKind.MAP: 'a dict[K, V]',
    ContainerKind.SET: 'a set[T] or a frozenset[T]',
    ContainerKind.UTF8_STRING: 'a str',
}


def check_kind_compatible(type_: Any, kind: ContainerKind) -> None:
    """ Raise a TypeError if a field of the given type cannot carry the length attribute of the given kind.

    >>> check_kind_compatible(dict[str, bool], ContainerKind.MAP)
    >>> check_kind_compatible(dict[str, bool], ContainerKind.SEQUENCE)
    Traceback (most recent call last):
    ...
    TypeError: `size_length` requires a list[T], a tuple[T, ...] or bytes, got dict[str, bool]
    """
    type_ = strip_annotated(type_)
    if not any(codec_class.accepts_type(type_) for codec_class in _CODECS_BY_KIND[kind]):
        raise TypeError(f'`{kind.attribute}` requires {_EXPECTED_BY_KIND[kind]}, got {pretty_type(type_)}')


def make_length_prefixed_codec(
    type_: Any,
    /,
    *,
    kind: ContainerKind,
    width: int,
    order_policy: OrderPolicy,
    type_map: Codec.TypeMap,
) -> LengthPrefixedCodec:
    """ Build the codec of a field that carries a length attribute."""
    type_ = strip_annotated(type_)
    check_kind_compatible(type_, kind)
    codec_class = next(codec_class for codec_class in _CODECS_BY_KIND[kind] if codec_class.accepts_type(type_))
    return codec_class.with_size_length(type_, width=width, order_policy=order_policy, type_map=type_map)
