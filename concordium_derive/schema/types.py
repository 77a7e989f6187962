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
Schema descriptors: a structural description of the wire format of a type, independent of any encoded value.

Schemas are trees of `Type` values, every node maps to a single tag byte in the binary form (see `encoding`).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum, unique


@unique
class SizeLength(IntEnum):
    """Width of a length prefix as recorded in a schema."""
    U8 = 0
    U16 = 1
    U32 = 2
    U64 = 3

    @classmethod
    def from_width(cls, width: int) -> SizeLength:
        """
        >>> SizeLength.from_width(2)
        <SizeLength.U16: 1>
        """
        try:
            return _SIZE_LENGTH_BY_WIDTH[width]
        except KeyError:
            raise ValueError(f'invalid length width: {width}') from None

    @property
    def width(self) -> int:
        return 1 << self.value


_SIZE_LENGTH_BY_WIDTH: dict[int, SizeLength] = {1 << s.value: s for s in SizeLength}


@unique
class TypeTag(IntEnum):
    UNIT = 0
    BOOL = 1
    U8 = 2
    U16 = 3
    U32 = 4
    U64 = 5
    I8 = 6
    I16 = 7
    I32 = 8
    I64 = 9
    AMOUNT = 10
    ACCOUNT_ADDRESS = 11
    CONTRACT_ADDRESS = 12
    TIMESTAMP = 13
    DURATION = 14
    PAIR = 15
    LIST = 16
    SET = 17
    MAP = 18
    ARRAY = 19
    STRUCT = 20
    ENUM = 21
    STRING = 22
    U128 = 23
    I128 = 24


@unique
class FieldsTag(IntEnum):
    NAMED = 0
    UNNAMED = 1
    NONE = 2


class Type:
    """Base class of every schema node."""

    __slots__ = ()

    def set_size_length(self, size_length: SizeLength) -> Type:
        """Record the width of the length prefix, only meaningful for lists, sets, maps and strings."""
        return self


class Fields:
    """Base class of the field layouts of structs and enum variants."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class PrimitiveType(Type):
    tag: TypeTag


@dataclass(frozen=True, slots=True)
class PairType(Type):
    first: Type
    second: Type


@dataclass(frozen=True, slots=True)
class ListType(Type):
    size_length: SizeLength
    item: Type

    def set_size_length(self, size_length: SizeLength) -> Type:
        return replace(self, size_length=size_length)


@dataclass(frozen=True, slots=True)
class SetType(Type):
    size_length: SizeLength
    item: Type

    def set_size_length(self, size_length: SizeLength) -> Type:
        return replace(self, size_length=size_length)


@dataclass(frozen=True, slots=True)
class MapType(Type):
    size_length: SizeLength
    key: Type
    value: Type

    def set_size_length(self, size_length: SizeLength) -> Type:
        return replace(self, size_length=size_length)


@dataclass(frozen=True, slots=True)
class ArrayType(Type):
    length: int
    item: Type


@dataclass(frozen=True, slots=True)
class StringType(Type):
    size_length: SizeLength

    def set_size_length(self, size_length: SizeLength) -> Type:
        return replace(self, size_length=size_length)


@dataclass(frozen=True, slots=True)
class StructType(Type):
    fields: Fields


@dataclass(frozen=True, slots=True)
class EnumType(Type):
    variants: tuple[tuple[str, Fields], ...]


@dataclass(frozen=True, slots=True)
class NamedFields(Fields):
    fields: tuple[tuple[str, Type], ...]


@dataclass(frozen=True, slots=True)
class UnnamedFields(Fields):
    fields: tuple[Type, ...]


@dataclass(frozen=True, slots=True)
class NoFields(Fields):
    pass


UNIT_TYPE = PrimitiveType(TypeTag.UNIT)
BOOL_TYPE = PrimitiveType(TypeTag.BOOL)
U8_TYPE = PrimitiveType(TypeTag.U8)
U16_TYPE = PrimitiveType(TypeTag.U16)
U32_TYPE = PrimitiveType(TypeTag.U32)
U64_TYPE = PrimitiveType(TypeTag.U64)
U128_TYPE = PrimitiveType(TypeTag.U128)
I8_TYPE = PrimitiveType(TypeTag.I8)
I16_TYPE = PrimitiveType(TypeTag.I16)
I32_TYPE = PrimitiveType(TypeTag.I32)
I64_TYPE = PrimitiveType(TypeTag.I64)
I128_TYPE = PrimitiveType(TypeTag.I128)
AMOUNT_TYPE = PrimitiveType(TypeTag.AMOUNT)
ACCOUNT_ADDRESS_TYPE = PrimitiveType(TypeTag.ACCOUNT_ADDRESS)
CONTRACT_ADDRESS_TYPE = PrimitiveType(TypeTag.CONTRACT_ADDRESS)
TIMESTAMP_TYPE = PrimitiveType(TypeTag.TIMESTAMP)
DURATION_TYPE = PrimitiveType(TypeTag.DURATION)

# tags that are a node on their own, without children
PRIMITIVE_TAGS: frozenset[TypeTag] = frozenset({
    TypeTag.UNIT, TypeTag.BOOL,
    TypeTag.U8, TypeTag.U16, TypeTag.U32, TypeTag.U64, TypeTag.U128,
    TypeTag.I8, TypeTag.I16, TypeTag.I32, TypeTag.I64, TypeTag.I128,
    TypeTag.AMOUNT, TypeTag.ACCOUNT_ADDRESS, TypeTag.CONTRACT_ADDRESS, TypeTag.TIMESTAMP, TypeTag.DURATION,
})
