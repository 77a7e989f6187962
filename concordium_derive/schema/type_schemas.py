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

from types import NoneType, UnionType
from typing import Any, Union, get_args, get_origin

from concordium_derive.codecs.utils import pretty_type, strip_annotated
from concordium_derive.schema.types import (
    ACCOUNT_ADDRESS_TYPE,
    AMOUNT_TYPE,
    BOOL_TYPE,
    CONTRACT_ADDRESS_TYPE,
    DURATION_TYPE,
    I8_TYPE,
    I16_TYPE,
    I32_TYPE,
    I64_TYPE,
    I128_TYPE,
    TIMESTAMP_TYPE,
    U8_TYPE,
    U16_TYPE,
    U32_TYPE,
    U64_TYPE,
    U128_TYPE,
    UNIT_TYPE,
    EnumType,
    ListType,
    MapType,
    NoFields,
    PairType,
    SetType,
    SizeLength,
    StringType,
    Type,
    UnnamedFields,
)
from concordium_derive.types import (
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    AccountAddress,
    Amount,
    ContractAddress,
    Duration,
    Timestamp,
)

# attribute set on classes by the schema decorators, holds the generated schema
SCHEMA_ATTR: str = '__concordium_schema__'

_LEAF_SCHEMAS: dict[Any, Type] = {
    bool: BOOL_TYPE,
    U8: U8_TYPE,
    U16: U16_TYPE,
    U32: U32_TYPE,
    U64: U64_TYPE,
    U128: U128_TYPE,
    I8: I8_TYPE,
    I16: I16_TYPE,
    I32: I32_TYPE,
    I64: I64_TYPE,
    I128: I128_TYPE,
    Amount: AMOUNT_TYPE,
    Timestamp: TIMESTAMP_TYPE,
    Duration: DURATION_TYPE,
    AccountAddress: ACCOUNT_ADDRESS_TYPE,
    ContractAddress: CONTRACT_ADDRESS_TYPE,
    str: StringType(SizeLength.U32),
    bytes: ListType(SizeLength.U32, U8_TYPE),
}


def get_derived_schema(type_: Any) -> Type | None:
    """ Return the schema generated for a class by one of the schema decorators, `None` if it has none."""
    if not isinstance(type_, type):
        return None
    return type_.__dict__.get(SCHEMA_ATTR)


def schema_of(type_: Any, /) -> Type:
    """ The schema of a type annotation, matching what its default codec writes.

    >>> schema_of(dict[str, list[U8]])
    MapType(size_length=<SizeLength.U32: 2>, key=StringType(size_length=<SizeLength.U32: 2>), \
value=ListType(size_length=<SizeLength.U32: 2>, item=PrimitiveType(tag=<TypeTag.U8: 2>)))
    >>> schema_of(tuple[()])
    PrimitiveType(tag=<TypeTag.UNIT: 0>)
    """
    type_ = strip_annotated(type_)

    derived = get_derived_schema(type_)
    if derived is not None:
        return derived

    try:
        leaf = _LEAF_SCHEMAS.get(type_)
    except TypeError:
        leaf = None
    if leaf is not None:
        return leaf

    origin = get_origin(type_)
    args = get_args(type_)

    if origin is list:
        item_type, = args
        return ListType(SizeLength.U32, schema_of(item_type))
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return ListType(SizeLength.U32, schema_of(args[0]))
        if len(args) == 0:
            return UNIT_TYPE
        if len(args) == 2:
            return PairType(schema_of(args[0]), schema_of(args[1]))
        raise TypeError(f'tuples of {len(args)} items have no schema, use a derived NamedTuple')
    if origin in (set, frozenset):
        item_type, = args
        return SetType(SizeLength.U32, schema_of(item_type))
    if origin is dict:
        key_type, value_type = args
        return MapType(SizeLength.U32, schema_of(key_type), schema_of(value_type))
    if origin in (UnionType, Union) and len(args) == 2 and NoneType in args:
        value_type, = (arg for arg in args if arg is not NoneType)
        return EnumType((('None', NoFields()), ('Some', UnnamedFields((schema_of(value_type),)))))

    raise TypeError(f'type {pretty_type(type_)} has no schema')
