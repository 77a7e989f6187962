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

import enum
from dataclasses import dataclass
from typing import Annotated, NamedTuple, Optional

import pytest

from concordium_derive import (
    U8,
    U32,
    AccountAddress,
    DeriveError,
    SumType,
    concordium,
    contract_state,
    schema_type,
    serialize,
)
from concordium_derive.derive.exports import ExportKind, get_exports
from concordium_derive.schema import (
    SCHEMA_ATTR,
    EnumType,
    ListType,
    MapType,
    NamedFields,
    NoFields,
    PairType,
    PrimitiveType,
    SetType,
    SizeLength,
    StringType,
    StructType,
    TypeTag,
    UnnamedFields,
    get_derived_schema,
    schema_from_bytes,
    schema_to_bytes,
)
from concordium_derive_tests.unittest import settings_env

U8_TYPE = PrimitiveType(TypeTag.U8)
U32_TYPE = PrimitiveType(TypeTag.U32)


@serialize
@schema_type
@dataclass
class Inner:
    value: U8


@serialize
@schema_type
@dataclass
class Record:
    owner: AccountAddress
    names: Annotated[list[str], concordium(size_length=1)]
    table: Annotated[dict[U8, Inner], concordium(map_size_length=2)]
    tags: Annotated[set[U8], concordium(set_size_length=8)]
    label: Annotated[str, concordium(string_size_length=1)]
    maybe: Optional[U32]
    pair: tuple[U8, bool]


@schema_type
class Coord(NamedTuple):
    x: U32
    y: U32


@schema_type
class Shape(SumType):
    @dataclass
    class Circle:
        radius: U32

    class Rectangle(NamedTuple):
        width: U32
        height: U32

    @dataclass
    class Dot:
        pass


@schema_type
class Color(enum.Enum):
    RED = 1
    GREEN = 2


@schema_type
@dataclass
class Unit:
    pass


def test_struct_schema_follows_field_plans() -> None:
    assert get_derived_schema(Record) == StructType(NamedFields((
        ('owner', PrimitiveType(TypeTag.ACCOUNT_ADDRESS)),
        ('names', ListType(SizeLength.U8, StringType(SizeLength.U32))),
        ('table', MapType(SizeLength.U16, U8_TYPE, StructType(NamedFields((('value', U8_TYPE),))))),
        ('tags', SetType(SizeLength.U64, U8_TYPE)),
        ('label', StringType(SizeLength.U8)),
        ('maybe', EnumType((('None', NoFields()), ('Some', UnnamedFields((U32_TYPE,)))))),
        ('pair', PairType(U8_TYPE, PrimitiveType(TypeTag.BOOL))),
    )))


def test_unnamed_struct_schema() -> None:
    assert get_derived_schema(Coord) == StructType(UnnamedFields((U32_TYPE, U32_TYPE)))


def test_sum_type_schema() -> None:
    assert get_derived_schema(Shape) == EnumType((
        ('Circle', NamedFields((('radius', U32_TYPE),))),
        ('Rectangle', UnnamedFields((U32_TYPE, U32_TYPE))),
        ('Dot', NoFields()),
    ))


def test_enum_schema() -> None:
    assert get_derived_schema(Color) == EnumType((('RED', NoFields()), ('GREEN', NoFields())))


def test_unit_schema() -> None:
    assert get_derived_schema(Unit) == StructType(NoFields())


def test_schema_bytes() -> None:
    schema = get_derived_schema(Coord)
    assert schema is not None
    data = schema_to_bytes(schema)
    assert data.hex() == '14' '01' '02000000' '04' '04'
    assert schema_from_bytes(data) == schema


def test_enum_schema_bytes() -> None:
    schema = get_derived_schema(Color)
    assert schema is not None
    assert schema_to_bytes(schema).hex() == (
        '15' '02000000'
        '03000000' '524544' '02'
        '05000000' '475245454e' '02'
    )


def test_field_without_schema() -> None:
    @dataclass
    class Plain:
        a: U8

    with pytest.raises(DeriveError) as exc_info:
        @schema_type
        @dataclass
        class Holder:
            plain: Plain
            triple: tuple[U8, U8, U8]

    assert [d.span.field for d in exc_info.value.diagnostics] == ['plain', 'triple']


def test_schema_is_skipped_when_disabled() -> None:
    with settings_env(CONCORDIUM_DERIVE_BUILD_SCHEMA='false'):
        @schema_type
        @dataclass
        class Skipped:
            a: U8

    assert SCHEMA_ATTR not in Skipped.__dict__


def test_contract_state_exports_the_schema() -> None:
    @contract_state(contract='counter')
    @schema_type
    @dataclass
    class State:
        count: U32

    export, = get_exports(State)
    assert export.name == 'concordium_schema_state_counter'
    assert export.kind is ExportKind.SCHEMA
    assert schema_from_bytes(export.func()) == StructType(NamedFields((('count', U32_TYPE),)))


def test_contract_state_derives_a_missing_schema() -> None:
    @contract_state('contract = "counter"')
    @dataclass
    class State:
        count: U8

    export, = get_exports(State)
    assert schema_from_bytes(export.func()) == StructType(NamedFields((('count', U8_TYPE),)))


def test_contract_state_requires_a_contract() -> None:
    with pytest.raises(DeriveError, match='A name for the contract must be provided'):
        @contract_state()
        @dataclass
        class State:
            count: U8


def test_contract_state_rejects_other_attributes() -> None:
    with pytest.raises(DeriveError, match="'payable' is not supported by @contract_state"):
        @contract_state(contract='c', payable=True)
        @dataclass
        class State:
            count: U8


def test_contract_state_without_schemas() -> None:
    with settings_env(CONCORDIUM_DERIVE_BUILD_SCHEMA='0'):
        @contract_state(contract='counter')
        @dataclass
        class State:
            count: U8

    assert get_exports(State) == ()
