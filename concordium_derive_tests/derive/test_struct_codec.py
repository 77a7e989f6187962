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

from dataclasses import dataclass
from typing import Annotated, NamedTuple, Optional

import pytest

from concordium_derive import (
    U8,
    U16,
    U32,
    U64,
    AccountAddress,
    Amount,
    DeriveError,
    concordium,
    deserial,
    from_bytes,
    serial,
    serialize,
    to_bytes,
)
from concordium_derive.codecs import make_codec_for_type
from concordium_derive.serialization import OutOfDataError, SerializationError, UnsupportedTypeError

OWNER = AccountAddress(bytes(range(32)))


@serialize
@dataclass
class Point:
    x: U32
    y: U32


@serialize
class Pair(NamedTuple):
    first: U8
    second: bool


@serialize
@dataclass
class Marker:
    pass


@serialize
@dataclass
class Wallet:
    owner: AccountAddress
    balance: Amount
    points: list[Point]
    label: Optional[str]
    pair: Pair
    marker: Marker


@serial
@dataclass
class OnlyOut:
    a: U16


@deserial
@dataclass
class OnlyIn:
    a: U16


def test_struct_fields_in_declaration_order() -> None:
    assert to_bytes(Point(U32(1), U32(2))).hex() == '0100000002000000'
    assert from_bytes(Point, bytes.fromhex('0100000002000000')) == Point(U32(1), U32(2))


def test_unnamed_fields() -> None:
    assert to_bytes(Pair(U8(7), True)).hex() == '0701'
    assert from_bytes(Pair, b'\x07\x01') == Pair(U8(7), True)


def test_unit_encodes_to_nothing() -> None:
    assert to_bytes(Marker()) == b''
    assert from_bytes(Marker, b'') == Marker()


def test_nested_derived_types() -> None:
    wallet = Wallet(
        owner=OWNER,
        balance=Amount(5),
        points=[Point(U32(1), U32(2))],
        label=None,
        pair=Pair(U8(1), False),
        marker=Marker(),
    )
    data = to_bytes(wallet)
    expected = (
        bytes(OWNER)
        + (5).to_bytes(8, 'little')
        + bytes.fromhex('01000000' '01000000' '02000000')
        + b'\x00'
        + b'\x01\x00'
    )
    assert data == expected
    assert from_bytes(Wallet, data) == wallet


def test_derived_type_as_collection_item() -> None:
    codec = make_codec_for_type(dict[U8, Point])
    value = {U8(2): Point(U32(0), U32(0)), U8(1): Point(U32(3), U32(4))}
    data = codec.to_bytes(value)
    assert data.hex() == '02000000' '01' '03000000' '04000000' '02' '00000000' '00000000'
    assert codec.from_bytes(data) == value


def test_wrong_value_type() -> None:
    with pytest.raises(TypeError, match='expected Point'):
        make_codec_for_type(Point).to_bytes(Pair(U8(1), True))


def test_invalid_field_value() -> None:
    with pytest.raises(ValueError, match='above upper bound'):
        to_bytes(Point(U32(2**32), U32(0)))


def test_truncated_data() -> None:
    with pytest.raises(OutOfDataError):
        from_bytes(Point, bytes.fromhex('01000000'))


def test_trailing_data() -> None:
    with pytest.raises(SerializationError, match='trailing data'):
        from_bytes(Point, bytes.fromhex('010000000200000000'))


def test_serial_only() -> None:
    assert to_bytes(OnlyOut(U16(1))) == b'\x01\x00'
    with pytest.raises(UnsupportedTypeError, match='does not derive deserialization'):
        from_bytes(OnlyOut, b'\x01\x00')


def test_deserial_only() -> None:
    assert from_bytes(OnlyIn, b'\x01\x00') == OnlyIn(U16(1))
    with pytest.raises(UnsupportedTypeError, match='does not derive serialization'):
        to_bytes(OnlyIn(U16(1)))


def test_field_without_the_needed_direction() -> None:
    with pytest.raises(DeriveError, match='cannot be deserialized'):
        @serialize
        @dataclass
        class Holder:
            inner: OnlyOut


def test_serial_field_inside_serial_struct() -> None:
    @serial
    @dataclass
    class Holder:
        inner: OnlyOut

    assert to_bytes(Holder(OnlyOut(U16(2)))) == b'\x02\x00'


def test_underived_field_type() -> None:
    @dataclass
    class Plain:
        a: U8

    with pytest.raises(DeriveError) as exc_info:
        @serialize
        @dataclass
        class Holder:
            plain: Plain
            count: int

    assert [d.span.field for d in exc_info.value.diagnostics] == ['plain', 'count']


def test_length_attributes_on_fields() -> None:
    @serialize
    @dataclass
    class Compact:
        items: Annotated[list[U8], concordium(size_length=1)]
        name: Annotated[str, concordium(string_size_length=2)]
        table: Annotated[dict[U8, U64], concordium(map_size_length=1)]
        tags: Annotated[set[U8], concordium('set_size_length = 8')]

    value = Compact([U8(1)], 'a', {U8(1): U64(2)}, {U8(3)})
    data = to_bytes(value)
    assert data.hex() == '0101' '010061' '01' '01' '0200000000000000' '0100000000000000' '03'
    assert from_bytes(Compact, data) == value


def test_subclass_does_not_inherit_the_codec() -> None:
    @dataclass
    class Point3(Point):
        z: U32

    with pytest.raises(TypeError):
        to_bytes(Point3(U32(1), U32(2), U32(3)))
