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

from typing import Annotated, Any, Optional

import pytest

from concordium_derive.codecs import (
    DEFAULT_TYPE_MAP,
    ContainerKind,
    OrderPolicy,
    check_kind_compatible,
    make_codec_for_type,
    make_length_prefixed_codec,
)
from concordium_derive.serialization import BadDataError, OutOfDataError, TooLongError
from concordium_derive.types import (
    I8,
    I64,
    U8,
    U16,
    U32,
    U64,
    U128,
    AccountAddress,
    Amount,
    ContractAddress,
    Timestamp,
)


@pytest.mark.parametrize(['type_', 'value', 'expected'], [
    (bool, True, '01'),
    (U8, 7, '07'),
    (U16, 0x0102, '0201'),
    (U32, 1, '01000000'),
    (U64, 1, '0100000000000000'),
    (U128, 1, '01' + '00' * 15),
    (I8, -1, 'ff'),
    (I64, -2, 'fe' + 'ff' * 7),
    (Amount, 1000, 'e803000000000000'),
    (Timestamp, 0, '00' * 8),
    (str, 'hi', '020000006869'),
    (bytes, b'\x00\x01', '020000000001'),
    (list[U8], [1, 2], '020000000102'),
    (tuple[U8, bool], (1, False), '0100'),
    (tuple[U8, ...], (3,), '0100000003'),
    (U8 | None, None, '00'),
    (Optional[U8], 5, '0105'),
    (set[U8], {3, 1, 2}, '03000000010203'),
    (frozenset[U16], frozenset({2, 1}), '0200000001000200'),
    (dict[U8, bool], {2: True, 1: False}, '0200000001000201'),
    (ContractAddress, ContractAddress(U64(1), U64(0)), '01' + '00' * 15),
])
def test_encoding(type_: Any, value: Any, expected: str) -> None:
    codec = make_codec_for_type(type_)
    assert codec.to_bytes(value).hex() == expected
    assert codec.from_bytes(bytes.fromhex(expected)) == value


def test_account_address_is_raw_bytes() -> None:
    codec = make_codec_for_type(AccountAddress)
    address = AccountAddress(bytes(range(32)))
    assert codec.to_bytes(address) == address
    assert codec.from_bytes(address) == address
    with pytest.raises(ValueError):
        codec.to_bytes(AccountAddress(b'\x00' * 31))


def test_plain_int_is_refused() -> None:
    with pytest.raises(TypeError, match='use a sized integer'):
        make_codec_for_type(int)


def test_unsupported_type() -> None:
    with pytest.raises(TypeError, match='not supported by any codec'):
        make_codec_for_type(float)


def test_union_must_be_optional() -> None:
    with pytest.raises(TypeError):
        make_codec_for_type(U8 | str)


def test_annotated_is_stripped() -> None:
    codec = make_codec_for_type(Annotated[U8, 'metadata'])
    assert codec.to_bytes(U8(1)) == b'\x01'


@pytest.mark.parametrize(['type_', 'value'], [
    (U8, 256),
    (U8, -1),
    (I8, 128),
    (bool, 1),
    (U32, True),
    (str, b'x'),
    (list[U8], (1,)),
    (tuple[U8, U8], (1,)),
])
def test_invalid_values(type_: Any, value: Any) -> None:
    codec = make_codec_for_type(type_)
    with pytest.raises((TypeError, ValueError)):
        codec.check_value(value)


def test_deep_check_of_nested_values() -> None:
    codec = make_codec_for_type(dict[str, list[U8]])
    codec.check_value({'a': [1, 2]})
    with pytest.raises(ValueError):
        codec.check_value({'a': [1, 300]})


def test_map_rejects_unordered_keys_by_default() -> None:
    codec = make_codec_for_type(dict[U8, bool])
    with pytest.raises(BadDataError):
        codec.from_bytes(bytes.fromhex('0200000002000100'))


def test_set_rejects_repeated_members_by_default() -> None:
    codec = make_codec_for_type(set[U8])
    with pytest.raises(BadDataError):
        codec.from_bytes(bytes.fromhex('020000000101'))


def test_truncated_input() -> None:
    codec = make_codec_for_type(list[U16])
    with pytest.raises(OutOfDataError):
        codec.from_bytes(bytes.fromhex('020000000100'))


def test_unhashable_set_member() -> None:
    with pytest.raises(TypeError, match='not hashable'):
        make_codec_for_type(set[list[U8]])


@pytest.mark.parametrize('width', [1, 2, 4, 8])
def test_sequence_width(width: int) -> None:
    codec = make_length_prefixed_codec(
        list[U8],
        kind=ContainerKind.SEQUENCE,
        width=width,
        order_policy=OrderPolicy.UNCHECKED,
        type_map=DEFAULT_TYPE_MAP,
    )
    data = codec.to_bytes([9])
    assert data == (1).to_bytes(width, 'little') + b'\x09'
    assert codec.from_bytes(data) == [9]


def test_width_one_overflow() -> None:
    codec = make_length_prefixed_codec(
        bytes,
        kind=ContainerKind.SEQUENCE,
        width=1,
        order_policy=OrderPolicy.UNCHECKED,
        type_map=DEFAULT_TYPE_MAP,
    )
    assert len(codec.to_bytes(b'\x00' * 255)) == 256
    with pytest.raises(TooLongError):
        codec.to_bytes(b'\x00' * 256)


def test_unique_policy_keeps_last_value() -> None:
    codec = make_length_prefixed_codec(
        dict[U8, U8],
        kind=ContainerKind.MAP,
        width=1,
        order_policy=OrderPolicy.UNIQUE,
        type_map=DEFAULT_TYPE_MAP,
    )
    assert codec.from_bytes(bytes.fromhex('0301010201010a')) == {1: 10, 2: 1}


def test_string_width() -> None:
    codec = make_length_prefixed_codec(
        str,
        kind=ContainerKind.UTF8_STRING,
        width=2,
        order_policy=OrderPolicy.UNCHECKED,
        type_map=DEFAULT_TYPE_MAP,
    )
    assert codec.to_bytes('ab').hex() == '02006162'


@pytest.mark.parametrize(['type_', 'kind'], [
    (dict[U8, U8], ContainerKind.SEQUENCE),
    (list[U8], ContainerKind.MAP),
    (str, ContainerKind.SET),
    (bytes, ContainerKind.UTF8_STRING),
    (U32, ContainerKind.SEQUENCE),
])
def test_incompatible_kind(type_: Any, kind: ContainerKind) -> None:
    with pytest.raises(TypeError, match=f'`{kind.attribute}` requires'):
        check_kind_compatible(type_, kind)


def test_invalid_width() -> None:
    with pytest.raises(ValueError):
        make_length_prefixed_codec(
            list[U8],
            kind=ContainerKind.SEQUENCE,
            width=3,
            order_policy=OrderPolicy.UNCHECKED,
            type_map=DEFAULT_TYPE_MAP,
        )
