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
from typing import Annotated

import pytest

from concordium_derive import U8, U16, concordium, from_bytes, serialize, to_bytes
from concordium_derive.serialization import BadDataError, TooLongError


@serialize
@dataclass
class Small:
    items: Annotated[list[U8], concordium(size_length=1)]


@serialize
@dataclass
class Tables:
    loose: Annotated[dict[U8, U8], concordium(map_size_length=1)]
    strict: Annotated[dict[U8, U8], concordium(map_size_length=1, ensure_ordered=True)]


@serialize
@dataclass
class Members:
    loose: Annotated[frozenset[U16], concordium(set_size_length=2)]
    strict: Annotated[frozenset[U16], concordium(set_size_length=2, ensure_ordered=True)]


@pytest.mark.parametrize('width', [1, 2, 4, 8])
def test_sequence_prefix_width(width: int) -> None:
    @serialize
    @dataclass
    class Sized:
        data: Annotated[bytes, concordium(size_length=width)]

    data = to_bytes(Sized(b'ab'))
    assert data == (2).to_bytes(width, 'little') + b'ab'
    assert from_bytes(Sized, data) == Sized(b'ab')


def test_largest_count_for_one_byte() -> None:
    value = Small([U8(0)] * 255)
    data = to_bytes(value)
    assert data[0] == 255
    assert from_bytes(Small, data) == value


def test_count_too_large_for_one_byte() -> None:
    with pytest.raises(TooLongError):
        to_bytes(Small([U8(0)] * 256))


def test_maps_are_written_in_key_order() -> None:
    value = Tables({U8(2): U8(0), U8(1): U8(0)}, {U8(9): U8(1), U8(3): U8(1)})
    assert to_bytes(value).hex() == '02' '0100' '0200' '02' '0301' '0901'


def test_unordered_map_keys_are_accepted_unless_ordered() -> None:
    value = from_bytes(Tables, bytes.fromhex('02' '0200' '0100' '00'))
    assert value.loose == {U8(1): U8(0), U8(2): U8(0)}
    with pytest.raises(BadDataError):
        from_bytes(Tables, bytes.fromhex('00' '02' '0200' '0100'))


def test_repeated_map_key_keeps_the_last_value() -> None:
    value = from_bytes(Tables, bytes.fromhex('02' '0105' '0107' '00'))
    assert value.loose == {U8(1): U8(7)}
    with pytest.raises(BadDataError):
        from_bytes(Tables, bytes.fromhex('00' '02' '0105' '0107'))


def test_set_policies() -> None:
    value = from_bytes(Members, bytes.fromhex('0200' '0200' '0100' '0000'))
    assert value.loose == frozenset({U16(1), U16(2)})
    value = from_bytes(Members, bytes.fromhex('0200' '0100' '0100' '0000'))
    assert value.loose == frozenset({U16(1)})
    with pytest.raises(BadDataError):
        from_bytes(Members, bytes.fromhex('0000' '0200' '0200' '0100'))


def test_set_is_written_sorted() -> None:
    value = Members(frozenset({U16(3), U16(1)}), frozenset())
    assert to_bytes(value).hex() == '0200' '0100' '0300' '0000'
