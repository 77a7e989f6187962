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

from functools import partial

import pytest

from concordium_derive.serialization import (
    BadDataError,
    Deserializer,
    OutOfDataError,
    SerializationError,
    Serializer,
    TooLongError,
)
from concordium_derive.serialization.compound_encoding.optional import decode_optional, encode_optional
from concordium_derive.serialization.encoding.bool import decode_bool, encode_bool
from concordium_derive.serialization.encoding.bytes import decode_bytes, encode_bytes
from concordium_derive.serialization.encoding.int import decode_int, encode_int
from concordium_derive.serialization.encoding.length import decode_length, encode_length, max_length
from concordium_derive.serialization.encoding.utf8 import decode_utf8, encode_utf8


@pytest.mark.parametrize('width', [1, 2, 4, 8])
def test_length_prefix_width(width: int) -> None:
    se = Serializer.build_bytes_serializer()
    encode_length(se, max_length(width), width=width)
    data = bytes(se.finalize())
    assert data == b'\xff' * width
    de = Deserializer.build_bytes_deserializer(data)
    assert decode_length(de, width=width) == max_length(width)
    de.finalize()


@pytest.mark.parametrize('width', [1, 2, 4])
def test_length_prefix_overflow(width: int) -> None:
    se = Serializer.build_bytes_serializer()
    with pytest.raises(TooLongError):
        encode_length(se, max_length(width) + 1, width=width)


@pytest.mark.parametrize(['number', 'length', 'signed', 'expected'], [
    (0, 1, False, '00'),
    (255, 1, False, 'ff'),
    (-1, 1, True, 'ff'),
    (0x0102, 2, False, '0201'),
    (-2, 4, True, 'feffffff'),
    (1, 8, False, '0100000000000000'),
    (2**127 - 1, 16, True, 'ff' * 15 + '7f'),
])
def test_int_is_little_endian(number: int, length: int, signed: bool, expected: str) -> None:
    se = Serializer.build_bytes_serializer()
    encode_int(se, number, length=length, signed=signed)
    assert bytes(se.finalize()).hex() == expected
    de = Deserializer.build_bytes_deserializer(bytes.fromhex(expected))
    assert decode_int(de, length=length, signed=signed) == number


@pytest.mark.parametrize(['number', 'length', 'signed'], [
    (256, 1, False),
    (-1, 1, False),
    (128, 1, True),
    (2**64, 8, False),
])
def test_int_out_of_range(number: int, length: int, signed: bool) -> None:
    se = Serializer.build_bytes_serializer()
    with pytest.raises(SerializationError, match='too big to encode'):
        encode_int(se, number, length=length, signed=signed)


def test_bool_rejects_other_bytes() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x02')
    with pytest.raises(BadDataError):
        decode_bool(de)


def test_bool_values() -> None:
    se = Serializer.build_bytes_serializer()
    encode_bool(se, True)
    encode_bool(se, False)
    assert bytes(se.finalize()) == b'\x01\x00'


def test_utf8_counts_bytes() -> None:
    se = Serializer.build_bytes_serializer()
    encode_utf8(se, 'ção', length_width=1)
    assert bytes(se.finalize()).hex() == '05c3a7c3a36f'


def test_utf8_invalid_data() -> None:
    de = Deserializer.build_bytes_deserializer(bytes.fromhex('01ff'))
    with pytest.raises(BadDataError, match='invalid utf-8 data'):
        decode_utf8(de, length_width=1)


def test_bytes_truncated_input() -> None:
    de = Deserializer.build_bytes_deserializer(bytes.fromhex('0400000001'))
    with pytest.raises(OutOfDataError):
        decode_bytes(de)


def test_bytes_default_width() -> None:
    se = Serializer.build_bytes_serializer()
    encode_bytes(se, b'ab')
    assert bytes(se.finalize()).hex() == '020000006162'


def test_finalize_rejects_trailing_data() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x00')
    assert decode_bool(de) is True
    with pytest.raises(SerializationError, match='trailing data'):
        de.finalize()


def test_read_bytes_negative() -> None:
    de = Deserializer.build_bytes_deserializer(b'')
    with pytest.raises(SerializationError):
        de.read_bytes(-1)


@pytest.mark.parametrize('tag', [0x02, 0xff])
def test_optional_rejects_unknown_tags(tag: int) -> None:
    de = Deserializer.build_bytes_deserializer(bytes([tag, 0x01]))
    with pytest.raises(BadDataError, match='for an optional value'):
        decode_optional(de, decode_bool)


def test_optional_amounts() -> None:
    encode_u64 = partial(encode_int, length=8, signed=False)
    se = Serializer.build_bytes_serializer()
    encode_optional(se, 5, encode_u64)
    encode_optional(se, None, encode_u64)
    assert bytes(se.finalize()).hex() == '01050000000000000000'
