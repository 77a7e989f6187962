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

r"""
`Option<T>` values: a one byte tag, `0x00` for `None` or `0x01` followed by the value. Any other tag is invalid.

An optional reserve price (`Option<Amount>`, an amount is a u64) of 1 CCD, that is 1_000_000 microCCD:

>>> from functools import partial
>>> from concordium_derive.serialization.encoding.int import decode_int, encode_int
>>> encode_amount = partial(encode_int, length=8, signed=False)
>>> se = Serializer.build_bytes_serializer()
>>> encode_optional(se, 1_000_000, encode_amount)
>>> encode_optional(se, None, encode_amount)
>>> bytes(se.finalize()).hex()
'0140420f000000000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0140420f000000000000'))
>>> decode_amount = partial(decode_int, length=8, signed=False)
>>> decode_optional(de, decode_amount), decode_optional(de, decode_amount)
(1000000, None)
>>> de.finalize()

>>> decode_optional(Deserializer.build_bytes_deserializer(b'\x02'), decode_amount)
Traceback (most recent call last):
...
concordium_derive.serialization.exceptions.BadDataError: invalid tag 0x02 for an optional value
"""

from typing import Optional, TypeVar

from concordium_derive.serialization import BadDataError, Deserializer, Serializer

from . import Decoder, Encoder

T = TypeVar('T')

NONE_TAG: int = 0x00
SOME_TAG: int = 0x01


def encode_optional(serializer: Serializer, value: Optional[T], encoder: Encoder[T]) -> None:
    if value is None:
        serializer.write_byte(NONE_TAG)
        return
    serializer.write_byte(SOME_TAG)
    encoder(serializer, value)


def decode_optional(deserializer: Deserializer, decoder: Decoder[T]) -> Optional[T]:
    tag = deserializer.read_byte()
    if tag == NONE_TAG:
        return None
    if tag != SOME_TAG:
        raise BadDataError(f'invalid tag {tag:#04x} for an optional value')
    return decoder(deserializer)
