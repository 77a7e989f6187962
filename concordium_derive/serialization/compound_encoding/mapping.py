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
Encoding a mapping is equivalent to encoding a collection of 2-tuples.

Layout: [N: unsigned little-endian, `length_width` bytes][key_0][value_0]...[key_N][value_N]

>>> from functools import partial
>>> from concordium_derive.serialization.encoding.utf8 import encode_utf8, decode_utf8
>>> from concordium_derive.serialization.encoding.bool import encode_bool, decode_bool
>>> se = Serializer.build_bytes_serializer()
>>> value = {'foo': False, 'bar': True}
>>> encode_mapping(se, value, partial(encode_utf8, length_width=1), encode_bool, length_width=1, sort_keys=True)
>>> bytes(se.finalize()).hex()
'02036261720103666f6f00'

Breakdown of the result:

    02: 2 as a 1-byte integer, the total length
    03626172: 'bar' with length prefix
    01: True
    03666f6f: 'foo' with length prefix
    00: False

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('02036261720103666f6f00'))
>>> decode_mapping(de, partial(decode_utf8, length_width=1), decode_bool, dict, length_width=1)
{'bar': True, 'foo': False}
>>> de.finalize()

Without order checking a repeated key is resolved by the builder, for a `dict` the last value wins:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0203666f6f0003666f6f01'))
>>> decode_mapping(de, partial(decode_utf8, length_width=1), decode_bool, dict, length_width=1)
{'foo': True}
"""

from collections.abc import Iterable, Mapping
from operator import itemgetter
from typing import Callable, TypeVar

from concordium_derive.serialization import Deserializer, Serializer
from concordium_derive.serialization.encoding.length import decode_length, encode_length

from . import Decoder, Encoder, ensure_strictly_increasing

KT = TypeVar('KT')
VT = TypeVar('VT')
R = TypeVar('R', bound=Mapping)


def encode_mapping(
    serializer: Serializer,
    values_mapping: Mapping[KT, VT],
    key_encoder: Encoder[KT],
    value_encoder: Encoder[VT],
    *,
    length_width: int = 4,
    sort_keys: bool = False,
) -> None:
    encode_length(serializer, len(values_mapping), width=length_width)
    items: Iterable[tuple[KT, VT]] = values_mapping.items()
    if sort_keys:
        items = sorted(items, key=itemgetter(0))
    for key, value in items:
        key_encoder(serializer, key)
        value_encoder(serializer, value)


def decode_mapping(
    deserializer: Deserializer,
    key_decoder: Decoder[KT],
    value_decoder: Decoder[VT],
    mapping_builder: Callable[[Iterable[tuple[KT, VT]]], R],
    *,
    length_width: int = 4,
    strictly_increasing: bool = False,
) -> R:
    size = decode_length(deserializer, width=length_width)
    items: Iterable[tuple[KT, VT]] = (
        (key_decoder(deserializer), value_decoder(deserializer))
        for _ in range(size)
    )
    if strictly_increasing:
        items = ensure_strictly_increasing(items, key=itemgetter(0))
    return mapping_builder(items)
