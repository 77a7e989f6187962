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
A collection is basically any value that has a known size and is iterable.

Layout: [N: unsigned little-endian, `length_width` bytes][value_0]...[value_N]

>>> from functools import partial
>>> from concordium_derive.serialization.encoding.utf8 import encode_utf8, decode_utf8
>>> se = Serializer.build_bytes_serializer()
>>> encode_collection(se, ['a', 'bc'], partial(encode_utf8, length_width=1), length_width=2)
>>> bytes(se.finalize()).hex()
'02000161026263'

Breakdown of the result:

    0200: 2 as a 2-byte little-endian integer, the total length
    0161: 'a' (with length prefix)
    026263: 'bc' (with length prefix)

When decoding, the builder can be any compabile collection, in the previous example a `list` was encoded, but when
decoding a `tuple` could be used, it only matters that the collection can be initialized with an `Iterable[T]`.

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('02000161026263'))
>>> decode_collection(de, partial(decode_utf8, length_width=1), tuple, length_width=2)
('a', 'bc')
>>> de.finalize()

Sorted collections can be checked while decoding:

>>> from concordium_derive.serialization.encoding.int import decode_int
>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('020201'))
>>> u8 = partial(decode_int, length=1, signed=False)
>>> try:
...     decode_collection(de, u8, set, length_width=1, strictly_increasing=True)
... except ValueError as e:
...     print(*e.args)
values are not in strictly increasing order
"""

from collections.abc import Collection, Iterable
from typing import Callable, TypeVar

from concordium_derive.serialization import Deserializer, Serializer
from concordium_derive.serialization.encoding.length import decode_length, encode_length

from . import Decoder, Encoder, ensure_strictly_increasing

T = TypeVar('T')
R = TypeVar('R', bound=Collection)


def encode_collection(
    serializer: Serializer,
    values: Collection[T],
    encoder: Encoder[T],
    *,
    length_width: int = 4,
    sort_values: bool = False,
) -> None:
    encode_length(serializer, len(values), width=length_width)
    for value in (sorted(values) if sort_values else values):  # type: ignore[type-var]
        encoder(serializer, value)


def decode_collection(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[Iterable[T]], R],
    *,
    length_width: int = 4,
    strictly_increasing: bool = False,
) -> R:
    length = decode_length(deserializer, width=length_width)
    values: Iterable[T] = (decoder(deserializer) for _ in range(length))
    if strictly_increasing:
        values = ensure_strictly_increasing(values)
    return builder(values)
