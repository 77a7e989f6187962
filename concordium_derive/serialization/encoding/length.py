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
Length prefixes are unsigned little-endian integers of a fixed width, the width being one of 1, 2, 4 or 8 bytes.

A width of `w` bytes caps the count at `2**(8*w) - 1`, a count that does not fit is refused instead of truncated.

>>> se = Serializer.build_bytes_serializer()
>>> encode_length(se, 3, width=1)
>>> encode_length(se, 3, width=2)
>>> encode_length(se, 3, width=4)
>>> bytes(se.finalize()).hex()
'03030003000000'

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_length(se, 256, width=1)
... except ValueError as e:
...     print(*e.args)
256 does not fit in a 1-byte length prefix

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('ff0001'))
>>> decode_length(de, width=1)
255
>>> decode_length(de, width=2)
256
>>> de.finalize()
"""

from concordium_derive.serialization import Deserializer, Serializer, TooLongError

from .int import decode_int, encode_int

VALID_WIDTHS: tuple[int, ...] = (1, 2, 4, 8)


def max_length(width: int) -> int:
    """Largest count that fits in a prefix of `width` bytes."""
    return (1 << (8 * width)) - 1


def encode_length(serializer: Serializer, length: int, *, width: int) -> None:
    assert width in VALID_WIDTHS, f'invalid length width: {width}'
    if length > max_length(width):
        raise TooLongError(f'{length} does not fit in a {width}-byte length prefix')
    encode_int(serializer, length, length=width, signed=False)


def decode_length(deserializer: Deserializer, *, width: int) -> int:
    assert width in VALID_WIDTHS, f'invalid length width: {width}'
    return decode_int(deserializer, length=width, signed=False)
