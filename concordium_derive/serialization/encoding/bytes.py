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
This modules implements encoding of byte sequence by prefixing it with the length of the sequence encoded as a fixed
width little-endian unsigned integer, 4 bytes unless configured otherwise.

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'test')  # will prepend b'\x04\x00\x00\x00' before writing b'test'
>>> bytes(se.finalize()).hex()
'0400000074657374'

>>> se = Serializer.build_bytes_serializer()
>>> encode_bytes(se, b'test', length_width=1)
>>> bytes(se.finalize()).hex()
'0474657374'

>>> de = Deserializer.build_bytes_deserializer(b'\x04testfoo')
>>> decode_bytes(de, length_width=1)
b'test'
>>> try:
...     de.finalize()
... except ValueError as e:
...     print(*e.args)
trailing data

>>> de = Deserializer.build_bytes_deserializer(b'\x05test')
>>> try:
...     decode_bytes(de, length_width=1)
... except ValueError as e:
...     print(*e.args)
not enough bytes to read
"""

from concordium_derive.serialization import Deserializer, Serializer

from .length import decode_length, encode_length


def encode_bytes(serializer: Serializer, data: bytes, *, length_width: int = 4) -> None:
    """ Encodes a byte-sequence adding a length prefix.

    This modules's docstring has more details and examples.
    """
    assert isinstance(data, bytes)
    encode_length(serializer, len(data), width=length_width)
    serializer.write_bytes(data)


def decode_bytes(deserializer: Deserializer, *, length_width: int = 4) -> bytes:
    """ Decodes a byte-sequnce with a length prefix.

    This modules's docstring has more details and examples.
    """
    size = decode_length(deserializer, width=length_width)
    return bytes(deserializer.read_bytes(size))
