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
This module implements utf-8 string encoding with a length prefix.

It works exactly like the encoding of bytes, the prefix counts bytes of the utf-8 encoding, not characters.

>>> se = Serializer.build_bytes_serializer()
>>> encode_utf8(se, 'π')
>>> bytes(se.finalize()).hex()
'02000000cf80'

>>> se = Serializer.build_bytes_serializer()
>>> encode_utf8(se, 'test', length_width=1)
>>> bytes(se.finalize()).hex()
'0474657374'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0474657374'))
>>> decode_utf8(de, length_width=1)
'test'
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(b'\x01\xff')
>>> try:
...     decode_utf8(de, length_width=1)
... except ValueError as e:
...     print(*e.args)
invalid utf-8 data
"""

from concordium_derive.serialization import BadDataError, Deserializer, Serializer

from .bytes import decode_bytes, encode_bytes


def encode_utf8(serializer: Serializer, value: str, *, length_width: int = 4) -> None:
    assert isinstance(value, str)
    encode_bytes(serializer, value.encode('utf-8'), length_width=length_width)


def decode_utf8(deserializer: Deserializer, *, length_width: int = 4) -> str:
    data = decode_bytes(deserializer, length_width=length_width)
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise BadDataError('invalid utf-8 data') from e
