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
Booleans take a single byte on the wire, `0x00` for `false` and `0x01` for `true`. Contract state written by another
tool may hold any other byte in that position, decoding rejects it instead of reading it as `true`.

A struct with the fields `paused: bool` and `allow_transfers: bool`:

>>> se = Serializer.build_bytes_serializer()
>>> encode_bool(se, True)
>>> encode_bool(se, False)
>>> bytes(se.finalize()).hex()
'0100'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0100'))
>>> decode_bool(de), decode_bool(de)
(True, False)
>>> de.finalize()

>>> decode_bool(Deserializer.build_bytes_deserializer(bytes.fromhex('ff')))
Traceback (most recent call last):
...
concordium_derive.serialization.exceptions.BadDataError: invalid boolean byte 0xff
"""

from concordium_derive.serialization import BadDataError, Deserializer, Serializer

FALSE_BYTE: int = 0x00
TRUE_BYTE: int = 0x01


def encode_bool(serializer: Serializer, value: bool) -> None:
    serializer.write_byte(TRUE_BYTE if value else FALSE_BYTE)


def decode_bool(deserializer: Deserializer) -> bool:
    byte = deserializer.read_byte()
    if byte not in (FALSE_BYTE, TRUE_BYTE):
        raise BadDataError(f'invalid boolean byte {byte:#04x}')
    return byte == TRUE_BYTE
