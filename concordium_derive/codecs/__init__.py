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

from types import MappingProxyType, UnionType
from typing import Any

from concordium_derive.codecs.address_codec import AccountAddressCodec, ContractAddressCodec
from concordium_derive.codecs.bool_codec import BoolCodec
from concordium_derive.codecs.codec import Codec
from concordium_derive.codecs.length_prefixed_codec import (
    DEFAULT_LENGTH_WIDTH,
    BytesCodec,
    ContainerKind,
    LengthPrefixedCodec,
    MapCodec,
    OrderPolicy,
    SequenceCodec,
    SetCodec,
    Utf8StringCodec,
    check_kind_compatible,
    make_length_prefixed_codec,
)
from concordium_derive.codecs.optional_codec import OptionalCodec
from concordium_derive.codecs.sized_int_codec import (
    I8Codec,
    I16Codec,
    I32Codec,
    I64Codec,
    I128Codec,
    U8Codec,
    U16Codec,
    U32Codec,
    U64Codec,
    U128Codec,
)
from concordium_derive.codecs.tuple_codec import TupleCodec
from concordium_derive.codecs.utils import CODEC_ATTR, get_derived_codec
from concordium_derive.types import (
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    AccountAddress,
    Amount,
    ContractAddress,
    Duration,
    Timestamp,
)

__all__ = [
    'CODEC_ATTR',
    'DEFAULT_LENGTH_WIDTH',
    'DEFAULT_TYPE_MAP',
    'Codec',
    'ContainerKind',
    'OrderPolicy',
    'LengthPrefixedCodec',
    'BytesCodec',
    'MapCodec',
    'SequenceCodec',
    'SetCodec',
    'Utf8StringCodec',
    'OptionalCodec',
    'TupleCodec',
    'check_kind_compatible',
    'get_derived_codec',
    'make_codec_for_type',
    'make_length_prefixed_codec',
]

# Mapping between types and codec classes, classes carrying a generated codec are handled before this map is used.
_CODECS_MAP: dict[Any, type[Codec]] = {
    bool: BoolCodec,
    U8: U8Codec,
    U16: U16Codec,
    U32: U32Codec,
    U64: U64Codec,
    U128: U128Codec,
    I8: I8Codec,
    I16: I16Codec,
    I32: I32Codec,
    I64: I64Codec,
    I128: I128Codec,
    Amount: U64Codec,
    Timestamp: U64Codec,
    Duration: U64Codec,
    AccountAddress: AccountAddressCodec,
    ContractAddress: ContractAddressCodec,
    bytes: BytesCodec,
    str: Utf8StringCodec,
    list: SequenceCodec,
    dict: MapCodec,
    set: SetCodec,
    frozenset: SetCodec,
    tuple: TupleCodec,
    UnionType: OptionalCodec,
}

DEFAULT_TYPE_MAP = Codec.TypeMap(MappingProxyType(_CODECS_MAP))


def make_codec_for_type(type_: Any, /, *, type_map: Codec.TypeMap = DEFAULT_TYPE_MAP) -> Codec:
    """ Instantiate the codec of a type annotation.

    >>> codec = make_codec_for_type(dict[str, U8])
    >>> codec.to_bytes({'b': 2, 'a': 1}).hex()
    '02000000010000006101010000006202'
    >>> codec.from_bytes(bytes.fromhex('02000000010000006101010000006202'))
    {'a': 1, 'b': 2}
    """
    return Codec.from_type(type_, type_map=type_map)
