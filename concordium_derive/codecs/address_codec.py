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

from __future__ import annotations

from typing import Any

from typing_extensions import Self, override

from concordium_derive.codecs.codec import Codec
from concordium_derive.serialization import Deserializer, Serializer
from concordium_derive.types import ACCOUNT_ADDRESS_SIZE, U64, AccountAddress, ContractAddress


class AccountAddressCodec(Codec[AccountAddress]):
    """ Account addresses are 32 raw bytes, without a length prefix.
    """

    _is_hashable = True

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: Codec.TypeMap) -> Self:
        if type_ is not AccountAddress:
            raise TypeError('expected AccountAddress type')
        return cls()

    @override
    def _check_value(self, value: AccountAddress, /, *, deep: bool) -> None:
        if not isinstance(value, bytes):
            raise TypeError('expected bytes')
        if len(value) != ACCOUNT_ADDRESS_SIZE:
            raise ValueError(f'an account address has {ACCOUNT_ADDRESS_SIZE} bytes, got {len(value)}')

    @override
    def _serialize(self, serializer: Serializer, value: AccountAddress, /) -> None:
        serializer.write_bytes(value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> AccountAddress:
        return AccountAddress(bytes(deserializer.read_bytes(ACCOUNT_ADDRESS_SIZE)))


class ContractAddressCodec(Codec[ContractAddress]):
    """ Contract addresses are the index followed by the subindex, both as u64.
    """

    _is_hashable = True

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: Codec.TypeMap) -> Self:
        if type_ is not ContractAddress:
            raise TypeError('expected ContractAddress type')
        return cls()

    @override
    def _check_value(self, value: ContractAddress, /, *, deep: bool) -> None:
        if not isinstance(value, ContractAddress):
            raise TypeError('expected ContractAddress')
        for part in value:
            if isinstance(part, bool) or not isinstance(part, int) or not 0 <= part < 2**64:
                raise ValueError('contract address parts must be u64 values')

    @override
    def _serialize(self, serializer: Serializer, value: ContractAddress, /) -> None:
        serializer.write_bytes(value.index.to_bytes(8, 'little'))
        serializer.write_bytes(value.subindex.to_bytes(8, 'little'))

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> ContractAddress:
        index = int.from_bytes(deserializer.read_bytes(8), 'little')
        subindex = int.from_bytes(deserializer.read_bytes(8), 'little')
        return ContractAddress(U64(index), U64(subindex))
