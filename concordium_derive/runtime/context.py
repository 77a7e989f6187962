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
Information about the current call, given to entry points as their first argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias, Union

from concordium_derive.codecs import make_codec_for_type
from concordium_derive.serialization import Deserializer, SerializationError
from concordium_derive.types import AccountAddress, Amount, ContractAddress, Timestamp
from concordium_derive.utils.result import Err, Ok, Result

if TYPE_CHECKING:
    from concordium_derive.runtime.host import Host

Address: TypeAlias = Union[AccountAddress, ContractAddress]


@dataclass(frozen=True, slots=True)
class ChainMetadata:
    slot_time: Timestamp


class _HasParameter:
    __slots__ = ()

    parameter: bytes

    def parameter_cursor(self) -> Deserializer:
        return Deserializer.build_bytes_deserializer(self.parameter)

    def parse_parameter(self, type_: Any) -> Result[Any, SerializationError]:
        """ Decode the whole parameter as a value of the given type.

        A malformed parameter is an `Err`, so the entry point can reject the call.
        """
        try:
            return Ok(make_codec_for_type(type_).from_bytes(self.parameter))
        except SerializationError as e:
            return Err(e)


@dataclass(frozen=True, slots=True)
class InitContext(_HasParameter):
    metadata: ChainMetadata
    init_origin: AccountAddress
    parameter: bytes

    @classmethod
    def open(cls, host: Host) -> InitContext:
        return cls(
            metadata=ChainMetadata(host.slot_time),
            init_origin=host.invoker,
            parameter=host.parameter,
        )


@dataclass(frozen=True, slots=True)
class ReceiveContext(_HasParameter):
    metadata: ChainMetadata
    invoker: AccountAddress
    self_address: ContractAddress
    self_balance: Amount
    sender: Address
    owner: AccountAddress
    parameter: bytes

    @classmethod
    def open(cls, host: Host) -> ReceiveContext:
        return cls(
            metadata=ChainMetadata(host.slot_time),
            invoker=host.invoker,
            self_address=host.self_address,
            self_balance=host.self_balance,
            sender=host.sender,
            owner=host.owner,
            parameter=host.parameter,
        )
