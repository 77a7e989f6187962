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
This module exports the types, decorators and runtime values used to write contracts.
"""

from concordium_derive.derive import (
    DeriveError,
    collect_exports,
    concordium,
    concordium_test,
    contract_state,
    deserial,
    from_bytes,
    init,
    receive,
    schema_type,
    serial,
    serialize,
    to_bytes,
)
from concordium_derive.runtime import (
    Action,
    ContractState,
    ContractTrap,
    Host,
    InitContext,
    Logger,
    ReceiveContext,
    StateRef,
    accept,
    send,
    simple_transfer,
    trap,
)
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
    SumType,
    Timestamp,
)
from concordium_derive.utils.result import Err, Ok, Result
from concordium_derive.version import __version__

__all__ = [
    'DeriveError',
    'collect_exports',
    'concordium',
    'concordium_test',
    'contract_state',
    'deserial',
    'from_bytes',
    'init',
    'receive',
    'schema_type',
    'serial',
    'serialize',
    'to_bytes',
    'Action',
    'ContractState',
    'ContractTrap',
    'Host',
    'InitContext',
    'Logger',
    'ReceiveContext',
    'StateRef',
    'accept',
    'send',
    'simple_transfer',
    'trap',
    'I8',
    'I16',
    'I32',
    'I64',
    'I128',
    'U8',
    'U16',
    'U32',
    'U64',
    'U128',
    'AccountAddress',
    'Amount',
    'ContractAddress',
    'Duration',
    'SumType',
    'Timestamp',
    'Err',
    'Ok',
    'Result',
    '__version__',
]
