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

from concordium_derive.runtime.actions import Action, accept, send, simple_transfer
from concordium_derive.runtime.context import ChainMetadata, InitContext, ReceiveContext
from concordium_derive.runtime.errors import ContractTrap, trap
from concordium_derive.runtime.host import Host
from concordium_derive.runtime.logger import LogError, Logger
from concordium_derive.runtime.state import ContractState, StateRef

__all__ = [
    'Action',
    'ChainMetadata',
    'ContractState',
    'ContractTrap',
    'Host',
    'InitContext',
    'LogError',
    'Logger',
    'ReceiveContext',
    'StateRef',
    'accept',
    'send',
    'simple_transfer',
    'trap',
]
