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
In-memory stand-in for the runtime that calls contract entry points.
"""

from __future__ import annotations

from typing import Callable, Optional

from structlog import get_logger

from concordium_derive.runtime.actions import Action
from concordium_derive.runtime.errors import ContractTrap
from concordium_derive.types import ACCOUNT_ADDRESS_SIZE, U64, AccountAddress, Amount, ContractAddress, Timestamp

logger = get_logger()

_ZERO_ACCOUNT = AccountAddress(bytes(ACCOUNT_ADDRESS_SIZE))


class Host:
    """ Holds everything an entry point can observe or change: the call parameter, the contract state, the logged
    events and the registered actions.

    Not thread-safe, a call runs to completion before the next one starts.
    """

    def __init__(
        self,
        *,
        parameter: bytes = b'',
        state: bytes = b'',
        slot_time: Timestamp = Timestamp(0),
        invoker: AccountAddress = _ZERO_ACCOUNT,
        sender: Optional[AccountAddress | ContractAddress] = None,
        owner: AccountAddress = _ZERO_ACCOUNT,
        self_address: ContractAddress = ContractAddress(U64(0), U64(0)),
        self_balance: Amount = Amount(0),
    ) -> None:
        self.log = logger.new()
        self.parameter = bytes(parameter)
        self.state = bytearray(state)
        self.slot_time = slot_time
        self.invoker = invoker
        self.sender = invoker if sender is None else sender
        self.owner = owner
        self.self_address = self_address
        self.self_balance = self_balance
        self.events: list[bytes] = []
        self.actions: list[Action] = []

    def register_action(self, action: Action) -> int:
        """ Keep the action of a successful receive call, its handle is the call status."""
        if not isinstance(action, Action):
            raise TypeError(f'expected an Action, got {type(action).__qualname__}')
        self.actions.append(action)
        return len(self.actions) - 1

    def invoke(self, export: Callable[[Host, Amount], int], amount: Amount = Amount(0)) -> int:
        """ Call an exported entry point.

        When the call is rejected or traps, the state, events and actions are restored to what they were before the
        call. A `ContractTrap` is raised again.
        """
        name = getattr(export, '__qualname__', repr(export))
        snapshot = (bytes(self.state), len(self.events), len(self.actions))
        try:
            status = export(self, amount)
        except ContractTrap:
            self._rollback(*snapshot)
            self.log.error('call trapped', export=name)
            raise
        if status < 0:
            self._rollback(*snapshot)
            self.log.info('call rejected', export=name, status=status)
        return status

    def _rollback(self, state: bytes, num_events: int, num_actions: int) -> None:
        self.state[:] = state
        del self.events[num_events:]
        del self.actions[num_actions:]

    def __repr__(self) -> str:
        return f'Host(state={bytes(self.state).hex()!r}, events={len(self.events)}, actions={len(self.actions)})'
