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
Actions returned by receive functions, describing what the host does after the call succeeds.

Actions form a tree: `accept()`, `simple_transfer(...)` and `send(...)` are leaves, `and_then` and `or_else` combine
two actions. The host assigns a numeric handle to the action it is given, that handle is the status of the call.
"""

from __future__ import annotations

from dataclasses import dataclass

from concordium_derive.types import AccountAddress, Amount, ContractAddress


class Action:
    __slots__ = ()

    def and_then(self, then: Action) -> Action:
        """Run `then` only if this action succeeds."""
        return AndThen(self, then)

    def or_else(self, otherwise: Action) -> Action:
        """Run `otherwise` only if this action fails."""
        return OrElse(self, otherwise)


@dataclass(frozen=True, slots=True)
class Accept(Action):
    pass


@dataclass(frozen=True, slots=True)
class SimpleTransfer(Action):
    to: AccountAddress
    amount: Amount


@dataclass(frozen=True, slots=True)
class Send(Action):
    to: ContractAddress
    receive_name: str
    amount: Amount
    parameter: bytes


@dataclass(frozen=True, slots=True)
class AndThen(Action):
    first: Action
    then: Action


@dataclass(frozen=True, slots=True)
class OrElse(Action):
    first: Action
    otherwise: Action


def accept() -> Action:
    return Accept()


def simple_transfer(to: AccountAddress, amount: Amount) -> Action:
    return SimpleTransfer(to, amount)


def send(to: ContractAddress, receive_name: str, amount: Amount, parameter: bytes = b'') -> Action:
    return Send(to, receive_name, amount, parameter)
