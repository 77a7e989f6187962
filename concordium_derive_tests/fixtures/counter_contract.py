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
A small counter contract used by the command line tests.
"""

from dataclasses import dataclass

from concordium_derive import (
    U8,
    U32,
    Action,
    Err,
    InitContext,
    Ok,
    ReceiveContext,
    accept,
    contract_state,
    init,
    receive,
    schema_type,
    serialize,
)


@contract_state(contract='counter')
@serialize
@schema_type
@dataclass
class State:
    count: U32


@serialize
@schema_type
@dataclass
class Increment:
    step: U8


@init(contract='counter')
def counter_init(ctx: InitContext) -> Ok[State] | Err[str]:
    return Ok(State(U32(0)))


@receive(contract='counter', name='increment', parameter='Increment')
def counter_increment(ctx: ReceiveContext, state: State) -> Ok[Action] | Err[str]:
    match ctx.parse_parameter(Increment):
        case Ok(increment):
            state.count = U32(state.count + increment.step)
            return Ok(accept())
        case _:
            return Err('malformed parameter')
