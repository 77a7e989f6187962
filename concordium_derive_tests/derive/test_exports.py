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

from dataclasses import dataclass
from types import ModuleType
from typing import Any

import pytest

from concordium_derive import U32, Amount, DeriveError, Err, InitContext, Ok, contract_state, init, schema_type, serialize
from concordium_derive.derive.exports import Export, ExportKind, ExportTable, collect_exports
from concordium_derive.runtime import Host


def _module(**objects: Any) -> ModuleType:
    module = ModuleType('contract')
    for name, obj in objects.items():
        setattr(module, name, obj)
    return module


def _init(contract: str) -> Any:
    @init(contract=contract)
    def contract_init(ctx: InitContext) -> Ok[State] | Err[str]:
        return Ok(State(U32(1)))
    return contract_init


@contract_state(contract='counter')
@serialize
@schema_type
@dataclass
class State:
    count: U32


def test_collect_in_definition_order() -> None:
    table = collect_exports(_module(State=State, first=_init('counter'), second=_init('other'), unrelated=1))
    assert table.names() == ['concordium_schema_state_counter', 'init_counter', 'init_other']
    assert len(table) == 3
    assert 'init_counter' in table
    assert [export.name for export in table.of_kind(ExportKind.INIT)] == ['init_counter', 'init_other']


def test_aliases_are_visited_once() -> None:
    fn = _init('counter')
    table = collect_exports(_module(fn=fn, alias=fn))
    assert table.names() == ['init_counter']


def test_duplicate_names_are_reported_together() -> None:
    with pytest.raises(DeriveError) as exc_info:
        collect_exports(_module(a=_init('counter'), b=_init('counter'), c=_init('x'), d=_init('x')))
    diagnostics = exc_info.value.diagnostics
    assert [d.message for d in diagnostics] == [
        "Export 'init_counter' is defined more than once.",
        "Export 'init_counter' is defined more than once.",
        "Export 'init_x' is defined more than once.",
        "Export 'init_x' is defined more than once.",
    ]


def test_call_through_the_table() -> None:
    table = collect_exports(_module(fn=_init('counter')))
    host = Host()
    assert table.call('init_counter', host, Amount(0)) == 0
    assert bytes(host.state) == b'\x01\x00\x00\x00'
    with pytest.raises(KeyError):
        table.call('init_missing', host, Amount(0))


def test_table_rejects_duplicates() -> None:
    table = ExportTable()
    export = Export('x', ExportKind.TEST, lambda: None, 'x')
    table.add(export)
    with pytest.raises(DeriveError, match="Export 'x' is defined more than once."):
        table.add(export)
    assert list(table) == [export]
