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

from concordium_derive.derive.attributes import concordium
from concordium_derive.derive.codec_gen import from_bytes, to_bytes
from concordium_derive.derive.decorators import contract_state, deserial, schema_type, serial, serialize
from concordium_derive.derive.diagnostics import DeriveError, Diagnostic, Span
from concordium_derive.derive.entry_point import concordium_test, init, receive
from concordium_derive.derive.exports import Export, ExportKind, ExportTable, collect_exports, get_exports

__all__ = [
    'DeriveError',
    'Diagnostic',
    'Export',
    'ExportKind',
    'ExportTable',
    'Span',
    'collect_exports',
    'concordium',
    'concordium_test',
    'contract_state',
    'deserial',
    'from_bytes',
    'get_exports',
    'init',
    'receive',
    'schema_type',
    'serial',
    'serialize',
    'to_bytes',
]
