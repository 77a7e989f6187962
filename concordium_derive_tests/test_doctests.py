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

import doctest
import importlib

import pytest

MODULES_WITH_EXAMPLES = [
    'concordium_derive.codecs',
    'concordium_derive.codecs.length_prefixed_codec',
    'concordium_derive.codecs.utils',
    'concordium_derive.derive.attributes',
    'concordium_derive.derive.diagnostics',
    'concordium_derive.derive.entry_point',
    'concordium_derive.derive.plans',
    'concordium_derive.derive.schema_gen',
    'concordium_derive.runtime.state',
    'concordium_derive.schema.encoding',
    'concordium_derive.schema.type_schemas',
    'concordium_derive.schema.types',
    'concordium_derive.serialization.compound_encoding.collection',
    'concordium_derive.serialization.compound_encoding.mapping',
    'concordium_derive.serialization.compound_encoding.optional',
    'concordium_derive.serialization.compound_encoding.tuple',
    'concordium_derive.serialization.encoding.bool',
    'concordium_derive.serialization.encoding.bytes',
    'concordium_derive.serialization.encoding.int',
    'concordium_derive.serialization.encoding.length',
    'concordium_derive.serialization.encoding.utf8',
    'concordium_derive.utils.dict',
]


@pytest.mark.parametrize('name', MODULES_WITH_EXAMPLES)
def test_docstring_examples(name: str) -> None:
    module = importlib.import_module(name)
    failed, attempted = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
    assert attempted > 0
    assert failed == 0
