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

import pytest

from concordium_derive.derive.attributes import (
    MetaList,
    MetaNameValue,
    MetaPath,
    Site,
    collect_metas,
    concordium,
    contains,
    field_metas,
    find_length,
    find_string_value,
    find_value,
    metas_from_kwargs,
    parse_meta_list,
    validate_site,
)
from concordium_derive.derive.diagnostics import DeriveError, Span

SPAN = Span('Foo', field='bar')


def test_parse_all_forms() -> None:
    metas = parse_meta_list('a, b = "x", c = 1_000, d = true, e(1, "two", three)', span=SPAN)
    assert [type(m) for m in metas] == [MetaPath, MetaNameValue, MetaNameValue, MetaNameValue, MetaList]
    assert [m.name for m in metas] == ['a', 'b', 'c', 'd', 'e']
    assert metas[1].value == 'x'
    assert metas[2].value == 1000
    assert metas[3].value is True
    assert metas[4].args == (1, 'two', 'three')


def test_parse_single_quoted_string_with_escape() -> None:
    meta, = parse_meta_list("contract = 'it\\'s'", span=SPAN)
    assert meta.value == "it's"


def test_parse_records_columns() -> None:
    _a, b = parse_meta_list('a,   b', span=SPAN)
    assert b.span.column == 5
    assert b.span.attribute == 'b'


def test_parse_empty_text() -> None:
    assert parse_meta_list('   ', span=SPAN) == []


def test_parse_trailing_comma() -> None:
    assert [m.name for m in parse_meta_list('a,', span=SPAN)] == ['a']


@pytest.mark.parametrize(['text', 'message'], [
    ('a b', 'expected `,` between attributes'),
    ('= 1', 'expected an attribute name'),
    ('a = ,', 'expected a literal value after `a =`'),
    ('a(1,', 'unclosed `(`'),
    ('a(1 2)', 'expected `,` or `)`'),
    ('a; b', "unexpected character ';'"),
])
def test_parse_errors(text: str, message: str) -> None:
    with pytest.raises(DeriveError) as exc_info:
        parse_meta_list(text, span=SPAN)
    diagnostic, = exc_info.value.diagnostics
    assert diagnostic.message == message
    assert diagnostic.span.item == 'Foo'
    assert diagnostic.span.column is not None


def test_kwargs_flags_and_values() -> None:
    metas = metas_from_kwargs({'payable': True, 'enable_logger': False, 'parameter': None, 'contract': 'c'}, span=SPAN)
    assert metas == [
        MetaPath('payable', SPAN.at_attribute('payable')),
        MetaNameValue('contract', 'c', SPAN.at_attribute('contract')),
    ]


def test_collect_metas_numbers_occurrences() -> None:
    metas = collect_metas(['a, b', 'a'], {'a': 1}, span=SPAN)
    assert [(m.name, m.span.index) for m in metas] == [('a', 0), ('b', 0), ('a', 1), ('a', 2)]


def test_validate_field_site_reports_every_offender() -> None:
    metas = collect_metas(['size_length = 1, foo, bar'], {}, span=SPAN)
    with pytest.raises(DeriveError) as exc_info:
        validate_site(metas, Site.FIELD)
    assert [d.message for d in exc_info.value.diagnostics] == [
        "The attribute 'foo' is not supported as a concordium field attribute.",
        "The attribute 'bar' is not supported as a concordium field attribute.",
    ]


def test_validate_entry_point_site() -> None:
    metas = collect_metas(['contract = "c", name = "f"'], {}, span=Span('init_c'))
    validate_site(metas, Site.RECEIVE)
    with pytest.raises(DeriveError, match="The attribute 'name' is not supported by @init."):
        validate_site(metas, Site.INIT)


def test_duplicate_attribute_lists_every_occurrence() -> None:
    metas = collect_metas(['contract = "a"', 'contract = "b"'], {}, span=Span('init'))
    with pytest.raises(DeriveError) as exc_info:
        find_string_value(metas, 'contract')
    diagnostics = exc_info.value.diagnostics
    assert [d.message for d in diagnostics] == ["Attribute 'contract' should only be specified once."] * 2
    assert [d.span.index for d in diagnostics] == [0, 1]


def test_find_value() -> None:
    metas = collect_metas(['a = 1, b'], {}, span=SPAN)
    assert find_value(metas, 'a') == 1
    assert find_value(metas, 'missing') is None
    with pytest.raises(DeriveError, match='must have a literal value'):
        find_value(metas, 'b')


def test_find_string_value() -> None:
    metas = collect_metas(['a = 1, b, c = "x"'], {}, span=SPAN)
    assert find_string_value(metas, 'c') == 'x'
    with pytest.raises(DeriveError, match='must be a string literal'):
        find_string_value(metas, 'a')
    with pytest.raises(DeriveError, match='must have a string literal value'):
        find_string_value(metas, 'b')


def test_contains() -> None:
    metas = collect_metas(['payable, low_level = true'], {}, span=SPAN)
    assert contains(metas, 'payable')
    assert not contains(metas, 'enable_logger')
    with pytest.raises(DeriveError, match='is a flag and takes no value'):
        contains(metas, 'low_level')


@pytest.mark.parametrize('width', [1, 2, 4, 8])
def test_find_length_valid(width: int) -> None:
    metas = collect_metas([], {'size_length': width}, span=SPAN)
    assert find_length(metas, 'size_length') == width


@pytest.mark.parametrize(['value', 'message'], [
    (3, 'Length info must be either 1, 2, 4, or 8.'),
    (16, 'Length info must be either 1, 2, 4, or 8.'),
    ('"1"', 'Length attribute value must be an integer.'),
    ('true', 'Length attribute value must be an integer.'),
])
def test_find_length_invalid(value: object, message: str) -> None:
    metas = parse_meta_list(f'size_length = {value}', span=SPAN)
    with pytest.raises(DeriveError) as exc_info:
        find_length(metas, 'size_length')
    assert exc_info.value.diagnostics[0].message == message


def test_field_metas_reads_markers_only() -> None:
    metadata = ('unrelated', concordium('ensure_ordered'), concordium(map_size_length=2))
    metas = field_metas(metadata, span=SPAN)
    assert [m.name for m in metas] == ['ensure_ordered', 'map_size_length']
    assert find_length(metas, 'map_size_length') == 2


def test_concordium_requires_string_items() -> None:
    with pytest.raises(TypeError):
        concordium(1)  # type: ignore[arg-type]
