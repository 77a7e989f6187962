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

import enum
from dataclasses import dataclass, field
from typing import Annotated, NamedTuple

import pytest

from concordium_derive.codecs import ContainerKind, OrderPolicy
from concordium_derive.derive.attributes import concordium
from concordium_derive.derive.diagnostics import DeriveError, Span
from concordium_derive.derive.plans import (
    DELEGATE,
    EnumShape,
    FieldsForm,
    LengthPrefixed,
    StructShape,
    TagWidth,
    UnitShape,
    plan_field,
    resolve_shape,
)
from concordium_derive.types import U8, U32, SumType

SPAN = Span('Foo', field='bar')


@dataclass
class Named:
    a: U8
    b: Annotated[list[U8], concordium(size_length=1)]


class Unnamed(NamedTuple):
    a: U8
    b: Annotated[str, concordium('string_size_length = 2')]


@dataclass
class Empty:
    pass


class Color(enum.Enum):
    RED = 'red'
    GREEN = 'green'


class Shape(SumType):
    @dataclass
    class Circle:
        radius: U32

    class Rectangle(NamedTuple):
        width: U32
        height: U32

    @dataclass
    class Point:
        pass

    NOT_A_VARIANT = 1


def test_plan_delegates_without_attributes() -> None:
    plan = plan_field('a', U8, span=SPAN)
    assert plan.strategy == DELEGATE
    assert plan.declared_type is U8


def test_plan_strips_unrelated_metadata() -> None:
    plan = plan_field('a', Annotated[U8, 'doc'], span=SPAN)
    assert plan.strategy == DELEGATE
    assert plan.declared_type is U8


@pytest.mark.parametrize(['annotation', 'expected'], [
    (Annotated[list[U8], concordium(size_length=2)],
     LengthPrefixed(2, ContainerKind.SEQUENCE, OrderPolicy.UNCHECKED)),
    (Annotated[bytes, concordium(size_length=8)],
     LengthPrefixed(8, ContainerKind.SEQUENCE, OrderPolicy.UNCHECKED)),
    (Annotated[dict[U8, U8], concordium(map_size_length=1)],
     LengthPrefixed(1, ContainerKind.MAP, OrderPolicy.UNIQUE)),
    (Annotated[dict[U8, U8], concordium('ensure_ordered', map_size_length=1)],
     LengthPrefixed(1, ContainerKind.MAP, OrderPolicy.STRICTLY_INCREASING)),
    (Annotated[set[U8], concordium(set_size_length=4, ensure_ordered=True)],
     LengthPrefixed(4, ContainerKind.SET, OrderPolicy.STRICTLY_INCREASING)),
    (Annotated[str, concordium(string_size_length=1)],
     LengthPrefixed(1, ContainerKind.UTF8_STRING, OrderPolicy.UNCHECKED)),
])
def test_plan_length_attributes(annotation: object, expected: LengthPrefixed) -> None:
    assert plan_field('a', annotation, span=SPAN).strategy == expected


def test_first_length_attribute_wins() -> None:
    annotation = Annotated[list[U8], concordium(size_length=1, string_size_length=2)]
    assert plan_field('a', annotation, span=SPAN).strategy.width == 1  # type: ignore[union-attr]


def test_plan_rejects_incompatible_attribute() -> None:
    with pytest.raises(DeriveError) as exc_info:
        plan_field('a', Annotated[list[U8], concordium(map_size_length=1)], span=SPAN)
    diagnostic, = exc_info.value.diagnostics
    assert diagnostic.span.attribute == 'map_size_length'
    assert diagnostic.message.startswith('`map_size_length` requires a dict[K, V]')


def test_plan_rejects_unknown_attribute() -> None:
    with pytest.raises(DeriveError, match="'size' is not supported as a concordium field attribute"):
        plan_field('a', Annotated[list[U8], concordium(size=1)], span=SPAN)


def test_named_struct() -> None:
    shape = resolve_shape(Named)
    assert isinstance(shape, StructShape)
    assert shape.fields.form is FieldsForm.NAMED
    assert [plan.identifier for plan in shape.fields.plans] == ['a', 'b']
    assert shape.fields.plans[1].strategy == LengthPrefixed(1, ContainerKind.SEQUENCE, OrderPolicy.UNCHECKED)


def test_unnamed_struct() -> None:
    shape = resolve_shape(Unnamed)
    assert isinstance(shape, StructShape)
    assert shape.fields.form is FieldsForm.UNNAMED
    assert shape.fields.plans[1].strategy.width == 2  # type: ignore[union-attr]


def test_dataclass_without_fields_is_unit() -> None:
    assert resolve_shape(Empty) == UnitShape(Empty)


def test_enum_members_are_unit_variants() -> None:
    shape = resolve_shape(Color)
    assert isinstance(shape, EnumShape)
    assert shape.is_member_enum
    assert [variant.name for variant in shape.variants] == ['RED', 'GREEN']
    assert [variant.target for variant in shape.variants] == [Color.RED, Color.GREEN]
    assert all(variant.fields.form is FieldsForm.NONE for variant in shape.variants)


def test_sum_type_variants_in_declaration_order() -> None:
    shape = resolve_shape(Shape)
    assert isinstance(shape, EnumShape)
    assert not shape.is_member_enum
    assert shape.tag_width is TagWidth.U8
    assert [variant.name for variant in shape.variants] == ['Circle', 'Rectangle', 'Point']
    assert [variant.fields.form for variant in shape.variants] == [
        FieldsForm.NAMED,
        FieldsForm.UNNAMED,
        FieldsForm.NONE,
    ]


def test_errors_of_every_field_are_reported_together() -> None:
    @dataclass
    class Broken:
        a: Annotated[U8, concordium(size_length=1)]
        b: Annotated[list[U8], concordium(size_length=3)]
        c: U8

    with pytest.raises(DeriveError) as exc_info:
        resolve_shape(Broken)
    assert [d.span.field for d in exc_info.value.diagnostics] == ['a', 'b']


def test_init_false_field() -> None:
    @dataclass
    class Computed:
        a: U8
        b: U8 = field(init=False, default=U8(0))

    with pytest.raises(DeriveError, match='init=False'):
        resolve_shape(Computed)


def test_unsupported_class() -> None:
    class Plain:
        pass

    with pytest.raises(DeriveError, match='must be a dataclass'):
        resolve_shape(Plain)


def test_unresolved_annotation() -> None:
    @dataclass
    class Forward:
        a: 'Missing'  # type: ignore[name-defined]  # noqa: F821

    with pytest.raises(DeriveError, match='cannot resolve the field annotations'):
        resolve_shape(Forward)


def _many_variants(count: int) -> type:
    namespace = {f'V{i}': type(f'V{i}', (Empty,), {}) for i in range(count)}
    return type('Many', (SumType,), namespace)


def test_tag_width_grows_past_256_variants() -> None:
    assert resolve_shape(_many_variants(256)).tag_width is TagWidth.U8  # type: ignore[union-attr]
    assert resolve_shape(_many_variants(257)).tag_width is TagWidth.U16  # type: ignore[union-attr]


def test_too_many_variants() -> None:
    with pytest.raises(DeriveError, match='Too many variants. Maximum 65536 are supported.'):
        resolve_shape(_many_variants(65537))


def test_enum_with_257_members() -> None:
    Big = enum.Enum('Big', [f'M{i}' for i in range(257)])  # type: ignore[misc]
    assert resolve_shape(Big).tag_width is TagWidth.U16  # type: ignore[union-attr]
