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
Resolution of a decorated class into a `TypeShape`: its structural form plus one `FieldPlan` per field.

The plan of a field decides how it is encoded, either by delegating to the codec of its type or with an explicit length
prefix chosen by one of the length attributes. Plans are computed once per class and shared by the codec and schema
generators, so both always agree on the wire format.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from enum import IntEnum, unique
from typing import Annotated, Any, TypeAlias, Union, get_args, get_origin, get_type_hints

from concordium_derive.codecs import ContainerKind, OrderPolicy, check_kind_compatible
from concordium_derive.codecs.utils import strip_annotated
from concordium_derive.derive.attributes import Site, contains, field_metas, find_length, validate_site
from concordium_derive.derive.diagnostics import DeriveError, ErrorCollector, Span, report_errors
from concordium_derive.types import SumType

# attribute set on derived classes, holds their resolved shape
SHAPE_ATTR: str = '__concordium_shape__'

MAX_VARIANTS: int = 65536


@dataclass(frozen=True, slots=True)
class Delegate:
    """The field type encodes itself."""


@dataclass(frozen=True, slots=True)
class LengthPrefixed:
    width: int
    kind: ContainerKind
    order_policy: OrderPolicy


Strategy: TypeAlias = Union[Delegate, LengthPrefixed]

DELEGATE = Delegate()


@dataclass(frozen=True, slots=True)
class FieldPlan:
    identifier: str
    # field type with any `Annotated` wrapper removed
    declared_type: Any
    strategy: Strategy
    span: Span = field(compare=False)


@unique
class FieldsForm(enum.Enum):
    NAMED = 'named'
    UNNAMED = 'unnamed'
    NONE = 'none'


@dataclass(frozen=True, slots=True)
class FieldsShape:
    form: FieldsForm
    plans: tuple[FieldPlan, ...] = ()


NO_FIELDS = FieldsShape(FieldsForm.NONE)


@unique
class TagWidth(IntEnum):
    """Size in bytes of the tag written before the fields of an enum variant."""
    U8 = 1
    U16 = 2

    @classmethod
    def for_count(cls, count: int) -> TagWidth:
        """
        >>> TagWidth.for_count(256)
        <TagWidth.U8: 1>
        >>> TagWidth.for_count(257)
        <TagWidth.U16: 2>
        >>> TagWidth.for_count(65537)
        Traceback (most recent call last):
        ...
        ValueError: Too many variants. Maximum 65536 are supported.
        """
        if count <= 256:
            return cls.U8
        elif count <= MAX_VARIANTS:
            return cls.U16
        else:
            raise ValueError(f'Too many variants. Maximum {MAX_VARIANTS} are supported.')


@dataclass(frozen=True, slots=True)
class VariantShape:
    name: str
    # the class instantiated when decoding, or the member itself for `enum.Enum` types
    target: Any
    fields: FieldsShape


@dataclass(frozen=True, slots=True)
class StructShape:
    target: type
    fields: FieldsShape


@dataclass(frozen=True, slots=True)
class EnumShape:
    target: type
    variants: tuple[VariantShape, ...]
    tag_width: TagWidth

    @property
    def is_member_enum(self) -> bool:
        return issubclass(self.target, enum.Enum)


@dataclass(frozen=True, slots=True)
class UnitShape:
    target: type


TypeShape: TypeAlias = Union[StructShape, EnumShape, UnitShape]


def plan_field(identifier: str, annotation: Any, *, span: Span) -> FieldPlan:
    """ Decide how a single field is encoded from the `concordium(...)` markers of its annotation.

    The length attributes are looked up in the order `size_length`, `map_size_length`, `set_size_length`,
    `string_size_length`, the first one present wins.

    >>> from concordium_derive.derive.attributes import concordium
    >>> from concordium_derive.types import U8
    >>> plan = plan_field('owners', Annotated[set[U8], concordium(set_size_length=2)], span=Span('Foo'))
    >>> plan.strategy
    LengthPrefixed(width=2, kind=<ContainerKind.SET: 'set_size_length'>, order_policy=<OrderPolicy.UNIQUE: 'unique'>)
    """
    metadata = get_args(annotation)[1:] if get_origin(annotation) is Annotated else ()
    metas = field_metas(metadata, span=span)
    validate_site(metas, Site.FIELD)
    declared_type = strip_annotated(annotation)

    for kind in ContainerKind:
        width = find_length(metas, kind.attribute)
        if width is None:
            continue
        with report_errors(span.at_attribute(kind.attribute)):
            check_kind_compatible(declared_type, kind)
        if kind in (ContainerKind.MAP, ContainerKind.SET):
            ordered = contains(metas, 'ensure_ordered')
            order_policy = OrderPolicy.STRICTLY_INCREASING if ordered else OrderPolicy.UNIQUE
        else:
            order_policy = OrderPolicy.UNCHECKED
        return FieldPlan(identifier, declared_type, LengthPrefixed(width, kind, order_policy), span)

    return FieldPlan(identifier, declared_type, DELEGATE, span)


def _is_namedtuple(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, '_fields')


def _is_record(cls: Any) -> bool:
    return isinstance(cls, type) and (dataclasses.is_dataclass(cls) or _is_namedtuple(cls))


def _resolve_fields(cls: type, *, span: Span) -> FieldsShape:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except Exception as e:
        raise DeriveError(f'cannot resolve the field annotations: {e}', span) from e

    errors = ErrorCollector()
    if dataclasses.is_dataclass(cls):
        form = FieldsForm.NAMED
        names = []
        for dataclass_field in dataclasses.fields(cls):
            if not dataclass_field.init:
                errors.push(DeriveError('fields with init=False cannot be decoded', span.at_field(dataclass_field.name)))
            names.append(dataclass_field.name)
        if not names:
            return NO_FIELDS
    else:
        form = FieldsForm.UNNAMED
        names = list(cls._fields)  # type: ignore[attr-defined]

    plans = []
    for name in names:
        with errors.collect():
            plans.append(plan_field(name, hints[name], span=span.at_field(name)))
    errors.raise_if_any()
    return FieldsShape(form, tuple(plans))


def _tag_width(count: int, span: Span) -> TagWidth:
    with report_errors(span):
        return TagWidth.for_count(count)


def resolve_shape(cls: type) -> TypeShape:
    """ Resolve the shape of a class.

    - an `enum.Enum` subclass is an enum with one unit variant per member;
    - a `SumType` subclass is an enum whose variants are the dataclasses and NamedTuples nested in its body;
    - a dataclass is a struct with named fields, or a unit when it has no fields;
    - a NamedTuple is a struct with unnamed fields.

    Every problem found in the fields is reported in a single `DeriveError`.
    """
    span = Span(getattr(cls, '__qualname__', repr(cls)))

    if not isinstance(cls, type):
        raise DeriveError('only classes can be derived', span)

    if issubclass(cls, enum.Enum):
        members = list(cls)
        tag_width = _tag_width(len(members), span)
        return EnumShape(cls, tuple(VariantShape(member.name, member, NO_FIELDS) for member in members), tag_width)

    if issubclass(cls, SumType):
        candidates = [value for value in cls.__dict__.values() if _is_record(value)]
        tag_width = _tag_width(len(candidates), span)
        errors = ErrorCollector()
        variants = []
        for variant in candidates:
            with errors.collect():
                fields = _resolve_fields(variant, span=Span(f'{span.item}.{variant.__name__}'))
                variants.append(VariantShape(variant.__name__, variant, fields))
        errors.raise_if_any()
        return EnumShape(cls, tuple(variants), tag_width)

    if dataclasses.is_dataclass(cls):
        fields = _resolve_fields(cls, span=span)
        if fields.form is FieldsForm.NONE:
            return UnitShape(cls)
        return StructShape(cls, fields)

    if _is_namedtuple(cls):
        return StructShape(cls, _resolve_fields(cls, span=span))

    raise DeriveError(f'{span.item} must be a dataclass, a NamedTuple, a SumType or an enum.Enum subclass', span)


def get_shape(cls: type) -> TypeShape:
    """ The shape recorded on a class by a previous decorator, resolved now if there is none."""
    shape = cls.__dict__.get(SHAPE_ATTR)
    if shape is None:
        shape = resolve_shape(cls)
    return shape
