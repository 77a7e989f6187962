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

from concordium_derive.derive.diagnostics import ErrorCollector, report_errors
from concordium_derive.derive.plans import (
    EnumShape,
    FieldPlan,
    FieldsForm,
    FieldsShape,
    LengthPrefixed,
    StructShape,
    TypeShape,
    UnitShape,
)
from concordium_derive.schema import (
    EnumType,
    Fields,
    NamedFields,
    NoFields,
    SizeLength,
    StructType,
    Type,
    UnnamedFields,
    schema_of,
)


def field_schema(plan: FieldPlan) -> Type:
    """ Schema of a field: the schema of its type, with the width of its length prefix when it has one."""
    with report_errors(plan.span):
        schema = schema_of(plan.declared_type)
    if isinstance(plan.strategy, LengthPrefixed):
        schema = schema.set_size_length(SizeLength.from_width(plan.strategy.width))
    return schema


def _fields_schema(fields: FieldsShape, errors: ErrorCollector) -> Fields:
    schemas = []
    for plan in fields.plans:
        with errors.collect():
            schemas.append((plan.identifier, field_schema(plan)))
    if fields.form is FieldsForm.NAMED:
        return NamedFields(tuple(schemas))
    if fields.form is FieldsForm.UNNAMED:
        return UnnamedFields(tuple(schema for _, schema in schemas))
    return NoFields()


def build_schema(shape: TypeShape) -> Type:
    """ The schema of a resolved shape, built from the same field plans as its codec.

    >>> from dataclasses import dataclass
    >>> from typing import Annotated
    >>> from concordium_derive.derive.attributes import concordium
    >>> from concordium_derive.derive.plans import resolve_shape
    >>> from concordium_derive.types import U8
    >>> @dataclass
    ... class Entry:
    ...     tags: Annotated[list[U8], concordium(size_length=1)]
    >>> build_schema(resolve_shape(Entry))
    StructType(fields=NamedFields(fields=(('tags', ListType(size_length=<SizeLength.U8: 0>, \
item=PrimitiveType(tag=<TypeTag.U8: 2>))),)))
    """
    errors = ErrorCollector()
    schema: Type
    match shape:
        case StructShape(fields=fields):
            schema = StructType(_fields_schema(fields, errors))
        case UnitShape():
            schema = StructType(NoFields())
        case EnumShape(variants=variants):
            schema = EnumType(tuple((variant.name, _fields_schema(variant.fields, errors)) for variant in variants))
        case _:
            raise TypeError(f'unknown shape: {shape!r}')
    errors.raise_if_any()
    return schema
