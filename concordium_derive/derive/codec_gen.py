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
Codecs generated from a `TypeShape`.

A struct is its fields in declaration order, with no structural tag. An enum is a tag, the zero-based declaration index
of the variant as a little-endian unsigned integer of 1 byte (up to 256 variants) or 2 bytes (up to 65536 variants),
followed by the fields of that variant. A unit encodes to nothing.

A generated codec may only implement one direction (see `@serial` and `@deserial`), using it in the other direction
raises an `UnsupportedTypeError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional

from structlog import get_logger
from typing_extensions import override

from concordium_derive.codecs import DEFAULT_TYPE_MAP, Codec, make_codec_for_type, make_length_prefixed_codec
from concordium_derive.codecs.utils import pretty_type
from concordium_derive.derive.diagnostics import DeriveError, ErrorCollector, report_errors
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
from concordium_derive.serialization import BadDataError, Deserializer, Serializer, UnsupportedTypeError
from concordium_derive.serialization.encoding.int import decode_int, encode_int

logger = get_logger()


def make_field_codec(plan: FieldPlan, *, type_map: Codec.TypeMap = DEFAULT_TYPE_MAP) -> Codec:
    """ The codec of a single field according to its plan."""
    strategy = plan.strategy
    if isinstance(strategy, LengthPrefixed):
        return make_length_prefixed_codec(
            plan.declared_type,
            kind=strategy.kind,
            width=strategy.width,
            order_policy=strategy.order_policy,
            type_map=type_map,
        )
    return Codec.from_type(plan.declared_type, type_map=type_map)


class FieldsCodec:
    """ Encodes the fields of a struct or of an enum variant, in declaration order.

    Named fields are read with `getattr` and given back as keyword arguments, unnamed fields are read by position and
    given back as positional arguments.
    """

    __slots__ = ('_form', '_names', '_codecs')

    def __init__(self, form: FieldsForm, fields: Iterable[tuple[str, Codec]]) -> None:
        self._form = form
        pairs = tuple(fields)
        self._names = tuple(name for name, _ in pairs)
        self._codecs = tuple(codec for _, codec in pairs)

    @property
    def codecs(self) -> tuple[Codec, ...]:
        return self._codecs

    def _values(self, value: Any) -> Iterable[Any]:
        if self._form is FieldsForm.NAMED:
            return (getattr(value, name) for name in self._names)
        if self._form is FieldsForm.UNNAMED:
            if len(value) != len(self._codecs):
                raise TypeError(f'expected {len(self._codecs)} fields, got {len(value)}')
            return value
        return ()

    def check(self, value: Any, *, deep: bool) -> None:
        if deep:
            for item, codec in zip(self._values(value), self._codecs):
                codec._check_value(item, deep=True)

    def encode(self, serializer: Serializer, value: Any) -> None:
        for item, codec in zip(self._values(value), self._codecs):
            codec.serialize(serializer, item)

    def decode(self, deserializer: Deserializer, target: type) -> Any:
        if self._form is FieldsForm.NAMED:
            return target(**{name: codec.deserialize(deserializer) for name, codec in zip(self._names, self._codecs)})
        if self._form is FieldsForm.UNNAMED:
            return target(*[codec.deserialize(deserializer) for codec in self._codecs])
        return target()


class DerivedCodec(Codec[Any]):
    """ Base class of the generated codecs, it carries which directions were derived."""

    __slots__ = ('_is_hashable', '_target', '_serial', '_deserial')

    def __init__(self, target: type, *, serial: bool, deserial: bool) -> None:
        self._target = target
        self._serial = serial
        self._deserial = deserial
        self._is_hashable = getattr(target, '__hash__', None) is not None

    @property
    def target(self) -> type:
        return self._target

    @override
    def can_serialize(self) -> bool:
        return self._serial and super().can_serialize()

    @override
    def can_deserialize(self) -> bool:
        return self._deserial and super().can_deserialize()

    def _ensure_serial(self) -> None:
        if not self._serial:
            raise UnsupportedTypeError(f'{self._target.__qualname__} does not derive serialization')

    def _ensure_deserial(self) -> None:
        if not self._deserial:
            raise UnsupportedTypeError(f'{self._target.__qualname__} does not derive deserialization')

    def __repr__(self) -> str:
        return f'<{type(self).__name__} for {self._target.__qualname__}>'


class StructCodec(DerivedCodec):
    __slots__ = ('_fields',)

    def __init__(self, target: type, fields: FieldsCodec, *, serial: bool, deserial: bool) -> None:
        super().__init__(target, serial=serial, deserial=deserial)
        self._fields = fields

    @override
    def _inner_codecs(self) -> Iterable[Codec]:
        return self._fields.codecs

    @override
    def _check_value(self, value: Any, /, *, deep: bool) -> None:
        if not isinstance(value, self._target):
            raise TypeError(f'expected {self._target.__qualname__}, got {type(value).__qualname__}')
        self._fields.check(value, deep=deep)

    @override
    def _serialize(self, serializer: Serializer, value: Any, /) -> None:
        self._ensure_serial()
        self._fields.encode(serializer, value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Any:
        self._ensure_deserial()
        return self._fields.decode(deserializer, self._target)


class UnitCodec(DerivedCodec):
    """ A class without fields, nothing is written."""

    __slots__ = ()

    @override
    def _check_value(self, value: Any, /, *, deep: bool) -> None:
        if not isinstance(value, self._target):
            raise TypeError(f'expected {self._target.__qualname__}, got {type(value).__qualname__}')

    @override
    def _serialize(self, serializer: Serializer, value: Any, /) -> None:
        self._ensure_serial()

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Any:
        self._ensure_deserial()
        return self._target()


class EnumCodec(DerivedCodec):
    """ A tag followed by the fields of the variant it selects.

    Variants of a `SumType` are found by the class of the value, members of an `enum.Enum` by the value itself.
    """

    __slots__ = ('_tag_width', '_variants', '_index_of', '_by_member')

    def __init__(self, target: type, tag_width: int, variants: Iterable[tuple[Any, FieldsCodec]], *,
                 by_member: bool, serial: bool, deserial: bool) -> None:
        super().__init__(target, serial=serial, deserial=deserial)
        self._tag_width = tag_width
        self._variants = tuple(variants)
        self._index_of = {variant: index for index, (variant, _) in enumerate(self._variants)}
        self._by_member = by_member
        if not by_member:
            self._is_hashable = all(getattr(variant, '__hash__', None) is not None for variant, _ in self._variants)

    @property
    def tag_width(self) -> int:
        return self._tag_width

    @override
    def _inner_codecs(self) -> Iterable[Codec]:
        for _, fields in self._variants:
            yield from fields.codecs

    def _key(self, value: Any) -> Any:
        return value if self._by_member else type(value)

    @override
    def _check_value(self, value: Any, /, *, deep: bool) -> None:
        index = self._index_of.get(self._key(value))
        if index is None:
            raise TypeError(f'expected a variant of {self._target.__qualname__}, got {type(value).__qualname__}')
        _, fields = self._variants[index]
        fields.check(value, deep=deep)

    @override
    def _serialize(self, serializer: Serializer, value: Any, /) -> None:
        self._ensure_serial()
        index = self._index_of[self._key(value)]
        encode_int(serializer, index, length=self._tag_width, signed=False)
        _, fields = self._variants[index]
        fields.encode(serializer, value)

    @override
    def _deserialize(self, deserializer: Deserializer, /) -> Any:
        self._ensure_deserial()
        tag = decode_int(deserializer, length=self._tag_width, signed=False)
        if tag >= len(self._variants):
            raise BadDataError(f'invalid tag {tag} for {self._target.__qualname__}')
        variant, fields = self._variants[tag]
        if self._by_member:
            return variant
        return fields.decode(deserializer, variant)


def _make_fields_codec(fields: FieldsShape, errors: ErrorCollector, *, serial: bool, deserial: bool,
                       type_map: Codec.TypeMap) -> FieldsCodec:
    pairs = []
    for plan in fields.plans:
        with errors.collect(), report_errors(plan.span):
            codec = make_field_codec(plan, type_map=type_map)
            if serial and not codec.can_serialize():
                raise DeriveError(f'{pretty_type(plan.declared_type)} cannot be serialized', plan.span)
            if deserial and not codec.can_deserialize():
                raise DeriveError(f'{pretty_type(plan.declared_type)} cannot be deserialized', plan.span)
            pairs.append((plan.identifier, codec))
    return FieldsCodec(fields.form, pairs)


def build_codec(shape: TypeShape, *, serial: bool = True, deserial: bool = True,
                type_map: Codec.TypeMap = DEFAULT_TYPE_MAP) -> DerivedCodec:
    """ Generate the codec of a resolved shape, all field errors are reported together."""
    errors = ErrorCollector()
    codec: DerivedCodec
    match shape:
        case StructShape(target=target, fields=fields):
            fields_codec = _make_fields_codec(fields, errors, serial=serial, deserial=deserial, type_map=type_map)
            codec = StructCodec(target, fields_codec, serial=serial, deserial=deserial)
        case UnitShape(target=target):
            codec = UnitCodec(target, serial=serial, deserial=deserial)
        case EnumShape(target=target, variants=variants, tag_width=tag_width):
            variant_codecs = [
                (variant.target,
                 _make_fields_codec(variant.fields, errors, serial=serial, deserial=deserial, type_map=type_map))
                for variant in variants
            ]
            codec = EnumCodec(target, int(tag_width), variant_codecs, by_member=shape.is_member_enum, serial=serial,
                              deserial=deserial)
        case _:
            raise TypeError(f'unknown shape: {shape!r}')
    errors.raise_if_any()
    logger.debug('codec derived', type=shape.target.__qualname__, serial=serial, deserial=deserial)
    return codec


def _codec_for(type_: Optional[Any], value: Any) -> Codec:
    if type_ is None:
        type_ = type(value)
    return make_codec_for_type(type_)


def to_bytes(value: Any, /, type_: Optional[Any] = None) -> bytes:
    """ Encode a value with the codec of its class, or of `type_` when given.

    The enclosing `SumType` of a variant must be given as `type_`, a variant class has no codec of its own.
    """
    return _codec_for(type_, value).to_bytes(value)


def from_bytes(type_: Any, data: bytes, /) -> Any:
    """ Decode a value of the given type, every byte must be consumed."""
    return make_codec_for_type(type_).from_bytes(data)
