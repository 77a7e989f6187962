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

r"""
Binary form of schema descriptors, layout version 0.

Every node starts with its tag byte (see `TypeTag`), followed by:

- nothing, for primitive types
- `Pair`: the two item schemas
- `List`/`Set`: the size length byte and the item schema
- `Map`: the size length byte, the key schema and the value schema
- `Array`: the length as u32 and the item schema
- `String`: the size length byte
- `Struct`: the fields
- `Enum`: the number of variants as u32 and, for each variant, its name and its fields

Fields start with their own tag byte (see `FieldsTag`), followed by the number of fields as u32 and each field (its name
first when named). Names are utf-8 prefixed with their byte length as u32. All integers are little-endian.

>>> from concordium_derive.schema.types import *
>>> schema = StructType(NamedFields((('owner', ACCOUNT_ADDRESS_TYPE), ('counter', U8_TYPE))))
>>> schema_to_bytes(schema).hex()
'140002000000050000006f776e65720b07000000636f756e74657202'
>>> schema_from_bytes(bytes.fromhex('140002000000050000006f776e65720b07000000636f756e74657202')) == schema
True
"""

from concordium_derive.schema.types import (
    PRIMITIVE_TAGS,
    ArrayType,
    EnumType,
    Fields,
    FieldsTag,
    ListType,
    MapType,
    NamedFields,
    NoFields,
    PairType,
    PrimitiveType,
    SetType,
    SizeLength,
    StringType,
    StructType,
    Type,
    TypeTag,
    UnnamedFields,
)
from concordium_derive.serialization import BadDataError, Deserializer, Serializer
from concordium_derive.serialization.compound_encoding.collection import decode_collection, encode_collection
from concordium_derive.serialization.encoding.int import decode_int, encode_int
from concordium_derive.serialization.encoding.utf8 import decode_utf8, encode_utf8


def encode_schema_type(serializer: Serializer, schema: Type) -> None:
    match schema:
        case PrimitiveType(tag):
            serializer.write_byte(tag)
        case PairType(first, second):
            serializer.write_byte(TypeTag.PAIR)
            encode_schema_type(serializer, first)
            encode_schema_type(serializer, second)
        case ListType(size_length, item):
            serializer.write_byte(TypeTag.LIST)
            serializer.write_byte(size_length)
            encode_schema_type(serializer, item)
        case SetType(size_length, item):
            serializer.write_byte(TypeTag.SET)
            serializer.write_byte(size_length)
            encode_schema_type(serializer, item)
        case MapType(size_length, key, value):
            serializer.write_byte(TypeTag.MAP)
            serializer.write_byte(size_length)
            encode_schema_type(serializer, key)
            encode_schema_type(serializer, value)
        case ArrayType(length, item):
            serializer.write_byte(TypeTag.ARRAY)
            encode_int(serializer, length, length=4, signed=False)
            encode_schema_type(serializer, item)
        case StringType(size_length):
            serializer.write_byte(TypeTag.STRING)
            serializer.write_byte(size_length)
        case StructType(fields):
            serializer.write_byte(TypeTag.STRUCT)
            encode_schema_fields(serializer, fields)
        case EnumType(variants):
            serializer.write_byte(TypeTag.ENUM)
            encode_collection(serializer, variants, _encode_variant)
        case _:
            raise TypeError(f'not a schema type: {schema!r}')


def _encode_variant(serializer: Serializer, variant: tuple[str, Fields]) -> None:
    name, fields = variant
    encode_utf8(serializer, name)
    encode_schema_fields(serializer, fields)


def _encode_named_field(serializer: Serializer, field: tuple[str, Type]) -> None:
    name, schema = field
    encode_utf8(serializer, name)
    encode_schema_type(serializer, schema)


def encode_schema_fields(serializer: Serializer, fields: Fields) -> None:
    match fields:
        case NamedFields(named):
            serializer.write_byte(FieldsTag.NAMED)
            encode_collection(serializer, named, _encode_named_field)
        case UnnamedFields(unnamed):
            serializer.write_byte(FieldsTag.UNNAMED)
            encode_collection(serializer, unnamed, encode_schema_type)
        case NoFields():
            serializer.write_byte(FieldsTag.NONE)
        case _:
            raise TypeError(f'not a schema fields value: {fields!r}')


def _decode_size_length(deserializer: Deserializer) -> SizeLength:
    raw = deserializer.read_byte()
    try:
        return SizeLength(raw)
    except ValueError:
        raise BadDataError(f'invalid size length: {raw}') from None


def decode_schema_type(deserializer: Deserializer) -> Type:
    raw_tag = deserializer.read_byte()
    try:
        tag = TypeTag(raw_tag)
    except ValueError:
        raise BadDataError(f'invalid schema type tag: {raw_tag}') from None

    if tag in PRIMITIVE_TAGS:
        return PrimitiveType(tag)
    match tag:
        case TypeTag.PAIR:
            first = decode_schema_type(deserializer)
            return PairType(first, decode_schema_type(deserializer))
        case TypeTag.LIST:
            size_length = _decode_size_length(deserializer)
            return ListType(size_length, decode_schema_type(deserializer))
        case TypeTag.SET:
            size_length = _decode_size_length(deserializer)
            return SetType(size_length, decode_schema_type(deserializer))
        case TypeTag.MAP:
            size_length = _decode_size_length(deserializer)
            key = decode_schema_type(deserializer)
            return MapType(size_length, key, decode_schema_type(deserializer))
        case TypeTag.ARRAY:
            length = decode_int(deserializer, length=4, signed=False)
            return ArrayType(length, decode_schema_type(deserializer))
        case TypeTag.STRING:
            return StringType(_decode_size_length(deserializer))
        case TypeTag.STRUCT:
            return StructType(decode_schema_fields(deserializer))
        case TypeTag.ENUM:
            return EnumType(decode_collection(deserializer, _decode_variant, tuple))
    raise AssertionError(f'unhandled schema type tag: {tag!r}')


def _decode_variant(deserializer: Deserializer) -> tuple[str, Fields]:
    name = decode_utf8(deserializer)
    return name, decode_schema_fields(deserializer)


def _decode_named_field(deserializer: Deserializer) -> tuple[str, Type]:
    name = decode_utf8(deserializer)
    return name, decode_schema_type(deserializer)


def decode_schema_fields(deserializer: Deserializer) -> Fields:
    raw_tag = deserializer.read_byte()
    match raw_tag:
        case FieldsTag.NAMED:
            return NamedFields(decode_collection(deserializer, _decode_named_field, tuple))
        case FieldsTag.UNNAMED:
            return UnnamedFields(decode_collection(deserializer, decode_schema_type, tuple))
        case FieldsTag.NONE:
            return NoFields()
    raise BadDataError(f'invalid schema fields tag: {raw_tag}')


def schema_to_bytes(schema: Type) -> bytes:
    serializer = Serializer.build_bytes_serializer()
    encode_schema_type(serializer, schema)
    return bytes(serializer.finalize())


def schema_from_bytes(data: bytes) -> Type:
    deserializer = Deserializer.build_bytes_deserializer(data)
    schema = decode_schema_type(deserializer)
    deserializer.finalize()
    return schema
