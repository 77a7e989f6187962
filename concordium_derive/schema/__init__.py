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

from concordium_derive.schema.encoding import (
    decode_schema_type,
    encode_schema_type,
    schema_from_bytes,
    schema_to_bytes,
)
from concordium_derive.schema.type_schemas import SCHEMA_ATTR, get_derived_schema, schema_of
from concordium_derive.schema.types import (
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

__all__ = [
    'SCHEMA_ATTR',
    'ArrayType',
    'EnumType',
    'Fields',
    'FieldsTag',
    'ListType',
    'MapType',
    'NamedFields',
    'NoFields',
    'PairType',
    'PrimitiveType',
    'SetType',
    'SizeLength',
    'StringType',
    'StructType',
    'Type',
    'TypeTag',
    'UnnamedFields',
    'decode_schema_type',
    'encode_schema_type',
    'get_derived_schema',
    'schema_from_bytes',
    'schema_of',
    'schema_to_bytes',
]
