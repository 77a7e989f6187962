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
Class decorators deriving codecs and schemas.

    @serialize
    @schema_type
    @dataclass
    class Counter:
        owner: AccountAddress
        values: Annotated[dict[U8, U32], concordium(map_size_length=1, ensure_ordered=True)]

The generated codec is stored on the class, so a derived class can be used as a field type of another derived class.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from structlog import get_logger

from concordium_derive.codecs.utils import CODEC_ATTR
from concordium_derive.conf import get_global_settings
from concordium_derive.derive.attributes import Site, collect_metas, find_string_value, validate_site
from concordium_derive.derive.codec_gen import build_codec
from concordium_derive.derive.diagnostics import DeriveError, Span
from concordium_derive.derive.exports import Export, ExportKind, attach_export
from concordium_derive.derive.plans import SHAPE_ATTR, get_shape
from concordium_derive.derive.schema_gen import build_schema
from concordium_derive.schema import SCHEMA_ATTR, get_derived_schema, schema_to_bytes

logger = get_logger()

C = TypeVar('C', bound=type)


def _derive_codec(cls: C, *, serial: bool, deserial: bool) -> C:
    shape = get_shape(cls)
    codec = build_codec(shape, serial=serial, deserial=deserial)
    setattr(cls, SHAPE_ATTR, shape)
    setattr(cls, CODEC_ATTR, codec)
    return cls


def serialize(cls: C) -> C:
    """ Derive both the encoder and the decoder of a class."""
    return _derive_codec(cls, serial=True, deserial=True)


def serial(cls: C) -> C:
    """ Derive only the encoder of a class."""
    return _derive_codec(cls, serial=True, deserial=False)


def deserial(cls: C) -> C:
    """ Derive only the decoder of a class."""
    return _derive_codec(cls, serial=False, deserial=True)


def schema_type(cls: C) -> C:
    """ Derive the schema of a class, nothing is done when schemas are disabled in the settings."""
    if not get_global_settings().BUILD_SCHEMA:
        return cls
    shape = get_shape(cls)
    schema = build_schema(shape)
    setattr(cls, SHAPE_ATTR, shape)
    setattr(cls, SCHEMA_ATTR, schema)
    logger.debug('schema derived', type=cls.__qualname__)
    return cls


def contract_state(*items: str, **options: Any) -> Callable[[C], C]:
    """ Export the schema of the state type of a contract as `concordium_schema_state_<contract>`.

    The schema of the class is derived when it was not already, nothing is exported when schemas are disabled.
    """
    def decorator(cls: C) -> C:
        span = Span(cls.__qualname__)
        metas = collect_metas(items, options, span=span)
        validate_site(metas, Site.CONTRACT_STATE)
        contract = find_string_value(metas, 'contract')
        if contract is None:
            raise DeriveError(
                'A name for the contract must be provided, using the contract attribute. '
                'For example, @contract_state(contract="my-contract")',
                span,
            )
        if not get_global_settings().BUILD_SCHEMA:
            return cls
        schema = get_derived_schema(cls)
        if schema is None:
            schema = build_schema(get_shape(cls))
        schema_bytes = schema_to_bytes(schema)

        def state_schema() -> bytes:
            return schema_bytes

        name = f'concordium_schema_state_{contract}'
        attach_export(cls, Export(name, ExportKind.SCHEMA, state_schema, cls.__qualname__))
        logger.debug('state schema exported', export=name)
        return cls
    return decorator
