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
Annotation items given to the derive decorators and to the `concordium(...)` field marker.

Items can be written as text, with the same shape as a Rust attribute list:

    concordium('size_length = 1, ensure_ordered')
    @init('contract = "counter", payable')

or as keyword arguments, where `True` marks a flag and `False`/`None` leave it out:

    concordium(size_length=1, ensure_ordered=True)
    @init(contract='counter', payable=True)

Both forms can be mixed, the items are validated together. Each item is a `MetaPath` (a bare flag), a `MetaNameValue`
(`name = literal`) or a `MetaList` (`name(args)`), literals being strings, base-10 integers (`_` separators allowed)
or the booleans `true`/`false`.
"""

from __future__ import annotations

import ast
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Any, Optional, TypeAlias, Union

from concordium_derive.derive.diagnostics import DeriveError, Diagnostic, ErrorCollector, Span

LiteralValue: TypeAlias = Union[str, int, bool]

LENGTH_ATTRIBUTES: tuple[str, ...] = ('size_length', 'map_size_length', 'set_size_length', 'string_size_length')
VALID_LENGTHS: tuple[int, ...] = (1, 2, 4, 8)


@unique
class Site(Enum):
    """Where a list of items is attached, each site accepts a closed set of names."""
    FIELD = 'field'
    INIT = 'init'
    RECEIVE = 'receive'
    CONTRACT_STATE = 'contract_state'

    @property
    def valid_names(self) -> frozenset[str]:
        return _VALID_NAMES[self]


_ENTRY_POINT_NAMES = frozenset({'contract', 'payable', 'enable_logger', 'low_level', 'parameter'})

_VALID_NAMES: dict[Site, frozenset[str]] = {
    Site.FIELD: frozenset(LENGTH_ATTRIBUTES) | {'ensure_ordered'},
    Site.INIT: _ENTRY_POINT_NAMES,
    Site.RECEIVE: _ENTRY_POINT_NAMES | {'name'},
    Site.CONTRACT_STATE: frozenset({'contract'}),
}


@dataclass(frozen=True, slots=True)
class MetaPath:
    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class MetaNameValue:
    name: str
    # XXX: a class given as keyword argument is kept as is, see `metas_from_kwargs`
    value: Any
    span: Span


@dataclass(frozen=True, slots=True)
class MetaList:
    name: str
    args: tuple[Any, ...]
    span: Span


Meta: TypeAlias = Union[MetaPath, MetaNameValue, MetaList]


@dataclass(frozen=True, slots=True)
class FieldAttributes:
    """ Marker carried by `Annotated[T, concordium(...)]` on a field, see `concordium`."""
    items: tuple[str, ...]
    options: tuple[tuple[str, Any], ...]


def concordium(*items: str, **options: Any) -> FieldAttributes:
    """ Attach encoding options to a field.

    >>> concordium('ensure_ordered', size_length=1)
    FieldAttributes(items=('ensure_ordered',), options=(('size_length', 1),))
    """
    for item in items:
        if not isinstance(item, str):
            raise TypeError(f'concordium() items must be strings, got {item!r}')
    return FieldAttributes(items=items, options=tuple(options.items()))


_TOKEN_RE = re.compile(r'''
    (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
  | (?P<int>[0-9][0-9_]*)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<punct>[=,()])
''', re.VERBOSE)

_WHITESPACE_RE = re.compile(r'\s*')


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    text: str
    column: int


def _tokenize(text: str, span: Span) -> list[_Token]:
    tokens: list[_Token] = []
    pos = _WHITESPACE_RE.match(text, 0).end()  # type: ignore[union-attr]
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise DeriveError(f'unexpected character {text[pos]!r}', replace(span, column=pos))
        kind = match.lastgroup
        assert kind is not None
        tokens.append(_Token(kind, match.group(), pos))
        pos = _WHITESPACE_RE.match(text, match.end()).end()  # type: ignore[union-attr]
    return tokens


class _MetaParser:
    """ Recursive descent parser for `name`, `name = literal` and `name(args)` items separated by commas."""

    def __init__(self, text: str, span: Span) -> None:
        self._span = span
        self._tokens = _tokenize(text, span)
        self._pos = 0
        self._end_column = len(text)

    def _peek(self) -> Optional[_Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> Optional[_Token]:
        token = self._peek()
        if token is not None:
            self._pos += 1
        return token

    def _error(self, message: str, token: Optional[_Token]) -> DeriveError:
        column = token.column if token is not None else self._end_column
        return DeriveError(message, replace(self._span, column=column))

    def _is_punct(self, token: Optional[_Token], punct: str) -> bool:
        return token is not None and token.kind == 'punct' and token.text == punct

    def parse(self) -> list[Meta]:
        metas: list[Meta] = []
        while self._peek() is not None:
            metas.append(self._parse_meta())
            token = self._next()
            if token is None:
                break
            if not self._is_punct(token, ','):
                raise self._error('expected `,` between attributes', token)
        return metas

    def _parse_meta(self) -> Meta:
        token = self._next()
        if token is None or token.kind != 'ident':
            raise self._error('expected an attribute name', token)
        name = token.text
        span = replace(self._span.at_attribute(name), column=token.column)
        following = self._peek()
        if self._is_punct(following, '='):
            self._next()
            value_token = self._next()
            if value_token is None or value_token.kind == 'punct':
                raise self._error(f'expected a literal value after `{name} =`', value_token)
            return MetaNameValue(name, self._literal(value_token), span)
        if self._is_punct(following, '('):
            self._next()
            return MetaList(name, self._parse_args(), span)
        return MetaPath(name, span)

    def _parse_args(self) -> tuple[Any, ...]:
        args: list[Any] = []
        while True:
            token = self._next()
            if token is None:
                raise self._error('unclosed `(`', token)
            if self._is_punct(token, ')'):
                return tuple(args)
            if token.kind == 'punct':
                raise self._error(f'unexpected `{token.text}`', token)
            args.append(self._literal(token))
            separator = self._next()
            if self._is_punct(separator, ')'):
                return tuple(args)
            if not self._is_punct(separator, ','):
                raise self._error('expected `,` or `)`', separator)

    def _literal(self, token: _Token) -> Any:
        if token.kind == 'string':
            return ast.literal_eval(token.text)
        if token.kind == 'int':
            return int(token.text.replace('_', ''))
        if token.text == 'true':
            return True
        if token.text == 'false':
            return False
        # bare identifiers are only meaningful inside a list, they are kept as text
        return token.text


def parse_meta_list(text: str, *, span: Span) -> list[Meta]:
    """ Parse the text form of an annotation list.

    >>> span = Span('Foo', field='bar')
    >>> [m.name for m in parse_meta_list('size_length = 1, ensure_ordered', span=span)]
    ['size_length', 'ensure_ordered']
    >>> parse_meta_list('contract = "counter"', span=Span('init_counter'))[0].value
    'counter'
    >>> parse_meta_list('size_length = ', span=span)
    Traceback (most recent call last):
    ...
    concordium_derive.derive.diagnostics.DeriveError: Foo.bar [column 14]: expected a literal value after `size_length =`
    """
    return _MetaParser(text, span).parse()


def metas_from_kwargs(options: Mapping[str, Any] | Iterable[tuple[str, Any]], *, span: Span) -> list[Meta]:
    """ Convert keyword arguments into annotation items.

    `True` is a flag, `False` and `None` are left out, any other value is a literal value.
    """
    items = options.items() if isinstance(options, Mapping) else options
    metas: list[Meta] = []
    for name, value in items:
        if value is True:
            metas.append(MetaPath(name, span.at_attribute(name)))
        elif value is False or value is None:
            continue
        else:
            metas.append(MetaNameValue(name, value, span.at_attribute(name)))
    return metas


def collect_metas(items: Iterable[str], options: Mapping[str, Any] | Iterable[tuple[str, Any]], *,
                  span: Span) -> list[Meta]:
    """ Parse text items and keyword options into one list, numbering each occurrence per name."""
    metas: list[Meta] = []
    for item in items:
        metas.extend(parse_meta_list(item, span=span))
    metas.extend(metas_from_kwargs(options, span=span))
    counters: dict[str, int] = {}
    numbered: list[Meta] = []
    for meta in metas:
        index = counters.get(meta.name, 0)
        counters[meta.name] = index + 1
        numbered.append(replace(meta, span=replace(meta.span, index=index)))
    return numbered


def validate_site(metas: Iterable[Meta], site: Site) -> None:
    """ Reject every item whose name is not accepted at the given site, all of them in a single error."""
    errors = ErrorCollector()
    for meta in metas:
        if meta.name in site.valid_names:
            continue
        if site is Site.FIELD:
            message = f"The attribute '{meta.name}' is not supported as a concordium field attribute."
        else:
            message = f"The attribute '{meta.name}' is not supported by @{site.value}."
        errors.push(DeriveError(message, meta.span))
    errors.raise_if_any()


def _find_single(metas: Iterable[Meta], name: str) -> Optional[Meta]:
    occurrences = [meta for meta in metas if meta.name == name]
    if not occurrences:
        return None
    if len(occurrences) > 1:
        raise DeriveError.from_diagnostics(
            Diagnostic(f"Attribute '{name}' should only be specified once.", meta.span)
            for meta in occurrences
        )
    return occurrences[0]


def find_value(metas: Iterable[Meta], name: str) -> Any:
    """ Value of a `name = literal` item, `None` when the item is absent.

    Present in any other form, or more than once, is an error.
    """
    meta = _find_single(metas, name)
    if meta is None:
        return None
    if not isinstance(meta, MetaNameValue):
        raise DeriveError(f'The `{name}` attribute must have a literal value.', meta.span)
    return meta.value


def find_string_value(metas: Iterable[Meta], name: str) -> Optional[str]:
    """ Like `find_value`, but the literal must be a string."""
    meta = _find_single(metas, name)
    if meta is None:
        return None
    if not isinstance(meta, MetaNameValue):
        raise DeriveError(f'The `{name}` attribute must have a string literal value.', meta.span)
    if not isinstance(meta.value, str):
        raise DeriveError(f'The `{name}` attribute must be a string literal.', meta.span)
    return meta.value


def contains(metas: Iterable[Meta], name: str) -> bool:
    """ Whether a flag is present, a flag given a value is an error."""
    found = False
    for meta in metas:
        if meta.name != name:
            continue
        if not isinstance(meta, MetaPath):
            raise DeriveError(f'The `{name}` attribute is a flag and takes no value.', meta.span)
        found = True
    return found


def find_length(metas: Iterable[Meta], name: str) -> Optional[int]:
    """ Width of a length attribute, one of 1, 2, 4 or 8, `None` when absent.

    >>> span = Span('Foo', field='bar')
    >>> find_length(parse_meta_list('size_length = 2', span=span), 'size_length')
    2
    >>> find_length(parse_meta_list('size_length = 3', span=span), 'size_length')
    Traceback (most recent call last):
    ...
    concordium_derive.derive.diagnostics.DeriveError: Foo.bar [size_length, column 0]: Length info must be either 1, 2, 4, or 8.
    """
    meta = _find_single(metas, name)
    if meta is None:
        return None
    if not isinstance(meta, MetaNameValue):
        raise DeriveError(f'The `{name}` attribute must have a literal value.', meta.span)
    value = meta.value
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeriveError('Length attribute value must be an integer.', meta.span)
    if value not in VALID_LENGTHS:
        raise DeriveError('Length info must be either 1, 2, 4, or 8.', meta.span)
    return value


def field_metas(metadata: Iterable[Any], *, span: Span) -> list[Meta]:
    """ Items of every `concordium(...)` marker found in the metadata of an `Annotated` field type."""
    items: list[str] = []
    options: list[tuple[str, Any]] = []
    for marker in metadata:
        if isinstance(marker, FieldAttributes):
            items.extend(marker.items)
            options.extend(marker.options)
    return collect_metas(items, options, span=span)
