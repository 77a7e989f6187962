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
Errors raised while a decorator generates codecs, schemas or entry points.

Generation either fully succeeds or raises a single `DeriveError` carrying every problem found in the decorated item,
each one pointing at the item, field and attribute occurrence it comes from.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True, slots=True)
class Span:
    """ Location of a diagnostic.

    >>> str(Span('Counter', field='items', attribute='size_length', index=1))
    'Counter.items [size_length #1]'
    >>> str(Span('init_counter', column=12))
    'init_counter [column 12]'
    """

    # qualified name of the decorated class or function
    item: str
    field: Optional[str] = None
    attribute: Optional[str] = None
    # position of the attribute occurrence in its annotation list, 0-based
    index: Optional[int] = None
    # position in the text of an annotation, for syntax errors
    column: Optional[int] = None

    def at_field(self, field: str) -> Span:
        return replace(self, field=field)

    def at_attribute(self, attribute: str, index: Optional[int] = None) -> Span:
        return replace(self, attribute=attribute, index=index)

    def __str__(self) -> str:
        location = self.item
        if self.field is not None:
            location += f'.{self.field}'
        details = []
        if self.attribute is not None:
            details.append(self.attribute if self.index is None else f'{self.attribute} #{self.index}')
        if self.column is not None:
            details.append(f'column {self.column}')
        if details:
            location += f' [{", ".join(details)}]'
        return location


@dataclass(frozen=True, slots=True)
class Diagnostic:
    message: str
    span: Span

    def __str__(self) -> str:
        return f'{self.span}: {self.message}'


class DeriveError(Exception):
    """ Raised when a decorator cannot generate code for an item.

    >>> error = DeriveError('first problem', Span('Foo', field='a'))
    >>> error.combine(DeriveError('second problem', Span('Foo', field='b')))
    >>> print(error)
    Foo.a: first problem
    Foo.b: second problem
    """

    def __init__(self, message: str, span: Span) -> None:
        self.diagnostics: list[Diagnostic] = [Diagnostic(message, span)]
        super().__init__(message)

    @classmethod
    def from_diagnostics(cls, diagnostics: Iterable[Diagnostic]) -> DeriveError:
        first, *rest = diagnostics
        error = cls(first.message, first.span)
        error.diagnostics.extend(rest)
        return error

    def combine(self, other: DeriveError) -> None:
        """ Merge the diagnostics of another error into this one."""
        self.diagnostics.extend(other.diagnostics)

    def __str__(self) -> str:
        return '\n'.join(str(diagnostic) for diagnostic in self.diagnostics)


class ErrorCollector:
    """ Accumulates the errors of independent checks so they are reported together."""

    def __init__(self) -> None:
        self._error: Optional[DeriveError] = None

    def push(self, error: DeriveError) -> None:
        if self._error is None:
            self._error = error
        else:
            self._error.combine(error)

    @contextmanager
    def collect(self) -> Iterator[None]:
        """ Swallow a DeriveError raised in the block, it is raised later by `raise_if_any`."""
        try:
            yield
        except DeriveError as e:
            self.push(e)

    @property
    def has_errors(self) -> bool:
        return self._error is not None

    def raise_if_any(self) -> None:
        if self._error is not None:
            raise self._error


@contextmanager
def report_errors(span: Span) -> Iterator[None]:
    """ Turn any other exception raised while generating an item into a DeriveError located at `span`.

    >>> with report_errors(Span('Foo', field='bar')):
    ...     raise TypeError('type int is not supported')
    Traceback (most recent call last):
    ...
    concordium_derive.derive.diagnostics.DeriveError: Foo.bar: type int is not supported
    """
    try:
        yield
    except DeriveError:
        raise
    except Exception as e:
        raise DeriveError(str(e), span) from e
