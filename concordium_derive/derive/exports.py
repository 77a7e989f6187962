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
Exported functions generated by the decorators.

Every decorator that produces an externally callable function records it as an `Export` on the decorated object. The
exports of a module are then gathered into an `ExportTable`, the symbol table a host dispatches calls through.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum, unique
from types import ModuleType
from typing import Any

from concordium_derive.derive.diagnostics import DeriveError, Diagnostic, ErrorCollector, Span

# attribute set on decorated functions and classes, holds a tuple of `Export`
EXPORTS_ATTR: str = '__concordium_exports__'


@unique
class ExportKind(Enum):
    INIT = 'init'
    RECEIVE = 'receive'
    SCHEMA = 'schema'
    TEST = 'test'


@dataclass(frozen=True, slots=True)
class Export:
    name: str
    kind: ExportKind
    func: Callable[..., Any]
    # qualified name of the decorated item, used to report duplicate names
    origin: str


def attach_export(obj: Any, export: Export) -> None:
    """ Record an export on a decorated function or class."""
    setattr(obj, EXPORTS_ATTR, (*get_exports(obj), export))


def get_exports(obj: Any) -> tuple[Export, ...]:
    """ The exports recorded on an object itself, inherited ones are not included."""
    return getattr(obj, '__dict__', {}).get(EXPORTS_ATTR, ())


class ExportTable:
    """ Exports by name, in definition order.
    """

    def __init__(self) -> None:
        self._exports: dict[str, Export] = {}

    def add(self, export: Export) -> None:
        existing = self._exports.get(export.name)
        if existing is not None:
            raise _duplicate_error([existing, export])
        self._exports[export.name] = export

    def __contains__(self, name: object) -> bool:
        return name in self._exports

    def __getitem__(self, name: str) -> Export:
        return self._exports[name]

    def __iter__(self) -> Iterator[Export]:
        return iter(self._exports.values())

    def __len__(self) -> int:
        return len(self._exports)

    def names(self) -> list[str]:
        return list(self._exports)

    def of_kind(self, kind: ExportKind) -> list[Export]:
        return [export for export in self._exports.values() if export.kind is kind]

    def call(self, name: str, *args: Any) -> Any:
        """ Call an export by name, a missing name raises a KeyError."""
        return self._exports[name].func(*args)


def _duplicate_error(exports: list[Export]) -> DeriveError:
    return DeriveError.from_diagnostics(
        Diagnostic(f"Export '{export.name}' is defined more than once.", Span(export.origin))
        for export in exports
    )


def collect_exports(module: ModuleType) -> ExportTable:
    """ Gather the exports of every object defined in a module.

    An object bound to more than one name is only visited once. When two exports share a name, one error names every
    occurrence.
    """
    seen: set[int] = set()
    by_name: dict[str, list[Export]] = {}
    for obj in vars(module).values():
        if id(obj) in seen:
            continue
        seen.add(id(obj))
        for export in get_exports(obj):
            by_name.setdefault(export.name, []).append(export)

    errors = ErrorCollector()
    table = ExportTable()
    for exports in by_name.values():
        if len(exports) > 1:
            errors.push(_duplicate_error(exports))
            continue
        table.add(exports[0])
    errors.raise_if_any()
    return table
