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

import importlib
import sys
from argparse import ArgumentParser, Namespace
from typing import TextIO

from concordium_derive.derive.diagnostics import DeriveError
from concordium_derive.derive.exports import ExportKind, collect_exports


def create_parser() -> ArgumentParser:
    from concordium_derive.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('module', help='Dotted name of the module to import')
    parser.add_argument('--schema', action='store_true', help='Print the hex encoded bytes of every schema export')
    return parser


def report_derive_error(error: DeriveError, out: TextIO) -> None:
    for diagnostic in error.diagnostics:
        print(f'error: {diagnostic}', file=out)


def execute(args: Namespace, out: TextIO = sys.stdout, err: TextIO = sys.stderr) -> int:
    try:
        module = importlib.import_module(args.module)
        table = collect_exports(module)
    except DeriveError as e:
        report_derive_error(e, err)
        return 1

    for export in table:
        print(f'{export.kind.value:<8} {export.name}', file=out)
        if args.schema and export.kind is ExportKind.SCHEMA:
            print(f'         {export.func().hex()}', file=out)
    return 0
