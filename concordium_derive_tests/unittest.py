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

import os
from contextlib import contextmanager
from typing import Any, Iterator
from unittest import TestCase as _TestCase, main as ut_main
from unittest.mock import patch

from structlog import get_logger

from concordium_derive.conf import reset_global_settings
from concordium_derive.runtime import Host
from concordium_derive.types import ACCOUNT_ADDRESS_SIZE, AccountAddress

logger = get_logger()
main = ut_main

SETTINGS_ENV_VARS = (
    'CONCORDIUM_DERIVE_CONFIG_YAML',
    'CONCORDIUM_DERIVE_BUILD_SCHEMA',
    'CONCORDIUM_DERIVE_WASM_TEST',
)


def account(n: int) -> AccountAddress:
    """A deterministic account address, all bytes set to `n`."""
    return AccountAddress(bytes([n]) * ACCOUNT_ADDRESS_SIZE)


@contextmanager
def settings_env(**env: str) -> Iterator[None]:
    """Load the global settings from the given env vars while the block runs."""
    with patch.dict(os.environ):
        for name in SETTINGS_ENV_VARS:
            os.environ.pop(name, None)
        os.environ.update(env)
        reset_global_settings()
        try:
            yield
        finally:
            reset_global_settings()


class TestCase(_TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.log = logger.new(test=self.id())
        reset_global_settings()
        self.addCleanup(reset_global_settings)

    def new_host(self, **kwargs: Any) -> Host:
        kwargs.setdefault('invoker', account(1))
        kwargs.setdefault('owner', account(2))
        return Host(**kwargs)
