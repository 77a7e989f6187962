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
from typing import NamedTuple, Optional

from structlog import get_logger

from concordium_derive.conf.settings import DeriveSettings

logger = get_logger()

CONFIG_YAML_ENV = 'CONCORDIUM_DERIVE_CONFIG_YAML'

# boolean overrides applied on top of the yaml file (or the defaults)
_ENV_OVERRIDES: dict[str, str] = {
    'CONCORDIUM_DERIVE_BUILD_SCHEMA': 'BUILD_SCHEMA',
    'CONCORDIUM_DERIVE_WASM_TEST': 'WASM_TEST',
}

_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_VALUES = frozenset({'0', 'false', 'no', 'off', ''})


class _SettingsMetadata(NamedTuple):
    source: Optional[str]
    settings: DeriveSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> DeriveSettings:
    """
    Returns the settings used by every derive decorator.

    The settings are loaded once, from the yaml file in the 'CONCORDIUM_DERIVE_CONFIG_YAML' env var if it is set, or
    from the defaults otherwise. The 'CONCORDIUM_DERIVE_BUILD_SCHEMA' and 'CONCORDIUM_DERIVE_WASM_TEST' env vars
    override the matching options.
    """
    global _settings_singleton

    if _settings_singleton is None:
        source = os.environ.get(CONFIG_YAML_ENV)
        _settings_singleton = _SettingsMetadata(source=source, settings=_load_settings(source))

    return _settings_singleton.settings


def get_settings_source() -> Optional[str]:
    """ Returns the path of the yaml file that was loaded, `None` when the defaults were used.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def reset_global_settings() -> None:
    """Forget the loaded settings, the next get_global_settings() call loads them again. Meant for tests."""
    global _settings_singleton
    _settings_singleton = None


def _load_settings(source: Optional[str]) -> DeriveSettings:
    log = logger.new(source=source)
    settings = DeriveSettings.from_yaml(filepath=source) if source else DeriveSettings()

    overrides: dict[str, bool] = {}
    for env_var, option in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_var)
        if raw is not None:
            overrides[option] = _parse_bool(env_var, raw)

    if overrides:
        settings = settings.model_copy(update=overrides)

    log.debug('settings loaded', settings=settings.model_dump())
    return settings


def _parse_bool(env_var: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f'{env_var}: expected a boolean, got {raw!r}')
