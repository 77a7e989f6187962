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

from pathlib import Path

import pytest
from pydantic import ValidationError

from concordium_derive.conf import DeriveSettings, get_global_settings
from concordium_derive.conf.get_settings import get_settings_source
from concordium_derive.utils.yaml import dict_from_extended_yaml
from concordium_derive_tests.unittest import settings_env


def _write(path: Path, text: str) -> str:
    path.write_text(text)
    return str(path)


def test_defaults() -> None:
    settings = get_global_settings()
    assert settings.BUILD_SCHEMA is True
    assert settings.WASM_TEST is False
    assert get_settings_source() is None


def test_loaded_once() -> None:
    assert get_global_settings() is get_global_settings()


def test_from_yaml(tmp_path: Path) -> None:
    filepath = _write(tmp_path / 'settings.yml', 'BUILD_SCHEMA: false\nWASM_TEST: true\n')
    with settings_env(CONCORDIUM_DERIVE_CONFIG_YAML=filepath):
        settings = get_global_settings()
        assert settings == DeriveSettings(BUILD_SCHEMA=False, WASM_TEST=True)
        assert get_settings_source() == filepath


def test_empty_yaml_uses_defaults(tmp_path: Path) -> None:
    filepath = _write(tmp_path / 'settings.yml', '')
    assert DeriveSettings.from_yaml(filepath=filepath) == DeriveSettings()


def test_extends(tmp_path: Path) -> None:
    _write(tmp_path / 'base.yml', 'BUILD_SCHEMA: false\nWASM_TEST: true\n')
    filepath = _write(tmp_path / 'child.yml', 'extends: base.yml\nWASM_TEST: false\n')
    assert dict_from_extended_yaml(filepath=filepath) == {'BUILD_SCHEMA': False, 'WASM_TEST': False}


def test_extends_itself(tmp_path: Path) -> None:
    filepath = _write(tmp_path / 'loop.yml', 'extends: loop.yml\n')
    with pytest.raises(ValueError, match='cannot extend itself'):
        dict_from_extended_yaml(filepath=filepath)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match='is not a file'):
        DeriveSettings.from_yaml(filepath=tmp_path / 'missing.yml')


def test_not_a_mapping(tmp_path: Path) -> None:
    filepath = _write(tmp_path / 'list.yml', '- a\n- b\n')
    with pytest.raises(ValueError, match='cannot be parsed as a dictionary'):
        DeriveSettings.from_yaml(filepath=filepath)


def test_unknown_option(tmp_path: Path) -> None:
    filepath = _write(tmp_path / 'settings.yml', 'DEFAULT_SIZE_LENGTH: 4\n')
    with pytest.raises(ValidationError):
        DeriveSettings.from_yaml(filepath=filepath)


def test_settings_are_frozen() -> None:
    with pytest.raises(ValidationError):
        get_global_settings().BUILD_SCHEMA = False  # type: ignore[misc]


@pytest.mark.parametrize(['raw', 'expected'], [('1', True), ('TRUE', True), ('on', True), ('0', False), ('no', False)])
def test_env_override(raw: str, expected: bool) -> None:
    with settings_env(CONCORDIUM_DERIVE_WASM_TEST=raw):
        assert get_global_settings().WASM_TEST is expected


def test_env_override_wins_over_yaml(tmp_path: Path) -> None:
    filepath = _write(tmp_path / 'settings.yml', 'BUILD_SCHEMA: false\n')
    with settings_env(CONCORDIUM_DERIVE_CONFIG_YAML=filepath, CONCORDIUM_DERIVE_BUILD_SCHEMA='yes'):
        assert get_global_settings().BUILD_SCHEMA is True


def test_invalid_env_override() -> None:
    with settings_env(CONCORDIUM_DERIVE_BUILD_SCHEMA='maybe'):
        with pytest.raises(ValueError, match='expected a boolean'):
            get_global_settings()
