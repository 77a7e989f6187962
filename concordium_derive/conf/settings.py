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
from typing import Union

from concordium_derive.utils import pydantic
from concordium_derive.utils.yaml import dict_from_extended_yaml


class DeriveSettings(pydantic.BaseModel):
    # Generate schema descriptors: `@schema_type`, `@contract_state` and the parameter schema exports of entry points.
    # When disabled those decorators leave their targets untouched, codecs are generated regardless.
    BUILD_SCHEMA: bool = True

    # Export `@concordium_test` functions as `concordium_test <name>`.
    WASM_TEST: bool = False

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'DeriveSettings':
        """Takes a filepath to a yaml file and returns a validated DeriveSettings instance."""
        settings_dict = dict_from_extended_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
