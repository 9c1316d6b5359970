# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Character set of the data part of a bech32 address.
BECH32_CHARSET = 'qpzry9x8gf2tvdw0s3jn54khce6mua7l'


class CountingSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Name of the network this configuration targets.
    NETWORK_NAME: str

    # Human readable prefixes accepted for addresses (e.g. "sei" in "sei1...").
    ADDRESS_PREFIXES: tuple[str, ...] = Field(min_length=1)

    # Length bounds, separator included, of an accepted address.
    MIN_ADDRESS_LENGTH: int = 8
    MAX_ADDRESS_LENGTH: int = 90

    # Maximum depth of nested contract calls, forwarded donations included.
    MAX_CALL_DEPTH: int = Field(default=8, ge=1)

    @field_validator('ADDRESS_PREFIXES')
    @classmethod
    def _prefixes_are_lowercase(cls, prefixes: tuple[str, ...]) -> tuple[str, ...]:
        for prefix in prefixes:
            if not prefix or prefix != prefix.lower():
                raise ValueError(f'invalid address prefix: {prefix!r}')
        return prefixes
