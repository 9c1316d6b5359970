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

from decimal import ROUND_DOWN, Decimal

from pydantic import BaseModel, ConfigDict, Field

from counting.nanocontracts.types import U64_MAX


class Parent(BaseModel):
    """Parent contract to forward a part of the funds to."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    addr: str
    # Number of counted donations between two forwards.
    donating_period: int = Field(ge=1, le=U64_MAX)
    # Part of the held funds sent on each forward, 0.1 is ten percent.
    part: Decimal = Field(ge=0, le=1)

    def part_atomics(self, precision: int) -> int:
        """Return `part` as a fixed-point integer, digits beyond `precision` are dropped."""
        return int((self.part * precision).to_integral_value(rounding=ROUND_DOWN))


class ValueResp(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: int


class IncrementResp(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: int


class DonateResp(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: int
