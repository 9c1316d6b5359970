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

"""
Storage layout of the counting contract, current and historical.

Current layout (0.3.0):
- `state`: State
- `parent_donation`: ParentDonationConfig, only if a parent is configured

0.2.0 stored `state` without `donating_parent`. 0.1.0 stored `counter`,
`minimal_donation` and `owner` as three separate records. Each historical
layout has its own model and its own transform into the current one.
"""

from typing import Callable, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from counting.nanocontracts.storage import Item, NCStorage
from counting.nanocontracts.types import U64_MAX, Address, Coin

CONTRACT_NAME = 'crates.io:counting-contract'
CONTRACT_VERSION = '0.3.0'

# Fixed-point scale of ParentDonationConfig.part, 10**18 is 1.
PART_PRECISION: int = 10**18


class State(BaseModel):
    model_config = ConfigDict(extra='forbid')

    counter: int = Field(ge=0, le=U64_MAX)
    minimal_donation: Coin
    owner: Address
    # Donations left until the next forward, None when there is no parent.
    donating_parent: Optional[int] = Field(default=None, ge=1, le=U64_MAX)


class ParentDonationConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    address: Address
    donating_parent_period: int = Field(ge=1, le=U64_MAX)
    part: int = Field(ge=0, le=PART_PRECISION)


STATE: Item[State] = Item('state', State)
PARENT_DONATION: Item[ParentDonationConfig] = Item('parent_donation', ParentDonationConfig)


class StateV0_1_0(BaseModel):
    """Records of version 0.1.0, gathered from their three separate keys."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    version: Literal['0.1.0'] = Field(default='0.1.0', exclude=True)
    counter: int = Field(ge=0, le=U64_MAX)
    minimal_donation: Coin
    owner: Address


class StateV0_2_0(BaseModel):
    """The `state` record as written by version 0.2.0."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    version: Literal['0.2.0'] = Field(default='0.2.0', exclude=True)
    counter: int = Field(ge=0, le=U64_MAX)
    minimal_donation: Coin
    owner: Address


LegacyState = Union[StateV0_1_0, StateV0_2_0]

LEGACY_COUNTER: Item[int] = Item('counter', int)
LEGACY_MINIMAL_DONATION: Item[Coin] = Item('minimal_donation', Coin)
LEGACY_OWNER: Item[Address] = Item('owner', str)
LEGACY_STATE_V0_2_0: Item[StateV0_2_0] = Item('state', StateV0_2_0)


def _load_v0_1_0(storage: NCStorage) -> StateV0_1_0:
    return StateV0_1_0(
        counter=LEGACY_COUNTER.load(storage),
        minimal_donation=LEGACY_MINIMAL_DONATION.load(storage),
        owner=LEGACY_OWNER.load(storage),
    )


def _load_v0_2_0(storage: NCStorage) -> StateV0_2_0:
    return LEGACY_STATE_V0_2_0.load(storage)


def _parent_countdown(parent: Optional[ParentDonationConfig]) -> Optional[int]:
    if parent is None:
        return None
    return parent.donating_parent_period


def migrate_v0_1_0(legacy: StateV0_1_0, parent: Optional[ParentDonationConfig]) -> State:
    return State(
        counter=legacy.counter,
        minimal_donation=legacy.minimal_donation,
        owner=legacy.owner,
        donating_parent=_parent_countdown(parent),
    )


def migrate_v0_2_0(legacy: StateV0_2_0, parent: Optional[ParentDonationConfig]) -> State:
    return State(
        counter=legacy.counter,
        minimal_donation=legacy.minimal_donation,
        owner=legacy.owner,
        donating_parent=_parent_countdown(parent),
    )


def migrate_legacy_state(legacy: LegacyState, parent: Optional[ParentDonationConfig]) -> State:
    """Transform a historical record into the current State.

    Every historical version is migrated straight to the current one, there
    is no intermediate hop.
    """
    if isinstance(legacy, StateV0_1_0):
        return migrate_v0_1_0(legacy, parent)
    if isinstance(legacy, StateV0_2_0):
        return migrate_v0_2_0(legacy, parent)
    raise TypeError(f'unknown legacy state: {type(legacy).__name__}')


class LegacyLayout(NamedTuple):
    load: Callable[[NCStorage], LegacyState]
    # Records that no longer exist in the current layout.
    obsolete_items: tuple[Item, ...]


LEGACY_LAYOUTS: dict[str, LegacyLayout] = {
    '0.1.0': LegacyLayout(
        load=_load_v0_1_0,
        obsolete_items=(LEGACY_COUNTER, LEGACY_MINIMAL_DONATION, LEGACY_OWNER),
    ),
    '0.2.0': LegacyLayout(load=_load_v0_2_0, obsolete_items=()),
}
