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

import logging
from typing import Mapping, Optional, Sequence

from counting.nanocontracts.blueprint import Blueprint
from counting.nanocontracts.blueprints.counting_messages import DonateResp, IncrementResp, Parent, ValueResp
from counting.nanocontracts.blueprints.counting_state import (
    CONTRACT_NAME,
    CONTRACT_VERSION,
    LEGACY_LAYOUTS,
    PARENT_DONATION,
    PART_PRECISION,
    STATE,
    ParentDonationConfig,
    State,
    migrate_legacy_state,
)
from counting.nanocontracts.context import Context
from counting.nanocontracts.exception import NCFail
from counting.nanocontracts.storage import get_contract_info, set_contract_info
from counting.nanocontracts.types import (
    U64_MAX,
    Address,
    Amount,
    BankSend,
    Coin,
    ForwardDonation,
    Response,
    migration,
    public,
    view,
)

logger = logging.getLogger(__name__)


class Unauthorized(NCFail):
    def __init__(self, owner: Address) -> None:
        super().__init__(f'Unauthorized -- Only {owner} can do.')
        self.owner = owner


class InvalidContractName(NCFail):
    def __init__(self, expected: str, found: str) -> None:
        super().__init__(f'Invalid contract to migrate from: {found}, expected {expected}')
        self.contract = expected
        self.found = found


class InvalidMigrationVersion(NCFail):
    def __init__(self, version: str) -> None:
        super().__init__(f'Unsupported contract version for migration: {version}')
        self.version = version


class InvalidAmount(NCFail):
    pass


class CounterOverflow(NCFail):
    pass


def threshold_satisfied(minimal_donation: Coin, funds: Sequence[Coin]) -> bool:
    """Tell whether the attached funds count as a donation.

    A zero threshold counts every call, even one without funds.
    """
    if minimal_donation.amount == 0:
        return True
    return any(
        fund.denom == minimal_donation.denom and fund.amount >= minimal_donation.amount
        for fund in funds
    )


def forward_amounts(balances: Mapping[str, int], part: int) -> list[Coin]:
    """Part of each balance sent to the parent, truncated toward zero.

    `part` is a fixed-point fraction scaled by PART_PRECISION, so each amount
    is at most the matching balance.
    """
    funds = []
    for denom in sorted(balances):
        amount = balances[denom] * part // PART_PRECISION
        if amount > 0:
            funds.append(Coin(denom=denom, amount=amount))
    return funds


def capped_amounts(balances: Mapping[str, int], caps: Sequence[Coin]) -> list[Coin]:
    """Balances limited by `caps`.

    With no caps everything is returned. Otherwise `caps` works as an
    allow-list: a denomination without a cap is not sent at all.
    """
    limits: Optional[dict[str, int]] = None
    if caps:
        limits = {}
        for cap in caps:
            limits.setdefault(cap.denom, cap.amount)

    funds = []
    for denom in sorted(balances):
        amount = balances[denom]
        if limits is not None:
            amount = min(amount, limits.get(denom, 0))
        if amount > 0:
            funds.append(Coin(denom=denom, amount=amount))
    return funds


class CountingContract(Blueprint):
    """Counts donations and forwards part of the collected funds to a parent.

    The life cycle of contracts using this blueprint is the following:

    1. [Owner] Create the contract with a minimal donation and optionally a parent.
    2. [Anyone] `increment(...)` or `donate()`. Every `donating_period` counted
       donations, a part of the funds is forwarded to the parent.
    3. [Owner] `reset(...)`, `withdraw()` or `withdraw_to(...)`.
    4. [Admin] Replace the code and run `migrate(...)`.
    """

    def _load_state(self) -> State:
        return STATE.load(self.storage)

    def _check_owner(self, state: State, ctx: Context) -> None:
        if ctx.caller_id != state.owner:
            raise Unauthorized(state.owner)

    def _check_counter(self, value: int) -> int:
        if value > U64_MAX:
            raise CounterOverflow(f'counter would overflow: {value}')
        return value

    def _check_amount(self, value: int) -> None:
        if not 0 <= value <= U64_MAX:
            raise InvalidAmount(f'value out of range: {value}')

    def _parent_config(self, parent: Parent) -> ParentDonationConfig:
        return ParentDonationConfig(
            address=self.syscall.validate_address(parent.addr),
            donating_parent_period=parent.donating_period,
            part=parent.part_atomics(PART_PRECISION),
        )

    def _balances(self) -> dict[str, Amount]:
        return self.syscall.get_all_balances()

    def _counter_response(self, action: str, ctx: Context, counter: int) -> Response:
        logger.info('%s by %s, counter=%d', action, ctx.caller_id, counter)
        return (
            Response()
            .add_attribute('action', action)
            .add_attribute('sender', ctx.caller_id)
            .add_attribute('counter', counter)
        )

    @public(allow_deposit=True)
    def initialize(
        self,
        ctx: Context,
        counter: int,
        minimal_donation: Coin,
        parent: Optional[Parent] = None,
    ) -> Response:
        self._check_amount(counter)
        parent_config = self._parent_config(parent) if parent is not None else None

        state = State(
            counter=counter,
            minimal_donation=minimal_donation,
            owner=ctx.caller_id,
            donating_parent=parent_config.donating_parent_period if parent_config else None,
        )
        set_contract_info(self.storage, CONTRACT_NAME, CONTRACT_VERSION)
        STATE.save(self.storage, state)
        if parent_config is not None:
            PARENT_DONATION.save(self.storage, parent_config)

        return self._counter_response('instantiate', ctx, counter)

    @public
    def increment(self, ctx: Context, value: int) -> Response:
        self._check_amount(value)
        state = self._load_state()
        state.counter = self._check_counter(state.counter + value)
        STATE.save(self.storage, state)

        response = self._counter_response('increment', ctx, state.counter)
        return response.set_data(IncrementResp(value=state.counter))

    @public
    def reset(self, ctx: Context, value: int = 0) -> Response:
        self._check_amount(value)
        state = self._load_state()
        self._check_owner(state, ctx)
        state.counter = value
        STATE.save(self.storage, state)

        response = self._counter_response('reset', ctx, state.counter)
        return response.set_data(IncrementResp(value=state.counter))

    @public(allow_deposit=True)
    def donate(self, ctx: Context) -> Response:
        state = self._load_state()
        forward: Optional[ForwardDonation] = None

        if threshold_satisfied(state.minimal_donation, ctx.funds):
            state.counter = self._check_counter(state.counter + 1)

            if state.donating_parent is not None:
                remaining = state.donating_parent - 1
                if remaining == 0:
                    config = PARENT_DONATION.load(self.storage)
                    remaining = config.donating_parent_period
                    funds = forward_amounts(self._balances(), config.part)
                    forward = ForwardDonation(contract=config.address, funds=tuple(funds))
                state.donating_parent = remaining

            STATE.save(self.storage, state)

        response = self._counter_response('donate', ctx, state.counter)
        if forward is not None:
            logger.info('forwarding %s to parent %s', list(forward.funds), forward.contract)
            response.add_message(forward).add_attribute('donated_to_parent', forward.contract)
        return response.set_data(DonateResp(value=state.counter))

    @public
    def withdraw(self, ctx: Context) -> Response:
        state = self._load_state()
        self._check_owner(state, ctx)

        funds = capped_amounts(self._balances(), ())
        logger.info('withdraw by %s: %s', ctx.caller_id, funds)
        return (
            Response()
            .add_message(BankSend(to_address=state.owner, amount=tuple(funds)))
            .add_attribute('action', 'withdraw')
            .add_attribute('sender', ctx.caller_id)
        )

    @public
    def withdraw_to(self, ctx: Context, receiver: str, funds: Sequence[Coin] = ()) -> Response:
        receiver_address = self.syscall.validate_address(receiver)
        state = self._load_state()
        self._check_owner(state, ctx)

        amounts = capped_amounts(self._balances(), funds)
        logger.info('withdraw by %s to %s: %s', ctx.caller_id, receiver_address, amounts)
        return (
            Response()
            .add_message(BankSend(to_address=receiver_address, amount=tuple(amounts)))
            .add_attribute('action', 'withdraw_to')
            .add_attribute('sender', ctx.caller_id)
            .add_attribute('receiver', receiver_address)
        )

    @view
    def value(self) -> ValueResp:
        return ValueResp(value=self._load_state().counter)

    @migration
    def migrate(self, ctx: Context, parent: Optional[Parent] = None) -> Response:
        """Bring the storage written by a previous version to the current layout.

        Migrating a contract already at the current version does nothing.

        Raises:
            InvalidContractName: if the storage belongs to another contract
            InvalidMigrationVersion: if there is no migration from the stored version
        """
        info = get_contract_info(self.storage)
        if info.contract != CONTRACT_NAME:
            raise InvalidContractName(CONTRACT_NAME, info.contract)

        response = Response().add_attribute('action', 'migrate').add_attribute('sender', ctx.caller_id)
        if info.version == CONTRACT_VERSION:
            logger.info('contract already at version %s, nothing to migrate', CONTRACT_VERSION)
            return response.add_attribute('version', CONTRACT_VERSION)

        layout = LEGACY_LAYOUTS.get(info.version)
        if layout is None:
            raise InvalidMigrationVersion(info.version)

        legacy = layout.load(self.storage)
        parent_config = self._parent_config(parent) if parent is not None else None
        state = migrate_legacy_state(legacy, parent_config)

        for item in layout.obsolete_items:
            item.remove(self.storage)
        STATE.save(self.storage, state)
        if parent_config is not None:
            PARENT_DONATION.save(self.storage, parent_config)
        set_contract_info(self.storage, CONTRACT_NAME, CONTRACT_VERSION)

        logger.info('migrated from %s to %s', info.version, CONTRACT_VERSION)
        return (
            response
            .add_attribute('from_version', info.version)
            .add_attribute('version', CONTRACT_VERSION)
        )
