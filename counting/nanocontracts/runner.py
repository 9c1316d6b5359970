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
from dataclasses import dataclass, field
from typing import Any, Iterable, NamedTuple, Optional

from counting.conf import CountingSettings, get_settings
from counting.nanocontracts.address import AddressValidator
from counting.nanocontracts.blueprint import Blueprint
from counting.nanocontracts.blueprint_env import BlueprintEnvironment
from counting.nanocontracts.context import Context
from counting.nanocontracts.exception import (
    NCContractAlreadyExists,
    NCContractNotFound,
    NCForbiddenAction,
    NCInsufficientFunds,
    NCMethodNotFound,
    NCMigrationForbidden,
    NCRecursionError,
)
from counting.nanocontracts.storage import NCMemoryStorage, NCStorage
from counting.nanocontracts.types import (
    Address,
    Amount,
    BankSend,
    Coin,
    ForwardDonation,
    NCDepositAction,
    NCMethodType,
    OutboundMessage,
    Response,
    allows_deposit,
    get_method_type,
)

logger = logging.getLogger(__name__)


class Bank:
    """In-memory balances of every address, contracts included."""

    def __init__(self) -> None:
        self._balances: dict[Address, dict[str, int]] = {}

    def get_balance(self, address: Address, denom: str) -> Amount:
        return Amount(self._balances.get(address, {}).get(denom, 0))

    def get_all_balances(self, address: Address) -> dict[str, Amount]:
        return {
            denom: Amount(amount)
            for denom, amount in sorted(self._balances.get(address, {}).items())
            if amount > 0
        }

    def mint(self, address: Address, funds: Iterable[Coin]) -> None:
        balances = self._balances.setdefault(address, {})
        for fund in funds:
            balances[fund.denom] = balances.get(fund.denom, 0) + fund.amount

    def send(self, sender: Address, receiver: Address, funds: Iterable[Coin]) -> None:
        funds = list(funds)
        for fund in funds:
            if self.get_balance(sender, fund.denom) < fund.amount:
                raise NCInsufficientFunds(f'{sender} cannot send {fund.amount}{fund.denom}')
        sender_balances = self._balances.setdefault(sender, {})
        receiver_balances = self._balances.setdefault(receiver, {})
        for fund in funds:
            sender_balances[fund.denom] -= fund.amount
            receiver_balances[fund.denom] = receiver_balances.get(fund.denom, 0) + fund.amount

    def snapshot(self) -> dict[Address, dict[str, int]]:
        return {address: dict(balances) for address, balances in self._balances.items()}

    def restore(self, snapshot: dict[Address, dict[str, int]]) -> None:
        self._balances = {address: dict(balances) for address, balances in snapshot.items()}


class RunnerSyscall:
    """Host capabilities given to a contract executed by the Runner."""

    def __init__(self, contract_id: Address, bank: Bank, validator: AddressValidator) -> None:
        self._contract_id = contract_id
        self._bank = bank
        self._validator = validator

    def get_contract_id(self) -> Address:
        return self._contract_id

    def get_all_balances(self) -> dict[str, Amount]:
        return self._bank.get_all_balances(self._contract_id)

    def validate_address(self, address: str) -> Address:
        return self._validator.validate(address)


@dataclass
class ContractRecord:
    blueprint_class: type[Blueprint]
    storage: NCStorage
    admin: Optional[Address]
    messages: list[OutboundMessage] = field(default_factory=list)


class RunnerSnapshot(NamedTuple):
    contracts: dict[Address, tuple[Any, list[OutboundMessage]]]
    bank: dict[Address, dict[str, int]]


class Runner:
    """Executes blueprint methods one call at a time.

    Each call is atomic: deposits attached to the context are moved to the
    contract before the method runs, and outbound messages are executed once
    the method returns, forwarded donations to a registered contract running
    its `donate` method as a nested call. If the method or any of its messages
    raises, the storage of every contract and the bank are restored to their
    state before the outermost call.
    """

    def __init__(self, settings: Optional[CountingSettings] = None) -> None:
        self.settings = settings or get_settings()
        self.bank = Bank()
        self.address_validator = AddressValidator(self.settings)
        self._contracts: dict[Address, ContractRecord] = {}
        self._depth = 0

    def has_contract(self, contract_id: Address) -> bool:
        return contract_id in self._contracts

    def get_storage(self, contract_id: Address) -> NCStorage:
        return self._get_record(contract_id).storage

    def get_blueprint_class(self, contract_id: Address) -> type[Blueprint]:
        return self._get_record(contract_id).blueprint_class

    def get_last_messages(self, contract_id: Address) -> list[OutboundMessage]:
        """Messages emitted by the last committed call of a contract."""
        return list(self._get_record(contract_id).messages)

    def create_contract(
        self,
        contract_id: Address,
        blueprint_class: type[Blueprint],
        ctx: Context,
        *args: Any,
        admin: Optional[Address] = None,
        storage: Optional[NCStorage] = None,
        **kwargs: Any,
    ) -> Response:
        """Register a contract and run its `initialize` method.

        `admin` is the only identity allowed to migrate the contract later.
        """
        if contract_id in self._contracts:
            raise NCContractAlreadyExists(contract_id)
        record = ContractRecord(blueprint_class, storage or NCMemoryStorage(), admin)
        self._contracts[contract_id] = record
        try:
            return self._run(contract_id, record, 'initialize', NCMethodType.PUBLIC, ctx, args, kwargs)
        except BaseException:
            del self._contracts[contract_id]
            raise

    def call_public_method(
        self,
        contract_id: Address,
        method_name: str,
        ctx: Context,
        *args: Any,
        **kwargs: Any,
    ) -> Response:
        record = self._get_record(contract_id)
        return self._run(contract_id, record, method_name, NCMethodType.PUBLIC, ctx, args, kwargs)

    def call_view_method(self, contract_id: Address, method_name: str, *args: Any, **kwargs: Any) -> Any:
        record = self._get_record(contract_id)
        blueprint = self._build(contract_id, record)
        method = self._get_method(blueprint, method_name, NCMethodType.VIEW)
        return method(*args, **kwargs)

    def migrate_contract(
        self,
        contract_id: Address,
        blueprint_class: type[Blueprint],
        ctx: Context,
        *args: Any,
        **kwargs: Any,
    ) -> Response:
        """Replace the code of a contract and run its migration method.

        The code is only replaced if the migration succeeds.
        """
        record = self._get_record(contract_id)
        if record.admin is None or ctx.caller_id != record.admin:
            raise NCMigrationForbidden(f'{ctx.caller_id} is not the admin of {contract_id}')
        if ctx.actions:
            raise NCForbiddenAction('migration does not accept deposits')

        migrating = ContractRecord(blueprint_class, record.storage, record.admin)
        response = self._run(contract_id, migrating, 'migrate', NCMethodType.MIGRATION, ctx, args, kwargs)
        record.blueprint_class = blueprint_class
        return response

    def _get_record(self, contract_id: Address) -> ContractRecord:
        record = self._contracts.get(contract_id)
        if record is None:
            raise NCContractNotFound(contract_id)
        return record

    def _build(self, contract_id: Address, record: ContractRecord) -> Blueprint:
        syscall = RunnerSyscall(contract_id, self.bank, self.address_validator)
        return record.blueprint_class(BlueprintEnvironment(storage=record.storage, syscall=syscall))

    def _get_method(self, blueprint: Blueprint, method_name: str, method_type: NCMethodType) -> Any:
        method = getattr(blueprint, method_name, None)
        if method is None or get_method_type(method) != method_type:
            raise NCMethodNotFound(f'{type(blueprint).__name__}.{method_name} is not a {method_type.value} method')
        return method

    def _run(
        self,
        contract_id: Address,
        record: ContractRecord,
        method_name: str,
        method_type: NCMethodType,
        ctx: Context,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Response:
        if self._depth >= self.settings.MAX_CALL_DEPTH:
            raise NCRecursionError(f'call depth exceeds {self.settings.MAX_CALL_DEPTH}')

        blueprint = self._build(contract_id, record)
        method = self._get_method(blueprint, method_name, method_type)
        if ctx.actions and not allows_deposit(method):
            raise NCForbiddenAction(f'{method_name} does not accept deposits')

        # Nested calls are part of the outermost call, which owns the snapshot.
        snapshot = self._snapshot() if self._depth == 0 else None
        self._depth += 1
        try:
            self.bank.send(ctx.caller_id, contract_id, ctx.funds)
            response = method(ctx, *args, **kwargs)
            record.messages = list(response.messages)
            self._dispatch(contract_id, response.messages)
        except BaseException as e:
            if snapshot is not None:
                logger.warning('%s.%s failed, rolling back: %r', contract_id, method_name, e)
                self._restore(snapshot)
            raise
        finally:
            self._depth -= 1
        return response

    def _snapshot(self) -> RunnerSnapshot:
        contracts = {
            contract_id: (record.storage.snapshot(), list(record.messages))
            for contract_id, record in self._contracts.items()
        }
        return RunnerSnapshot(contracts=contracts, bank=self.bank.snapshot())

    def _restore(self, snapshot: RunnerSnapshot) -> None:
        for contract_id, (storage_snapshot, messages) in snapshot.contracts.items():
            record = self._contracts.get(contract_id)
            if record is None:
                continue
            record.storage.restore(storage_snapshot)
            record.messages = messages
        self.bank.restore(snapshot.bank)

    def _dispatch(self, contract_id: Address, messages: list[OutboundMessage]) -> None:
        for message in messages:
            logger.debug('dispatching %r from %s', message, contract_id)
            if isinstance(message, BankSend):
                self.bank.send(contract_id, message.to_address, message.amount)
            elif isinstance(message, ForwardDonation):
                self._forward(contract_id, message)
            else:
                raise TypeError(f'unknown message: {message!r}')

    def _forward(self, contract_id: Address, message: ForwardDonation) -> None:
        if message.contract not in self._contracts:
            self.bank.send(contract_id, message.contract, message.funds)
            return
        actions = [NCDepositAction(fund.denom, Amount(fund.amount)) for fund in message.funds]
        ctx = Context(caller_id=contract_id, actions=actions)
        self.call_public_method(message.contract, 'donate', ctx)
