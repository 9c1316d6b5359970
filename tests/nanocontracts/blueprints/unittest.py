from typing import Iterable, Optional

from counting.nanocontracts.blueprints.counting import CountingContract
from counting.nanocontracts.blueprints.counting_messages import Parent
from counting.nanocontracts.context import Context
from counting.nanocontracts.runner import Runner
from counting.nanocontracts.types import Address, Amount, Coin, NCDepositAction, coin
from tests import unittest

ATOM = 'atom'
OSMO = 'osmo'


def ten_atom() -> Coin:
    return coin(10, ATOM)


def zero_atom() -> Coin:
    return coin(0, ATOM)


class BlueprintTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.runner = Runner()

        self.owner_address = self.gen_random_address()
        self.sender_address = self.gen_random_address()
        self.other_address = self.gen_random_address()
        self.admin_address = self.gen_random_address()

    def create_context(
        self,
        caller_id: Address,
        funds: Iterable[Coin] = (),
    ) -> Context:
        actions = [NCDepositAction(fund.denom, Amount(fund.amount)) for fund in funds]
        return Context(caller_id=caller_id, actions=actions)

    def mint(self, address: Address, *funds: Coin) -> None:
        self.runner.bank.mint(address, funds)

    def balance(self, address: Address, denom: str = ATOM) -> int:
        return self.runner.bank.get_balance(address, denom)

    def create_counting_contract(
        self,
        minimal_donation: Coin,
        *,
        counter: int = 0,
        owner: Optional[Address] = None,
        parent: Optional[Parent] = None,
        funds: Iterable[Coin] = (),
    ) -> Address:
        contract_id = self.gen_random_address()
        ctx = self.create_context(owner or self.owner_address, funds)
        self.runner.create_contract(
            contract_id,
            CountingContract,
            ctx,
            counter,
            minimal_donation,
            parent,
            admin=self.admin_address,
        )
        return contract_id

    def get_counter(self, contract_id: Address) -> int:
        return self.runner.call_view_method(contract_id, 'value').value

    def donate(self, contract_id: Address, sender: Address, *funds: Coin):
        return self.runner.call_public_method(contract_id, 'donate', self.create_context(sender, funds))
