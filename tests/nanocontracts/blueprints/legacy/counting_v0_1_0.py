from counting.nanocontracts.blueprint import Blueprint
from counting.nanocontracts.blueprints.counting_messages import ValueResp
from counting.nanocontracts.blueprints.counting_state import (
    CONTRACT_NAME,
    LEGACY_COUNTER,
    LEGACY_MINIMAL_DONATION,
    LEGACY_OWNER,
)
from counting.nanocontracts.context import Context
from counting.nanocontracts.storage import set_contract_info
from counting.nanocontracts.types import Coin, Response, public, view


class CountingContractV0_1_0(Blueprint):
    """Counting contract as shipped in 0.1.0: one record per field, no parent."""

    @public(allow_deposit=True)
    def initialize(self, ctx: Context, counter: int, minimal_donation: Coin) -> Response:
        set_contract_info(self.storage, CONTRACT_NAME, '0.1.0')
        LEGACY_COUNTER.save(self.storage, counter)
        LEGACY_MINIMAL_DONATION.save(self.storage, minimal_donation)
        LEGACY_OWNER.save(self.storage, ctx.caller_id)
        return Response().add_attribute('action', 'instantiate')

    @public
    def increment(self, ctx: Context, value: int) -> Response:
        counter = LEGACY_COUNTER.load(self.storage) + value
        LEGACY_COUNTER.save(self.storage, counter)
        return Response().add_attribute('action', 'increment').add_attribute('counter', counter)

    @view
    def value(self) -> ValueResp:
        return ValueResp(value=LEGACY_COUNTER.load(self.storage))
