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

from types import MappingProxyType
from typing import Iterable, Mapping

from counting.nanocontracts.exception import NCInvalidContext
from counting.nanocontracts.types import Address, Coin, NCDepositAction


class Context:
    """Context passed to a public method call.

    Attributes:
        caller_id: identity that sent the call, a user or another contract.
        actions: deposits attached to the call, at most one per denomination.
    """

    __slots__ = ('caller_id', 'actions')

    def __init__(self, caller_id: Address, actions: Iterable[NCDepositAction] = ()) -> None:
        actions_map: dict[str, NCDepositAction] = {}
        for action in actions:
            if action.denom in actions_map:
                raise NCInvalidContext(f'duplicated denomination in actions: {action.denom}')
            if action.amount < 0:
                raise NCInvalidContext(f'negative deposit of {action.denom}')
            actions_map[action.denom] = action

        self.caller_id = caller_id
        self.actions: Mapping[str, NCDepositAction] = MappingProxyType(actions_map)

    @property
    def funds(self) -> list[Coin]:
        return [Coin(denom=action.denom, amount=action.amount) for action in self.actions.values()]

    def __repr__(self) -> str:
        return f'Context(caller_id={self.caller_id!r}, actions={list(self.actions.values())!r})'
