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

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, NamedTuple, NewType, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Self

Address = NewType('Address', str)
Amount = NewType('Amount', int)

U64_MAX: int = 2**64 - 1


class Coin(BaseModel):
    """An amount of a single denomination."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    denom: str = Field(min_length=1)
    amount: int = Field(ge=0)


def coin(amount: int, denom: str) -> Coin:
    return Coin(denom=denom, amount=amount)


def coins(amount: int, denom: str) -> list[Coin]:
    return [coin(amount, denom)]


class ContractInfo(BaseModel):
    """Name and version of the code that last wrote a contract's storage."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    contract: str
    version: str


class NCDepositAction(NamedTuple):
    """Funds attached by the caller to a call."""

    denom: str
    amount: Amount


class BankSend(NamedTuple):
    """Instruction to transfer funds held by the contract to an address."""

    to_address: Address
    amount: tuple[Coin, ...]


class ForwardDonation(NamedTuple):
    """Instruction to call `donate` on another contract attaching `funds`."""

    contract: Address
    funds: tuple[Coin, ...]


OutboundMessage = Union[BankSend, ForwardDonation]


@dataclass
class Response:
    """Result of a public call: returned data, attributes and outbound messages.

    Messages are executed by the host after the method returns, and a failing
    message rolls back the whole call.
    """

    data: Optional[BaseModel] = None
    attributes: list[tuple[str, str]] = field(default_factory=list)
    messages: list[OutboundMessage] = field(default_factory=list)

    def add_attribute(self, key: str, value: Any) -> Self:
        self.attributes.append((key, str(value)))
        return self

    def add_message(self, message: OutboundMessage) -> Self:
        self.messages.append(message)
        return self

    def set_data(self, data: BaseModel) -> Self:
        self.data = data
        return self

    def get_attribute(self, key: str) -> Optional[str]:
        for attr_key, value in self.attributes:
            if attr_key == key:
                return value
        return None


class NCMethodType(Enum):
    PUBLIC = 'public'
    VIEW = 'view'
    MIGRATION = 'migration'


T = TypeVar('T', bound=Callable[..., Any])

NC_METHOD_TYPE_ATTR = '_nc_method_type'
NC_ALLOW_DEPOSIT_ATTR = '_nc_allow_deposit'


def _mark(fn: T, method_type: NCMethodType, allow_deposit: bool) -> T:
    setattr(fn, NC_METHOD_TYPE_ATTR, method_type)
    setattr(fn, NC_ALLOW_DEPOSIT_ATTR, allow_deposit)
    return fn


def public(fn: Optional[T] = None, *, allow_deposit: bool = False) -> Any:
    """Mark a blueprint method as callable by transactions.

    Can be used bare (`@public`) or with options (`@public(allow_deposit=True)`).
    """
    def decorator(inner: T) -> T:
        return _mark(inner, NCMethodType.PUBLIC, allow_deposit)

    if fn is None:
        return decorator
    return decorator(fn)


def view(fn: T) -> T:
    """Mark a blueprint method as a read-only query."""
    return _mark(fn, NCMethodType.VIEW, False)


def migration(fn: T) -> T:
    """Mark the blueprint method run by the host when the contract code is replaced."""
    return _mark(fn, NCMethodType.MIGRATION, False)


def get_method_type(fn: Any) -> Optional[NCMethodType]:
    return getattr(fn, NC_METHOD_TYPE_ATTR, None)


def allows_deposit(fn: Any) -> bool:
    return getattr(fn, NC_ALLOW_DEPOSIT_ATTR, False)
