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

from typing import NamedTuple, Protocol

from counting.nanocontracts.storage import NCStorage
from counting.nanocontracts.types import Address, Amount


class NCSyscall(Protocol):
    """Capabilities the host offers to a running contract."""

    def get_contract_id(self) -> Address:
        """Address of the running contract."""
        ...

    def get_all_balances(self) -> dict[str, Amount]:
        """Funds held by the running contract, by denomination, zero entries omitted."""
        ...

    def validate_address(self, address: str) -> Address:
        """Return `address` as an Address or raise InvalidAddress."""
        ...


class BlueprintEnvironment(NamedTuple):
    storage: NCStorage
    syscall: NCSyscall
