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

from typing import Optional

from counting.conf import CountingSettings, get_settings
from counting.conf.settings import BECH32_CHARSET
from counting.nanocontracts.exception import InvalidAddress
from counting.nanocontracts.types import Address

BECH32_SEPARATOR = '1'


class AddressValidator:
    """Checks the shape of bech32 style addresses: `<prefix>1<data>`.

    Only the format is verified, the checksum is left to the wallet that
    produced the address.
    """

    def __init__(self, settings: Optional[CountingSettings] = None) -> None:
        self._settings = settings or get_settings()
        self._charset = frozenset(BECH32_CHARSET)

    def is_valid(self, address: str) -> bool:
        settings = self._settings
        if not settings.MIN_ADDRESS_LENGTH <= len(address) <= settings.MAX_ADDRESS_LENGTH:
            return False
        if address != address.lower():
            return False
        prefix, separator, data = address.rpartition(BECH32_SEPARATOR)
        if not separator or prefix not in settings.ADDRESS_PREFIXES:
            return False
        return bool(data) and all(c in self._charset for c in data)

    def validate(self, address: str) -> Address:
        if not self.is_valid(address):
            raise InvalidAddress(address)
        return Address(address)
