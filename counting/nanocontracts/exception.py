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


class NCFail(Exception):
    """Raised by a contract call that must be aborted.

    The runner discards every write done during a call that raised it.
    """


class NCStorageError(NCFail):
    """Raised when a record cannot be read from or written to the storage."""


class NCSerializationError(NCStorageError):
    """Raised when a stored record does not decode into its expected shape."""


class NCInvalidContext(NCFail):
    """Raised when a call context is malformed."""


class NCForbiddenAction(NCFail):
    """Raised when a method is called with actions it does not accept."""


class NCMethodNotFound(NCFail):
    """Raised when the called method does not exist or has the wrong kind."""


class NCContractNotFound(NCFail):
    """Raised when no contract is registered under the given id."""


class NCContractAlreadyExists(NCFail):
    """Raised when creating a contract under an id already in use."""


class NCMigrationForbidden(NCFail):
    """Raised when someone other than the contract admin tries to migrate it."""


class NCRecursionError(NCFail):
    """Raised when nested contract calls exceed the configured depth."""


class NCInsufficientFunds(NCFail):
    """Raised when a transfer exceeds the balance of its sender."""


class InvalidAddress(NCFail):
    """Raised when a string is not a well-formed address."""

    def __init__(self, address: str) -> None:
        super().__init__(f'Invalid address {address}')
        self.address = address
