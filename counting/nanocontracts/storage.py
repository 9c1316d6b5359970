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

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from counting.nanocontracts.exception import NCSerializationError, NCStorageError
from counting.nanocontracts.types import ContractInfo

T = TypeVar('T')


class NCStorage(ABC):
    """Key/value storage of a single contract."""

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the raw value under `key`, raising KeyError if it is missing."""
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def has(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def snapshot(self) -> Any:
        """Return an opaque copy of the storage content to be given to `restore()`."""
        raise NotImplementedError

    @abstractmethod
    def restore(self, snapshot: Any) -> None:
        raise NotImplementedError


class NCMemoryStorage(NCStorage):
    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes:
        return self._data[key]

    def put(self, key: str, value: bytes) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> list[str]:
        return sorted(self._data)

    def snapshot(self) -> dict[str, bytes]:
        return dict(self._data)

    def restore(self, snapshot: dict[str, bytes]) -> None:
        self._data = dict(snapshot)


class Item(Generic[T]):
    """A single typed record stored as JSON under a fixed key."""

    def __init__(self, key: str, type_: Any) -> None:
        self.key = key
        self._adapter: TypeAdapter[T] = TypeAdapter(type_)

    def __repr__(self) -> str:
        return f'Item({self.key!r})'

    def load(self, storage: NCStorage) -> T:
        value = self.may_load(storage)
        if value is None:
            raise NCStorageError(f'{self.key} not found')
        return value

    def may_load(self, storage: NCStorage) -> Optional[T]:
        try:
            raw = storage.get(self.key)
        except KeyError:
            return None
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            raise NCSerializationError(f'cannot decode {self.key}: {e}') from e

    def save(self, storage: NCStorage, value: T) -> None:
        try:
            raw = self._adapter.dump_json(value)
        except (TypeError, ValueError) as e:
            raise NCSerializationError(f'cannot encode {self.key}: {e}') from e
        storage.put(self.key, raw)

    def remove(self, storage: NCStorage) -> None:
        storage.delete(self.key)

    def exists(self, storage: NCStorage) -> bool:
        return storage.has(self.key)


CONTRACT_INFO: Item[ContractInfo] = Item('contract_info', ContractInfo)


def get_contract_info(storage: NCStorage) -> ContractInfo:
    return CONTRACT_INFO.load(storage)


def set_contract_info(storage: NCStorage, name: str, version: str) -> None:
    CONTRACT_INFO.save(storage, ContractInfo(contract=name, version=version))
