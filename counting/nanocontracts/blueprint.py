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

from counting.nanocontracts.blueprint_env import BlueprintEnvironment, NCSyscall
from counting.nanocontracts.storage import NCStorage


class Blueprint:
    """Base class of every contract blueprint.

    A blueprint instance lives for a single call. Everything it must remember
    goes through `self.storage`, and everything it needs from the outside world
    goes through `self.syscall`.

    Persistent fields are declared as `Item` keys rather than class
    attributes, so that records written by an older release can be read back
    under their old key and shape when migrating.
    """

    __slots__ = ('_env',)

    def __init__(self, env: BlueprintEnvironment) -> None:
        self._env = env

    @property
    def storage(self) -> NCStorage:
        return self._env.storage

    @property
    def syscall(self) -> NCSyscall:
        return self._env.syscall
