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

import importlib
import logging
import os
from functools import lru_cache

from counting.conf.settings import CountingSettings

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = 'COUNTING_CONFIG_FILE'
DEFAULT_CONFIG_MODULE = 'counting.conf.mainnet'


@lru_cache(maxsize=None)
def get_settings() -> CountingSettings:
    """Return the settings of the module named by COUNTING_CONFIG_FILE.

    The module must expose a `SETTINGS` attribute. The result is cached, call
    `get_settings.cache_clear()` after changing the environment.
    """
    module_path = os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_MODULE)
    module = importlib.import_module(module_path)
    settings = getattr(module, 'SETTINGS', None)
    if not isinstance(settings, CountingSettings):
        raise TypeError(f'{module_path}.SETTINGS must be a CountingSettings instance')
    logger.debug('loaded settings for network %s from %s', settings.NETWORK_NAME, module_path)
    return settings
