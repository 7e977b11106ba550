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

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from cmcache.conf.settings import CompiledFileSettings as Settings

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'CMCACHE_CONFIG_YAML'

# source name used when no yaml file is configured
DEFAULT_SOURCE = '<defaults>'


class _SettingsMetadata(NamedTuple):
    source: str
    settings: Settings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> Settings:
    """
    Returns the settings model.

    Loads the yaml file named by the 'CMCACHE_CONFIG_YAML' env var, if it is not set the defaults are used. Settings are
    loaded once per process.
    """
    source = os.environ.get(CONFIG_YAML_ENV_VAR, DEFAULT_SOURCE)
    return _load_settings_singleton(source)


def get_settings_source() -> str:
    """ Returns the path of the YAML file that was loaded, or '<defaults>'.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def reset_global_settings() -> None:
    """Forget the loaded settings, only meant for tests."""
    global _settings_singleton
    _settings_singleton = None


def _load_settings_singleton(source: str) -> Settings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')

        return _settings_singleton.settings

    _settings_singleton = _SettingsMetadata(
        source=source,
        settings=_load_settings(source),
    )

    return _settings_singleton.settings


def _load_settings(source: str) -> Settings:
    if source == DEFAULT_SOURCE:
        return Settings()
    log = logger.new()
    log.info('load settings', filepath=source)
    return Settings.from_yaml(filepath=source)
