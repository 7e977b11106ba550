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

from cmcache.compiled_file.compiled_file import CompiledFile
from cmcache.compiled_file.marshal import Marshal, marshal, unmarshal, unmarshal_exact
from cmcache.compiled_file.tags import COMPILED_METHOD_VERSION, Tag

__all__ = [
    'COMPILED_METHOD_VERSION',
    'CompiledFile',
    'Marshal',
    'Tag',
    'marshal',
    'unmarshal',
    'unmarshal_exact',
]
