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

"""
Encodings of single fields of the compiled file format.

Each submodule handles one kind of field with an `encode_x(serializer, value)` and `decode_x(deserializer)` pair:

- `line`: decimal integers and counts, one per line;
- `float`: float text, including the NaN and infinity spellings;
- `bytes`: a length line, the raw payload and a closing newline.

Every field is newline terminated text, except the raw payload of byte strings, which may contain any byte. Fields
that hold other values are in `cmcache.serialization.compound_encoding`.
"""
