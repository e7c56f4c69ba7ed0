#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

r"""
Nil is the tag byte alone, with every payload bit cleared.

>>> se = Serializer.build_bytes_serializer()
>>> encode_nil(se, None)
>>> bytes(se.finalize())
b'\x00'

>>> de = Deserializer.build_bytes_deserializer(b'\x00')
>>> str(decode_nil(de))
'None'
>>> de.finalize()
"""

from dynpack.serialization import BadDataError, Deserializer, Serializer

from .tag import Kind, decode_tag, encode_tag


def encode_nil(serializer: Serializer, value: None) -> None:
    assert value is None
    encode_tag(serializer, Kind.NIL)


def decode_nil(deserializer: Deserializer) -> None:
    payload = decode_tag(deserializer, Kind.NIL)
    if payload != 0:
        raise BadDataError(f'nil tag with payload {payload:#04x}')
    return None
