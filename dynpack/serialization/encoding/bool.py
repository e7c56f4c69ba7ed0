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
This module implements encoding a boolean value inside its tag byte.

The format is trivial and extremely simple:

- `False` maps to `b'\x40'`
- `True` maps to `b'\x41'`
- any other payload is invalid

>>> se = Serializer.build_bytes_serializer()
>>> encode_bool(se, False)
>>> bytes(se.finalize())
b'@'

>>> se = Serializer.build_bytes_serializer()
>>> encode_bool(se, True)
>>> bytes(se.finalize())
b'A'

>>> de = Deserializer.build_bytes_deserializer(b'\x40')
>>> decode_bool(de)
False
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(b'\x41')
>>> decode_bool(de)
True
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(b'\x42')
>>> try:
...     decode_bool(de)
... except BadDataError as e:
...     print(*e.args)
b'B' is not a valid boolean
"""

from dynpack.serialization import BadDataError, Deserializer, Serializer

from .tag import Kind, decode_tag, encode_tag, make_tag


def encode_bool(serializer: Serializer, value: bool) -> None:
    """ Encodes a boolean value in the payload of the tag byte.
    """
    assert isinstance(value, bool)
    encode_tag(serializer, Kind.BOOL, 0x01 if value else 0x00)


def decode_bool(deserializer: Deserializer) -> bool:
    """ Decodes a boolean value from the payload of the tag byte.
    """
    payload = decode_tag(deserializer, Kind.BOOL)
    if payload == 0:
        return False
    elif payload == 1:
        return True
    else:
        raw = bytes([make_tag(Kind.BOOL, payload)])
        raise BadDataError(f'{raw!r} is not a valid boolean')
