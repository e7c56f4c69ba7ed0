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

from dynpack.serialization import Deserializer, Serializer
from dynpack.serialization.encoding.leb128 import decode_leb128, encode_leb128
from dynpack.serialization.types import Buffer


def write_varint(value: int) -> bytes:
    """
    Receive a non-negative integer and return its varint bytes.

    >>> write_varint(0) == bytes([0x00])
    True
    >>> write_varint(624485) == bytes([0xE5, 0x8E, 0x26])
    True
    """
    serializer = Serializer.build_bytes_serializer()
    encode_leb128(serializer, value)
    return bytes(serializer.finalize())


def read_varint(data: Buffer, offset: int = 0, *, max_bytes: int | None = None) -> tuple[int, int]:
    """
    Read a varint starting at `offset`, returning its value and the offset right after it.

    >>> read_varint(b'test' + bytes([0xE5, 0x8E, 0x26]) + b'test', 4)
    (624485, 7)
    >>> try:
    ...     read_varint(bytes([0xE5, 0x8E]))
    ... except ValueError as e:
    ...     print(e)
    buffer ended in the middle of a varint
    """
    if offset < 0:
        raise ValueError('offset cannot be negative')
    deserializer = Deserializer.build_bytes_deserializer(memoryview(data)[offset:])
    value = decode_leb128(deserializer, max_bytes=max_bytes)
    return value, offset + deserializer.cur_pos()
