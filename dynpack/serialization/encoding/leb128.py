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

"""
This module implements LEB128 for unsigned integers, the varint used for every length and count in the format.

LEB128 or Little Endian Base 128 is a variable-length code compression used to store arbitrarily large
integers in a small number of bytes.

References:
- https://en.wikipedia.org/wiki/LEB128
- https://webassembly.github.io/spec/core/binary/values.html#integers

Each byte holds 7 bits of data, low-order group first, and the high bit is set on every byte except the last one.
Signs are never encoded here, numbers carry their sign in the tag byte.

>>> se = Serializer.build_bytes_serializer()
>>> se.write_bytes(b'test')  # writes 74657374
>>> encode_leb128(se, 0)  # writes 00
>>> encode_leb128(se, 127)  # writes 7f
>>> encode_leb128(se, 128)  # writes 8001
>>> encode_leb128(se, 624485)  # writes e58e26
>>> bytes(se.finalize()).hex()
'74657374007f8001e58e26'

>>> data = bytes.fromhex('00 7f 8001 e58e26 74657374')
>>> de = Deserializer.build_bytes_deserializer(data)
>>> decode_leb128(de)  # reads 00
0
>>> decode_leb128(de)  # reads 7f
127
>>> decode_leb128(de)  # reads 8001
128
>>> decode_leb128(de)  # reads e58e26
624485
>>> bytes(de.read_all())  # reads 74657374
b'test'
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('e58e'))
>>> try:
...     decode_leb128(de)
... except MalformedVarintError as e:
...     print(*e.args)
buffer ended in the middle of a varint
"""

from dynpack.serialization import Deserializer, MalformedVarintError, OutOfDataError, Serializer


def encode_leb128(serializer: Serializer, value: int) -> None:
    """ Encodes a non-negative integer using LEB128.

    This module's docstring has more details on LEB128 and examples.
    """
    if value < 0:
        raise ValueError('cannot encode value <0 as unsigned')
    while True:
        byte = value & 0b0111_1111
        value >>= 7
        if value == 0:
            serializer.write_byte(byte)
            break
        serializer.write_byte(byte | 0b1000_0000)


def decode_leb128(deserializer: Deserializer, *, max_bytes: int | None = None) -> int:
    """ Decodes a LEB128-encoded non-negative integer.

    When `max_bytes` is given, a varint that did not terminate within that many bytes is rejected.
    """
    result = 0
    shift = 0
    while True:
        if max_bytes is not None and shift >= 7 * max_bytes:
            raise MalformedVarintError(f'varint longer than {max_bytes} bytes')
        try:
            byte = deserializer.read_byte()
        except OutOfDataError as e:
            raise MalformedVarintError('buffer ended in the middle of a varint') from e
        result |= (byte & 0b0111_1111) << shift
        shift += 7
        if (byte & 0b1000_0000) == 0:
            return result
