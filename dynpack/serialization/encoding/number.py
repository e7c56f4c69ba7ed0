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
This module implements encoding of numbers, either as a small exact integer or as a double.

Layout:

    [tag: 0x20 | sign][0x00][magnitude: unsigned leb128]   integer format
    [tag: 0x20 | sign][0x01][8-byte little-endian double]   float format

The sign flag (0x10) is set for negative values. A number takes the integer format when it has no fractional part and
its absolute value fits in 31 unsigned bits, the magnitude is then stored and the sign is restored from the flag.
Everything else, including `-0.0`, infinities and NaN, takes the float format, which stores the double itself so
decoding is bit-exact.

>>> se = Serializer.build_bytes_serializer()
>>> encode_number(se, 300)  # writes 2000ac02
>>> encode_number(se, -5)  # writes 300005
>>> encode_number(se, 1.5)  # writes 2001000000000000f83f
>>> bytes(se.finalize()).hex()
'2000ac023000052001000000000000f83f'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('2000ac023000052001000000000000f83f'))
>>> decode_number(de)  # reads 2000ac02
300
>>> decode_number(de)  # reads 300005
-5
>>> decode_number(de)  # reads 2001000000000000f83f
1.5
>>> de.finalize()

Integral floats in range come back as `int`, large integers come back as `float`:

>>> se = Serializer.build_bytes_serializer()
>>> encode_number(se, 3.0)
>>> encode_number(se, 2**31)
>>> de = Deserializer.build_bytes_deserializer(se.finalize())
>>> decode_number(de), decode_number(de)
(3, 2147483648.0)
"""

import math
import struct

from dynpack.serialization import BadDataError, Deserializer, Serializer, UnsupportedTypeError

from .leb128 import decode_leb128, encode_leb128
from .tag import Kind, decode_tag, encode_tag

SIGN_FLAG = 0x10

FORMAT_INTEGER = 0x00
FORMAT_FLOAT = 0x01

# magnitudes must fit in 31 unsigned bits to take the integer format
INTEGER_LIMIT = 1 << 31

_DOUBLE = struct.Struct('<d')


def is_negative(number: int | float) -> bool:
    if isinstance(number, int):
        return number < 0
    return math.copysign(1.0, number) < 0


def is_integer_encodable(number: int | float) -> bool:
    """Whether the number takes the integer format.

    >>> is_integer_encodable(2147483647), is_integer_encodable(2147483648), is_integer_encodable(-2147483647)
    (True, False, True)
    >>> is_integer_encodable(2.0), is_integer_encodable(2.5), is_integer_encodable(-0.0)
    (True, False, False)
    """
    if isinstance(number, int):
        return abs(number) < INTEGER_LIMIT
    if not math.isfinite(number) or not number.is_integer():
        return False
    if number == 0 and is_negative(number):
        return False
    return abs(number) < INTEGER_LIMIT


def encode_number(serializer: Serializer, number: int | float) -> None:
    """ Encode a number, choosing the integer format whenever it is exact.

    This modules's docstring has more details and examples.
    """
    assert isinstance(number, (int, float)) and not isinstance(number, bool)
    if is_integer_encodable(number):
        encode_tag(serializer, Kind.NUMBER, SIGN_FLAG if is_negative(number) else 0)
        serializer.write_byte(FORMAT_INTEGER)
        encode_leb128(serializer, abs(int(number)))
        return
    try:
        data = _DOUBLE.pack(float(number))
    except OverflowError as e:
        raise UnsupportedTypeError('integer too large to be represented as a double') from e
    encode_tag(serializer, Kind.NUMBER, SIGN_FLAG if is_negative(number) else 0)
    serializer.write_byte(FORMAT_FLOAT)
    serializer.write_bytes(data)


def decode_number(deserializer: Deserializer, *, max_varint_bytes: int | None = None) -> int | float:
    """ Decode a number in either format.

    This modules's docstring has more details and examples.
    """
    payload = decode_tag(deserializer, Kind.NUMBER)
    if payload & ~SIGN_FLAG:
        raise BadDataError(f'number tag with unknown flags {payload:#04x}')
    number_format = deserializer.read_byte()
    if number_format == FORMAT_INTEGER:
        magnitude = decode_leb128(deserializer, max_bytes=max_varint_bytes)
        return -magnitude if payload & SIGN_FLAG else magnitude
    elif number_format == FORMAT_FLOAT:
        value, = _DOUBLE.unpack(deserializer.read_bytes(_DOUBLE.size))
        return value
    else:
        raise BadDataError(f'{number_format:#04x} is not a valid number format')
