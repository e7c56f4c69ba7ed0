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
This module implements utf-8 string encoding, inline or as a reference into a string pool.

Lengths are measured in utf-8 bytes. The encoder picks the first form that applies:

1. 1 to 31 bytes: `[0x60 | length][bytes]`, the pool is never consulted
2. more than 31 bytes and already pooled: a string reference
3. 0 or 32 to 255 bytes: `[0x60][length: 1 byte][bytes]`
4. more than 255 bytes: the string is appended to the pool and a string reference is written

A string tag with a zero payload is always followed by a length byte, that is how the empty string (`6000`) is told
apart from the short form.

String references are `[0xc0][index: 1 byte]` for slots up to 255 and `[0xc1][index: 2 bytes little-endian]` above
that, so the width is read from the tag and never inferred from the state of the pool.

>>> pool = StringPool()
>>> se = Serializer.build_bytes_serializer()
>>> encode_string(se, 'foobar', pool)  # writes 66666f6f626172
>>> encode_string(se, '', pool)  # writes 6000
>>> encode_string(se, 'x' * 300, pool)  # interns into slot 0, writes c000
>>> encode_string(se, 'x' * 300, pool)  # writes c000
>>> bytes(se.finalize()).hex()
'66666f6f6261726000c000c000'
>>> len(pool)
1

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('66666f6f6261726000c000c000'))
>>> decode_string(de, pool)  # reads 66666f6f626172
'foobar'
>>> decode_string(de, pool)  # reads 6000
''
>>> decode_string(de, pool) == 'x' * 300  # reads c000
True
>>> decode_string(de, pool) == 'x' * 300  # reads c000
True
>>> de.finalize()

A reference can only be resolved by the pool that the encoder used:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('c000'))
>>> try:
...     decode_string(de, StringPool())
... except InvalidStringRefError as e:
...     print(*e.args)
string pool has no entry 0 (size 0)
"""

from dynpack.pool import StringPool
from dynpack.serialization import (
    BadDataError,
    Deserializer,
    InvalidStringRefError,
    OutOfDataError,
    PoolExhaustedError,
    Serializer,
    TruncatedStringError,
    UnknownTagError,
)

from .tag import Kind, encode_tag, split_tag

SHORT_STRING_MAX_LENGTH = 31
MEDIUM_STRING_MAX_LENGTH = 255

REF_NARROW = 0x00
REF_WIDE = 0x01
REF_NARROW_MAX_INDEX = 0xff
REF_WIDE_MAX_INDEX = 0xffff

__all__ = ['encode_string', 'decode_string', 'encode_string_ref', 'decode_string_ref', 'InvalidStringRefError']


def encode_string(serializer: Serializer, value: str, pool: StringPool) -> None:
    """ Encodes a string inline or as a pool reference, long strings get interned into the pool.

    This modules's docstring has more details and examples.
    """
    assert isinstance(value, str)
    data = value.encode('utf-8')
    length = len(data)
    if 0 < length <= SHORT_STRING_MAX_LENGTH:
        encode_tag(serializer, Kind.STRING, length)
        serializer.write_bytes(data)
        return
    if length > SHORT_STRING_MAX_LENGTH:
        index = pool.find(value)
        if index is not None:
            encode_string_ref(serializer, index)
            return
    if length <= MEDIUM_STRING_MAX_LENGTH:
        encode_tag(serializer, Kind.STRING)
        serializer.write_byte(length)
        serializer.write_bytes(data)
        return
    encode_string_ref(serializer, pool.append(value))


def encode_string_ref(serializer: Serializer, index: int) -> None:
    if index <= REF_NARROW_MAX_INDEX:
        encode_tag(serializer, Kind.STRING_REF, REF_NARROW)
        serializer.write_byte(index)
    elif index <= REF_WIDE_MAX_INDEX:
        encode_tag(serializer, Kind.STRING_REF, REF_WIDE)
        serializer.write_struct((index,), '<H')
    else:
        raise PoolExhaustedError(f'string pool index {index} does not fit in a reference')


def decode_string(deserializer: Deserializer, pool: StringPool) -> str:
    """ Decodes a string in any of its forms, references are resolved against the given pool.

    This modules's docstring has more details and examples.
    """
    kind, payload = split_tag(deserializer.peek_byte())
    if kind is Kind.STRING_REF:
        return pool.get(decode_string_ref(deserializer))
    if kind is not Kind.STRING:
        raise UnknownTagError(f'expected a string tag, got {kind.label}')
    deserializer.read_byte()
    try:
        length = payload if payload else deserializer.read_byte()
        data = deserializer.read_bytes(length)
    except OutOfDataError as e:
        raise TruncatedStringError('string is longer than the remaining buffer') from e
    try:
        return bytes(data).decode('utf-8')
    except UnicodeDecodeError as e:
        raise BadDataError('string is not valid utf-8') from e


def decode_string_ref(deserializer: Deserializer) -> int:
    """ Decodes a string reference and returns the pool slot index it points to.
    """
    kind, payload = split_tag(deserializer.read_byte())
    if kind is not Kind.STRING_REF:
        raise UnknownTagError(f'expected a string reference tag, got {kind.label}')
    if payload == REF_NARROW:
        return deserializer.read_byte()
    elif payload == REF_WIDE:
        index, = deserializer.read_struct('<H')
        return index
    else:
        raise BadDataError(f'string reference tag with unknown width {payload:#04x}')
