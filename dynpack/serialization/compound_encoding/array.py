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
An array is a sequence of elements where runs of equal elements are collapsed.

Layout: [0xa0][N: unsigned leb128][unit_0]...[unit_M]

Each unit is either a single encoded element or a run-length unit standing for `count` copies of one element:

    [0xe0][count: unsigned leb128][element]

The encoder scans left to right and greedily collapses every run of at least 4 equal elements, shorter runs are
written element by element. `N` counts elements, not units.

>>> from dynpack.serialization.encoding.bool import encode_bool, decode_bool
>>> se = Serializer.build_bytes_serializer()
>>> encode_array(se, [True, True, False, False, False, False, False, True], encode_bool)
>>> bytes(se.finalize()).hex()
'a0084141e0054041'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('a0084141e0054041'))
>>> decode_array(de, decode_bool)
[True, True, False, False, False, False, False, True]
>>> de.finalize()
"""

import copy
from collections.abc import Iterator, Sequence
from typing import Callable, TypeVar

from dynpack.serialization import BadDataError, Deserializer, Serializer, TooLongError
from dynpack.serialization.encoding.leb128 import decode_leb128, encode_leb128
from dynpack.serialization.encoding.tag import Kind, decode_tag, encode_tag, split_tag
from dynpack.value import values_equal

from . import Decoder, Encoder

T = TypeVar('T')

RUN_LENGTH_THRESHOLD = 4


def iter_runs(values: Sequence[T], eq: Callable[[T, T], bool] = values_equal) -> Iterator[tuple[T, int]]:
    """Group consecutive equal elements, yielding each element with the length of its run.

    >>> list(iter_runs([1, 1, 2, 1]))
    [(1, 2), (2, 1), (1, 1)]
    """
    i = 0
    while i < len(values):
        value = values[i]
        j = i + 1
        while j < len(values) and eq(value, values[j]):
            j += 1
        yield value, j - i
        i = j


def encode_array(
    serializer: Serializer,
    values: Sequence[T],
    encoder: Encoder[T],
    *,
    eq: Callable[[T, T], bool] = values_equal,
) -> None:
    encode_tag(serializer, Kind.ARRAY)
    encode_leb128(serializer, len(values))
    for value, count in iter_runs(values, eq):
        if count >= RUN_LENGTH_THRESHOLD:
            encode_tag(serializer, Kind.RUN_LENGTH)
            encode_leb128(serializer, count)
            encoder(serializer, value)
        else:
            for _ in range(count):
                encoder(serializer, value)


def decode_array(
    deserializer: Deserializer,
    decoder: Decoder[T],
    *,
    max_length: int | None = None,
    max_varint_bytes: int | None = None,
) -> list[T]:
    payload = decode_tag(deserializer, Kind.ARRAY)
    if payload != 0:
        raise BadDataError(f'array tag with payload {payload:#04x}')
    length = decode_leb128(deserializer, max_bytes=max_varint_bytes)
    if max_length is not None and length > max_length:
        raise TooLongError(f'array of {length} elements exceeds the maximum of {max_length}')
    result: list[T] = []
    while len(result) < length:
        kind, payload = split_tag(deserializer.peek_byte())
        if kind is not Kind.RUN_LENGTH:
            result.append(decoder(deserializer))
            continue
        deserializer.read_byte()
        if payload != 0:
            raise BadDataError(f'run-length tag with payload {payload:#04x}')
        count = decode_leb128(deserializer, max_bytes=max_varint_bytes)
        if count == 0 or len(result) + count > length:
            raise BadDataError(f'run of {count} elements does not fit in an array of {length}')
        value = decoder(deserializer)
        result.append(value)
        # copies, so that decoded containers are never shared between slots
        result.extend(copy.deepcopy(value) for _ in range(count - 1))
    return result
