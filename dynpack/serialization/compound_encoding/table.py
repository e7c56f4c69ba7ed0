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
Encoding a table is equivalent to encoding a collection of 2-tuples, in canonical key order.

Layout: [0x80][N: unsigned leb128][key_0][value_0]...[key_N][value_N]

Keys are sorted by the name of their kind first ('boolean' < 'nil' < 'number' < 'string'), then by their natural
order, so equal tables always produce the same bytes regardless of insertion order.

>>> from dynpack.serialization.encoding.bool import encode_bool, decode_bool
>>> from dynpack.serialization.encoding.utf8 import encode_string, decode_string
>>> from dynpack.pool import StringPool
>>> pool = StringPool()
>>> encode_key = lambda se, key: encode_string(se, key, pool)
>>> decode_key = lambda de: decode_string(de, pool)
>>> se = Serializer.build_bytes_serializer()
>>> value = {
...     'foo': False,
...     'bar': True,
...     'baz': False,
... }
>>> encode_table(se, value, encode_key, encode_bool)
>>> bytes(se.finalize()).hex()
'800363626172416362617a4063666f6f40'

Breakdown of the result:

    80: table tag
    03: 3 in leb128, the number of entries
    63626172: 'bar'
    41: True
    6362617a: 'baz'
    40: False
    63666f6f: 'foo'
    40: False

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('800363626172416362617a4063666f6f40'))
>>> decode_table(de, decode_key, decode_bool)
{'bar': True, 'baz': False, 'foo': False}
>>> de.finalize()
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from dynpack.serialization import BadDataError, Deserializer, Serializer, TooLongError
from dynpack.serialization.encoding.leb128 import decode_leb128, encode_leb128
from dynpack.serialization.encoding.tag import Kind, decode_tag, encode_tag
from dynpack.value import kind_name

from . import Decoder, Encoder

KT = TypeVar('KT')
VT = TypeVar('VT')


def table_sort_key(key: Any) -> tuple[str, Any]:
    """Canonical ordering of table keys.

    >>> sorted([2, 'a', 1.5, True, 'B'], key=table_sort_key)
    [True, 1.5, 2, 'B', 'a']
    """
    return kind_name(key), key


def encode_table(
    serializer: Serializer,
    values_mapping: Mapping[KT, VT],
    key_encoder: Encoder[KT],
    value_encoder: Encoder[VT],
) -> None:
    items = sorted(values_mapping.items(), key=lambda item: table_sort_key(item[0]))
    encode_tag(serializer, Kind.TABLE)
    encode_leb128(serializer, len(items))
    for key, value in items:
        key_encoder(serializer, key)
        value_encoder(serializer, value)


def decode_table(
    deserializer: Deserializer,
    key_decoder: Decoder[KT],
    value_decoder: Decoder[VT],
    *,
    max_length: int | None = None,
    max_varint_bytes: int | None = None,
) -> dict[KT, VT]:
    payload = decode_tag(deserializer, Kind.TABLE)
    if payload != 0:
        raise BadDataError(f'table tag with payload {payload:#04x}')
    size = decode_leb128(deserializer, max_bytes=max_varint_bytes)
    if max_length is not None and size > max_length:
        raise TooLongError(f'table of {size} entries exceeds the maximum of {max_length}')
    result: dict[KT, VT] = {}
    for _ in range(size):
        key = key_decoder(deserializer)
        result[key] = value_decoder(deserializer)
    return result
