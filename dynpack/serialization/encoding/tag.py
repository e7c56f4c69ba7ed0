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
This module implements the tag byte that starts every encoded unit.

Layout: [kind: 3 bits][payload: 5 bits]

>>> hex(make_tag(Kind.STRING, 5))
'0x65'
>>> split_tag(0x65)
(<Kind.STRING: 3>, 5)
>>> split_tag(0xe0)
(<Kind.RUN_LENGTH: 7>, 0)

>>> de = Deserializer.build_bytes_deserializer(bytes([0x41]))
>>> decode_tag(de, Kind.BOOL)
1
>>> de = Deserializer.build_bytes_deserializer(bytes([0x41]))
>>> try:
...     decode_tag(de, Kind.NIL)
... except UnknownTagError as e:
...     print(*e.args)
expected a nil tag, got boolean
"""

from enum import IntEnum

from dynpack.serialization import Deserializer, Serializer, UnknownTagError

KIND_SHIFT = 5
PAYLOAD_MASK = 0b0001_1111


class Kind(IntEnum):
    NIL = 0
    NUMBER = 1
    BOOL = 2
    STRING = 3
    TABLE = 4
    ARRAY = 5
    STRING_REF = 6
    RUN_LENGTH = 7

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    Kind.NIL: 'nil',
    Kind.NUMBER: 'number',
    Kind.BOOL: 'boolean',
    Kind.STRING: 'string',
    Kind.TABLE: 'table',
    Kind.ARRAY: 'array',
    Kind.STRING_REF: 'string reference',
    Kind.RUN_LENGTH: 'run-length unit',
}


def make_tag(kind: Kind, payload: int = 0) -> int:
    assert 0 <= payload <= PAYLOAD_MASK, payload
    return (kind << KIND_SHIFT) | payload


def split_tag(tag: int) -> tuple[Kind, int]:
    """Split a tag byte into its kind and its 5-bit payload, every 3-bit selector maps to a kind."""
    return Kind(tag >> KIND_SHIFT), tag & PAYLOAD_MASK


def encode_tag(serializer: Serializer, kind: Kind, payload: int = 0) -> None:
    serializer.write_byte(make_tag(kind, payload))


def decode_tag(deserializer: Deserializer, expected: Kind) -> int:
    """Read a tag byte of the expected kind and return its payload."""
    kind, payload = split_tag(deserializer.read_byte())
    if kind is not expected:
        raise UnknownTagError(f'expected a {expected.label} tag, got {kind.label}')
    return payload
