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
The value encoder is the single entry point that maps any supported value to the encoder of its kind.

When encoding, the runtime type of the value selects the encoder. When decoding, the kind in the leading tag byte
selects the decoder. Arrays and tables recurse back into this module for their elements.

>>> ctx = CodecContext(pool=StringPool())
>>> se = Serializer.build_bytes_serializer()
>>> encode_value(se, {'a': [1, 1, 1, 1], 'b': None, 'c': -2.5}, ctx)
>>> data = bytes(se.finalize())
>>> data.hex()
'80036161a004e0042000016162006163300100000000000004c0'

>>> de = Deserializer.build_bytes_deserializer(data)
>>> decode_value(de, ctx)
{'a': [1, 1, 1, 1], 'b': None, 'c': -2.5}
>>> de.finalize()

Mappings whose keys are exactly 1..N are arrays:

>>> se = Serializer.build_bytes_serializer()
>>> encode_value(se, {2: 'b', 1: 'a'}, ctx)
>>> bytes(se.finalize()).hex()
'a00261616162'
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import Any

from typing_extensions import assert_never

from dynpack.pool import StringPool
from dynpack.serialization import (
    Deserializer,
    NestingTooDeepError,
    Serializer,
    UnknownTagError,
    UnsupportedTypeError,
)
from dynpack.serialization.encoding.bool import decode_bool, encode_bool
from dynpack.serialization.encoding.nil import decode_nil, encode_nil
from dynpack.serialization.encoding.number import decode_number, encode_number
from dynpack.serialization.encoding.tag import Kind, split_tag
from dynpack.serialization.encoding.utf8 import decode_string, encode_string
from dynpack.value import DEFAULT_MAX_DEPTH, Scalar, Value, is_array_keys, values_equal

from .array import decode_array, encode_array
from .table import decode_table, encode_table


@dataclass(slots=True, kw_only=True)
class CodecContext:
    """State shared by every step of a single encode or decode call."""
    pool: StringPool
    max_depth: int = DEFAULT_MAX_DEPTH
    max_container_length: int | None = None
    max_varint_bytes: int | None = None
    depth: int = 0

    @contextmanager
    def nested(self) -> Iterator[None]:
        if self.depth >= self.max_depth:
            raise NestingTooDeepError(f'values nested deeper than {self.max_depth} levels')
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def same_value(self, a: Any, b: Any) -> bool:
        """Run detection equality, bounded by the nesting levels left below the current depth."""
        return values_equal(a, b, max_depth=self.max_depth - self.depth)


def encode_value(serializer: Serializer, value: Value, ctx: CodecContext) -> None:
    """ Encode any supported value, recursing into arrays and tables.
    """
    match value:
        case None:
            encode_nil(serializer, value)
        case bool():
            encode_bool(serializer, value)
        case int() | float():
            encode_number(serializer, value)
        case str():
            encode_string(serializer, value, ctx.pool)
        case list() | tuple():
            with ctx.nested():
                encode_array(serializer, value, partial(encode_value, ctx=ctx), eq=ctx.same_value)
        case Mapping():
            with ctx.nested():
                if is_array_keys(value):
                    elements = [value[i] for i in range(1, len(value) + 1)]
                    encode_array(serializer, elements, partial(encode_value, ctx=ctx), eq=ctx.same_value)
                else:
                    # keys are checked before sorting, containers as keys may not even be comparable
                    for key in value:
                        check_key(key)
                    encode_table(serializer, value, partial(encode_key, ctx=ctx), partial(encode_value, ctx=ctx))
        case _:
            raise UnsupportedTypeError(f'type not supported: {type(value).__name__}')


def check_key(key: Any) -> None:
    if key is not None and not isinstance(key, (bool, int, float, str)):
        raise UnsupportedTypeError(f'table key type not supported: {type(key).__name__}')


def encode_key(serializer: Serializer, key: Any, ctx: CodecContext) -> None:
    """ Encode a table key, only scalars are accepted.
    """
    check_key(key)
    encode_value(serializer, key, ctx)


def decode_value(deserializer: Deserializer, ctx: CodecContext) -> Value:
    """ Decode the next value, the kind is read from the leading tag byte.
    """
    kind, _ = split_tag(deserializer.peek_byte())
    match kind:
        case Kind.NIL:
            return decode_nil(deserializer)
        case Kind.BOOL:
            return decode_bool(deserializer)
        case Kind.NUMBER:
            return decode_number(deserializer, max_varint_bytes=ctx.max_varint_bytes)
        case Kind.STRING | Kind.STRING_REF:
            return decode_string(deserializer, ctx.pool)
        case Kind.ARRAY:
            with ctx.nested():
                return decode_array(
                    deserializer,
                    partial(decode_value, ctx=ctx),
                    max_length=ctx.max_container_length,
                    max_varint_bytes=ctx.max_varint_bytes,
                )
        case Kind.TABLE:
            with ctx.nested():
                return decode_table(
                    deserializer,
                    partial(decode_key, ctx=ctx),
                    partial(decode_value, ctx=ctx),
                    max_length=ctx.max_container_length,
                    max_varint_bytes=ctx.max_varint_bytes,
                )
        case Kind.RUN_LENGTH:
            raise UnknownTagError('run-length unit outside of an array')
        case _:
            assert_never(kind)


def decode_key(deserializer: Deserializer, ctx: CodecContext) -> Scalar:
    """ Decode a table key, containers are rejected because they cannot be used as dict keys.
    """
    kind, _ = split_tag(deserializer.peek_byte())
    if kind in (Kind.ARRAY, Kind.TABLE):
        raise UnknownTagError(f'a {kind.label} cannot be a table key')
    key = decode_value(deserializer, ctx)
    assert not isinstance(key, (list, dict))
    return key
