# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Values handled by the codec are plain Python objects:

    None                       nil
    bool                       boolean
    int, float                 number
    str                        string
    list, tuple                array
    dict (any Mapping)         table, or array when its keys are exactly 1..N

Decoding always produces `None`, `bool`, `int`, `float`, `str`, `list` and `dict`.
"""

import math
import struct
from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias, Union

from dynpack.serialization import NestingTooDeepError, UnsupportedTypeError

Scalar: TypeAlias = Union[None, bool, int, float, str]
Value: TypeAlias = Union[Scalar, Sequence['Value'], Mapping[Any, 'Value']]

_DOUBLE = struct.Struct('<d')

# containers nested deeper than this are rejected
DEFAULT_MAX_DEPTH = 256


def kind_name(value: Any) -> str:
    """Name of the kind of a value, as used to sort table keys.

    >>> [kind_name(v) for v in (None, True, 1, 1.5, 'a', [], {})]
    ['nil', 'boolean', 'number', 'number', 'string', 'table', 'table']
    """
    match value:
        case None:
            return 'nil'
        case bool():
            return 'boolean'
        case int() | float():
            return 'number'
        case str():
            return 'string'
        case list() | tuple() | Mapping():
            return 'table'
        case _:
            raise UnsupportedTypeError(f'type not supported: {type(value).__name__}')


def is_array_keys(mapping: Mapping[Any, Any]) -> bool:
    """Whether the keys of a mapping are exactly the integers 1..N, in any order.

    >>> is_array_keys({2: 'b', 1: 'a'}), is_array_keys({}), is_array_keys({1: 'a', 3: 'c'})
    (True, True, False)
    >>> is_array_keys({True: 'a'}), is_array_keys({0: 'a'})
    (False, False)
    """
    size = len(mapping)
    for key in mapping:
        if not isinstance(key, int) or isinstance(key, bool):
            return False
        if not 1 <= key <= size:
            return False
    # keys are distinct, so N distinct integers in 1..N cover the whole range
    return True


def values_equal(a: Any, b: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """Kind-aware equality, stricter than `==`, two values are equal when they encode to the same bytes.

    Booleans never equal numbers, floats compare by their bits so `-0.0` differs from `0.0` and a NaN equals itself.
    Table keys follow the same rules, so `{1: 'a'}` differs from `{True: 'a'}`.

    >>> values_equal(1, True), values_equal(0.0, -0.0), values_equal(float('nan'), float('nan'))
    (False, False, True)
    >>> values_equal([1, {'a': None}], (1, {'a': None})), values_equal(2, 2.0)
    (True, True)
    >>> values_equal({1: 'a'}, {True: 'a'}), values_equal({0.0: 'a'}, {-0.0: 'a'})
    (False, False)

    At most `max_depth` levels of containers are compared, past that `NestingTooDeepError` is raised.
    """
    if a is b:
        return True
    kind = kind_name(a)
    if kind != kind_name(b):
        return False
    match kind:
        case 'number':
            if isinstance(a, float) or isinstance(b, float):
                try:
                    return _DOUBLE.pack(float(a)) == _DOUBLE.pack(float(b))
                except OverflowError:
                    return False
            return a == b
        case 'table':
            if max_depth <= 0:
                raise NestingTooDeepError('values nested too deep to be compared')
            if isinstance(a, Mapping) or isinstance(b, Mapping):
                return _tables_equal(a, b, max_depth - 1)
            return len(a) == len(b) and all(values_equal(x, y, max_depth=max_depth - 1) for x, y in zip(a, b))
        case _:
            return a == b


def _key_id(key: Any) -> tuple[str, Any]:
    """Identity of a table key that tells apart keys Python treats as the same, like `1` and `True`."""
    kind = kind_name(key)
    if isinstance(key, float):
        if key.is_integer() and not (key == 0 and math.copysign(1.0, key) < 0):
            # integral floats other than -0.0 encode exactly like the int
            return kind, int(key)
        return kind, _DOUBLE.pack(key)
    return kind, key


def _tables_equal(a: Any, b: Any, max_depth: int) -> bool:
    a_items = {_key_id(key): value for key, value in _as_items(a).items()}
    b_items = {_key_id(key): value for key, value in _as_items(b).items()}
    if len(a_items) != len(b_items):
        return False
    for key_id, value in a_items.items():
        if key_id not in b_items or not values_equal(value, b_items[key_id], max_depth=max_depth):
            return False
    return True


def _as_items(table: Any) -> Mapping[Any, Any]:
    if isinstance(table, Mapping):
        return table
    return {i: v for i, v in enumerate(table, start=1)}
