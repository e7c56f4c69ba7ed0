import math

import pytest

from dynpack.serialization import NestingTooDeepError, UnsupportedTypeError
from dynpack.value import is_array_keys, kind_name, values_equal


@pytest.mark.parametrize('value, expected', [
    (None, 'nil'),
    (False, 'boolean'),
    (0, 'number'),
    (-1.5, 'number'),
    (math.inf, 'number'),
    ('', 'string'),
    ([], 'table'),
    ((1,), 'table'),
    ({'a': 1}, 'table'),
])
def test_kind_name(value, expected):
    assert kind_name(value) == expected


def test_kind_name_unsupported():
    with pytest.raises(UnsupportedTypeError):
        kind_name(b'')


@pytest.mark.parametrize('mapping, expected', [
    ({}, True),
    ({1: 'a'}, True),
    ({3: 'c', 1: 'a', 2: 'b'}, True),
    ({1: 'a', 2: 'b', 4: 'd'}, False),
    ({0: 'a'}, False),
    ({1: 'a', 'x': 'b'}, False),
    ({1.0: 'a'}, False),
    ({True: 'a', 2: 'b'}, False),
])
def test_is_array_keys(mapping, expected):
    assert is_array_keys(mapping) is expected


@pytest.mark.parametrize('a, b, expected', [
    (None, None, True),
    (1, 1, True),
    (1, 1.0, True),
    (1, True, False),
    (0, False, False),
    (0.0, -0.0, False),
    (-0.0, -0.0, True),
    (math.nan, math.nan, True),
    ('a', 'a', True),
    ('a', 'b', False),
    (1, '1', False),
    ([1, 2], [1, 2], True),
    ([1, 2], (1, 2), True),
    ([1, 2], [1, 2, 3], False),
    ([True], [1], False),
    ({'a': [None]}, {'a': [None]}, True),
    ({'a': 1}, {'b': 1}, False),
    ({1: 'x', 2: 'y'}, ['x', 'y'], True),
    ({2: 'y'}, ['y'], False),
    (10**400, 1.0, False),
    ({1: 'a'}, {True: 'a'}, False),
    ({0.0: 'a'}, {-0.0: 'a'}, False),
    ({1.0: 'a'}, {1: 'a'}, True),
    ({-1.0: 'a'}, {-1: 'a'}, True),
    ([{1: 'a'}], [{True: 'a'}], False),
])
def test_values_equal(a, b, expected):
    assert values_equal(a, b) is expected
    assert values_equal(b, a) is expected


def test_values_equal_on_self_referencing_values():
    cyclic: list = []
    cyclic.append(cyclic)
    assert values_equal(cyclic, cyclic)


def test_values_equal_depth_limit():
    first: list = []
    first.append(first)
    second: list = []
    second.append(second)
    with pytest.raises(NestingTooDeepError):
        values_equal(first, second)
    assert values_equal([[[1]]], [[[1]]], max_depth=3)
    with pytest.raises(NestingTooDeepError):
        values_equal([[[1]]], [[[1]]], max_depth=2)
