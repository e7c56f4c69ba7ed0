import pytest

from dynpack.serialization import Deserializer, MalformedVarintError, Serializer
from dynpack.serialization.encoding.leb128 import decode_leb128, encode_leb128
from dynpack.utils.leb128 import read_varint, write_varint


def _do_round_trip_test_with_size(n: int, encoded_size: int) -> None:
    se = Serializer.build_bytes_serializer()
    encode_leb128(se, n)
    encoded_n = bytes(se.finalize())
    assert len(encoded_n) == encoded_size
    de = Deserializer.build_bytes_deserializer(encoded_n)
    assert decode_leb128(de) == n
    de.finalize()


EXAMPLES_BY_SIZE = {
    1: [
        0,
        1,
        2,
        63,
        64,
        126,
        127,
    ],
    2: [
        128,
        129,
        1000,
        8191,
        8192,
        16382,
        16383,
    ],
    3: [
        16384,
        100000,
        1048575,
        1048576,
        2097151,
    ],
}


def gen_test_cases():
    test_cases = []
    # convert example to test cases
    for size, examples in EXAMPLES_BY_SIZE.items():
        for example in examples:
            test_cases.append((example, size))
    # generate additional test cases
    for size in range(4, 20):
        n_lo = 1 << (7 * (size - 1))
        n_hi = (1 << (7 * size)) - 1
        test_cases.append((n_lo, size))
        test_cases.append((n_hi, size))
    return test_cases


@pytest.mark.parametrize('n, encoded_size', gen_test_cases())
def test_round_trip_with_size(n, encoded_size):
    _do_round_trip_test_with_size(n, encoded_size)


def test_continuation_bits():
    # every byte but the last has the high bit set, low-order groups come first
    assert write_varint(300) == bytes([0b1010_1100, 0b0000_0010])
    assert write_varint(2**31 - 1) == bytes([0xff, 0xff, 0xff, 0xff, 0x07])


def test_negative_value_is_rejected():
    with pytest.raises(ValueError):
        write_varint(-1)


@pytest.mark.parametrize('data', [b'', b'\x80', b'\xff\xff', b'\xe5\x8e'])
def test_truncated_varint(data):
    de = Deserializer.build_bytes_deserializer(data)
    with pytest.raises(MalformedVarintError):
        decode_leb128(de)


def test_max_bytes():
    data = write_varint(1 << 70)
    assert len(data) == 11
    de = Deserializer.build_bytes_deserializer(data)
    with pytest.raises(MalformedVarintError):
        decode_leb128(de, max_bytes=10)
    de = Deserializer.build_bytes_deserializer(data)
    assert decode_leb128(de, max_bytes=11) == 1 << 70


def test_read_varint_offsets():
    data = b'\x00' + write_varint(128) + write_varint(5)
    value, offset = read_varint(data, 1)
    assert (value, offset) == (128, 3)
    value, offset = read_varint(data, offset)
    assert (value, offset) == (5, 4)
    value, offset = read_varint(data)
    assert (value, offset) == (0, 1)


def test_read_varint_past_the_end():
    with pytest.raises(MalformedVarintError):
        read_varint(b'\x01', 1)
    with pytest.raises(ValueError):
        read_varint(b'\x01', -1)
