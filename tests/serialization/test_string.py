import pytest

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
from dynpack.serialization.encoding.utf8 import decode_string, encode_string, encode_string_ref


def _encode(value: str, pool: StringPool) -> bytes:
    se = Serializer.build_bytes_serializer()
    encode_string(se, value, pool)
    return bytes(se.finalize())


def _decode(data: bytes, pool: StringPool) -> str:
    de = Deserializer.build_bytes_deserializer(data)
    value = decode_string(de, pool)
    de.finalize()
    return value


def test_short_strings_are_inline():
    pool = StringPool()
    assert _encode('a', pool).hex() == '6161'
    assert _encode('foobar', pool).hex() == '66666f6f626172'
    data = _encode('a' * 31, pool)
    assert data == b'\x7f' + b'a' * 31
    assert len(pool) == 0


def test_short_strings_never_use_the_pool():
    pool = StringPool()
    pool.append('abc')
    assert _encode('abc', pool).hex() == '63616263'


def test_empty_string():
    pool = StringPool()
    assert _encode('', pool).hex() == '6000'
    assert _decode(bytes.fromhex('6000'), pool) == ''


@pytest.mark.parametrize('length', [32, 100, 255])
def test_medium_strings_have_a_length_byte(length):
    pool = StringPool()
    data = _encode('m' * length, pool)
    assert data == bytes([0x60, length]) + b'm' * length
    assert len(pool) == 0
    assert _decode(data, pool) == 'm' * length


def test_length_is_measured_in_utf8_bytes():
    pool = StringPool()
    # 16 characters, but 32 bytes
    value = 'é' * 16
    data = _encode(value, pool)
    assert data[:2] == bytes([0x60, 32])
    assert _decode(data, pool) == value


def test_long_strings_are_interned():
    pool = StringPool()
    value = 'x' * 256
    assert _encode(value, pool).hex() == 'c000'
    assert list(pool) == [value]
    assert _encode(value, pool).hex() == 'c000'
    assert len(pool) == 1
    assert _encode('y' * 300, pool).hex() == 'c001'
    assert _decode(bytes.fromhex('c001'), pool) == 'y' * 300


def test_pooled_medium_string_is_referenced():
    pool = StringPool()
    pool.append('z' * 40)
    assert _encode('z' * 40, pool).hex() == 'c000'
    # a medium string that is not pooled is still written inline and not interned
    assert _encode('w' * 40, pool)[:2] == bytes([0x60, 40])
    assert len(pool) == 1


def test_wide_references():
    pool = StringPool()
    for i in range(256):
        pool.append(f'{i:0>300}')
    assert _encode(f'{255:0>300}', pool).hex() == 'c0ff'
    assert _encode('q' * 400, pool).hex() == 'c10001'
    assert _decode(bytes.fromhex('c10001'), pool) == 'q' * 400
    # the width comes from the tag, a wide reference to a low slot is valid
    assert _decode(bytes.fromhex('c10000'), pool) == f'{0:0>300}'


def test_reference_index_out_of_range():
    se = Serializer.build_bytes_serializer()
    with pytest.raises(PoolExhaustedError):
        encode_string_ref(se, 1 << 16)


def test_decoding_never_interns():
    pool = StringPool()
    data = bytes([0x60, 200]) + b'd' * 200
    assert _decode(data, pool) == 'd' * 200
    assert len(pool) == 0


def test_medium_form_accepts_any_length():
    assert _decode(bytes.fromhex('6003616263'), StringPool()) == 'abc'


def test_unresolved_reference():
    with pytest.raises(InvalidStringRefError):
        _decode(bytes.fromhex('c005'), StringPool())


@pytest.mark.parametrize('data_hex', ['65616263', '60', '6005414243', '6020'])
def test_truncated_string(data_hex):
    with pytest.raises(TruncatedStringError):
        _decode(bytes.fromhex(data_hex), StringPool())


def test_truncated_string_is_out_of_data():
    assert issubclass(TruncatedStringError, OutOfDataError)


def test_invalid_utf8():
    with pytest.raises(BadDataError):
        _decode(bytes.fromhex('62c328'), StringPool())


def test_invalid_reference_width():
    with pytest.raises(BadDataError):
        _decode(bytes.fromhex('c200'), StringPool())


def test_truncated_wide_reference():
    with pytest.raises(OutOfDataError):
        _decode(bytes.fromhex('c100'), StringPool())


def test_not_a_string():
    with pytest.raises(UnknownTagError):
        _decode(bytes.fromhex('41'), StringPool())
