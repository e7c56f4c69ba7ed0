import math
import struct

import pytest

from dynpack.serialization import BadDataError, Deserializer, OutOfDataError, Serializer, UnsupportedTypeError
from dynpack.serialization.encoding.number import decode_number, encode_number


def _encode(number) -> bytes:
    se = Serializer.build_bytes_serializer()
    encode_number(se, number)
    return bytes(se.finalize())


def _decode(data: bytes):
    de = Deserializer.build_bytes_deserializer(data)
    value = decode_number(de)
    de.finalize()
    return value


@pytest.mark.parametrize('number, expected_hex', [
    (0, '200000'),
    (1, '200001'),
    (-1, '300001'),
    (127, '20007f'),
    (128, '20008001'),
    (2147483647, '2000ffffffff07'),
    (-2147483647, '3000ffffffff07'),
    (7.0, '200007'),
    (-7.0, '300007'),
])
def test_integer_format(number, expected_hex):
    data = _encode(number)
    assert data.hex() == expected_hex
    assert _decode(data) == number
    assert type(_decode(data)) is int


@pytest.mark.parametrize('number', [
    2147483648,
    -2147483648,
    2**53,
    0.5,
    -1.25,
    1e300,
    2147483647.5,
    float('inf'),
    float('-inf'),
])
def test_float_format(number):
    data = _encode(number)
    assert data[1] == 0x01
    assert len(data) == 10
    assert data[2:] == struct.pack('<d', number)
    decoded = _decode(data)
    assert type(decoded) is float
    assert decoded == number


def test_sign_flag():
    assert _encode(-0.5)[0] == 0x30
    assert _encode(0.5)[0] == 0x20
    assert _encode(-2**40)[0] == 0x30


def test_negative_zero_is_bit_exact():
    data = _encode(-0.0)
    assert data.hex() == '30010000000000000080'
    decoded = _decode(data)
    assert decoded == 0.0
    assert math.copysign(1.0, decoded) == -1.0


def test_positive_zero_float_takes_integer_format():
    assert _encode(0.0).hex() == '200000'


def test_nan_is_bit_exact():
    nan = struct.unpack('<d', bytes.fromhex('0100000000f8ff7f'))[0]
    decoded = _decode(_encode(nan))
    assert math.isnan(decoded)
    assert struct.pack('<d', decoded) == struct.pack('<d', nan)


def test_integer_too_large_for_a_double():
    with pytest.raises(UnsupportedTypeError):
        _encode(10**400)


def test_invalid_format_byte():
    with pytest.raises(BadDataError):
        _decode(bytes.fromhex('200201'))


def test_unknown_flags():
    with pytest.raises(BadDataError):
        _decode(bytes.fromhex('210001'))


def test_truncated_double():
    with pytest.raises(OutOfDataError):
        _decode(bytes.fromhex('2001000000'))


def test_missing_format_byte():
    with pytest.raises(OutOfDataError):
        _decode(bytes.fromhex('20'))
