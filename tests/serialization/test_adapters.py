import pytest

import dynpack
from dynpack import serialization
from dynpack.serialization import Deserializer, SerializationError, Serializer
from dynpack.serialization.adapters import MaxBytesDeserializer, MaxBytesExceededError, MaxBytesSerializer


def test_max_bytes_serializer():
    se = Serializer.build_bytes_serializer()
    limited = se.with_max_bytes(3)
    assert isinstance(limited, MaxBytesSerializer)
    limited.write_byte(1)
    limited.write_bytes(b'\x02\x03')
    with pytest.raises(MaxBytesExceededError):
        limited.write_byte(4)
    assert bytes(se.finalize()) == b'\x01\x02\x03'


def test_max_bytes_serializer_rejects_a_large_write_up_front():
    se = Serializer.build_bytes_serializer()
    limited = se.with_max_bytes(2)
    with pytest.raises(MaxBytesExceededError):
        limited.write_bytes(b'abc')
    assert bytes(se.finalize()) == b''


def test_max_bytes_deserializer():
    de = Deserializer.build_bytes_deserializer(b'\x01\x02\x03\x04')
    limited = de.with_max_bytes(3)
    assert isinstance(limited, MaxBytesDeserializer)
    assert limited.read_byte() == 1
    assert bytes(limited.read_bytes(2)) == b'\x02\x03'
    assert limited.cur_pos() == 3
    with pytest.raises(MaxBytesExceededError):
        limited.read_byte()


def test_max_bytes_deserializer_read_all():
    de = Deserializer.build_bytes_deserializer(b'\x01\x02')
    assert bytes(de.with_max_bytes(2).read_all()) == b'\x01\x02'
    de = Deserializer.build_bytes_deserializer(b'\x01\x02\x03')
    with pytest.raises(MaxBytesExceededError):
        de.with_max_bytes(2).read_all()


def test_optional_max_bytes():
    se = Serializer.build_bytes_serializer()
    assert se.with_optional_max_bytes(None) is se
    de = Deserializer.build_bytes_deserializer(b'')
    assert de.with_optional_max_bytes(None) is de
    assert isinstance(de.with_optional_max_bytes(1), MaxBytesDeserializer)


def test_max_bytes_exceeded_is_a_serialization_error():
    assert issubclass(MaxBytesExceededError, SerializationError)
    assert dynpack.MaxBytesExceededError is MaxBytesExceededError
    assert serialization.MaxBytesExceededError is MaxBytesExceededError
