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
Compact self-describing binary encoding for dynamically typed values.

The module level `encode` and `decode` share one process-wide session, so long strings interned by `encode` can be
resolved by `decode`. Use `Session` directly when encodings must not share their string pool.
"""

from dynpack.pool import StringPool
from dynpack.serialization import (
    BadDataError,
    InvalidStringRefError,
    MalformedVarintError,
    MaxBytesExceededError,
    NestingTooDeepError,
    OutOfDataError,
    PoolExhaustedError,
    SerializationError,
    TooLongError,
    TruncatedStringError,
    UnknownTagError,
    UnsupportedTypeError,
)
from dynpack.serialization.types import Buffer
from dynpack.session import Session, get_global_session
from dynpack.value import Value
from dynpack.version import __version__


def encode(value: Value) -> bytes:
    """Encode a value using the process-wide session."""
    return get_global_session().encode(value)


def decode(data: Buffer, offset: int = 0) -> Value:
    """Decode the value at `offset` using the process-wide session."""
    return get_global_session().decode(data, offset)


__all__ = [
    'encode',
    'decode',
    'Session',
    'StringPool',
    'Value',
    'get_global_session',
    'SerializationError',
    'BadDataError',
    'InvalidStringRefError',
    'MalformedVarintError',
    'MaxBytesExceededError',
    'NestingTooDeepError',
    'OutOfDataError',
    'PoolExhaustedError',
    'TooLongError',
    'TruncatedStringError',
    'UnknownTagError',
    'UnsupportedTypeError',
    '__version__',
]
