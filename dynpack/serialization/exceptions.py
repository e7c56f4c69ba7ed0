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


class SerializationError(Exception):
    """Base class for all errors raised while encoding or decoding values.

    Any of these errors means the value or buffer cannot be processed, a partially consumed buffer must not be used.
    """
    pass


class OutOfDataError(SerializationError, ValueError):
    """Raised when trying to read past the end of the buffer."""
    pass


class MalformedVarintError(OutOfDataError):
    """Raised when a varint is truncated or longer than allowed."""
    pass


class TruncatedStringError(OutOfDataError):
    """Raised when the declared length of a string exceeds the remaining buffer."""
    pass


class BadDataError(SerializationError, ValueError):
    pass


class InvalidStringRefError(SerializationError):
    """Raised when a string reference points to a slot that the string pool does not have."""
    pass


class UnsupportedTypeError(SerializationError, TypeError):
    pass


class UnknownTagError(SerializationError):
    """Raised when a tag byte does not select a kind that is valid at that position."""
    pass


class TooLongError(SerializationError, ValueError):
    pass


class NestingTooDeepError(SerializationError):
    pass


class PoolExhaustedError(SerializationError):
    """Raised when a string cannot be interned because every addressable pool slot is taken."""
    pass


class MaxBytesExceededError(SerializationError):
    """Raised when an encode or decode call goes past its configured byte budget.

    The budget comes from `MAX_ENCODED_BYTES` or `MAX_DECODED_BYTES`. The adapted (de)serializer must be discarded
    afterwards, the bytes written or read so far are incomplete.
    """
    pass
