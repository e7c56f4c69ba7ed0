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

from threading import Lock, RLock
from typing import Optional

from structlog import get_logger

from dynpack.conf.get_settings import get_global_settings
from dynpack.conf.settings import CodecSettings
from dynpack.pool import StringPool
from dynpack.serialization import Deserializer, SerializationError, Serializer
from dynpack.serialization.compound_encoding.value import CodecContext, decode_value, encode_value
from dynpack.serialization.types import Buffer
from dynpack.value import Value

logger = get_logger()


class Session:
    """One continuous lifetime of a string pool, shared by related encode and decode calls.

    Long strings are interned into the pool when encoding and only referenced by index in the output, the pool itself
    is never written out. Bytes that contain such references can only be decoded by the session that encoded them (or
    one sharing its pool): a fresh session fails with `InvalidStringRefError`.

    Calls on the same session are serialized with a lock, the wire format does not depend on it.
    """

    def __init__(self, *, pool: Optional[StringPool] = None, settings: Optional[CodecSettings] = None) -> None:
        self.log = logger.new()
        self._settings = settings if settings is not None else get_global_settings()
        self._pool = pool if pool is not None else StringPool()
        self._lock = RLock()
        self.log.debug('session created', pool_size=len(self._pool))

    @property
    def pool(self) -> StringPool:
        return self._pool

    @property
    def settings(self) -> CodecSettings:
        return self._settings

    def _build_context(self) -> CodecContext:
        return CodecContext(
            pool=self._pool,
            max_depth=self._settings.MAX_DEPTH,
            max_container_length=self._settings.MAX_CONTAINER_LENGTH,
            max_varint_bytes=self._settings.MAX_VARINT_BYTES,
        )

    def encode(self, value: Value) -> bytes:
        """Encode a value, interning its long strings into this session's pool."""
        serializer = Serializer.build_bytes_serializer()
        with self._lock:
            encode_value(serializer.with_optional_max_bytes(self._settings.MAX_ENCODED_BYTES), value,
                         self._build_context())
        return bytes(serializer.finalize())

    def decode(self, data: Buffer, offset: int = 0) -> Value:
        """Decode the value that starts at `offset`, bytes after it are ignored."""
        value, _ = self.decode_from(data, offset)
        return value

    def decode_from(self, data: Buffer, offset: int = 0) -> tuple[Value, int]:
        """Decode the value that starts at `offset`, returning it along with the offset right after it."""
        if offset < 0:
            raise ValueError('offset cannot be negative')
        deserializer = Deserializer.build_bytes_deserializer(memoryview(data)[offset:])
        with self._lock:
            try:
                value = decode_value(deserializer.with_optional_max_bytes(self._settings.MAX_DECODED_BYTES),
                                     self._build_context())
            except SerializationError as e:
                self.log.debug('decode failed', error=type(e).__name__, offset=offset + deserializer.cur_pos())
                raise
        return value, offset + deserializer.cur_pos()


_global_session: Optional[Session] = None
_global_session_lock = Lock()


def get_global_session() -> Session:
    """Return the process-wide session, it is created on first use and never reset."""
    global _global_session
    with _global_session_lock:
        if _global_session is None:
            _global_session = Session()
        return _global_session
