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

from typing import Iterator, Optional

from structlog import get_logger

from dynpack.serialization import InvalidStringRefError, PoolExhaustedError

logger = get_logger()

# references are at most 2 bytes wide
POOL_MAX_SIZE = 1 << 16

# warn once when the pool fills past this fraction of its capacity
POOL_WARNING_RATIO = 0.9


class StringPool:
    """Append-only table of the long strings already emitted by an encoder.

    Strings are addressed by their zero-based slot index, which is what string references carry on the wire. The pool
    contents are never serialized: a decoder can only resolve a reference if it shares this same instance with the
    encoder that produced it.
    """

    def __init__(self) -> None:
        self.log = logger.new()
        self._strings: list[str] = []
        self._index: dict[str, int] = {}
        self._warned_capacity = False

    def __len__(self) -> int:
        return len(self._strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __contains__(self, value: object) -> bool:
        return value in self._index

    def find(self, value: str) -> Optional[int]:
        """Return the slot index of an exact match, or None."""
        return self._index.get(value)

    def append(self, value: str) -> int:
        """Intern a string and return its slot index.

        A string that is already present keeps its original slot.
        """
        index = self._index.get(value)
        if index is not None:
            return index
        if len(self._strings) >= POOL_MAX_SIZE:
            raise PoolExhaustedError(f'string pool is full ({POOL_MAX_SIZE} entries)')
        index = len(self._strings)
        self._strings.append(value)
        self._index[value] = index
        self.log.debug('string interned', index=index, length=len(value))
        if not self._warned_capacity and len(self._strings) >= POOL_MAX_SIZE * POOL_WARNING_RATIO:
            self._warned_capacity = True
            self.log.warning('string pool is close to its capacity', size=len(self._strings), capacity=POOL_MAX_SIZE)
        return index

    def get(self, index: int) -> str:
        """Resolve a slot index, failing if no string was interned there."""
        if not 0 <= index < len(self._strings):
            raise InvalidStringRefError(f'string pool has no entry {index} (size {len(self._strings)})')
        return self._strings[index]
