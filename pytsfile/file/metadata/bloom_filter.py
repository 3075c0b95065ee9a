################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
################################################################################

"""Bloom filter over the series paths stored in a TsFile."""

import logging
from typing import List, Optional

import mmh3

logger = logging.getLogger(__name__)

SEEDS = (5, 7, 11, 19, 31, 37, 43, 59)
MAXIMAL_HASH_FUNCTION_SIZE = len(SEEDS)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & (1 << 31) else value


class HashFunction:
    """Seeded murmur3 x64 128-bit hash folded to a bit position below cap."""

    def __init__(self, cap: int, seed: int):
        self.cap = cap
        self.seed = seed

    def hash(self, path: str) -> int:
        high, low = mmh3.hash64(path.encode('utf-8'), seed=self.seed, x64arch=True, signed=True)
        folded = _to_int32(_to_int32(high) + _to_int32(low))
        return abs(folded) % self.cap


class BloomFilter:
    """
    A fixed-size bit vector probed by up to eight seeded hash functions.

    A path is reported as present only when every probed bit is set, so
    absent paths may be reported present but present paths never absent.
    Bit i lives in byte i // 8 under mask 1 << (i % 8).
    """

    def __init__(self, bits: bytes, size: int, hash_function_size: int):
        """
        Args:
            bits: Serialized bit vector
            size: Number of addressable bits
            hash_function_size: Declared number of hash functions, capped at 8
        """
        if size <= 0:
            raise ValueError(f"Bloom filter size must be positive, got {size}")
        if hash_function_size > MAXIMAL_HASH_FUNCTION_SIZE:
            logger.warning("Bloom filter declares %d hash functions, using the first %d",
                           hash_function_size, MAXIMAL_HASH_FUNCTION_SIZE)
        self.size = size
        self.hash_function_size = max(0, min(MAXIMAL_HASH_FUNCTION_SIZE, hash_function_size))
        self.bits = bytearray(bits)
        self.func: List[HashFunction] = [
            HashFunction(size, SEEDS[i]) for i in range(self.hash_function_size)
        ]

    def add(self, path: str) -> None:
        for func in self.func:
            self._set_bit(func.hash(path))

    def contains(self, path: Optional[str]) -> bool:
        if not path:
            return False
        return all(self._get_bit(func.hash(path)) for func in self.func)

    def serialize(self) -> bytes:
        """The bit vector with trailing zero bytes trimmed."""
        return bytes(self.bits).rstrip(b'\x00')

    def _get_bit(self, index: int) -> bool:
        byte_index = index // 8
        if byte_index >= len(self.bits):
            return False
        return (self.bits[byte_index] >> (index % 8)) & 1 == 1

    def _set_bit(self, index: int) -> None:
        byte_index = index // 8
        if byte_index >= len(self.bits):
            self.bits.extend(bytes(byte_index + 1 - len(self.bits)))
        self.bits[byte_index] |= 1 << (index % 8)
