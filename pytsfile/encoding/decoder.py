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

"""
Column decoders. The time column of every page is delta-of-delta encoded;
value columns are decoded by the decoder registered for their value type and
encoding.
"""

from abc import ABC, abstractmethod
from typing import List

from pytsfile.common.data_input import MemorySliceInput
from pytsfile.common.exceptions import TsFileFormatException, UnsupportedEncodingException
from pytsfile.encoding.bit_packing import packed_bytes, read_packed_long
from pytsfile.file.data_types import TSDataType, TSEncoding


def _to_int64(value: int) -> int:
    value &= 0xFFFFFFFFFFFFFFFF
    return value - (1 << 64) if value & (1 << 63) else value


class Decoder(ABC):

    @abstractmethod
    def decode(self, data_input: MemorySliceInput) -> list:
        """Decode every value left in the input."""


class LongDeltaBinaryDecoder(Decoder):
    """
    Decoder for delta-of-delta encoded longs. The input holds consecutive blocks,
    each laid out as:

        pack_num: int32 | pack_width: int32 | min_delta_base: int64 | first_value: int64
        ceil(pack_num * pack_width / 8) bytes of bit-packed deltas

    Every packed delta advances the running value by min_delta_base + delta, and
    the running value after each step is emitted.
    """

    def decode(self, data_input: MemorySliceInput) -> List[int]:
        result = []
        while data_input.is_readable():
            self._decode_block(data_input, result)
        return result

    @staticmethod
    def _decode_block(data_input: MemorySliceInput, result: List[int]) -> None:
        offset = data_input.absolute_position()
        pack_num = data_input.read_int()
        pack_width = data_input.read_int()
        if pack_num < 0:
            raise TsFileFormatException(data_input.kind, f"negative pack number {pack_num}", offset)
        if pack_width < 0 or pack_width > 64:
            raise TsFileFormatException(data_input.kind, f"pack width {pack_width} not in [0, 64]", offset)
        min_delta_base = data_input.read_long()
        previous = data_input.read_long()
        packed = data_input.read_slice(packed_bytes(pack_num, pack_width))
        for i in range(pack_num):
            delta = read_packed_long(packed, pack_width * i, pack_width)
            previous = _to_int64(previous + min_delta_base + delta)
            result.append(previous)


class IntPlainDecoder(Decoder):
    """Big-endian int32 values back to back."""

    def decode(self, data_input: MemorySliceInput) -> List[int]:
        result = []
        while data_input.is_readable():
            result.append(data_input.read_int())
        return result


_VALUE_DECODERS = {
    (TSDataType.INT32, TSEncoding.PLAIN): IntPlainDecoder,
    (TSDataType.INT64, TSEncoding.TS_2DIFF): LongDeltaBinaryDecoder,
}


def time_decoder() -> Decoder:
    return LongDeltaBinaryDecoder()


def value_decoder(data_type: TSDataType, encoding_id: int) -> Decoder:
    """
    Raises:
        UnsupportedEncodingException: If no decoder exists for the pair
    """
    encoding = TSEncoding.from_byte(encoding_id)
    decoder_class = _VALUE_DECODERS.get((data_type, encoding))
    if decoder_class is None:
        encoding_name = encoding.name if encoding is not None else f"id {encoding_id}"
        raise UnsupportedEncodingException("encoding", f"{encoding_name} for {data_type.name} values")
    return decoder_class()
