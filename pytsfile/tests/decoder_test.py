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

import struct
import unittest

from parameterized import parameterized

from pytsfile.common.data_input import MemorySliceInput
from pytsfile.common.exceptions import (TruncatedDataException,
                                        TsFileFormatException,
                                        UnsupportedEncodingException)
from pytsfile.encoding.decoder import (IntPlainDecoder, LongDeltaBinaryDecoder,
                                       time_decoder, value_decoder)
from pytsfile.file.data_types import TSDataType, TSEncoding
from pytsfile.tests.tsfile_builder import delta_block


def _block_header(pack_num, pack_width, min_delta_base, first_value):
    return struct.pack('>iiqq', pack_num, pack_width, min_delta_base, first_value)


class LongDeltaBinaryDecoderTest(unittest.TestCase):

    def test_decode_block(self):
        data = _block_header(3, 8, 10, 1000) + bytes([0, 5, 2])
        self.assertEqual([1010, 1025, 1037], LongDeltaBinaryDecoder().decode(MemorySliceInput(data)))

    def test_first_value_is_only_a_seed(self):
        data = _block_header(1, 0, 7, 100)
        self.assertEqual([107], LongDeltaBinaryDecoder().decode(MemorySliceInput(data)))

    def test_negative_base(self):
        data = _block_header(2, 4, -5, 0) + bytes([0x31])
        self.assertEqual([-2, -6], LongDeltaBinaryDecoder().decode(MemorySliceInput(data)))

    def test_multiple_blocks(self):
        first = [1000, 1010, 1020, 1031]
        second = [5000, 4000, 7000]
        data = delta_block(first) + delta_block(second)
        self.assertEqual(first + second, time_decoder().decode(MemorySliceInput(data)))

    def test_wraps_to_int64(self):
        data = _block_header(1, 0, 1, (1 << 63) - 1)
        self.assertEqual([-(1 << 63)], LongDeltaBinaryDecoder().decode(MemorySliceInput(data)))

    def test_empty(self):
        self.assertEqual([], LongDeltaBinaryDecoder().decode(MemorySliceInput(b'')))

    def test_truncated_packed_data(self):
        data = _block_header(3, 8, 10, 1000) + bytes([0, 5])
        with self.assertRaises(TruncatedDataException):
            LongDeltaBinaryDecoder().decode(MemorySliceInput(data))

    def test_truncated_header(self):
        with self.assertRaises(TruncatedDataException):
            LongDeltaBinaryDecoder().decode(MemorySliceInput(struct.pack('>ii', 3, 8)))

    @parameterized.expand([(-1, 8), (3, -1), (3, 65)])
    def test_invalid_block_header(self, pack_num, pack_width):
        data = _block_header(pack_num, pack_width, 0, 0) + bytes(64)
        with self.assertRaises(TsFileFormatException):
            LongDeltaBinaryDecoder().decode(MemorySliceInput(data))


class IntPlainDecoderTest(unittest.TestCase):

    def test_decode(self):
        data = struct.pack('>iii', 7, -8, 2 ** 31 - 1)
        self.assertEqual([7, -8, 2 ** 31 - 1], IntPlainDecoder().decode(MemorySliceInput(data)))

    def test_trailing_bytes(self):
        with self.assertRaises(TruncatedDataException):
            IntPlainDecoder().decode(MemorySliceInput(struct.pack('>i', 7) + b'\x00\x01'))


class ValueDecoderTest(unittest.TestCase):

    def test_supported(self):
        self.assertIsInstance(value_decoder(TSDataType.INT32, TSEncoding.PLAIN.value), IntPlainDecoder)
        self.assertIsInstance(value_decoder(TSDataType.INT64, TSEncoding.TS_2DIFF.value), LongDeltaBinaryDecoder)

    @parameterized.expand([
        (TSDataType.INT32, TSEncoding.RLE.value),
        (TSDataType.INT64, TSEncoding.PLAIN.value),
        (TSDataType.FLOAT, TSEncoding.GORILLA.value),
        (TSDataType.DOUBLE, TSEncoding.PLAIN.value),
        (TSDataType.BOOLEAN, TSEncoding.PLAIN.value),
        (TSDataType.TEXT, TSEncoding.PLAIN.value),
        (TSDataType.INT32, 42),
    ])
    def test_unsupported(self, data_type, encoding_id):
        with self.assertRaises(UnsupportedEncodingException):
            value_decoder(data_type, encoding_id)


if __name__ == '__main__':
    unittest.main()
