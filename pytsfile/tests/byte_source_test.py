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

import io
import os
import shutil
import tempfile
import unittest

from pytsfile.common.byte_source import ByteSource, FileSource
from pytsfile.common.data_input import StreamInput
from pytsfile.common.exceptions import TsFileFormatException, TsFileIOException

DATA = bytes(range(256)) * 4


class _RecordingIO(io.BytesIO):

    def __init__(self, data):
        super().__init__(data)
        self.reads = []

    def read(self, size=-1):
        self.reads.append((self.tell(), size))
        return super().read(size)


class _FailingIO(io.BytesIO):

    def read(self, size=-1):
        raise OSError("disk on fire")


class ByteSourceTest(unittest.TestCase):

    def test_get_bytes(self):
        source = ByteSource.from_bytes(DATA)
        self.assertEqual(len(DATA), source.size())
        self.assertEqual(DATA[100:110], source.get_bytes(100, 10))
        self.assertEqual(DATA[5:7], source.get_bytes(5, 2))
        self.assertEqual(b'', source.get_bytes(len(DATA), 0))

    def test_always_seeks(self):
        source = ByteSource.from_bytes(DATA)
        source.get_bytes(900, 20)
        self.assertEqual(DATA[0:4], source.get_bytes(0, 4))

    def test_range_outside_file(self):
        source = ByteSource.from_bytes(DATA)
        with self.assertRaises(TsFileFormatException):
            source.get_bytes(len(DATA) - 2, 3)
        with self.assertRaises(TsFileFormatException):
            source.get_bytes(-1, 3)
        with self.assertRaises(TsFileFormatException):
            source.get_read(0, len(DATA) + 1)

    def test_short_read(self):
        source = ByteSource(lambda: io.BytesIO(DATA[:100]), len(DATA))
        with self.assertRaises(TsFileIOException) as context:
            source.get_bytes(90, 20)
        self.assertEqual(90, context.exception.offset)
        self.assertEqual(20, context.exception.expected)
        self.assertEqual(10, context.exception.actual)

    def test_read_failure(self):
        source = ByteSource(lambda: _FailingIO(DATA), len(DATA))
        with self.assertRaises(TsFileIOException) as context:
            source.get_bytes(0, 4)
        self.assertIsInstance(context.exception.__cause__, OSError)

    def test_clone_has_own_handle(self):
        handles = []

        def opener():
            handles.append(io.BytesIO(DATA))
            return handles[-1]

        source = ByteSource(opener, len(DATA))
        clone = source.clone()
        self.assertEqual(DATA[:4], source.get_bytes(0, 4))
        self.assertEqual(DATA[8:12], clone.get_bytes(8, 4))
        self.assertEqual(2, len(handles))
        clone.close()
        self.assertEqual(DATA[4:8], source.get_bytes(4, 4))

    def test_from_path(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "data.tsfile")
            with open(path, 'wb') as f:
                f.write(DATA)
            with ByteSource.from_path(path, {"read.buffer-size": "16"}) as source:
                self.assertEqual(len(DATA), source.size())
                self.assertEqual(16, source.buffer_size)
                self.assertEqual(DATA[500:520], source.get_bytes(500, 20))
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)


class FileSourceTest(unittest.TestCase):

    def _source(self, buffer_size):
        handle = _RecordingIO(DATA)
        return ByteSource(lambda: handle, len(DATA), buffer_size=buffer_size), handle

    def test_small_reads_are_buffered(self):
        source, handle = self._source(16)
        window = source.get_read(10, 40)
        self.assertEqual(DATA[10:13], window.read(3))
        self.assertEqual(DATA[13:20], window.read(7))
        self.assertEqual(1, len(handle.reads))
        self.assertEqual(DATA[20:30], window.read(10))
        self.assertEqual(2, len(handle.reads))
        self.assertEqual((26, 16), handle.reads[1])

    def test_large_reads_bypass_buffer(self):
        source, handle = self._source(16)
        window = source.get_read(0, 200)
        self.assertEqual(DATA[0:100], window.read(100))
        self.assertEqual([(0, 100)], handle.reads)
        self.assertEqual(100, window.pos())
        self.assertEqual(100, len(window))

    def test_window_bound(self):
        source, _ = self._source(16)
        window = source.get_read(1000, 20)
        self.assertEqual(DATA[1000:1020], window.read(50))
        self.assertEqual(b'', window.read(1))
        self.assertEqual(0, len(window))

    def test_stream_input(self):
        source, _ = self._source(8)
        data_input = StreamInput(FileSource(source, 256, 8), "page")
        self.assertEqual(0x00010203, data_input.read_int())
        self.assertEqual(260, data_input.absolute_position())
        self.assertEqual(4, data_input.available())
        self.assertEqual(0x04050607, data_input.read_int())
        self.assertFalse(data_input.is_readable())
        with self.assertRaises(TsFileFormatException):
            data_input.read_byte()

    def test_short_underlying_read(self):
        source = ByteSource(lambda: io.BytesIO(DATA[:10]), len(DATA), buffer_size=16)
        window = source.get_read(0, 64)
        with self.assertRaises(TsFileIOException):
            window.read(4)


if __name__ == '__main__':
    unittest.main()
