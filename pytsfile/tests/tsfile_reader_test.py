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

import os
import shutil
import struct
import tempfile
import unittest

import pyarrow as pa

from pytsfile import TsFileReader, decode_page
from pytsfile.common.byte_source import ByteSource
from pytsfile.common.exceptions import TsFileFormatException
from pytsfile.common.options import Options
from pytsfile.common.tsfile_options import TsFileOptions
from pytsfile.file.data_types import CompressionType, TSDataType
from pytsfile.file.metadata.timeseries_metadata import TimeseriesMetadataType
from pytsfile.file.statistics import IntegerStatistics
from pytsfile.tests.tsfile_builder import TsFileBuilder


class TsFileReaderTest(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.temp_dir = tempfile.mkdtemp()

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(cls.temp_dir, ignore_errors=True)

    def _multi_series_file(self, **kwargs):
        builder = TsFileBuilder(max_degree=2, **kwargs)
        for d in range(5):
            for s in range(3):
                builder.add_series("root.sg.d%d" % d, "s%d" % s, [[([1, 2, 3], [d, s, d + s])]])
        builder.add_series("root.sg.d0", "temperature", [
            [([10, 20], [100, 200]), ([30], [300])],
            [([40, 50, 60], [400, 500, 600])],
        ], data_type=TSDataType.INT64, compression=CompressionType.GZIP)
        return builder.build()

    def test_minimal_file(self):
        data = TsFileBuilder().add_series("root.sg.d1", "s1", [[([1000, 1010, 1017], [7, -8, 9])]]).build()
        with TsFileReader.open(data) as reader:
            self.assertEqual(["root.sg.d1"], list(reader.list_devices()))
            sensors = list(reader.list_sensors("root.sg.d1"))
            self.assertEqual(1, len(sensors))
            self.assertEqual("s1", sensors[0].measurement_id)
            self.assertEqual(TSDataType.INT32, sensors[0].data_type)
            self.assertEqual(TimeseriesMetadataType.ONE_CHUNK, sensors[0].metadata_type)
            self.assertEqual(IntegerStatistics(3, 1000, 1017, -8, 9, 7, 9, 8), sensors[0].statistics)

            pages = list(reader.open_chunk("root.sg.d1", "s1", 0))
            self.assertEqual(1, len(pages))
            page_data = decode_page(pages[0])
            self.assertEqual([1000, 1010, 1017], page_data.timestamps)
            self.assertEqual([7, -8, 9], page_data.values)
            self.assertEqual(page_data, reader.decode_page(pages[0]))

    def test_devices_and_sensors(self):
        with TsFileReader.open(self._multi_series_file()) as reader:
            self.assertEqual(["root.sg.d%d" % d for d in range(5)], list(reader.list_devices()))
            self.assertEqual(["s0", "s1", "s2", "temperature"],
                             [ts.measurement_id for ts in reader.list_sensors("root.sg.d0")])
            self.assertEqual(["s0", "s1", "s2"], [ts.measurement_id for ts in reader.list_sensors("root.sg.d4")])
            self.assertEqual([], list(reader.list_sensors("root.sg.d9")))

    def test_point_lookup(self):
        with TsFileReader.open(self._multi_series_file()) as reader:
            for d in range(5):
                for s in range(3):
                    timeseries_metadata = reader.get_timeseries_metadata("root.sg.d%d" % d, "s%d" % s)
                    self.assertEqual("s%d" % s, timeseries_metadata.measurement_id)
                    self.assertEqual([(1, d), (2, s), (3, d + s)],
                                     list(reader.read_series("root.sg.d%d" % d, "s%d" % s)))
            self.assertIsNone(reader.get_timeseries_metadata("root.sg.d1", "temperature"))
            self.assertIsNone(reader.get_timeseries_metadata("root.sg.d9", "s0"))
            self.assertIsNone(reader.get_timeseries_metadata("root.a", "s0"))
            self.assertEqual([], reader.get_chunk_metadata_list("root.sg.d9", "s0"))
            self.assertIsNone(reader.open_chunk("root.sg.d9", "s0", 0))
            self.assertIsNone(reader.open_chunk("root.sg.d1", "s0", 1))
            self.assertIsNone(reader.read_arrow("root.sg.d9", "s0"))

    def test_multiple_chunks(self):
        with TsFileReader.open(self._multi_series_file()) as reader:
            timeseries_metadata = reader.get_timeseries_metadata("root.sg.d0", "temperature")
            self.assertEqual(TimeseriesMetadataType.MORE_CHUNKS, timeseries_metadata.metadata_type)
            chunk_metadata_list = reader.get_chunk_metadata_list("root.sg.d0", "temperature")
            self.assertEqual(2, len(chunk_metadata_list))
            self.assertEqual(10, chunk_metadata_list[0].statistics.start_time)
            self.assertEqual(40, chunk_metadata_list[1].statistics.start_time)
            self.assertEqual(2100.0, timeseries_metadata.statistics.sum_value)

            self.assertEqual(2, len(list(reader.open_chunk("root.sg.d0", "temperature", 0))))
            self.assertEqual(1, len(list(reader.open_chunk("root.sg.d0", "temperature", 1))))
            self.assertEqual([(t, t * 10) for t in (10, 20, 30, 40, 50, 60)],
                             list(reader.read_series("root.sg.d0", "temperature")))
            self.assertEqual([(30, 300), (40, 400)],
                             list(reader.read_series("root.sg.d0", "temperature", lambda t: 25 <= t <= 45)))

    def test_read_arrow(self):
        with TsFileReader.open(self._multi_series_file()) as reader:
            table = reader.read_arrow("root.sg.d0", "temperature")
            self.assertEqual(pa.schema([("time", pa.int64()), ("temperature", pa.int64())]), table.schema)
            self.assertEqual([10, 20, 30, 40, 50, 60], table.column("time").to_pylist())
            self.assertEqual([100, 200, 300, 400, 500, 600], table.column("temperature").to_pylist())

            table = reader.read_arrow("root.sg.d3", "s1")
            self.assertEqual(pa.int32(), table.schema.field("s1").type)
            self.assertEqual([3, 1, 4], table.column("s1").to_pylist())

    def test_bloom_filter(self):
        with TsFileReader.open(self._multi_series_file()) as reader:
            self.assertIsNotNone(reader.metadata.bloom_filter)
            self.assertTrue(reader.may_contain("root.sg.d0.temperature"))
            self.assertTrue(reader.may_contain(reader.series_path("root.sg.d2", "s1")))
            self.assertFalse(reader.may_contain(""))

        with TsFileReader.open(self._multi_series_file(bloom_filter=False)) as reader:
            self.assertIsNone(reader.metadata.bloom_filter)
            self.assertTrue(reader.may_contain("root.sg.d9.s9"))
            self.assertIsNotNone(reader.get_timeseries_metadata("root.sg.d2", "s1"))

    def test_bloom_filter_rejection_short_circuits(self):
        data = self._multi_series_file(bloom_filter_size=8, hash_function_size=1)
        source = ByteSource.from_bytes(data)
        reader = TsFileReader(source)
        reader.metadata.bloom_filter.bits[:] = bytes(len(reader.metadata.bloom_filter.bits))
        self.assertIsNone(reader.get_timeseries_metadata("root.sg.d2", "s1"))

        unfiltered = TsFileReader(source, reader.metadata, {"bloom-filter.enabled": "false"})
        self.assertIsNotNone(unfiltered.get_timeseries_metadata("root.sg.d2", "s1"))

    def test_path_separator_option(self):
        data = self._multi_series_file()
        with TsFileReader.open(data, {"path.separator": "/"}) as reader:
            self.assertEqual("root.sg.d0/s1", reader.series_path("root.sg.d0", "s1"))

    def test_open_with_options_instance(self):
        options = Options({"path.separator": "/"})
        options.set(TsFileOptions.BLOOM_FILTER_ENABLED, False)
        with TsFileReader.open(self._multi_series_file(), options) as reader:
            self.assertIs(options, reader.options.options)
            self.assertFalse(reader.options.bloom_filter_enabled())
            self.assertEqual("root.sg.d0/s1", reader.series_path("root.sg.d0", "s1"))
            self.assertEqual(["s0", "s1", "s2"], [ts.measurement_id for ts in reader.list_sensors("root.sg.d1")])

    def test_open_path_and_clone(self):
        path = os.path.join(self.temp_dir, "test.tsfile")
        with open(path, 'wb') as f:
            f.write(self._multi_series_file())

        with TsFileReader.open(path) as reader:
            clone = reader.clone()
            self.assertIs(reader.metadata, clone.metadata)
            self.assertIsNot(reader.source, clone.source)
            devices = list(reader.list_devices())
            self.assertEqual(devices, list(clone.list_devices()))
            clone.close()
            self.assertEqual([(1, 2), (2, 0), (3, 2)], list(reader.read_series("root.sg.d2", "s0")))

    def test_bad_magic(self):
        data = bytearray(self._multi_series_file())
        data[-1:] = b'X'
        with self.assertRaises(TsFileFormatException):
            TsFileReader.open(bytes(data))

    def test_file_shorter_than_footer(self):
        with self.assertRaises(TsFileFormatException):
            TsFileReader.open(b"TsFile")

    def test_metadata_length_exceeds_file(self):
        data = bytearray(self._multi_series_file())
        data[-10:-6] = struct.pack('>i', len(data))
        with self.assertRaises(TsFileFormatException):
            TsFileReader.open(bytes(data))

    def test_negative_metadata_length(self):
        with self.assertRaises(TsFileFormatException):
            TsFileReader.open(struct.pack('>i', -1) + b"TsFile")


if __name__ == '__main__':
    unittest.main()
