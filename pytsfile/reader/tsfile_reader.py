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

import logging
from typing import Callable, Iterator, List, Optional, Tuple, Union

import pyarrow as pa

from pytsfile.chunk.chunk_reader import ChunkReader
from pytsfile.chunk.page import Page, PageData, to_arrow_type
from pytsfile.common.byte_source import ByteSource
from pytsfile.common.exceptions import TsFileFormatException
from pytsfile.common.options import Options
from pytsfile.common.tsfile_options import TsFileOptions
from pytsfile.file.footer import TsFileFooter
from pytsfile.file.metadata.metadata_index_tree import MetadataIndexTree
from pytsfile.file.metadata.timeseries_metadata import ChunkMetadata, TimeseriesMetadata
from pytsfile.file.metadata.tsfile_metadata import TsFileMetadata

logger = logging.getLogger(__name__)


class TsFileReader:
    """
    Read-only access to one TsFile: device and sensor enumeration, point lookup
    of a sensor's chunks, and lazy page decoding.

    The parsed TsFileMetadata is shared by every reader cloned from this one.
    Each reader owns its own handle of the byte source, so distinct readers
    may be used from distinct threads; a single reader may not.
    """

    def __init__(self, source: ByteSource, metadata: Optional[TsFileMetadata] = None,
                 options: Union[Options, dict, None] = None):
        self.source = source
        self.options = TsFileOptions.from_dict(options)
        self.metadata = metadata if metadata is not None else self._read_metadata(source)
        self.index_tree = MetadataIndexTree(source, self.metadata.metadata_index)

    @classmethod
    def open(cls, path_or_source: Union[str, bytes, ByteSource],
             options: Union[Options, dict, None] = None) -> 'TsFileReader':
        """
        Open a reader over a path or URI, an in-memory file, or an existing
        byte source.

        Raises:
            TsFileFormatException: If the footer or the metadata block is malformed
            TsFileIOException: If the file cannot be read
        """
        if isinstance(path_or_source, ByteSource):
            source = path_or_source
        elif isinstance(path_or_source, (bytes, bytearray, memoryview)):
            source = ByteSource.from_bytes(
                path_or_source, buffer_size=TsFileOptions.from_dict(options).read_buffer_size())
        else:
            source = ByteSource.from_path(path_or_source, options)
        try:
            reader = cls(source, options=options)
        except Exception:
            source.close()
            raise
        logger.info("Opened TsFile %s: %d bytes, root %s, bloom filter %s",
                    source.name, source.size(), reader.metadata.metadata_index.node_type.name,
                    "present" if reader.metadata.bloom_filter is not None else "absent")
        return reader

    @staticmethod
    def _read_metadata(source: ByteSource) -> TsFileMetadata:
        file_size = source.size()
        if file_size < TsFileFooter.ENCODED_LENGTH:
            raise TsFileFormatException(
                "footer", f"file of {file_size} bytes is shorter than the footer", 0)
        footer_offset = file_size - TsFileFooter.ENCODED_LENGTH
        footer = TsFileFooter.read_footer(source.get_bytes(footer_offset, TsFileFooter.ENCODED_LENGTH),
                                          footer_offset)
        metadata_offset = footer_offset - footer.metadata_length
        if metadata_offset < 0:
            raise TsFileFormatException(
                "footer", f"metadata length {footer.metadata_length} exceeds the file", footer_offset)
        logger.debug("Metadata block at [%d, %d)", metadata_offset, footer_offset)
        return TsFileMetadata.deserialize(source.get_bytes(metadata_offset, footer.metadata_length),
                                          metadata_offset)

    def list_devices(self) -> Iterator[str]:
        return self.index_tree.iter_device_names()

    def list_sensors(self, device: str) -> Iterator[TimeseriesMetadata]:
        return self.index_tree.iter_timeseries_metadata(device)

    def may_contain(self, path: str) -> bool:
        """False only if the series path is certainly absent from the file."""
        bloom_filter = self.metadata.bloom_filter
        if bloom_filter is None:
            return True
        return bloom_filter.contains(path)

    def series_path(self, device: str, sensor: str) -> str:
        return f"{device}{self.options.path_separator()}{sensor}"

    def get_timeseries_metadata(self, device: str, sensor: str) -> Optional[TimeseriesMetadata]:
        if self.options.bloom_filter_enabled() and not self.may_contain(self.series_path(device, sensor)):
            logger.debug("Bloom filter rules out %s", self.series_path(device, sensor))
            return None
        for timeseries_metadata in self.index_tree.search_timeseries_metadata(device, sensor):
            if timeseries_metadata.measurement_id == sensor:
                return timeseries_metadata
        return None

    def get_chunk_metadata_list(self, device: str, sensor: str) -> List[ChunkMetadata]:
        timeseries_metadata = self.get_timeseries_metadata(device, sensor)
        if timeseries_metadata is None:
            return []
        return list(timeseries_metadata.chunk_metadata_list)

    def open_chunk(self, device: str, sensor: str, chunk_index: int) -> Optional[ChunkReader]:
        """Pages of the sensor's chunk_index-th chunk, None if there is no such chunk."""
        chunk_metadata_list = self.get_chunk_metadata_list(device, sensor)
        if not 0 <= chunk_index < len(chunk_metadata_list):
            return None
        chunk_reader = ChunkReader(self.source, chunk_metadata_list[chunk_index])
        logger.debug("Opened chunk %d of %s at %d: header %d bytes, payload %d bytes",
                     chunk_index, self.series_path(device, sensor),
                     chunk_metadata_list[chunk_index].offset_of_chunk_header,
                     chunk_reader.chunk_header.serialized_size, chunk_reader.chunk_header.data_size)
        return chunk_reader

    @staticmethod
    def decode_page(page: Page) -> PageData:
        return page.decode()

    def read_series(self, device: str, sensor: str,
                    predicate: Optional[Callable[[int], bool]] = None) -> Iterator[Tuple[int, object]]:
        """
        Yield the (timestamp, value) points of a sensor across all its chunks
        in file order, keeping those whose timestamp satisfies predicate.
        """
        for chunk_metadata in self.get_chunk_metadata_list(device, sensor):
            for page in ChunkReader(self.source, chunk_metadata):
                for timestamp, value in page.decode():
                    if predicate is None or predicate(timestamp):
                        yield timestamp, value

    def read_arrow(self, device: str, sensor: str) -> Optional[pa.Table]:
        """All points of a sensor as a table of a time column and a column named after the sensor."""
        timeseries_metadata = self.get_timeseries_metadata(device, sensor)
        if timeseries_metadata is None:
            return None
        tables = [
            page.decode().to_arrow(sensor)
            for chunk_metadata in timeseries_metadata.chunk_metadata_list
            for page in ChunkReader(self.source, chunk_metadata)
        ]
        if not tables:
            schema = pa.schema([("time", pa.int64()), (sensor, to_arrow_type(timeseries_metadata.data_type))])
            return schema.empty_table()
        return pa.concat_tables(tables)

    def clone(self) -> 'TsFileReader':
        """A reader over its own handle of the same file, sharing the parsed metadata."""
        return TsFileReader(self.source.clone(), self.metadata, self.options.options)

    def close(self) -> None:
        self.source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
