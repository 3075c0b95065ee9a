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
from typing import Iterator

from pytsfile.chunk.chunk_header import ChunkHeader
from pytsfile.chunk.page import Page, PageHeader
from pytsfile.common.byte_source import ByteSource
from pytsfile.common.data_input import StreamInput
from pytsfile.common.exceptions import TsFileFormatException
from pytsfile.file.metadata.timeseries_metadata import ChunkMetadata
from pytsfile.file.statistics import Statistics

logger = logging.getLogger(__name__)


class ChunkReader:
    """
    Pages of one chunk in file order.

    The chunk header is parsed when the reader is created; pages are read
    lazily, one page header and payload at a time, through a window bounded by
    the header's data size. Iterating again restarts from the first page.
    """

    def __init__(self, source: ByteSource, chunk_metadata: ChunkMetadata):
        self.source = source
        self.chunk_metadata = chunk_metadata

        offset = chunk_metadata.offset_of_chunk_header
        source.check_range(offset, 0)
        header_input = StreamInput(source.get_read(offset, source.size() - offset), "chunk header")
        self.chunk_header = ChunkHeader.deserialize(header_input)
        if self.chunk_header.data_type != chunk_metadata.data_type:
            raise TsFileFormatException(
                "chunk header",
                f"data type {self.chunk_header.data_type.name} differs from "
                f"{chunk_metadata.data_type.name} in chunk metadata",
                offset)

        self.data_offset = offset + self.chunk_header.serialized_size
        source.check_range(self.data_offset, self.chunk_header.data_size)

    def __iter__(self) -> Iterator[Page]:
        return self.pages()

    def pages(self) -> Iterator[Page]:
        data_size = self.chunk_header.data_size
        data_input = StreamInput(self.source.get_read(self.data_offset, data_size), "page")
        while data_input.position() < data_size:
            page_offset = data_input.absolute_position()
            header = self._read_page_header(data_input)
            data = data_input.read_slice(header.compressed_size)
            logger.debug("Read page at %d of sensor %s: %d bytes compressed, %d uncompressed",
                         page_offset, self.chunk_header.measurement_id,
                         header.compressed_size, header.uncompressed_size)
            yield Page(header, data, self.chunk_header, page_offset)

    def _read_page_header(self, data_input: StreamInput) -> PageHeader:
        uncompressed_size = data_input.read_unsigned_var_int()
        compressed_size = data_input.read_unsigned_var_int()
        if self.chunk_header.has_only_one_page():
            statistics = self.chunk_metadata.statistics
        else:
            statistics = Statistics.deserialize(data_input, self.chunk_header.data_type)
        return PageHeader(uncompressed_size, compressed_size, statistics)
