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
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import pyarrow as pa

from pytsfile.chunk.chunk_header import ChunkHeader
from pytsfile.common.compression import uncompress
from pytsfile.common.data_input import MemorySliceInput
from pytsfile.common.exceptions import TsFileFormatException
from pytsfile.encoding.decoder import time_decoder, value_decoder
from pytsfile.file.data_types import TSDataType
from pytsfile.file.statistics import Statistics

logger = logging.getLogger(__name__)

_ARROW_TYPES = {
    TSDataType.BOOLEAN: pa.bool_(),
    TSDataType.INT32: pa.int32(),
    TSDataType.INT64: pa.int64(),
    TSDataType.FLOAT: pa.float32(),
    TSDataType.DOUBLE: pa.float64(),
    TSDataType.TEXT: pa.binary(),
}


def to_arrow_type(data_type: TSDataType) -> pa.DataType:
    return _ARROW_TYPES[data_type]


@dataclass(frozen=True)
class PageHeader:
    uncompressed_size: int
    compressed_size: int
    statistics: Statistics


@dataclass(frozen=True)
class PageData:
    """Decoded columns of one page, timestamps[i] paired with values[i]."""

    timestamps: List[int]
    values: list
    data_type: TSDataType

    def __len__(self) -> int:
        return len(self.timestamps)

    def __iter__(self) -> Iterator[Tuple[int, object]]:
        return iter(zip(self.timestamps, self.values))

    def to_arrow(self, value_column: str = "value") -> pa.Table:
        return pa.table({
            "time": pa.array(self.timestamps, type=pa.int64()),
            value_column: pa.array(self.values, type=to_arrow_type(self.data_type)),
        })


@dataclass(frozen=True)
class Page:
    """
    A compressed page as stored in its chunk. The payload is decoded only when
    decode() is called.
    """

    header: PageHeader
    data: bytes
    chunk_header: ChunkHeader
    offset: int

    @property
    def statistics(self) -> Statistics:
        return self.header.statistics

    def decode(self) -> PageData:
        """
        Decompress the payload and decode the time column, a varint length
        prefixed block, and the value column that fills the rest of the page.
        """
        chunk_header = self.chunk_header
        values_decoder = value_decoder(chunk_header.data_type, chunk_header.encoding_type_id)
        buffer = uncompress(self.data, chunk_header.compression_type_id, self.header.uncompressed_size)

        page_input = MemorySliceInput(buffer, "page")
        time_length = page_input.read_unsigned_var_int()
        timestamps = time_decoder().decode(MemorySliceInput(page_input.read_slice(time_length), "page time column"))
        values = values_decoder.decode(MemorySliceInput(page_input.remaining(), "page value column"))

        if len(timestamps) != len(values):
            raise TsFileFormatException(
                "page",
                f"{len(timestamps)} timestamps but {len(values)} values in sensor '{chunk_header.measurement_id}'",
                self.offset)
        logger.debug("Decoded %d points of sensor %s from page at %d",
                     len(timestamps), chunk_header.measurement_id, self.offset)
        return PageData(timestamps, values, chunk_header.data_type)


def decode_page(page: Page) -> PageData:
    return page.decode()
