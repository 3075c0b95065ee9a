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

"""Per-sensor metadata and the locations of the sensor's chunks."""

from dataclasses import dataclass
from enum import Enum
from typing import List

from pytsfile.common.data_input import DataInput, MemorySliceInput
from pytsfile.common.exceptions import TsFileFormatException
from pytsfile.file.data_types import TSDataType
from pytsfile.file.statistics import Statistics


class TimeseriesMetadataType(Enum):
    ONE_CHUNK = 0
    MORE_CHUNKS = 1

    @classmethod
    def from_byte(cls, b: int) -> 'TimeseriesMetadataType':
        return cls.ONE_CHUNK if b == 0 else cls.MORE_CHUNKS


@dataclass(frozen=True)
class ChunkMetadata:
    measurement_id: str
    data_type: TSDataType
    offset_of_chunk_header: int
    statistics: Statistics


@dataclass(frozen=True)
class TimeseriesMetadata:
    """
    Laid out as:

        metadata_type: byte (0 = one chunk)
        measurement_id: var string
        data_type: byte
        chunk_metadata_list_size: unsigned varint
        statistics
        chunk metadata list of chunk_metadata_list_size bytes, each entry an
        int64 chunk header offset followed, when there is more than one chunk,
        by the chunk's own statistics

    A single-chunk series shares its statistics object with its only chunk.
    """

    metadata_type: TimeseriesMetadataType
    measurement_id: str
    data_type: TSDataType
    statistics: Statistics
    chunk_metadata_list: List[ChunkMetadata]

    @classmethod
    def deserialize(cls, data_input: DataInput) -> 'TimeseriesMetadata':
        metadata_type = TimeseriesMetadataType.from_byte(data_input.read_byte())
        measurement_id = data_input.read_var_string()
        type_offset = data_input.absolute_position()
        data_type = TSDataType.from_byte(data_input.read_byte(), type_offset)
        list_size = data_input.read_unsigned_var_int()
        statistics = Statistics.deserialize(data_input, data_type)

        end_position = data_input.position() + list_size
        chunk_metadata_list = []
        while data_input.position() < end_position:
            offset = data_input.read_long()
            if metadata_type == TimeseriesMetadataType.ONE_CHUNK:
                chunk_statistics = statistics
            else:
                chunk_statistics = Statistics.deserialize(data_input, data_type)
            chunk_metadata_list.append(ChunkMetadata(measurement_id, data_type, offset, chunk_statistics))
        if data_input.position() != end_position:
            raise TsFileFormatException(
                "timeseries metadata",
                f"chunk metadata list of '{measurement_id}' overruns its declared {list_size} bytes",
                data_input.base_offset + end_position)

        return cls(metadata_type, measurement_id, data_type, statistics, chunk_metadata_list)

    @classmethod
    def deserialize_all(cls, data: bytes, base_offset: int = 0) -> List['TimeseriesMetadata']:
        """Parse the records laid back to back in data."""
        data_input = MemorySliceInput(data, "timeseries metadata", base_offset)
        result = []
        while data_input.is_readable():
            result.append(cls.deserialize(data_input))
        return result
