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

from dataclasses import dataclass
from typing import Optional

from pytsfile.common.data_input import DataInput
from pytsfile.file.data_types import CompressionType, TSDataType, TSEncoding

# chunk_type of a chunk holding exactly one page without page statistics
ONLY_ONE_PAGE_CHUNK_HEADER = 5


@dataclass(frozen=True)
class ChunkHeader:
    """
    Laid out as:

        chunk_type: byte | measurement_id: var string | data_size: unsigned varint |
        data_type: byte | compression_type: byte | encoding_type: byte

    Compression and encoding ids are kept raw so that chunks using variants
    without a decoder still parse.
    """

    chunk_type: int
    measurement_id: str
    data_size: int
    data_type: TSDataType
    compression_type_id: int
    encoding_type_id: int
    serialized_size: int

    @classmethod
    def deserialize(cls, data_input: DataInput) -> 'ChunkHeader':
        start = data_input.position()
        chunk_type = data_input.read_byte()
        measurement_id = data_input.read_var_string()
        data_size = data_input.read_unsigned_var_int()
        type_offset = data_input.absolute_position()
        data_type = TSDataType.from_byte(data_input.read_byte(), type_offset)
        compression_type_id = data_input.read_byte()
        encoding_type_id = data_input.read_byte()
        return cls(chunk_type, measurement_id, data_size, data_type,
                   compression_type_id, encoding_type_id, data_input.position() - start)

    @property
    def compression_type(self) -> Optional[CompressionType]:
        return CompressionType.from_byte(self.compression_type_id)

    @property
    def encoding_type(self) -> Optional[TSEncoding]:
        return TSEncoding.from_byte(self.encoding_type_id)

    def has_only_one_page(self) -> bool:
        return self.chunk_type == ONLY_ONE_PAGE_CHUNK_HEADER
