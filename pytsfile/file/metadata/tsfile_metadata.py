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

from pytsfile.common.data_input import MemorySliceInput
from pytsfile.common.exceptions import TsFileFormatException
from pytsfile.file.metadata.bloom_filter import BloomFilter
from pytsfile.file.metadata.metadata_index import MetadataIndexNode


@dataclass(frozen=True)
class TsFileMetadata:
    """
    The metadata block: the root index node, the int64 meta offset and, when
    bytes remain, a bloom filter laid out as

        length: unsigned varint | bits: length bytes | size: unsigned varint |
        hash_function_size: unsigned varint

    Built once per file and shared by every reader derived from it.
    """

    metadata_index: MetadataIndexNode
    meta_offset: int
    bloom_filter: Optional[BloomFilter]

    @classmethod
    def deserialize(cls, data: bytes, base_offset: int = 0) -> 'TsFileMetadata':
        data_input = MemorySliceInput(data, "file metadata", base_offset)
        metadata_index = MetadataIndexNode.deserialize(data_input)
        meta_offset = data_input.read_long()

        bloom_filter = None
        if data_input.is_readable():
            filter_offset = data_input.absolute_position()
            bits = data_input.read_slice(data_input.read_unsigned_var_int())
            size = data_input.read_unsigned_var_int()
            hash_function_size = data_input.read_unsigned_var_int()
            if size <= 0:
                raise TsFileFormatException("bloom filter", f"non-positive size {size}", filter_offset)
            bloom_filter = BloomFilter(bits, size, hash_function_size)

        return cls(metadata_index, meta_offset, bloom_filter)
