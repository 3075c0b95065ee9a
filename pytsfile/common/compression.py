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

"""Page decompression backed by pyarrow codecs."""

from typing import Optional

import pyarrow

from pytsfile.common.exceptions import DecompressionException, UnsupportedEncodingException
from pytsfile.file.data_types import CompressionType

# pyarrow codec names; LZ4 pages are raw LZ4 blocks, not frames
_CODECS = {
    CompressionType.SNAPPY: "snappy",
    CompressionType.GZIP: "gzip",
    CompressionType.LZ4: "lz4_raw",
}


def uncompress(data: bytes, compression_id: int, uncompressed_size: Optional[int] = None) -> bytes:
    """
    Decompress one page payload.

    Args:
        data: The stored payload
        compression_id: Raw compression id from the chunk header
        uncompressed_size: Declared size of the decompressed page, checked when given

    Raises:
        UnsupportedEncodingException: If the compression has no decoder
        DecompressionException: If the payload is malformed
    """
    compression = CompressionType.from_byte(compression_id)
    if compression is None:
        raise UnsupportedEncodingException("compression", f"id {compression_id}")
    if compression == CompressionType.UNCOMPRESSED:
        result = bytes(data)
    else:
        codec_name = _CODECS.get(compression)
        if codec_name is None or not pyarrow.Codec.is_available(codec_name):
            raise UnsupportedEncodingException("compression", compression.name)
        try:
            result = pyarrow.Codec(codec_name).decompress(
                data, decompressed_size=uncompressed_size, asbytes=True)
        except (pyarrow.ArrowException, ValueError, OSError) as e:
            raise DecompressionException(compression.name, len(data), e) from e

    if uncompressed_size is not None and len(result) != uncompressed_size:
        raise DecompressionException(
            compression.name,
            len(data),
            ValueError(f"expected {uncompressed_size} bytes after decompression, got {len(result)}"))
    return result
