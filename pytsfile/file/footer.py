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

"""The fixed-size trailer at the end of every TsFile."""

import struct
from dataclasses import dataclass

from pytsfile.common.exceptions import TsFileFormatException


@dataclass(frozen=True)
class TsFileFooter:
    """
    Ten bytes: the big-endian int32 length of the metadata block that precedes
    the footer, then the magic tag.
    """

    metadata_length: int

    MAGIC_STRING = b"TsFile"
    ENCODED_LENGTH = 10

    @classmethod
    def read_footer(cls, data: bytes, offset: int = 0) -> 'TsFileFooter':
        if len(data) != cls.ENCODED_LENGTH:
            raise TsFileFormatException(
                "footer", f"expected {cls.ENCODED_LENGTH} bytes, got {len(data)}", offset)
        if data[4:] != cls.MAGIC_STRING:
            raise TsFileFormatException("footer", f"bad magic {data[4:]!r}", offset + 4)
        metadata_length = struct.unpack('>i', data[0:4])[0]
        if metadata_length < 0:
            raise TsFileFormatException("footer", f"negative metadata length {metadata_length}", offset)
        return cls(metadata_length)
