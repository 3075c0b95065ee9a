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

"""Identifier tables for value types, encodings and compressions."""

from enum import Enum
from typing import Optional

from pytsfile.common.exceptions import TsFileFormatException


class TSDataType(Enum):
    """Declared value type of a sensor."""

    BOOLEAN = 0
    INT32 = 1
    INT64 = 2
    FLOAT = 3
    DOUBLE = 4
    TEXT = 5

    @classmethod
    def from_byte(cls, b: int, offset: Optional[int] = None) -> 'TSDataType':
        for data_type in cls:
            if data_type.value == b:
                return data_type
        raise TsFileFormatException("data type", f"unknown data type tag {b}", offset)


class TSEncoding(Enum):
    """Encoding of a value column. Only some of them have decoders."""

    PLAIN = 0
    PLAIN_DICTIONARY = 1
    RLE = 2
    DIFF = 3
    TS_2DIFF = 4
    BITMAP = 5
    GORILLA_V1 = 6
    REGULAR = 7
    GORILLA = 8

    @classmethod
    def from_byte(cls, b: int) -> Optional['TSEncoding']:
        """None for an id this reader does not know."""
        for encoding in cls:
            if encoding.value == b:
                return encoding
        return None


class CompressionType(Enum):
    """Compression of a page payload."""

    UNCOMPRESSED = 0
    SNAPPY = 1
    GZIP = 2
    LZO = 3
    SDT = 4
    PAA = 5
    PLA = 6
    LZ4 = 7

    @classmethod
    def from_byte(cls, b: int) -> Optional['CompressionType']:
        """None for an id this reader does not know."""
        for compression in cls:
            if compression.value == b:
                return compression
        return None
