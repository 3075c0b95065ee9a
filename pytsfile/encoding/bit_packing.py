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

"""Fixed-width integers packed most-significant-bit first."""

from pytsfile.common.exceptions import TruncatedDataException


def packed_bytes(count: int, width: int) -> int:
    """Bytes needed to hold count values of width bits."""
    return (count * width + 7) // 8


def read_packed_long(data: bytes, pos: int, width: int) -> int:
    """
    Extract the width-bit unsigned integer starting at bit pos of data.

    Bits are numbered from the most significant bit of data[0], so the value of
    the first byte's top bit is the value's top bit when pos is 0.
    """
    if width == 0:
        return 0
    if width < 0 or width > 64:
        raise ValueError(f"Pack width must be in [0, 64], got {width}")
    end_bit = pos + width
    start_byte = pos // 8
    end_byte = (end_bit + 7) // 8
    if end_byte > len(data):
        raise TruncatedDataException("packed data", start_byte, end_byte - start_byte, len(data) - start_byte)
    window = int.from_bytes(data[start_byte:end_byte], 'big')
    return (window >> (end_byte * 8 - end_bit)) & ((1 << width) - 1)
