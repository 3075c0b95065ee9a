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

"""Big-endian primitive reads over an in-memory slice or a streamed byte range."""

import struct
from abc import ABC, abstractmethod

from pytsfile.common.exceptions import TruncatedDataException, TsFileFormatException

_INT = struct.Struct('>i')
_LONG = struct.Struct('>q')
_FLOAT = struct.Struct('>f')
_DOUBLE = struct.Struct('>d')

MAX_VAR_INT_BYTES = 5


class DataInput(ABC):
    """
    Typed reads shared by every input. Subclasses only provide raw byte access;
    a short read raises TruncatedDataException carrying the object kind and the
    absolute offset of the failed read.
    """

    def __init__(self, kind: str, base_offset: int = 0):
        self.kind = kind
        self.base_offset = base_offset

    @abstractmethod
    def position(self) -> int:
        """Number of bytes consumed so far."""

    @abstractmethod
    def _read(self, length: int) -> bytes:
        """Read up to length bytes; may return fewer at the end of input."""

    def absolute_position(self) -> int:
        return self.base_offset + self.position()

    def read_slice(self, length: int) -> bytes:
        if length < 0:
            raise TsFileFormatException(self.kind, f"negative length {length}", self.absolute_position())
        offset = self.absolute_position()
        value = self._read(length)
        if len(value) != length:
            raise TruncatedDataException(self.kind, offset, length, len(value))
        return value

    def read_byte(self) -> int:
        return self.read_slice(1)[0]

    def read_bool(self) -> bool:
        return self.read_byte() != 0

    def read_int(self) -> int:
        return _INT.unpack(self.read_slice(4))[0]

    def read_long(self) -> int:
        return _LONG.unpack(self.read_slice(8))[0]

    def read_float(self) -> float:
        return _FLOAT.unpack(self.read_slice(4))[0]

    def read_double(self) -> float:
        return _DOUBLE.unpack(self.read_slice(8))[0]

    def read_unsigned_var_int(self) -> int:
        """Read an unsigned 32-bit varint, 7 bits per byte, high bit continues."""
        start = self.absolute_position()
        result = 0
        shift = 0
        for _ in range(MAX_VAR_INT_BYTES - 1):
            b = self.read_byte()
            result |= (b & 0x7F) << shift
            if (b & 0x80) == 0:
                return result
            shift += 7
        # the last byte holds only bits 28-31
        b = self.read_byte()
        if b > 0x0F:
            raise TsFileFormatException(
                self.kind, f"varint exceeds 32 bits or is longer than {MAX_VAR_INT_BYTES} bytes", start)
        return result | (b << shift)

    def read_var_string(self) -> str:
        """
        Read a string prefixed by its varint length. The low bit of the varint is
        a sign flag: when set, the shifted length is bitwise complemented.
        """
        start = self.absolute_position()
        varint = self.read_unsigned_var_int()
        length = varint >> 1
        if varint & 1:
            length = ~length
        if length < 0:
            raise TsFileFormatException(self.kind, f"negative string length {length}", start)
        data = self.read_slice(length)
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise TsFileFormatException(self.kind, f"string is not valid UTF-8: {e}", start) from e


class MemorySliceInput(DataInput):
    """Input for byte array."""

    def __init__(self, data: bytes, kind: str = "buffer", base_offset: int = 0):
        super().__init__(kind, base_offset)
        self.data = data
        self._position = 0

    def position(self) -> int:
        return self._position

    def available(self) -> int:
        return len(self.data) - self._position

    def is_readable(self) -> bool:
        return self.available() > 0

    def _read(self, length: int) -> bytes:
        value = self.data[self._position:self._position + length]
        self._position += len(value)
        return value

    def remaining(self) -> bytes:
        return self._read(self.available())


class StreamInput(DataInput):
    """Input over a streamed byte range, consumed strictly forward."""

    def __init__(self, source, kind: str = "stream"):
        super().__init__(kind, source.start)
        self.source = source
        self._position = 0

    def position(self) -> int:
        return self._position

    def available(self) -> int:
        return len(self.source)

    def is_readable(self) -> bool:
        return self.available() > 0

    def _read(self, length: int) -> bytes:
        value = self.source.read(length)
        self._position += len(value)
        return value
