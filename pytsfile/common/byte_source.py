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

"""
Random access to the bytes of one TsFile.

A ByteSource owns a single handle to the underlying file and always seeks
before reading, so the handle position carries no meaning between calls.
Two access modes are offered: get_bytes materializes an owned buffer for a
window, get_read returns a FileSource streaming the window through a fixed
read-ahead buffer.

Note that this class is NOT thread-safe. Use clone() to obtain an independent
handle for another reader.
"""

import io
import logging
from typing import BinaryIO, Callable, Optional

from pytsfile.common.exceptions import TsFileFormatException, TsFileIOException

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 8 * 1024


class ByteSource:

    def __init__(
        self,
        opener: Callable[[], BinaryIO],
        size: int,
        name: str = "<unnamed>",
        buffer_size: int = DEFAULT_BUFFER_SIZE
    ):
        """
        Args:
            opener: Returns a new seekable binary handle to the same file on every call
            size: Total size of the file in bytes
            name: Description used in logs
            buffer_size: Read-ahead buffer size of streamed windows
        """
        if size < 0:
            raise ValueError(f"File size must be >= 0, got {size}")
        self._opener = opener
        self._size = size
        self.name = name
        self.buffer_size = buffer_size
        self._handle: Optional[BinaryIO] = None

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "<memory>", buffer_size: int = DEFAULT_BUFFER_SIZE) -> 'ByteSource':
        data = bytes(data)
        return cls(lambda: io.BytesIO(data), len(data), name, buffer_size)

    @classmethod
    def from_path(cls, path: str, options=None) -> 'ByteSource':
        from pytsfile.common.file_io import FileIO
        from pytsfile.common.tsfile_options import TsFileOptions

        file_io = FileIO(path, options)
        size = file_io.get_file_size(path)
        buffer_size = TsFileOptions(file_io.properties).read_buffer_size()
        return cls(lambda: file_io.new_input_stream(path), size, path, buffer_size)

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def clone(self) -> 'ByteSource':
        """Another source over the same file with its own handle."""
        return ByteSource(self._opener, self._size, self.name, self.buffer_size)

    def check_range(self, start: int, length: int) -> None:
        if start < 0 or length < 0 or start + length > self._size:
            raise TsFileFormatException(
                "byte range",
                f"[{start}, {start + length}) is outside the file of {self._size} bytes",
                start)

    def get_bytes(self, start: int, length: int) -> bytes:
        """Read exactly length bytes at absolute position start."""
        self.check_range(start, length)
        data = self.read_at(start, length)
        if len(data) != length:
            raise TsFileIOException(start, length, len(data))
        return data

    def get_read(self, start: int, length: int) -> 'FileSource':
        """Stream the window [start, start + length)."""
        self.check_range(start, length)
        return FileSource(self, start, length, self.buffer_size)

    def read_at(self, position: int, length: int) -> bytes:
        """Seek to position and read up to length bytes; fewer only at end of file."""
        if length == 0:
            return b''
        handle = self._get_handle()
        chunks = []
        remaining = length
        try:
            handle.seek(position)
            while remaining > 0:
                data = handle.read(remaining)
                if not data:
                    break
                chunks.append(data)
                remaining -= len(data)
        except OSError as e:
            raise TsFileIOException(position, length, reason=str(e)) from e
        return b''.join(chunks)

    def _get_handle(self) -> BinaryIO:
        if self._handle is None:
            try:
                self._handle = self._opener()
            except OSError as e:
                raise TsFileIOException(0, 0, reason=f"cannot open {self.name}: {e}") from e
            logger.debug("Opened handle to %s (%d bytes)", self.name, self._size)
        return self._handle

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class FileSource:
    """
    A bounded window of a ByteSource consumed sequentially.

    Reads smaller than the buffer are served from a read-ahead buffer refilled at
    the logical position; larger reads with an empty buffer bypass it and go
    straight to the source.
    """

    def __init__(self, source: ByteSource, start: int, length: int, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self.source = source
        self.start = start
        self.end = start + length
        self.buffer_size = buffer_size
        self._buf = b''
        self._buf_pos = 0

    def __len__(self) -> int:
        return self.end - self.start

    def pos(self) -> int:
        return self.start

    def read(self, length: int) -> bytes:
        """Read up to length bytes, fewer only when the window is exhausted."""
        to_read = min(length, self.end - self.start)
        out = bytearray()
        while len(out) < to_read:
            wanted = to_read - len(out)
            if self._buf_pos >= len(self._buf) and wanted >= self.buffer_size:
                self._buf = b''
                self._buf_pos = 0
                out += self._read_through(wanted)
                continue
            if self._buf_pos >= len(self._buf):
                self._buf = self._read_through(min(self.buffer_size, self.end - self.start), advance=False)
                self._buf_pos = 0
            n = min(wanted, len(self._buf) - self._buf_pos)
            out += self._buf[self._buf_pos:self._buf_pos + n]
            self._buf_pos += n
            self.start += n
        return bytes(out)

    def _read_through(self, length: int, advance: bool = True) -> bytes:
        data = self.source.read_at(self.start, length)
        if len(data) != length:
            raise TsFileIOException(self.start, length, len(data))
        if advance:
            self.start += len(data)
        return data
