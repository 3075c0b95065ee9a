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

from typing import Optional


class TsFileException(Exception):
    """Base TsFile exception"""


class TsFileIOException(TsFileException):
    """The byte source failed to seek, or returned fewer bytes than requested"""

    def __init__(self, offset: int, expected: int, actual: Optional[int] = None, reason: str = ""):
        self.offset = offset
        self.expected = expected
        self.actual = actual
        if actual is None:
            message = f"Failed to read {expected} bytes at offset {offset}"
        else:
            message = f"Short read at offset {offset}: expected {expected} bytes, got {actual}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TsFileFormatException(TsFileException):
    """The file content violates the binary layout"""

    def __init__(self, kind: str, message: str, offset: Optional[int] = None):
        self.kind = kind
        self.offset = offset
        location = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Invalid {kind}{location}: {message}")


class TruncatedDataException(TsFileFormatException):
    """A read ran past the end of the buffer holding an object"""

    def __init__(self, kind: str, offset: int, expected: int, available: int):
        self.expected = expected
        self.available = available
        super().__init__(
            kind,
            f"needs {expected} bytes but only {available} available",
            offset)


class DecompressionException(TsFileException):
    """A page payload could not be decompressed"""

    def __init__(self, compression: str, compressed_size: int, cause: Exception):
        self.compression = compression
        self.compressed_size = compressed_size
        super().__init__(
            f"Failed to decompress {compressed_size} bytes with {compression}: {cause}")


class UnsupportedEncodingException(TsFileException):
    """A recognized variant that has no decoder"""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unsupported {kind}: {name}")
