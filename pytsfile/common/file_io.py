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
Resolves a TsFile location to a pyarrow filesystem and opens it for random
access. Local paths and file:// URIs use the local filesystem; s3://, s3a://,
s3n:// and oss:// URIs use an S3-compatible filesystem configured from the
fs.s3.* or fs.oss.* options.
"""

import logging
import os
import re
from typing import Any, Dict, Tuple
from urllib.parse import urlparse

import pyarrow
from packaging.version import parse
from pyarrow.fs import FileSystem, FileType

from pytsfile.common.options import Options
from pytsfile.common.tsfile_options import OssOptions, S3Options

logger = logging.getLogger(__name__)

_OBJECT_STORE_SCHEMES = {
    "s3": S3Options,
    "s3a": S3Options,
    "s3n": S3Options,
    "oss": OssOptions,
}


class FileIO:

    def __init__(self, location: str, options=None):
        self.properties = Options.of(options)
        scheme, bucket = self.parse_location(location)
        if scheme == "file":
            from pyarrow.fs import LocalFileSystem
            self.filesystem: FileSystem = LocalFileSystem()
        elif scheme in _OBJECT_STORE_SCHEMES:
            self.filesystem = self._object_store_fs(_OBJECT_STORE_SCHEMES[scheme], bucket)
        else:
            raise ValueError(f"Unrecognized filesystem type in URI: {scheme}")

    @staticmethod
    def parse_location(location: str) -> Tuple[str, str]:
        """Scheme and bucket of a location; plain paths and drive letters are local files."""
        uri = urlparse(location)
        if not uri.scheme or (len(uri.scheme) == 1 and not uri.netloc):
            return "file", ""
        return uri.scheme, uri.netloc

    def _object_store_fs(self, store_options, bucket: str) -> FileSystem:
        from pyarrow.fs import S3FileSystem

        client_kwargs = {
            "access_key": self.properties.get(store_options.ACCESS_KEY_ID),
            "secret_key": self.properties.get(store_options.ACCESS_KEY_SECRET),
            "session_token": self.properties.get(store_options.SECURITY_TOKEN),
            "endpoint_override": self.properties.get(store_options.ENDPOINT),
            "region": self.properties.get(store_options.REGION),
        }
        # OSS only serves virtual-hosted requests, see https://github.com/apache/arrow/issues/40506
        if parse(pyarrow.__version__) >= parse("16.0.0"):
            client_kwargs["force_virtual_addressing"] = True
        elif store_options is OssOptions and client_kwargs["endpoint_override"]:
            client_kwargs["endpoint_override"] = f"{bucket.split('.', 1)[0]}.{client_kwargs['endpoint_override']}"
        client_kwargs.update(self._retry_config())
        return S3FileSystem(**client_kwargs)

    @staticmethod
    def _retry_config(max_attempts: int = 10, timeout: int = 60) -> Dict[str, Any]:
        """Retry strategy and timeouts need pyarrow >= 8.0.0; older versions use their defaults."""
        if parse(pyarrow.__version__) < parse("8.0.0"):
            return {}
        from pyarrow.fs import AwsStandardS3RetryStrategy
        return {
            "request_timeout": timeout,
            "connect_timeout": timeout,
            "retry_strategy": AwsStandardS3RetryStrategy(max_attempts=max_attempts),
        }

    def to_filesystem_path(self, path: str) -> str:
        """The path as the filesystem expects it: absolute for local files, bucket/key for object stores."""
        from pyarrow.fs import S3FileSystem

        parsed = urlparse(path)
        if parsed.scheme and len(parsed.scheme) == 1 and not parsed.netloc:
            return path

        key = re.sub(r'/+', '/', parsed.path) if parsed.path else ''
        if isinstance(self.filesystem, S3FileSystem):
            key = key.lstrip('/')
            if parsed.scheme and parsed.netloc:
                return f"{parsed.netloc}/{key}" if key else parsed.netloc
            return key or "."
        if parsed.scheme:
            return key or "/"
        return os.path.abspath(path)

    def new_input_stream(self, path: str):
        """A seekable binary handle; every call opens a new one."""
        fs_path = self.to_filesystem_path(path)
        logger.debug("Opening %s", fs_path)
        return self.filesystem.open_input_file(fs_path)

    def get_file_status(self, path: str):
        return self.filesystem.get_file_info([self.to_filesystem_path(path)])[0]

    def get_file_size(self, path: str) -> int:
        file_info = self.get_file_status(path)
        if file_info.type == FileType.NotFound:
            raise FileNotFoundError(f"File {path} does not exist")
        if file_info.type != FileType.File or file_info.size is None:
            raise ValueError(f"{path} is not a regular file")
        return file_info.size
