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

from pytsfile.chunk.chunk_reader import ChunkReader
from pytsfile.chunk.page import Page, PageData, decode_page
from pytsfile.common.byte_source import ByteSource
from pytsfile.common.exceptions import (DecompressionException,
                                        TruncatedDataException,
                                        TsFileException,
                                        TsFileFormatException,
                                        TsFileIOException,
                                        UnsupportedEncodingException)
from pytsfile.common.tsfile_options import TsFileOptions
from pytsfile.reader.tsfile_reader import TsFileReader

__all__ = [
    'TsFileReader',
    'TsFileOptions',
    'ByteSource',
    'ChunkReader',
    'Page',
    'PageData',
    'decode_page',
    'TsFileException',
    'TsFileIOException',
    'TsFileFormatException',
    'TruncatedDataException',
    'DecompressionException',
    'UnsupportedEncodingException',
]
