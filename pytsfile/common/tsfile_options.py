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

from pytsfile.common.options import ConfigOption, ConfigOptions, Options


class S3Options:
    ACCESS_KEY_ID = ConfigOptions.key("fs.s3.accessKeyId").string_type().no_default_value().with_description(
        "S3 access key ID")
    ACCESS_KEY_SECRET = ConfigOptions.key("fs.s3.accessKeySecret").string_type().no_default_value().with_description(
        "S3 access key secret")
    SECURITY_TOKEN = ConfigOptions.key("fs.s3.securityToken").string_type().no_default_value().with_description(
        "S3 security token")
    ENDPOINT = ConfigOptions.key("fs.s3.endpoint").string_type().no_default_value().with_description("S3 endpoint")
    REGION = ConfigOptions.key("fs.s3.region").string_type().no_default_value().with_description("S3 region")


class OssOptions:
    ACCESS_KEY_ID = ConfigOptions.key("fs.oss.accessKeyId").string_type().no_default_value().with_description(
        "OSS access key ID")
    ACCESS_KEY_SECRET = ConfigOptions.key("fs.oss.accessKeySecret").string_type().no_default_value().with_description(
        "OSS access key secret")
    SECURITY_TOKEN = ConfigOptions.key("fs.oss.securityToken").string_type().no_default_value().with_description(
        "OSS security token")
    ENDPOINT = ConfigOptions.key("fs.oss.endpoint").string_type().no_default_value().with_description("OSS endpoint")
    REGION = ConfigOptions.key("fs.oss.region").string_type().no_default_value().with_description("OSS region")


class TsFileOptions:
    """Options of the TsFile reader."""

    READ_BUFFER_SIZE: ConfigOption[int] = (
        ConfigOptions.key("read.buffer-size")
        .int_type()
        .default_value(8 * 1024)
        .with_description("Size of the read-ahead buffer used when streaming a byte range.")
    )

    BLOOM_FILTER_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("bloom-filter.enabled")
        .boolean_type()
        .default_value(True)
        .with_description("Whether to consult the file's bloom filter before point lookups.")
    )

    PATH_SEPARATOR: ConfigOption[str] = (
        ConfigOptions.key("path.separator")
        .string_type()
        .default_value(".")
        .with_description("Separator joining a device and a sensor into a series path.")
    )

    def __init__(self, options: Options):
        self.options = options

    @staticmethod
    def from_dict(options) -> 'TsFileOptions':
        return TsFileOptions(Options.of(options))

    def read_buffer_size(self) -> int:
        size = self.options.get(TsFileOptions.READ_BUFFER_SIZE)
        if size <= 0:
            raise ValueError(f"{TsFileOptions.READ_BUFFER_SIZE.key()} must be positive, got {size}")
        return size

    def bloom_filter_enabled(self) -> bool:
        return self.options.get(TsFileOptions.BLOOM_FILTER_ENABLED)

    def path_separator(self) -> str:
        return self.options.get(TsFileOptions.PATH_SEPARATOR)
