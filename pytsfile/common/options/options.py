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

from typing import Any, Type, Union

from pytsfile.common.options.config_option import ConfigOption


class Options:
    """Typed view over a plain dict of string options."""

    def __init__(self, data: dict):
        self.data = data

    @classmethod
    def from_none(cls) -> 'Options':
        return cls({})

    @classmethod
    def of(cls, options: Union['Options', dict, None]) -> 'Options':
        if options is None:
            return cls.from_none()
        if isinstance(options, Options):
            return options
        return cls(dict(options))

    def get(self, key: ConfigOption, default=None):
        """
        Get the value for the given ConfigOption, with type conversion.
        Args:
            key: The ConfigOption to get the value for
            default: The default value to return if the ConfigOption is not found
        Returns:
            The converted value according to the ConfigOption's type, or default if not found
        """
        main_key = key.key()
        if main_key in self.data:
            raw_value = self.data[main_key]
            if raw_value is not None:
                return convert_value(raw_value, key.get_clazz())

        return default if default is not None else key.default_value()

    def set(self, key: ConfigOption, value) -> None:
        self.data[key.key()] = str(value)

    def contains(self, key: ConfigOption) -> bool:
        return key.key() in self.data


def convert_value(value: Any, target_type: Type) -> Any:
    if isinstance(value, target_type):
        return value
    if target_type == str:
        return str(value)
    if target_type == bool:
        return _convert_to_boolean(value)
    if target_type == int:
        if isinstance(value, str):
            return int(value.strip())
        if isinstance(value, float):
            return int(value)
        raise ValueError(f"Cannot convert {type(value)} to int")
    raise ValueError(f"Unsupported type: {target_type}")


def _convert_to_boolean(value: Any) -> bool:
    if isinstance(value, str):
        lower_value = value.lower().strip()
        if lower_value in ('true', '1', 'yes', 'on'):
            return True
        if lower_value in ('false', '0', 'no', 'off'):
            return False
        raise ValueError(f"Cannot convert '{value}' to boolean")
    if isinstance(value, (int, float)):
        return bool(value)
    raise ValueError(f"Cannot convert {type(value)} to boolean")
