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
Aggregates stored for every chunk and page.

Each record starts with a common header:

    count: unsigned varint | start_time: int64 | end_time: int64

followed by fields whose layout is selected by the sensor's value type. Values are
taken as stored; nothing checks that min <= max or start_time <= end_time.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Dict, Type

from pytsfile.common.data_input import DataInput
from pytsfile.file.data_types import TSDataType


@dataclass
class Statistics(ABC):
    count: int
    start_time: int
    end_time: int

    data_type: ClassVar[TSDataType]

    @staticmethod
    def deserialize(data_input: DataInput, data_type: TSDataType) -> 'Statistics':
        """Read one statistics record of the given value type."""
        statistics_class = _STATISTICS_CLASSES[data_type]
        count = data_input.read_unsigned_var_int()
        start_time = data_input.read_long()
        end_time = data_input.read_long()
        return statistics_class(count, start_time, end_time, *statistics_class.read_values(data_input))

    @classmethod
    @abstractmethod
    def read_values(cls, data_input: DataInput) -> tuple:
        """Read the type-specific fields that follow the common header."""


@dataclass
class BooleanStatistics(Statistics):
    first_value: bool
    last_value: bool
    sum_value: int

    data_type = TSDataType.BOOLEAN

    @classmethod
    def read_values(cls, data_input: DataInput) -> tuple:
        return data_input.read_bool(), data_input.read_bool(), data_input.read_long()


@dataclass
class IntegerStatistics(Statistics):
    min_value: int
    max_value: int
    first_value: int
    last_value: int
    sum_value: int

    data_type = TSDataType.INT32

    @classmethod
    def read_values(cls, data_input: DataInput) -> tuple:
        return (data_input.read_int(), data_input.read_int(), data_input.read_int(),
                data_input.read_int(), data_input.read_long())


@dataclass
class LongStatistics(Statistics):
    """The sum of a long column is stored as a double."""

    min_value: int
    max_value: int
    first_value: int
    last_value: int
    sum_value: float

    data_type = TSDataType.INT64

    @classmethod
    def read_values(cls, data_input: DataInput) -> tuple:
        return (data_input.read_long(), data_input.read_long(), data_input.read_long(),
                data_input.read_long(), data_input.read_double())


@dataclass
class FloatStatistics(Statistics):
    min_value: float
    max_value: float
    first_value: float
    last_value: float
    sum_value: float

    data_type = TSDataType.FLOAT

    @classmethod
    def read_values(cls, data_input: DataInput) -> tuple:
        return (data_input.read_float(), data_input.read_float(), data_input.read_float(),
                data_input.read_float(), data_input.read_double())


@dataclass
class DoubleStatistics(Statistics):
    min_value: float
    max_value: float
    first_value: float
    last_value: float
    sum_value: float

    data_type = TSDataType.DOUBLE

    @classmethod
    def read_values(cls, data_input: DataInput) -> tuple:
        return (data_input.read_double(), data_input.read_double(), data_input.read_double(),
                data_input.read_double(), data_input.read_double())


@dataclass
class BinaryStatistics(Statistics):
    """First and last values are int32 length-prefixed byte strings."""

    first_value: bytes
    last_value: bytes

    data_type = TSDataType.TEXT

    @classmethod
    def read_values(cls, data_input: DataInput) -> tuple:
        first_value = data_input.read_slice(data_input.read_int())
        last_value = data_input.read_slice(data_input.read_int())
        return first_value, last_value


_STATISTICS_CLASSES: Dict[TSDataType, Type[Statistics]] = {
    statistics_class.data_type: statistics_class
    for statistics_class in (BooleanStatistics, IntegerStatistics, LongStatistics,
                             FloatStatistics, DoubleStatistics, BinaryStatistics)
}
