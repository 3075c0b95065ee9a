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
Node of the metadata index tree. Every node is laid out as:

    child_count: unsigned varint
    child_count x (name: var string, offset: int64)
    end_offset: int64
    node_type: byte

The i-th child owns the byte range [offset_i, offset_i+1), the last child's range
ending at end_offset. Children are sorted ascending by name.
"""

import bisect
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from pytsfile.common.data_input import DataInput
from pytsfile.common.exceptions import TsFileFormatException


class MetadataIndexNodeType(Enum):
    INTERNAL_DEVICE = 0
    LEAF_DEVICE = 1
    INTERNAL_MEASUREMENT = 2
    LEAF_MEASUREMENT = 3

    @classmethod
    def from_byte(cls, b: int, offset: Optional[int] = None) -> 'MetadataIndexNodeType':
        for node_type in cls:
            if node_type.value == b:
                return node_type
        raise TsFileFormatException("metadata index node", f"unknown node type tag {b}", offset)

    def is_leaf(self) -> bool:
        return self in (MetadataIndexNodeType.LEAF_DEVICE, MetadataIndexNodeType.LEAF_MEASUREMENT)

    def is_device_level(self) -> bool:
        return self in (MetadataIndexNodeType.INTERNAL_DEVICE, MetadataIndexNodeType.LEAF_DEVICE)


@dataclass(frozen=True)
class MetadataIndexEntry:
    name: str
    offset: int


@dataclass(frozen=True)
class MetadataIndexNode:
    children: Tuple[MetadataIndexEntry, ...]
    end_offset: int
    node_type: MetadataIndexNodeType

    @classmethod
    def deserialize(cls, data_input: DataInput) -> 'MetadataIndexNode':
        child_count = data_input.read_unsigned_var_int()
        children = []
        for _ in range(child_count):
            name = data_input.read_var_string()
            children.append(MetadataIndexEntry(name, data_input.read_long()))
        end_offset = data_input.read_long()
        type_offset = data_input.absolute_position()
        node_type = MetadataIndexNodeType.from_byte(data_input.read_byte(), type_offset)
        return cls(tuple(children), end_offset, node_type)

    def is_leaf(self) -> bool:
        return self.node_type.is_leaf()

    def child_range(self, index: int) -> Tuple[int, int]:
        """The [start, end) byte range owned by the child at index."""
        start = self.children[index].offset
        if index + 1 < len(self.children):
            end = self.children[index + 1].offset
        else:
            end = self.end_offset
        if start < 0 or end < start:
            raise TsFileFormatException(
                "metadata index node",
                f"child '{self.children[index].name}' has invalid range [{start}, {end})")
        return start, end

    def binary_search(self, key: str) -> int:
        """
        Index of the child whose range owns key: the exact match if present,
        otherwise the greatest child sorting before key. -1 if key sorts before
        every child.
        """
        names = [child.name for child in self.children]
        insertion = bisect.bisect_left(names, key)
        if insertion < len(names) and names[insertion] == key:
            return insertion
        return insertion - 1
