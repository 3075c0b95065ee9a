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
Search and traversal over the metadata index tree.

The tree is never loaded in full: each node is fetched from the byte range its
parent assigns to it, parsed, and dropped once the traversal step is done. The
device-level tree maps device names to the root of each device's
measurement-level tree, whose leaves map sensor names to timeseries metadata.

Note that this class is NOT thread-safe; it reads through the reader's source.
"""

import logging
from typing import Iterator, List, Optional

from pytsfile.common.byte_source import ByteSource
from pytsfile.common.data_input import MemorySliceInput
from pytsfile.common.exceptions import TsFileFormatException
from pytsfile.file.metadata.metadata_index import MetadataIndexNode, MetadataIndexNodeType
from pytsfile.file.metadata.timeseries_metadata import TimeseriesMetadata

logger = logging.getLogger(__name__)


class MetadataIndexTree:

    def __init__(self, source: ByteSource, root: MetadataIndexNode):
        self.source = source
        self.root = root

    def read_node(self, start: int, end: int) -> MetadataIndexNode:
        data = self.source.get_bytes(start, end - start)
        node = MetadataIndexNode.deserialize(MemorySliceInput(data, "metadata index node", start))
        logger.debug("Read %s node [%d, %d) with %d children",
                     node.node_type.name, start, end, len(node.children))
        return node

    def read_child(self, node: MetadataIndexNode, index: int) -> MetadataIndexNode:
        start, end = node.child_range(index)
        return self.read_node(start, end)

    def iter_leaves(self, node: Optional[MetadataIndexNode] = None) -> Iterator[MetadataIndexNode]:
        """
        Yield the leaf nodes under node (the root by default) in ascending name
        order. Each call walks with its own stack.
        """
        stack = [node if node is not None else self.root]
        while stack:
            current = stack.pop()
            if current.is_leaf():
                yield current
                continue
            children = [self.read_child(current, i) for i in range(len(current.children))]
            stack.extend(reversed(children))

    def search_leaf(self, key: str, node: Optional[MetadataIndexNode] = None) -> Optional[MetadataIndexNode]:
        """
        Descend from node (the root by default) to the leaf whose range owns key.
        None if key sorts before every entry on the way down.
        """
        current = node if node is not None else self.root
        while not current.is_leaf():
            index = current.binary_search(key)
            if index < 0:
                return None
            current = self.read_child(current, index)
        return current

    def iter_device_names(self) -> Iterator[str]:
        for leaf in self.iter_leaves():
            self._check_node_type(leaf, MetadataIndexNodeType.LEAF_DEVICE)
            for child in leaf.children:
                yield child.name

    def measurement_root(self, device: str) -> Optional[MetadataIndexNode]:
        """Root of the device's measurement-level tree, None if the device is absent."""
        leaf = self.search_leaf(device)
        if leaf is None:
            return None
        self._check_node_type(leaf, MetadataIndexNodeType.LEAF_DEVICE)
        index = leaf.binary_search(device)
        if index < 0 or leaf.children[index].name != device:
            return None
        return self.read_child(leaf, index)

    def iter_timeseries_metadata(self, device: str) -> Iterator[TimeseriesMetadata]:
        """Every sensor of device in ascending name order; empty if the device is absent."""
        root = self.measurement_root(device)
        if root is None:
            return
        for leaf in self.iter_leaves(root):
            self._check_node_type(leaf, MetadataIndexNodeType.LEAF_MEASUREMENT)
            yield from self._read_leaf_timeseries_metadata(leaf)

    def search_timeseries_metadata(self, device: str, sensor: str) -> List[TimeseriesMetadata]:
        """
        Timeseries metadata sharing the measurement leaf that owns sensor. A leaf
        range may bundle several sensors, so callers match the sensor id exactly.
        """
        root = self.measurement_root(device)
        if root is None:
            return []
        leaf = self.search_leaf(sensor, root)
        if leaf is None:
            return []
        self._check_node_type(leaf, MetadataIndexNodeType.LEAF_MEASUREMENT)
        return self._read_leaf_timeseries_metadata(leaf)

    def _read_leaf_timeseries_metadata(self, leaf: MetadataIndexNode) -> List[TimeseriesMetadata]:
        result = []
        for i in range(len(leaf.children)):
            start, end = leaf.child_range(i)
            data = self.source.get_bytes(start, end - start)
            result.extend(TimeseriesMetadata.deserialize_all(data, start))
        return result

    @staticmethod
    def _check_node_type(node: MetadataIndexNode, expected: MetadataIndexNodeType) -> None:
        if node.node_type != expected:
            raise TsFileFormatException(
                "metadata index node", f"expected a {expected.name} node, got {node.node_type.name}")
