# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import heapq
import logging
from typing import List
from typing import Sequence
from typing import Tuple

logger = logging.getLogger(__name__)


class HuffmanTree(object):
    """Binary Huffman tree over vocabulary frequencies.

    Leaves are the ids ``0..n-1``; the ``n - 1`` inner nodes are numbered
    ``0..n-2`` with the root last. ``points[id]`` lists the inner nodes on the
    way from the root to the leaf and ``codes[id]`` the branch taken at each.
    """
    points: List[List[int]]
    codes: List[List[int]]

    def __init__(self, freqs: Sequence[int]) -> None:
        n = len(freqs)
        self.size = n
        heap: List[Tuple[int, int]] = [(f, i) for i, f in enumerate(freqs)]
        heapq.heapify(heap)

        parent = [0] * max(2 * n - 1, 0)
        binary = [0] * max(2 * n - 1, 0)
        next_node = n
        while len(heap) > 1:
            f1, i1 = heapq.heappop(heap)
            f2, i2 = heapq.heappop(heap)
            parent[i1] = parent[i2] = next_node
            binary[i2] = 1
            heapq.heappush(heap, (f1 + f2, next_node))
            next_node += 1

        root = 2 * n - 2
        self.points = []
        self.codes = []
        for leaf in range(n):
            points: List[int] = []
            codes: List[int] = []
            node = leaf
            while node != root:
                codes.append(binary[node])
                node = parent[node]
                points.append(node - n)
            points.reverse()
            codes.reverse()
            self.points.append(points)
            self.codes.append(codes)

        logger.info("built huffman tree with maximum node depth %d", max((len(c) for c in self.codes), default=0))

    def num_inner_nodes(self) -> int:
        return max(self.size - 1, 0)

    def path(self, id: int) -> Tuple[List[int], List[int]]:
        return self.points[id], self.codes[id]
