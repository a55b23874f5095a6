# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from typing import Callable
from typing import Optional

import numpy as np

Initializer = Callable[[int, np.ndarray], None]


class Matrix(object):
    """Dense row-addressable parameter block.

    Rows are handed out as views into a single ndarray, so workers write
    straight into the shared storage without copying or locking.
    """
    array: np.ndarray

    def __init__(self, row: int, col: int, init: Optional[Initializer] = None) -> None:
        if row < 0 or col < 0:
            raise ValueError(f"matrix shape must be non-negative: {row}x{col}")
        self.array = np.zeros((row, col), dtype=np.float64)
        if init is not None:
            for i in range(row):
                init(i, self.array[i])

    def row_count(self) -> int:
        return self.array.shape[0]

    def col_count(self) -> int:
        return self.array.shape[1]

    def slice(self, i: int) -> np.ndarray:
        return self.array[i]

    def __repr__(self) -> str:
        return f"Matrix({self.row_count()}, {self.col_count()})"
