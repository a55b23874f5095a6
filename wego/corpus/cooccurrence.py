# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from collections import defaultdict
from collections import deque
from typing import Deque
from typing import Dict
from typing import Iterable
from typing import Tuple

import numpy as np
from scipy import sparse

from ..encode import decode_bigram
from ..encode import encode_bigram

INCREMENT: str = "inc"
PROXIMITY: str = "prox"
COUNT_TYPES: Tuple[str, ...] = (INCREMENT, PROXIMITY)


def check_count_type(count_type: str) -> None:
    if count_type not in COUNT_TYPES:
        raise ValueError(f"invalid count type: {count_type} not in {'|'.join(COUNT_TYPES)}")


class Cooccurrence(object):
    """Sparse cooccurrence weights keyed by encoded bigram.

    Pairs are recorded in both orders, so the matrix is symmetric.
    """

    def __init__(self, count_type: str = INCREMENT) -> None:
        check_count_type(count_type)
        self.count_type = count_type
        self._matrix: Dict[int, float] = defaultdict(float)

    def add(self, left: int, right: int, distance: int = 1) -> None:
        f = 1.0 if self.count_type == INCREMENT else 1.0 / distance
        self._matrix[encode_bigram(left, right)] += f
        self._matrix[encode_bigram(right, left)] += f

    def count(self, doc: Iterable[int], window: int) -> int:
        """Accumulate every pair within ``window`` positions of ``doc``.

        ``doc`` may be a lazy iterator; only the last ``window`` ids are kept.
        Returns the number of ids consumed.
        """
        recent: Deque[Tuple[int, int]] = deque(maxlen=window)
        n = 0
        for pos, id in enumerate(doc):
            for prev_pos, prev in recent:
                self.add(prev, id, pos - prev_pos)
            if window > 0:
                recent.append((pos, id))
            n += 1
        return n

    def encoded_matrix(self) -> Dict[int, float]:
        return self._matrix

    def __len__(self) -> int:
        return len(self._matrix)

    def to_csr(self, size: int) -> sparse.csr_matrix:
        rows = np.empty(len(self._matrix), dtype=np.int64)
        cols = np.empty(len(self._matrix), dtype=np.int64)
        vals = np.empty(len(self._matrix), dtype=np.float64)
        for k, (enc, f) in enumerate(self._matrix.items()):
            rows[k], cols[k] = decode_bigram(enc)
            vals[k] = f
        return sparse.coo_matrix((vals, (rows, cols)), shape=(size, size)).tocsr()
