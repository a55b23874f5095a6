# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from typing import Optional

import numpy as np

from .corpus.dictionary import Dictionary


class Subsampler(object):
    """Per-id keep probability for frequent-word subsampling.

    With relative frequency ``f`` and threshold ``t`` a token is kept with
    probability ``min(1, sqrt(t / f) + t / f)``. A non-positive threshold keeps
    every token.
    """
    keep: np.ndarray

    def __init__(self, dictionary: Dictionary, threshold: float) -> None:
        self.threshold = threshold
        freq = np.array([dictionary.id_freq(i) for i in range(len(dictionary))], dtype=np.float64)
        total = freq.sum()
        if threshold <= 0 or total <= 0:
            self.keep = np.ones(len(freq), dtype=np.float64)
            return
        ratio = threshold / (freq / total)
        self.keep = np.minimum(1.0, np.sqrt(ratio) + ratio)

    def trial(self, id: int, rng: Optional[np.random.Generator] = None) -> bool:
        p = self.keep[id]
        if p >= 1.0:
            return True
        r = rng.random() if rng is not None else np.random.random()
        return r < p
