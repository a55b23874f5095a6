# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import logging
import math
from typing import Iterator
from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Sequence
from typing import TextIO
from typing import Tuple

import numpy as np
from tqdm import tqdm

from . import vector
from .corpus import WithCooccurrence
from .corpus.cooccurrence import COUNT_TYPES
from .corpus.cooccurrence import Cooccurrence
from .corpus.cooccurrence import INCREMENT
from .encode import decode_bigram
from .engine import REPORT_BATCH
from .matrix import Matrix
from .model import Model

logger = logging.getLogger(__name__)

STOCHASTIC: str = "sgd"
ADAGRAD: str = "adagrad"
SOLVER_TYPES: Tuple[str, ...] = (STOCHASTIC, ADAGRAD)


class Item(NamedTuple):
    l1: int
    l2: int
    f: float
    coef: float


def weight(count: float, xmax: float, alpha: float) -> float:
    if count >= xmax:
        return 1.0
    return (count / xmax) ** alpha


def make_items(cooccurrence: Cooccurrence, xmax: float, alpha: float, verbose: bool = False, log_batch: int = 100000) -> List[Item]:
    """One training item per nonzero cooccurrence entry, target ``ln(count)``."""
    items: List[Item] = []
    for enc, f in tqdm(cooccurrence.encoded_matrix().items(), desc="items", unit="items",
                       miniters=log_batch, disable=not verbose):
        l1, l2 = decode_bigram(enc)
        items.append(Item(l1, l2, math.log(f), weight(f, xmax, alpha)))
    return items


def _residual(w1: np.ndarray, w2: np.ndarray, f: float, coef: float) -> float:
    # the last column of every row is its bias
    return coef * (float(np.dot(w1[:-1], w2[:-1])) + w1[-1] + w2[-1] - f)


class Stochastic(object):
    """Plain SGD at a fixed rate on the weighted squared error."""

    def __init__(self, initlr: float) -> None:
        self.initlr = initlr

    def train_one(self, l1: int, l2: int, param: Matrix, f: float, coef: float) -> None:
        w1, w2 = param.slice(l1), param.slice(l2)
        fdiff = _residual(w1, w2, f, coef)
        g1 = fdiff * w2[:-1]
        g2 = fdiff * w1[:-1]
        w1[:-1] -= self.initlr * g1
        w2[:-1] -= self.initlr * g2
        w1[-1] -= self.initlr * fdiff
        w2[-1] -= self.initlr * fdiff


class AdaGrad(object):
    """Per-parameter rates scaled by accumulated squared gradients (started at 1)."""

    def __init__(self, vocab_size: int, dim: int, initlr: float) -> None:
        self.initlr = initlr
        self.gradsq = Matrix(vocab_size * 2, dim + 1, lambda _, vec: vec.fill(1.0))

    def train_one(self, l1: int, l2: int, param: Matrix, f: float, coef: float) -> None:
        w1, w2 = param.slice(l1), param.slice(l2)
        q1, q2 = self.gradsq.slice(l1), self.gradsq.slice(l2)
        fdiff = _residual(w1, w2, f, coef)
        g1 = fdiff * w2[:-1]
        g2 = fdiff * w1[:-1]
        w1[:-1] -= self.initlr * g1 / np.sqrt(q1[:-1])
        w2[:-1] -= self.initlr * g2 / np.sqrt(q2[:-1])
        w1[-1] -= self.initlr * fdiff / math.sqrt(q1[-1])
        w2[-1] -= self.initlr * fdiff / math.sqrt(q2[-1])
        q1[:-1] += g1 * g1
        q2[:-1] += g2 * g2
        q1[-1] += fdiff * fdiff
        q2[-1] += fdiff * fdiff


class GloVe(Model):
    """Global vectors fitted to the log cooccurrence matrix.

    The parameter matrix holds a target block and a context block of ``V``
    rows each, every row carrying a trailing bias column.

    Args:
        xmax: counts at or above this get full weight.
        alpha: exponent of the weighting function below ``xmax``.
        solver_type: ``"sgd"`` or ``"adagrad"``.
        count_type: ``"inc"`` counts every pair once, ``"prox"`` by ``1 / distance``.
    """

    def __init__(self,
                 dim: int = 10,
                 window: int = 5,
                 iter: int = 15,
                 alpha: float = 0.75,
                 xmax: float = 100,
                 initlr: float = 0.025,
                 solver_type: str = STOCHASTIC,
                 count_type: str = INCREMENT,
                 num_threads: Optional[int] = None,
                 min_count: int = 5,
                 max_count: int = -1,
                 to_lower: bool = False,
                 doc_in_memory: bool = False,
                 log_batch: int = 100000,
                 verbose: bool = False,
                 seed: Optional[int] = None,
                 acquire_timeout: Optional[float] = None) -> None:
        super().__init__(dim=dim, window=window, iter=iter, num_threads=num_threads,
                         min_count=min_count, max_count=max_count, to_lower=to_lower, doc_in_memory=doc_in_memory,
                         log_batch=log_batch, verbose=verbose, seed=seed, acquire_timeout=acquire_timeout)
        if solver_type not in SOLVER_TYPES:
            raise ValueError(f"invalid solver: {solver_type} not in {'|'.join(SOLVER_TYPES)}")
        if count_type not in COUNT_TYPES:
            raise ValueError(f"invalid count type: {count_type} not in {'|'.join(COUNT_TYPES)}")
        if xmax <= 0:
            raise ValueError(f"xmax must be positive: {xmax}")

        self.alpha = alpha
        self.xmax = xmax
        self.initlr = initlr
        self.solver_type = solver_type
        self.count_type = count_type

    def train(self, stream: TextIO) -> None:
        corpus = self._load_corpus(stream, WithCooccurrence(self.count_type, self.window))
        dic, dim = corpus.dictionary(), self.dim
        vocab_size = len(dic)
        rng = self._rng()

        def init(_: int, vec: np.ndarray) -> None:
            vec[:] = rng.random(dim + 1) / dim

        self.param = Matrix(vocab_size * 2, dim + 1, init)
        if self.solver_type == ADAGRAD:
            self.solver = AdaGrad(vocab_size, dim, self.initlr)
        else:
            self.solver = Stochastic(self.initlr)

        items = make_items(corpus.cooccurrence(), self.xmax, self.alpha, self.verbose, self.log_batch)
        logger.info("train glove/%s: %d items, vocabulary %d", self.solver_type, len(items), vocab_size)
        self._engine(unit="items").fit_static(items, self._train_shard, self.iter)

    def _train_shard(self, items: Sequence[Item]) -> Iterator[int]:
        vocab_size = len(self._trained_corpus().dictionary())
        n = 0
        for item in items:
            self.solver.train_one(item.l1, item.l2 + vocab_size, self.param, item.f, item.coef)
            self.solver.train_one(item.l1 + vocab_size, item.l2, self.param, item.f, item.coef)
            n += 1
            if n == REPORT_BATCH:
                yield n
                n = 0
        if n > 0:
            yield n

    def word_vector(self, vector_type: str = vector.SINGLE) -> Matrix:
        vocab_size = len(self._trained_corpus().dictionary())
        return self._blocks(vector_type, vocab_size, vocab_size)
