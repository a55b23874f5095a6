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
from typing import Optional
from typing import Sequence
from typing import TextIO
from typing import Tuple

import numpy as np

from . import vector
from .corpus.dictionary import Dictionary
from .engine import LearningRateSchedule
from .engine import REPORT_BATCH
from .huffman import HuffmanTree
from .matrix import Matrix
from .model import Model
from .subsample import Subsampler

logger = logging.getLogger(__name__)

SKIP_GRAM: str = "skipgram"
CBOW: str = "cbow"
MODEL_TYPES: Tuple[str, ...] = (CBOW, SKIP_GRAM)

NEGATIVE_SAMPLING: str = "ns"
HIERARCHICAL_SOFTMAX: str = "hs"
OPTIMIZER_TYPES: Tuple[str, ...] = (NEGATIVE_SAMPLING, HIERARCHICAL_SOFTMAX)

MAX_EXP: float = 6.0
UNIGRAM_POWER: float = 0.75


def sigmoid(x: float) -> float:
    x = min(max(x, -MAX_EXP), MAX_EXP)
    return 1.0 / (1.0 + math.exp(-x))


def unigram_table(freqs: Sequence[int], table_size: int = 1_000_000, power: float = UNIGRAM_POWER) -> np.ndarray:
    """Sampling table where each id fills a share proportional to ``freq ** power``."""
    weights = np.power(np.asarray(freqs, dtype=np.float64), power)
    cum = np.cumsum(weights / weights.sum())
    u = (np.arange(table_size, dtype=np.float64) + 0.5) / table_size
    return np.minimum(np.searchsorted(cum, u), len(weights) - 1).astype(np.int64)


class NegativeSampling(object):
    """Logistic updates against the context block for the true id and K noise ids.

    Context embeddings are rows ``offset .. offset + V`` of the shared parameter
    matrix.
    """

    def __init__(self, dictionary: Dictionary, param: Matrix, offset: int, sample_size: int) -> None:
        self.param = param
        self.offset = offset
        self.sample_size = sample_size
        self.table = unigram_table([dictionary.id_freq(i) for i in range(len(dictionary))])

    def optim(self, id: int, lr: float, ctx: np.ndarray, pool: np.ndarray, rng: np.random.Generator) -> None:
        negatives = self.table[rng.integers(0, len(self.table), size=self.sample_size)]
        self._step(id, 1.0, lr, ctx, pool)
        for picked in negatives:
            if picked == id:
                continue
            self._step(int(picked), 0.0, lr, ctx, pool)

    def _step(self, picked: int, label: float, lr: float, ctx: np.ndarray, pool: np.ndarray) -> None:
        rnd = self.param.slice(self.offset + picked)
        g = (label - sigmoid(float(np.dot(rnd, ctx)))) * lr
        pool += g * rnd
        rnd += g * ctx


class HierarchicalSoftmax(object):
    """One binary logistic classifier per inner node of a Huffman tree."""

    def __init__(self, dictionary: Dictionary, dim: int, max_depth: int) -> None:
        self.tree = HuffmanTree([dictionary.id_freq(i) for i in range(len(dictionary))])
        self.nodes = Matrix(self.tree.num_inner_nodes(), dim)
        self.max_depth = max_depth

    def optim(self, id: int, lr: float, ctx: np.ndarray, pool: np.ndarray, rng: np.random.Generator) -> None:
        points, codes = self.tree.path(id)
        for point, code in zip(points[:self.max_depth], codes[:self.max_depth]):
            node = self.nodes.slice(point)
            inner = float(np.dot(node, ctx))
            if inner <= -MAX_EXP or inner >= MAX_EXP:
                continue
            g = (1.0 - code - sigmoid(inner)) * lr
            pool += g * node
            node += g * ctx


def context_positions(doc_len: int, pos: int, window: int, shrink: int) -> Iterator[int]:
    """Positions around ``pos`` kept by a window shrunk by ``shrink`` on each side."""
    for a in range(shrink, window * 2 + 1 - shrink):
        if a == window:
            continue
        c = pos - window + a
        if 0 <= c < doc_len:
            yield c


class SkipGram(object):
    def __init__(self, window: int) -> None:
        self.window = window

    def train_one(self, doc: Sequence[int], pos: int, lr: float, param: Matrix, optimizer, rng: np.random.Generator) -> None:
        tid = doc[pos]
        shrink = int(rng.integers(self.window))
        for c in context_positions(len(doc), pos, self.window, shrink):
            ctx = param.slice(doc[c])
            pool = np.zeros_like(ctx)
            optimizer.optim(tid, lr, ctx, pool, rng)
            ctx += pool


class Cbow(object):
    def __init__(self, window: int) -> None:
        self.window = window

    def train_one(self, doc: Sequence[int], pos: int, lr: float, param: Matrix, optimizer, rng: np.random.Generator) -> None:
        shrink = int(rng.integers(self.window))
        ids = [doc[c] for c in context_positions(len(doc), pos, self.window, shrink)]
        if not ids:
            return
        agg = param.array[ids].mean(axis=0)
        pool = np.zeros_like(agg)
        optimizer.optim(doc[pos], lr, agg, pool, rng)
        for i in ids:
            row = param.slice(i)
            row += pool


class Word2Vec(Model):
    """Continuous bag-of-words and skip-gram embeddings.

    Either context model trains with negative sampling, against a second
    ``V x dim`` block of context vectors, or with hierarchical softmax over a
    Huffman tree of the vocabulary.

    Example:
        >>> model = Word2Vec(dim=50, model_type=SKIP_GRAM, optimizer_type=NEGATIVE_SAMPLING)
        >>> with open("text8") as f:
        ...     model.train(f)
        >>> with open("vectors.txt", "w") as f:
        ...     model.save(f, vector.AGG)
    """
    schedule: Optional[LearningRateSchedule]

    def __init__(self,
                 dim: int = 10,
                 window: int = 5,
                 model_type: str = CBOW,
                 optimizer_type: str = NEGATIVE_SAMPLING,
                 negative_sample_size: int = 5,
                 subsample_threshold: float = 1e-3,
                 initlr: float = 0.025,
                 min_lr: Optional[float] = None,
                 iter: int = 15,
                 num_threads: Optional[int] = None,
                 batch_size: int = 10000,
                 update_lr_batch: int = 100000,
                 max_depth: int = 100,
                 min_count: int = 5,
                 max_count: int = -1,
                 to_lower: bool = False,
                 doc_in_memory: bool = False,
                 log_batch: int = 100000,
                 verbose: bool = False,
                 seed: Optional[int] = None,
                 acquire_timeout: Optional[float] = None) -> None:
        super().__init__(dim=dim, window=window, iter=iter, num_threads=num_threads, batch_size=batch_size,
                         min_count=min_count, max_count=max_count, to_lower=to_lower, doc_in_memory=doc_in_memory,
                         log_batch=log_batch, verbose=verbose, seed=seed, acquire_timeout=acquire_timeout)
        if model_type not in MODEL_TYPES:
            raise ValueError(f"invalid model: {model_type} not in {'|'.join(MODEL_TYPES)}")
        if optimizer_type not in OPTIMIZER_TYPES:
            raise ValueError(f"invalid optimizer: {optimizer_type} not in {'|'.join(OPTIMIZER_TYPES)}")
        if negative_sample_size < 0:
            raise ValueError(f"negative_sample_size must be non-negative: {negative_sample_size}")
        if update_lr_batch < 1:
            raise ValueError(f"update_lr_batch must be positive: {update_lr_batch}")
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive: {max_depth}")

        self.model_type = model_type
        self.optimizer_type = optimizer_type
        self.negative_sample_size = negative_sample_size
        self.subsample_threshold = subsample_threshold
        self.initlr = initlr
        self.min_lr = min_lr if min_lr is not None else initlr * 1e-4
        self.update_lr_batch = update_lr_batch
        self.max_depth = max_depth
        self.schedule = None

    def train(self, stream: TextIO) -> None:
        corpus = self._load_corpus(stream)
        dic, dim = corpus.dictionary(), self.dim
        vocab_size = len(dic)
        rng = self._rng()

        def init(row: int, vec: np.ndarray) -> None:
            if row < vocab_size:
                vec[:] = (rng.random(dim) - 0.5) / dim

        if self.optimizer_type == NEGATIVE_SAMPLING:
            self.param = Matrix(vocab_size * 2, dim, init)
            self.optimizer = NegativeSampling(dic, self.param, vocab_size, self.negative_sample_size)
        else:
            self.param = Matrix(vocab_size, dim, init)
            self.optimizer = HierarchicalSoftmax(dic, dim, self.max_depth)
        self.mod = SkipGram(self.window) if self.model_type == SKIP_GRAM else Cbow(self.window)
        self.subsampler = Subsampler(dic, self.subsample_threshold)
        self.schedule = LearningRateSchedule(self.initlr, self.min_lr, len(corpus))

        logger.info("train %s/%s: %d words, vocabulary %d", self.model_type, self.optimizer_type, len(corpus), vocab_size)
        engine = self._engine(self.schedule, self.update_lr_batch)
        if self.doc_in_memory:
            engine.fit_static(corpus.indexed_doc(), self._train_shard, self.iter)
        else:
            engine.fit_streaming(corpus, self.batch_size, self._train_shard, self.iter)

    def _train_shard(self, doc: List[int]) -> Iterator[int]:
        rng = self._rng()
        n = 0
        for pos, id in enumerate(doc):
            if self.subsampler.trial(id, rng):
                self.mod.train_one(doc, pos, self.schedule.current, self.param, self.optimizer, rng)
            n += 1
            if n == REPORT_BATCH:
                yield n
                n = 0
        if n > 0:
            yield n

    def word_vector(self, vector_type: str = vector.SINGLE) -> Matrix:
        vocab_size = len(self._trained_corpus().dictionary())
        offset = vocab_size if self.optimizer_type == NEGATIVE_SAMPLING else None
        return self._blocks(vector_type, vocab_size, offset)
