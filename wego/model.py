# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import os
import threading
from typing import Optional
from typing import TextIO

import numpy as np

from . import vector
from .corpus import Corpus
from .corpus import FileCorpus
from .corpus import MemoryCorpus
from .corpus import WithCooccurrence
from .engine import LearningRateSchedule
from .engine import TrainingEngine
from .matrix import Matrix


class Model(object):
    """Options and plumbing shared by every embedding model.

    Subclasses validate their own options in ``__init__`` so that a bad
    configuration fails before any corpus is read or thread started.
    """
    corpus: Optional[Corpus]
    param: Optional[Matrix]

    def __init__(self,
                 dim: int = 10,
                 window: int = 5,
                 iter: int = 15,
                 num_threads: Optional[int] = None,
                 batch_size: int = 10000,
                 min_count: int = 5,
                 max_count: int = -1,
                 to_lower: bool = False,
                 doc_in_memory: bool = False,
                 log_batch: int = 100000,
                 verbose: bool = False,
                 seed: Optional[int] = None,
                 acquire_timeout: Optional[float] = None) -> None:
        if num_threads is None:
            num_threads = os.cpu_count() or 1
        for name, value in (("dim", dim), ("window", window), ("iter", iter), ("num_threads", num_threads),
                            ("batch_size", batch_size), ("log_batch", log_batch)):
            if value < 1:
                raise ValueError(f"{name} must be positive: {value}")
        if min_count < 0:
            raise ValueError(f"min_count must be non-negative: {min_count}")
        if acquire_timeout is not None and acquire_timeout <= 0:
            raise ValueError(f"acquire_timeout must be positive: {acquire_timeout}")

        self.dim = dim
        self.window = window
        self.iter = iter
        self.num_threads = num_threads
        self.batch_size = batch_size
        self.min_count = min_count
        self.max_count = max_count
        self.to_lower = to_lower
        self.doc_in_memory = doc_in_memory
        self.log_batch = log_batch
        self.verbose = verbose
        self.seed = seed
        self.acquire_timeout = acquire_timeout

        self.corpus = None
        self.param = None
        self._seed_seq = np.random.SeedSequence(seed)
        self._seed_lock = threading.Lock()

    def train(self, stream: TextIO) -> None:
        raise NotImplementedError()

    def word_vector(self, vector_type: str = vector.SINGLE) -> Matrix:
        raise NotImplementedError()

    def save(self, f: TextIO, vector_type: str = vector.SINGLE) -> None:
        vector.check_type(vector_type)
        vector.save(f, self._trained_corpus().dictionary(), self.word_vector(vector_type), self.verbose, self.log_batch)

    def _load_corpus(self, stream: TextIO, mode: Optional[WithCooccurrence] = None) -> Corpus:
        corpus: Corpus
        if self.doc_in_memory:
            corpus = MemoryCorpus(stream, self.to_lower, self.max_count, self.min_count)
        else:
            corpus = FileCorpus(stream, self.to_lower, self.max_count, self.min_count)
        corpus.load(mode, self.verbose, self.log_batch)
        self.corpus = corpus
        return corpus

    def _trained_corpus(self) -> Corpus:
        if self.corpus is None or self.param is None:
            raise RuntimeError(f"{type(self).__name__} is not trained yet")
        return self.corpus

    def _engine(self, schedule: Optional[LearningRateSchedule] = None, update_lr_batch: int = 100000, unit: str = "words") -> TrainingEngine:
        return TrainingEngine(self.num_threads,
                              schedule=schedule,
                              update_lr_batch=update_lr_batch,
                              verbose=self.verbose,
                              log_batch=self.log_batch,
                              unit=unit,
                              acquire_timeout=self.acquire_timeout)

    def _rng(self) -> np.random.Generator:
        with self._seed_lock:
            child = self._seed_seq.spawn(1)[0]
        return np.random.default_rng(child)

    def _blocks(self, vector_type: str, vocab_size: int, offset: Optional[int]) -> Matrix:
        """Primary block, plus the block starting at ``offset`` for ``agg``."""
        vector.check_type(vector_type)
        if self.param is None:
            raise RuntimeError(f"{type(self).__name__} is not trained yet")
        mat = Matrix(vocab_size, self.dim)
        mat.array[:] = self.param.array[:vocab_size, :self.dim]
        if vector_type == vector.AGG and offset is not None:
            mat.array += self.param.array[offset:offset + vocab_size, :self.dim]
        return mat
