# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import logging
import math
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional
from typing import TextIO
from typing import Tuple

import numpy as np
from tqdm import tqdm

from . import vector
from .corpus import Corpus
from .corpus import WithCooccurrence
from .corpus.cooccurrence import Cooccurrence
from .corpus.cooccurrence import INCREMENT
from .corpus.dictionary import Dictionary
from .encode import decode_bigram
from .encode import encode_bigram
from .engine import LearningRateSchedule
from .engine import REPORT_BATCH
from .matrix import Matrix
from .model import Model
from .subsample import Subsampler
from .word2vec import context_positions

logger = logging.getLogger(__name__)

PPMI: str = "ppmi"
PMI: str = "pmi"
COLLOCATION: str = "co"
LOG_COLLOCATION: str = "logco"
RELATION_TYPES: Tuple[str, ...] = (PPMI, PMI, COLLOCATION, LOG_COLLOCATION)


def check_relation_type(relation_type: str) -> None:
    if relation_type not in RELATION_TYPES:
        raise ValueError(f"invalid relation type: {relation_type} not in {'|'.join(RELATION_TYPES)}")


def relation(relation_type: str, co: float, freq1: int, freq2: int, smooth: float, log_total_freq: float) -> float:
    """Association score of a word pair seen together ``co`` times.

    ``log_total_freq`` is ``smooth * ln(corpus length)``; the context word's
    frequency is smoothed by the same exponent.
    """
    if relation_type == PPMI:
        if co == 0:
            return 0.0
        pmi = math.log(co) - math.log(freq1) - smooth * math.log(freq2) + log_total_freq
        return max(pmi, 0.0)
    elif relation_type == PMI:
        if co == 0:
            return 1.0
        return math.log(co) - math.log(freq1) - smooth * math.log(freq2) + log_total_freq
    elif relation_type == COLLOCATION:
        return co
    elif relation_type == LOG_COLLOCATION:
        return math.log(co) if co > 0 else -math.inf
    raise ValueError(f"invalid relation type: {relation_type} not in {'|'.join(RELATION_TYPES)}")


def make_items(cooccurrence: Cooccurrence,
               dictionary: Dictionary,
               relation_type: str,
               smooth: float,
               corpus_len: int,
               verbose: bool = False,
               log_batch: int = 100000) -> Dict[int, float]:
    check_relation_type(relation_type)
    log_total_freq = smooth * math.log(corpus_len)
    items: Dict[int, float] = {}
    for enc, co in tqdm(cooccurrence.encoded_matrix().items(), desc="items", unit="items",
                        miniters=log_batch, disable=not verbose):
        l1, l2 = decode_bigram(enc)
        items[enc] = relation(relation_type, co, dictionary.id_freq(l1), dictionary.id_freq(l2), smooth, log_total_freq)
    return items


class LexVec(Model):
    """Embeddings regressed onto a word-pair relation (PPMI by default).

    Training walks the corpus like skip-gram with negative sampling, but each
    update pulls the dot product of a word vector and a context vector toward
    the pair's relation value, which is zero for pairs never seen together.
    """
    schedule: Optional[LearningRateSchedule]

    def __init__(self,
                 dim: int = 10,
                 window: int = 5,
                 iter: int = 15,
                 relation_type: str = PPMI,
                 smooth: float = 0.75,
                 negative_sample_size: int = 5,
                 subsample_threshold: float = 1e-3,
                 initlr: float = 0.025,
                 min_lr: Optional[float] = None,
                 update_lr_batch: int = 100000,
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
        super().__init__(dim=dim, window=window, iter=iter, num_threads=num_threads, batch_size=batch_size,
                         min_count=min_count, max_count=max_count, to_lower=to_lower, doc_in_memory=doc_in_memory,
                         log_batch=log_batch, verbose=verbose, seed=seed, acquire_timeout=acquire_timeout)
        check_relation_type(relation_type)
        if negative_sample_size < 0:
            raise ValueError(f"negative_sample_size must be non-negative: {negative_sample_size}")
        if update_lr_batch < 1:
            raise ValueError(f"update_lr_batch must be positive: {update_lr_batch}")

        self.relation_type = relation_type
        self.smooth = smooth
        self.negative_sample_size = negative_sample_size
        self.subsample_threshold = subsample_threshold
        self.initlr = initlr
        self.min_lr = min_lr if min_lr is not None else initlr * 1e-4
        self.update_lr_batch = update_lr_batch
        self.schedule = None

    def train(self, stream: TextIO) -> None:
        corpus = self._prepare(stream)
        self._fit(corpus)

    def train_with(self, stream: TextIO, vectors: TextIO) -> None:
        """Train like ``train``, starting the word vectors from a saved vector file.

        Words of the corpus found in ``vectors`` take their saved values as the
        initial target rows; the others keep their random initialization.
        """
        corpus = self._prepare(stream)
        dic = corpus.dictionary()
        vocab_size = len(dic)
        target = self.param.array[:vocab_size]

        def init(i: int, vec: np.ndarray) -> None:
            vec[:] = target[i]

        initial = Matrix(vocab_size, self.dim, init)
        num_reads = vector.load(vectors, dic, initial, self.verbose, self.log_batch)
        target[:] = initial.array
        logger.info("initialized %d of %d words from saved vectors", num_reads, vocab_size)
        self._fit(corpus)

    def _prepare(self, stream: TextIO) -> Corpus:
        corpus = self._load_corpus(stream, WithCooccurrence(INCREMENT, self.window))
        dic, dim = corpus.dictionary(), self.dim
        rng = self._rng()

        def init(_: int, vec: np.ndarray) -> None:
            vec[:] = (rng.random(dim) - 0.5) / dim

        self.param = Matrix(len(dic) * 2, dim, init)
        self.subsampler = Subsampler(dic, self.subsample_threshold)
        self.schedule = LearningRateSchedule(self.initlr, self.min_lr, len(corpus))
        # built in full even when the document itself is streamed
        self.items = make_items(corpus.cooccurrence(), dic, self.relation_type, self.smooth, len(corpus),
                                self.verbose, self.log_batch)
        return corpus

    def _fit(self, corpus: Corpus) -> None:
        logger.info("train lexvec/%s: %d words, %d items", self.relation_type, len(corpus), len(self.items))
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
                self._train_one(doc, pos, self.schedule.current, rng)
            n += 1
            if n == REPORT_BATCH:
                yield n
                n = 0
        if n > 0:
            yield n

    def _train_one(self, doc: List[int], pos: int, lr: float, rng: np.random.Generator) -> None:
        vocab_size = len(self._trained_corpus().dictionary())
        tid = doc[pos]
        shrink = int(rng.integers(self.window))
        for c in context_positions(len(doc), pos, self.window, shrink):
            self._update(tid, doc[c] + vocab_size, self.items.get(encode_bigram(tid, doc[c]), 0.0), lr)
            for sample in rng.integers(0, vocab_size, size=self.negative_sample_size):
                sample = int(sample)
                self._update(tid, sample + vocab_size, self.items.get(encode_bigram(tid, sample), 0.0), lr)

    def _update(self, l1: int, l2: int, f: float, lr: float) -> None:
        w1, w2 = self.param.slice(l1), self.param.slice(l2)
        diff = (float(np.dot(w1, w2)) - f) * lr
        g1 = diff * w2
        g2 = diff * w1
        w1 -= g1
        w2 -= g2

    def word_vector(self, vector_type: str = vector.SINGLE) -> Matrix:
        vocab_size = len(self._trained_corpus().dictionary())
        return self._blocks(vector_type, vocab_size, vocab_size)
