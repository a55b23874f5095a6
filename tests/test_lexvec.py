# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import io
import math

import numpy as np
import pytest

from wego import LexVec
from wego import vector
from wego.corpus import Cooccurrence
from wego.corpus import Dictionary
from wego.encode import encode_bigram
from wego.lexvec import COLLOCATION
from wego.lexvec import LOG_COLLOCATION
from wego.lexvec import PMI
from wego.lexvec import PPMI
from wego.lexvec import RELATION_TYPES
from wego.lexvec import make_items
from wego.lexvec import relation

TEXT = "the quick brown fox jumps over the lazy dog the dog and the fox are animals " * 20
log_total_freq = 0.75 * math.log(1000)


def test_zero_cooccurrence():
    assert relation(PPMI, 0, 10, 10, 0.75, log_total_freq) == 0.0
    assert relation(PMI, 0, 10, 10, 0.75, log_total_freq) == 1.0


def test_ppmi_is_clamped_pmi():
    for co, f1, f2 in [(1, 500, 500), (3, 5, 7), (50, 60, 70), (2, 900, 1)]:
        pmi = relation(PMI, co, f1, f2, 0.75, log_total_freq)
        expected = math.log(co) - math.log(f1) - 0.75 * math.log(f2) + log_total_freq
        assert pmi == pytest.approx(expected)
        ppmi = relation(PPMI, co, f1, f2, 0.75, log_total_freq)
        assert ppmi >= 0
        assert ppmi == pytest.approx(max(0.0, expected))


def test_collocation_pass_through():
    assert relation(COLLOCATION, 7.5, 1, 1, 0.75, log_total_freq) == 7.5
    assert relation(LOG_COLLOCATION, 7.5, 1, 1, 0.75, log_total_freq) == math.log(7.5)


def test_invalid_relation():
    with pytest.raises(ValueError):
        relation("cosine", 1, 1, 1, 0.75, log_total_freq)
    with pytest.raises(ValueError):
        LexVec(relation_type="cosine")


def test_make_items_covers_every_pair():
    dic = Dictionary()
    dic.add("a", 3)
    dic.add("b", 2)
    cooc = Cooccurrence()
    cooc.count([0, 1, 0, 1, 0], window=1)
    items = make_items(cooc, dic, COLLOCATION, 0.75, 5)
    assert items == {encode_bigram(0, 1): 4.0, encode_bigram(1, 0): 4.0}


@pytest.mark.parametrize("relation_type", RELATION_TYPES)
@pytest.mark.parametrize("doc_in_memory", [True, False])
def test_train(relation_type, doc_in_memory):
    model = LexVec(dim=6, window=2, iter=2, min_count=1, num_threads=2, relation_type=relation_type,
                   doc_in_memory=doc_in_memory, batch_size=32, initlr=0.005, seed=0)
    model.train(io.StringIO(TEXT))
    vocab_size = len(model.corpus.dictionary())
    assert model.param.row_count() == vocab_size * 2
    assert np.all(np.isfinite(model.param.array))
    assert len(model.items) > 0
    mat = model.word_vector(vector.AGG)
    np.testing.assert_allclose(mat.array, model.param.array[:vocab_size] + model.param.array[vocab_size:])


def test_learning_rate_floor():
    model = LexVec(dim=4, window=2, iter=2, min_count=1, num_threads=1, update_lr_batch=1, min_lr=0.0005)
    model.train(io.StringIO(TEXT))
    assert model.schedule.current == 0.0005


class RateRecordingLexVec(LexVec):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.seen = []

    def _train_shard(self, doc):
        self.seen.append(self.schedule.current)
        yield from super()._train_shard(doc)


def test_learning_rate_pinned_at_floor_from_second_epoch():
    model = RateRecordingLexVec(dim=4, window=2, iter=2, min_count=1, num_threads=1, doc_in_memory=True,
                                update_lr_batch=1, initlr=0.005, min_lr=0.0005, seed=0)
    model.train(io.StringIO(TEXT))
    assert model.seen == [0.005, 0.0005]


class SnapshotLexVec(LexVec):
    def _fit(self, corpus):
        self.initial = self.param.array.copy()
        super()._fit(corpus)


def test_train_with_seeds_target_block_from_saved_vectors():
    saved = io.StringIO("fox 0.5 -0.5 0.25 1.0\n"
                        "zebra 9 9 9 9\n"
                        "dog 1 2\n"
                        "lazy 0.1 0.2 0.3 0.4\n")
    model = SnapshotLexVec(dim=4, window=2, iter=1, min_count=1, num_threads=1, doc_in_memory=True,
                           update_lr_batch=1, seed=0)
    model.train_with(io.StringIO(TEXT), saved)

    dic = model.corpus.dictionary()
    vocab_size = len(dic)
    fox, _ = dic.id("fox")
    lazy, _ = dic.id("lazy")
    dog, _ = dic.id("dog")
    np.testing.assert_allclose(model.initial[fox], [0.5, -0.5, 0.25, 1.0])
    np.testing.assert_allclose(model.initial[lazy], [0.1, 0.2, 0.3, 0.4])
    assert np.all(np.abs(model.initial[dog]) <= 0.5 / 4)
    assert np.all(np.abs(model.initial[vocab_size + fox]) <= 0.5 / 4)
    assert np.all(np.isfinite(model.param.array))
    assert model.schedule.current < model.initlr
