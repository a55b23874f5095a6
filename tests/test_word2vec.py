# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import io

import numpy as np
import pytest

from wego import Word2Vec
from wego import vector
from wego.matrix import Matrix
from wego.word2vec import CBOW
from wego.word2vec import HIERARCHICAL_SOFTMAX
from wego.word2vec import NEGATIVE_SAMPLING
from wego.word2vec import SKIP_GRAM
from wego.word2vec import context_positions
from wego.word2vec import sigmoid
from wego.word2vec import unigram_table

TEXT = "the quick brown fox jumps over the lazy dog the dog and the fox are animals " * 20


def train(text, **kwargs):
    options = dict(dim=8, window=2, iter=2, min_count=1, num_threads=2, seed=1, batch_size=16)
    options.update(kwargs)
    model = Word2Vec(**options)
    model.train(io.StringIO(text))
    return model


def test_end_to_end_skipgram_negative_sampling():
    model = Word2Vec(dim=2, window=2, iter=1, min_count=1, num_threads=1,
                     model_type=SKIP_GRAM, optimizer_type=NEGATIVE_SAMPLING)
    model.train(io.StringIO("a b a c b a"))
    mat = model.word_vector(vector.SINGLE)
    assert mat.row_count() == 3
    assert mat.col_count() == 2

    f = io.StringIO()
    model.save(f)
    lines = f.getvalue().splitlines()
    assert len(lines) == 3
    assert sorted(line.split(" ")[0] for line in lines) == ["a", "b", "c"]


@pytest.mark.parametrize("model_type", [SKIP_GRAM, CBOW])
@pytest.mark.parametrize("optimizer_type", [NEGATIVE_SAMPLING, HIERARCHICAL_SOFTMAX])
@pytest.mark.parametrize("doc_in_memory", [True, False])
def test_every_combination_trains(model_type, optimizer_type, doc_in_memory):
    model = train(TEXT, model_type=model_type, optimizer_type=optimizer_type, doc_in_memory=doc_in_memory)
    vocab_size = len(model.corpus.dictionary())
    rows = vocab_size * 2 if optimizer_type == NEGATIVE_SAMPLING else vocab_size
    assert model.param.row_count() == rows
    assert np.all(np.isfinite(model.param.array))
    mat = model.word_vector(vector.AGG)
    assert mat.row_count() == vocab_size
    assert mat.col_count() == 8


def test_parameters_move():
    model = Word2Vec(dim=8, window=2, iter=1, min_count=1, num_threads=1, seed=3, subsample_threshold=0)
    model.train(io.StringIO(TEXT))
    ctx = model.param.array[len(model.corpus.dictionary()):]
    # the context block starts at zero and only changes by training
    assert np.abs(ctx).sum() > 0


def test_agg_adds_context_block():
    model = train(TEXT, optimizer_type=NEGATIVE_SAMPLING)
    vocab_size = len(model.corpus.dictionary())
    single = model.word_vector(vector.SINGLE).array
    agg = model.word_vector(vector.AGG).array
    np.testing.assert_allclose(agg, single + model.param.array[vocab_size:])


def test_agg_is_single_for_hierarchical_softmax():
    model = train(TEXT, optimizer_type=HIERARCHICAL_SOFTMAX)
    np.testing.assert_array_equal(model.word_vector(vector.AGG).array, model.word_vector(vector.SINGLE).array)


@pytest.mark.parametrize("vector_type", [vector.SINGLE, vector.AGG])
def test_save_load_round_trip(vector_type):
    model = train(TEXT)
    f = io.StringIO()
    model.save(f, vector_type)
    f.seek(0)
    dic = model.corpus.dictionary()
    loaded = Matrix(len(dic), model.dim)
    assert vector.load(f, dic, loaded) == len(dic)
    np.testing.assert_allclose(loaded.array, model.word_vector(vector_type).array, atol=1e-6)


def test_learning_rate_decays_to_floor():
    model = train(TEXT, iter=1, update_lr_batch=1, initlr=0.025, min_lr=0.001)
    assert model.schedule.current == 0.001


def test_invalid_options_fail_fast():
    with pytest.raises(ValueError):
        Word2Vec(model_type="glove")
    with pytest.raises(ValueError):
        Word2Vec(optimizer_type="adam")
    with pytest.raises(ValueError):
        Word2Vec(dim=0)


def test_word_vector_before_training():
    with pytest.raises(RuntimeError):
        Word2Vec().word_vector()


def test_context_positions():
    # window 2, no shrink: two on each side of position 2
    assert list(context_positions(10, 2, 2, 0)) == [0, 1, 3, 4]
    # shrink 1 keeps only the nearest neighbours
    assert list(context_positions(10, 2, 2, 1)) == [1, 3]
    assert list(context_positions(3, 0, 2, 0)) == [1, 2]


def test_sigmoid_is_clamped():
    assert sigmoid(1000.0) == sigmoid(6.0)
    assert sigmoid(-1000.0) == sigmoid(-6.0)
    assert sigmoid(0.0) == 0.5


def test_unigram_table_prefers_frequent_ids():
    table = unigram_table([100, 10, 1], table_size=10000)
    counts = np.bincount(table, minlength=3)
    assert counts[0] > counts[1] > counts[2] > 0
    expected = np.power([100, 10, 1], 0.75)
    expected = expected / expected.sum()
    np.testing.assert_allclose(counts / 10000, expected, atol=1e-3)


class RateRecordingWord2Vec(Word2Vec):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.seen = []

    def _train_shard(self, doc):
        self.seen.append(self.schedule.current)
        yield from super()._train_shard(doc)


def test_learning_rate_pinned_at_floor_after_one_corpus_pass():
    model = RateRecordingWord2Vec(dim=4, window=2, iter=3, min_count=1, num_threads=1, doc_in_memory=True,
                                  update_lr_batch=1, initlr=0.025, min_lr=0.001, seed=0)
    model.train(io.StringIO(TEXT))
    assert model.seen[0] == 0.025
    assert model.seen[1:] == [0.001, 0.001]


def test_acquire_timeout_reaches_engine():
    model = Word2Vec(acquire_timeout=2.0)
    assert model._engine().acquire_timeout == 2.0
    with pytest.raises(ValueError):
        Word2Vec(acquire_timeout=0)


def test_untrained_model_has_no_vectors():
    model = Word2Vec()
    with pytest.raises(RuntimeError):
        model.word_vector(vector.SINGLE)
    with pytest.raises(RuntimeError):
        model._blocks(vector.SINGLE, 1, None)
