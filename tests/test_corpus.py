# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import io
import queue

import pytest

from wego.corpus import Cooccurrence
from wego.corpus import Dictionary
from wego.corpus import FileCorpus
from wego.corpus import INCREMENT
from wego.corpus import MemoryCorpus
from wego.corpus import PROXIMITY
from wego.corpus import Text8
from wego.corpus import WithCooccurrence
from wego.encode import encode_bigram


def drain(corpus, batch_size):
    out = queue.Queue()
    corpus.batch_words(out, batch_size)
    batches = []
    while True:
        batch = out.get_nowait()
        if batch is None:
            break
        batches.append(batch)
    assert out.empty()
    return batches


def test_dictionary():
    dic = Dictionary()
    dic.add("a")
    dic.add("b")
    dic.add("a")
    assert len(dic) == 2
    assert dic.id("a") == (0, True)
    assert dic.word(1) == ("b", True)
    assert dic.id("z") == (-1, False)
    assert dic.word(5) == ("", False)
    assert dic.id_freq(0) == 2
    assert dic.total() == 3


def test_memory_corpus_filters_by_count():
    corpus = MemoryCorpus(io.StringIO("a b a c b a\nd"), min_count=2)
    corpus.load()
    dic = corpus.dictionary()
    assert dic.words() == ["a", "b"]
    assert corpus.indexed_doc() == [0, 1, 0, 1, 0]
    assert len(corpus) == 5


def test_max_count_and_lower():
    corpus = MemoryCorpus(io.StringIO("A a a B b C"), to_lower=True, max_count=2, min_count=1)
    corpus.load()
    assert corpus.dictionary().words() == ["b", "c"]


def test_empty_after_filtering():
    with pytest.raises(ValueError):
        MemoryCorpus(io.StringIO("a b c"), min_count=2).load()


def test_cooccurrence_increment_and_proximity():
    inc = Cooccurrence(INCREMENT)
    inc.count([0, 1, 2], window=2)
    em = inc.encoded_matrix()
    assert em[encode_bigram(0, 1)] == 1.0
    assert em[encode_bigram(1, 0)] == 1.0
    assert em[encode_bigram(0, 2)] == 1.0

    prox = Cooccurrence(PROXIMITY)
    prox.count([0, 1, 2], window=2)
    assert prox.encoded_matrix()[encode_bigram(2, 0)] == 0.5

    csr = inc.to_csr(3)
    assert csr.shape == (3, 3)
    assert csr[0, 1] == 1.0
    assert csr[1, 1] == 0.0


def test_invalid_count_type():
    with pytest.raises(ValueError):
        Cooccurrence("nope")
    with pytest.raises(ValueError):
        WithCooccurrence("nope")


def test_cooccurrence_requires_mode():
    corpus = MemoryCorpus(io.StringIO("a b"), min_count=1)
    corpus.load()
    with pytest.raises(RuntimeError):
        corpus.cooccurrence()


def test_file_corpus_matches_memory_corpus():
    text = "a b a c b a\nb c a"
    mem = MemoryCorpus(io.StringIO(text), min_count=1)
    mem.load(WithCooccurrence(INCREMENT, 2))
    fs = FileCorpus(io.StringIO(text), min_count=1)
    fs.load(WithCooccurrence(INCREMENT, 2))

    assert fs.dictionary().words() == mem.dictionary().words()
    assert len(fs) == len(mem) == 9
    assert dict(fs.cooccurrence().encoded_matrix()) == dict(mem.cooccurrence().encoded_matrix())
    assert [i for b in drain(fs, 4) for i in b] == mem.indexed_doc()


def test_batch_words_closes_once():
    corpus = FileCorpus(io.StringIO("a b c d e"), min_count=1)
    corpus.load()
    batches = drain(corpus, 2)
    assert batches == [[0, 1], [2, 3], [4]]
    # a second pass re-reads the stream
    assert drain(corpus, 5) == [[0, 1, 2, 3, 4]]


def test_text8_uses_existing_file(tmp_path, monkeypatch):
    tmp_path.joinpath("text8").write_text("anarchism originated as a term")

    def fail(*args, **kwargs):
        raise AssertionError("should not download")

    monkeypatch.setattr("wget.download", fail)
    text8 = Text8(root=tmp_path)
    with text8.open() as f:
        assert f.read().split()[0] == "anarchism"


def test_text8_illegal_lang(tmp_path):
    with pytest.raises(ValueError):
        Text8(lang="fr", root=tmp_path)
