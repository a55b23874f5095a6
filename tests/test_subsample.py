# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import math

import numpy as np

from wego.corpus import Dictionary
from wego.subsample import Subsampler


def make_dictionary():
    dic = Dictionary()
    dic.add("the", 900)
    dic.add("cat", 90)
    dic.add("sat", 10)
    return dic


def test_keep_probability_formula():
    t = 1e-2
    sampler = Subsampler(make_dictionary(), t)
    f = 900 / 1000
    assert math.isclose(sampler.keep[0], math.sqrt(t / f) + t / f)
    # rare words are always kept
    assert sampler.keep[2] == 1.0


def test_empirical_keep_rate_converges():
    t = 1e-2
    sampler = Subsampler(make_dictionary(), t)
    rng = np.random.default_rng(1)
    n = 50000
    kept = sum(sampler.trial(0, rng) for _ in range(n))
    f = 900 / 1000
    expected = min(1.0, math.sqrt(t / f) + t / f)
    assert abs(kept / n - expected) < 0.01


def test_disabled_threshold_keeps_everything():
    sampler = Subsampler(make_dictionary(), 0)
    rng = np.random.default_rng(2)
    assert all(sampler.trial(0, rng) for _ in range(1000))
