# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from typing import Dict
from typing import List
from typing import Tuple


class Dictionary(object):
    """Bidirectional token/id map with per-id frequencies.

    Ids are assigned in insertion order and never change afterwards.
    """

    def __init__(self) -> None:
        self._word2id: Dict[str, int] = {}
        self._id2word: List[str] = []
        self._freq: List[int] = []

    def add(self, word: str, count: int = 1) -> int:
        i = self._word2id.get(word)
        if i is None:
            i = len(self._id2word)
            self._word2id[word] = i
            self._id2word.append(word)
            self._freq.append(0)
        self._freq[i] += count
        return i

    def __len__(self) -> int:
        return len(self._id2word)

    def __contains__(self, word: str) -> bool:
        return word in self._word2id

    def word(self, id: int) -> Tuple[str, bool]:
        if 0 <= id < len(self._id2word):
            return self._id2word[id], True
        return "", False

    def id(self, word: str) -> Tuple[int, bool]:
        i = self._word2id.get(word)
        if i is None:
            return -1, False
        return i, True

    def id_freq(self, id: int) -> int:
        return self._freq[id]

    def total(self) -> int:
        return sum(self._freq)

    def words(self) -> List[str]:
        return list(self._id2word)
