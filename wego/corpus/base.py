# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import logging
import queue
from collections import Counter
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import TextIO

from .cooccurrence import Cooccurrence
from .cooccurrence import INCREMENT
from .cooccurrence import check_count_type
from .dictionary import Dictionary

logger = logging.getLogger(__name__)


class WithCooccurrence(object):
    """Load mode asking the corpus to count cooccurrences while loading."""

    def __init__(self, count_type: str = INCREMENT, window: int = 5) -> None:
        check_count_type(count_type)
        if window < 1:
            raise ValueError(f"window must be positive: {window}")
        self.count_type = count_type
        self.window = window


class Corpus(object):
    """Whitespace-tokenized corpus read from a seekable text stream.

    Words occurring less than ``min_count`` times, or more than ``max_count``
    times when ``max_count`` is positive, are left out of the dictionary and
    of every id sequence the corpus yields.
    """
    stream: TextIO

    def __init__(self, stream: TextIO, to_lower: bool = False, max_count: int = -1, min_count: int = 5) -> None:
        self.stream = stream
        self.to_lower = to_lower
        self.max_count = max_count
        self.min_count = min_count
        self._dictionary: Optional[Dictionary] = None
        self._cooccurrence: Optional[Cooccurrence] = None
        self._num_tokens: int = 0

    def load(self, mode: Optional[WithCooccurrence] = None, verbose: bool = False, log_batch: int = 100000) -> None:
        raise NotImplementedError()

    def batch_words(self, out: "queue.Queue[Optional[List[int]]]", batch_size: int) -> None:
        """Put id batches of ``batch_size`` on ``out``, then ``None`` exactly once."""
        try:
            batch: List[int] = []
            for id in self._ids():
                batch.append(id)
                if len(batch) >= batch_size:
                    out.put(batch)
                    batch = []
            if batch:
                out.put(batch)
        finally:
            out.put(None)

    def dictionary(self) -> Dictionary:
        if self._dictionary is None:
            raise RuntimeError("corpus is not loaded")
        return self._dictionary

    def cooccurrence(self) -> Cooccurrence:
        if self._cooccurrence is None:
            raise RuntimeError("cooccurrence was not requested when loading the corpus")
        return self._cooccurrence

    def __len__(self) -> int:
        return self._num_tokens

    def _ids(self) -> Iterator[int]:
        raise NotImplementedError()

    def _tokens(self) -> Iterator[str]:
        if self.stream.seekable():
            self.stream.seek(0)
        for line in self.stream:
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            for word in line.split():
                yield word.lower() if self.to_lower else word

    def _lookup(self, tokens: Iterable[str]) -> Iterator[int]:
        dic = self.dictionary()
        for word in tokens:
            id, ok = dic.id(word)
            if ok:
                yield id

    def _build_dictionary(self, counts: Counter) -> Dictionary:
        dic = Dictionary()
        for word, count in counts.items():
            if count < self.min_count:
                continue
            if self.max_count > 0 and count > self.max_count:
                continue
            dic.add(word, count)
        if len(dic) == 0:
            raise ValueError(f"no words left after filtering by min_count={self.min_count}, max_count={self.max_count}")
        logger.info("built dictionary of %d words from %d distinct tokens", len(dic), len(counts))
        return dic
