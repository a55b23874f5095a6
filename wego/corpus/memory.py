# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import logging
from collections import Counter
from typing import Iterator
from typing import List
from typing import Optional

from tqdm import tqdm

from .base import Corpus
from .base import WithCooccurrence
from .cooccurrence import Cooccurrence

logger = logging.getLogger(__name__)


class MemoryCorpus(Corpus):
    """Corpus whose indexed document is kept in memory after one read."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._doc: List[int] = []

    def load(self, mode: Optional[WithCooccurrence] = None, verbose: bool = False, log_batch: int = 100000) -> None:
        tokens = list(tqdm(self._tokens(), desc="read", unit="words", miniters=log_batch, disable=not verbose))
        self._dictionary = self._build_dictionary(Counter(tokens))
        self._doc = list(self._lookup(tokens))
        self._num_tokens = len(self._doc)
        if mode is not None:
            self._cooccurrence = Cooccurrence(mode.count_type)
            self._cooccurrence.count(self._doc, mode.window)
            logger.info("counted %d cooccurrence entries", len(self._cooccurrence))

    def indexed_doc(self) -> List[int]:
        return self._doc

    def _ids(self) -> Iterator[int]:
        return iter(self._doc)
