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
from typing import Optional

from tqdm import tqdm

from .base import Corpus
from .base import WithCooccurrence
from .cooccurrence import Cooccurrence

logger = logging.getLogger(__name__)


class FileCorpus(Corpus):
    """Out-of-core corpus: every pass re-reads the stream from the start.

    Only the dictionary and, when requested, the cooccurrence matrix are
    materialized.
    """

    def load(self, mode: Optional[WithCooccurrence] = None, verbose: bool = False, log_batch: int = 100000) -> None:
        counts = Counter(tqdm(self._tokens(), desc="count", unit="words", miniters=log_batch, disable=not verbose))
        self._dictionary = self._build_dictionary(counts)
        self._num_tokens = sum(self._dictionary.id_freq(i) for i in range(len(self._dictionary)))
        if mode is not None:
            self._cooccurrence = Cooccurrence(mode.count_type)
            self._cooccurrence.count(self._ids(), mode.window)
            logger.info("counted %d cooccurrence entries", len(self._cooccurrence))

    def _ids(self) -> Iterator[int]:
        return self._lookup(self._tokens())
