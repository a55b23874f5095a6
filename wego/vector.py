# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import logging
from typing import Tuple
from typing import TextIO

from tqdm import tqdm

from .corpus.dictionary import Dictionary
from .matrix import Matrix

logger = logging.getLogger(__name__)

SINGLE: str = "single"
AGG: str = "agg"
TYPES: Tuple[str, ...] = (SINGLE, AGG)


def check_type(vector_type: str) -> None:
    if vector_type not in TYPES:
        raise ValueError(f"invalid vector type: {vector_type} not in {'|'.join(TYPES)}")


def _check_shape(dictionary: Dictionary, matrix: Matrix) -> None:
    if len(dictionary) != matrix.row_count():
        raise ValueError(f"different for length of dictionary and row of matrix: {len(dictionary)}, {matrix.row_count()}")


def save(f: TextIO, dictionary: Dictionary, matrix: Matrix, verbose: bool = False, log_batch: int = 100000) -> None:
    """Write one ``<word> <v1> ... <vN>`` line per id, in dictionary order."""
    _check_shape(dictionary, matrix)
    for i in tqdm(range(len(dictionary)), desc="save", unit="words", miniters=log_batch, disable=not verbose):
        word, _ = dictionary.word(i)
        f.write(f"{word} " + " ".join(f"{v:f}" for v in matrix.slice(i)) + "\n")
    logger.info("saved %d words", len(dictionary))


def load(f: TextIO, dictionary: Dictionary, matrix: Matrix, verbose: bool = False, log_batch: int = 100000) -> int:
    """Fill rows of ``matrix`` from a text vector file.

    Words missing from ``dictionary`` and lines with too few or unparsable
    fields are skipped. Returns the number of rows read.
    """
    _check_shape(dictionary, matrix)
    col = matrix.col_count()
    num_reads = 0
    for line in tqdm(f, desc="load", unit="lines", miniters=log_batch, disable=not verbose):
        fields = line.split()
        if len(fields) < 1 + col:
            continue
        i, ok = dictionary.id(fields[0])
        if not ok:
            continue
        try:
            values = [float(v) for v in fields[1:1 + col]]
        except ValueError:
            logger.debug("skip malformed vector for %s", fields[0])
            continue
        matrix.slice(i)[:] = values
        num_reads += 1
    logger.info("loaded %d words", num_reads)
    return num_reads
