# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from typing import Tuple

MASK_32: int = (1 << 32) - 1


def encode_bigram(left: int, right: int) -> int:
    """Pack two 32-bit ids into one 64-bit key, left in the high half."""
    if not (0 <= left <= MASK_32 and 0 <= right <= MASK_32):
        raise ValueError(f"ids must be unsigned 32-bit integers: {left}, {right}")
    return (left << 32) | right


def decode_bigram(key: int) -> Tuple[int, int]:
    return (key >> 32) & MASK_32, key & MASK_32
