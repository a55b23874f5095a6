# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from .dictionary import Dictionary
from .cooccurrence import Cooccurrence
from .cooccurrence import INCREMENT
from .cooccurrence import PROXIMITY
from .base import Corpus
from .base import WithCooccurrence
from .memory import MemoryCorpus
from .fs import FileCorpus
from .text8 import Text8

__all__ = ["Dictionary", "Cooccurrence", "INCREMENT", "PROXIMITY", "Corpus", "WithCooccurrence", "MemoryCorpus", "FileCorpus", "Text8"]
