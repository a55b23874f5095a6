from .word2vec import Word2Vec
from .glove import GloVe
from .lexvec import LexVec
from .matrix import Matrix
from .engine import LearningRateSchedule
from .engine import TrainingEngine
from . import corpus
from . import vector

__copyright__    = 'Copyright (C) 2020 Minato Sato'
__version__      = '0.0.1'
__license__      = 'MIT'
__author__       = 'Minato Sato'
__author_email__ = 'sato.minato@ohsuga.is.uec.ac.jp'
__url__          = 'http://github.com/satopirka/wego'

__all__ = ["Word2Vec", "GloVe", "LexVec", "Matrix", "LearningRateSchedule", "TrainingEngine", "corpus", "vector"]
