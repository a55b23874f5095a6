# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from gensim.models import KeyedVectors
from pathlib import Path

import wego

import argparse
parser = argparse.ArgumentParser(description='')
parser.add_argument('--input', type=str, required=True)
parser.add_argument('--min_count', type=int, default=5)
parser.add_argument('--window_size', type=int, default=10)
parser.add_argument('--num_epochs', type=int, default=15)
parser.add_argument('--dim', type=int, default=50)
parser.add_argument('--lr', type=float, default=0.05)
parser.add_argument('--alpha', type=float, default=0.75)
parser.add_argument('--x_max', type=float, default=10.0)
parser.add_argument('--threads', type=int, default=8)

args = parser.parse_args()

model = wego.GloVe(dim=args.dim, window=args.window_size, iter=args.num_epochs, min_count=args.min_count,
                   initlr=args.lr, alpha=args.alpha, xmax=args.x_max, num_threads=args.threads,
                   doc_in_memory=True, verbose=True)
with open(args.input) as f:
    model.train(f)

output: Path = Path("./vectors.txt")
with output.open("w") as f:
    model.save(f, "agg")

w2v = KeyedVectors.load_word2vec_format(str(output), no_header=True)
print(w2v.most_similar(w2v.index_to_key[0], topn=5))
