# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

from gensim.models import KeyedVectors

import wego

import argparse
parser = argparse.ArgumentParser(description='')
parser.add_argument('--language', type=str, default="en")
parser.add_argument('--model', type=str, default="word2vec", choices=("word2vec", "glove", "lexvec"))
parser.add_argument('--min_count', type=int, default=5)
parser.add_argument('--window_size', type=int, default=5)
parser.add_argument('--num_epochs', type=int, default=5)
parser.add_argument('--dim', type=int, default=50)
parser.add_argument('--threads', type=int, default=8)
parser.add_argument('--type', type=str, default="agg")

args = parser.parse_args()

print("loading text8...")
text8 = wego.corpus.Text8(lang=args.language)

model: wego.model.Model
if args.model == "word2vec":
    model = wego.Word2Vec(dim=args.dim, window=args.window_size, iter=args.num_epochs, min_count=args.min_count,
                          model_type="skipgram", num_threads=args.threads, verbose=True)
elif args.model == "glove":
    model = wego.GloVe(dim=args.dim, window=args.window_size, iter=args.num_epochs, min_count=args.min_count,
                       solver_type="adagrad", xmax=10.0, num_threads=args.threads, verbose=True)
else:
    model = wego.LexVec(dim=args.dim, window=args.window_size, iter=args.num_epochs, min_count=args.min_count,
                        num_threads=args.threads, verbose=True)

with text8.open() as f:
    model.train(f)
with open("./vectors.txt", "w") as f:
    model.save(f, args.type)

w2v = KeyedVectors.load_word2vec_format("./vectors.txt", no_header=True)
for word in ("king", "france", "computer"):
    if word in w2v:
        print(word, w2v.most_similar(word, topn=5))
