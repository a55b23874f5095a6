# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import argparse
import cProfile
import logging
from pathlib import Path
from typing import List
from typing import Optional

from . import glove
from . import lexvec
from . import vector
from . import word2vec
from .model import Model

logger = logging.getLogger("wego")


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-i', '--input', type=str, required=True, help='input corpus file')
    parser.add_argument('-o', '--output', type=str, default='vectors.txt', help='output vector file')
    parser.add_argument('--type', type=str, default=vector.SINGLE, choices=vector.TYPES, help='vector type to save')
    parser.add_argument('--prof', action='store_true', help='write a cProfile dump to cpu.prof')
    parser.add_argument('--dim', type=int, default=10)
    parser.add_argument('--window', type=int, default=5)
    parser.add_argument('--iter', type=int, default=15)
    parser.add_argument('--initlr', type=float, default=0.025)
    parser.add_argument('--threads', type=int, default=None)
    parser.add_argument('--min_count', type=int, default=5)
    parser.add_argument('--max_count', type=int, default=-1)
    parser.add_argument('--lower', action='store_true')
    parser.add_argument('--in_memory', action='store_true', help='keep the whole corpus in memory')
    parser.add_argument('--log_batch', type=int, default=100000)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--acquire_timeout', type=float, default=None, help='seconds to wait for a free worker before dropping a shard')
    parser.add_argument('--verbose', action='store_true')


def _add_decay(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--negative', type=int, default=5)
    parser.add_argument('--subsample', type=float, default=1e-3)
    parser.add_argument('--min_lr', type=float, default=None)
    parser.add_argument('--update_lr_batch', type=int, default=100000)
    parser.add_argument('--batch_size', type=int, default=10000)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='wego', description='train word embeddings')
    models = parser.add_subparsers(dest='model', required=True)

    w2v = models.add_parser('word2vec', help='Word2Vec: continuous bag-of-words and skip-gram model')
    _add_common(w2v)
    _add_decay(w2v)
    w2v.add_argument('--model_type', type=str, default=word2vec.CBOW, choices=word2vec.MODEL_TYPES)
    w2v.add_argument('--optimizer', type=str, default=word2vec.NEGATIVE_SAMPLING, choices=word2vec.OPTIMIZER_TYPES)
    w2v.add_argument('--max_depth', type=int, default=100)

    gv = models.add_parser('glove', help='GloVe: global vectors for word representation')
    _add_common(gv)
    gv.add_argument('--solver', type=str, default=glove.STOCHASTIC, choices=glove.SOLVER_TYPES)
    gv.add_argument('--xmax', type=float, default=100)
    gv.add_argument('--alpha', type=float, default=0.75)
    gv.add_argument('--count_type', type=str, default='inc', choices=('inc', 'prox'))

    lv = models.add_parser('lexvec', help='LexVec: matrix factorization using window sampling and negative sampling')
    _add_common(lv)
    _add_decay(lv)
    lv.add_argument('--relation', type=str, default=lexvec.PPMI, choices=lexvec.RELATION_TYPES)
    lv.add_argument('--smooth', type=float, default=0.75)
    return parser


def build_model(args: argparse.Namespace) -> Model:
    common = dict(dim=args.dim, window=args.window, iter=args.iter, initlr=args.initlr, num_threads=args.threads,
                  min_count=args.min_count, max_count=args.max_count, to_lower=args.lower,
                  doc_in_memory=args.in_memory, log_batch=args.log_batch, verbose=args.verbose, seed=args.seed,
                  acquire_timeout=args.acquire_timeout)
    if args.model == 'word2vec':
        return word2vec.Word2Vec(model_type=args.model_type, optimizer_type=args.optimizer,
                                 negative_sample_size=args.negative, subsample_threshold=args.subsample,
                                 min_lr=args.min_lr, update_lr_batch=args.update_lr_batch,
                                 batch_size=args.batch_size, max_depth=args.max_depth, **common)
    elif args.model == 'glove':
        return glove.GloVe(solver_type=args.solver, xmax=args.xmax, alpha=args.alpha,
                           count_type=args.count_type, **common)
    elif args.model == 'lexvec':
        return lexvec.LexVec(relation_type=args.relation, smooth=args.smooth,
                             negative_sample_size=args.negative, subsample_threshold=args.subsample,
                             min_lr=args.min_lr, update_lr_batch=args.update_lr_batch,
                             batch_size=args.batch_size, **common)
    raise ValueError(f"invalid model: {args.model}")


def execute(args: argparse.Namespace) -> None:
    input_path, output_path = Path(args.input), Path(args.output)
    if output_path.exists():
        raise FileExistsError(f"{output_path} is already existed")
    if not input_path.exists():
        raise FileNotFoundError(f"{input_path} is not found")

    model = build_model(args)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with input_path.open('r', encoding='utf-8') as f:
        model.train(f)
    with output_path.open('w', encoding='utf-8') as f:
        model.save(f, args.type)
    logger.info("saved %s vectors to %s", args.type, output_path)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    profiler: Optional[cProfile.Profile] = None
    if args.prof:
        profiler = cProfile.Profile()
        profiler.enable()
    try:
        execute(args)
    except (ValueError, OSError) as e:
        logger.error("%s", e)
        return 1
    finally:
        if profiler is not None:
            profiler.disable()
            profiler.dump_stats('cpu.prof')
    return 0
