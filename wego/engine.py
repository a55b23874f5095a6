# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import logging
import queue
import threading
from typing import Any
from typing import Callable
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Sequence

from tqdm import tqdm

logger = logging.getLogger(__name__)

# workers report progress to the aggregator every REPORT_BATCH items
REPORT_BATCH: int = 1000

ShardTrainer = Callable[[Sequence[Any]], Iterator[int]]


def index_per_thread(num_threads: int, size: int) -> List[int]:
    """Boundaries of ``num_threads`` contiguous shards covering ``size`` items.

    Shard ``i`` is ``[bounds[i], bounds[i + 1])``; sizes differ by at most one.
    """
    if num_threads < 1:
        raise ValueError(f"num_threads must be positive: {num_threads}")
    return [size * i // num_threads for i in range(num_threads + 1)]


class LearningRateSchedule(object):
    """Linearly decaying learning rate with a floor.

    ``current`` is written only by the engine's aggregator thread. Workers
    read it without synchronization and may see a slightly stale value.
    """
    current: float

    def __init__(self, initlr: float, min_lr: float, total: int) -> None:
        if min_lr < 0:
            raise ValueError(f"min_lr must be non-negative: {min_lr}")
        if total <= 0:
            raise ValueError(f"total must be positive: {total}")
        self.initlr = initlr
        self.min_lr = min_lr
        self.total = total
        self.current = initlr

    def update(self, count: int) -> float:
        if self.current <= self.min_lr:
            self.current = self.min_lr
        else:
            self.current = max(self.min_lr, self.initlr * (1.0 - count / self.total))
        return self.current


class TrainingEngine(object):
    """Runs epochs of shard-parallel training on a bounded pool of threads.

    Every shard of an epoch gets its own worker thread, admitted through a
    semaphore so that at most ``num_threads`` run at once. Workers write to
    shared parameters without locks. A single aggregator thread collects the
    processed-item counts the workers emit, moves the learning rate schedule
    and reports progress. Each epoch ends with a join of all its workers.
    """

    def __init__(self,
                 num_threads: int,
                 schedule: Optional[LearningRateSchedule] = None,
                 update_lr_batch: int = 100000,
                 verbose: bool = False,
                 log_batch: int = 100000,
                 unit: str = "words",
                 acquire_timeout: Optional[float] = None) -> None:
        if num_threads < 1:
            raise ValueError(f"num_threads must be positive: {num_threads}")
        if update_lr_batch < 1:
            raise ValueError(f"update_lr_batch must be positive: {update_lr_batch}")
        self.num_threads = num_threads
        self.schedule = schedule
        self.update_lr_batch = update_lr_batch
        self.verbose = verbose
        self.log_batch = log_batch
        self.unit = unit
        self.acquire_timeout = acquire_timeout
        self.trained: int = 0

    def fit_static(self, items: Sequence[Any], train_shard: ShardTrainer, num_epochs: int) -> None:
        bounds = index_per_thread(self.num_threads, len(items))
        shards = [items[bounds[i]:bounds[i + 1]] for i in range(self.num_threads)]
        for epoch in range(1, num_epochs + 1):
            self.run(shards, train_shard, epoch, total=len(items))

    def fit_streaming(self, corpus: Any, batch_size: int, train_shard: ShardTrainer, num_epochs: int) -> None:
        """Train on id batches streamed from ``corpus.batch_words``.

        The batch queue holds at most ``num_threads`` batches, so the producer
        blocks while every worker slot is busy.
        """
        for epoch in range(1, num_epochs + 1):
            batches: queue.Queue = queue.Queue(maxsize=self.num_threads)
            errors: List[BaseException] = []
            producer = threading.Thread(target=self._produce, args=(corpus, batches, batch_size, errors), daemon=True)
            producer.start()
            self.run(iter(batches.get, None), train_shard, epoch, total=len(corpus))
            producer.join()
            if errors:
                raise errors[0]

    def run(self, shards: Iterable[Sequence[Any]], train_shard: ShardTrainer, epoch: int = 1, total: Optional[int] = None) -> None:
        trained: queue.Queue = queue.Queue()
        observer = threading.Thread(target=self._observe, args=(trained, epoch, total), daemon=True)
        observer.start()

        semaphore = threading.BoundedSemaphore(self.num_threads)
        errors: List[BaseException] = []
        workers: List[threading.Thread] = []
        try:
            for shard in shards:
                if not semaphore.acquire(timeout=self.acquire_timeout):
                    logger.warning("epoch %d: admission timed out, dropping a shard of %d items", epoch, len(shard))
                    continue
                worker = threading.Thread(target=self._work, args=(shard, train_shard, trained, semaphore, errors), daemon=True)
                worker.start()
                workers.append(worker)
                if len(workers) > 4 * self.num_threads:
                    workers = [w for w in workers if w.is_alive()]
        finally:
            for worker in workers:
                worker.join()
            trained.put(None)
            observer.join()

        if errors:
            raise errors[0]
        logger.info("epoch %d: trained %d %s in total", epoch, self.trained, self.unit)

    def _work(self,
              shard: Sequence[Any],
              train_shard: ShardTrainer,
              trained: queue.Queue,
              semaphore: threading.BoundedSemaphore,
              errors: List[BaseException]) -> None:
        try:
            for n in train_shard(shard):
                trained.put(n)
        except Exception as e:
            errors.append(e)
        finally:
            semaphore.release()

    def _produce(self, corpus: Any, batches: queue.Queue, batch_size: int, errors: List[BaseException]) -> None:
        try:
            corpus.batch_words(batches, batch_size)
        except Exception as e:
            errors.append(e)

    def _observe(self, trained: queue.Queue, epoch: int, total: Optional[int]) -> None:
        with tqdm(total=total, desc=f"epoch {epoch}", unit=self.unit, disable=not self.verbose) as progress:
            for n in iter(trained.get, None):
                before = self.trained
                self.trained += n
                if self.schedule is not None and self.trained // self.update_lr_batch > before // self.update_lr_batch:
                    self.schedule.update(self.trained)
                    progress.set_postfix(lr=f"{self.schedule.current:.6f}", refresh=False)
                progress.update(n)
