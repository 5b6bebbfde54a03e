import argparse
import os

import numpy as np

from indexed_pq.helpers import get_logger
from indexed_pq.priority_queue import PriorityQueue
from indexed_pq.util import Clock, Statistics

logger = get_logger()

OPERATIONS = ['set', 'reduce_priority', 'delete_min']


def run_once(priorities, updates, rng, stats):
  pq = PriorityQueue()
  clock = Clock()

  for item, priority in enumerate(priorities):
    pq.set(item, priority)
  stats['set'].add(clock.lap_ms(), len(priorities))

  items = rng.integers(0, len(priorities), size=updates).tolist()
  deltas = rng.random(size=updates).tolist()
  clock.reset()
  for item, delta in zip(items, deltas):
    pq.reduce_priority(item, pq[item] - delta)
  stats['reduce_priority'].add(clock.lap_ms(), updates)

  count = 0
  last = None
  while pq:
    _, priority = pq.delete_min_with_priority()
    if last is not None and priority < last:
      raise AssertionError(f"delete_min returned {priority} after {last}")
    last = priority
    count += 1
  stats['delete_min'].add(clock.lap_ms(), count)


def main(size, updates, seed, repeat):
  rng = np.random.default_rng(seed)
  stats = {name: Statistics(name) for name in OPERATIONS}
  for i in range(repeat):
    priorities = rng.random(size=size).tolist()
    run_once(priorities, updates, rng, stats)
    logger.debug(f"Run {i + 1}/{repeat} done")

  logger.info(f"{size} item(s), {updates} update(s), {repeat} run(s)")
  for s in stats.values():
    logger.info(str(s))
  return stats


def run():
  parser = argparse.ArgumentParser(
    "Benchmark the indexed priority queue", formatter_class=argparse.ArgumentDefaultsHelpFormatter
  )

  parser.add_argument('--size', type=int, help='number of items inserted per run',
                      default=int(os.environ.get('INDEXED_PQ_BENCHMARK_SIZE', 10000)))
  parser.add_argument('--updates', type=int, default=10000, help='number of reduce_priority calls per run')
  parser.add_argument('--seed', type=int, default=0, help='random seed')
  parser.add_argument('--repeat', type=int, default=5, help='number of runs')

  args = parser.parse_args()

  main(args.size, args.updates, args.seed, args.repeat)


if __name__ == "__main__":
  run()
