import time
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from indexed_pq.priority_queue import PriorityQueue
from indexed_pq.helpers import get_logger

logger = get_logger()


class TimerScheduler:
  """
  Keeps events ordered by due time so the next one to fire is always at the
  root of the queue. Each key has at most one pending event.
  """

  def __init__(self, clock: Callable[[], float] = time.monotonic):
    self.clock = clock
    self.queue = PriorityQueue()
    self.callbacks: Dict[Hashable, Tuple[Optional[Callable], tuple]] = dict()

  def __len__(self) -> int:
    return len(self.queue)

  def __contains__(self, key: Hashable) -> bool:
    return key in self.queue

  def schedule(self, key: Hashable, due: float, callback: Optional[Callable] = None, *args: Any) -> None:
    self.queue.set(key, due)
    self.callbacks[key] = (callback, args)
    logger.debug(f"Scheduled {key!r} at {due}")

  def advance(self, key: Hashable, due: float) -> None:
    # Raises PriorityIncreaseError if due is later than the pending time.
    self.queue.reduce_priority(key, due)
    self.callbacks.setdefault(key, (None, ()))

  def cancel(self, key: Hashable) -> bool:
    if key not in self.queue:
      return False
    self.queue.delete(key)
    del self.callbacks[key]
    logger.debug(f"Cancelled {key!r}")
    return True

  def next_due(self) -> Optional[Tuple[Hashable, float]]:
    if not self.queue:
      return None
    return self.queue.peek_priority()

  def pop_due(self, now: Optional[float] = None) -> List[Hashable]:
    if now is None:
      now = self.clock()
    due = []
    while self.queue and self.queue.peek_priority()[1] <= now:
      key = self.queue.delete_min()
      del self.callbacks[key]
      due.append(key)
    return due

  def run_pending(self, now: Optional[float] = None) -> int:
    if now is None:
      now = self.clock()
    count = 0
    # Later due events stay queued if a callback raises.
    while self.queue and self.queue.peek_priority()[1] <= now:
      key = self.queue.delete_min()
      callback, args = self.callbacks.pop(key)
      if callback is not None:
        callback(*args)
      count += 1
    if count:
      logger.debug(f"Ran {count} pending event(s)")
    return count
