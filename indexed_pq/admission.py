from typing import Any, Hashable, List, Optional, Tuple

from indexed_pq.exceptions import ItemNotFoundError
from indexed_pq.priority_queue import Comparator, PriorityQueue, default_compare
from indexed_pq.helpers import get_logger

logger = get_logger()


class AdmissionQueue:
  """
  Bounded queue of pending requests.

  Requests are served best-first. When the queue is full a new request is
  admitted only if it beats the worst pending one, which is then shed.
  Two indexed queues over the same keys give O(log n) access to both ends.
  """

  def __init__(self, capacity: int, compare: Comparator = default_compare):
    if capacity < 1:
      raise ValueError(f"capacity must be positive, got {capacity}")
    self.capacity = capacity
    self.compare = compare
    self.pending = PriorityQueue(compare)
    self.worst_first = PriorityQueue(lambda a, b: compare(b, a))
    self.shed: List[Hashable] = []

  def __len__(self) -> int:
    return len(self.pending)

  def __contains__(self, key: Hashable) -> bool:
    return key in self.pending

  @property
  def full(self) -> bool:
    return len(self.pending) >= self.capacity

  def offer(self, key: Hashable, priority: Any) -> Optional[Hashable]:
    """
    Queue `key`, or update it if already pending.

    Returns the key that was turned away to make room (possibly `key`
    itself), or None when nothing was.
    """
    if key in self.pending or not self.full:
      self.pending.set(key, priority)
      self.worst_first.set(key, priority)
      return None

    worst, worst_priority = self.worst_first.peek_priority()
    if self.compare(priority, worst_priority) >= 0:
      logger.debug(f"Rejected {key!r} ({priority!r}): queue is full")
      self.shed.append(key)
      return key

    self.withdraw(worst)
    self.shed.append(worst)
    logger.debug(f"Shed {worst!r} ({worst_priority!r}) to admit {key!r} ({priority!r})")
    self.pending.set(key, priority)
    self.worst_first.set(key, priority)
    return worst

  def promote(self, key: Hashable, priority: Any) -> None:
    # PriorityIncreaseError if priority is worse, ItemNotFoundError if not pending.
    if key not in self.pending:
      raise ItemNotFoundError(key)
    self.pending.reduce_priority(key, priority)
    self.worst_first.set(key, priority)

  def withdraw(self, key: Hashable) -> Any:
    priority = self.pending.delete(key)
    self.worst_first.delete(key)
    return priority

  def take(self) -> Tuple[Hashable, Any]:
    """Remove and return the best pending (key, priority); EmptyQueueError if none."""
    key, priority = self.pending.delete_min_with_priority()
    self.worst_first.delete(key)
    return key, priority

  def peek(self) -> Tuple[Hashable, Any]:
    return self.pending.peek_priority()

  def resize(self, capacity: int) -> List[Hashable]:
    """Change the capacity, shedding the worst requests that no longer fit."""
    if capacity < 1:
      raise ValueError(f"capacity must be positive, got {capacity}")
    self.capacity = capacity
    dropped = []
    while len(self.pending) > capacity:
      key = self.worst_first.delete_min()
      self.pending.delete(key)
      dropped.append(key)
    self.shed.extend(dropped)
    if dropped:
      logger.info(f"Capacity reduced to {capacity}, shed {len(dropped)} request(s)")
    return dropped
