from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from indexed_pq.exceptions import EmptyQueueError, ItemNotFoundError, PriorityIncreaseError
from indexed_pq.heap_index import children, parent
from indexed_pq.helpers import get_logger

logger = get_logger()

Comparator = Callable[[Any, Any], int]


def default_compare(a: Any, b: Any) -> int:
  if a < b:
    return -1
  if b < a:
    return 1
  return 0


def reverse_compare(a: Any, b: Any) -> int:
  return default_compare(b, a)


@dataclass
class Entry:
  item: Hashable
  priority: Any


class PriorityQueue:
  """
  Binary heap of (item, priority) entries with an item -> slot index.

  `compare(a, b)` is a three-way comparison over priorities (negative when
  `a` is better, zero when equal, positive when worse), so `delete_min()`
  always returns the item the comparator ranks first. Items are used as
  dict keys and must be hashable.

  Not thread safe: callers sharing an instance must lock around it.
  """

  def __init__(self, compare: Comparator = default_compare):
    self.compare = compare
    self.heap: List[Entry] = []
    self.indices: Dict[Hashable, int] = dict()

  @classmethod
  def from_items(cls, pairs: Iterable[Tuple[Hashable, Any]],
                 compare: Comparator = default_compare) -> 'PriorityQueue':
    """Build a queue from (item, priority) pairs in linear time."""
    pq = cls(compare)
    for item, priority in pairs:
      pos = pq.indices.get(item)
      if pos is None:
        pq.indices[item] = len(pq.heap)
        pq.heap.append(Entry(item, priority))
      else:
        pq.heap[pos].priority = priority
    for pos in reversed(range(len(pq.heap) // 2)):
      pq._sift_down(pos)
    return pq

  def __repr__(self) -> str:
    return 'PriorityQueue(count = %d)' % len(self)

  def __len__(self) -> int:
    return len(self.heap)

  @property
  def length(self) -> int:
    return len(self.heap)

  def __contains__(self, item: Hashable) -> bool:
    return item in self.indices

  def __iter__(self) -> Iterator[Hashable]:
    # Slot order, not priority order.
    return (entry.item for entry in self.heap)

  def items(self) -> Iterator[Tuple[Hashable, Any]]:
    return ((entry.item, entry.priority) for entry in self.heap)

  def __getitem__(self, item: Hashable) -> Any:
    pos = self.indices.get(item)
    if pos is None:
      raise ItemNotFoundError(item)
    return self.heap[pos].priority

  def get(self, item: Hashable, default: Any = None) -> Any:
    pos = self.indices.get(item)
    if pos is None:
      return default
    return self.heap[pos].priority

  def _place(self, pos: int, entry: Entry) -> None:
    self.heap[pos] = entry
    self.indices[entry.item] = pos

  def _better(self, a: Entry, b: Entry) -> bool:
    return self.compare(a.priority, b.priority) < 0

  def _sift_up(self, pos: int) -> None:
    entry = self.heap[pos]
    # Follow the path to the root, moving parents down until finding a place
    # entry fits.
    while pos > 0:
      parent_pos = parent(pos)
      parent_entry = self.heap[parent_pos]
      if self._better(entry, parent_entry):
        self._place(pos, parent_entry)
        pos = parent_pos
        continue
      break
    self._place(pos, entry)

  def _sift_down(self, pos: int) -> None:
    end_pos = len(self.heap)
    entry = self.heap[pos]
    # Move the better child up until entry is no worse than both children.
    child_pos, right_pos = children(pos)
    while child_pos < end_pos:
      if right_pos < end_pos and self._better(self.heap[right_pos], self.heap[child_pos]):
        child_pos = right_pos
      if not self._better(self.heap[child_pos], entry):
        break
      self._place(pos, self.heap[child_pos])
      pos = child_pos
      child_pos, right_pos = children(pos)
    self._place(pos, entry)

  def _restore(self, pos: int) -> None:
    if pos > 0 and self._better(self.heap[pos], self.heap[parent(pos)]):
      self._sift_up(pos)
    else:
      self._sift_down(pos)

  def _remove(self, pos: int) -> Entry:
    entry = self.heap[pos]
    last = self.heap.pop()
    del self.indices[entry.item]
    if pos < len(self.heap):
      self._place(pos, last)
      self._restore(pos)
    return entry

  def set(self, item: Hashable, priority: Any) -> None:
    """Insert item, or move it to its new priority if already enqueued."""
    pos = self.indices.get(item)
    if pos is None:
      self.indices[item] = len(self.heap)
      self.heap.append(Entry(item, priority))
      self._sift_up(len(self.heap) - 1)
      return
    self.heap[pos].priority = priority
    self._restore(pos)

  def reduce_priority(self, item: Hashable, priority: Any) -> None:
    """
    Decrease-key: give item a priority at least as good as its current one.

    Only sifts toward the root. Raises PriorityIncreaseError, leaving the
    queue untouched, if the new priority is worse. An item not in the queue
    is inserted.
    """
    pos = self.indices.get(item)
    if pos is None:
      self.set(item, priority)
      return
    entry = self.heap[pos]
    if self.compare(priority, entry.priority) > 0:
      logger.debug(f"Rejected reduce_priority({item!r}, {priority!r}): current priority is {entry.priority!r}")
      raise PriorityIncreaseError(item, entry.priority, priority)
    entry.priority = priority
    self._sift_up(pos)

  def peek(self) -> Hashable:
    return self.peek_priority()[0]

  def peek_priority(self) -> Tuple[Hashable, Any]:
    if not self.heap:
      logger.debug("peek() called on an empty queue")
      raise EmptyQueueError()
    root = self.heap[0]
    return root.item, root.priority

  def delete_min(self) -> Hashable:
    """Remove and return the item at the root."""
    return self.delete_min_with_priority()[0]

  def delete_min_with_priority(self) -> Tuple[Hashable, Any]:
    if not self.heap:
      logger.debug("delete_min() called on an empty queue")
      raise EmptyQueueError()
    entry = self._remove(0)
    return entry.item, entry.priority

  def delete(self, item: Hashable) -> Any:
    """Remove item wherever it sits in the heap and return its priority."""
    pos = self.indices.get(item)
    if pos is None:
      logger.debug(f"delete({item!r}): item is not enqueued")
      raise ItemNotFoundError(item)
    return self._remove(pos).priority

  def drain(self) -> Iterator[Hashable]:
    while self.heap:
      yield self.delete_min()

  def clear(self) -> None:
    self.heap = []
    self.indices = dict()

  def check_invariants(self) -> Optional[str]:
    """Return a description of the first broken invariant, or None."""
    for i, entry in enumerate(self.heap):
      p = parent(i)
      if p >= 0 and self.compare(entry.priority, self.heap[p].priority) < 0:
        return f"heap order: slot {i} ({entry.priority!r}) is better than its parent {p} ({self.heap[p].priority!r})"
      if self.indices.get(entry.item) != i:
        return f"index: slot {i} holds {entry.item!r} but the index points to {self.indices.get(entry.item)!r}"
    for item, pos in self.indices.items():
      if pos >= len(self.heap) or self.heap[pos].item != item:
        return f"index: {item!r} -> {pos} does not match the heap"
    if len(self.heap) != len(self.indices):
      return f"size: heap has {len(self.heap)} entries, index has {len(self.indices)}"
    return None
