import math

import numpy as np
import pytest

from indexed_pq.exceptions import EmptyQueueError, ItemNotFoundError, PriorityIncreaseError
from indexed_pq.heap_index import parent
from indexed_pq.priority_queue import PriorityQueue, default_compare, reverse_compare


def check_invariants(pq: PriorityQueue, note: str = '') -> None:
  for i, entry in enumerate(pq.heap):
    p = parent(i)
    if p >= 0:
      assert pq.compare(entry.priority, pq.heap[p].priority) >= 0, \
        f"heap order at slot {i} {note}: {pq.heap}"
    assert pq.indices[entry.item] == i, note
  for item, pos in pq.indices.items():
    assert pq.heap[pos].item == item, note
  assert len(pq.heap) == len(pq.indices), note
  assert pq.check_invariants() is None


def test_default_compare():
  assert default_compare(1, 2) < 0
  assert default_compare(2, 1) > 0
  assert default_compare(2, 2) == 0
  assert default_compare('a', 'b') < 0
  assert reverse_compare(1, 2) > 0


def test_delete_min_returns_items_in_priority_order():
  pq = PriorityQueue()
  for v in [2, 4, 6, 8, 10, 12, 14, 15, 13, 11, 9, 7, 5, 3, 1]:
    pq.set(v, v)
    check_invariants(pq, f"after set({v}, {v})")
  assert pq.length == 15

  for i in range(1, 16):
    assert pq.delete_min() == i
    assert pq.length == 15 - i
    assert len(pq) == 15 - i
    check_invariants(pq, f"after delete_min #{i}")


def test_reduce_priority_reorders_extraction():
  pq = PriorityQueue()
  for v in [2, 4, 6, 8, 10, 12, 14, 15, 13, 11, 9, 7, 5, 3, 1]:
    pq.set(v, v)

  for i in range(1, 4):
    assert pq.delete_min() == i
    check_invariants(pq, f"after delete_min #{i}")

  pq.reduce_priority(6, 4.5)
  check_invariants(pq, "after reduce_priority(6, 4.5)")

  assert pq.delete_min() == 4
  check_invariants(pq)
  assert pq.delete_min() == 6
  check_invariants(pq)
  assert pq.delete_min() == 5
  check_invariants(pq)

  for i in range(7, 16):
    assert pq.delete_min() == i
    assert pq.length == 15 - i
    check_invariants(pq, f"after delete_min #{i}")


def test_custom_compare_reverses_order():
  pq = PriorityQueue(lambda a, b: b - a)
  for i in range(1, 8):
    pq.set(i, i)
    check_invariants(pq, f"after set({i}, {i})")

  for i in range(1, 4):
    assert pq.delete_min() == 8 - i
    assert pq.length == 7 - i
    check_invariants(pq)

  pq.set(1, math.inf)
  check_invariants(pq, "after set(1, inf)")

  assert pq.delete_min() == 1
  assert pq.length == 3
  check_invariants(pq)

  for expected in [4, 3, 2]:
    assert pq.delete_min() == expected
    check_invariants(pq)
  assert pq.length == 0


def test_set_moves_existing_item_both_ways():
  pq = PriorityQueue()
  for i in range(10):
    pq.set(i, i)

  pq.set(0, 100)
  check_invariants(pq)
  assert pq.peek() == 1
  assert len(pq) == 10

  pq.set(9, -1)
  check_invariants(pq)
  assert pq.peek() == 9
  assert pq[0] == 100


def test_delete_min_on_empty_queue_raises():
  pq = PriorityQueue()
  with pytest.raises(EmptyQueueError):
    pq.delete_min()
  with pytest.raises(IndexError):
    pq.peek()


def test_delete_min_on_single_entry_empties_the_queue():
  pq = PriorityQueue()
  pq.set('a', 1)
  assert pq.delete_min() == 'a'
  assert len(pq) == 0
  assert 'a' not in pq
  check_invariants(pq)
  with pytest.raises(EmptyQueueError):
    pq.delete_min()


def test_reduce_priority_rejects_worse_priority():
  pq = PriorityQueue()
  for i in range(1, 8):
    pq.set(i, i)
  heap_before = [(e.item, e.priority) for e in pq.heap]

  with pytest.raises(PriorityIncreaseError) as error:
    pq.reduce_priority(3, 10)
  assert error.value.item == 3
  assert error.value.current == 3
  assert error.value.requested == 10

  assert [(e.item, e.priority) for e in pq.heap] == heap_before
  check_invariants(pq)


def test_reduce_priority_respects_custom_compare():
  pq = PriorityQueue(reverse_compare)
  for i in range(1, 8):
    pq.set(i, i)
  pq.reduce_priority(1, 50)
  check_invariants(pq)
  assert pq.peek() == 1
  with pytest.raises(PriorityIncreaseError):
    pq.reduce_priority(2, 0)


def test_reduce_priority_with_equal_priority_is_accepted():
  pq = PriorityQueue()
  pq.set('a', 1)
  pq.set('b', 2)
  pq.reduce_priority('b', 2)
  check_invariants(pq)
  assert pq['b'] == 2


def test_reduce_priority_inserts_absent_item():
  pq = PriorityQueue()
  pq.set('a', 5)
  pq.reduce_priority('b', 3)
  check_invariants(pq)
  assert pq.peek_priority() == ('b', 3)


def test_delete_removes_arbitrary_item():
  pq = PriorityQueue()
  for i in range(20):
    pq.set(i, (i * 7) % 20)

  assert pq.delete(5) == 15
  check_invariants(pq)
  assert 5 not in pq
  assert len(pq) == 19

  with pytest.raises(ItemNotFoundError):
    pq.delete(5)
  with pytest.raises(KeyError):
    pq[5]

  priorities = [pq.delete_min_with_priority()[1] for _ in range(len(pq))]
  assert priorities == sorted(priorities)


def test_delete_last_slot():
  pq = PriorityQueue()
  for i in range(5):
    pq.set(i, i)
  last = pq.heap[-1].item
  pq.delete(last)
  check_invariants(pq)
  assert last not in pq


def test_lookup_and_iteration():
  pq = PriorityQueue()
  pq.set('x', 3)
  pq.set('y', 1)
  pq.set('z', 2)

  assert 'x' in pq
  assert 'w' not in pq
  assert pq.get('x') == 3
  assert pq.get('w') is None
  assert pq.get('w', 42) == 42
  assert set(pq) == {'x', 'y', 'z'}
  assert dict(pq.items()) == {'x': 3, 'y': 1, 'z': 2}
  assert bool(pq)
  assert repr(pq) == 'PriorityQueue(count = 3)'

  pq.clear()
  assert not pq
  assert pq.length == 0
  check_invariants(pq)


def test_drain_yields_sorted_items():
  pq = PriorityQueue()
  for item, priority in [('c', 3), ('a', 1), ('b', 2)]:
    pq.set(item, priority)
  assert list(pq.drain()) == ['a', 'b', 'c']
  assert len(pq) == 0


def test_from_items_builds_a_valid_heap():
  pairs = [(i, (i * 37) % 101) for i in range(101)]
  pairs.append((3, -5))
  pq = PriorityQueue.from_items(pairs)
  check_invariants(pq)
  assert len(pq) == 101
  assert pq.peek() == 3
  assert pq[3] == -5


def test_comparator_errors_propagate():
  def compare(a, b):
    raise RuntimeError("boom")

  pq = PriorityQueue(compare)
  pq.set('a', 1)
  with pytest.raises(RuntimeError):
    pq.set('b', 2)


def test_unhashable_items_are_rejected():
  pq = PriorityQueue()
  with pytest.raises(TypeError):
    pq.set(['a'], 1)


@pytest.mark.parametrize("compare", [default_compare, reverse_compare])
def test_random_operations_keep_invariants(compare):
  rng = np.random.default_rng(7)
  pq = PriorityQueue(compare)
  distinct = set()
  for _ in range(300):
    item = int(rng.integers(0, 60))
    op = rng.random()
    if op < 0.6:
      pq.set(item, float(rng.integers(-100, 100)))
      distinct.add(item)
    elif op < 0.8 and item in pq:
      current = pq[item]
      better = current - 5 if compare is default_compare else current + 5
      pq.reduce_priority(item, better)
    elif op < 0.9 and item in pq:
      pq.delete(item)
      distinct.discard(item)
    elif pq:
      distinct.discard(pq.delete_min())
    check_invariants(pq)

  assert len(pq) == len(distinct)
  drained = []
  while pq:
    drained.append(pq.delete_min_with_priority()[1])
    check_invariants(pq)
  sign = 1 if compare is default_compare else -1
  assert drained == sorted(drained, key=lambda p: sign * p)
  assert pq.length == 0
