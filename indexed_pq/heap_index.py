from typing import Tuple

NO_PARENT = -1


def parent(i: int) -> int:
  if i == 0:
    return NO_PARENT
  return (i - 1) >> 1


def children(i: int) -> Tuple[int, int]:
  """Slots of the left and right children of slot i.

  Either may be past the end of the heap; callers bounds-check.
  """
  left = 2 * i + 1
  return left, left + 1
