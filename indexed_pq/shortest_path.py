import math
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple

from indexed_pq.priority_queue import PriorityQueue
from indexed_pq.helpers import get_logger

logger = get_logger()

Neighbors = Callable[[Hashable], Iterable[Tuple[Hashable, float]]]


def dijkstra(neighbors: Neighbors, source: Hashable, target: Optional[Hashable] = None):
  """
  Single-source shortest paths over non-negative edge weights.

  `neighbors(node)` yields (neighbor, weight) pairs. Returns the
  (came_from, cost_so_far) maps; when `target` is given the search stops as
  soon as it is settled.
  """
  frontier = PriorityQueue()
  frontier.set(source, 0)
  came_from: Dict[Hashable, Optional[Hashable]] = {source: None}
  cost_so_far: Dict[Hashable, float] = {source: 0}
  settled = set()

  while frontier:
    current = frontier.delete_min()
    settled.add(current)
    if current == target:
      break
    for neighbor, weight in neighbors(current):
      if weight < 0:
        raise ValueError(f"Negative edge weight {weight} from {current!r} to {neighbor!r}")
      if neighbor in settled:
        continue
      new_cost = cost_so_far[current] + weight
      if neighbor not in cost_so_far or new_cost < cost_so_far[neighbor]:
        came_from[neighbor] = current
        cost_so_far[neighbor] = new_cost
        frontier.reduce_priority(neighbor, new_cost)

  logger.debug(f"Dijkstra from {source!r} settled {len(settled)} node(s)")
  return came_from, cost_so_far


def reconstruct_path(came_from: Dict[Hashable, Optional[Hashable]], source: Hashable, target: Hashable) -> List[Hashable]:
  if target not in came_from:
    return []
  current = target
  path = []
  while current != source:
    path.append(current)
    current = came_from[current]
  path.append(source)
  path.reverse()
  return path


def shortest_path(neighbors: Neighbors, source: Hashable, target: Hashable) -> Tuple[Any, List[Hashable]]:
  came_from, cost_so_far = dijkstra(neighbors, source, target)
  if target not in cost_so_far:
    return math.inf, []
  return cost_so_far[target], reconstruct_path(came_from, source, target)
