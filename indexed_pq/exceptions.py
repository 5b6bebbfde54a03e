from typing import Any

class EmptyQueueError(IndexError):
    def __init__(self, error_message: str = "priority queue is empty"):
        super().__init__(error_message)

class ItemNotFoundError(KeyError):
    def __init__(self, item: Any):
        super().__init__(item)
        self.item = item

class PriorityIncreaseError(ValueError):
    def __init__(self, item: Any, current: Any, requested: Any):
        super().__init__(
            f"reduce_priority({item!r}, {requested!r}) would move the item away "
            f"from the root (current priority: {current!r})")
        self.item = item
        self.current = current
        self.requested = requested
