from abc import ABC, abstractmethod
from typing import Generic, List, TypeVar

V = TypeVar("V")
N = TypeVar("N")

class ITreeManager(ABC, Generic[V, N]):
    """
    Contract the traversal engine needs from a tree backend.
    Knows nothing about files; nodes are opaque values.
    Implementations must be safe to share between threads.
    """

    @abstractmethod
    def resolve(self, seed: V) -> N:
        """
        Turns the seed key (e.g. a path) into the root node.
        Raises the backend's own error when the seed cannot be resolved.
        """
        pass

    @abstractmethod
    def children(self, node: N) -> List[N]:
        """
        Returns the direct children of a non-leaf node, in backend order.
        May perform I/O; raises the backend's own error on failure.
        """
        pass

    @abstractmethod
    def is_leaf(self, node: N) -> bool:
        """Pure predicate. Leaves are never asked for children."""
        pass
