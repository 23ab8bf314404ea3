import sys
from dataclasses import dataclass, replace
from typing import Any

# Stand-in for "no depth limit"
UNBOUNDED_DEPTH = sys.maxsize

@dataclass(frozen=True)
class TraversalOptions:
    """
    Depth window for a walk.

    The smallest depth is 0 and always corresponds to the root the walk
    starts from. Its direct descendants have depth 1, and so on.

    Constructing with an inverted window is rejected. The ``with_*``
    setters clamp instead: the field being set is pulled back inside the
    window formed by the other one.
    """
    min_depth: int = 0
    max_depth: int = UNBOUNDED_DEPTH

    def __post_init__(self):
        if self.min_depth < 0 or self.max_depth < 0:
            raise ValueError(f"Depths cannot be negative: min={self.min_depth}, max={self.max_depth}")
        if self.min_depth > self.max_depth:
            raise ValueError(f"min_depth ({self.min_depth}) must not exceed max_depth ({self.max_depth})")

    def with_min_depth(self, depth: int) -> "TraversalOptions":
        if depth < 0:
            raise ValueError(f"Depth cannot be negative: {depth}")
        return replace(self, min_depth=min(depth, self.max_depth))

    def with_max_depth(self, depth: int) -> "TraversalOptions":
        """
        Note that this does not simply filter the yielded entries: the walk
        never lists the children of a node sitting at max_depth.
        """
        if depth < 0:
            raise ValueError(f"Depth cannot be negative: {depth}")
        return replace(self, max_depth=max(depth, self.min_depth))

@dataclass(frozen=True)
class TreeFrame:
    """A node paired with its depth. The unit kept on the engine stacks."""
    node: Any
    depth: int
