import logging
from typing import Generic, List, Optional, TypeVar

from ..domain.interfaces import ITreeManager
from ..domain.models import TraversalOptions, TreeFrame

logger = logging.getLogger(__name__)

V = TypeVar("V")
N = TypeVar("N")

class TreeIter(Generic[V, N]):
    """
    Lazy, depth-bounded, pre-order walk over any tree an ITreeManager describes.

    Nodes are produced one pull at a time. Siblings come out in the reverse
    of the order the manager lists them, because children are pushed onto a
    stack as listed.

    Two stacks drive the walk:
    - qualified: frames at or beyond min_depth, each one will be yielded.
    - deferred: non-leaf frames above min_depth, only expanded to reach
      the frontier at min_depth.

    Backend errors propagate out of the pull that hit them. The frame being
    expanded is already off its stack by then, so its subtree is dropped,
    but the iterator stays usable and the next pull carries on with the
    remaining frames.
    """

    def __init__(self, manager: ITreeManager[V, N], opts: TraversalOptions, start: V):
        self.manager = manager
        self.opts = opts
        # Only set until the first pull
        self._start: Optional[V] = start
        self._seeded = True
        self._qualified: List[TreeFrame] = []
        self._deferred: List[TreeFrame] = []

    def __iter__(self) -> "TreeIter[V, N]":
        return self

    def __next__(self) -> N:
        item = self.next_item()
        if item is None:
            raise StopIteration
        return item

    def next_item(self) -> Optional[N]:
        """
        Advances the walk by one node.
        Returns None once the walk is exhausted, and on every pull after that.
        """
        if self._seeded:
            root = self._take_root()
            if root is not None:
                return root

        while True:
            # 1. Qualified frames are yielded, expanding them first when allowed
            if self._qualified:
                frame = self._qualified.pop()
                if frame.depth < self.opts.max_depth and not self.manager.is_leaf(frame.node):
                    self._push_children(self._qualified, frame, self.manager.children(frame.node))
                return frame.node

            # 2. Deferred frames only move state forward, then we try again
            if self._deferred:
                self._expand_deferred(self._deferred.pop())
                continue

            return None

    def _take_root(self) -> Optional[N]:
        """
        Resolves the seed and places the root frame.
        Returns the root only when it must be yielded straight away.
        """
        start, self._start = self._start, None
        self._seeded = False

        root = self.manager.resolve(start)
        is_leaf = self.manager.is_leaf(root)
        logger.debug(f"Walk seeded at {start!r} (leaf={is_leaf}, opts={self.opts})")

        if self.opts.min_depth == 0:
            if is_leaf:
                return root
            self._qualified.append(TreeFrame(root, 0))
        elif not is_leaf:
            self._deferred.append(TreeFrame(root, 0))
        # A leaf root with min_depth > 0 has nothing that could ever qualify
        return None

    def _expand_deferred(self, frame: TreeFrame) -> None:
        children = self.manager.children(frame.node)
        depth = frame.depth + 1

        if depth == self.opts.min_depth:
            self._push_children(self._qualified, frame, children)
        else:
            # Leaves this shallow can never reach min_depth
            self._push_children(
                self._deferred,
                frame,
                [child for child in children if not self.manager.is_leaf(child)]
            )
        logger.debug(f"Expanded deferred frame at depth {frame.depth} into {len(children)} children")

    @staticmethod
    def _push_children(stack: List[TreeFrame], parent: TreeFrame, children: List[N]) -> None:
        stack.extend(TreeFrame(child, parent.depth + 1) for child in children)
