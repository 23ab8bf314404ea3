import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterator, Optional

from hierfs.core.errors import HierFsError
from hierfs.features.namespace.domain.interfaces import IFileSystem
from hierfs.features.namespace.domain.models import FileStatus
from hierfs.features.namespace.service.registry import FsRegistry, registry as default_registry
from hierfs.features.traversal.domain.models import TraversalOptions
from hierfs.features.traversal.service.tree_iter import TreeIter
from ..data.tree_manager import FsTreeManager

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class WalkDir:
    """
    Public Service API: walk a directory tree of a namespace backend.

    Depth 0 is `root` itself, its direct children have depth 1, and so on.

        walk = WalkDir("/testing", fs).set_min_depth(1).set_max_depth(2)
        for status in walk:
            print(status.name)

    Every iteration starts an independent walk, so a configured WalkDir
    can be reused.
    """
    root: str
    fs: IFileSystem
    opts: TraversalOptions = field(default_factory=TraversalOptions)

    @classmethod
    def from_url(cls, root: str, url: str, registry: Optional[FsRegistry] = None) -> "WalkDir":
        """Binds the walk to the backend the registry holds for `url`."""
        fs = (registry or default_registry).get(url)
        return cls(root, fs)

    def set_min_depth(self, depth: int) -> "WalkDir":
        """Minimum depth of yielded entries. Clamped to the current max depth."""
        return replace(self, opts=self.opts.with_min_depth(depth))

    def set_max_depth(self, depth: int) -> "WalkDir":
        """
        Maximum depth of yielded entries. Raised to the current min depth if lower.
        Directories at this depth are never listed.
        """
        return replace(self, opts=self.opts.with_max_depth(depth))

    def __iter__(self) -> TreeIter[str, FileStatus]:
        return TreeIter(FsTreeManager(self.fs), self.opts, self.root)

    def entries(self, onerror: Optional[Callable[[Exception], None]] = None) -> Iterator[FileStatus]:
        """
        Generator over the walk that survives backend errors.

        Each error is handed to `onerror` and the walk moves on to the
        remaining entries. Without `onerror` the first error is raised.
        """
        walker = iter(self)
        while True:
            try:
                status = walker.next_item()
            except (HierFsError, OSError) as e:
                if onerror is None:
                    raise
                logger.warning(f"Walk of {self.root} abandoned a subtree: {e}")
                onerror(e)
                continue

            if status is None:
                return
            yield status
