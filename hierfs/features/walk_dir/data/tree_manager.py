from typing import List
from hierfs.features.namespace.domain.interfaces import IFileSystem
from hierfs.features.namespace.domain.models import FileStatus
from hierfs.features.traversal.domain.interfaces import ITreeManager

class FsTreeManager(ITreeManager[str, FileStatus]):
    """
    Presents a namespace backend to the traversal engine.
    Seeds are paths, nodes are FileStatus entries, files are leaves.
    """

    def __init__(self, fs: IFileSystem):
        self.fs = fs

    def resolve(self, seed: str) -> FileStatus:
        return self.fs.get_file_status(seed)

    def children(self, node: FileStatus) -> List[FileStatus]:
        return self.fs.list_status(node.name)

    def is_leaf(self, node: FileStatus) -> bool:
        return node.is_file
