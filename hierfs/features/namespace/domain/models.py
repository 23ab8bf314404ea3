import posixpath
from dataclasses import dataclass
from hierfs.core.common.enums import EntryKind

@dataclass(frozen=True)
class FileStatus:
    """
    Metadata of one namespace entry, as returned by stat and list calls.
    `name` is the absolute namespace path, e.g. "/testing/a/1".
    Timestamps are POSIX seconds.
    """
    name: str
    kind: EntryKind
    owner: str
    group: str
    permission: int
    length: int = 0
    block_size: int = 0
    replication: int = 0
    last_modified: float = 0.0
    last_accessed: float = 0.0

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @property
    def base_name(self) -> str:
        return posixpath.basename(self.name) or "/"
