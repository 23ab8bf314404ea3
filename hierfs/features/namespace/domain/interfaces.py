from abc import ABC, abstractmethod
from typing import List, Optional
from .models import FileStatus

class IFileSystem(ABC):
    """
    Contract for a hierarchical namespace backend.
    Paths are absolute and '/'-separated; every failure is raised as a
    HierFsError subclass.
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Endpoint this backend is bound to."""
        pass

    @abstractmethod
    def get_file_status(self, path: str) -> FileStatus:
        pass

    @abstractmethod
    def list_status(self, path: str) -> List[FileStatus]:
        """
        Lists a directory's direct children sorted by name.
        Listing a file returns that file's own status.
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Creates the directory and any missing parents. No-op if it exists."""
        pass

    @abstractmethod
    def create(self, path: str, overwrite: bool = False) -> FileStatus:
        """
        Creates an empty file, creating missing parents.
        An existing file is truncated only when overwrite is True.
        """
        pass

    @abstractmethod
    def delete(self, path: str, recursive: bool = False) -> None:
        pass

    @abstractmethod
    def rename(self, old_path: str, new_path: str) -> None:
        pass

    @abstractmethod
    def chmod(self, path: str, mode: int) -> None:
        pass

    @abstractmethod
    def chown(self, path: str, owner: Optional[str] = None, group: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def set_replication(self, path: str, replication: int) -> None:
        pass

    @abstractmethod
    def used(self) -> int:
        """Total bytes held by files in the namespace."""
        pass
