import errno
import logging
import os
import shutil
import stat
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from hierfs.core.config.settings import settings
from hierfs.core.common.enums import EntryKind
from hierfs.core.errors import (
    AccessDeniedError,
    DirectoryNotEmptyError,
    HierFsError,
    NotADirectoryFsError,
    PathAlreadyExistsError,
    PathNotFoundError,
)
from ..domain.interfaces import IFileSystem
from ..domain.models import FileStatus
from . import paths

try:
    import pwd
    import grp
except ImportError:  # not available on Windows, numeric ids are reported instead
    pwd = None
    grp = None

logger = logging.getLogger(__name__)


@contextmanager
def _translate_os_errors(path: str):
    """Re-raises OS level failures as namespace errors for `path`."""
    try:
        yield
    except HierFsError:
        raise
    except FileNotFoundError:
        raise PathNotFoundError(path) from None
    except FileExistsError:
        raise PathAlreadyExistsError(path) from None
    except NotADirectoryError:
        raise NotADirectoryFsError(path) from None
    except PermissionError:
        raise AccessDeniedError(path) from None
    except OSError as e:
        if e.errno == errno.ENOTEMPTY:
            raise DirectoryNotEmptyError(path) from None
        # ELOOP and friends: keep the OS errno on the namespace error
        error = HierFsError(f"{e.strerror or 'I/O error'} `{path}`", path)
        error.errno = e.errno or errno.EIO
        raise error from e


class LocalFileSystem(IFileSystem):
    """
    Namespace backed by a directory on local disk.
    Namespace path "/a/b" lives at <root>/a/b.
    """

    def __init__(self, root: Path = None):
        self.root = Path(root) if root is not None else settings.LOCAL_ROOT

    @property
    def url(self) -> str:
        return self.root.resolve().as_uri()

    def __repr__(self) -> str:
        return f"LocalFileSystem(root={str(self.root)!r})"

    def _local(self, path: str) -> Path:
        # Normalized paths hold no '..', so the result stays under root
        return self.root / path.lstrip("/")

    def _status(self, path: str, st: os.stat_result) -> FileStatus:
        is_dir = stat.S_ISDIR(st.st_mode)
        return FileStatus(
            name=path,
            kind=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
            owner=self._owner_name(st.st_uid),
            group=self._group_name(st.st_gid),
            permission=stat.S_IMODE(st.st_mode),
            length=0 if is_dir else st.st_size,
            block_size=getattr(st, "st_blksize", settings.BLOCK_SIZE),
            replication=1,
            last_modified=st.st_mtime,
            last_accessed=st.st_atime,
        )

    @staticmethod
    def _owner_name(uid: int) -> str:
        if pwd is None:
            return str(uid)
        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            return str(uid)

    @staticmethod
    def _group_name(gid: int) -> str:
        if grp is None:
            return str(gid)
        try:
            return grp.getgrgid(gid).gr_name
        except KeyError:
            return str(gid)

    def _stat(self, path: str) -> os.stat_result:
        """
        Stats the entry itself: a symlink is reported as a non-directory entry,
        never followed. Only the namespace root may itself be a link.
        """
        local = self._local(path)
        with _translate_os_errors(path):
            try:
                if path == paths.ROOT:
                    return local.stat()
                return os.lstat(local)
            except NotADirectoryError:
                # A file in the middle of the path means the path does not exist
                raise PathNotFoundError(path) from None

    def _ensure_parent_dirs(self, path: str) -> None:
        for ancestor in paths.ancestors(path):
            local = self._local(ancestor)
            if local.exists() and not local.is_dir():
                raise NotADirectoryFsError(ancestor)
        with _translate_os_errors(path):
            self._local(path).parent.mkdir(parents=True, exist_ok=True)

    # --- Queries ---

    def get_file_status(self, path: str) -> FileStatus:
        path = paths.normalize(path)
        return self._status(path, self._stat(path))

    def list_status(self, path: str) -> List[FileStatus]:
        status = self.get_file_status(path)
        if status.is_file:
            return [status]

        with _translate_os_errors(status.name):
            names = sorted(os.listdir(self._local(status.name)))

        return [self.get_file_status(paths.join(status.name, name)) for name in names]

    def exists(self, path: str) -> bool:
        try:
            self._stat(paths.normalize(path))
        except PathNotFoundError:
            return False
        return True

    def used(self) -> int:
        total = 0
        for dirpath, _dirnames, filenames in os.walk(self.root):
            for filename in filenames:
                try:
                    total += os.lstat(os.path.join(dirpath, filename)).st_size
                except FileNotFoundError:
                    # Removed while walking
                    continue
        return total

    # --- Mutations ---

    def mkdir(self, path: str) -> None:
        path = paths.normalize(path)
        local = self._local(path)
        if local.is_dir():
            return
        if local.exists():
            raise PathAlreadyExistsError(path)

        self._ensure_parent_dirs(path)
        with _translate_os_errors(path):
            local.mkdir(mode=settings.DIR_PERMISSION, exist_ok=True)
        logger.info(f"Created directory {path} under {self.root}")

    def create(self, path: str, overwrite: bool = False) -> FileStatus:
        path = paths.normalize(path)
        local = self._local(path)
        if local.is_dir():
            raise PathAlreadyExistsError(path)
        if local.exists() and not overwrite:
            raise PathAlreadyExistsError(path)

        self._ensure_parent_dirs(path)
        with _translate_os_errors(path):
            with open(local, "wb"):
                pass
            os.chmod(local, settings.FILE_PERMISSION)
        logger.info(f"Created file {path} under {self.root}")
        return self.get_file_status(path)

    def delete(self, path: str, recursive: bool = False) -> None:
        path = paths.normalize(path)
        if path == paths.ROOT:
            raise HierFsError("The namespace root cannot be deleted", path)

        status = self.get_file_status(path)
        local = self._local(path)
        with _translate_os_errors(path):
            if status.is_file:
                local.unlink()
            elif recursive:
                shutil.rmtree(local)
            else:
                local.rmdir()
        logger.info(f"Deleted {path} (recursive={recursive}) under {self.root}")

    def rename(self, old_path: str, new_path: str) -> None:
        old_path = paths.normalize(old_path)
        new_path = paths.normalize(new_path)
        if paths.ROOT in (old_path, new_path):
            raise HierFsError("The namespace root cannot be renamed", old_path)

        status = self.get_file_status(old_path)
        if status.is_directory and paths.is_within(new_path, old_path):
            raise HierFsError(f"Cannot move `{old_path}` into itself", new_path)
        if self.exists(new_path):
            raise PathAlreadyExistsError(new_path)

        parent = self.get_file_status(paths.parent_of(new_path))
        if not parent.is_directory:
            raise NotADirectoryFsError(parent.name)

        with _translate_os_errors(old_path):
            os.rename(self._local(old_path), self._local(new_path))
        logger.info(f"Renamed {old_path} -> {new_path} under {self.root}")

    def chmod(self, path: str, mode: int) -> None:
        path = paths.normalize(path)
        self._stat(path)
        with _translate_os_errors(path):
            os.chmod(self._local(path), mode)

    def chown(self, path: str, owner: Optional[str] = None, group: Optional[str] = None) -> None:
        path = paths.normalize(path)
        self._stat(path)
        if owner is None and group is None:
            return
        with _translate_os_errors(path):
            shutil.chown(self._local(path), user=owner, group=group)

    def set_replication(self, path: str, replication: int) -> None:
        if replication < 1:
            raise ValueError(f"Replication must be at least 1, got {replication}")
        status = self.get_file_status(path)
        if not status.is_file:
            raise HierFsError(f"Replication applies to files only `{status.name}`", status.name)
        if replication != 1:
            raise HierFsError(f"Local storage keeps exactly one replica `{status.name}`", status.name)
