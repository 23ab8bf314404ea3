import errno


class HierFsError(Exception):
    """
    Base class for every error raised by a namespace backend.
    Subclasses also derive from the matching builtin OSError type,
    so callers may catch either family.
    """
    errno: int = errno.EIO

    def __init__(self, message: str = "Unknown namespace error", path: str = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class PathNotFoundError(HierFsError, FileNotFoundError):
    errno = errno.ENOENT

    def __init__(self, path: str):
        super().__init__(f"File not found `{path}`", path)


class PathAlreadyExistsError(HierFsError, FileExistsError):
    errno = errno.EEXIST

    def __init__(self, path: str):
        super().__init__(f"File already exists `{path}`", path)


class NotADirectoryFsError(HierFsError, NotADirectoryError):
    errno = errno.ENOTDIR

    def __init__(self, path: str):
        super().__init__(f"Not a directory `{path}`", path)


class DirectoryNotEmptyError(HierFsError, OSError):
    errno = errno.ENOTEMPTY

    def __init__(self, path: str):
        super().__init__(f"Directory not empty `{path}`", path)


class AccessDeniedError(HierFsError, PermissionError):
    errno = errno.EACCES

    def __init__(self, path: str):
        super().__init__(f"Permission denied `{path}`", path)


class InvalidPathError(HierFsError, ValueError):
    errno = errno.EINVAL

    def __init__(self, path: str):
        super().__init__(f"Namespace paths must be absolute `{path}`", path)


class CannotConnectError(HierFsError, ConnectionRefusedError):
    errno = errno.ECONNREFUSED

    def __init__(self, endpoint: str):
        super().__init__(f"Cannot connect to namespace endpoint `{endpoint}`")
        self.endpoint = endpoint


class InvalidUrlError(HierFsError, ValueError):
    errno = errno.EADDRNOTAVAIL

    def __init__(self, url: str):
        super().__init__(f"Invalid URL `{url}`")
        self.url = url


def to_os_error(error: Exception) -> OSError:
    """
    Flattens a namespace error into a plain OSError carrying the matching errno.
    Plain OSErrors pass through untouched.
    """
    if isinstance(error, HierFsError):
        return OSError(error.errno, error.message, error.path)
    if isinstance(error, OSError):
        return error
    return OSError(errno.EIO, str(error))
