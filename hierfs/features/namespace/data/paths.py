import posixpath
from typing import List
from hierfs.core.errors import InvalidPathError

ROOT = "/"

def normalize(path: str) -> str:
    """
    Canonical form of a namespace path: absolute, no trailing slash,
    '.', '..' and duplicate separators collapsed.
    """
    if not path or not path.startswith("/"):
        raise InvalidPathError(path)
    normalized = posixpath.normpath(path)
    # normpath keeps a leading '//' as POSIX allows, the namespace does not
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized

def parent_of(path: str) -> str:
    return posixpath.dirname(path)

def join(parent: str, name: str) -> str:
    return posixpath.join(parent, name)

def ancestors(path: str) -> List[str]:
    """Every proper ancestor of `path`, root first. Root has none."""
    result = []
    current = path
    while current != ROOT:
        current = parent_of(current)
        result.append(current)
    return list(reversed(result))

def is_within(path: str, directory: str) -> bool:
    """True when `path` is `directory` itself or lies below it."""
    if directory == ROOT:
        return True
    return path == directory or path.startswith(directory + "/")
