import logging
import threading
from pathlib import Path
from typing import Dict, Tuple
from urllib.parse import urlparse, unquote

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from hierfs.core.config.settings import settings
from hierfs.core.errors import InvalidUrlError
from ..domain.interfaces import IFileSystem
from ..data.local_fs import LocalFileSystem
from ..data.sql_fs import SqlFileSystem

logger = logging.getLogger(__name__)

LOCAL_FS_SCHEME = "file"


class FsRegistry:
    """
    Hands out one namespace backend per endpoint and keeps it for reuse.

    - file:///            -> LocalFileSystem over settings.LOCAL_ROOT
    - file:///some/dir    -> LocalFileSystem rooted at /some/dir
    - sqlite:///ns.db     -> SqlFileSystem on that catalog
    - postgresql://h:5432/db (any SQLAlchemy URL with host and port)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._all_fs: Dict[str, IFileSystem] = {}

    def get(self, url: str) -> IFileSystem:
        kind, key = self._endpoint_key(url)

        with self._lock:
            fs = self._all_fs.get(key)
            if fs is not None:
                return fs

            logger.info(f"Connecting to namespace endpoint ... url: [{key}]")
            if kind == LOCAL_FS_SCHEME:
                fs = LocalFileSystem(self._local_root(url))
            else:
                fs = SqlFileSystem.from_url(url)
            logger.debug(f"Connected to namespace endpoint, url: [{key}]")

            self._all_fs[key] = fs
            return fs

    def clear(self) -> None:
        """Drops every cached backend, releasing database connections."""
        with self._lock:
            for fs in self._all_fs.values():
                if isinstance(fs, SqlFileSystem):
                    fs.dispose()
            self._all_fs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._all_fs)

    @staticmethod
    def _local_root(url: str) -> Path:
        path = unquote(urlparse(url).path)
        if path in ("", "/"):
            return settings.LOCAL_ROOT
        return Path(path)

    @staticmethod
    def _endpoint_key(url: str) -> Tuple[str, str]:
        """
        Classifies the endpoint and derives its cache key.
        Raises InvalidUrlError for anything that cannot name an endpoint.
        """
        if not url or "://" not in url:
            raise InvalidUrlError(url)

        if urlparse(url).scheme == LOCAL_FS_SCHEME:
            root = FsRegistry._local_root(url)
            return LOCAL_FS_SCHEME, root.resolve().as_uri()

        try:
            parsed = make_url(url)
        except (ArgumentError, ValueError):
            raise InvalidUrlError(url) from None

        if parsed.get_backend_name() != "sqlite":
            if not parsed.host or parsed.port is None:
                raise InvalidUrlError(url)

        return "sql", parsed.render_as_string(hide_password=True)

# Shared instance for easy import
registry = FsRegistry()
