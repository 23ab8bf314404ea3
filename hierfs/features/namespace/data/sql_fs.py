import logging
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, OperationalError
from sqlalchemy.orm import Session

from hierfs.core.config.settings import settings
from hierfs.core.common.enums import EntryKind
from hierfs.core.database.base import Base
from hierfs.core.database.connection import create_catalog_engine, create_session_factory
from hierfs.core.errors import (
    CannotConnectError,
    DirectoryNotEmptyError,
    HierFsError,
    InvalidUrlError,
    NotADirectoryFsError,
    PathAlreadyExistsError,
    PathNotFoundError,
)
from ..domain.interfaces import IFileSystem
from ..domain.models import FileStatus
from .sql_models import EntryModel
from . import paths

logger = logging.getLogger(__name__)


class SqlFileSystem(IFileSystem):
    """
    Namespace catalogued in a relational database.
    Every file and directory is one row of the `entries` table; a directory
    listing is a lookup on the indexed parent path.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = create_session_factory(engine)
        try:
            Base.metadata.create_all(bind=engine, tables=[EntryModel.__table__])
        except OperationalError as e:
            raise CannotConnectError(self.url) from e
        self._ensure_root()

    @classmethod
    def from_url(cls, url: str) -> "SqlFileSystem":
        try:
            engine = create_catalog_engine(url)
        except ArgumentError:
            # Unknown dialect or driver
            raise InvalidUrlError(url) from None
        except OperationalError as e:
            raise CannotConnectError(url) from e
        return cls(engine)

    @property
    def url(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    def __repr__(self) -> str:
        return f"SqlFileSystem(url={self.url!r})"

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """
        One session per operation. Commits on success, rolls back on any error.
        """
        with self.SessionLocal() as db:
            try:
                yield db
                db.commit()
            except OperationalError as e:
                db.rollback()
                raise CannotConnectError(self.url) from e
            except Exception:
                db.rollback()
                raise

    def _ensure_root(self) -> None:
        with self._transaction() as db:
            if db.get(EntryModel, paths.ROOT) is None:
                db.add(self._new_entry(paths.ROOT, EntryKind.DIRECTORY))
                logger.debug(f"Initialized namespace root in {self.url}")

    @staticmethod
    def _new_entry(path: str, kind: EntryKind) -> EntryModel:
        now = time.time()
        is_file = kind == EntryKind.FILE
        return EntryModel(
            path=path,
            parent_path=None if path == paths.ROOT else paths.parent_of(path),
            kind=kind,
            owner=settings.DEFAULT_OWNER,
            group=settings.DEFAULT_GROUP,
            permission=settings.FILE_PERMISSION if is_file else settings.DIR_PERMISSION,
            length=0,
            block_size=settings.BLOCK_SIZE if is_file else 0,
            replication=settings.REPLICATION if is_file else 0,
            modified_at=now,
            accessed_at=now,
        )

    @staticmethod
    def _to_status(row: EntryModel) -> FileStatus:
        return FileStatus(
            name=row.path,
            kind=row.kind,
            owner=row.owner,
            group=row.group,
            permission=row.permission,
            length=row.length,
            block_size=row.block_size,
            replication=row.replication,
            last_modified=row.modified_at,
            last_accessed=row.accessed_at,
        )

    def _require(self, db: Session, path: str) -> EntryModel:
        row = db.get(EntryModel, path)
        if row is None:
            raise PathNotFoundError(path)
        return row

    def _ensure_ancestors(self, db: Session, path: str) -> None:
        """Creates missing parent directories, refusing to descend through files."""
        for ancestor in paths.ancestors(path):
            row = db.get(EntryModel, ancestor)
            if row is None:
                db.add(self._new_entry(ancestor, EntryKind.DIRECTORY))
            elif row.kind != EntryKind.DIRECTORY:
                raise NotADirectoryFsError(ancestor)

    @staticmethod
    def _subtree_filter(path: str):
        return or_(
            EntryModel.path == path,
            EntryModel.path.startswith(path + "/", autoescape=True)
        )

    # --- Queries ---

    def get_file_status(self, path: str) -> FileStatus:
        path = paths.normalize(path)
        with self._transaction() as db:
            return self._to_status(self._require(db, path))

    def list_status(self, path: str) -> List[FileStatus]:
        path = paths.normalize(path)
        with self._transaction() as db:
            row = self._require(db, path)
            if row.kind == EntryKind.FILE:
                return [self._to_status(row)]

            children = (
                db.query(EntryModel)
                .filter(EntryModel.parent_path == path)
                .order_by(EntryModel.path)
                .all()
            )
            return [self._to_status(child) for child in children]

    def exists(self, path: str) -> bool:
        path = paths.normalize(path)
        with self._transaction() as db:
            return db.get(EntryModel, path) is not None

    def used(self) -> int:
        with self._transaction() as db:
            total = (
                db.query(func.sum(EntryModel.length))
                .filter(EntryModel.kind == EntryKind.FILE)
                .scalar()
            )
            return int(total or 0)

    # --- Mutations ---

    def mkdir(self, path: str) -> None:
        path = paths.normalize(path)
        with self._transaction() as db:
            row = db.get(EntryModel, path)
            if row is not None:
                if row.kind == EntryKind.DIRECTORY:
                    return
                raise PathAlreadyExistsError(path)

            self._ensure_ancestors(db, path)
            db.add(self._new_entry(path, EntryKind.DIRECTORY))
        logger.info(f"Created directory {path} in {self.url}")

    def create(self, path: str, overwrite: bool = False) -> FileStatus:
        path = paths.normalize(path)
        with self._transaction() as db:
            row = db.get(EntryModel, path)
            if row is not None:
                if row.kind == EntryKind.DIRECTORY or not overwrite:
                    raise PathAlreadyExistsError(path)
                # Overwrite truncates the existing file
                row.length = 0
                row.modified_at = time.time()
            else:
                self._ensure_ancestors(db, path)
                row = self._new_entry(path, EntryKind.FILE)
                db.add(row)
            status = self._to_status(row)
        logger.info(f"Created file {path} in {self.url}")
        return status

    def delete(self, path: str, recursive: bool = False) -> None:
        path = paths.normalize(path)
        if path == paths.ROOT:
            raise HierFsError("The namespace root cannot be deleted", path)

        with self._transaction() as db:
            row = self._require(db, path)
            if row.kind == EntryKind.DIRECTORY and not recursive:
                has_children = (
                    db.query(EntryModel.path)
                    .filter(EntryModel.parent_path == path)
                    .first()
                )
                if has_children:
                    raise DirectoryNotEmptyError(path)

            removed = (
                db.query(EntryModel)
                .filter(self._subtree_filter(path))
                .delete(synchronize_session=False)
            )
        logger.info(f"Deleted {path} ({removed} entries) in {self.url}")

    def rename(self, old_path: str, new_path: str) -> None:
        old_path = paths.normalize(old_path)
        new_path = paths.normalize(new_path)
        if paths.ROOT in (old_path, new_path):
            raise HierFsError("The namespace root cannot be renamed", old_path)

        with self._transaction() as db:
            row = self._require(db, old_path)
            if row.kind == EntryKind.DIRECTORY and paths.is_within(new_path, old_path):
                raise HierFsError(f"Cannot move `{old_path}` into itself", new_path)
            if db.get(EntryModel, new_path) is not None:
                raise PathAlreadyExistsError(new_path)

            parent = self._require(db, paths.parent_of(new_path))
            if parent.kind != EntryKind.DIRECTORY:
                raise NotADirectoryFsError(parent.path)

            subtree = db.query(EntryModel).filter(self._subtree_filter(old_path)).all()
            for entry in subtree:
                entry.path = new_path + entry.path[len(old_path):]
                if entry.path == new_path:
                    entry.parent_path = paths.parent_of(new_path)
                    entry.modified_at = time.time()
                else:
                    entry.parent_path = new_path + entry.parent_path[len(old_path):]
        logger.info(f"Renamed {old_path} -> {new_path} in {self.url}")

    def chmod(self, path: str, mode: int) -> None:
        path = paths.normalize(path)
        with self._transaction() as db:
            self._require(db, path).permission = mode

    def chown(self, path: str, owner: Optional[str] = None, group: Optional[str] = None) -> None:
        path = paths.normalize(path)
        with self._transaction() as db:
            row = self._require(db, path)
            if owner is not None:
                row.owner = owner
            if group is not None:
                row.group = group

    def set_replication(self, path: str, replication: int) -> None:
        path = paths.normalize(path)
        if replication < 1:
            raise ValueError(f"Replication must be at least 1, got {replication}")
        with self._transaction() as db:
            row = self._require(db, path)
            if row.kind != EntryKind.FILE:
                raise HierFsError(f"Replication applies to files only `{path}`", path)
            row.replication = replication
