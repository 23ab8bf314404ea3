# File: tests/conftest.py

import pytest
import os
import sys

# 1. Add project root to path
sys.path.append(os.getcwd())

from hierfs.features.namespace.data.local_fs import LocalFileSystem
from hierfs.features.namespace.data.sql_fs import SqlFileSystem


# Directories and files of the reference tree, in creation order
TESTING_DIRS = [
    "/testing",
    "/testing/a",
    "/testing/b",
    "/testing/a/1",
    "/testing/a/2",
]
TESTING_FILES = [
    "/testing/c",
    "/testing/a/3",
    "/testing/b/1",
    "/testing/b/2",
    "/testing/b/3",
    "/testing/a/1/11",
    "/testing/a/1/12",
    "/testing/a/2/11",
]


def build_testing_tree(fs):
    """
    /testing
    ├── a/ ── 1/ (11, 12), 2/ (11), 3
    ├── b/ ── 1, 2, 3
    └── c
    """
    for path in TESTING_DIRS:
        fs.mkdir(path)
    for path in TESTING_FILES:
        fs.create(path)
    return fs


@pytest.fixture
def local_fs(tmp_path):
    """
    A local namespace rooted in a scratch directory.
    """
    root = tmp_path / "namespace"
    root.mkdir()
    return LocalFileSystem(root)


@pytest.fixture
def sql_fs(tmp_path):
    """
    A catalog namespace in a throwaway SQLite file.
    """
    fs = SqlFileSystem.from_url(f"sqlite:///{tmp_path / 'catalog.db'}")
    yield fs
    fs.dispose()


@pytest.fixture(params=["local", "sql"])
def fs(request):
    """
    Runs the test once per backend.
    """
    return request.getfixturevalue(f"{request.param}_fs")


@pytest.fixture
def testing_fs(fs):
    return build_testing_tree(fs)
