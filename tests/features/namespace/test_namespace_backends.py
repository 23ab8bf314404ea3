import errno
import pytest

from hierfs.core.common.enums import EntryKind
from hierfs.core.errors import (
    DirectoryNotEmptyError,
    HierFsError,
    InvalidPathError,
    NotADirectoryFsError,
    PathAlreadyExistsError,
    PathNotFoundError,
)

# Every test here runs against both the local and the SQL backend (see conftest `fs`).

def names(statuses):
    return [status.name for status in statuses]

# --- STAT & LIST ---

def test_root_is_a_directory(fs):
    root = fs.get_file_status("/")
    assert root.is_directory
    assert root.name == "/"
    assert root.base_name == "/"

def test_missing_path_raises_not_found(fs):
    with pytest.raises(PathNotFoundError) as exc_info:
        fs.get_file_status("/nope")

    # Also catchable as the builtin
    assert isinstance(exc_info.value, FileNotFoundError)
    assert exc_info.value.path == "/nope"

def test_list_status_is_sorted_by_name(testing_fs):
    assert names(testing_fs.list_status("/testing")) == [
        "/testing/a",
        "/testing/b",
        "/testing/c",
    ]
    assert names(testing_fs.list_status("/testing/a/1")) == [
        "/testing/a/1/11",
        "/testing/a/1/12",
    ]

def test_list_status_of_a_file_returns_the_file(testing_fs):
    statuses = testing_fs.list_status("/testing/c")
    assert names(statuses) == ["/testing/c"]
    assert statuses[0].is_file

def test_list_status_of_missing_directory_raises(fs):
    with pytest.raises(PathNotFoundError):
        fs.list_status("/nope")

def test_paths_are_normalized(testing_fs):
    status = testing_fs.get_file_status("/testing//a/../b/")
    assert status.name == "/testing/b"
    assert status.base_name == "b"

def test_relative_paths_are_rejected(fs):
    with pytest.raises(InvalidPathError) as exc_info:
        fs.get_file_status("testing")

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.errno == errno.EINVAL

def test_exists(testing_fs):
    assert testing_fs.exists("/testing/a/1/12")
    assert not testing_fs.exists("/testing/a/1/13")
    # A file in the middle of a path
    assert not testing_fs.exists("/testing/c/x")

# --- MKDIR & CREATE ---

def test_mkdir_creates_missing_parents(fs):
    fs.mkdir("/x/y/z")

    for path in ["/x", "/x/y", "/x/y/z"]:
        assert fs.get_file_status(path).kind == EntryKind.DIRECTORY

def test_mkdir_on_existing_directory_is_a_no_op(fs):
    fs.mkdir("/x")
    fs.create("/x/f")
    fs.mkdir("/x")

    assert names(fs.list_status("/x")) == ["/x/f"]

def test_mkdir_over_a_file_fails(fs):
    fs.create("/f")
    with pytest.raises(PathAlreadyExistsError):
        fs.mkdir("/f")

def test_create_returns_empty_file_status(fs):
    status = fs.create("/dir/new.txt")

    assert status.name == "/dir/new.txt"
    assert status.is_file
    assert status.length == 0
    assert fs.get_file_status("/dir").is_directory

def test_create_existing_file_requires_overwrite(fs):
    fs.create("/f")
    with pytest.raises(PathAlreadyExistsError) as exc_info:
        fs.create("/f")
    assert isinstance(exc_info.value, FileExistsError)

    assert fs.create("/f", overwrite=True).is_file

def test_create_over_directory_fails_even_with_overwrite(fs):
    fs.mkdir("/d")
    with pytest.raises(PathAlreadyExistsError):
        fs.create("/d", overwrite=True)

def test_create_below_a_file_fails(fs):
    fs.create("/f")
    with pytest.raises(NotADirectoryFsError) as exc_info:
        fs.create("/f/child")
    assert isinstance(exc_info.value, NotADirectoryError)
    assert not fs.exists("/f/child")

# --- DELETE ---

def test_delete_file(testing_fs):
    testing_fs.delete("/testing/c")
    assert not testing_fs.exists("/testing/c")

def test_delete_non_empty_directory_requires_recursive(testing_fs):
    with pytest.raises(DirectoryNotEmptyError):
        testing_fs.delete("/testing/a")
    assert testing_fs.exists("/testing/a/1/11")

    testing_fs.delete("/testing/a", recursive=True)
    assert not testing_fs.exists("/testing/a")
    assert not testing_fs.exists("/testing/a/1/11")
    # Siblings survive
    assert names(testing_fs.list_status("/testing")) == ["/testing/b", "/testing/c"]

def test_delete_empty_directory(fs):
    fs.mkdir("/empty")
    fs.delete("/empty")
    assert not fs.exists("/empty")

def test_delete_missing_path_raises(fs):
    with pytest.raises(PathNotFoundError):
        fs.delete("/nope")

def test_root_cannot_be_deleted(fs):
    with pytest.raises(HierFsError):
        fs.delete("/", recursive=True)

# --- RENAME ---

def test_rename_file(testing_fs):
    testing_fs.rename("/testing/c", "/testing/d")

    assert not testing_fs.exists("/testing/c")
    assert testing_fs.get_file_status("/testing/d").is_file

def test_rename_directory_moves_subtree(testing_fs):
    testing_fs.rename("/testing/a", "/moved")

    assert not testing_fs.exists("/testing/a")
    assert names(testing_fs.list_status("/moved")) == ["/moved/1", "/moved/2", "/moved/3"]
    assert names(testing_fs.list_status("/moved/1")) == ["/moved/1/11", "/moved/1/12"]
    assert names(testing_fs.list_status("/")) == ["/moved", "/testing"]

def test_rename_onto_existing_path_fails(testing_fs):
    with pytest.raises(PathAlreadyExistsError):
        testing_fs.rename("/testing/a", "/testing/b")

def test_rename_into_itself_fails(testing_fs):
    with pytest.raises(HierFsError):
        testing_fs.rename("/testing/a", "/testing/a/1/inner")

def test_rename_missing_source_fails(fs):
    with pytest.raises(PathNotFoundError):
        fs.rename("/nope", "/other")

def test_rename_into_missing_parent_fails(testing_fs):
    with pytest.raises(PathNotFoundError):
        testing_fs.rename("/testing/c", "/missing/c")

def test_rename_below_a_file_fails(testing_fs):
    with pytest.raises(NotADirectoryFsError):
        testing_fs.rename("/testing/b/1", "/testing/c/1")

# --- ATTRIBUTES ---

def test_chmod(testing_fs):
    testing_fs.chmod("/testing/c", 0o600)
    assert testing_fs.get_file_status("/testing/c").permission == 0o600

def test_chmod_missing_path_raises(fs):
    with pytest.raises(PathNotFoundError):
        fs.chmod("/nope", 0o600)

def test_chown_without_changes_is_a_no_op(testing_fs):
    before = testing_fs.get_file_status("/testing/c")
    testing_fs.chown("/testing/c")
    after = testing_fs.get_file_status("/testing/c")

    assert (after.owner, after.group) == (before.owner, before.group)

def test_set_replication_rejects_directories(testing_fs):
    with pytest.raises(HierFsError):
        testing_fs.set_replication("/testing/a", 1)

def test_set_replication_below_one_is_a_value_error(testing_fs):
    with pytest.raises(ValueError):
        testing_fs.set_replication("/testing/c", 0)

def test_used_counts_file_bytes(testing_fs):
    # Every file of the reference tree is empty
    assert testing_fs.used() == 0

def test_url_is_reported(fs):
    assert fs.url
