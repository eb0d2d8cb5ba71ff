import os

import pytest

from imagefetch import tree


@pytest.fixture
def sample(tmp_path):
    root = tmp_path / "src"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "sub" / "b.txt").write_text("beta")
    (root / "sub" / "deep" / "c.log").write_text("gamma")
    (root / ".DS_Store").write_text("junk")
    return root


def test_stat_dir_lists_files_only(sample):
    assert tree.stat_dir(str(sample)) == ["a.txt", "sub/b.txt", "sub/deep/c.log"]


def test_stat_dir_includes_dirs(sample):
    assert tree.stat_dir(str(sample), True) == [
        "a.txt",
        "sub/",
        "sub/b.txt",
        "sub/deep/",
        "sub/deep/c.log",
    ]


def test_stat_dir_skips_ds_store(sample):
    assert all(".DS_Store" not in p for p in tree.stat_dir(str(sample), True))


def test_stat_dir_rejects_missing(tmp_path):
    missing = tmp_path / "nope"
    with pytest.raises(NotADirectoryError, match="not a directory or does not exist"):
        tree.stat_dir(str(missing))


def test_stat_dir_rejects_file(sample):
    with pytest.raises(NotADirectoryError):
        tree.stat_dir(str(sample / "a.txt"))


def test_lstat_dir_matches_stat_dir(sample):
    os.symlink(str(sample / "sub"), str(sample / "link"))
    assert tree.lstat_dir(str(sample), True) == tree.stat_dir(str(sample), True)
    assert "link" in tree.lstat_dir(str(sample))


def test_get_all_sub_dirs(sample):
    assert tree.get_all_sub_dirs(str(sample)) == ["sub/", "sub/deep/"]


def test_get_all_sub_dirs_ignores_links(sample):
    os.symlink(str(sample / "sub"), str(sample / "link"))
    assert tree.get_all_sub_dirs(str(sample)) == ["sub/", "sub/deep/"]


def test_lget_all_sub_dirs_follows_links(sample):
    os.symlink(str(sample / "sub"), str(sample / "link"))
    assert tree.lget_all_sub_dirs(str(sample)) == [
        "link/",
        "link/deep/",
        "sub/",
        "sub/deep/",
    ]


def test_lget_all_sub_dirs_rejects_missing(tmp_path):
    with pytest.raises(NotADirectoryError):
        tree.lget_all_sub_dirs(str(tmp_path / "missing"))


def test_list_by_suffix_directory(sample):
    (sample / "z.txt").write_text("z")
    result = tree.list_by_suffix(str(sample), ".txt")
    assert result == [f"{sample}/a.txt", f"{sample}/z.txt"]


def test_list_by_suffix_file_returns_itself(sample):
    path = str(sample / "sub" / "b.txt")
    assert tree.list_by_suffix(path, ".log") == [path]


def test_list_by_suffix_missing(tmp_path):
    with pytest.raises(FileNotFoundError, match="given path does not exist"):
        tree.list_by_suffix(str(tmp_path / "missing"), ".txt")


def test_copy_dir_round_trip(sample, tmp_path):
    dest = tmp_path / "dest"
    tree.copy_dir(str(sample), str(dest))
    assert tree.stat_dir(str(dest), True) == tree.stat_dir(str(sample), True)
    assert (dest / "sub" / "deep" / "c.log").read_text() == "gamma"
    assert not (dest / ".DS_Store").exists()


def test_copy_dir_skip(sample, tmp_path):
    dest = tmp_path / "dest"
    tree.copy_dir(str(sample), str(dest), lambda p: p.endswith(".log"))
    assert tree.stat_dir(str(dest)) == ["a.txt", "sub/b.txt"]
    assert (dest / "sub" / "deep").is_dir()


def test_copy_file_keeps_mode_and_mtime(tmp_path):
    src = tmp_path / "src.bin"
    src.write_bytes(b"\x00\x01data")
    os.chmod(src, 0o600)
    os.utime(src, (1_000_000, 1_000_000))
    dest = tmp_path / "dest.bin"
    tree.copy_file(str(src), str(dest))
    assert dest.read_bytes() == b"\x00\x01data"
    assert os.stat(dest).st_mtime == os.stat(src).st_mtime
    assert (os.stat(dest).st_mode & 0o777) == (os.stat(src).st_mode & 0o777)


def test_copy_file_recreates_symlink(tmp_path):
    target = tmp_path / "target.txt"
    target.write_text("t")
    link = tmp_path / "link"
    os.symlink("target.txt", str(link))
    dest = tmp_path / "copy"
    tree.copy_file(str(link), str(dest))
    assert os.path.islink(dest)
    assert os.readlink(dest) == "target.txt"


def test_copy_file_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        tree.copy_file(str(tmp_path / "missing"), str(tmp_path / "dest"))


def test_recursion_copy_file_creates_parents(sample, tmp_path):
    dst = tmp_path / "x" / "y" / "a.txt"
    tree.recursion_copy(str(sample / "a.txt"), str(dst))
    assert dst.read_text() == "alpha"


def test_recursion_copy_directory(sample, tmp_path):
    dst = tmp_path / "copy"
    tree.recursion_copy(str(sample), str(dst))
    assert tree.stat_dir(str(dst)) == tree.stat_dir(str(sample))


def test_home_dir_uses_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert tree.home_dir() == str(tmp_path)