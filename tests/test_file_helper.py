import pytest

from rapidlog.common import SpdlogError
from rapidlog.file_helper import FileHelper


def test_write_bytes_and_size(tmp_path):
    path = tmp_path / "a.log"
    with FileHelper() as helper:
        helper.open(path, truncate=True)
        helper.write(b"abc")
        assert helper.size() == len(b"abc")
    assert path.read_bytes() == b"abc"


def test_write_text_is_utf8(tmp_path):
    path = tmp_path / "u.log"
    text = "h\u00e9llo"
    with FileHelper() as helper:
        helper.open(path)
        helper.write(text)
        helper.flush()
        assert helper.size() == len(text.encode("utf-8"))
    assert path.read_text(encoding="utf-8") == text


def test_append_mode_keeps_content(tmp_path):
    path = tmp_path / "b.log"
    path.write_bytes(b"first")
    with FileHelper() as helper:
        helper.open(path, truncate=False)
        helper.write(b"second")
    assert path.read_bytes() == b"firstsecond"


def test_truncate_mode_discards_content(tmp_path):
    path = tmp_path / "c.log"
    path.write_bytes(b"old content")
    with FileHelper() as helper:
        helper.open(path, truncate=True)
        assert helper.size() == 0


def test_reopen_truncates(tmp_path):
    path = tmp_path / "d.log"
    helper = FileHelper()
    helper.open(path)
    helper.write(b"data")
    helper.reopen(True)
    assert helper.size() == 0
    helper.close()


def test_reopen_without_open_raises():
    with pytest.raises(SpdlogError, match="was not opened before"):
        FileHelper().reopen(False)


def test_size_on_closed_file_raises(tmp_path):
    helper = FileHelper()
    helper.open(tmp_path / "e.log")
    helper.close()
    with pytest.raises(SpdlogError, match="closed file"):
        helper.size()


def test_context_manager_closes(tmp_path):
    with FileHelper() as helper:
        helper.open(tmp_path / "f.log")
    with pytest.raises(SpdlogError):
        helper.size()


def test_filename_is_recorded(tmp_path):
    path = tmp_path / "g.log"
    helper = FileHelper()
    helper.open(path)
    assert helper.filename() == str(path)
    helper.close()


def test_open_directory_raises(tmp_path):
    with pytest.raises(SpdlogError, match="Failed opening file") as info:
        FileHelper().open(tmp_path, truncate=True)
    assert info.value.errno is not None


def test_file_exists(tmp_path):
    path = tmp_path / "h.log"
    assert not FileHelper.file_exists(path)
    path.write_bytes(b"")
    assert FileHelper.file_exists(path)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("mylog.txt", ("mylog", ".txt")),
        ("mylog", ("mylog", "")),
        ("mylog.", ("mylog.", "")),
        ("/dir1/dir2/mylog.txt", ("/dir1/dir2/mylog", ".txt")),
        (".mylog", (".mylog", "")),
        ("my_folder/.mylog", ("my_folder/.mylog", "")),
        ("my_folder/.mylog.txt", ("my_folder/.mylog", ".txt")),
        ("/etc/rc.d/somelogfile", ("/etc/rc.d/somelogfile", "")),
    ],
)
def test_split_by_extension(name, expected):
    assert FileHelper.split_by_extension(name) == expected


def test_split_by_extension_round_trip():
    base, ext = FileHelper.split_by_extension("logs/app.2024.log")
    assert base + ext == "logs/app.2024.log"
    assert ext.startswith(".")