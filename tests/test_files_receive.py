import io
import os
import threading
import time

import pytest

from lidi.endpoints import DiodeReceive, DiodeSendUnix
from lidi.files.protocol import (
    FileConfig,
    FileTransferError,
    Footer,
    Header,
    InvalidHash,
)
from lidi.files.receive import receive_file, receive_files
from lidi.files.send import send_file, send_file_to


def _framed(path, buffer_size=4096, hash_enabled=False):
    out = io.BytesIO()
    send_file_to(FileConfig(diode=None, buffer_size=buffer_size, hash=hash_enabled), out, path)
    return out.getvalue()


@pytest.fixture
def dirs(tmp_path):
    src = tmp_path / "src"
    out = tmp_path / "out"
    src.mkdir()
    out.mkdir()
    return src, out


def test_round_trip_content_and_size(dirs):
    src, out = dirs
    content = os.urandom(1000)
    (src / "blob.bin").write_bytes(content)
    raw = _framed(src / "blob.bin", buffer_size=64)
    received = receive_file(FileConfig(diode=None, buffer_size=64), io.BytesIO(raw), out)
    assert received == len(content)
    assert (out / "blob.bin").read_bytes() == content


def test_round_trip_with_hash(dirs):
    src, out = dirs
    (src / "h.txt").write_bytes(b"checked content" * 20)
    raw = _framed(src / "h.txt", buffer_size=32, hash_enabled=True)
    config = FileConfig(diode=None, buffer_size=32, hash=True)
    assert receive_file(config, io.BytesIO(raw), out) == len(b"checked content" * 20)
    assert (out / "h.txt").read_bytes() == b"checked content" * 20


def test_hash_depends_on_chunking(dirs):
    src, out = dirs
    (src / "c.txt").write_bytes(b"0123456789")
    raw = _framed(src / "c.txt", buffer_size=3, hash_enabled=True)
    with pytest.raises(InvalidHash):
        receive_file(FileConfig(diode=None, buffer_size=4, hash=True), io.BytesIO(raw), out)


def test_tampered_footer_is_detected(dirs):
    src, out = dirs
    (src / "t.txt").write_bytes(b"tamper me")
    raw = _framed(src / "t.txt", hash_enabled=True)
    stream = io.BytesIO(raw[:-16])
    stream.seek(0, io.SEEK_END)
    Footer(1).serialize_to(stream)
    stream.seek(0)
    with pytest.raises(InvalidHash) as info:
        receive_file(FileConfig(diode=None, hash=True), stream, out)
    assert info.value.expected == 1


def test_hash_ignored_when_disabled(dirs):
    src, out = dirs
    (src / "n.txt").write_bytes(b"no hash")
    raw = _framed(src / "n.txt", hash_enabled=False)
    assert receive_file(FileConfig(diode=None), io.BytesIO(raw), out) == len(b"no hash")


def test_mode_is_restored(dirs):
    src, out = dirs
    path = src / "m.txt"
    path.write_bytes(b"mode")
    os.chmod(path, 0o640)
    receive_file(FileConfig(diode=None), io.BytesIO(_framed(path)), out)
    assert os.stat(out / "m.txt").st_mode & 0o777 == 0o640


def test_directories_in_name_are_stripped(dirs):
    _, out = dirs
    stream = io.BytesIO()
    Header("../../nested/evil.txt", 0o644, 3).serialize_to(stream)
    stream.write(b"abc")
    Footer(0).serialize_to(stream)
    stream.seek(0)
    assert receive_file(FileConfig(diode=None), stream, out) == 3
    assert (out / "evil.txt").read_bytes() == b"abc"


def test_parent_name_is_rejected(dirs):
    _, out = dirs
    stream = io.BytesIO()
    Header("..", 0o644, 0).serialize_to(stream)
    Footer(0).serialize_to(stream)
    stream.seek(0)
    with pytest.raises(FileTransferError, match="file_name"):
        receive_file(FileConfig(diode=None), stream, out)


def test_existing_file_is_not_overwritten(dirs):
    src, out = dirs
    (src / "e.txt").write_bytes(b"new")
    (out / "e.txt").write_bytes(b"old")
    with pytest.raises(FileTransferError, match="already exists"):
        receive_file(FileConfig(diode=None), io.BytesIO(_framed(src / "e.txt")), out)
    assert (out / "e.txt").read_bytes() == b"old"


def test_missing_footer_raises_eof(dirs):
    src, out = dirs
    (src / "f.txt").write_bytes(b"footerless")
    raw = _framed(src / "f.txt")
    with pytest.raises(EOFError):
        receive_file(FileConfig(diode=None), io.BytesIO(raw[:-16]), out)


def test_receive_files_requires_directory(tmp_path):
    not_dir = tmp_path / "file"
    not_dir.write_bytes(b"")
    config = FileConfig(diode=DiodeReceive(from_unix=tmp_path / "sock"))
    with pytest.raises(FileTransferError, match="not a directory"):
        receive_files(config, not_dir)


def test_receive_files_refuses_existing_socket_path(tmp_path):
    existing = tmp_path / "sock"
    existing.write_bytes(b"")
    config = FileConfig(diode=DiodeReceive(from_unix=existing))
    with pytest.raises(FileTransferError, match="already exists"):
        receive_files(config, tmp_path)


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_receive_files_over_unix_socket(dirs, tmp_path):
    src, out = dirs
    sock_path = tmp_path / "s"
    content = b"through a unix socket" * 100
    (src / "u.txt").write_bytes(content)
    config = FileConfig(diode=DiodeReceive(from_unix=sock_path), buffer_size=128, hash=True)
    threading.Thread(target=receive_files, args=(config, out), daemon=True).start()
    assert _wait_for(sock_path.exists)

    sent = send_file(FileConfig(diode=DiodeSendUnix(sock_path), buffer_size=128, hash=True), src / "u.txt")
    target = out / "u.txt"
    assert sent == len(content)
    assert _wait_for(lambda: target.exists() and target.read_bytes() == content)