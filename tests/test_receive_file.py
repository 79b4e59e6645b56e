from pathlib import Path

import pytest

from lidi.cli.receive_file import main, parse_args


def test_defaults():
    args = parse_args([])
    assert args.from_tcp == ("127.0.0.1", 7000)
    assert args.from_unix is None
    assert args.buffer_size == 4194304
    assert args.hash is False
    assert args.output_directory == Path(".")


def test_explicit_arguments():
    args = parse_args(
        ["--from_tcp", "[::1]:7100", "--from_unix", "/tmp/in.sock", "--hash", "/srv/out"]
    )
    assert args.from_tcp == ("::1", 7100)
    assert args.from_unix == Path("/tmp/in.sock")
    assert args.hash is True
    assert args.output_directory == Path("/srv/out")


@pytest.mark.parametrize(
    "argv",
    [["--from_tcp", "nowhere"], ["--buffer_size", "lots"], ["a", "b"]],
)
def test_invalid_arguments(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_main_rejects_output_that_is_not_a_directory(tmp_path):
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x")
    assert main(["--from_tcp", "127.0.0.1:0", str(not_a_dir)]) == 1


def test_main_rejects_existing_unix_socket_path(tmp_path):
    taken = tmp_path / "taken.sock"
    taken.write_bytes(b"")
    assert main(["--from_unix", str(taken), str(tmp_path)]) == 1