"""Command that sends files into a diode sender."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from lidi.endpoints import DiodeSendTcp, DiodeSendUnix, parse_socket_addr
from lidi.files.protocol import FileConfig, FileTransferError
from lidi.files.send import send_files
from lidi.logsetup import init_logger

log = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 4096 * 1024


def _socket_addr(text: str) -> tuple[str, int]:
    try:
        return parse_socket_addr(text)
    except ValueError as error:
        raise argparse.ArgumentTypeError(str(error)) from None


def _size(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"size must not be negative: {text!r}")
    return value


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="diode-send-file")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--to_tcp",
        metavar="ip:port",
        type=_socket_addr,
        help="IP address and port to connect in TCP to diode-send",
    )
    target.add_argument(
        "--to_unix",
        metavar="path",
        type=Path,
        help="Path of Unix socket to connect to diode-send",
    )
    parser.add_argument(
        "--buffer_size",
        metavar="nb_bytes",
        type=_size,
        default=DEFAULT_BUFFER_SIZE,
        help="Size of file read/client write buffer",
    )
    parser.add_argument(
        "--hash",
        action="store_true",
        help="Compute a hash of file content (default is false)",
    )
    parser.add_argument("file", nargs="+")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    diode = DiodeSendTcp(args.to_tcp) if args.to_tcp is not None else DiodeSendUnix(args.to_unix)
    config = FileConfig(diode, args.buffer_size, args.hash)
    init_logger()
    try:
        send_files(config, args.file)
    except (FileTransferError, OSError, EOFError, ValueError) as error:
        log.error("%s", error)
        return 1
    return 0