"""Command that stores files received from a diode receiver."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from lidi.endpoints import DiodeReceive, parse_socket_addr
from lidi.files.protocol import FileConfig, FileTransferError
from lidi.files.receive import receive_files
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
    parser = argparse.ArgumentParser(prog="diode-receive-file")
    parser.add_argument(
        "--from_tcp",
        metavar="ip:port",
        type=_socket_addr,
        default="127.0.0.1:7000",
        help="IP address and port to accept TCP connections from diode-receive",
    )
    parser.add_argument(
        "--from_unix",
        metavar="path",
        type=Path,
        help="Path of Unix socket to accept Unix connections from diode-receive",
    )
    parser.add_argument(
        "--buffer_size",
        metavar="nb_bytes",
        type=_size,
        default=DEFAULT_BUFFER_SIZE,
        help="Size of client write buffer",
    )
    parser.add_argument(
        "--hash",
        action="store_true",
        help="Verify the hash of file content (default is false)",
    )
    parser.add_argument(
        "output_directory",
        metavar="dir",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Output directory",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    config = FileConfig(
        DiodeReceive(from_tcp=args.from_tcp, from_unix=args.from_unix),
        args.buffer_size,
        args.hash,
    )
    init_logger()
    try:
        receive_files(config, args.output_directory)
    except (FileTransferError, OSError) as error:
        log.error("%s", error)
        return 1
    return 0