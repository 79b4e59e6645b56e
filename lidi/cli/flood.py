"""Command that floods a diode sender with random data."""

from __future__ import annotations

import argparse
import itertools
import logging
import random
from pathlib import Path
from typing import BinaryIO, Sequence

from lidi.endpoints import DiodeSendTcp, DiodeSendUnix, parse_socket_addr
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
    parser = argparse.ArgumentParser(prog="diode-flood-test")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--to_tcp",
        metavar="ip:port",
        type=_socket_addr,
        help="TCP address and port to connect to diode-send",
    )
    target.add_argument(
        "--to_unix",
        metavar="path",
        type=Path,
        help="Path to Unix socket to connect to diode-send",
    )
    parser.add_argument(
        "--buffer_size",
        metavar="nb_bytes",
        type=_size,
        default=DEFAULT_BUFFER_SIZE,
        help="Size of file read/TCP write buffer",
    )
    return parser.parse_args(argv)


def flood(stream: BinaryIO, buffer_size: int, rounds: int | None = None) -> int:
    """Write a random buffer repeatedly, scrambled by a random byte each round.

    Runs forever when ``rounds`` is None; returns the number of bytes written.
    """
    if buffer_size < 0:
        raise ValueError(f"buffer size must not be negative: {buffer_size}")
    buffer = random.randbytes(buffer_size)
    total = 0
    for _ in itertools.count() if rounds is None else range(rounds):
        key = random.getrandbits(8)
        buffer = buffer.translate(bytes(value ^ key for value in range(256)))
        log.debug("sending buffer of %d bytes", buffer_size)
        stream.write(buffer)
        stream.flush()
        total += buffer_size
    return total


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    diode = DiodeSendTcp(args.to_tcp) if args.to_tcp is not None else DiodeSendUnix(args.to_unix)
    init_logger()
    log.debug("connecting to %s", diode)
    try:
        with diode.connect() as sock, sock.makefile("wb") as stream:
            flood(stream, args.buffer_size)
    except OSError as error:
        log.error("%s", error)
        return 1
    return 0