"""Command that relays received UDP datagrams into a diode sender."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from lidi.datagrams.protocol import DatagramConfig, DatagramError
from lidi.datagrams.send import send
from lidi.endpoints import DiodeSendTcp, DiodeSendUnix, parse_socket_addr
from lidi.logsetup import init_logger

log = logging.getLogger(__name__)


def _socket_addr(text: str) -> tuple[str, int]:
    try:
        return parse_socket_addr(text)
    except ValueError as error:
        raise argparse.ArgumentTypeError(str(error)) from None


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="diode-send-udp")
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
        "--from_udp",
        metavar="ip:port",
        type=_socket_addr,
        required=True,
        help="IP address and port to receive UDP packets",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    diode = DiodeSendTcp(args.to_tcp) if args.to_tcp is not None else DiodeSendUnix(args.to_unix)
    config = DatagramConfig(diode, buffer_size=0xFFFF)
    init_logger()
    try:
        send(config, args.from_udp)
    except (DatagramError, OSError) as error:
        log.error("%s", error)
        return 1
    return 0