"""Relaying UDP datagrams into a diode sender socket."""

from __future__ import annotations

import logging
import socket
from typing import BinaryIO

from lidi.datagrams.protocol import DatagramConfig, DatagramHeader
from lidi.logsetup import TRACE

log = logging.getLogger(__name__)


def _family(host: str) -> socket.AddressFamily:
    return socket.AF_INET6 if ":" in host else socket.AF_INET


def send_datagrams(config: DatagramConfig, diode: BinaryIO, from_udp: tuple[str, int]) -> None:
    """Frame every datagram received on ``from_udp`` onto ``diode``.

    Runs until an I/O error is raised.
    """
    if config.buffer_size < 1:
        raise ValueError(f"buffer size must be positive: {config.buffer_size}")
    log.info("binding UDP socket to %s:%d", *from_udp)
    with socket.socket(_family(from_udp[0]), socket.SOCK_DGRAM) as sock:
        sock.bind(from_udp)
        while True:
            data, _ = sock.recvfrom(config.buffer_size)
            log.log(TRACE, "received datagram of %d bytes", len(data))
            DatagramHeader(len(data)).serialize_to(diode)
            diode.write(data)
            diode.flush()


def send(config: DatagramConfig, from_udp: tuple[str, int]) -> None:
    """Connect to the diode and relay datagrams received on ``from_udp`` to it."""
    log.info("connecting to %s", config.diode)
    with config.diode.connect() as sock, sock.makefile("wb") as diode:
        send_datagrams(config, diode, from_udp)