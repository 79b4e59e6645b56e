"""Addresses of the diode sockets that the auxiliary tools talk to."""

from __future__ import annotations

import ipaddress
import os
import socket
from dataclasses import dataclass
from pathlib import Path


def parse_socket_addr(text: str) -> tuple[str, int]:
    """Parse ``ip:port`` or ``[ipv6]:port`` into a ``(host, port)`` pair."""
    host, sep, port_text = text.rpartition(":")
    if not sep or not (port_text.isascii() and port_text.isdigit()):
        raise ValueError(f"invalid socket address: {text!r}")
    try:
        if host.startswith("[") and host.endswith("]"):
            address: ipaddress._BaseAddress = ipaddress.IPv6Address(host[1:-1])
        else:
            address = ipaddress.IPv4Address(host)
    except ValueError as error:
        raise ValueError(f"invalid socket address: {text!r}") from error
    port = int(port_text)
    if port > 0xFFFF:
        raise ValueError(f"invalid port in socket address: {text!r}")
    return str(address), port


def _format_addr(address: tuple[str, int]) -> str:
    host, port = address
    return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"


@dataclass(frozen=True)
class DiodeSendTcp:
    """A diode sender reached over TCP."""

    address: tuple[str, int]

    def connect(self) -> socket.socket:
        return socket.create_connection(self.address)

    def __str__(self) -> str:
        return f"TCP {_format_addr(self.address)}"


@dataclass(frozen=True)
class DiodeSendUnix:
    """A diode sender reached over a Unix stream socket."""

    path: Path

    def connect(self) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(os.fspath(self.path))
        except BaseException:
            sock.close()
            raise
        return sock

    def __str__(self) -> str:
        return f"Unix {self.path}"


@dataclass(frozen=True)
class DiodeReceive:
    """Where a diode receiver's clients are accepted from."""

    from_tcp: tuple[str, int] | None = None
    from_unix: Path | None = None

    def __str__(self) -> str:
        parts = []
        if self.from_tcp is not None:
            parts.append(f"TCP {_format_addr(self.from_tcp)}")
        if self.from_unix is not None:
            parts.append(f"Unix {self.from_unix}")
        return "".join(parts)