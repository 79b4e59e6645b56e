"""Batched sending and receiving of UDP datagrams on the diode link."""

from __future__ import annotations

import itertools
import logging
import select
import socket
import time
from typing import Iterable, Iterator, Sequence

log = logging.getLogger(__name__)


def _batched(items: Iterable[bytes], size: int) -> Iterator[list[bytes]]:
    iterator = iter(items)
    while batch := list(itertools.islice(iterator, size)):
        yield batch


class UdpReceiver:
    """Receives up to ``vlen`` datagrams of at most ``msglen`` bytes per call."""

    def __init__(self, sock: socket.socket, vlen: int, msglen: int) -> None:
        if vlen < 1:
            raise ValueError(f"vlen must be positive: {vlen}")
        if msglen < 1:
            raise ValueError(f"msglen must be positive: {msglen}")
        self._sock = sock
        self._vlen = vlen
        self._msglen = msglen
        log.info("UDP configured to receive %d messages (datagrams)", vlen)

    def _pending(self) -> bool:
        ready, _, _ = select.select([self._sock], [], [], 0)
        return bool(ready)

    def recv_mmsg(self) -> list[bytes]:
        """Wait for one datagram, then take those already queued, up to ``vlen``."""
        datagrams = [self._sock.recv(self._msglen)]
        while len(datagrams) < self._vlen and self._pending():
            datagrams.append(self._sock.recv(self._msglen))
        return datagrams


class UdpSender:
    """Sends datagrams to ``dest`` in batches of ``vlen``, optionally rate limited.

    ``bandwidth_limit`` is in bytes per second; zero or less disables it.
    """

    def __init__(
        self,
        sock: socket.socket,
        vlen: int,
        dest: tuple[str, int],
        bandwidth_limit: float = 0.0,
    ) -> None:
        if vlen < 1:
            raise ValueError(f"vlen must be positive: {vlen}")
        self._sock = sock
        self._vlen = vlen
        self._dest = dest
        self._bandwidth_limit = bandwidth_limit
        log.info("UDP configured to send %d messages (datagrams) at a time", vlen)

    def _send_paced(self, batch: Sequence[bytes]) -> None:
        for buffer in batch:
            started = time.monotonic()
            self._sock.sendto(buffer, self._dest)
            elapsed = time.monotonic() - started
            ideal = len(buffer) / self._bandwidth_limit
            if ideal > elapsed:
                time.sleep(ideal - elapsed)

    def _send_batch(self, batch: Sequence[bytes]) -> None:
        sent = sum(1 for buffer in batch if self._sock.sendto(buffer, self._dest) == len(buffer))
        if sent != len(batch):
            log.warning("nb prepared messages doesn't match with nb sent messages")

    def send_mmsg(self, buffers: Iterable[bytes]) -> None:
        for batch in _batched(buffers, self._vlen):
            if self._bandwidth_limit > 0.0:
                self._send_paced(batch)
            else:
                self._send_batch(batch)