"""Framing of UDP datagrams carried over a diode stream."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Generic, TypeVar

from lidi.files.protocol import read_exact

D = TypeVar("D")


class DatagramError(Exception):
    """Raised when datagrams cannot be relayed."""


@dataclass
class DatagramConfig(Generic[D]):
    diode: D
    buffer_size: int = 0xFFFF


@dataclass(frozen=True)
class DatagramHeader:
    """Length of the datagram that follows on the stream."""

    size: int

    def serialize_to(self, stream: BinaryIO) -> None:
        stream.write(struct.pack("<Q", self.size))

    @classmethod
    def deserialize_from(cls, stream: BinaryIO) -> "DatagramHeader":
        (size,) = struct.unpack("<Q", read_exact(stream, 8))
        return cls(size)