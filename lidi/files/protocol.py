"""Header and footer framing a file sent through the diode."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Generic, TypeVar

D = TypeVar("D")


class FileTransferError(Exception):
    """Raised when a file cannot be sent or received."""


class InvalidFileSize(FileTransferError):
    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"invalid file size: {expected} != {received}")
        self.expected = expected
        self.received = received


class InvalidHash(FileTransferError):
    def __init__(self, computed: int, expected: int) -> None:
        super().__init__(f"invalid hash: {computed:x} != {expected:x}")
        self.computed = computed
        self.expected = expected


@dataclass
class FileConfig(Generic[D]):
    diode: D
    buffer_size: int = 4096 * 1024
    hash: bool = False


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes or raise EOFError."""
    data = bytearray()
    while len(data) < size:
        chunk = stream.read(size - len(data))
        if not chunk:
            raise EOFError(f"expected {size} bytes, got {len(data)}")
        data += chunk
    return bytes(data)


@dataclass(frozen=True)
class Header:
    file_name: str
    mode: int
    file_length: int

    def serialize_to(self, stream: BinaryIO) -> None:
        name = self.file_name.encode("utf-8")
        stream.write(
            struct.pack("<Q", len(name)) + name + struct.pack("<IQ", self.mode, self.file_length)
        )

    @classmethod
    def deserialize_from(cls, stream: BinaryIO) -> "Header":
        (name_length,) = struct.unpack("<Q", read_exact(stream, 8))
        raw_name = read_exact(stream, name_length)
        try:
            file_name = raw_name.decode("utf-8")
        except UnicodeDecodeError as error:
            raise FileTransferError(f"string format error: {error}") from error
        (mode,) = struct.unpack("<I", read_exact(stream, 4))
        (file_length,) = struct.unpack("<Q", read_exact(stream, 8))
        return cls(file_name, mode, file_length)


@dataclass(frozen=True)
class Footer:
    hash: int

    def serialize_to(self, stream: BinaryIO) -> None:
        stream.write(self.hash.to_bytes(16, "little"))

    @classmethod
    def deserialize_from(cls, stream: BinaryIO) -> "Footer":
        return cls(int.from_bytes(read_exact(stream, 16), "little"))