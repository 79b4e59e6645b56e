"""Sending whole files into a diode sender socket."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator

from lidi.files.protocol import FileConfig, FileTransferError, Footer, Header
from lidi.murmur import Murmur3Hasher

log = logging.getLogger(__name__)


def _read_chunks(stream: BinaryIO, size: int) -> Iterator[bytes]:
    """Yield chunks of exactly ``size`` bytes, the last one possibly shorter."""
    while True:
        chunk = bytearray()
        while len(chunk) < size:
            data = stream.read(size - len(chunk))
            if not data:
                if chunk:
                    yield bytes(chunk)
                return
            chunk += data
        yield bytes(chunk)


def send_file_to(config: FileConfig, diode: BinaryIO, file_path: str | os.PathLike) -> int:
    """Write one framed file to ``diode``; return the number of content bytes sent."""
    if config.buffer_size < 1:
        raise ValueError(f"buffer size must be positive: {config.buffer_size}")
    log.debug('opening file "%s"', file_path)
    path = Path(file_path)
    if not path.is_file():
        raise FileTransferError("not a file")

    with path.open("rb") as source:
        file_name = path.name
        if not file_name:
            raise FileTransferError("unwrap of file_name failed")
        try:
            file_name.encode("utf-8")
        except UnicodeEncodeError:
            raise FileTransferError("conversion from OsString to String failed") from None
        log.debug('file name is "%s"', file_name)

        info = os.fstat(source.fileno())
        Header(file_name, info.st_mode, info.st_size).serialize_to(diode)

        hasher = Murmur3Hasher() if config.hash else None
        total = 0
        for chunk in _read_chunks(source, config.buffer_size):
            total += len(chunk)
            if hasher is not None:
                hasher.hash_slice(chunk)
            diode.write(chunk)

        Footer(hasher.digest() if hasher is not None else 0).serialize_to(diode)
        diode.flush()
    return total


def send_file(config: FileConfig, file_path: str | os.PathLike) -> int:
    """Connect to the diode and send one file over a fresh connection."""
    log.debug("connecting to %s", config.diode)
    with config.diode.connect() as sock, sock.makefile("wb") as diode:
        return send_file_to(config, diode, file_path)


def send_files(config: FileConfig, files: Iterable[str | os.PathLike]) -> list[int]:
    """Send each file in turn; return the byte count of each."""
    totals = []
    for file_path in files:
        total = send_file(config, file_path)
        log.info("file send, %d bytes sent", total)
        totals.append(total)
    return totals