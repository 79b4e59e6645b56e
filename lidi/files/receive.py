"""Receiving whole files from a diode receiver socket."""

from __future__ import annotations

import logging
import os
import socket
import threading
from pathlib import Path, PurePath
from typing import BinaryIO

from lidi.files.protocol import (
    FileConfig,
    FileTransferError,
    Footer,
    Header,
    InvalidFileSize,
    InvalidHash,
)
from lidi.murmur import Murmur3Hasher

log = logging.getLogger(__name__)


def receive_file(config: FileConfig, diode: BinaryIO, output_dir: str | os.PathLike) -> int:
    """Store one framed file from ``diode`` in ``output_dir``; return its size."""
    if config.buffer_size < 1:
        raise ValueError(f"buffer size must be positive: {config.buffer_size}")
    header = Header.deserialize_from(diode)
    log.debug('receiving file "%s"', header.file_name)
    log.debug("file size = %d", header.file_length)

    file_name = PurePath(header.file_name).name
    if file_name in ("", ".", ".."):
        raise FileTransferError("unwrap of file_name failed")
    file_path = Path(output_dir) / file_name
    log.debug('storing at "%s"', file_path)
    if file_path.exists():
        raise FileTransferError(f'file "{file_path}" already exists')

    hasher = Murmur3Hasher() if config.hash else None
    remaining = header.file_length

    with open(file_path, "xb") as target:
        log.debug("setting mode to %d", header.mode)
        os.fchmod(target.fileno(), header.mode & 0o7777)

        def store(chunk: bytes) -> None:
            if hasher is not None:
                hasher.hash_slice(chunk)
            target.write(chunk)

        pending = bytearray()
        while remaining:
            data = diode.read(min(config.buffer_size - len(pending), remaining))
            if not data:
                break
            remaining -= len(data)
            pending += data
            if len(pending) == config.buffer_size:
                store(bytes(pending))
                pending.clear()
        if pending:
            store(bytes(pending))
        target.flush()

    received = header.file_length - remaining
    footer = Footer.deserialize_from(diode)

    if remaining:
        log.debug("expected file size = %d", header.file_length)
        log.debug("received file size = %d", received)
        raise InvalidFileSize(header.file_length, received)

    if hasher is not None:
        computed = hasher.digest()
        log.debug("expected hash = %d", footer.hash)
        log.debug("computed hash = %d", computed)
        if footer.hash != computed:
            raise InvalidHash(computed, footer.hash)

    return received


def _serve_client(config: FileConfig, client: socket.socket, output_dir: Path) -> None:
    with client, client.makefile("rb") as diode:
        try:
            total = receive_file(config, diode, output_dir)
        except (FileTransferError, OSError, EOFError) as error:
            log.error("failed to receive file: %s", error)
        else:
            log.info("file received, %d bytes received", total)


def _accept_loop(config: FileConfig, output_dir: Path, server: socket.socket, kind: str) -> None:
    with server:
        while True:
            try:
                client, address = server.accept()
            except OSError as error:
                log.error("failed to accept %s client: %s", kind, error)
                return
            log.info("new %s client (%s) connected", kind, address or "unknown")
            threading.Thread(
                target=_serve_client, args=(config, client, output_dir), daemon=True
            ).start()


def _unix_listener(path: Path) -> socket.socket:
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        server.bind(os.fspath(path))
        server.listen()
    except BaseException:
        server.close()
        raise
    return server


def receive_files(config: FileConfig, output_dir: str | os.PathLike) -> None:
    """Accept diode connections and store each received file; runs until listeners fail."""
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        raise FileTransferError("output_directory is not a directory")

    listeners: list[tuple[socket.socket, str]] = []
    try:
        if config.diode.from_unix is not None:
            path = Path(config.diode.from_unix)
            if path.exists():
                raise FileTransferError(f"Unix socket path '{path}' already exists")
            listeners.append((_unix_listener(path), "Unix"))
        if config.diode.from_tcp is not None:
            host, _ = config.diode.from_tcp
            family = socket.AF_INET6 if ":" in host else socket.AF_INET
            listeners.append((socket.create_server(config.diode.from_tcp, family=family), "TCP"))
    except BaseException:
        for server, _ in listeners:
            server.close()
        raise

    threads = [
        threading.Thread(
            target=_accept_loop,
            args=(config, output_dir, server, kind),
            name=f"receive-{kind.lower()}",
        )
        for server, kind in listeners
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()