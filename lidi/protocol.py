"""Messages exchanged over the diode link and block sizing helpers.

A message is laid out as::

    <- 4 bytes -> <- 1 byte -> <- 4 bytes -> <- message_length bytes ->
    | client_id | message_type | data_length | data + zero padding     |

All multi-byte integers are little-endian.
"""

from __future__ import annotations

import enum
import itertools
import struct
import threading
from dataclasses import dataclass

SERIALIZE_OVERHEAD = 4 + 1 + 4

_PACKET_HEADER_SIZE = 20 + 8
_RAPTORQ_ALIGNMENT = 8
_RAPTORQ_HEADER_SIZE = 4

_U32_MAX = 0xFFFFFFFF


class ProtocolError(Exception):
    """Base class for diode protocol errors."""


class InvalidMessageType(ProtocolError):
    """Raised when a message carries an unknown or missing type byte."""

    def __init__(self, value: int | None) -> None:
        super().__init__(f"invalid message type: {value!r}")
        self.value = value


class MessageType(enum.IntEnum):
    HEARTBEAT = 0x00
    START = 0x01
    DATA = 0x02
    ABORT = 0x03
    END = 0x04

    def __str__(self) -> str:
        return self.name.capitalize()


_client_ids = itertools.count()
_client_ids_lock = threading.Lock()


def new_client_id() -> int:
    """Return a fresh 32-bit client identifier."""
    with _client_ids_lock:
        return next(_client_ids) & _U32_MAX


@dataclass(frozen=True)
class Message:
    """A serialized protocol message."""

    content: bytes

    @classmethod
    def create(
        cls,
        message_type: MessageType,
        message_length: int,
        client_id: int,
        data: bytes | None = None,
    ) -> "Message":
        """Build a message padded to ``message_length`` payload bytes."""
        if not 0 <= client_id <= _U32_MAX:
            raise ValueError(f"client id out of range: {client_id}")
        header = struct.pack("<IB", client_id, MessageType(message_type))
        if data is None:
            return cls(header + bytes(4 + message_length))
        content = header + struct.pack("<I", len(data)) + bytes(data)
        return cls(content.ljust(message_length + SERIALIZE_OVERHEAD, b"\0"))

    def _u32(self, offset: int) -> int:
        if len(self.content) < offset + 4:
            raise ProtocolError("truncated message")
        return struct.unpack_from("<I", self.content, offset)[0]

    def client_id(self) -> int:
        return self._u32(0)

    def message_type(self) -> MessageType:
        if len(self.content) <= 4:
            raise InvalidMessageType(None)
        value = self.content[4]
        try:
            return MessageType(value)
        except ValueError:
            raise InvalidMessageType(value) from None

    def payload_len(self) -> int:
        return self._u32(5)

    def payload(self) -> bytes:
        end = SERIALIZE_OVERHEAD + self.payload_len()
        if len(self.content) < end:
            raise ProtocolError("truncated message payload")
        return self.content[SERIALIZE_OVERHEAD:end]

    def serialized(self) -> bytes:
        return self.content

    def __str__(self) -> str:
        try:
            kind = str(self.message_type())
        except InvalidMessageType as error:
            kind = f"UNKNOWN {error}"
        return (
            f"client {self.client_id():x} message = {kind} "
            f"data = {self.payload_len()} byte(s)"
        )


@dataclass(frozen=True)
class ObjectTransmissionInformation:
    """Size of an encoded block and of each of its symbols."""

    transfer_length: int
    symbol_size: int


def object_transmission_information(
    mtu: int, logical_block_size: int
) -> ObjectTransmissionInformation:
    """Fit a block of at most ``logical_block_size`` bytes into MTU-sized packets."""
    overhead = _PACKET_HEADER_SIZE + _RAPTORQ_HEADER_SIZE
    if mtu < overhead:
        raise ValueError(f"MTU {mtu} is smaller than packet overhead {overhead}")
    symbol_size = _RAPTORQ_ALIGNMENT * ((mtu - overhead) // _RAPTORQ_ALIGNMENT)
    if symbol_size == 0:
        raise ValueError(f"MTU {mtu} leaves no room for data")
    nb_packets = logical_block_size // symbol_size
    if nb_packets == 0:
        raise ValueError(
            f"block size {logical_block_size} is smaller than one packet ({symbol_size})"
        )
    encoding_block_size = symbol_size * nb_packets
    return ObjectTransmissionInformation(
        encoding_block_size, encoding_block_size // nb_packets
    )


def data_mtu(oti: ObjectTransmissionInformation) -> int:
    return oti.symbol_size


def nb_encoding_packets(oti: ObjectTransmissionInformation) -> int:
    return oti.transfer_length // data_mtu(oti)


def packet_size(oti: ObjectTransmissionInformation) -> int:
    return oti.transfer_length // nb_encoding_packets(oti)


def nb_repair_packets(oti: ObjectTransmissionInformation, repair_block_size: int) -> int:
    return repair_block_size // data_mtu(oti)