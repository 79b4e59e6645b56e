"""MurmurHash3 x64 128-bit hashing of transferred file contents."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFFFFFFFFFF
_C1 = 0x87C37B91114253D5
_C2 = 0x4CF5AD432745937F


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & _MASK


def _fmix(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK
    k ^= k >> 33
    return k


def _mix_k1(k1: int) -> int:
    return (_rotl((k1 * _C1) & _MASK, 31) * _C2) & _MASK


def _mix_k2(k2: int) -> int:
    return (_rotl((k2 * _C2) & _MASK, 33) * _C1) & _MASK


def murmur3_x64_128(data: bytes, seed: int = 0) -> int:
    """Return the 128-bit hash as ``h1 | h2 << 64``."""
    if not 0 <= seed <= 0xFFFFFFFF:
        raise ValueError(f"seed out of range: {seed}")
    data = bytes(data)
    length = len(data)
    body = length - length % 16
    h1 = h2 = seed

    for k1, k2 in struct.iter_unpack("<QQ", data[:body]):
        h1 ^= _mix_k1(k1)
        h1 = _rotl(h1, 27)
        h1 = (h1 + h2) & _MASK
        h1 = (h1 * 5 + 0x52DCE729) & _MASK
        h2 ^= _mix_k2(k2)
        h2 = _rotl(h2, 31)
        h2 = (h2 + h1) & _MASK
        h2 = (h2 * 5 + 0x38495AB5) & _MASK

    tail = data[body:]
    if len(tail) > 8:
        h2 ^= _mix_k2(int.from_bytes(tail[8:], "little"))
    if tail:
        h1 ^= _mix_k1(int.from_bytes(tail[:8], "little"))

    h1 ^= length
    h2 ^= length
    h1 = (h1 + h2) & _MASK
    h2 = (h2 + h1) & _MASK
    h1 = _fmix(h1)
    h2 = _fmix(h2)
    h1 = (h1 + h2) & _MASK
    h2 = (h2 + h1) & _MASK
    return h1 | (h2 << 64)


class Murmur3Hasher:
    """Accumulates written bytes and hashes them all at once."""

    def __init__(self, seed: int = 0) -> None:
        if not 0 <= seed <= 0xFFFFFFFF:
            raise ValueError(f"seed out of range: {seed}")
        self._seed = seed
        self._buffer = bytearray()

    def update(self, data: bytes) -> None:
        self._buffer += data

    def hash_slice(self, data: bytes) -> None:
        """Feed a length-prefixed slice, as done for each transferred chunk."""
        self._buffer += struct.pack("<Q", len(data))
        self._buffer += data

    def digest(self) -> int:
        return murmur3_x64_128(bytes(self._buffer), self._seed)