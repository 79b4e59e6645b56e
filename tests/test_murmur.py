import struct

import pytest

from lidi.murmur import Murmur3Hasher, murmur3_x64_128


def test_empty_input_seed_zero():
    assert murmur3_x64_128(b"") == 0


def test_reference_vector():
    data = b"The quick brown fox jumps over the lazy dog"
    assert murmur3_x64_128(data) == 0x7A433CA9C49A9347E34BBC7BBC071B6C


def test_seed_changes_result():
    assert murmur3_x64_128(b"abc", 0) != murmur3_x64_128(b"abc", 1)


def test_result_fits_128_bits():
    for size in range(40):
        assert 0 <= murmur3_x64_128(bytes(range(size))) < 1 << 128


def test_every_tail_length_distinct():
    hashes = {murmur3_x64_128(b"x" * size) for size in range(1, 33)}
    assert len(hashes) == 32


def test_invalid_seed():
    with pytest.raises(ValueError):
        murmur3_x64_128(b"a", -1)
    with pytest.raises(ValueError):
        Murmur3Hasher(1 << 32)


def test_updates_concatenate():
    hasher = Murmur3Hasher()
    hasher.update(b"hello ")
    hasher.update(b"world")
    assert hasher.digest() == murmur3_x64_128(b"hello world")


def test_hash_slice_prefixes_length():
    sliced = Murmur3Hasher()
    sliced.hash_slice(b"abc")
    raw = Murmur3Hasher()
    raw.update(struct.pack("<Q", 3))
    raw.update(b"abc")
    assert sliced.digest() == raw.digest()


def test_chunking_matters_for_slices():
    one = Murmur3Hasher()
    one.hash_slice(b"abcd")
    two = Murmur3Hasher()
    two.hash_slice(b"ab")
    two.hash_slice(b"cd")
    assert one.digest() != two.digest()


def test_digest_is_repeatable():
    hasher = Murmur3Hasher(7)
    hasher.update(b"data")
    first = hasher.digest()
    second = hasher.digest()
    assert first == second
    assert first == murmur3_x64_128(b"data", 7)