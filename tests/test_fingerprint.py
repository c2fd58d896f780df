import hashlib
import random

import pytest

from patchall.fingerprint import DIRECTORY_HASH, compute_md5, hash_mismatch, try_fingerprint


def test_compute_md5_matches_hashlib(tmp_path):
    f = tmp_path / "a.txt"
    f.write_bytes(b"test content\n")
    assert compute_md5(f) == hashlib.md5(b"test content\n").hexdigest()


def test_compute_md5_large_file_spans_chunks(tmp_path):
    data = bytes(range(256)) * 10000
    f = tmp_path / "big.bin"
    f.write_bytes(data)
    assert compute_md5(f) == hashlib.md5(data).hexdigest()


def test_identical_bytes_identical_digest(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"same")
    b.write_bytes(b"same")
    assert compute_md5(a) == compute_md5(b)


def test_distinct_bytes_distinct_digests(tmp_path):
    rng = random.Random(1234)
    samples = set()
    while len(samples) < 200:
        samples.add(bytes(rng.getrandbits(8) for _ in range(rng.randint(0, 64))))

    digests = set()
    for i, data in enumerate(samples):
        f = tmp_path / f"s{i}"
        f.write_bytes(data)
        digests.add(compute_md5(f))
    assert len(digests) == len(samples)


def test_directory_cannot_be_fingerprinted(tmp_path):
    with pytest.raises(OSError):
        compute_md5(tmp_path)
    assert DIRECTORY_HASH == "-"


def test_try_fingerprint_missing_file_returns_none(tmp_path):
    assert try_fingerprint(tmp_path / "nope") is None


def test_hash_mismatch(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_text("one")
    b.write_text("two")
    assert hash_mismatch(a, b) is True
    b.write_text("one")
    assert hash_mismatch(a, b) is False
    assert hash_mismatch(a, tmp_path / "missing") is None
