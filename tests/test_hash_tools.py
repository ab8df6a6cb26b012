import hashlib
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from utils.errors import DigestStateError, UnsupportedAlgorithmError
from utils.hash_tools import (
    Algorithm,
    compute_file_hash,
    create_digest,
    iter_file_chunks,
)

EMPTY_DIGESTS = {
    "md5": "d41d8cd98f00b204e9800998ecf8427e",
    "sha1": "da39a3ee5e6b4b0d3255bfef95601890afd80709",
    "sha256": "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
    "sha384": (
        "38b060a751ac96384cd9327eb1b1e36a21fdb71114be07434c0cc7bf63f6e1da"
        "274edebfe76f65fbd51ad2f14898b95b"
    ),
    "sha512": (
        "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce"
        "47d0d13c5d85f2b0ff8318d2877eec2f63b931bd47417a81a538327af927da3e"
    ),
}


@pytest.mark.parametrize("name", sorted(EMPTY_DIGESTS))
def test_empty_input_digest(name: str) -> None:
    state = create_digest(name)
    digest = state.finalize()

    assert digest == EMPTY_DIGESTS[name]
    assert len(digest) == Algorithm(name).hex_length


def test_digest_is_zero_padded_lowercase_hex() -> None:
    state = create_digest(Algorithm.MD5)
    digest = state.finalize()

    # md5("") contains the raw bytes 0x04, 0x09 and 0x00.
    assert digest == hashlib.md5(b"").digest().hex()
    assert digest == digest.lower()
    assert "04" in digest and "00" in digest


def test_updates_are_order_sensitive() -> None:
    forward = create_digest("sha256")
    forward.update(b"hello")
    forward.update(b"world")

    backward = create_digest("sha256")
    backward.update(b"world")
    backward.update(b"hello")

    forward_digest = forward.finalize()
    assert forward_digest == hashlib.sha256(b"helloworld").hexdigest()
    assert forward_digest != backward.finalize()


def test_finalized_state_cannot_be_reused() -> None:
    state = create_digest("sha1")
    state.update(b"data")
    state.finalize()

    assert state.finalized is True
    with pytest.raises(DigestStateError):
        state.update(b"more")
    with pytest.raises(DigestStateError):
        state.finalize()


def test_copy_is_independent() -> None:
    base = create_digest("sha256")
    clone = base.copy()
    clone.update(b"only in clone")

    assert base.finalize() == EMPTY_DIGESTS["sha256"]
    assert clone.finalize() == hashlib.sha256(b"only in clone").hexdigest()


def test_unsupported_algorithm_rejected() -> None:
    with pytest.raises(UnsupportedAlgorithmError) as excinfo:
        create_digest("sha3_256")
    assert excinfo.value.name == "sha3_256"
    assert "sha512" in str(excinfo.value)

    with pytest.raises(UnsupportedAlgorithmError):
        create_digest("SHA256")


def test_chunk_size_does_not_change_digest(tmp_path: Path) -> None:
    payload = bytes(range(256)) * 41 + b"tail"
    target = tmp_path / "payload.bin"
    target.write_bytes(payload)

    expected = hashlib.sha512(payload).hexdigest()
    for chunk_size in (1, 7, 1024, 1024 * 1024):
        assert compute_file_hash(target, "sha512", chunk_size=chunk_size) == expected


def test_iter_file_chunks_bounds_chunk_size(tmp_path: Path) -> None:
    target = tmp_path / "data.txt"
    target.write_bytes(b"abcdefghij")

    chunks = list(iter_file_chunks(target, 4))
    assert chunks == [b"abcd", b"efgh", b"ij"]

    with pytest.raises(ValueError):
        list(iter_file_chunks(target, 0))
