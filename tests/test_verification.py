import hashlib
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from modules.hashing import HashingService
from modules.verification import (
    HashRequest,
    VerificationService,
    resolve_request_algorithm,
    verify_digest,
)
from utils.errors import DigestLengthError, UnsupportedAlgorithmError
from utils.hash_tools import Algorithm

HELLO_WORLD_MD5 = "5eb63bbbe01eeed093cb22bb8f5acdc3"


def test_verify_digest_equal_and_not_equal() -> None:
    same = verify_digest(HELLO_WORLD_MD5, HELLO_WORLD_MD5)
    assert same.equal is True
    assert same.message() == "The hashes are equal"

    altered = HELLO_WORLD_MD5[:-1] + "4"
    different = verify_digest(HELLO_WORLD_MD5, altered)
    assert different.equal is False
    assert HELLO_WORLD_MD5 in different.message()
    assert altered in different.message()


def test_verify_digest_is_case_sensitive() -> None:
    assert verify_digest(HELLO_WORLD_MD5, HELLO_WORLD_MD5.upper()).equal is False


def test_request_blank_fields_become_none(tmp_path: Path) -> None:
    request = HashRequest(path=tmp_path, algorithm="  ", target_digest="")

    assert request.algorithm is None
    assert request.target_digest is None
    assert request.verifies is False

    with pytest.raises(ValidationError):
        HashRequest(algorithm="md5")


def test_resolve_request_algorithm(tmp_path: Path) -> None:
    explicit = HashRequest(path=tmp_path, algorithm="sha1", target_digest=HELLO_WORLD_MD5)
    assert resolve_request_algorithm(explicit) is Algorithm.SHA1

    inferred = HashRequest(path=tmp_path, target_digest=HELLO_WORLD_MD5)
    assert resolve_request_algorithm(inferred) is Algorithm.MD5

    compute_only = HashRequest(path=tmp_path, target_digest="a")
    assert resolve_request_algorithm(compute_only, "sha384") is Algorithm.SHA384

    with pytest.raises(DigestLengthError):
        resolve_request_algorithm(HashRequest(path=tmp_path, target_digest="abcd"))

    with pytest.raises(UnsupportedAlgorithmError):
        resolve_request_algorithm(HashRequest(path=tmp_path, algorithm="MD5"))


def test_service_verifies_inferred_md5(tmp_path: Path) -> None:
    target = tmp_path / "greeting.txt"
    target.write_bytes(b"hello world")
    service = VerificationService(HashingService())

    outcome = service.run(HashRequest(path=target, target_digest=HELLO_WORLD_MD5))

    assert outcome.result.algorithm is Algorithm.MD5
    assert outcome.verification is not None
    assert outcome.verification.equal is True

    mismatch = service.run(
        HashRequest(path=target, target_digest="0" + HELLO_WORLD_MD5[1:])
    )
    assert mismatch.verification is not None
    assert mismatch.verification.equal is False


def test_service_compute_only_uses_default(tmp_path: Path) -> None:
    target = tmp_path / "data.txt"
    target.write_bytes(b"payload")
    service = VerificationService(HashingService(), default_algorithm="sha512")

    outcome = service.run(HashRequest(path=target))

    assert outcome.verification is None
    assert outcome.result.digest == hashlib.sha512(b"payload").hexdigest()


def test_service_writes_report_and_forwards_progress(tmp_path: Path) -> None:
    tree = tmp_path / "tree"
    tree.mkdir()
    (tree / "a.txt").write_text("hello", encoding="utf-8")
    (tree / "b.txt").write_text("world", encoding="utf-8")
    report_path = tree / "digests.txt"
    events = []

    service = VerificationService(HashingService())
    outcome = service.run(
        HashRequest(path=tree, algorithm="sha256", report_path=report_path),
        on_progress=events.append,
    )

    text = report_path.read_text(encoding="utf-8")
    assert text.startswith(f"hash algorithm: sha256\nbase: {tree}\n----------\n")
    assert text.endswith(f"complete hash = {outcome.result.digest}\n")
    assert outcome.result.digest == hashlib.sha256(b"helloworld").hexdigest()
    assert [event.path for event in events if event.finished] == [
        str(tree / "a.txt"),
        str(tree / "b.txt"),
    ]

    # A second run must skip the report it wrote itself.
    again = service.run(
        HashRequest(path=tree, algorithm="sha256", report_path=report_path)
    )
    assert again.result.digest == outcome.result.digest


def test_home_relative_report_is_not_hashed_on_rerun(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    tree = tmp_path / "tree"
    tree.mkdir()
    (tree / "a.txt").write_text("hello", encoding="utf-8")
    request = HashRequest(
        path=tree, algorithm="sha256", report_path=Path("~/tree/report.txt")
    )
    service = VerificationService(HashingService())

    first = service.run(request)
    assert (tree / "report.txt").exists()
    second = service.run(request)

    assert first.result.digest == hashlib.sha256(b"hello").hexdigest()
    assert second.result.digest == first.result.digest
    assert second.result.report is not None
    assert list(second.result.report.entries) == [str(tree / "a.txt")]
