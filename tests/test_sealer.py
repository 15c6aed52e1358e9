import time
from unittest.mock import patch

import pytest

from sessionkeeper.errors import ConfigError
from sessionkeeper.modules.sealing import FernetSealer, SealError, seal_age

from conftest import BLOCK_SECRET, SECRET


def test_seal_open_round_trip(sealer):
    """Test a sealed value opens under the same cookie name."""
    token = sealer.seal("SESSID", {"id": "abc123"})

    assert sealer.open("SESSID", token) == {"id": "abc123"}


def test_token_is_opaque_and_cookie_safe(sealer):
    """Test tokens hide the id and need no quoting in a cookie."""
    token = sealer.seal("SESSID", {"id": "abc123"})

    assert "abc123" not in token
    assert "=" not in token
    assert all(c.isalnum() or c in "-_" for c in token)


def test_token_bound_to_cookie_name(sealer):
    """Test a token issued for one cookie is rejected under another."""
    token = sealer.seal("SESSID", {"id": "abc123"})

    with pytest.raises(SealError):
        sealer.open("OTHER", token)


def test_tampered_token_rejected(sealer):
    """Test flipping a character breaks verification."""
    token = sealer.seal("SESSID", {"id": "abc123"})
    index = len(token) // 2
    tampered = token[:index] + ("A" if token[index] != "A" else "B") + token[index + 1:]

    with pytest.raises(SealError):
        sealer.open("SESSID", tampered)


@pytest.mark.parametrize("token", ["", "-", "garbage", "gAAAAAB!!!", "é"])
def test_garbage_rejected(sealer, token):
    """Test malformed tokens raise SealError, never anything else."""
    with pytest.raises(SealError):
        sealer.open("SESSID", token)


def test_other_secrets_cannot_open(sealer):
    """Test a token sealed with different keys is rejected."""
    other = FernetSealer("another-signing-secret", "another-block-secret")
    token = other.seal("SESSID", {"id": "abc123"})

    with pytest.raises(SealError):
        sealer.open("SESSID", token)


def test_block_secret_participates_in_key():
    """Test changing only the block secret invalidates tokens."""
    first = FernetSealer(SECRET, BLOCK_SECRET)
    second = FernetSealer(SECRET, BLOCK_SECRET + "x")

    with pytest.raises(SealError):
        second.open("SESSID", first.seal("SESSID", {"id": "abc"}))


def test_max_age_expires_tokens():
    """Test tokens older than max_age are rejected."""
    sealer = FernetSealer(SECRET, BLOCK_SECRET, max_age=60)
    issued = time.time()

    with patch("time.time", return_value=issued - 120):
        token = sealer.seal("SESSID", {"id": "abc"})

    with pytest.raises(SealError):
        sealer.open("SESSID", token)


def test_issued_at_and_age(sealer):
    """Test the seal time can be read back from a valid token."""
    token = sealer.seal("SESSID", {"id": "abc"})

    issued_at = sealer.issued_at(token)

    assert issued_at is not None
    assert abs(issued_at - time.time()) < 5
    assert 0 <= seal_age(sealer, token) < 5
    assert sealer.issued_at("garbage") is None


@pytest.mark.parametrize(
    "secret, block_secret, reason",
    [("", BLOCK_SECRET, "missing-secret"), (SECRET, "", "missing-block-secret"), (None, None, "missing-secret")],
)
def test_empty_secrets_rejected(secret, block_secret, reason):
    """Test construction fails fast without both secrets."""
    with pytest.raises(ConfigError) as exc_info:
        FernetSealer(secret, block_secret)

    assert exc_info.value.reason == reason


def test_bytes_secrets_accepted():
    """Test secrets may be given as bytes."""
    sealer = FernetSealer(SECRET.encode(), BLOCK_SECRET.encode())
    text_sealer = FernetSealer(SECRET, BLOCK_SECRET)

    assert text_sealer.open("SESSID", sealer.seal("SESSID", {"id": "abc"})) == {"id": "abc"}
