from __future__ import annotations

import hashlib
import time

import pytest

from storyapi.core.config import get_settings
from storyapi.core.deadline import Deadline, DeadlineExceededError
from storyapi.core.security import hash_password, verify_password


def test_password_hash_roundtrip_and_prefix():
    stored = hash_password("secret1")

    assert stored.startswith("argon2$")
    assert verify_password("secret1", stored)
    assert not verify_password("secret2", stored)


def test_verify_rejects_unprefixed_or_garbage_hashes():
    assert not verify_password("secret1", None)
    assert not verify_password("secret1", "plain-text")
    assert not verify_password("secret1", "argon2$not-a-real-hash")


def test_raw_digest_bytes_can_be_hashed():
    digest = hashlib.sha256(b"token").digest()
    assert verify_password(digest, hash_password(digest))


def test_deadline_after_counts_down():
    deadline = Deadline.after(5)
    assert not deadline.expired
    assert 0 < deadline.remaining() <= 5
    deadline.check()


def test_elapsed_deadline_raises():
    deadline = Deadline(expires_at=time.monotonic() - 0.01)
    assert deadline.expired
    assert deadline.remaining() == 0
    with pytest.raises(DeadlineExceededError, match="context deadline exceeded"):
        deadline.check()


def test_negative_timeout_is_already_elapsed():
    assert Deadline.after(-1).expired


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("TOKEN_SAVE_TIMEOUT_SECONDS", "0.25")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.port == 4000
        assert settings.log_level == "DEBUG"
        assert settings.token_save_timeout_seconds == 0.25
        assert settings.refresh_token_ttl_seconds == 7 * 24 * 3600
    finally:
        get_settings.cache_clear()
