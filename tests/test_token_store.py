"""Token persistence and the local JWT expiry pre-check."""
from __future__ import annotations

import json
import logging
import time

import pytest

from social_client.security import (
    FileTokenStore,
    MemoryTokenStore,
    is_token_expired,
    is_token_valid,
    token_expiry,
)

from conftest import make_token


def test_file_store_round_trip(tmp_path):
    store = FileTokenStore(tmp_path / "nested" / "token.json")
    assert store.get_token() is None

    store.set_token("abc")

    assert store.get_token() == "abc"
    assert json.loads(store.path.read_text(encoding="utf-8")) == {"token": "abc"}


def test_file_store_remove_is_idempotent(tmp_path):
    store = FileTokenStore(tmp_path / "token.json")
    store.set_token("abc")

    store.remove_token()
    store.remove_token()

    assert store.get_token() is None
    assert not store.path.exists()


def test_file_store_tolerates_corrupt_file(tmp_path, caplog):
    path = tmp_path / "token.json"
    path.write_text("{not json", encoding="utf-8")
    caplog.set_level(logging.WARNING)

    assert FileTokenStore(path).get_token() is None
    assert "Token store unreadable" in caplog.text


def test_file_store_rejects_blank_token(tmp_path):
    with pytest.raises(ValueError):
        FileTokenStore(tmp_path / "token.json").set_token("   ")


def test_memory_store():
    store = MemoryTokenStore("seed")
    assert store.get_token() == "seed"
    store.remove_token()
    assert store.get_token() is None


def test_expiry_is_read_from_claims():
    token = make_token(expires_in=120)
    expiry = token_expiry(token)
    assert expiry is not None
    assert expiry == pytest.approx(time.time() + 120, abs=5)


def test_valid_and_expired_tokens():
    fresh = make_token(expires_in=600)
    stale = make_token(expires_in=-600)

    assert is_token_valid(fresh)
    assert not is_token_expired(fresh)
    assert not is_token_valid(stale)
    assert is_token_expired(stale)


@pytest.mark.parametrize("token", [None, "", "opaque-token", "a.b.c"])
def test_undecodable_tokens_are_neither_valid_nor_expired(token):
    assert token_expiry(token) is None
    assert is_token_valid(token) is False
    assert is_token_expired(token) is False


def test_now_can_be_injected():
    token = make_token(expires_in=100)
    expiry = token_expiry(token)
    assert is_token_valid(token, now=expiry - 1)
    assert is_token_expired(token, now=expiry)
