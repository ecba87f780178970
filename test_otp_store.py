"""
Tests for the bounded OTP store
"""

import pytest

from app.services.otp_store import OTPStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return OTPStore(ttl_seconds=300, max_entries=3, clock=clock)


def test_generated_codes_are_six_digits(store):
    code = store.issue("player@example.com")
    assert len(code) == 6 and code.isdigit()


def test_code_verifies_once(store):
    store.issue("player@example.com", "123456")
    assert store.consume("Player@Example.com ", "123456") is True
    assert store.consume("player@example.com", "123456") is False
    assert len(store) == 0


def test_wrong_code_keeps_entry(store):
    store.issue("player@example.com", "123456")
    assert store.consume("player@example.com", "654321") is False
    assert store.consume("player@example.com", "123456") is True


def test_reissue_replaces_code(store):
    store.issue("player@example.com", "111111")
    store.issue("player@example.com", "222222")
    assert len(store) == 1
    assert store.consume("player@example.com", "111111") is False
    assert store.consume("player@example.com", "222222") is True


def test_expired_code_never_verifies(store, clock):
    store.issue("player@example.com", "123456")
    clock.advance(301)
    assert store.consume("player@example.com", "123456") is False
    assert len(store) == 0


def test_sweep_removes_only_expired(store, clock):
    store.issue("old@example.com", "111111")
    clock.advance(200)
    store.issue("new@example.com", "222222")
    clock.advance(150)

    assert store.sweep_expired() == 1
    assert len(store) == 1
    assert store.consume("new@example.com", "222222") is True


def test_full_store_evicts_oldest(store):
    for i in range(4):
        store.issue(f"player{i}@example.com", "123456")

    assert len(store) == 3
    assert store.consume("player0@example.com", "123456") is False
    assert store.consume("player3@example.com", "123456") is True
