import hashlib
import hmac

import pytest

from keyedhash import HASHES, HMAC, KeyedHash


class TestHMAC:
    @pytest.mark.parametrize("name, size", [("sha1", 20), ("sha256", 32), ("sha512", 64)])
    def test_digest_size(self, name, size):
        prf = HMAC(HASHES[name])
        assert prf.digest_size == size
        assert len(prf.init(b"key").digest(b"msg")) == size

    def test_matches_hmac_module(self):
        prf = HMAC(hashlib.sha256)
        expected = hmac.new(b"key", b"hello world", hashlib.sha256).digest()
        assert prf.init(b"key").update(b"hello ").digest(b"world") == expected

    def test_chaining_returns_self(self):
        prf = HMAC(hashlib.sha1)
        assert prf.init(b"key") is prf
        assert prf.update(b"data") is prf

    def test_digest_keeps_key(self):
        """After digest() the message is cleared but the key survives."""
        prf = HMAC(hashlib.sha256).init(b"key")
        first = prf.digest(b"message")
        second = prf.digest(b"message")
        assert first == second == hmac.new(b"key", b"message", hashlib.sha256).digest()

    def test_init_drops_pending_message(self):
        prf = HMAC(hashlib.sha256).init(b"key").update(b"stale")
        assert prf.init(b"other").digest() == hmac.new(b"other", b"", hashlib.sha256).digest()

    def test_clear_forgets_key(self):
        prf = HMAC(hashlib.sha256).init(b"key")
        prf.clear()
        with pytest.raises(ValueError, match="before init"):
            prf.digest(b"msg")
        assert prf.init(b"key").digest(b"msg") == hmac.new(b"key", b"msg", hashlib.sha256).digest()

    @pytest.mark.parametrize("call", ["update", "digest"])
    def test_use_before_init(self, call):
        with pytest.raises(ValueError, match="before init"):
            getattr(HMAC(hashlib.sha256), call)(b"msg")

    def test_is_keyed_hash(self):
        assert isinstance(HMAC(hashlib.sha512), KeyedHash)
        assert repr(HMAC(hashlib.sha512)) == "<hmac-sha512 digest_size=64>"

    def test_keyed_hash_is_abstract(self):
        with pytest.raises(TypeError):
            KeyedHash()


def test_hashes_is_closed():
    assert sorted(HASHES) == ["sha1", "sha256", "sha512"]
