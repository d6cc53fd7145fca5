"""
Tests for password hashing and verification.
"""

import pytest

from twofa_core.config import AuthConfig


PASSWORDS = ["Secr3t!", "", "pässwörd-🔐", "   padded   ", "x" * 200]


class TestArgon2:
    """Default Argon2id scheme."""

    @pytest.mark.parametrize("plaintext", PASSWORDS)
    def test_round_trip(self, config, plaintext):
        """A hash verifies against its own plaintext."""
        from twofa_core.password import hash_password_sync, verify_password_sync

        password_hash = hash_password_sync(plaintext, config)

        assert password_hash.startswith("$argon2id$")
        assert password_hash != plaintext
        assert verify_password_sync(plaintext, password_hash, config) is True

    @pytest.mark.parametrize("plaintext,wrong", [
        ("Secr3t!", "secr3t!"),
        ("Secr3t!", ""),
        ("", " "),
        ("pässwörd", "passwort"),
        ("Secr3t!", "Secr3t! "),
    ])
    def test_wrong_password_rejected(self, config, plaintext, wrong):
        """Any different plaintext fails, including empty and unicode."""
        from twofa_core.password import hash_password_sync, verify_password_sync

        password_hash = hash_password_sync(plaintext, config)

        assert verify_password_sync(wrong, password_hash, config) is False

    def test_salt_is_fresh_per_call(self, config):
        """Hashing the same password twice gives different hashes."""
        from twofa_core.password import hash_password_sync

        assert hash_password_sync("same", config) != hash_password_sync("same", config)

    @pytest.mark.asyncio
    async def test_async_round_trip(self, config):
        """Async wrappers run the same hashing off the event loop."""
        from twofa_core.password import hash_password, verify_password

        password_hash = await hash_password("Secr3t!", config)

        assert await verify_password("Secr3t!", password_hash, config) is True
        assert await verify_password("wrong", password_hash, config) is False


class TestBcrypt:
    """bcrypt as configured scheme and legacy format."""

    def test_bcrypt_scheme(self, config):
        """bcrypt hashes verify and are recognised by prefix."""
        from twofa_core.password import detect_scheme, hash_password_sync, verify_password_sync

        bcrypt_config = AuthConfig(password_scheme="bcrypt", bcrypt_rounds=4)
        password_hash = hash_password_sync("Secr3t!", bcrypt_config)

        assert detect_scheme(password_hash) == "bcrypt"
        assert verify_password_sync("Secr3t!", password_hash, config) is True
        assert verify_password_sync("Secr3t?", password_hash, config) is False

    def test_legacy_bcrypt_hash_verifies_under_argon2_config(self, config):
        """Hashes from an older bcrypt deployment still verify."""
        import bcrypt
        from twofa_core.password import verify_password_sync

        legacy = bcrypt.hashpw(b"Secr3t!", bcrypt.gensalt(rounds=4)).decode()

        assert verify_password_sync("Secr3t!", legacy, config) is True

    def test_password_at_limit_round_trips(self):
        """Exactly 72 bytes is the longest bcrypt input accepted."""
        from twofa_core.password import hash_password_sync, verify_password_sync

        bcrypt_config = AuthConfig(password_scheme="bcrypt", bcrypt_rounds=4)
        password = "a" * 71 + "Z"
        password_hash = hash_password_sync(password, bcrypt_config)

        assert verify_password_sync(password, password_hash, bcrypt_config) is True
        assert verify_password_sync("a" * 71 + "Y", password_hash, bcrypt_config) is False

    def test_password_over_limit_refused(self):
        """bcrypt never truncates: longer inputs cannot be hashed."""
        from twofa_core.password import hash_password_sync

        bcrypt_config = AuthConfig(password_scheme="bcrypt", bcrypt_rounds=4)

        with pytest.raises(ValueError):
            hash_password_sync("a" * 72 + "RIGHT", bcrypt_config)
        with pytest.raises(ValueError):
            # 36 two-byte characters plus one more byte.
            hash_password_sync("é" * 36 + "x", bcrypt_config)

    def test_shared_prefix_does_not_verify(self):
        """Passwords agreeing on the first 72 bytes are still distinct."""
        import bcrypt
        from twofa_core.password import verify_password_sync

        bcrypt_config = AuthConfig(password_scheme="bcrypt", bcrypt_rounds=4)
        prefix = "a" * 72
        password_hash = bcrypt.hashpw(prefix.encode(), bcrypt.gensalt(rounds=4)).decode()

        assert verify_password_sync(prefix, password_hash, bcrypt_config) is True
        assert verify_password_sync(prefix + "WRONG", password_hash, bcrypt_config) is False


class TestMalformedHashes:
    """verify never raises."""

    @pytest.mark.parametrize("bad_hash", [
        "",
        "plaintext",
        "$argon2id$garbage",
        "$2b$12$short",
        "$unknown$scheme",
    ])
    def test_malformed_hash_is_false(self, config, bad_hash):
        from twofa_core.password import verify_password_sync

        assert verify_password_sync("anything", bad_hash, config) is False

    @pytest.mark.asyncio
    async def test_async_malformed_hash_is_false(self, config):
        from twofa_core.password import verify_password

        assert await verify_password("anything", "$argon2id$v=19$broken", config) is False
        assert await verify_password("anything", None, config) is False

    def test_detect_scheme(self):
        from twofa_core.password import detect_scheme

        assert detect_scheme("$argon2id$v=19$m=1024,t=1,p=1$abc$def") == "argon2"
        assert detect_scheme("$2y$10$abcdefghijklmnopqrstuv") == "bcrypt"
        assert detect_scheme("md5:abc") is None
        assert detect_scheme(None) is None
