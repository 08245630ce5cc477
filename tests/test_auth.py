"""Tests for the local credential store."""

import json
from datetime import date

import pytest

from ledger.config import AuthSettings
from ledger.services.auth import (
    AuthError,
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    InvalidPasswordError,
    LocalCredentialStore,
    UnknownEmailError,
)


BIRTH = date(1990, 5, 17)


def _store(users_path=None) -> LocalCredentialStore:
    return LocalCredentialStore(AuthSettings(users_path=users_path, bcrypt_rounds=4))


class TestLocalCredentialStore:
    """Tests for register, login and reset."""
    
    @pytest.mark.asyncio
    async def test_register_returns_session(self):
        session = await _store().register("Ana", "Ana@Example.com", "s3cret", BIRTH)
        
        assert session.user.name == "Ana"
        assert session.user.email == "ana@example.com"
        assert session.token
    
    @pytest.mark.asyncio
    async def test_login_after_register(self):
        store = _store()
        registered = await store.register("Ana", "ana@example.com", "s3cret", BIRTH)
        session = await store.authenticate(" ANA@example.com ", "s3cret")
        
        assert session.user.id == registered.user.id
        assert session.token != registered.token
    
    @pytest.mark.asyncio
    async def test_wrong_password_rejected(self):
        store = _store()
        await store.register("Ana", "ana@example.com", "s3cret", BIRTH)
        
        with pytest.raises(InvalidCredentialsError, match="Invalid e-mail or password"):
            await store.authenticate("ana@example.com", "nope")
    
    @pytest.mark.asyncio
    async def test_unknown_user_rejected_with_same_message(self):
        with pytest.raises(InvalidCredentialsError, match="Invalid e-mail or password"):
            await _store().authenticate("ghost@example.com", "whatever")
    
    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self):
        store = _store()
        await store.register("Ana", "ana@example.com", "s3cret", BIRTH)
        
        with pytest.raises(EmailAlreadyUsedError):
            await store.register("Other", "ANA@example.com", "x", BIRTH)
    
    @pytest.mark.asyncio
    async def test_reset_for_unknown_email(self):
        with pytest.raises(UnknownEmailError, match="E-mail not found"):
            await _store().request_password_reset("ghost@example.com")
    
    @pytest.mark.asyncio
    async def test_reset_for_known_email(self):
        store = _store()
        await store.register("Ana", "ana@example.com", "s3cret", BIRTH)
        assert await store.request_password_reset("ana@example.com") is None
    
    @pytest.mark.asyncio
    async def test_users_survive_restart(self, tmp_path):
        path = tmp_path / "auth" / "users.json"
        await _store(path).register("Ana", "ana@example.com", "s3cret", BIRTH)
        
        assert "s3cret" not in path.read_text(encoding="utf-8")
        session = await _store(path).authenticate("ana@example.com", "s3cret")
        assert session.user.birth_date == BIRTH
    
    @pytest.mark.asyncio
    async def test_password_stored_as_bcrypt_hash(self, tmp_path):
        path = tmp_path / "users.json"
        await _store(path).register("Ana", "ana@example.com", "s3cret", BIRTH)
        
        record = json.loads(path.read_text(encoding="utf-8"))["users"][0]
        assert record["password_hash"].startswith("$2b$04$")
        assert "salt" not in record
        assert [p.name for p in tmp_path.iterdir()] == ["users.json"]
    
    @pytest.mark.asyncio
    async def test_unusable_passwords_rejected(self):
        store = _store()
        with pytest.raises(InvalidPasswordError):
            await store.register("Ana", "ana@example.com", "", BIRTH)
        with pytest.raises(InvalidPasswordError):
            await store.register("Ana", "ana@example.com", "x" * 73, BIRTH)
    
    @pytest.mark.asyncio
    async def test_overlong_login_password_is_just_wrong(self):
        store = _store()
        await store.register("Ana", "ana@example.com", "s3cret", BIRTH)
        with pytest.raises(InvalidCredentialsError):
            await store.authenticate("ana@example.com", "s3cret" + "x" * 80)
    
    def test_corrupt_users_file_raises_auth_error(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(AuthError, match="unreadable"):
            _store(path)


class TestSessionsAndRememberedEmail:
    """Tests for current user, logout and the remembered login e-mail."""
    
    @pytest.mark.asyncio
    async def test_current_user_until_logout(self):
        store = _store()
        session = await store.register("Ana", "ana@example.com", "s3cret", BIRTH)
        
        assert (await store.current_user(session.token)).id == session.user.id
        await store.logout(session.token)
        assert await store.current_user(session.token) is None
    
    @pytest.mark.asyncio
    async def test_logout_with_unknown_token_is_ignored(self):
        store = _store()
        await store.logout("nobody")
        assert await store.current_user("nobody") is None
    
    @pytest.mark.asyncio
    async def test_logout_ends_only_that_session(self):
        store = _store()
        first = await store.register("Ana", "ana@example.com", "s3cret", BIRTH)
        second = await store.authenticate("ana@example.com", "s3cret")
        
        await store.logout(first.token)
        
        assert await store.current_user(first.token) is None
        assert (await store.current_user(second.token)).email == "ana@example.com"
    
    @pytest.mark.asyncio
    async def test_remember_email_survives_restart(self, tmp_path):
        path = tmp_path / "users.json"
        store = _store(path)
        await store.register("Ana", "Ana@Example.com", "s3cret", BIRTH)
        assert store.remembered_email() is None
        
        await store.authenticate("ana@example.com", "s3cret", remember=True)
        assert _store(path).remembered_email() == "ana@example.com"
        
        await store.authenticate("ana@example.com", "s3cret")
        assert _store(path).remembered_email() is None
