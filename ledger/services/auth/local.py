"""
Local Credential Store

Keeps users in memory, optionally mirrored to a JSON file so accounts
survive restarts. Passwords are stored as bcrypt hashes.

Reset requests are only checked and logged; delivering a reset link
is outside the ledger. Session tokens live in memory only, so a
restart logs everyone out.
"""

import json
import secrets
from datetime import date
from pathlib import Path
from typing import Optional

import bcrypt
import structlog
from pydantic import BaseModel, Field, ValidationError

from ledger.config import AuthSettings, get_settings
from ledger.models.auth import AuthSession, Profile
from ledger.services.auth.interface import (
    AuthError,
    CredentialStoreInterface,
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    InvalidPasswordError,
    UnknownEmailError,
)
from ledger.services.storage.json_file import atomic_write_text


# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class StoredUser(BaseModel):
    """A profile plus its bcrypt hash (salt included), as kept by the store."""
    
    profile: Profile
    password_hash: str


class UsersFile(BaseModel):
    """Shape of the JSON file mirroring the store."""
    
    users: list[StoredUser] = Field(default_factory=list)
    remembered_email: Optional[str] = None


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class LocalCredentialStore(CredentialStoreInterface):
    """Credential store for a single local installation."""
    
    def __init__(self, settings: Optional[AuthSettings] = None):
        self._settings = settings or get_settings().auth
        self._path: Optional[Path] = self._settings.users_path
        self._users: dict[str, StoredUser] = {}
        self._sessions: dict[str, str] = {}
        self._remembered_email: Optional[str] = None
        self._logger = structlog.get_logger()
        self._load()
    
    def _load(self) -> None:
        """
        Read the users file, if there is one.
        
        Raises:
            AuthError: If the file cannot be read or decoded
        """
        if self._path is None or not self._path.exists():
            return
        try:
            data = UsersFile.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise AuthError(f"Users file {self._path} is unreadable: {e}")
        
        for user in data.users:
            self._users[user.profile.email] = user
        self._remembered_email = data.remembered_email
    
    def _persist(self) -> None:
        if self._path is None:
            return
        data = UsersFile(
            users=list(self._users.values()),
            remembered_email=self._remembered_email,
        )
        try:
            atomic_write_text(self._path, json.dumps(data.model_dump(mode="json"), indent=2))
        except OSError as e:
            raise AuthError(f"Failed to write users file {self._path}: {e}")
    
    def _hash(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if not encoded or len(encoded) > MAX_PASSWORD_BYTES:
            raise InvalidPasswordError(
                f"Password must be between 1 and {MAX_PASSWORD_BYTES} bytes long."
            )
        salt = bcrypt.gensalt(rounds=self._settings.bcrypt_rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")
    
    @staticmethod
    def _matches(password: str, password_hash: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    
    def _new_session(self, profile: Profile) -> AuthSession:
        token = secrets.token_urlsafe(32)
        self._sessions[token] = profile.email
        return AuthSession(user=profile, token=token)
    
    async def authenticate(
        self,
        email: str,
        password: str,
        remember: bool = False,
    ) -> AuthSession:
        email = _normalize_email(email)
        user = self._users.get(email)
        if user is None or not self._matches(password, user.password_hash):
            self._logger.info("login_failed", email=email)
            raise InvalidCredentialsError("Invalid e-mail or password.")
        
        remembered = email if remember else None
        if remembered != self._remembered_email:
            self._remembered_email = remembered
            self._persist()
        
        self._logger.info("login_succeeded", user_id=user.profile.id)
        return self._new_session(user.profile)
    
    async def register(
        self,
        name: str,
        email: str,
        password: str,
        birth_date: date,
    ) -> AuthSession:
        email = _normalize_email(email)
        if email in self._users:
            raise EmailAlreadyUsedError("This e-mail is already registered.")
        
        profile = Profile(name=name, email=email, birth_date=birth_date)
        self._users[email] = StoredUser(
            profile=profile,
            password_hash=self._hash(password),
        )
        self._persist()
        
        self._logger.info("user_registered", user_id=profile.id)
        return self._new_session(profile)
    
    async def request_password_reset(self, email: str) -> None:
        email = _normalize_email(email)
        if email not in self._users:
            raise UnknownEmailError("E-mail not found.")
        self._logger.info("password_reset_requested", user_id=self._users[email].profile.id)
    
    async def current_user(self, token: str) -> Optional[Profile]:
        email = self._sessions.get(token)
        if email is None:
            return None
        return self._users[email].profile
    
    async def logout(self, token: str) -> None:
        email = self._sessions.pop(token, None)
        if email is not None:
            self._logger.info("logout", user_id=self._users[email].profile.id)
    
    def remembered_email(self) -> Optional[str]:
        return self._remembered_email
