"""
Credential Store Interface

Authentication is an external collaborator of the ledger. The ledger
only needs a definite success (a session) or a definite failure (one
of the errors below) before it proceeds.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from ledger.models.auth import AuthSession, Profile


class CredentialStoreInterface(ABC):
    """Abstract interface for user authentication."""
    
    @abstractmethod
    async def authenticate(
        self,
        email: str,
        password: str,
        remember: bool = False,
    ) -> AuthSession:
        """
        Log a user in.
        
        With ``remember`` the e-mail is kept for the next login form;
        without it any remembered e-mail is forgotten.
        
        Raises:
            InvalidCredentialsError: If no user matches email and password
        """
        pass
    
    @abstractmethod
    async def register(
        self,
        name: str,
        email: str,
        password: str,
        birth_date: date,
    ) -> AuthSession:
        """
        Create an account and log it in.
        
        Raises:
            EmailAlreadyUsedError: If the email is already registered
            InvalidPasswordError: If the password cannot be hashed
        """
        pass
    
    @abstractmethod
    async def request_password_reset(self, email: str) -> None:
        """
        Start a password reset.
        
        Raises:
            UnknownEmailError: If the email is not registered
        """
        pass
    
    @abstractmethod
    async def current_user(self, token: str) -> Optional[Profile]:
        """Profile behind a session token, or None once logged out."""
        pass
    
    @abstractmethod
    async def logout(self, token: str) -> None:
        """End a session. Unknown tokens are ignored."""
        pass
    
    @abstractmethod
    def remembered_email(self) -> Optional[str]:
        """E-mail saved by the last login that asked to be remembered."""
        pass


class AuthError(Exception):
    """Base exception for credential store operations."""
    pass


class InvalidCredentialsError(AuthError):
    """E-mail and password do not match any user."""
    pass


class EmailAlreadyUsedError(AuthError):
    """The e-mail is already registered."""
    pass


class UnknownEmailError(AuthError):
    """No user is registered under the e-mail."""
    pass


class InvalidPasswordError(AuthError):
    """The password cannot be stored (empty or over 72 bytes)."""
    pass
