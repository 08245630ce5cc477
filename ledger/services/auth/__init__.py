"""Credential store package."""

from ledger.services.auth.interface import (
    AuthError,
    CredentialStoreInterface,
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    InvalidPasswordError,
    UnknownEmailError,
)
from ledger.services.auth.local import LocalCredentialStore

__all__ = [
    "AuthError",
    "CredentialStoreInterface",
    "EmailAlreadyUsedError",
    "InvalidCredentialsError",
    "InvalidPasswordError",
    "LocalCredentialStore",
    "UnknownEmailError",
]
