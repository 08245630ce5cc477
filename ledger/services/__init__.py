"""Services package."""

from ledger.services.auth import (
    AuthError,
    CredentialStoreInterface,
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    LocalCredentialStore,
    UnknownEmailError,
)
from ledger.services.storage import (
    FinanceStateStorageInterface,
    GoogleSheetsClient,
    GoogleSheetsStateStorage,
    InMemoryStateStorage,
    JsonFileStateStorage,
    SnapshotFormatError,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Credential store
    "AuthError",
    "CredentialStoreInterface",
    "EmailAlreadyUsedError",
    "InvalidCredentialsError",
    "LocalCredentialStore",
    "UnknownEmailError",
    # Storage services
    "FinanceStateStorageInterface",
    "GoogleSheetsClient",
    "GoogleSheetsStateStorage",
    "InMemoryStateStorage",
    "JsonFileStateStorage",
    "SnapshotFormatError",
    "StorageConnectionError",
    "StorageError",
]
