"""Single-file password vault with Argon2id key derivation and AES-256-GCM records."""

from .exceptions import (
    AuthenticationFailure,
    CorruptVault,
    CyferError,
    DerivationFailure,
    IncorrectPassword,
    InvalidParameters,
    ServiceNotFound,
    VaultAlreadyExists,
    VaultConflict,
    VaultIOError,
    VaultNotFound,
)
from .manager import VaultManager
from .models import EncRecord, KdfParams, SecretBundle, Vault
from .storage import vault_exists
from .vault import (
    add_service,
    check_password,
    delete_service,
    get_service,
    init,
    is_correct_password,
    list_services,
    read,
)

__version__ = "0.1.0"
__all__ = [
    "VaultManager",
    "Vault",
    "KdfParams",
    "EncRecord",
    "SecretBundle",
    "init",
    "read",
    "vault_exists",
    "check_password",
    "is_correct_password",
    "list_services",
    "get_service",
    "add_service",
    "delete_service",
    "CyferError",
    "VaultAlreadyExists",
    "VaultNotFound",
    "VaultIOError",
    "CorruptVault",
    "VaultConflict",
    "InvalidParameters",
    "DerivationFailure",
    "AuthenticationFailure",
    "IncorrectPassword",
    "ServiceNotFound",
]
