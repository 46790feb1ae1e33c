"""Exceptions raised by the cyfer vault."""


class CyferError(Exception):
    """Base exception for all vault errors."""
    pass


class VaultAlreadyExists(CyferError):
    """Raised when trying to initialize a vault over an existing file."""
    pass


class VaultNotFound(CyferError):
    """Raised when no vault file exists at the requested path."""
    pass


class VaultIOError(CyferError):
    """Raised when the vault file cannot be read or written."""
    pass


class CorruptVault(CyferError):
    """Raised when the persisted vault is not a well-formed vault document."""
    pass


class VaultConflict(CyferError):
    """Raised when the vault file changed on disk after it was read."""
    pass


class InvalidParameters(CyferError):
    """Raised when key derivation cost parameters are out of range."""
    pass


class DerivationFailure(CyferError):
    """Raised when the key derivation function fails internally."""
    pass


class AuthenticationFailure(CyferError):
    """
    Raised when an authenticated ciphertext does not verify.

    A wrong key and a tampered ciphertext produce the same error.
    """
    pass


class IncorrectPassword(AuthenticationFailure):
    """Raised when the master password does not open the vault."""
    pass


class ServiceNotFound(CyferError):
    """Raised when a requested service has no stored secret."""
    pass
