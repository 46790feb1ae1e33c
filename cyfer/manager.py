"""Path-bound facade over the core vault operations."""

from pathlib import Path
from typing import Optional

from . import storage
from . import vault as ops
from .models import KdfParams, SecretBundle
from .storage import PathLike


class VaultManager:
    """
    Vault operations bound to one vault file.

    The manager holds only the path. Each call reloads the vault from disk
    and derives the key again, so there is no unlocked state to clear and
    no stale copy of the vault between calls.
    """

    def __init__(self, vault_path: PathLike):
        """
        Initialize the manager.

        Args:
            vault_path: Path to the vault JSON file
        """
        self.vault_path = Path(vault_path)

    @property
    def exists(self) -> bool:
        """Check if a vault file exists at the configured path."""
        return storage.vault_exists(self.vault_path)

    def init(self, master_password: str, params: Optional[KdfParams] = None) -> None:
        """
        Create the vault (first-time setup).

        Raises:
            VaultAlreadyExists: If the vault file already exists
        """
        ops.init(self.vault_path, master_password, params)

    def check_password(self, master_password: str) -> None:
        """
        Raises:
            IncorrectPassword: If the master password is wrong
        """
        ops.check_password(ops.read(self.vault_path), master_password)

    def is_correct_password(self, master_password: str) -> bool:
        return ops.is_correct_password(ops.read(self.vault_path), master_password)

    def list_services(self, master_password: str) -> list[str]:
        """
        List all stored service names.

        Raises:
            IncorrectPassword: If the master password is wrong
        """
        return ops.list_services(ops.read(self.vault_path), master_password)

    def get(self, master_password: str, service: str) -> SecretBundle:
        """
        Retrieve the credential for a service.

        Raises:
            IncorrectPassword: If the master password is wrong
            ServiceNotFound: If the service is not stored
        """
        return ops.get_service(ops.read(self.vault_path), master_password, service)

    def add(self, master_password: str, service: str, bundle: SecretBundle) -> None:
        """
        Add or replace the credential for a service.

        Raises:
            IncorrectPassword: If the master password is wrong
            ValueError: If service is empty
        """
        current = ops.read(self.vault_path)
        ops.add_service(current, self.vault_path, master_password, service, bundle)

    def delete(self, master_password: str, service: str) -> None:
        """
        Delete the credential for a service.

        Raises:
            IncorrectPassword: If the master password is wrong
            ServiceNotFound: If the service is not stored
        """
        current = ops.read(self.vault_path)
        ops.delete_service(current, self.vault_path, master_password, service)
