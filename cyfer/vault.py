"""
Core vault operations.

Every operation starts from nothing: the key is derived from the password
and the stored salt, checked against the verifier, used, and wiped before
the call returns. No unlocked state survives between calls.

    vault = init(path, "Tr0ub4dor")
    add_service(vault, path, "Tr0ub4dor", "email", SecretBundle("bob", "p@ss"))
    get_service(read(path), "Tr0ub4dor", "email")
"""

import hmac
import logging
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Optional

from . import crypto
from . import storage
from .exceptions import (
    AuthenticationFailure,
    IncorrectPassword,
    ServiceNotFound,
    VaultAlreadyExists,
)
from .memory import SecretBytes
from .models import DEFAULT_KDF_PARAMS, EncRecord, KdfParams, SecretBundle, Vault
from .storage import PathLike

logger = logging.getLogger("cyfer.vault")

# Plaintext sealed in the verifier record
VERIFIER_PLAINTEXT = b"vault-check"


def init(
    path: PathLike,
    master_password: str,
    params: Optional[KdfParams] = None,
) -> Vault:
    """
    Create a new vault file protected by master_password.

    Args:
        path: Where to create the vault file
        master_password: The master password
        params: Argon2id costs; defaults to DEFAULT_KDF_PARAMS

    Returns:
        The newly written Vault

    Raises:
        VaultAlreadyExists: If a file already exists at path
        InvalidParameters: If params are out of range
    """
    path = Path(path)
    if path.exists():
        raise VaultAlreadyExists(f"Vault already exists at {path}")

    params = params or DEFAULT_KDF_PARAMS
    salt = crypto.generate_salt()

    with crypto.derive_key(master_password, salt, params) as key:
        nonce, ciphertext = crypto.encrypt(key, VERIFIER_PLAINTEXT)

    vault = Vault(
        salt=salt,
        kdf=params,
        verifier=EncRecord(nonce=nonce, ciphertext=ciphertext),
    )

    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    vault.revision = storage.write_vault(vault, path)
    logger.info("Vault initialized at %s", path)
    return vault


def read(path: PathLike) -> Vault:
    """Load the vault at path. See storage.read_vault."""
    return storage.read_vault(path)


def _verify_key(vault: Vault, key: SecretBytes) -> None:
    try:
        with crypto.decrypt(key, vault.verifier.nonce, vault.verifier.ciphertext) as check:
            matches = hmac.compare_digest(check.buffer, VERIFIER_PLAINTEXT)
    except AuthenticationFailure as e:
        raise IncorrectPassword("Incorrect master password") from e
    if not matches:
        raise IncorrectPassword("Incorrect master password")


@contextmanager
def _unlocked(vault: Vault, master_password: str) -> Iterator[SecretBytes]:
    """Derive the vault key, verify it, and wipe it when the block exits."""
    with crypto.derive_key(master_password, vault.salt, vault.kdf) as key:
        try:
            _verify_key(vault, key)
        except IncorrectPassword:
            logger.warning("Master password rejected")
            raise
        yield key


def check_password(vault: Vault, master_password: str) -> None:
    """
    Verify master_password against the vault's verifier record.

    Raises:
        IncorrectPassword: On a wrong password or a damaged verifier
    """
    with _unlocked(vault, master_password):
        pass


def is_correct_password(vault: Vault, master_password: str) -> bool:
    """Return True if master_password opens the vault."""
    try:
        check_password(vault, master_password)
    except IncorrectPassword:
        return False
    return True


def list_services(vault: Vault, master_password: str) -> list[str]:
    """
    List the names of all stored services.

    Raises:
        IncorrectPassword: If the master password is wrong
    """
    check_password(vault, master_password)
    return list(vault.secrets)


def get_service(vault: Vault, master_password: str, service: str) -> SecretBundle:
    """
    Decrypt the bundle stored for service.

    Raises:
        IncorrectPassword: If the master password is wrong
        ServiceNotFound: If nothing is stored under service
        CorruptVault: If the stored record is damaged
    """
    with _unlocked(vault, master_password) as key:
        record = vault.secrets.get(service)
        if record is None:
            raise ServiceNotFound(f"No such service: {service}")

        with crypto.decrypt(key, record.nonce, record.ciphertext) as plaintext:
            bundle = SecretBundle.from_json(plaintext.buffer)

    logger.debug("Read service %r", service)
    return bundle


def add_service(
    vault: Vault,
    path: PathLike,
    master_password: str,
    service: str,
    bundle: SecretBundle,
) -> None:
    """
    Store bundle under service, replacing any previous value, and persist.

    The in-memory vault is updated only after the file has been written.

    Raises:
        ValueError: If service is empty
        IncorrectPassword: If the master password is wrong
        VaultConflict: If the file changed since vault was read
    """
    if not isinstance(service, str) or not service:
        raise ValueError("Service name cannot be empty")

    with _unlocked(vault, master_password) as key:
        with SecretBytes(bundle.to_json()) as plaintext:
            nonce, ciphertext = crypto.encrypt(key, plaintext.buffer)

    secrets = dict(vault.secrets)
    replaced = service in secrets
    secrets[service] = EncRecord(nonce=nonce, ciphertext=ciphertext)

    revision = storage.write_vault(replace(vault, secrets=secrets), path)
    vault.secrets = secrets
    vault.revision = revision
    logger.info("%s service %r", "Updated" if replaced else "Added", service)


def delete_service(
    vault: Vault,
    path: PathLike,
    master_password: str,
    service: str,
) -> None:
    """
    Remove service from the vault and persist.

    Raises:
        IncorrectPassword: If the master password is wrong
        ServiceNotFound: If nothing is stored under service; nothing is written
        VaultConflict: If the file changed since vault was read
    """
    check_password(vault, master_password)
    if service not in vault.secrets:
        raise ServiceNotFound(f"No such service: {service}")

    secrets = {name: record for name, record in vault.secrets.items() if name != service}

    revision = storage.write_vault(replace(vault, secrets=secrets), path)
    vault.secrets = secrets
    vault.revision = revision
    logger.info("Deleted service %r", service)
