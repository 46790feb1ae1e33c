"""Vault file persistence: parsing, validation and atomic replacement."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .exceptions import CorruptVault, VaultConflict, VaultIOError, VaultNotFound
from .models import Vault

logger = logging.getLogger("cyfer.storage")

PathLike = Union[str, os.PathLike]

FILE_MODE = 0o600


def vault_exists(path: PathLike) -> bool:
    """Check whether a vault file is present at path."""
    return Path(path).is_file()


def _load_document(path: Path) -> dict:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise VaultNotFound(f"No vault found at {path}") from e
    except OSError as e:
        raise VaultIOError(f"Could not read vault at {path}: {e}") from e

    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptVault(f"Vault at {path} is not valid JSON") from e


def read_vault(path: PathLike) -> Vault:
    """
    Load and validate the vault stored at path.

    Args:
        path: Location of the vault file

    Returns:
        The parsed Vault

    Raises:
        VaultNotFound: If the file does not exist
        VaultIOError: If the file cannot be read
        CorruptVault: If the content is not a well-formed vault
    """
    path = Path(path)
    vault = Vault.from_dict(_load_document(path))
    logger.debug(
        "Read vault %s (revision %d, %d service(s))",
        path, vault.revision, len(vault.secrets),
    )
    return vault


def _current_revision(path: Path) -> int:
    document = _load_document(path)
    if not isinstance(document, dict):
        raise CorruptVault(f"Vault at {path} is not a JSON object")
    revision = document.get("revision", 0)
    if not isinstance(revision, int) or isinstance(revision, bool):
        raise CorruptVault(f"Vault at {path} has an invalid revision")
    return revision


def _fsync_directory(directory: Path) -> None:
    # Directories cannot be opened for fsync on Windows
    if not hasattr(os, "O_DIRECTORY"):
        return
    fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write(path: PathLike, data: bytes) -> None:
    """
    Replace the file at path with data, all or nothing.

    The bytes go to a temporary file in the same directory, are flushed to
    disk, and the temporary file is then renamed over the target. Readers
    see either the old file or the new one, never a partial write.
    Syncing the directory after the rename is best effort.

    Raises:
        VaultIOError: If the file could not be replaced; the previous file
            is left intact
    """
    path = Path(path)
    directory = path.parent
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_path, FILE_MODE)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise VaultIOError(f"Could not write vault to {path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)

    # The new file is in place; a failed directory sync only weakens durability
    try:
        _fsync_directory(directory)
    except OSError as e:
        logger.warning("Could not sync directory %s after writing vault: %s", directory, e)


def write_vault(vault: Vault, path: PathLike) -> int:
    """
    Persist the whole vault to path.

    The vault must have been read at the revision currently on disk;
    the stored revision is incremented by one.

    Args:
        vault: The vault to persist
        path: Location of the vault file

    Returns:
        The revision that was written

    Raises:
        VaultConflict: If the file on disk has moved past vault.revision
        VaultIOError: If the file cannot be written
    """
    path = Path(path)

    if path.exists():
        on_disk = _current_revision(path)
        if on_disk != vault.revision:
            logger.warning(
                "Refusing to write %s: read at revision %d, disk is at %d",
                path, vault.revision, on_disk,
            )
            raise VaultConflict(
                f"Vault at {path} was modified by another writer "
                f"(expected revision {vault.revision}, found {on_disk})"
            )

    document = vault.to_dict()
    document["revision"] = vault.revision + 1
    atomic_write(path, json.dumps(document, indent=2).encode('utf-8'))

    logger.debug("Wrote vault %s (revision %d)", path, document["revision"])
    return document["revision"]
